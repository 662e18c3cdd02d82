"""Screen pixel <-> lat/lng conversion for a slippy-map viewport.

Uses the standard Web Mercator tile math (256 px tiles, 2**zoom tiles per
side).  This is what the browser map widget does when it turns a pointer
position into a geographic position.
"""

import math
from dataclasses import dataclass

from .errors import ConversionFailure
from .geometry import LatLng

TILE_SIZE = 256
MERCATOR_MAX_LAT = 85.05112878  # top/bottom edge of the square Mercator world
MAX_ZOOM = 30


def _world_size(zoom: float, tile_size: int) -> float:
    try:
        return tile_size * 2.0 ** zoom
    except OverflowError as exc:
        raise ConversionFailure(f"zoom {zoom} is too large to project") from exc


def lat_lng_to_world_pixel(lat: float, lng: float, zoom: float,
                           tile_size: int = TILE_SIZE) -> tuple[float, float]:
    """Project lat/lng onto the global pixel plane at `zoom`."""
    size = _world_size(zoom, tile_size)
    lat = max(-MERCATOR_MAX_LAT, min(MERCATOR_MAX_LAT, lat))
    lat_rad = math.radians(lat)
    x = (lng + 180.0) / 360.0 * size
    y = (1.0 - math.log(math.tan(lat_rad) + 1.0 / math.cos(lat_rad)) / math.pi) / 2.0 * size
    return x, y


def world_pixel_to_lat_lng(x: float, y: float, zoom: float,
                           tile_size: int = TILE_SIZE) -> LatLng:
    size = _world_size(zoom, tile_size)
    if not 0.0 <= y <= size:
        raise ConversionFailure(f"pixel row {y:.1f} is outside the Mercator world (0..{size:.0f})")
    lng = x / size * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1 - 2 * y / size))))
    return LatLng(lat=lat, lng=lng)


@dataclass(frozen=True)
class MapViewport:
    """A map view of `width` x `height` pixels centered on `center`."""

    center: LatLng
    zoom: float
    width: int
    height: int
    tile_size: int = TILE_SIZE

    def _origin(self) -> tuple[float, float]:
        cx, cy = lat_lng_to_world_pixel(self.center.lat, self.center.lng, self.zoom, self.tile_size)
        return cx - self.width / 2.0, cy - self.height / 2.0

    def container_point_to_latlng(self, x: float, y: float) -> LatLng:
        """Convert a point in the map container (px from top-left) to lat/lng."""
        ox, oy = self._origin()
        return world_pixel_to_lat_lng(ox + x, oy + y, self.zoom, self.tile_size)

    def latlng_to_container_point(self, latlng: LatLng) -> tuple[float, float]:
        ox, oy = self._origin()
        wx, wy = lat_lng_to_world_pixel(latlng.lat, latlng.lng, self.zoom, self.tile_size)
        return wx - ox, wy - oy

    @classmethod
    def from_dict(cls, data: dict) -> "MapViewport":
        zoom = float(data["zoom"])
        if not 0 <= zoom <= MAX_ZOOM:
            raise ValueError(f"zoom must be within [0, {MAX_ZOOM}], got {zoom}")
        lat, lng = float(data["lat"]), float(data["lng"])
        if not (math.isfinite(lat) and math.isfinite(lng)):
            raise ValueError(f"viewport center must be finite, got ({lat}, {lng})")
        return cls(
            center=LatLng(lat, lng),
            zoom=zoom,
            width=int(data["width"]),
            height=int(data["height"]),
        )
