"""Geographic value types: points, bounding boxes and polygonal shapes.

Coordinates inside rings follow GeoJSON order, (lng, lat).  Everything here
is immutable; transforms build new instances instead of editing old ones.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Union

from .errors import EmptyGeometryError, UnsupportedGeometryError

Coord = tuple[float, float]          # (lng, lat)
Ring = tuple[Coord, ...]


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned lat/lng box.  Not validated: an inverted box is kept as is."""

    south_west: LatLng
    north_east: LatLng

    @property
    def center(self) -> LatLng:
        return LatLng(
            lat=(self.south_west.lat + self.north_east.lat) / 2.0,
            lng=(self.south_west.lng + self.north_east.lng) / 2.0,
        )

    @property
    def lat_span(self) -> float:
        return self.north_east.lat - self.south_west.lat

    @classmethod
    def from_edges(cls, south: float, west: float, north: float, east: float) -> "Bounds":
        return cls(LatLng(south, west), LatLng(north, east))


def _ring(coords: Iterable) -> Ring:
    return tuple((float(c[0]), float(c[1])) for c in coords)


@dataclass(frozen=True)
class Polygon:
    """Outer ring first, holes after it."""

    rings: tuple[Ring, ...]

    @classmethod
    def from_coords(cls, coords: Iterable) -> "Polygon":
        return cls(tuple(_ring(r) for r in coords))

    def coordinates(self) -> list[list[list[float]]]:
        return [[list(c) for c in ring] for ring in self.rings]


@dataclass(frozen=True)
class MultiPolygon:
    polygons: tuple[Polygon, ...]

    @classmethod
    def from_coords(cls, coords: Iterable) -> "MultiPolygon":
        return cls(tuple(Polygon.from_coords(p) for p in coords))

    def coordinates(self) -> list[list[list[list[float]]]]:
        return [p.coordinates() for p in self.polygons]


Geometry = Union[Polygon, MultiPolygon]


def polygons_of(geometry: Geometry) -> tuple[Polygon, ...]:
    if isinstance(geometry, Polygon):
        return (geometry,)
    if isinstance(geometry, MultiPolygon):
        return geometry.polygons
    raise UnsupportedGeometryError(
        f"expected Polygon or MultiPolygon, got {type(geometry).__name__}")


def iter_coords(geometry: Geometry) -> Iterator[Coord]:
    """Yield every vertex of every ring, holes included."""
    for polygon in polygons_of(geometry):
        for ring in polygon.rings:
            yield from ring


def geometry_bounds(geometry: Geometry) -> Bounds:
    """Return the min/max lng/lat envelope of all coordinates."""
    min_lng = min_lat = float("inf")
    max_lng = max_lat = float("-inf")
    count = 0
    for lng, lat in iter_coords(geometry):
        min_lng = min(min_lng, lng)
        max_lng = max(max_lng, lng)
        min_lat = min(min_lat, lat)
        max_lat = max(max_lat, lat)
        count += 1
    if count == 0:
        raise EmptyGeometryError("geometry has no coordinates")
    return Bounds.from_edges(min_lat, min_lng, max_lat, max_lng)
