"""Apply a gradient ProjectionTransform to every vertex of a shape."""

from .config import DEFAULT_SMOOTHING
from .errors import UnsupportedGeometryError
from .geometry import Coord, Geometry, LatLng, MultiPolygon, Polygon, Ring
from .projection import ProjectionTransform


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def interpolation_factor(lat: float, transform: ProjectionTransform) -> float:
    """0.0 at the top reference latitude, 1.0 at the bottom one."""
    top, bottom = transform.top_latitude, transform.bottom_latitude
    lat_range = abs(top - bottom)
    if lat_range == 0:
        return 0.0
    clamped = max(min(top, bottom), min(lat, max(top, bottom)))
    return abs(clamped - top) / lat_range


def smooth(scale: float, smoothing: float) -> float:
    """Pull `scale` toward 1.0 so neighbouring vertices don't seam."""
    return 1.0 + (scale - 1.0) * smoothing


def transform_coord(coord: Coord, original_center: LatLng,
                    transform: ProjectionTransform,
                    smoothing: float = DEFAULT_SMOOTHING) -> Coord:
    lng, lat = coord
    rel_lng = lng - original_center.lng
    rel_lat = lat - original_center.lat

    f = interpolation_factor(transform.center_lat + rel_lat, transform)
    h = smooth(lerp(transform.top_horizontal_scale, transform.bottom_horizontal_scale, f), smoothing)
    v = smooth(lerp(transform.top_vertical_scale, transform.bottom_vertical_scale, f), smoothing)

    return (rel_lng * h + transform.center_lng, rel_lat * v + transform.center_lat)


def _transform_ring(ring: Ring, original_center, transform, smoothing) -> Ring:
    return tuple(transform_coord(c, original_center, transform, smoothing) for c in ring)


def _transform_polygon(polygon: Polygon, original_center, transform, smoothing) -> Polygon:
    return Polygon(tuple(
        _transform_ring(r, original_center, transform, smoothing) for r in polygon.rings))


def transform_geometry(geometry: Geometry, original_center: LatLng,
                       transform: ProjectionTransform,
                       smoothing: float = DEFAULT_SMOOTHING) -> Geometry:
    """Return a geometry of the same shape with every coordinate moved and scaled.

    Ring order, hole membership and vertex order are kept as they are.
    """
    if isinstance(geometry, Polygon):
        return _transform_polygon(geometry, original_center, transform, smoothing)
    if isinstance(geometry, MultiPolygon):
        return MultiPolygon(tuple(
            _transform_polygon(p, original_center, transform, smoothing)
            for p in geometry.polygons))
    raise UnsupportedGeometryError(
        f"cannot transform {type(geometry).__name__}; expected Polygon or MultiPolygon")
