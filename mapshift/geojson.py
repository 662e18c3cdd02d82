"""GeoJSON / shapely interop for the polygon types."""

from typing import Any

from shapely.geometry import MultiPolygon as ShapelyMultiPolygon
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.errors import ShapelyError
from shapely.geometry import shape

from .errors import UnsupportedGeometryError
from .geometry import Geometry, MultiPolygon, Polygon, polygons_of


def _from_shapely_polygon(poly: ShapelyPolygon) -> Polygon:
    rings = [poly.exterior.coords] + [interior.coords for interior in poly.interiors]
    return Polygon.from_coords(rings)


def geometry_from_geojson(obj: Any) -> Geometry:
    """Parse a GeoJSON geometry, a Feature, or anything with __geo_interface__."""
    if hasattr(obj, "__geo_interface__"):
        obj = obj.__geo_interface__
    if not isinstance(obj, dict):
        raise UnsupportedGeometryError(f"expected a GeoJSON object, got {type(obj).__name__}")
    if obj.get("type") == "Feature":
        obj = obj.get("geometry") or {}

    geom_type = obj.get("type")
    if geom_type not in ("Polygon", "MultiPolygon"):
        raise UnsupportedGeometryError(f"unsupported geometry type: {geom_type!r}")

    try:
        geom = shape(obj)
    except (ShapelyError, ValueError, TypeError, IndexError, KeyError) as exc:
        raise UnsupportedGeometryError(f"malformed {geom_type}: {exc}") from exc

    if isinstance(geom, ShapelyPolygon):
        return _from_shapely_polygon(geom)
    return MultiPolygon(tuple(_from_shapely_polygon(p) for p in geom.geoms))


def geometry_to_geojson(geometry: Geometry) -> dict:
    if isinstance(geometry, Polygon):
        return {"type": "Polygon", "coordinates": geometry.coordinates()}
    if isinstance(geometry, MultiPolygon):
        return {"type": "MultiPolygon", "coordinates": geometry.coordinates()}
    raise UnsupportedGeometryError(f"cannot encode {type(geometry).__name__}")


def to_shapely(geometry: Geometry):
    polys = [ShapelyPolygon(p.rings[0], p.rings[1:]) for p in polygons_of(geometry)]
    if isinstance(geometry, Polygon):
        return polys[0]
    return ShapelyMultiPolygon(polys)


def area_ratio(original: Geometry, transformed: Geometry) -> float:
    """Planar (degree-space) area of `transformed` relative to `original`."""
    before = to_shapely(original).area
    if before == 0:
        return 1.0
    return to_shapely(transformed).area / before
