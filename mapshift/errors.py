"""Exception hierarchy for the projection engine and its host adapters."""


class MapShiftError(Exception):
    """Base class for every error raised by mapshift."""


class UnsupportedGeometryError(MapShiftError):
    """Geometry is not a Polygon or MultiPolygon."""


class EmptyGeometryError(MapShiftError):
    """Geometry has no coordinates, so it has no bounding box."""


class ConversionFailure(MapShiftError):
    """A screen point could not be converted to a geographic position."""


class ConfigError(MapShiftError):
    """An environment setting is missing its expected form or range."""


class BoundaryLookupError(MapShiftError):
    """Country boundary could not be fetched or had no polygon outline."""
