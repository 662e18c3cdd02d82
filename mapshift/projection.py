"""Web Mercator scale heuristics and the latitude-gradient transform.

The scale functions approximate how much Mercator stretches a shape at a given
latitude.  They are a lightweight stand-in for the full projection formula.
"""

import logging
import math
from dataclasses import dataclass

from .config import DEFAULT_INSET
from .geometry import Bounds, LatLng

logger = logging.getLogger(__name__)

MAX_LATITUDE = 85.0   # keeps 1/cos and tan away from the pole asymptote
VERTICAL_STRETCH = 0.3


def clamp_latitude(lat: float) -> float:
    return max(-MAX_LATITUDE, min(MAX_LATITUDE, lat))


def horizontal_scale(lat: float) -> float:
    """East-west stretch at `lat`; exactly 1.0 at the equator."""
    return 1.0 / math.cos(math.radians(clamp_latitude(lat)))


def vertical_scale(lat: float) -> float:
    """North-south stretch at `lat`."""
    return 1.0 + VERTICAL_STRETCH * abs(math.tan(math.radians(clamp_latitude(lat))))


@dataclass(frozen=True)
class ProjectionTransform:
    """Scale ratios sampled at two reference latitudes of a moved shape.

    Ratios compare the scale at the new position against the scale at the
    original position, so 1.0 means "looks the same as where it came from".
    """

    top_latitude: float
    bottom_latitude: float
    top_horizontal_scale: float
    bottom_horizontal_scale: float
    top_vertical_scale: float
    bottom_vertical_scale: float
    center_lat: float
    center_lng: float

    @property
    def center(self) -> LatLng:
        return LatLng(self.center_lat, self.center_lng)


def build_gradient_transform(original_bounds: Bounds, target_center: LatLng,
                             inset: float = DEFAULT_INSET) -> ProjectionTransform:
    """Derive the gradient transform for moving `original_bounds` to `target_center`.

    Scales are sampled `inset` of the latitude span inward from the top and
    bottom edges, at both the original and the new position.
    """
    lat_span = original_bounds.lat_span
    new_top = target_center.lat + lat_span / 2.0
    new_bottom = target_center.lat - lat_span / 2.0

    inset_deg = lat_span * inset
    effective_top = new_top - inset_deg
    effective_bottom = new_bottom + inset_deg
    orig_top = original_bounds.north_east.lat - inset_deg
    orig_bottom = original_bounds.south_west.lat + inset_deg

    # Scale functions are clamped below the pole, so no denominator is zero.
    transform = ProjectionTransform(
        top_latitude=effective_top,
        bottom_latitude=effective_bottom,
        top_horizontal_scale=horizontal_scale(effective_top) / horizontal_scale(orig_top),
        bottom_horizontal_scale=horizontal_scale(effective_bottom) / horizontal_scale(orig_bottom),
        top_vertical_scale=vertical_scale(effective_top) / vertical_scale(orig_top),
        bottom_vertical_scale=vertical_scale(effective_bottom) / vertical_scale(orig_bottom),
        center_lat=target_center.lat,
        center_lng=target_center.lng,
    )
    logger.debug(
        "gradient transform: target=(%.4f, %.4f) ref_lat=[%.2f, %.2f] "
        "h=[%.3f, %.3f] v=[%.3f, %.3f]",
        target_center.lat, target_center.lng, effective_top, effective_bottom,
        transform.top_horizontal_scale, transform.bottom_horizontal_scale,
        transform.top_vertical_scale, transform.bottom_vertical_scale,
    )
    return transform
