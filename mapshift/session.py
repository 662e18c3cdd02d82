"""Projection session: the original shape plus its latest transform.

A session is a frozen value.  Every transition (initialize, update, reset)
returns a new session, so a host can hand snapshots to other threads freely.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Optional, Union

from .config import ProjectionSettings
from .geometry import Bounds, Geometry, LatLng, geometry_bounds, polygons_of
from .projection import ProjectionTransform, build_gradient_transform
from .transformer import transform_geometry

logger = logging.getLogger(__name__)

# (upper bound on average horizontal scale, label)
DISTORTION_TIERS = (
    (1.1, "Minimal"),
    (1.3, "Light"),
    (1.6, "Moderate"),
)
GRADIENT_THRESHOLD = 0.2


@dataclass(frozen=True)
class ProjectionSession:
    original_geometry: Geometry
    original_center: LatLng
    original_bounds: Bounds
    transformed_geometry: Optional[Geometry] = None
    current_transform: Optional[ProjectionTransform] = None
    settings: ProjectionSettings = field(default_factory=ProjectionSettings)

    def __post_init__(self):
        if (self.transformed_geometry is None) != (self.current_transform is None):
            raise ValueError("transformed_geometry and current_transform must be set together")

    @property
    def is_transformed(self) -> bool:
        return self.current_transform is not None


@dataclass(frozen=True)
class ProjectionInfo:
    is_transformed: bool
    top_horizontal_scale: float = 1.0
    bottom_horizontal_scale: float = 1.0
    top_vertical_scale: float = 1.0
    bottom_vertical_scale: float = 1.0
    average_horizontal_scale: float = 1.0
    average_vertical_scale: float = 1.0
    distortion_range: float = 0.0
    target_latitude: Optional[float] = None
    description: str = "No distortion"

    def to_dict(self) -> dict:
        return {
            "is_transformed": self.is_transformed,
            "top_horizontal_scale": self.top_horizontal_scale,
            "bottom_horizontal_scale": self.bottom_horizontal_scale,
            "top_vertical_scale": self.top_vertical_scale,
            "bottom_vertical_scale": self.bottom_vertical_scale,
            "average_horizontal_scale": self.average_horizontal_scale,
            "average_vertical_scale": self.average_vertical_scale,
            "distortion_range": self.distortion_range,
            "target_latitude": self.target_latitude,
            "description": self.description,
        }


def describe_distortion(average_horizontal: float, distortion_range: float) -> str:
    label = "Heavy"
    for upper, name in DISTORTION_TIERS:
        if average_horizontal < upper:
            label = name
            break
    description = f"{label} distortion"
    if distortion_range > GRADIENT_THRESHOLD:
        description += " (gradient)"
    return description


def initialize_shape_projection(geometry: Geometry, bounds: Optional[Bounds] = None,
                                settings: Optional[ProjectionSettings] = None) -> ProjectionSession:
    """Start an untransformed session.  Bounds default to the geometry's envelope."""
    polygons_of(geometry)  # rejects anything that is not polygonal
    if bounds is None:
        bounds = geometry_bounds(geometry)
    session = ProjectionSession(
        original_geometry=geometry,
        original_center=bounds.center,
        original_bounds=bounds,
        settings=settings or ProjectionSettings(),
    )
    logger.info("session initialized: center=(%.4f, %.4f) polygons=%d",
                session.original_center.lat, session.original_center.lng,
                len(polygons_of(geometry)))
    return session


def update_shape_projection(session: ProjectionSession, target: LatLng) -> ProjectionSession:
    """Recompute the transform for a shape centered on `target`."""
    transform = build_gradient_transform(session.original_bounds, target,
                                         inset=session.settings.inset)
    transformed = transform_geometry(session.original_geometry, session.original_center,
                                     transform, smoothing=session.settings.smoothing)
    return replace(session, transformed_geometry=transformed, current_transform=transform)


def reset_projection(session: ProjectionSession) -> ProjectionSession:
    return replace(session, transformed_geometry=None, current_transform=None)


def current_geometry(session: ProjectionSession) -> Geometry:
    if session.transformed_geometry is not None:
        return session.transformed_geometry
    return session.original_geometry


def projection_info(session: ProjectionSession) -> ProjectionInfo:
    t = session.current_transform
    if t is None:
        return ProjectionInfo(is_transformed=False)

    avg_h = (t.top_horizontal_scale + t.bottom_horizontal_scale) / 2.0
    avg_v = (t.top_vertical_scale + t.bottom_vertical_scale) / 2.0
    spread = abs(t.top_horizontal_scale - t.bottom_horizontal_scale)
    return ProjectionInfo(
        is_transformed=True,
        top_horizontal_scale=t.top_horizontal_scale,
        bottom_horizontal_scale=t.bottom_horizontal_scale,
        top_vertical_scale=t.top_vertical_scale,
        bottom_vertical_scale=t.bottom_vertical_scale,
        average_horizontal_scale=avg_h,
        average_vertical_scale=avg_v,
        distortion_range=spread,
        target_latitude=t.center_lat,
        description=describe_distortion(avg_h, spread),
    )


# Events for the Session x Event -> Session transition function.

@dataclass(frozen=True)
class Initialize:
    geometry: Geometry
    bounds: Optional[Bounds] = None


@dataclass(frozen=True)
class Update:
    target: LatLng


@dataclass(frozen=True)
class Reset:
    pass


Event = Union[Initialize, Update, Reset]


def apply_event(session: Optional[ProjectionSession], event: Event) -> ProjectionSession:
    """Pure state transition.  Only Initialize may start from no session."""
    if isinstance(event, Initialize):
        settings = session.settings if session is not None else None
        return initialize_shape_projection(event.geometry, event.bounds, settings)
    if session is None:
        raise ValueError(f"{type(event).__name__} needs an initialized session")
    if isinstance(event, Update):
        return update_shape_projection(session, event.target)
    if isinstance(event, Reset):
        return reset_projection(session)
    raise TypeError(f"unknown event {event!r}")
