"""Host-side owner of a shape's latest projection session.

Glues the pure session functions to a throttled update stream and a
screen -> lat/lng converter supplied by the map viewer.
"""

import logging
import threading
from collections.abc import Callable
from typing import Optional

from .config import ProjectionSettings
from .errors import ConversionFailure
from .geometry import Bounds, Geometry, LatLng
from .scheduler import UpdateScheduler
from .session import (
    ProjectionInfo,
    ProjectionSession,
    current_geometry,
    initialize_shape_projection,
    projection_info,
    reset_projection,
    update_shape_projection,
)

logger = logging.getLogger(__name__)

ToLatLng = Callable[[float, float], Optional[LatLng]]


class ProjectionController:
    def __init__(self, geometry: Geometry, bounds: Optional[Bounds] = None,
                 to_latlng: Optional[ToLatLng] = None,
                 settings: Optional[ProjectionSettings] = None,
                 on_change: Optional[Callable[[ProjectionSession], None]] = None,
                 timer_factory=threading.Timer):
        self._settings = settings or ProjectionSettings()
        self._lock = threading.RLock()
        # bumped by reset/initialize; updates queued under an older epoch are dropped
        self._epoch = 0
        self._session = initialize_shape_projection(geometry, bounds, self._settings)
        self.to_latlng = to_latlng
        self.on_change = on_change
        self._scheduler = UpdateScheduler(self._recompute, self._settings.throttle_seconds,
                                          timer_factory)

    @property
    def session(self) -> ProjectionSession:
        with self._lock:
            return self._session

    @property
    def current_geometry(self) -> Geometry:
        return current_geometry(self.session)

    @property
    def projection_info(self) -> ProjectionInfo:
        return projection_info(self.session)

    @property
    def has_pending(self) -> bool:
        return self._scheduler.has_pending

    def request_update(self, screen_x: float, screen_y: float) -> bool:
        """Schedule a recompute for the shape centered under a screen point.

        Returns False (and leaves the session alone) when the point can't be
        converted.
        """
        if self.to_latlng is None:
            logger.warning("no screen converter set; ignoring update at (%s, %s)",
                           screen_x, screen_y)
            return False
        try:
            target = self.to_latlng(screen_x, screen_y)
        except ConversionFailure as exc:
            logger.warning("skipping update at (%s, %s): %s", screen_x, screen_y, exc)
            return False
        if target is None:
            logger.warning("skipping update at (%s, %s): no position", screen_x, screen_y)
            return False
        self.request_update_latlng(target)
        return True

    def request_update_latlng(self, target: LatLng) -> None:
        with self._lock:
            self._scheduler.request((self._epoch, target))

    def flush(self) -> bool:
        """Run a pending update now instead of waiting for the throttle."""
        return self._scheduler.flush()

    def reset(self) -> ProjectionSession:
        with self._lock:
            self._scheduler.cancel()
            self._epoch += 1
            self._session = reset_projection(self._session)
            session = self._session
        logger.info("projection reset")
        self._notify(session)
        return session

    def initialize(self, geometry: Geometry, bounds: Optional[Bounds] = None) -> ProjectionSession:
        """Replace the shape.  Any pending update for the old one is dropped."""
        new_session = initialize_shape_projection(geometry, bounds, self._settings)
        with self._lock:
            self._scheduler.cancel()
            self._epoch += 1
            self._session = new_session
        self._notify(new_session)
        return new_session

    def remove(self) -> None:
        self._scheduler.cancel()

    def _recompute(self, item: tuple[int, LatLng]) -> None:
        epoch, target = item
        with self._lock:
            if epoch != self._epoch:
                logger.debug("dropping update for (%.4f, %.4f) queued before a reset",
                             target.lat, target.lng)
                return
            self._session = update_shape_projection(self._session, target)
            session = self._session
        self._notify(session)

    def _notify(self, session: ProjectionSession) -> None:
        if self.on_change is not None:
            self.on_change(session)
