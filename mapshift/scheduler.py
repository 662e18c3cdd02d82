"""Latest-wins throttle for recomputes triggered by pointer movement."""

import logging
import threading
from collections.abc import Callable
from typing import Any

from .config import DEFAULT_THROTTLE_MS

logger = logging.getLogger(__name__)

_NOTHING = object()


class UpdateScheduler:
    """Run `callback` at most once per `interval` seconds with the newest value.

    The first request opens a window; requests arriving before it closes
    replace the pending value instead of queuing.  When the window closes the
    callback runs once, on the timer thread, with whatever value is pending.

    `timer_factory` follows the threading.Timer signature
    (interval, function, args) and is swappable for deterministic tests.
    """

    def __init__(self, callback: Callable[[Any], None],
                 interval: float = DEFAULT_THROTTLE_MS / 1000.0,
                 timer_factory=threading.Timer):
        self._callback = callback
        self._interval = interval
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._pending = _NOTHING
        self._timer = None
        self._generation = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def has_pending(self) -> bool:
        with self._lock:
            return self._pending is not _NOTHING

    def request(self, value: Any) -> None:
        with self._lock:
            self._pending = value
            if self._timer is None:
                timer = self._timer_factory(self._interval, self._fire,
                                            args=(self._generation,))
                timer.daemon = True
                self._timer = timer
                timer.start()

    def cancel(self) -> None:
        """Drop the pending value.  A callback already running is not interrupted."""
        with self._lock:
            self._drop_locked()

    def flush(self) -> bool:
        """Run the pending value now, on the calling thread.  False if none."""
        with self._lock:
            value = self._pending
            self._drop_locked()
        if value is _NOTHING:
            return False
        self._callback(value)
        return True

    def _drop_locked(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._pending = _NOTHING
        self._generation += 1

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return  # cancelled or flushed after this timer was armed
            value = self._pending
            self._pending = _NOTHING
            self._timer = None
            self._generation += 1
        if value is _NOTHING:
            return
        try:
            self._callback(value)
        except Exception:
            logger.exception("scheduled update failed")
