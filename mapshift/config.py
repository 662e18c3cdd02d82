"""Runtime settings, read from the environment."""

import os
from dataclasses import dataclass

from .errors import ConfigError

DEFAULT_THROTTLE_MS = 32.0   # ~30 updates per second while dragging
DEFAULT_SMOOTHING = 0.8
DEFAULT_INSET = 0.2
DEFAULT_LOG_LEVEL = "INFO"


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from exc


@dataclass(frozen=True)
class ProjectionSettings:
    """Tunable constants of the gradient distortion.

    smoothing and inset are visual heuristics rather than derived values;
    they default to what looks right on country-sized shapes.
    """

    throttle_ms: float = DEFAULT_THROTTLE_MS
    smoothing: float = DEFAULT_SMOOTHING
    inset: float = DEFAULT_INSET

    def __post_init__(self):
        if self.throttle_ms <= 0:
            raise ConfigError(f"throttle must be positive, got {self.throttle_ms}")
        if not 0.0 <= self.smoothing <= 1.0:
            raise ConfigError(f"smoothing must be within [0, 1], got {self.smoothing}")
        if not 0.0 <= self.inset < 0.5:
            raise ConfigError(f"inset must be within [0, 0.5), got {self.inset}")

    @property
    def throttle_seconds(self) -> float:
        return self.throttle_ms / 1000.0

    @classmethod
    def from_env(cls) -> "ProjectionSettings":
        return cls(
            throttle_ms=_env_float("MAPSHIFT_THROTTLE_MS", DEFAULT_THROTTLE_MS),
            smoothing=_env_float("MAPSHIFT_SMOOTHING", DEFAULT_SMOOTHING),
            inset=_env_float("MAPSHIFT_INSET", DEFAULT_INSET),
        )


def log_level() -> str:
    return os.environ.get("MAPSHIFT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
