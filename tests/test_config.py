import pytest

from mapshift.config import ProjectionSettings, log_level
from mapshift.errors import ConfigError


def test_defaults():
    s = ProjectionSettings()
    assert s.throttle_ms == 32.0
    assert s.throttle_seconds == pytest.approx(0.032)
    assert s.smoothing == 0.8
    assert s.inset == 0.2


def test_from_env(monkeypatch):
    monkeypatch.setenv("MAPSHIFT_THROTTLE_MS", "16")
    monkeypatch.setenv("MAPSHIFT_SMOOTHING", "0.5")
    monkeypatch.setenv("MAPSHIFT_INSET", "")
    s = ProjectionSettings.from_env()
    assert s.throttle_ms == 16.0
    assert s.smoothing == 0.5
    assert s.inset == 0.2


def test_from_env_defaults(monkeypatch):
    for name in ("MAPSHIFT_THROTTLE_MS", "MAPSHIFT_SMOOTHING", "MAPSHIFT_INSET"):
        monkeypatch.delenv(name, raising=False)
    assert ProjectionSettings.from_env() == ProjectionSettings()


def test_non_numeric_env(monkeypatch):
    monkeypatch.setenv("MAPSHIFT_SMOOTHING", "lots")
    with pytest.raises(ConfigError, match="MAPSHIFT_SMOOTHING"):
        ProjectionSettings.from_env()


@pytest.mark.parametrize("kwargs", [
    {"throttle_ms": 0},
    {"smoothing": 1.5},
    {"smoothing": -0.1},
    {"inset": 0.5},
    {"inset": -0.2},
])
def test_out_of_range(kwargs):
    with pytest.raises(ConfigError):
        ProjectionSettings(**kwargs)


def test_log_level(monkeypatch):
    monkeypatch.delenv("MAPSHIFT_LOG_LEVEL", raising=False)
    assert log_level() == "INFO"
    monkeypatch.setenv("MAPSHIFT_LOG_LEVEL", "debug")
    assert log_level() == "DEBUG"
