"""Shared fixtures and factories for mapshift tests."""

import pytest

from mapshift.geometry import Bounds, MultiPolygon, Polygon

UNIT_SQUARE = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]


class FakeTimer:
    """Stands in for threading.Timer; fires only when the test says so."""

    def __init__(self, interval, function, args=()):
        self.interval = interval
        self.function = function
        self.args = args
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.function(*self.args)


class TimerFactory:
    def __init__(self):
        self.timers: list[FakeTimer] = []

    def __call__(self, interval, function, args=()):
        timer = FakeTimer(interval, function, args)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.timers[-1]


@pytest.fixture
def timers():
    return TimerFactory()


@pytest.fixture
def unit_square():
    return Polygon.from_coords([UNIT_SQUARE])


@pytest.fixture
def unit_bounds():
    return Bounds.from_edges(0.0, 0.0, 1.0, 1.0)


@pytest.fixture
def country_like():
    """Two-part shape with a hole, roughly the size of a small country."""
    mainland = [
        [[10.0, 45.0], [16.0, 45.0], [16.0, 52.0], [10.0, 52.0], [10.0, 45.0]],
        [[12.0, 47.0], [13.0, 47.0], [13.0, 48.0], [12.0, 48.0], [12.0, 47.0]],
    ]
    island = [[[17.0, 44.0], [18.0, 44.0], [18.0, 45.0], [17.0, 44.0]]]
    return MultiPolygon.from_coords([mainland, island])

