"""Shared fixtures for soundkeys tests."""

import pytest
from soundkeys.backends.null_backend import NullBackend
from soundkeys.core.bindings import KeyBindingTable
from soundkeys.core.catalog import GroupCatalog
from soundkeys.services.playback import PlaybackService


class FakeClock:
    """Manually advanced time source."""

    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def backend(clock):
    return NullBackend(duration=5.0, clock=clock)


@pytest.fixture
def bindings():
    return KeyBindingTable()


@pytest.fixture
def playback():
    return PlaybackService()


@pytest.fixture
def make_group(backend, bindings):
    """Build a bound group called `name` with `count` sounds."""

    def _make(name: str = "Birds", count: int = 3, prefix: str = "001"):
        catalog = GroupCatalog(backend, bindings)
        catalog.build([f"/sounds/{prefix}_{name} ({i}).wav" for i in range(1, count + 1)])
        return catalog.get(name)

    return _make
