"""Null backend for testing and dry runs (no actual audio output)."""

import time
from typing import Callable, Dict, Iterable, List
from soundkeys.core.exceptions import BackendError
from soundkeys.core.interfaces import IPlayerBackend, ISoundHandle
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


class NullSoundHandle(ISoundHandle):
    """Null sound handle that keeps time with a clock instead of a device."""

    def __init__(
        self,
        path: str,
        duration: float = 1.0,
        ready: bool = True,
        failing: bool = False,
        clock: Callable[[], float] = time.monotonic,
    ):
        self._path = path
        self._duration = duration
        self._ready_on_open = ready
        self._failing = failing
        self._clock = clock
        self._opened = False
        self._released = False
        self._playing = False
        self._ended = False
        self._offset = 0.0
        self._start_time = 0.0
        self.calls: List[str] = []

    def _check(self, op: str) -> None:
        self.calls.append(op)
        if self._released:
            raise BackendError(f"{op} on released handle", self._path)
        if self._failing:
            raise BackendError(f"{op} failed", self._path)

    def _update(self) -> None:
        if self._playing and self.position >= self._duration:
            self._playing = False
            self._ended = True
            self._offset = self._duration
            logger.debug(f"NullSoundHandle {self._path}: reached end")

    def open(self) -> None:
        """Open the handle."""
        self._check("open")
        self._opened = True

    def play(self) -> None:
        """Start playback."""
        self._check("play")
        if not self.is_ready():
            raise BackendError("play before ready", self._path)
        self._start_time = self._clock()
        self._playing = True
        self._ended = False
        logger.debug(f"NullSoundHandle {self._path}: playing from {self._offset:.2f}s")

    def stop(self) -> None:
        """Stop playback."""
        self._check("stop")
        self._update()
        if self._playing:
            self._offset = self.position
        self._playing = False
        self._ended = False
        logger.debug(f"NullSoundHandle {self._path}: stopped")

    def seek(self, position: float) -> None:
        """Move the playhead."""
        self._check("seek")
        self._offset = min(max(position, 0.0), self._duration)
        self._start_time = self._clock()
        self._ended = False

    def finish(self) -> None:
        """Jump to the natural end, as if playback had run out."""
        if self._playing:
            self._playing = False
            self._ended = True
            self._offset = self._duration

    def is_at_start(self) -> bool:
        return self.position == 0.0

    def is_at_end(self) -> bool:
        if self._failing:
            raise BackendError("is_at_end failed", self._path)
        self._update()
        return self._ended

    def is_ready(self) -> bool:
        return self._opened and self._ready_on_open and not self._released

    def is_playing(self) -> bool:
        self._update()
        return self._playing

    @property
    def path(self) -> str:
        return self._path

    @property
    def position(self) -> float:
        if self._playing:
            return min(self._offset + self._clock() - self._start_time, self._duration)
        return self._offset

    @property
    def duration(self) -> float:
        return self._duration

    def release(self) -> None:
        """Release the handle."""
        self.calls.append("release")
        self._playing = False
        self._released = True


class NullBackend(IPlayerBackend):
    """Null backend implementation for testing."""

    def __init__(
        self,
        duration: float = 1.0,
        not_ready: Iterable[str] = (),
        failing: Iterable[str] = (),
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize NullBackend.

        Args:
            duration: Duration given to every handle (seconds).
            not_ready: Paths whose handles never become ready.
            failing: Paths whose handles raise BackendError on every call.
            clock: Time source for simulated playback.
        """
        self._initialized = False
        self._duration = duration
        self._not_ready = set(not_ready)
        self._failing = set(failing)
        self._clock = clock
        self.handles: Dict[str, NullSoundHandle] = {}

    def initialize(self) -> None:
        """Initialize backend."""
        if self._initialized:
            return
        self._initialized = True
        logger.info("NullBackend initialized")

    def open_sound(self, path: str) -> NullSoundHandle:
        """Create a sound handle."""
        handle = NullSoundHandle(
            path,
            duration=self._duration,
            ready=path not in self._not_ready,
            failing=path in self._failing,
            clock=self._clock,
        )
        self.handles[path] = handle
        logger.debug(f"Created NullSoundHandle {path}")
        return handle

    def shutdown(self) -> None:
        """Shutdown backend."""
        for handle in self.handles.values():
            handle.release()
        self._initialized = False
        logger.info("NullBackend shut down")
