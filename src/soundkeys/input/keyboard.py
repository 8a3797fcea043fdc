"""Non-blocking key press sources."""

import os
import sys
from collections import deque
from typing import Iterable, Optional
from soundkeys.core.interfaces import IKeySource
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)

_NAMED = {
    " ": "space",
    "\x1b": "esc",
    "\r": "enter",
    "\n": "enter",
    "\t": "tab",
}

_ARROWS = {"A": "up", "B": "down", "C": "right", "D": "left"}


def key_name(ch: str) -> str:
    """Map a raw character to its key identifier."""
    return _NAMED.get(ch, ch.lower())


class ScriptedKeySource(IKeySource):
    """Key source replaying a fixed sequence; polls return None when idle."""

    def __init__(self, keys: Iterable[Optional[str]] = ()):
        self._keys = deque(keys)
        self.closed = False

    def feed(self, *keys: Optional[str]) -> None:
        self._keys.extend(keys)

    def poll(self) -> Optional[str]:
        if not self._keys:
            return None
        return self._keys.popleft()

    def close(self) -> None:
        self.closed = True


class PosixKeySource(IKeySource):
    """Terminal key source using cbreak mode and select()."""

    def __init__(self, stream=None):
        import termios
        import tty

        self._stream = stream or sys.stdin
        self._fd = self._stream.fileno()
        self._termios = termios
        self._saved = termios.tcgetattr(self._fd)
        tty.setcbreak(self._fd)

    def _pending(self, timeout: float) -> bool:
        import select

        return bool(select.select([self._fd], [], [], timeout)[0])

    def _read(self) -> str:
        # Unbuffered so select() on the descriptor sees every byte still waiting
        return os.read(self._fd, 1).decode("latin-1")

    def poll(self) -> Optional[str]:
        if not self._pending(0):
            return None
        ch = self._read()
        if ch != "\x1b":
            return key_name(ch)

        # Escape sequence: read the remaining bytes if they arrive promptly
        if self._pending(0.02):
            ch2 = self._read()
            if ch2 == "[" and self._pending(0.02):
                return _ARROWS.get(self._read(), "unknown")
            return key_name(ch2)
        return "esc"

    def close(self) -> None:
        self._termios.tcsetattr(self._fd, self._termios.TCSADRAIN, self._saved)


class WindowsKeySource(IKeySource):
    """Console key source using msvcrt."""

    def __init__(self):
        import msvcrt

        self._msvcrt = msvcrt

    def poll(self) -> Optional[str]:
        if not self._msvcrt.kbhit():
            return None
        ch = self._msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            # Function and arrow keys arrive as a two-character sequence
            code = self._msvcrt.getwch()
            return {"H": "up", "P": "down", "M": "right", "K": "left"}.get(code, "unknown")
        return key_name(ch)

    def close(self) -> None:
        pass


def terminal_key_source() -> IKeySource:
    """Key source for the current platform's console."""
    if sys.platform == "win32":
        return WindowsKeySource()
    return PosixKeySource()
