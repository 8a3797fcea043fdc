"""Data models and configuration classes."""

from dataclasses import dataclass, field
from enum import Enum


class PlaybackMode(Enum):
    """How a group advances through its sounds."""

    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    RANDOM = "random"
    """Reserved. Selectable, but plays exactly like SEQUENTIAL."""


DEFAULT_KEY_SET: tuple[str, ...] = tuple("1234567890") + tuple(
    "abcdefghijklmnopqrstuvwxyz"
)
"""Bindable keys in assignment order: ten digits, then 26 letters."""


@dataclass
class CommandKeys:
    """Reserved keys for soundboard commands. Never bindable to a group."""

    quit: str = "esc"
    stop_all: str = "space"
    show_table: str = "/"
    toggle_loop: str = "="
    toggle_stack: str = "-"

    def as_tuple(self) -> tuple[str, ...]:
        return (
            self.quit,
            self.stop_all,
            self.show_table,
            self.toggle_loop,
            self.toggle_stack,
        )


@dataclass
class SoundboardConfig:
    """Configuration for Soundboard."""

    directory: str = "."
    """Directory scanned for `PPP_NAME (N).ext` files."""

    tick_interval: float = 0.1
    """Dispatcher sleep between iterations (seconds). Default: 0.1."""

    ready_timeout: float = 10.0
    """Per-handle wait for readiness at startup (seconds). Default: 10.0."""

    sample_rate: int = 44100
    """Output sample rate (Hz). Default: 44100."""

    channels: int = 2
    """Number of output channels. Default: 2 (stereo)."""

    blocksize: int = 1024
    """Output stream block size in frames."""

    volume: float = 1.0
    """Master volume (0.0 to 1.0)."""

    default_mode: PlaybackMode = PlaybackMode.SEQUENTIAL
    """Mode given to non-stacked groups when triggered."""

    key_set: tuple[str, ...] = DEFAULT_KEY_SET
    """Ordered bindable keys."""

    command_keys: CommandKeys = field(default_factory=CommandKeys)


@dataclass
class GlobalState:
    """Process-wide mode toggles, copied into a group when it is triggered."""

    loop: bool = False
    stack: bool = False

    def toggle_loop(self) -> bool:
        self.loop = not self.loop
        return self.loop

    def toggle_stack(self) -> bool:
        self.stack = not self.stack
        return self.stack


@dataclass(frozen=True)
class SoundFile:
    """Metadata parsed from a `PPP_NAME (N).ext` filename."""

    prefix: str
    name: str
    index: str
    path: str

    @property
    def order_index(self) -> int:
        return int(self.prefix)


@dataclass
class AudioFormat:
    """Audio format specification."""

    sample_rate: int
    """Sample rate in Hz."""

    channels: int
    """Number of channels (1=mono, 2=stereo)."""

    bits_per_sample: int
    """Bits per sample (typically 16)."""

    block_align: int
    """Block alignment in bytes."""

    avg_bytes_per_sec: int
    """Average bytes per second."""

    @property
    def frame_size(self) -> int:
        """Frame size in bytes."""
        return self.block_align

    @property
    def bytes_per_sample(self) -> int:
        """Bytes per sample."""
        return self.bits_per_sample // 8


@dataclass
class SoundData:
    """Loaded audio data."""

    format: AudioFormat
    """Audio format specification."""

    data: bytes
    """Raw PCM audio data."""

    duration_seconds: float
    """Duration in seconds."""

    @property
    def num_frames(self) -> int:
        """Number of audio frames."""
        return len(self.data) // self.format.frame_size
