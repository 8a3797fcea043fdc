"""Protocol interfaces for player backend and key source abstraction."""

from typing import Optional, Protocol
from soundkeys.core.models import SoundData


class ISoundHandle(Protocol):
    """Interface for one playable audio asset."""

    def open(self) -> None:
        """Start loading the asset. Readiness may arrive asynchronously."""
        ...

    def play(self) -> None:
        """Start playback from the current position."""
        ...

    def stop(self) -> None:
        """Stop playback. Clears the natural-end marker."""
        ...

    def seek(self, position: float) -> None:
        """Move the playhead to `position` seconds."""
        ...

    def is_at_start(self) -> bool:
        """True if the playhead is at time zero."""
        ...

    def is_at_end(self) -> bool:
        """True if playback ran off the last frame and was not stopped since."""
        ...

    def is_ready(self) -> bool:
        """True once the asset is loaded and playable."""
        ...

    def is_playing(self) -> bool:
        """True while the handle produces sound."""
        ...

    @property
    def path(self) -> str:
        """Source file path."""
        ...

    @property
    def position(self) -> float:
        """Playhead position in seconds."""
        ...

    @property
    def duration(self) -> float:
        """Duration in seconds (0.0 until ready)."""
        ...

    def release(self) -> None:
        """Free the handle. Later calls raise BackendError."""
        ...


class IPlayerBackend(Protocol):
    """Interface for player backend implementation."""

    def initialize(self) -> None:
        """Initialize the backend (open output device, start workers)."""
        ...

    def open_sound(self, path: str) -> ISoundHandle:
        """Create an unopened sound handle for `path`."""
        ...

    def shutdown(self) -> None:
        """Shutdown the backend and free all resources."""
        ...


class IKeySource(Protocol):
    """Interface for a non-blocking key press source."""

    def poll(self) -> Optional[str]:
        """Return the next key identifier, or None if no key is pending."""
        ...

    def close(self) -> None:
        """Restore the input device."""
        ...


class IAudioFormat(Protocol):
    """Interface for audio format parsers."""

    @property
    def extensions(self) -> tuple[str, ...]:
        """
        File extensions supported by this format (e.g., ('.wav', '.wave')).

        Returns:
            Tuple of supported file extensions (lowercase, with dot).
        """
        ...

    def load(self, path: str) -> SoundData:
        """
        Load an audio file and return SoundData.

        Args:
            path: Path to audio file.

        Returns:
            SoundData with format and PCM data.

        Raises:
            InvalidAudioFormat: If format is not supported.
            FileNotFoundError: If file does not exist.
        """
        ...
