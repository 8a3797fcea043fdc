"""Exception classes for soundkeys."""


class SoundboardError(Exception):
    """Base exception for soundboard errors."""
    pass


class BackendError(SoundboardError):
    """Raised when a player backend or sound handle operation fails."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        self.message = message
        if path:
            super().__init__(f"Backend error ({path}): {message}")
        else:
            super().__init__(f"Backend error: {message}")


class AudioFormatError(SoundboardError):
    """Raised when audio format is not supported or cannot be decoded."""
    pass


class SoundIndexError(SoundboardError, IndexError):
    """Raised when a sound index is outside a group's sound list."""
    pass


class KeyBindingError(SoundboardError):
    """Raised when the key binding table cannot be constructed."""
    pass


InvalidAudioFormat = AudioFormatError
