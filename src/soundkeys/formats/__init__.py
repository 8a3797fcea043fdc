"""Audio format decoders keyed by file extension."""

from pathlib import Path
from typing import Dict, Optional
from soundkeys.core.exceptions import AudioFormatError
from soundkeys.core.interfaces import IAudioFormat
from soundkeys.core.models import SoundData
from soundkeys.formats.convert import conform
from soundkeys.formats.mp3 import mp3_format
from soundkeys.formats.wav import wav_format
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)

# Registry of all available formats
_format_registry: Dict[str, IAudioFormat] = {}


def _register_format(format: IAudioFormat) -> None:
    """
    Register an audio format.

    Args:
        format: Format instance implementing IAudioFormat.
    """
    for ext in format.extensions:
        ext_lower = ext.lower()
        if ext_lower in _format_registry:
            logger.warning(
                f"Format with extension {ext_lower} already registered, "
                f"overwriting with {type(format).__name__}"
            )
        _format_registry[ext_lower] = format
    logger.debug(f"Registered format {type(format).__name__} for extensions: {format.extensions}")


def get_format_for_file(path: str) -> Optional[IAudioFormat]:
    """
    Get the format handler for a file by its extension.

    Args:
        path: Path to audio file.

    Returns:
        IAudioFormat instance if one is registered, None otherwise.
    """
    return _format_registry.get(Path(path).suffix.lower())


def load_audio(path: str) -> SoundData:
    """
    Load an audio file with the decoder registered for its extension.

    Args:
        path: Path to audio file.

    Returns:
        SoundData with format and PCM data.

    Raises:
        AudioFormatError: If no suitable format is found.
        FileNotFoundError: If file does not exist.
    """
    format = get_format_for_file(path)
    if format is None:
        raise AudioFormatError(
            f"No suitable format handler found for file: {path}. "
            f"Supported extensions: {', '.join(sorted(_format_registry))}"
        )

    return format.load(path)


_register_format(wav_format)
_register_format(mp3_format)

__all__ = ["load_audio", "get_format_for_file", "conform", "IAudioFormat"]
