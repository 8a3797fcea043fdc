"""Directory scanning for sound files."""

from pathlib import Path
from typing import List
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)

AUDIO_EXTENSIONS = (".wav", ".mp3")


def list_audio_files(directory: str) -> List[str]:
    """
    List the audio files of a directory.

    Args:
        directory: Directory to scan (not recursive).

    Returns:
        Full paths of `.wav`/`.mp3` files sorted by file name. Empty if the
        directory does not exist.
    """
    path_obj = Path(directory)
    if not path_obj.is_dir():
        logger.warning(f"Sound directory not found: {directory}")
        return []

    files = sorted(
        (p for p in path_obj.iterdir() if p.is_file() and p.suffix.lower() in AUDIO_EXTENSIONS),
        key=lambda p: p.name,
    )
    if not files:
        logger.warning(f"No .wav or .mp3 files in {directory}")
    return [str(p) for p in files]
