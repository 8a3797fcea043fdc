"""MP3 decoder built on pydub."""

from pathlib import Path
from pydub import AudioSegment
from soundkeys.core.exceptions import InvalidAudioFormat
from soundkeys.core.interfaces import IAudioFormat
from soundkeys.core.models import SoundData
from soundkeys.formats.convert import segment_to_sound_data
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


class Mp3Format(IAudioFormat):
    """MP3 format parser implementing IAudioFormat."""

    @property
    def extensions(self) -> tuple[str, ...]:
        """Supported file extensions."""
        return (".mp3",)

    def load(self, path: str) -> SoundData:
        """
        Load an MP3 file and convert to 16-bit PCM SoundData.

        Args:
            path: Path to MP3 file.

        Returns:
            SoundData with format and PCM data.

        Raises:
            InvalidAudioFormat: If the file cannot be decoded.
            FileNotFoundError: If file does not exist.
            ImportError: If ffmpeg is not available.
        """
        path_obj = Path(path)
        if not path_obj.exists():
            raise FileNotFoundError(f"MP3 file not found: {path}")

        try:
            audio = AudioSegment.from_mp3(str(path_obj))
        except FileNotFoundError as e:
            # The file exists, so this is pydub failing to spawn ffmpeg/ffprobe
            raise ImportError(
                "ffmpeg is required for MP3 decoding with pydub. "
                "Ensure 'ffmpeg' and 'ffprobe' are available in your PATH."
            ) from e
        except Exception as e:
            raise InvalidAudioFormat(f"Failed to decode MP3 file {path}: {e}") from e

        if audio.sample_width != 2:
            audio = audio.set_sample_width(2)

        if audio.channels not in (1, 2):
            logger.warning(f"MP3 has {audio.channels} channels, converting to stereo")
            audio = audio.set_channels(2)

        sound_data = segment_to_sound_data(audio)
        logger.info(
            f"Loaded MP3: {sound_data.format.channels}ch, "
            f"{sound_data.format.sample_rate}Hz, {sound_data.duration_seconds:.2f}s"
        )
        return sound_data


mp3_format = Mp3Format()
