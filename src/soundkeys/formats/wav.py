"""RIFF WAV file parser."""

import struct
from pathlib import Path
from typing import BinaryIO
from soundkeys.core.exceptions import InvalidAudioFormat
from soundkeys.core.interfaces import IAudioFormat
from soundkeys.core.models import AudioFormat, SoundData
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


class WavFormat(IAudioFormat):
    """WAV format parser implementing IAudioFormat."""

    @property
    def extensions(self) -> tuple[str, ...]:
        """Supported file extensions."""
        return (".wav", ".wave")

    def load(self, path: str) -> SoundData:
        """
        Load a WAV file and return SoundData.

        Supports:
        - PCM format (fmt=1)
        - 16-bit samples
        - Mono or stereo
        - Any sample rate (conformed to the output rate later)

        Args:
            path: Path to WAV file.

        Returns:
            SoundData with format and PCM data.

        Raises:
            InvalidAudioFormat: If format is not supported.
            FileNotFoundError: If file does not exist.
            IOError: If file cannot be read.
        """
        path_obj = Path(path)
        if not path_obj.exists():
            raise FileNotFoundError(f"WAV file not found: {path}")

        with open(path_obj, "rb") as f:
            return _parse_wav(f)


def _parse_wav(f: BinaryIO) -> SoundData:
    """Parse WAV file from file handle."""
    riff = f.read(4)
    if riff != b"RIFF":
        raise InvalidAudioFormat("Not a RIFF file")

    f.read(4)  # RIFF size, unreliable in files written by some editors

    wave = f.read(4)
    if wave != b"WAVE":
        raise InvalidAudioFormat("Not a WAVE file")

    fmt_data = None
    data_chunk = None

    while True:
        chunk_id = f.read(4)
        if len(chunk_id) < 4:
            break

        size_bytes = f.read(4)
        if len(size_bytes) < 4:
            break
        chunk_size = struct.unpack("<I", size_bytes)[0]

        if chunk_id == b"fmt ":
            fmt_data = f.read(chunk_size)
        elif chunk_id == b"data":
            data_chunk = f.read(chunk_size)
            break
        else:
            # Chunks are word aligned
            f.seek(chunk_size + (chunk_size & 1), 1)

    if fmt_data is None:
        raise InvalidAudioFormat("Missing fmt chunk")

    if data_chunk is None:
        raise InvalidAudioFormat("Missing data chunk")

    # Format: audio_format(2), num_channels(2), sample_rate(4),
    #         byte_rate(4), block_align(2), bits_per_sample(2)
    if len(fmt_data) < 16:
        raise InvalidAudioFormat("Invalid fmt chunk size")

    (
        audio_format,
        num_channels,
        sample_rate,
        byte_rate,
        block_align,
        bits_per_sample,
    ) = struct.unpack("<HHIIHH", fmt_data[:16])

    if audio_format != 1:  # PCM
        raise InvalidAudioFormat(
            f"Unsupported audio format: {audio_format} (only PCM=1 is supported)"
        )

    if bits_per_sample != 16:
        raise InvalidAudioFormat(
            f"Unsupported bits per sample: {bits_per_sample} (only 16-bit is supported)"
        )

    if num_channels not in (1, 2):
        raise InvalidAudioFormat(
            f"Unsupported channel count: {num_channels} (only mono=1 or stereo=2)"
        )

    if sample_rate == 0:
        raise InvalidAudioFormat("Invalid sample rate: 0 Hz")

    format = AudioFormat(
        sample_rate=sample_rate,
        channels=num_channels,
        bits_per_sample=bits_per_sample,
        block_align=block_align,
        avg_bytes_per_sec=byte_rate,
    )

    # Drop a trailing partial frame
    usable = len(data_chunk) - (len(data_chunk) % format.frame_size)
    data_chunk = data_chunk[:usable]

    num_frames = len(data_chunk) // format.frame_size
    duration_seconds = num_frames / sample_rate

    logger.info(
        f"Loaded WAV: {num_channels}ch, {sample_rate}Hz, {bits_per_sample}bit, "
        f"{duration_seconds:.2f}s"
    )

    return SoundData(
        format=format,
        data=data_chunk,
        duration_seconds=duration_seconds,
    )


wav_format = WavFormat()
