"""Conversion of decoded PCM to the output device format."""

from pydub import AudioSegment
from soundkeys.core.models import AudioFormat, SoundData
from soundkeys.utils.log import get_logger

logger = get_logger(__name__)


def segment_to_sound_data(audio: AudioSegment) -> SoundData:
    """Wrap a pydub segment's raw PCM as SoundData."""
    block_align = audio.channels * audio.sample_width
    format = AudioFormat(
        sample_rate=audio.frame_rate,
        channels=audio.channels,
        bits_per_sample=audio.sample_width * 8,
        block_align=block_align,
        avg_bytes_per_sec=audio.frame_rate * block_align,
    )
    return SoundData(
        format=format,
        data=audio.raw_data,
        duration_seconds=len(audio) / 1000.0,  # pydub lengths are milliseconds
    )


def conform(sound_data: SoundData, sample_rate: int, channels: int) -> SoundData:
    """
    Resample and remix 16-bit PCM to the given rate and channel count.

    Returns `sound_data` unchanged when it already matches.
    """
    fmt = sound_data.format
    if fmt.sample_rate == sample_rate and fmt.channels == channels:
        return sound_data

    audio = AudioSegment(
        data=sound_data.data,
        sample_width=fmt.bytes_per_sample,
        frame_rate=fmt.sample_rate,
        channels=fmt.channels,
    )
    if fmt.sample_rate != sample_rate:
        logger.info(f"Resampling from {fmt.sample_rate} Hz to {sample_rate} Hz")
        audio = audio.set_frame_rate(sample_rate)
    if fmt.channels != channels:
        audio = audio.set_channels(channels)
    return segment_to_sound_data(audio)
