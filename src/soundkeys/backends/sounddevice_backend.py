"""Mixer backend playing every handle through one sounddevice output stream."""

import threading
from typing import List, Optional
import numpy as np
import sounddevice as sd
from soundkeys.concurrency.worker import BackendWorker
from soundkeys.core.exceptions import BackendError
from soundkeys.core.interfaces import IPlayerBackend, ISoundHandle
from soundkeys.core.models import SoundboardConfig
from soundkeys.formats import conform, load_audio
from soundkeys.utils.log import get_logger
from soundkeys.utils.validate import validate_volume

logger = get_logger(__name__)


class MixerSoundHandle(ISoundHandle):
    """
    One decoded sound mixed into the backend's output stream.

    Frames are float32 of shape (frames, channels). Playback state is read
    by the audio callback, so every mutation happens under the mixer lock.
    """

    def __init__(self, backend: "SoundDeviceBackend", path: str):
        self._backend = backend
        self._path = path
        self._frames: Optional[np.ndarray] = None
        self._pos = 0
        self._playing = False
        self._ended = False
        self._released = False
        self._failed = False
        self._ready = threading.Event()

    def open(self) -> None:
        """Queue the decode on the backend worker."""
        if self._released:
            raise BackendError("open on released handle", self._path)
        self._backend.worker.submit(self._load)

    def _load(self) -> None:
        try:
            sound_data = conform(
                load_audio(self._path),
                self._backend.sample_rate,
                self._backend.channels,
            )
        except Exception:
            self._failed = True
            raise
        pcm = np.frombuffer(sound_data.data, dtype="<i2")
        frames = pcm.reshape(-1, self._backend.channels).astype(np.float32) / 32768.0
        with self._backend.lock:
            self._frames = frames
        self._ready.set()
        logger.debug(f"Decoded {self._path}: {len(frames)} frames")

    def _require_ready(self, op: str) -> np.ndarray:
        if self._released:
            raise BackendError(f"{op} on released handle", self._path)
        if self._frames is None:
            reason = "decode failed" if self._failed else "not ready"
            raise BackendError(f"{op}: {reason}", self._path)
        return self._frames

    def play(self) -> None:
        """Start playback from the current position."""
        frames = self._require_ready("play")
        with self._backend.lock:
            if self._pos >= len(frames):
                self._pos = 0
            self._playing = True
            self._ended = False
        self._backend.activate(self)

    def stop(self) -> None:
        """Stop playback."""
        if self._released:
            raise BackendError("stop on released handle", self._path)
        with self._backend.lock:
            self._playing = False
            self._ended = False

    def seek(self, position: float) -> None:
        """Move the playhead to `position` seconds."""
        if self._released:
            raise BackendError("seek on released handle", self._path)
        with self._backend.lock:
            frame = int(max(position, 0.0) * self._backend.sample_rate)
            if self._frames is not None:
                frame = min(frame, len(self._frames))
            self._pos = frame
            self._ended = False

    def mix_into(self, out: np.ndarray, frames: int) -> None:
        """Add the next `frames` frames to `out`. Called with the lock held."""
        if not self._playing or self._frames is None:
            return
        chunk = self._frames[self._pos:self._pos + frames]
        out[:len(chunk)] += chunk
        self._pos += len(chunk)
        if self._pos >= len(self._frames):
            self._playing = False
            self._ended = True

    def is_at_start(self) -> bool:
        return self._pos == 0

    def is_at_end(self) -> bool:
        return self._ended

    def is_ready(self) -> bool:
        return self._ready.is_set() and not self._released

    def is_playing(self) -> bool:
        return self._playing

    @property
    def path(self) -> str:
        return self._path

    @property
    def position(self) -> float:
        return self._pos / self._backend.sample_rate

    @property
    def duration(self) -> float:
        if self._frames is None:
            return 0.0
        return len(self._frames) / self._backend.sample_rate

    def release(self) -> None:
        """Stop and drop the decoded frames."""
        with self._backend.lock:
            self._playing = False
            self._released = True
            self._frames = None


class SoundDeviceBackend(IPlayerBackend):
    """
    Player backend on a single sounddevice OutputStream.

    Responsibilities:
    - Decode files on a worker thread
    - Mix all playing handles in the stream callback
    - Apply master volume and clip the mix
    """

    def __init__(self, config: Optional[SoundboardConfig] = None, device=None):
        """
        Initialize the backend.

        Args:
            config: Soundboard configuration (sample rate, channels, volume).
            device: Optional sounddevice output device id or name.
        """
        config = config or SoundboardConfig()
        self.sample_rate = config.sample_rate
        self.channels = config.channels
        self._blocksize = config.blocksize
        self._volume = validate_volume(config.volume)
        self._device = device
        self.lock = threading.Lock()
        self.worker = BackendWorker()
        self._stream: Optional[sd.OutputStream] = None
        self._handles: List[MixerSoundHandle] = []
        self._active: List[MixerSoundHandle] = []

    def initialize(self) -> None:
        """Start the decode worker and the output stream."""
        if self._stream is not None:
            return
        self.worker.start()
        try:
            self._stream = sd.OutputStream(
                samplerate=self.sample_rate,
                blocksize=self._blocksize,
                channels=self.channels,
                dtype="float32",
                device=self._device,
                callback=self._callback,
            )
            self._stream.start()
        except (sd.PortAudioError, ValueError) as e:
            self.worker.stop()
            self._stream = None
            raise BackendError(f"Cannot open output stream: {e}") from e
        logger.info(
            f"Audio stream started: {self.sample_rate}Hz, {self.channels}ch, "
            f"blocksize={self._blocksize}"
        )

    def open_sound(self, path: str) -> MixerSoundHandle:
        """Create a sound handle. Call open() on it to start decoding."""
        handle = MixerSoundHandle(self, path)
        self._handles.append(handle)
        return handle

    def activate(self, handle: MixerSoundHandle) -> None:
        with self.lock:
            if handle not in self._active:
                self._active.append(handle)

    def _callback(self, outdata: np.ndarray, frames: int, time_info, status) -> None:
        outdata.fill(0)
        with self.lock:
            for handle in self._active:
                handle.mix_into(outdata, frames)
            self._active = [h for h in self._active if h.is_playing()]
        if self._volume != 1.0:
            outdata *= self._volume
        np.clip(outdata, -1.0, 1.0, out=outdata)

    def shutdown(self) -> None:
        """Stop the stream, release all handles and stop the worker."""
        if self._stream is not None:
            try:
                self._stream.stop()
                self._stream.close()
            except sd.PortAudioError as e:
                logger.warning(f"Error closing output stream: {e}")
            self._stream = None

        for handle in self._handles:
            handle.release()
        self._handles.clear()
        with self.lock:
            self._active.clear()

        self.worker.stop()
        logger.info("SoundDeviceBackend shut down")
