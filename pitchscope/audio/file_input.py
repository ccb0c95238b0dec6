import threading
import time
from typing import Callable, Optional, Tuple

import numpy as np
import soundfile as sf

from ..core.interfaces import IAudioProvider
from ..logger import get_logger

logger = get_logger(__name__)


def load_recording(file_path: str) -> Tuple[np.ndarray, int]:
    """Read a finished recording as mono float32 samples.

    Multi-channel files contribute their first channel only.

    Returns:
        (samples, sample_rate)
    """
    data, sample_rate = sf.read(file_path, dtype="float32", always_2d=True)
    logger.info(f"Loaded {data.shape[0]} frames at {sample_rate}Hz from {file_path}")
    return np.ascontiguousarray(data[:, 0]), int(sample_rate)


class WavFileAudioProvider(IAudioProvider):
    """Provides audio data by reading from a sound file."""

    def __init__(
        self,
        file_path: str,
        chunk_size: int = 512,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = True,
    ):
        self._file_path = file_path
        self._chunk_size = chunk_size
        self._loop = loop
        self._gain = gain
        self._realtime = realtime
        self._on_data_callback: Optional[Callable[[np.ndarray, float], None]] = None
        self._is_running = False
        self._thread: Optional[threading.Thread] = None

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels

    def start(self, on_data_callback: Callable[[np.ndarray, float], None]) -> None:
        if self._is_running:
            return

        self._on_data_callback = on_data_callback
        self._is_running = True
        self._thread = threading.Thread(target=self._stream_data, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._is_running = False
        if self._thread and self._thread is not threading.current_thread():
            self._thread.join()
        self._thread = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until a non-looping file has been fully streamed."""
        if self._thread:
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        """Returns True if the provider is currently streaming data."""
        return self._is_running

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels

    def chunks(self):
        """Yield (mono chunk, position in seconds) for the whole file without pacing."""
        position = 0
        with sf.SoundFile(self._file_path) as f:
            for block in f.blocks(blocksize=self._chunk_size, dtype="float32", always_2d=True):
                mono = block[:, 0] * self._gain if self._gain != 1.0 else block[:, 0]
                yield np.ascontiguousarray(mono), position / self._sample_rate
                position += block.shape[0]

    def _stream_data(self) -> None:
        try:
            while self._is_running:
                for chunk, position in self.chunks():
                    if not self._is_running:
                        break
                    if self._on_data_callback:
                        timestamp = time.monotonic() if self._realtime else position
                        self._on_data_callback(chunk, timestamp)
                    if self._realtime:
                        # Simulate real-time playback speed
                        time.sleep(chunk.size / self._sample_rate)
                if not self._loop:
                    break
        except (OSError, RuntimeError) as e:
            logger.error(f"Error streaming {self._file_path}: {e}")
        finally:
            self._is_running = False


def sample_rate_of(file_path: str) -> int:
    """Sample rate of a sound file, read from its header."""
    return int(sf.info(file_path).samplerate)
