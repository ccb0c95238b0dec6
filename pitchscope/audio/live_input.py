"""Live microphone/instrument input using sounddevice."""

import time
from typing import Callable, Optional

import numpy as np
import sounddevice as sd

from ..core.interfaces import IAudioProvider
from ..logger import get_logger

logger = get_logger(__name__)


class LiveAudioProvider(IAudioProvider):
    """Provides live audio from an input device using sounddevice."""

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: int = 44100,
        channels: int = 1,
        chunk_size: int = 512,
    ):
        self._device_id = device_id
        self._sample_rate = sample_rate
        self._channels = channels
        self._chunk_size = chunk_size
        self._stream: Optional[sd.InputStream] = None
        self._on_data_callback: Optional[Callable[[np.ndarray, float], None]] = None

    def start(self, on_data_callback: Callable[[np.ndarray, float], None]) -> None:
        if self._stream is not None:
            logger.warning("Audio input already running")
            return

        self._on_data_callback = on_data_callback
        self._stream = sd.InputStream(
            device=self._device_id,
            channels=self._channels,
            samplerate=self._sample_rate,
            blocksize=self._chunk_size,
            callback=self._audio_callback,
            dtype="float32",
        )
        self._stream.start()
        logger.info(
            f"Audio input started: device={self._device_id}, rate={self._sample_rate}Hz, "
            f"block={self._chunk_size}"
        )

    def stop(self) -> None:
        if self._stream is None:
            return
        try:
            self._stream.stop()
            self._stream.close()
            logger.info("Audio input stopped")
        finally:
            self._stream = None

    @property
    def is_running(self) -> bool:
        return self._stream is not None

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def _audio_callback(self, indata: np.ndarray, _frames: int, _time_info, status) -> None:
        """Runs on the PortAudio thread; keep it short and non-blocking."""
        if status:
            logger.warning(f"Audio callback status: {status}")

        audio_data = indata[:, 0].copy() if indata.ndim > 1 else indata.copy()
        if self._on_data_callback:
            self._on_data_callback(audio_data, time.monotonic())
