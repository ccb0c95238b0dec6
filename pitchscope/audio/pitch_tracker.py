"""aubio-backed pitch estimation feeding the pitch engine."""

from __future__ import annotations

from typing import ClassVar, List, Tuple

import aubio
import numpy as np

from ..core.interfaces import IPitchTracker
from ..logger import get_logger

logger = get_logger(__name__)


class AubioPitchTracker(IPitchTracker):
    """Splits audio chunks into hop-sized frames and estimates one pitch per frame."""

    MIN_FREQUENCY: ClassVar[float] = 30.0  # Hz - below this is probably noise
    MAX_FREQUENCY: ClassVar[float] = 2000.0  # Hz - above any open string we track

    def __init__(
        self,
        sample_rate: int = 44100,
        win_size: int = 2048,
        hop_size: int = 512,
        method: str = "yin",
        tolerance: float = 0.8,
        min_confidence: float = 0.5,
    ) -> None:
        """Initialize the tracker.

        Args:
            sample_rate: Audio sample rate in Hz
            win_size: Analysis window size; large enough for low E at 82 Hz
            hop_size: Samples between consecutive estimates
            method: aubio pitch method ('yin', 'yinfft', ...)
            tolerance: aubio pitch tolerance (0.0 to 1.0)
            min_confidence: Below this aubio confidence a frame reports no pitch
        """
        if hop_size < 1 or win_size < hop_size:
            raise ValueError("win_size must be at least hop_size and hop_size positive")

        self._sample_rate = int(sample_rate)
        self._win_size = int(win_size)
        self._hop_size = int(hop_size)
        self._min_confidence = float(min_confidence)
        self._pending = np.zeros(0, dtype=np.float32)

        self._pitch_detector = aubio.pitch(method, self._win_size, self._hop_size, self._sample_rate)
        self._pitch_detector.set_unit("Hz")
        self._pitch_detector.set_tolerance(float(tolerance))

        logger.info(
            f"Pitch tracker initialized: method={method}, sample_rate={self._sample_rate}, "
            f"win_size={self._win_size}, hop_size={self._hop_size}"
        )

    @property
    def hop_size(self) -> int:
        return self._hop_size

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    def process(self, audio_data: np.ndarray) -> List[Tuple[float, float]]:
        """Estimate (frequency, amplitude) for every complete frame in the chunk.

        Leftover samples are kept for the next call. Frequency is 0.0 when
        aubio is not confident or the pitch is outside the tracked range;
        amplitude is the frame's RMS.
        """
        data = np.asarray(audio_data, dtype=np.float32)
        if data.ndim > 1:
            data = data[:, 0]
        if self._pending.size:
            data = np.concatenate([self._pending, data])

        estimates = []
        usable = data.size - data.size % self._hop_size
        for start in range(0, usable, self._hop_size):
            frame = np.ascontiguousarray(data[start : start + self._hop_size])
            estimates.append(self._estimate(frame))

        self._pending = data[usable:].copy()
        return estimates

    def reset(self) -> None:
        """Drop any buffered partial frame."""
        self._pending = np.zeros(0, dtype=np.float32)

    def _estimate(self, frame: np.ndarray) -> Tuple[float, float]:
        amplitude = float(np.sqrt(np.mean(frame**2)))
        pitch = float(self._pitch_detector(frame)[0])
        confidence = float(self._pitch_detector.get_confidence())

        if (
            confidence < self._min_confidence
            or pitch < self.MIN_FREQUENCY
            or pitch > self.MAX_FREQUENCY
        ):
            return 0.0, amplitude

        logger.debug(f"Pitch: {pitch:.2f} Hz, Confidence: {confidence:.4f}, RMS: {amplitude:.4f}")
        return pitch, amplitude
