"""Waveform envelope reduction for recorded buffers."""

from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from ..logger import get_logger

logger = get_logger(__name__)

Samples = Union[Sequence[float], np.ndarray]


class WaveformReducer:
    """Reduces a recording to a fixed number of denoised, normalized points."""

    DEFAULT_TARGET_POINTS = 100
    DEFAULT_NOISE_THRESHOLD = 0.01

    def __init__(
        self,
        target_points: int = DEFAULT_TARGET_POINTS,
        noise_threshold: float = DEFAULT_NOISE_THRESHOLD,
    ):
        if target_points < 1:
            raise ValueError("target_points must be at least 1")
        self.target_points = int(target_points)
        self.noise_threshold = float(noise_threshold)

    def reduce(self, samples: Samples, target_points: Optional[int] = None) -> np.ndarray:
        """Build the envelope for a buffer of signed float samples.

        Every stride-th sample is rectified; anything at or below the noise
        threshold becomes 0 and the rest is scaled so the loudest point is 1.

        Args:
            samples: Mono samples, nominally in [-1, 1]
            target_points: Approximate number of output points, defaults to the
                reducer's setting

        Returns:
            Read-only float32 array with values in [0, 1]; empty for empty input
        """
        points = self.target_points if target_points is None else int(target_points)
        if points < 1:
            raise ValueError("target_points must be at least 1")

        data = np.asarray(samples, dtype=np.float32).reshape(-1)
        if data.size == 0:
            return _freeze(np.zeros(0, dtype=np.float32))

        stride = max(data.size // points, 1)
        envelope = np.abs(data[::stride])
        envelope[envelope <= self.noise_threshold] = 0.0

        peak = float(envelope.max())
        if peak > 0:
            envelope = envelope / peak

        logger.debug(
            f"Reduced {data.size} samples to {envelope.size} points (stride {stride}, peak {peak:.4f})"
        )
        return _freeze(envelope.astype(np.float32, copy=False))


def _freeze(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def envelope_path(
    envelope: Samples, width: float, height: float
) -> List[Tuple[float, float]]:
    """Closed outline for drawing an envelope as a mirrored silhouette.

    The path starts at the left edge on the centre line (0, height/2), runs
    left to right across the top edge at height/2 - v*height/2, back right to
    left along the bottom edge at height/2 + v*height/2, and closes on the
    starting anchor.
    """
    values = np.asarray(envelope, dtype=np.float64).reshape(-1)
    if values.size == 0:
        return []

    middle = height / 2
    span = max(values.size - 1, 1)
    xs = [width * index / span for index in range(values.size)]

    top = [(x, middle - v * middle) for x, v in zip(xs, values)]
    bottom = [(x, middle + v * middle) for x, v in zip(reversed(xs), values[::-1])]
    anchor = (0.0, middle)
    return [anchor] + top + bottom + [anchor]
