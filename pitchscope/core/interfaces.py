"""Defines the core interfaces for the pitchscope audio front end."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, List, Tuple

import numpy as np


class IAudioProvider(ABC):
    """Interface for sources of mono float32 audio chunks."""

    @abstractmethod
    def start(self, on_data_callback: Callable[[np.ndarray, float], None]) -> None:
        """Start streaming, calling the callback with (chunk, timestamp)."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop streaming."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass

    @property
    @abstractmethod
    def is_running(self) -> bool:
        """True while audio is being delivered."""
        pass


class IPitchTracker(ABC):
    """Interface for monophonic pitch estimators."""

    @abstractmethod
    def process(self, audio_data: np.ndarray) -> List[Tuple[float, float]]:
        """Return one (frequency, amplitude) estimate per analysis frame in the chunk."""
        pass

    @property
    @abstractmethod
    def hop_size(self) -> int:
        """Number of samples consumed per estimate."""
        pass

    @abstractmethod
    def reset(self) -> None:
        """Forget buffered audio before a new session."""
        pass
