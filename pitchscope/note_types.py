"""Type definitions for the pitchscope project."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

import numpy as np


class PitchClass(str, Enum):
    """One of the 12 note names, independent of octave."""

    C = "C"
    C_SHARP = "C#"
    D = "D"
    D_SHARP = "D#"
    E = "E"
    F = "F"
    F_SHARP = "F#"
    G = "G"
    G_SHARP = "G#"
    A = "A"
    A_SHARP = "A#"
    B = "B"

    def __str__(self):
        return self.value

    @classmethod
    def from_index(cls, index: int) -> "PitchClass":
        """Return the pitch class for a chromatic index (0 = C)."""
        return _CHROMATIC[index % 12]


_CHROMATIC: Tuple[PitchClass, ...] = tuple(PitchClass)


@dataclass(frozen=True)
class PitchSample:
    """A single frame reported by the pitch detection front end."""

    frequency: float  # Hz, <= 0 means no pitch this frame
    amplitude: float  # Normalized linear RMS (0-1)
    observed_at: float  # Seconds, monotonic


@dataclass(frozen=True)
class NoteReading:
    """A pitch class paired with its octave."""

    pitch_class: PitchClass
    octave: int

    def __str__(self):
        return f"{self.pitch_class.value}{self.octave}"


@dataclass(frozen=True)
class ReferenceString:
    """Target pitch of one open string."""

    label: str  # e.g. 'E2'
    frequency: float  # Hz


@dataclass(frozen=True)
class TuningReadout:
    """Latest tuner result for the closest reference string."""

    cents: float
    label: str
    is_in_tune: bool
    frequency: float = 0.0
    reference_frequency: float = 0.0


@dataclass(frozen=True)
class EngineSnapshot:
    """Everything the presentation layer shows, published as one value."""

    is_listening: bool = False
    confirmed_notes: Tuple[PitchClass, ...] = ()
    chord: str = "Unknown Chord"
    tuning: Optional[TuningReadout] = None
    waveform: np.ndarray = field(
        default_factory=lambda: np.zeros(0, dtype=np.float32), compare=False
    )
