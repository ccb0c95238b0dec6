"""Closest-string matching and cents deviation for the tuner readout."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import ClassVar, Iterable, Tuple

import numpy as np

from ..errors import EmptyTuningTable, InvalidFrequency
from ..logger import get_logger
from ..note_types import ReferenceString, TuningReadout

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReferenceTuning:
    """Open-string target pitches for one instrument, lowest string first."""

    name: str
    strings: Tuple[ReferenceString, ...]

    def __post_init__(self):
        if not self.strings:
            raise EmptyTuningTable(f"Tuning '{self.name}' has no reference strings")

    @classmethod
    def from_pairs(cls, name: str, pairs: Iterable[Tuple[str, float]]) -> "ReferenceTuning":
        """Build a tuning from (label, frequency) pairs."""
        return cls(name, tuple(ReferenceString(label, float(freq)) for label, freq in pairs))

    def __len__(self):
        return len(self.strings)

    def __iter__(self):
        return iter(self.strings)


GUITAR_TUNING = ReferenceTuning.from_pairs(
    "guitar",
    [
        ("E2", 82.41),
        ("A2", 110.0),
        ("D3", 146.83),
        ("G3", 196.0),
        ("B3", 246.94),
        ("E4", 329.63),
    ],
)

# Re-entrant tuning, listed in string order rather than pitch order
UKULELE_TUNING = ReferenceTuning.from_pairs(
    "ukulele",
    [
        ("G4", 392.0),
        ("C4", 261.63),
        ("E4", 329.63),
        ("A4", 440.0),
    ],
)


def tuning_for(is_ukulele: bool) -> ReferenceTuning:
    """Select the shipped tuning table for the instrument mode flag."""
    return UKULELE_TUNING if is_ukulele else GUITAR_TUNING


def cents_between(frequency: float, reference: float) -> float:
    """Signed distance in cents from reference to frequency (100 cents = 1 semitone)."""
    return float(1200 * np.log2(frequency / reference))


class TunerMatcher:
    """Finds the closest reference string and how far off it the pitch is."""

    IN_TUNE_CENTS: ClassVar[float] = 5.0

    def match(self, frequency: float, tuning: ReferenceTuning) -> TuningReadout:
        """Match a frequency against a tuning table.

        Args:
            frequency: Detected frequency in Hz
            tuning: Reference tuning to match against

        Returns:
            TuningReadout for the single closest reference string. Ties go to
            the string listed first.

        Raises:
            InvalidFrequency: If frequency is not positive and finite
            EmptyTuningTable: If the tuning has no strings
        """
        if not math.isfinite(frequency) or frequency <= 0:
            raise InvalidFrequency(frequency)
        if not tuning.strings:
            raise EmptyTuningTable(f"Tuning '{tuning.name}' has no reference strings")

        closest = tuning.strings[0]
        min_difference = abs(frequency - closest.frequency)
        for string in tuning.strings[1:]:
            difference = abs(frequency - string.frequency)
            if difference < min_difference:
                min_difference = difference
                closest = string

        cents = cents_between(frequency, closest.frequency)
        readout = TuningReadout(
            cents=cents,
            label=closest.label,
            is_in_tune=abs(cents) < self.IN_TUNE_CENTS,
            frequency=float(frequency),
            reference_frequency=closest.frequency,
        )
        logger.debug(
            f"Frequency: {frequency:.2f}Hz, closest string: {closest.label}, "
            f"cents off: {cents:+.1f}"
        )
        return readout


def meter_fill(cents: float, max_cents: float = 50.0) -> Tuple[float, float]:
    """Fraction of the flat and sharp meter bars to fill for a deviation.

    Both bars stay empty while the pitch is in tune; otherwise only the bar on
    the side of the deviation fills, saturating at max_cents.

    Returns:
        (flat_fill, sharp_fill), each in [0, 1]
    """
    if abs(cents) < TunerMatcher.IN_TUNE_CENTS:
        return 0.0, 0.0
    fill = min(abs(cents) / max_cents, 1.0)
    if cents < 0:
        return fill, 0.0
    return 0.0, fill


def describe(readout: TuningReadout) -> str:
    """Human readable deviation, e.g. '12.3 cents sharp'."""
    if readout.is_in_tune:
        return "in tune"
    direction = "flat" if readout.cents < 0 else "sharp"
    return f"{abs(readout.cents):.1f} cents {direction}"
