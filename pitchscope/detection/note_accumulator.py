import math
from collections import Counter
from enum import Enum
from typing import Dict, List, Optional, Set, Tuple

from ..errors import InvalidFrequency
from ..logger import get_logger
from ..note_types import NoteReading, PitchClass, PitchSample
from ..note_utils import name_of

logger = get_logger(__name__)


class AccumulatorState(Enum):
    IDLE = "idle"
    LISTENING = "listening"


class ConfirmationPolicy(Enum):
    """When a gated note becomes part of the confirmed set."""

    IMMEDIATE = "immediate"
    MAJORITY_VOTE = "majority_vote"


class NoteAccumulator:
    """
    Turns a noisy stream of pitch samples into the set of notes played during a session.

    Samples pass a debounce gate, a no-pitch filter and a noise gate before
    their pitch class is counted. With the majority-vote policy a note is only
    confirmed once it has been counted confirmation_threshold times.
    """

    DEFAULT_NOISE_THRESHOLD = 0.02
    DEFAULT_DEBOUNCE_SECONDS = 0.1
    DEFAULT_CONFIRMATION_THRESHOLD = 3
    # Timestamps arrive as float seconds; 0.3 - 0.2 < 0.1
    TIMESTAMP_TOLERANCE = 1e-9

    def __init__(
        self,
        noise_threshold: float = DEFAULT_NOISE_THRESHOLD,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        confirmation_policy: ConfirmationPolicy = ConfirmationPolicy.MAJORITY_VOTE,
        confirmation_threshold: int = DEFAULT_CONFIRMATION_THRESHOLD,
    ):
        if debounce_seconds < 0:
            raise ValueError("debounce_seconds must not be negative")
        if confirmation_threshold < 1:
            raise ValueError("confirmation_threshold must be at least 1")

        self._noise_threshold = float(noise_threshold)
        self._debounce_seconds = float(debounce_seconds)
        self._policy = ConfirmationPolicy(confirmation_policy)
        self._confirmation_threshold = int(confirmation_threshold)

        self._state = AccumulatorState.IDLE
        self._last_accepted_at: Optional[float] = None
        self._occurrences: Counter = Counter()
        self._confirmed: List[PitchClass] = []
        self._confirmed_lookup: Set[PitchClass] = set()

    @property
    def state(self) -> AccumulatorState:
        return self._state

    @property
    def is_listening(self) -> bool:
        return self._state is AccumulatorState.LISTENING

    @property
    def policy(self) -> ConfirmationPolicy:
        return self._policy

    @property
    def noise_threshold(self) -> float:
        return self._noise_threshold

    @property
    def confirmed_notes(self) -> Tuple[PitchClass, ...]:
        """Confirmed pitch classes in the order they were first confirmed."""
        return tuple(self._confirmed)

    @property
    def occurrences(self) -> Dict[PitchClass, int]:
        return dict(self._occurrences)

    def start(self) -> None:
        """Begin a session, discarding everything from the previous one."""
        if self.is_listening:
            logger.debug("Accumulator already listening")
            return
        # Counter and confirmed set are always reset together
        self._occurrences = Counter()
        self._confirmed = []
        self._confirmed_lookup = set()
        self._last_accepted_at = None
        self._state = AccumulatorState.LISTENING
        logger.debug("Accumulator listening")

    def stop(self) -> None:
        if not self.is_listening:
            return
        self._state = AccumulatorState.IDLE
        logger.debug(f"Accumulator stopped with {len(self._confirmed)} confirmed notes")

    def ingest(self, sample: PitchSample) -> Optional[NoteReading]:
        """Feed one pitch sample.

        Returns:
            The note reading if the sample cleared every gate, None if it was dropped.
        """
        if not self.is_listening:
            return None

        if (
            self._last_accepted_at is not None
            and sample.observed_at - self._last_accepted_at
            < self._debounce_seconds - self.TIMESTAMP_TOLERANCE
        ):
            return None
        self._last_accepted_at = sample.observed_at

        if sample.frequency <= 0:
            return None

        if not (math.isfinite(sample.amplitude) and sample.amplitude > self._noise_threshold):
            logger.debug(
                f"Gated {sample.frequency:.1f}Hz (amplitude {sample.amplitude:.4f} "
                f"not above {self._noise_threshold})"
            )
            return None

        try:
            reading = name_of(sample.frequency)
        except InvalidFrequency:
            logger.debug(f"Dropped unusable frequency: {sample.frequency}")
            return None

        pitch_class = reading.pitch_class
        self._occurrences[pitch_class] += 1
        count = self._occurrences[pitch_class]

        if pitch_class not in self._confirmed_lookup and self._is_confirmed(count):
            self._confirmed.append(pitch_class)
            self._confirmed_lookup.add(pitch_class)
            logger.info(f"Confirmed note: {pitch_class} ({count} occurrences)")

        return reading

    def _is_confirmed(self, count: int) -> bool:
        if self._policy is ConfirmationPolicy.IMMEDIATE:
            return True
        return count >= self._confirmation_threshold
