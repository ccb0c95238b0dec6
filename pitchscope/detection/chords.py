"""Chord guesses from the set of notes heard in a session."""

from typing import FrozenSet, Iterable, Optional, Sequence, Tuple

from ..logger import get_logger
from ..note_types import PitchClass
from ..note_utils import parse_pitch_class

logger = get_logger(__name__)

UNKNOWN_CHORD = "Unknown Chord"

ChordShape = Tuple[str, FrozenSet[PitchClass]]


def chord_shape(name: str, notes: Iterable[str]) -> ChordShape:
    return name, frozenset(parse_pitch_class(note) for note in notes)


# Order matters: the first chord whose notes are all present wins
CHORD_TABLE: Tuple[ChordShape, ...] = (
    chord_shape("C Major", ["C", "E", "G"]),
    chord_shape("G Major", ["G", "B", "D"]),
    chord_shape("D Major", ["D", "F#", "A"]),
    chord_shape("A Minor", ["A", "C", "E"]),
)


class ChordIdentifier:
    """
    Matches a note set against an ordered table of chord shapes.

    Extra notes are tolerated, so {C, E, G, A} still reads as C Major.
    """

    def __init__(self, table: Optional[Sequence[ChordShape]] = None):
        self._table: Tuple[ChordShape, ...] = tuple(table) if table is not None else CHORD_TABLE

    @property
    def table(self) -> Tuple[ChordShape, ...]:
        return self._table

    def identify(self, notes: Iterable) -> str:
        """Return the first chord fully contained in notes, or 'Unknown Chord'.

        Args:
            notes: PitchClass values or note names such as 'C', 'Bb3', 'F#'
        """
        heard = frozenset(parse_pitch_class(note) for note in notes)
        for name, required in self._table:
            if required <= heard:
                logger.debug(f"Chord {name} matched notes {sorted(n.value for n in heard)}")
                return name
        return UNKNOWN_CHORD
