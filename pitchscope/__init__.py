"""pitchscope - turns monophonic pitch estimates into notes, chords and a tuner readout."""

from .core.engine import PitchEngine
from .detection import (
    GUITAR_TUNING,
    UKULELE_TUNING,
    ChordIdentifier,
    ConfirmationPolicy,
    NoteAccumulator,
    TunerMatcher,
    WaveformReducer,
)
from .errors import EmptyTuningTable, InvalidFrequency, PitchscopeError
from .note_types import EngineSnapshot, NoteReading, PitchClass, PitchSample, TuningReadout
from .note_utils import name_of

__version__ = "0.1.0"

__all__ = [
    "PitchEngine",
    "GUITAR_TUNING",
    "UKULELE_TUNING",
    "ChordIdentifier",
    "ConfirmationPolicy",
    "NoteAccumulator",
    "TunerMatcher",
    "WaveformReducer",
    "EmptyTuningTable",
    "InvalidFrequency",
    "PitchscopeError",
    "EngineSnapshot",
    "NoteReading",
    "PitchClass",
    "PitchSample",
    "TuningReadout",
    "name_of",
]
