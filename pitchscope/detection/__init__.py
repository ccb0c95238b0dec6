"""Pitch interpretation components: note accumulation, tuning, chords and waveforms."""

from .chords import CHORD_TABLE, UNKNOWN_CHORD, ChordIdentifier
from .note_accumulator import AccumulatorState, ConfirmationPolicy, NoteAccumulator
from .tuner import (
    GUITAR_TUNING,
    UKULELE_TUNING,
    ReferenceTuning,
    TunerMatcher,
    describe,
    meter_fill,
    tuning_for,
)
from .waveform import WaveformReducer, envelope_path

__all__ = [
    "CHORD_TABLE",
    "UNKNOWN_CHORD",
    "ChordIdentifier",
    "AccumulatorState",
    "ConfirmationPolicy",
    "NoteAccumulator",
    "GUITAR_TUNING",
    "UKULELE_TUNING",
    "ReferenceTuning",
    "TunerMatcher",
    "describe",
    "meter_fill",
    "tuning_for",
    "WaveformReducer",
    "envelope_path",
]
