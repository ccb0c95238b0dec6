"""Utility functions for working with musical notes and frequencies."""

import math
import numbers
import re

import numpy as np

from .errors import InvalidFrequency
from .logger import get_logger
from .note_types import NoteReading, PitchClass

# Get logger for this module
logger = get_logger(__name__)

A4_FREQUENCY = 440.0
A4_MIDI = 69

SHARP_TO_FLAT = {
    "C#": "Db",
    "D#": "Eb",
    "F#": "Gb",
    "G#": "Ab",
    "A#": "Bb",
}
FLAT_TO_SHARP = {v: k for k, v in SHARP_TO_FLAT.items()}

# Spellings that fall outside the 12 sharp names
ENHARMONIC_TO_SHARP = {
    "B#": "C",
    "E#": "F",
    "Cb": "B",
    "Fb": "E",
}

# Note letter, optional accidental, optional (possibly negative) octave
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#b]?)(-?[0-9]*)$")


def midi_number(freq: float) -> float:
    """Return the fractional MIDI note number for a frequency (A4 = 69)."""
    return 12 * np.log2(freq / A4_FREQUENCY) + A4_MIDI


def name_of(freq: float) -> NoteReading:
    """Map a frequency to its nearest pitch class and octave.

    Args:
        freq: Frequency in Hz, must be positive and finite

    Returns:
        NoteReading with the pitch class and SPN octave (C4 is middle C)

    Raises:
        InvalidFrequency: If freq is not a positive finite number
    """
    if not isinstance(freq, numbers.Real) or not math.isfinite(freq):
        raise InvalidFrequency(freq)
    if freq <= 0:
        raise InvalidFrequency(freq)

    rounded = int(round(midi_number(freq)))
    index = ((rounded % 12) + 12) % 12
    octave = math.floor(rounded / 12) - 1
    return NoteReading(PitchClass.from_index(index), octave)


def get_note_name(freq: float, use_flats: bool = False) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), or '---' if
        the frequency is not usable
    """
    try:
        reading = name_of(freq)
    except InvalidFrequency:
        logger.debug(f"Cannot name frequency: {freq}")
        return "---"

    note_name = reading.pitch_class.value
    if use_flats and note_name in SHARP_TO_FLAT:
        note_name = SHARP_TO_FLAT[note_name]
    return f"{note_name}{reading.octave}"


def convert_note_notation(note_name: str, to_flats: bool = False) -> str:
    """Convert a note name between sharp and flat notation.

    Args:
        note_name: The note name to convert (e.g., 'F#2' or 'Gb2')
        to_flats: If True, convert to flats (e.g., 'Gb2'), otherwise to sharps (e.g., 'F#2')

    Returns:
        str: The converted note name, or original if no conversion needed or invalid

    Examples:
        >>> convert_note_notation('F#2', to_flats=True)
        'Gb2'
        >>> convert_note_notation('Gb2', to_flats=False)
        'F#2'
    """
    if not note_name:
        return ""

    match = NOTE_PATTERN.match(note_name.strip())
    if not match:
        return note_name

    letter, accidental, octave = match.groups()
    note_part = letter.upper() + accidental
    if to_flats and note_part in SHARP_TO_FLAT:
        return f"{SHARP_TO_FLAT[note_part]}{octave}"
    if not to_flats and note_part in FLAT_TO_SHARP:
        return f"{FLAT_TO_SHARP[note_part]}{octave}"
    return note_name


def parse_pitch_class(note) -> PitchClass:
    """Normalize a note name to its pitch class, ignoring octave.

    Accepts sharps, flats, enharmonic spellings and octave suffixes
    ('A', 'Bb3', 'E#', 'c#4').

    Raises:
        ValueError: If the text is not a note name
    """
    if isinstance(note, PitchClass):
        return note

    text = str(note).strip()
    match = NOTE_PATTERN.match(text)
    if not match:
        raise ValueError(f"Not a note name: {note!r}")

    letter, accidental, _octave = match.groups()
    name = letter.upper() + accidental
    name = ENHARMONIC_TO_SHARP.get(name, name)
    name = FLAT_TO_SHARP.get(name, name)
    return PitchClass(name)
