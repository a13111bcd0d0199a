"""
Notes Module - The 12-Tone Pitch-Class Universe

Every other part of the engine speaks in pitch classes: integers 0-11
with C = 0. This module converts between those integers and note names,
folds flat spellings onto their sharp equivalents, and does the modulo-12
arithmetic used for transposition.
"""

from typing import Union


# =============================================================================
# CONSTANTS
# =============================================================================

# The 12 notes in Western music, using sharps as the canonical spelling
CHROMATIC_SCALE = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Enharmonic spellings folded onto the canonical sharp names
FLAT_TO_SHARP = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "Cb": "B",
    "Fb": "E",
    "E#": "F",
    "B#": "C",
}

NATURAL_NOTES = ["C", "D", "E", "F", "G", "A", "B"]

PitchLike = Union[int, str]


class UnknownNoteError(ValueError):
    """Raised when a note name cannot be mapped to a pitch class."""


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def normalize_note(note: str) -> str:
    """
    Convert a note name to its canonical sharp spelling.

    Accepts either case for the letter ('bb' → 'A#') and the unicode
    accidentals ♯ and ♭.

    Raises:
        UnknownNoteError: If the name is not one of the 12 pitch classes
    """
    if not isinstance(note, str):
        raise UnknownNoteError(f"Note name must be a string. Got: {note!r}")

    cleaned = note.strip().replace("♯", "#").replace("♭", "b")
    if len(cleaned) == 1:
        cleaned = cleaned.upper()
    elif len(cleaned) == 2:
        cleaned = cleaned[0].upper() + cleaned[1].lower()
    else:
        raise UnknownNoteError(f"Invalid note format: '{note}'")

    cleaned = FLAT_TO_SHARP.get(cleaned, cleaned)

    if cleaned not in CHROMATIC_SCALE:
        raise UnknownNoteError(f"Unknown note: '{note}'. Valid notes are: {CHROMATIC_SCALE}")

    return cleaned


def normalize(note: str) -> int:
    """Map any accepted spelling to its pitch class (0-11)."""
    return CHROMATIC_SCALE.index(normalize_note(note))


def note_name(pitch_class: int) -> str:
    """Canonical sharp name of a pitch class."""
    return CHROMATIC_SCALE[pitch_class % 12]


def as_pitch_class(value: PitchLike) -> int:
    """Accept either a pitch class or a note name."""
    if isinstance(value, bool):
        raise UnknownNoteError(f"Not a note: {value!r}")
    if isinstance(value, int):
        return value % 12
    return normalize(value)


def transpose(pitch_class: int, semitones: int) -> int:
    """Move a pitch class by a number of semitones, wrapping at the octave."""
    return (pitch_class + semitones) % 12


def interval_between(lower: int, upper: int) -> int:
    """Ascending distance in semitones from one pitch class to another."""
    return (upper - lower) % 12


def is_natural(note: str) -> bool:
    """True for the seven notes without an accidental."""
    return normalize_note(note) in NATURAL_NOTES and len(note.strip()) == 1
