"""
Chords Module - Chord Symbol Parsing and Triad Intervals

Chord symbols are a root spelling followed by a quality suffix:

    "G"     → G major
    "Am"    → A minor
    "Bdim"  → B diminished
    "Cmaj7" → C major 7 (voiced and played as its C major triad)

Anything that is not a root followed by a known suffix is kept whole as
a literal root with the empty (major) suffix. That literal usually fails
the note lookup later, which callers treat as "no chord" rather than as
a crash.
"""

import logging
import re
from typing import List, Optional, Tuple, Union

from fretlab.data.schema import (
    CHORD_FORMULAS,
    TRIAD_INTERVALS,
    TRIAD_QUALITY,
    ChordSymbol,
    Quality,
)
from fretlab.theory.notes import PitchLike, UnknownNoteError, as_pitch_class, note_name, normalize

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CHORD_SYMBOL_REGEX = re.compile(r"^([A-G][#b♯♭]?)(.*)$")

SUFFIX_TO_QUALITY = {
    "": Quality.MAJOR,
    "m": Quality.MINOR,
    "min": Quality.MINOR,
    "dim": Quality.DIMINISHED,
    "°": Quality.DIMINISHED,
    "7": Quality.DOMINANT_7,
    "maj7": Quality.MAJOR_7,
    "m7": Quality.MINOR_7,
    "sus2": Quality.SUS2,
    "sus4": Quality.SUS4,
}

ChordLike = Union[str, ChordSymbol]


# =============================================================================
# PARSING
# =============================================================================

def split_chord_symbol(symbol: str) -> Tuple[str, Quality]:
    """
    Split a chord symbol into its root spelling and quality.

    Never raises: unmatched input comes back as (symbol, MAJOR).

    Examples:
        split_chord_symbol("F#m")   → ("F#", Quality.MINOR)
        split_chord_symbol("Bbdim") → ("Bb", Quality.DIMINISHED)
        split_chord_symbol("Caug")  → ("Caug", Quality.MAJOR)
    """
    symbol = symbol.strip()
    match = CHORD_SYMBOL_REGEX.match(symbol)
    if match and match.group(2) in SUFFIX_TO_QUALITY:
        return match.group(1), SUFFIX_TO_QUALITY[match.group(2)]
    return symbol, Quality.MAJOR


def parse_chord(symbol: str) -> ChordSymbol:
    """
    Parse a chord symbol into root pitch class and quality.

    Raises:
        UnknownNoteError: If the root spelling is not a note
    """
    root, quality = split_chord_symbol(symbol)
    return ChordSymbol(root=normalize(root), quality=quality)


def try_parse_chord(symbol: str) -> Optional[ChordSymbol]:
    """Like parse_chord, but returns None for unreadable symbols."""
    try:
        return parse_chord(symbol)
    except UnknownNoteError:
        logger.debug("Unreadable chord symbol %r", symbol)
        return None


def as_chord(chord: ChordLike) -> ChordSymbol:
    if isinstance(chord, ChordSymbol):
        return chord
    return parse_chord(chord)


def make_chord(root: PitchLike, quality: Quality = Quality.MAJOR) -> ChordSymbol:
    return ChordSymbol(root=as_pitch_class(root), quality=quality)


# =============================================================================
# INTERVALS
# =============================================================================

def triad_intervals(quality: Quality) -> Tuple[int, int]:
    """
    Semitones from the root to the third and fifth.

    major (4, 7), minor (3, 7), diminished (3, 6). Extended qualities
    answer with the intervals of the triad they are built on.
    """
    return TRIAD_INTERVALS[TRIAD_QUALITY[quality]]


def chord_tones(chord: ChordLike) -> List[int]:
    """All pitch classes of the chord's full formula (7ths included)."""
    chord = as_chord(chord)
    return [(chord.root + interval) % 12 for interval in CHORD_FORMULAS[chord.quality]]


def chord_tone_names(chord: ChordLike) -> List[str]:
    return [note_name(pc) for pc in chord_tones(chord)]
