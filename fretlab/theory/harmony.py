"""
Harmony Module - Keys, Diatonic Chords and Roman Numerals

This module encodes the key-level music theory of the engine. It can:
    1. Derive the seven diatonic chords of any major (or natural minor) key
    2. Resolve Roman numerals such as 'vi' to chord symbols in a key
    3. Check whether chords belong to a key
    4. Find relative and parallel keys

Numerals are scale-degree positions, not semitone offsets: 'IV' is the
chord on the fourth note of the key's scale.
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple, Union

from fretlab.data.schema import ChordSymbol, Key, Quality
from fretlab.theory.chords import ChordLike, try_parse_chord
from fretlab.theory.notes import as_pitch_class, transpose
from fretlab.theory.scales import scale_notes

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Chord qualities for each scale degree
CHORD_QUALITIES: Dict[str, List[Quality]] = {
    "major": [
        Quality.MAJOR, Quality.MINOR, Quality.MINOR, Quality.MAJOR,
        Quality.MAJOR, Quality.MINOR, Quality.DIMINISHED,
    ],
    "minor": [
        Quality.MINOR, Quality.DIMINISHED, Quality.MAJOR, Quality.MINOR,
        Quality.MINOR, Quality.MAJOR, Quality.MAJOR,
    ],
}

# Roman numeral labels, one per scale degree
ROMAN_NUMERALS: Dict[str, List[str]] = {
    "major": ["I", "ii", "iii", "IV", "V", "vi", "vii°"],
    "minor": ["i", "ii°", "III", "iv", "v", "VI", "VII"],
}

# Spellings people type when the degree sign is not on their keyboard
NUMERAL_ALIASES: Dict[str, Dict[str, int]] = {
    "major": {"vii": 6},
    "minor": {"ii": 1},
}

NUMERAL_TO_DEGREE: Dict[str, Dict[str, int]] = {
    mode: {
        **{numeral: index for index, numeral in enumerate(numerals)},
        **NUMERAL_ALIASES[mode],
    }
    for mode, numerals in ROMAN_NUMERALS.items()
}

KeyLike = Union[str, Key]


# =============================================================================
# KEYS
# =============================================================================

def as_key(key: KeyLike, mode: Optional[str] = None) -> Key:
    """
    Build a Key from a Key, a root name, or a key name.

    Examples:
        as_key("G")         → G major
        as_key("Am")        → A minor
        as_key("Eb minor")  → D# minor
        as_key("D", "minor") → D minor
    """
    if isinstance(key, Key):
        return key if mode is None else Key(root=key.root, mode=mode)

    text = key.strip()
    parts = text.split()
    if len(parts) == 2:
        text, mode = parts[0], mode or parts[1]
    elif len(text) > 1 and text.endswith("m"):
        text, mode = text[:-1], mode or "minor"

    return Key(root=as_pitch_class(text), mode=mode or "major")


def diatonic_chords(key: KeyLike, mode: Optional[str] = None) -> List[ChordSymbol]:
    """
    Get all 7 diatonic chords for a key, in scale-degree order.

    Example:
        >>> [c.name for c in diatonic_chords("C")]
        ['C', 'Dm', 'Em', 'F', 'G', 'Am', 'Bdim']
    """
    key = as_key(key, mode)
    scale = scale_notes(key.root, key.mode)
    return [
        ChordSymbol(root=root, quality=quality)
        for root, quality in zip(scale, CHORD_QUALITIES[key.mode])
    ]


def get_chord_from_degree(key: KeyLike, degree: int) -> ChordSymbol:
    """Get a diatonic chord by its 1-based scale degree."""
    if not 1 <= degree <= 7:
        raise ValueError(f"Degree must be 1-7. Got: {degree}")
    return diatonic_chords(key)[degree - 1]


def roman_numerals(mode: str = "major") -> List[str]:
    return list(ROMAN_NUMERALS[mode.lower()])


# =============================================================================
# NUMERAL RESOLUTION
# =============================================================================

def resolve_numeral(key: KeyLike, numeral: str) -> Optional[ChordSymbol]:
    """
    Resolve a Roman numeral to the diatonic chord it names in a key.

    Returns None for numerals the key's table does not contain; callers
    drop those instead of passing a placeholder on to playback.

    Example:
        >>> resolve_numeral("G", "vi").name
        'Em'
    """
    key = as_key(key)
    index = NUMERAL_TO_DEGREE[key.mode].get(numeral.strip())
    if index is None:
        return None
    return diatonic_chords(key)[index]


def resolve_numerals(key: KeyLike, numerals: Sequence[str]) -> List[ChordSymbol]:
    """Resolve a numeral list in order, dropping numerals with no mapping."""
    key = as_key(key)
    chords = []
    for numeral in numerals:
        chord = resolve_numeral(key, numeral)
        if chord is None:
            logger.debug("Dropping numeral %r: not in %s", numeral, key.name)
            continue
        chords.append(chord)
    return chords


def numeral_for_chord(key: KeyLike, chord: ChordLike) -> Optional[str]:
    """Reverse lookup: the numeral a diatonic chord has in the key."""
    key = as_key(key)
    if isinstance(chord, str):
        chord = try_parse_chord(chord)
        if chord is None:
            return None
    for numeral, diatonic in zip(ROMAN_NUMERALS[key.mode], diatonic_chords(key)):
        if diatonic.root == chord.root and diatonic.quality == chord.triad_quality:
            return numeral
    return None


# =============================================================================
# VALIDATION
# =============================================================================

def is_chord_in_key(chord: ChordLike, key: KeyLike) -> bool:
    """Check if a chord's triad belongs to a given key."""
    return numeral_for_chord(key, chord) is not None


def validate_progression(chords: Sequence[ChordLike], key: KeyLike) -> Tuple[bool, List[str]]:
    """Validate a chord progression against a key."""
    invalid = [str(c) for c in chords if not is_chord_in_key(c, key)]
    return (len(invalid) == 0, invalid)


# =============================================================================
# RELATED KEYS
# =============================================================================

def get_relative_key(key: KeyLike) -> Key:
    """Get the relative major/minor of a key."""
    key = as_key(key)
    if key.mode == "major":
        return Key(root=transpose(key.root, 9), mode="minor")
    return Key(root=transpose(key.root, 3), mode="major")


def get_parallel_key(key: KeyLike) -> Key:
    """Get the parallel major/minor of a key."""
    key = as_key(key)
    new_mode = "minor" if key.mode == "major" else "major"
    return Key(root=key.root, mode=new_mode)
