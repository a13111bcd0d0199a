"""
Progressions Module - Common Progressions and Jam Suggestions

The progression table and the songwriting suggestions are data
(progressions.yaml); this module looks them up, realizes them in a key,
and lays out a full song plan around a progression.
"""

from typing import List, Optional, Tuple

from fretlab.data.loader import load_progression_catalog
from fretlab.data.schema import ChordSymbol, JamSuggestion, ProgressionEntry
from fretlab.theory.harmony import KeyLike, resolve_numerals


def list_progressions() -> List[ProgressionEntry]:
    return list(load_progression_catalog().progressions)


def get_progression(progression_id: str) -> Optional[ProgressionEntry]:
    """Find a catalog progression by id ('1-4-5-1') or numerals ('I-IV-V-I')."""
    for entry in load_progression_catalog().progressions:
        if progression_id in (entry.id, "-".join(entry.numerals)):
            return entry
    return None


def progression_chords(progression_id: str, key: KeyLike) -> List[ChordSymbol]:
    """
    Realize a catalog progression in a key.

    Example:
        >>> [c.name for c in progression_chords("1-5-6-4", "C")]
        ['C', 'G', 'Am', 'F']
    """
    entry = get_progression(progression_id)
    if entry is None:
        return []
    return resolve_numerals(key, entry.numerals)


def get_suggestions(progression: str) -> JamSuggestion:
    """
    Bridge, variation and extension ideas for a progression.

    Progressions without an entry (including free-form ones like
    'Cmaj7-Am7-Fmaj7-G7') get the generic 'custom' advice.
    """
    suggestions = load_progression_catalog().suggestions
    entry = get_progression(progression)
    label = "-".join(entry.numerals) if entry else progression
    return suggestions.get(label, suggestions["custom"])


def song_structure(progression: str) -> List[Tuple[str, str]]:
    """
    Lay out a full song around a progression as (section, chords) pairs.

    The verse carries the progression itself; the pre-chorus, chorus and
    bridge borrow the first variation, extension and bridge idea.
    """
    entry = get_progression(progression)
    label = "-".join(entry.numerals) if entry else progression
    ideas = get_suggestions(progression)

    verse = f"{label} (x2)"
    pre_chorus = ideas.variations[0]
    chorus = ideas.extensions[0]

    return [
        ("Intro", label),
        ("Verse", verse),
        ("Pre-Chorus", pre_chorus),
        ("Chorus", chorus),
        ("Verse", verse),
        ("Pre-Chorus", pre_chorus),
        ("Chorus", chorus),
        ("Bridge", ideas.bridge[0]),
        ("Chorus", chorus),
        ("Outro", label),
    ]
