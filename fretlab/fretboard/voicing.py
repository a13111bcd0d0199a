"""
Voicing Module - Chord Symbols to Fretboard Diagrams

Every chord diagram the engine produces comes from one routine:
transpose_shape() slides a movable template (shapes.yaml) so its root
lands on a given fret, drops anything that falls off the neck, and then
decides what to do with the strings the template leaves alone.

find_voicing() chooses which template and which fret:

    1. Required tones are {root, third, fifth} of the chord's triad
    2. Anchor strings are tried lowest first (low E, then A). For each
       anchor that has a template for the triad quality, frets 0..12
       are swept and the first fret sounding the root wins
    3. The winning template is transposed to that fret
    4. Untouched strings sound open if their open note is a chord tone,
       otherwise they are muted

There is no search for alternative, higher voicings: the lowest fret on
the first anchor string always wins.

Usage:
    from fretlab.fretboard.voicing import find_voicing, caged_voicing

    find_voicing("F").tab()          # '133211'
    find_voicing("Bdim").tab()       # 'x2343x'
    caged_voicing("C").tab()         # 'x32010'
"""

import logging
from functools import lru_cache
from typing import Dict, Optional, Tuple

from fretlab.data.loader import load_shape_library
from fretlab.data.schema import (
    MAX_FRET,
    Barre,
    ChordSymbol,
    Quality,
    RelativeShape,
    Voicing,
    VoicingPosition,
)
from fretlab.fretboard.fretboard import Fretboard
from fretlab.theory.chords import ChordLike, try_parse_chord
from fretlab.theory.notes import PitchLike, as_pitch_class, interval_between, normalize

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Anchor strings in search order: low E first, then A
ANCHOR_PRIORITY: Tuple[int, ...] = (0, 1)

# Highest fret tried when looking for the root on an anchor string
ROOT_SEARCH_MAX_FRET = 12

CAGED_ORDER = ("C", "A", "G", "E", "D")

# Shape templates are written for this tuning only
VOICING_TUNING = "standard"


@lru_cache(maxsize=None)
def _standard_board() -> Fretboard:
    return Fretboard(VOICING_TUNING)


@lru_cache(maxsize=None)
def _families() -> Dict[Tuple[Quality, int], RelativeShape]:
    return {
        (shape.quality, shape.anchor_string): shape
        for shape in load_shape_library().voicing_families
    }


def shape_family(quality: Quality, anchor_string: int) -> Optional[RelativeShape]:
    """Template for a triad quality on an anchor string, if one exists."""
    return _families().get((quality, anchor_string))


# =============================================================================
# TRANSPOSITION
# =============================================================================

def transpose_shape(shape: RelativeShape, root_fret: int, chord: ChordSymbol) -> Voicing:
    """
    Place a movable shape with its root on `root_fret` and resolve it.

    Positions and barres are shifted by root_fret; positions outside
    0..24 are dropped and barres that would sit on the nut are dropped.
    Every string left neither fretted nor muted is sounded open when
    its open note is a chord tone and muted otherwise.
    """
    board = _standard_board()
    required = chord.required_intervals

    positions = []
    for position in shape.positions:
        fret = position.offset + root_fret
        if not 0 <= fret <= MAX_FRET:
            logger.debug(
                "%s: dropping string %d at fret %d (off the neck)",
                shape.name, position.string, fret,
            )
            continue
        if fret == 0:
            finger = 0
        else:
            finger = position.finger or None
        positions.append(
            VoicingPosition(string=position.string, fret=fret, role=position.role, finger=finger)
        )

    barres = []
    for barre in shape.barres:
        fret = barre.offset + root_fret
        if 1 <= fret <= MAX_FRET:
            barres.append(Barre(fret=fret, from_string=barre.from_string, to_string=barre.to_string))

    muted = set(shape.muted)
    covered = {p.string for p in positions} | muted
    added_open = []
    for string in range(board.string_count):
        if string in covered:
            continue
        role = required.get(interval_between(chord.root, board.pitch_class_at(string, 0)))
        if role is None:
            muted.add(string)
        else:
            positions.append(VoicingPosition(string=string, fret=0, role=role, finger=0))
            added_open.append(string)

    return Voicing(
        chord=chord.name,
        shape_name=shape.name,
        anchor_string=shape.anchor_string,
        root_fret=root_fret,
        positions=tuple(sorted(positions, key=lambda p: p.string)),
        barres=tuple(barres),
        muted_strings=tuple(sorted(muted)),
        added_open_strings=tuple(added_open),
    )


# =============================================================================
# VOICING SEARCH
# =============================================================================

def find_voicing(chord: ChordLike, max_search_fret: int = ROOT_SEARCH_MAX_FRET) -> Optional[Voicing]:
    """
    Find a playable voicing for a chord symbol.

    Returns None when the symbol's root is not a note or when no shape
    family anchors the chord within the searched frets; the renderer
    shows that as "no diagram available". Never raises for bad symbols.
    The sweep never goes past fret 12, whatever `max_search_fret` asks.

    Example:
        >>> find_voicing("C").root_fret
        8
        >>> find_voicing("Xb") is None
        True
    """
    if isinstance(chord, str):
        parsed = try_parse_chord(chord)
        if parsed is None:
            return None
        chord = parsed

    max_search_fret = min(max_search_fret, ROOT_SEARCH_MAX_FRET)
    board = _standard_board()
    quality = chord.triad_quality

    for anchor in ANCHOR_PRIORITY:
        shape = shape_family(quality, anchor)
        if shape is None:
            logger.debug("No %s family on string %d for %s", quality.value, anchor, chord.name)
            continue

        open_pc = board.open_pitch_classes[anchor]
        for fret in range(0, max_search_fret + 1):
            if (open_pc + fret) % 12 == chord.root:
                return transpose_shape(shape, fret, chord)

        logger.debug("%s: no root on string %d up to fret %d", chord.name, anchor, max_search_fret)

    return None


def caged_voicing(letter: str, root: Optional[PitchLike] = None) -> Voicing:
    """
    One of the five CAGED shapes, moved to play a major chord on `root`.

    Without a root the shape is shown in its open position (the C shape
    plays C, the G shape plays G, ...). With a root, the shape slides to
    the lowest fret where it fits on the neck.

    Raises:
        ValueError: If the letter is not one of C, A, G, E, D
        UnknownNoteError: If the root is not a note
    """
    shape = load_shape_library().caged_shapes.get(letter.strip().upper())
    if shape is None:
        raise ValueError(f"Unknown CAGED shape: '{letter}'. Valid shapes are: {list(CAGED_ORDER)}")

    root_pc = normalize(letter) if root is None else as_pitch_class(root)
    chord = ChordSymbol(root=root_pc, quality=shape.quality)

    open_pc = _standard_board().open_pitch_classes[shape.anchor_string]
    lowest = max(0, -shape.min_offset)
    root_fret = next(
        fret for fret in range(lowest, lowest + 12)
        if (open_pc + fret) % 12 == root_pc
    )
    return transpose_shape(shape, root_fret, chord)
