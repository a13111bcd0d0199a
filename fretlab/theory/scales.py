"""
Scales Module - Pitch-Class Sets for Named Scales

A scale is a list of semitone offsets from its root. Rooting it at a
note is plain modulo-12 addition, in offset order, so the first note
returned is always the root.
"""

from typing import Dict, List, Union

from fretlab.data.schema import ScaleType
from fretlab.theory.notes import PitchLike, as_pitch_class, note_name


class UnknownScaleError(ValueError):
    """Raised when a scale id is not in the catalog."""


# =============================================================================
# SCALE CATALOG
# =============================================================================

def _scale(id: str, name: str, offsets: List[int], description: str) -> ScaleType:
    return ScaleType(id=id, name=name, offsets=tuple(offsets), description=description)


SCALE_TYPES: Dict[str, ScaleType] = {
    scale.id: scale
    for scale in [
        _scale("major", "Major", [0, 2, 4, 5, 7, 9, 11],
               "The foundation of Western music, bright and happy sounding."),
        _scale("minor", "Natural Minor", [0, 2, 3, 5, 7, 8, 10],
               "Used extensively in rock, pop, and blues. Sad or serious character."),
        _scale("minor_pentatonic", "Minor Pentatonic", [0, 3, 5, 7, 10],
               "A five-note scale extremely common in blues, rock and pop."),
        _scale("major_pentatonic", "Major Pentatonic", [0, 2, 4, 7, 9],
               "A five-note major scale with a bright, open sound."),
        _scale("blues", "Blues", [0, 3, 5, 6, 7, 10],
               "Minor pentatonic with an added flat 5th (blue note)."),
        _scale("harmonic_minor", "Harmonic Minor", [0, 2, 3, 5, 7, 8, 11],
               "Natural minor with a raised 7th degree. Common in classical and metal."),
        _scale("melodic_minor", "Melodic Minor", [0, 2, 3, 5, 7, 9, 11],
               "Minor scale with raised 6th and 7th degrees ascending."),
        _scale("dorian", "Dorian", [0, 2, 3, 5, 7, 9, 10],
               "A minor scale with a raised 6th, common in jazz and rock."),
        _scale("phrygian", "Phrygian", [0, 1, 3, 5, 7, 8, 10],
               "Minor scale with a flat 2nd, has a Spanish/Middle Eastern sound."),
        _scale("lydian", "Lydian", [0, 2, 4, 6, 7, 9, 11],
               "Major scale with a raised 4th, sounds bright and spacey."),
        _scale("mixolydian", "Mixolydian", [0, 2, 4, 5, 7, 9, 10],
               "A major scale with a flatted 7th, common in blues and rock."),
        _scale("locrian", "Locrian", [0, 1, 3, 5, 6, 8, 10],
               "A diminished scale with a flat 2nd and flat 5th."),
        _scale("whole_tone", "Whole Tone", [0, 2, 4, 6, 8, 10],
               "A symmetrical scale comprised solely of whole steps."),
        _scale("diminished", "Diminished (Half-Whole)", [0, 1, 3, 4, 6, 7, 9, 10],
               "An 8-note symmetrical scale alternating half and whole steps."),
    ]
}

ScaleLike = Union[str, ScaleType]


# =============================================================================
# CORE FUNCTIONS
# =============================================================================

def get_scale_type(scale: ScaleLike) -> ScaleType:
    """Look up a scale type by id; ScaleType instances pass through."""
    if isinstance(scale, ScaleType):
        return scale
    key = scale.strip().lower().replace(" ", "_").replace("-", "_")
    if key not in SCALE_TYPES:
        raise UnknownScaleError(
            f"Unknown scale: '{scale}'. Valid scales are: {list(SCALE_TYPES)}"
        )
    return SCALE_TYPES[key]


def scale_notes(root: PitchLike, scale: ScaleLike) -> List[int]:
    """
    Pitch classes of a scale, root first, in offset order.

    Example:
        >>> scale_notes("G", "major")
        [7, 9, 11, 0, 2, 4, 6]
    """
    root_pc = as_pitch_class(root)
    return [(root_pc + offset) % 12 for offset in get_scale_type(scale).offsets]


def scale_note_names(root: PitchLike, scale: ScaleLike) -> List[str]:
    return [note_name(pc) for pc in scale_notes(root, scale)]


def is_in_scale(root: PitchLike, scale: ScaleLike, pitch_class: PitchLike) -> bool:
    """Check if a pitch class belongs to the scale built on root."""
    return as_pitch_class(pitch_class) in scale_notes(root, scale)
