"""
Schema definitions for the fretlab engine.

This module defines the Pydantic models for every value the engine hands
to its collaborators: notes, scale types, chord symbols, keys, shape
templates, voicings and engine settings. All of them are frozen, so a
computed voicing or chord can be shared freely between the fretboard
renderer and the playback clock.

String numbering used throughout:
    index 0 = lowest-pitched string (low E in standard tuning)
    index 5 = highest-pitched string (high E)
"""

from enum import Enum
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from fretlab.theory.notes import normalize, note_name


# =============================================================================
# CONSTANTS
# =============================================================================

STRING_COUNT = 6

# Highest fret any voicing may use
MAX_FRET = 24

VALID_MODES = ["major", "minor"]

Role = Literal["root", "third", "fifth"]


# =============================================================================
# CHORD QUALITIES
# =============================================================================

class Quality(str, Enum):
    """
    Closed set of chord qualities the engine recognizes.

    Only MAJOR, MINOR and DIMINISHED are triad qualities. The extended
    qualities are carried for labeling and reduce to one of the three
    triads for voicing and playback.
    """
    MAJOR = "major"
    MINOR = "minor"
    DIMINISHED = "diminished"
    DOMINANT_7 = "dominant7"
    MAJOR_7 = "major7"
    MINOR_7 = "minor7"
    SUS2 = "sus2"
    SUS4 = "sus4"


# Suffix written after the root in a chord symbol
QUALITY_SUFFIXES: Dict[Quality, str] = {
    Quality.MAJOR: "",
    Quality.MINOR: "m",
    Quality.DIMINISHED: "dim",
    Quality.DOMINANT_7: "7",
    Quality.MAJOR_7: "maj7",
    Quality.MINOR_7: "m7",
    Quality.SUS2: "sus2",
    Quality.SUS4: "sus4",
}

TRIAD_QUALITY: Dict[Quality, Quality] = {
    Quality.MAJOR: Quality.MAJOR,
    Quality.MINOR: Quality.MINOR,
    Quality.DIMINISHED: Quality.DIMINISHED,
    Quality.DOMINANT_7: Quality.MAJOR,
    Quality.MAJOR_7: Quality.MAJOR,
    Quality.MINOR_7: Quality.MINOR,
    Quality.SUS2: Quality.MAJOR,
    Quality.SUS4: Quality.MAJOR,
}

# (third, fifth) in semitones above the root
TRIAD_INTERVALS: Dict[Quality, Tuple[int, int]] = {
    Quality.MAJOR: (4, 7),
    Quality.MINOR: (3, 7),
    Quality.DIMINISHED: (3, 6),
}

# Full interval formulas, used for labels only
CHORD_FORMULAS: Dict[Quality, List[int]] = {
    Quality.MAJOR: [0, 4, 7],
    Quality.MINOR: [0, 3, 7],
    Quality.DIMINISHED: [0, 3, 6],
    Quality.DOMINANT_7: [0, 4, 7, 10],
    Quality.MAJOR_7: [0, 4, 7, 11],
    Quality.MINOR_7: [0, 3, 7, 10],
    Quality.SUS2: [0, 2, 7],
    Quality.SUS4: [0, 5, 7],
}


# =============================================================================
# NOTES AND SCALES
# =============================================================================

class Note(BaseModel):
    """
    A pitch class placed in a specific octave.

    Octaves follow scientific pitch notation, so middle C is C4 (MIDI 60)
    and the low E string of a guitar is E2.

    Example:
        >>> Note.parse("A4").frequency
        440.0
    """
    model_config = ConfigDict(frozen=True)

    pitch_class: int = Field(..., ge=0, le=11, description="Pitch class 0-11 (C=0)")
    octave: int = Field(..., ge=-1, le=9, description="Scientific octave number")

    @classmethod
    def parse(cls, text: str) -> "Note":
        """Parse a name such as 'E2', 'Bb3' or 'F#4'."""
        text = text.strip()
        split = len(text)
        while split > 0 and (text[split - 1].isdigit() or text[split - 1] == "-"):
            split -= 1
        if split == len(text) or split == 0:
            raise ValueError(f"Note must be a name followed by an octave. Got: '{text}'")
        return cls(pitch_class=normalize(text[:split]), octave=int(text[split:]))

    @classmethod
    def from_midi(cls, midi: int) -> "Note":
        return cls(pitch_class=midi % 12, octave=midi // 12 - 1)

    @property
    def name(self) -> str:
        return f"{note_name(self.pitch_class)}{self.octave}"

    @property
    def midi(self) -> int:
        return (self.octave + 1) * 12 + self.pitch_class

    @property
    def frequency(self) -> float:
        """Equal-tempered frequency in Hz with A4 = 440 Hz."""
        return 440.0 * 2 ** ((self.midi - 69) / 12)

    def transpose(self, semitones: int) -> "Note":
        return Note.from_midi(self.midi + semitones)

    def __str__(self) -> str:
        return self.name


class ScaleType(BaseModel):
    """
    A named scale: semitone offsets from the root, root first.

    Attributes:
        id: Lookup key (e.g., 'minor_pentatonic')
        name: Display name (e.g., 'Minor Pentatonic')
        offsets: Strictly increasing offsets, first one 0, all below 12
        description: One-line character description for learners
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, examples=["major", "minor_pentatonic"])
    name: str = Field(..., min_length=1, examples=["Major", "Minor Pentatonic"])
    offsets: Tuple[int, ...] = Field(..., min_length=1, max_length=12)
    description: str = ""

    @field_validator("offsets")
    @classmethod
    def validate_offsets(cls, v: Tuple[int, ...]) -> Tuple[int, ...]:
        """Root first, strictly increasing, inside one octave"""
        if v[0] != 0:
            raise ValueError(f"Scale offsets must start at 0. Got: {list(v)}")
        if any(b <= a for a, b in zip(v, v[1:])):
            raise ValueError(f"Scale offsets must be strictly increasing. Got: {list(v)}")
        if v[-1] >= 12:
            raise ValueError(f"Scale offsets must be below 12. Got: {list(v)}")
        return v


# =============================================================================
# CHORDS AND KEYS
# =============================================================================

class ChordSymbol(BaseModel):
    """
    A chord root plus its quality.

    Example:
        >>> ChordSymbol(root=9, quality=Quality.MINOR).name
        'Am'
    """
    model_config = ConfigDict(frozen=True)

    root: int = Field(..., ge=0, le=11, description="Root pitch class")
    quality: Quality = Quality.MAJOR

    @property
    def root_name(self) -> str:
        return note_name(self.root)

    @property
    def suffix(self) -> str:
        return QUALITY_SUFFIXES[self.quality]

    @property
    def name(self) -> str:
        return self.root_name + self.suffix

    @property
    def triad_quality(self) -> Quality:
        return TRIAD_QUALITY[self.quality]

    @property
    def triad_intervals(self) -> Tuple[int, int]:
        return TRIAD_INTERVALS[self.triad_quality]

    @property
    def required_intervals(self) -> Dict[int, Role]:
        """Interval above the root -> role, for the three triad tones."""
        third, fifth = self.triad_intervals
        return {0: "root", third: "third", fifth: "fifth"}

    @property
    def triad_pitch_classes(self) -> List[int]:
        return [(self.root + interval) % 12 for interval in self.required_intervals]

    def __str__(self) -> str:
        return self.name


class Key(BaseModel):
    """A key center: root pitch class and mode."""
    model_config = ConfigDict(frozen=True)

    root: int = Field(..., ge=0, le=11)
    mode: str = Field(default="major", examples=["major", "minor"])

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str) -> str:
        """Ensure mode is major or minor (case-insensitive)"""
        v_lower = v.lower()
        if v_lower not in VALID_MODES:
            raise ValueError(f"Mode must be one of {VALID_MODES}. Got: '{v}'")
        return v_lower

    @property
    def name(self) -> str:
        return f"{note_name(self.root)} {self.mode}"

    def __str__(self) -> str:
        return self.name


# =============================================================================
# SHAPES AND VOICINGS
# =============================================================================

class ShapePosition(BaseModel):
    """One fretted note of a movable shape, relative to the root fret."""
    model_config = ConfigDict(frozen=True)

    string: int = Field(..., ge=0, lt=STRING_COUNT)
    offset: int = Field(..., ge=-MAX_FRET, le=MAX_FRET)
    role: Role
    finger: Optional[int] = Field(default=None, ge=0, le=4)


class ShapeBarre(BaseModel):
    """A barre across a string range, relative to the root fret."""
    model_config = ConfigDict(frozen=True)

    offset: int = Field(..., ge=-MAX_FRET, le=MAX_FRET)
    from_string: int = Field(..., ge=0, lt=STRING_COUNT)
    to_string: int = Field(..., ge=0, lt=STRING_COUNT)

    @model_validator(mode="after")
    def validate_range(self) -> "ShapeBarre":
        if self.from_string > self.to_string:
            raise ValueError(
                f"Barre must run from a lower to a higher string. "
                f"Got: {self.from_string}-{self.to_string}"
            )
        return self


class RelativeShape(BaseModel):
    """
    A movable fingering template anchored to its root string.

    The anchor string carries the root at offset 0; every other
    position is expressed relative to that fret, so the same template
    plays any root once it is transposed.

    Attributes:
        name: Display name (e.g., 'E-shape major')
        anchor_string: String that carries the defining root
        quality: Triad quality the shape spells
        positions: Fretted notes relative to the root fret
        barres: Barres relative to the root fret
        muted: Strings that must not sound
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    anchor_string: int = Field(..., ge=0, lt=STRING_COUNT)
    quality: Quality = Quality.MAJOR
    positions: Tuple[ShapePosition, ...] = Field(..., min_length=1)
    barres: Tuple[ShapeBarre, ...] = ()
    muted: Tuple[int, ...] = ()

    @field_validator("quality")
    @classmethod
    def validate_quality(cls, v: Quality) -> Quality:
        """Shapes are defined for triads only"""
        if v not in TRIAD_INTERVALS:
            raise ValueError(f"Shape quality must be a triad quality. Got: '{v.value}'")
        return v

    @model_validator(mode="after")
    def validate_layout(self) -> "RelativeShape":
        strings = [p.string for p in self.positions]
        if len(strings) != len(set(strings)):
            raise ValueError(f"Shape '{self.name}' places more than one note on a string")
        clash = set(strings) & set(self.muted)
        if clash:
            raise ValueError(f"Shape '{self.name}' both frets and mutes strings {sorted(clash)}")
        anchors = [
            p for p in self.positions
            if p.string == self.anchor_string and p.offset == 0 and p.role == "root"
        ]
        if not anchors:
            raise ValueError(
                f"Shape '{self.name}' needs a root at offset 0 on its anchor string "
                f"{self.anchor_string}"
            )
        return self

    @property
    def min_offset(self) -> int:
        return min([p.offset for p in self.positions] + [b.offset for b in self.barres])


class VoicingPosition(BaseModel):
    """A concrete sounded note on the fretboard."""
    model_config = ConfigDict(frozen=True)

    string: int = Field(..., ge=0, lt=STRING_COUNT)
    fret: int = Field(..., ge=0, le=MAX_FRET)
    role: Role
    finger: Optional[int] = Field(default=None, ge=0, le=4)


class Barre(BaseModel):
    """A concrete barre; fret 0 is never a barre."""
    model_config = ConfigDict(frozen=True)

    fret: int = Field(..., ge=1, le=MAX_FRET)
    from_string: int = Field(..., ge=0, lt=STRING_COUNT)
    to_string: int = Field(..., ge=0, lt=STRING_COUNT)


class Voicing(BaseModel):
    """
    A playable chord diagram, ready for the fretboard renderer.

    Attributes:
        chord: Chord symbol the voicing realizes (e.g., 'Am', 'G7')
        shape_name: Template the voicing was transposed from
        anchor_string: String carrying the defining root
        root_fret: Fret of the defining root on the anchor string
        positions: Sounded notes, ordered low string to high string
        barres: Barres to draw
        muted_strings: Strings that must not sound
        added_open_strings: Open strings added because they are chord tones
    """
    model_config = ConfigDict(frozen=True)

    chord: str
    shape_name: str
    anchor_string: int = Field(..., ge=0, lt=STRING_COUNT)
    root_fret: int = Field(..., ge=0, le=MAX_FRET)
    positions: Tuple[VoicingPosition, ...]
    barres: Tuple[Barre, ...] = ()
    muted_strings: Tuple[int, ...] = ()
    added_open_strings: Tuple[int, ...] = ()

    @model_validator(mode="after")
    def validate_strings(self) -> "Voicing":
        strings = [p.string for p in self.positions]
        if len(strings) != len(set(strings)):
            raise ValueError(f"Voicing for '{self.chord}' sounds a string twice")
        if set(strings) & set(self.muted_strings):
            raise ValueError(f"Voicing for '{self.chord}' both sounds and mutes a string")
        return self

    def fret_for(self, string: int) -> Optional[int]:
        for position in self.positions:
            if position.string == string:
                return position.fret
        return None

    def tab(self) -> str:
        """
        Compact low-to-high tab, e.g. 'x32010' for open C.

        Frets above 9 are wrapped in parentheses so the string stays
        unambiguous: '(10)(12)(12)(11)(10)(10)'.
        """
        cells = []
        for string in range(STRING_COUNT):
            fret = self.fret_for(string)
            if fret is None:
                cells.append("x")
            elif fret > 9:
                cells.append(f"({fret})")
            else:
                cells.append(str(fret))
        return "".join(cells)


# =============================================================================
# DATA TABLES AND SETTINGS
# =============================================================================

class ShapeLibrary(BaseModel):
    """Contents of shapes.yaml."""
    model_config = ConfigDict(frozen=True)

    voicing_families: Tuple[RelativeShape, ...] = Field(..., min_length=1)
    caged_shapes: Dict[str, RelativeShape] = Field(default_factory=dict)

    @model_validator(mode="after")
    def validate_unique_families(self) -> "ShapeLibrary":
        """One family per triad quality and anchor string"""
        seen: Dict[Tuple[Quality, int], str] = {}
        for shape in self.voicing_families:
            slot = (shape.quality, shape.anchor_string)
            if slot in seen:
                raise ValueError(
                    f"Shapes '{seen[slot]}' and '{shape.name}' both define a "
                    f"{shape.quality.value} family on string {shape.anchor_string}"
                )
            seen[slot] = shape.name
        return self


class ProgressionEntry(BaseModel):
    """A named common progression written in Roman numerals."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, examples=["1-4-5-1"])
    name: str = Field(..., min_length=1, examples=["I - IV - V - I"])
    numerals: Tuple[str, ...] = Field(..., min_length=1)
    description: str = ""


class JamSuggestion(BaseModel):
    """Ideas for extending a progression into a song."""
    model_config = ConfigDict(frozen=True)

    bridge: Tuple[str, ...] = Field(..., min_length=1)
    variations: Tuple[str, ...] = Field(..., min_length=1)
    extensions: Tuple[str, ...] = Field(..., min_length=1)


class ProgressionCatalog(BaseModel):
    """Contents of progressions.yaml."""
    model_config = ConfigDict(frozen=True)

    progressions: Tuple[ProgressionEntry, ...] = Field(..., min_length=1)
    suggestions: Dict[str, JamSuggestion]

    @model_validator(mode="after")
    def validate_custom(self) -> "ProgressionCatalog":
        if "custom" not in self.suggestions:
            raise ValueError("Suggestions need a 'custom' fallback entry")
        return self


class EngineSettings(BaseModel):
    """
    Tunable engine defaults, loaded from YAML.

    Example:
        >>> EngineSettings(tuning="drop_d", bpm=90).fret_count
        24
    """
    model_config = ConfigDict(frozen=True)

    tuning: str = Field(default="standard", examples=["standard", "drop_d"])
    fret_count: int = Field(default=MAX_FRET, ge=12, le=MAX_FRET)
    root_search_max_fret: int = Field(default=12, ge=11, le=12)
    playback_octave: int = Field(default=4, ge=0, le=8)
    bpm: int = Field(default=120, ge=40, le=240, description="Tempo for the external clock")
    beats_per_chord: int = Field(default=4, ge=1, le=16)

