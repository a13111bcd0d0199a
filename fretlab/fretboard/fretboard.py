"""
Fretboard Module - Tunings and the Note Grid

Maps (string, fret) cells to notes for any six-string tuning. The whole
neck is computed at once as a numpy grid, which gives the scale renderer
its per-cell membership mask in a single vectorized step.

Usage:
    from fretlab.fretboard.fretboard import Fretboard

    board = Fretboard("standard")
    board.note_at(0, 3)                     # Note G2
    mask = board.scale_mask("A", "minor_pentatonic")
    mask[0, 5]                              # True (A on the low E string)
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Union

import numpy as np

from fretlab.data.schema import MAX_FRET, STRING_COUNT, EngineSettings, Note
from fretlab.theory.notes import PitchLike, as_pitch_class, note_name
from fretlab.theory.scales import ScaleLike, scale_notes


# =============================================================================
# TUNINGS
# =============================================================================

# Open-string notes, lowest string first
TUNINGS: Dict[str, Sequence[str]] = {
    "standard": ("E2", "A2", "D3", "G3", "B3", "E4"),
    "drop_d": ("D2", "A2", "D3", "G3", "B3", "E4"),
    "half_step_down": ("Eb2", "Ab2", "Db3", "Gb3", "Bb3", "Eb4"),
    "open_g": ("D2", "G2", "D3", "G3", "B3", "D4"),
    "dadgad": ("D2", "A2", "D3", "G3", "A3", "D4"),
}


def get_tuning(name: str) -> List[Note]:
    """Open-string notes of a named tuning, lowest string first."""
    key = name.strip().lower().replace(" ", "_").replace("-", "_")
    if key not in TUNINGS:
        raise ValueError(f"Unknown tuning: '{name}'. Valid tunings are: {list(TUNINGS)}")
    return [Note.parse(text) for text in TUNINGS[key]]


STANDARD_TUNING = get_tuning("standard")


def string_number(index: int, string_count: int = STRING_COUNT) -> int:
    """Guitarist numbering for display: 1 is the highest string, 6 the lowest."""
    return string_count - index


@dataclass(frozen=True)
class FretPosition:
    """A single cell on the neck."""
    string: int
    fret: int


# =============================================================================
# FRETBOARD
# =============================================================================

class Fretboard:
    """
    A tuned neck with a fixed number of frets.

    Attributes:
        tuning: Open-string notes, lowest string first
        fret_count: Highest fret (the nut is fret 0)
    """

    def __init__(
        self,
        tuning: Union[str, Sequence[Note]] = "standard",
        fret_count: int = MAX_FRET
    ):
        if isinstance(tuning, str):
            tuning = get_tuning(tuning)
        if not tuning:
            raise ValueError("A tuning needs at least one string")
        if not 1 <= fret_count <= MAX_FRET:
            raise ValueError(f"Fret count must be 1-{MAX_FRET}. Got: {fret_count}")

        self.tuning: List[Note] = list(tuning)
        self.fret_count = fret_count

    @classmethod
    def from_settings(cls, settings: EngineSettings) -> "Fretboard":
        return cls(settings.tuning, settings.fret_count)

    @property
    def string_count(self) -> int:
        return len(self.tuning)

    @property
    def open_pitch_classes(self) -> List[int]:
        return [note.pitch_class for note in self.tuning]

    def _check(self, string: int, fret: int) -> None:
        if not 0 <= string < self.string_count:
            raise ValueError(f"String must be 0-{self.string_count - 1}. Got: {string}")
        if not 0 <= fret <= self.fret_count:
            raise ValueError(f"Fret must be 0-{self.fret_count}. Got: {fret}")

    # -------------------------------------------------------------------------
    # Single cells
    # -------------------------------------------------------------------------

    def note_at(self, string: int, fret: int) -> Note:
        """Absolute note sounded at a cell."""
        self._check(string, fret)
        return self.tuning[string].transpose(fret)

    def pitch_class_at(self, string: int, fret: int) -> int:
        self._check(string, fret)
        return (self.tuning[string].pitch_class + fret) % 12

    def note_name_at(self, string: int, fret: int) -> str:
        return note_name(self.pitch_class_at(string, fret))

    def is_octave(self, a: FretPosition, b: FretPosition) -> bool:
        """True when the two cells sound exactly one octave apart."""
        return abs(self.note_at(a.string, a.fret).midi - self.note_at(b.string, b.fret).midi) == 12

    # -------------------------------------------------------------------------
    # Whole-neck views
    # -------------------------------------------------------------------------

    def note_grid(self) -> np.ndarray:
        """Pitch class of every cell, shape (strings, fret_count + 1)."""
        open_pcs = np.array(self.open_pitch_classes, dtype=np.int64)
        frets = np.arange(self.fret_count + 1, dtype=np.int64)
        return (open_pcs[:, None] + frets[None, :]) % 12

    def scale_mask(self, root: PitchLike, scale: ScaleLike) -> np.ndarray:
        """Boolean grid: True where the cell's note belongs to the scale."""
        return np.isin(self.note_grid(), scale_notes(root, scale))

    def is_scale_position(self, string: int, fret: int, root: PitchLike, scale: ScaleLike) -> bool:
        return self.pitch_class_at(string, fret) in scale_notes(root, scale)

    def note_positions(
        self,
        note: PitchLike,
        start_fret: int = 0,
        end_fret: Optional[int] = None
    ) -> List[FretPosition]:
        """Every cell in the fret window that sounds the given pitch class."""
        if end_fret is None:
            end_fret = self.fret_count
        start_fret = max(start_fret, 0)
        end_fret = min(end_fret, self.fret_count)

        target = as_pitch_class(note)
        grid = self.note_grid()[:, start_fret:end_fret + 1]
        strings, offsets = np.nonzero(grid == target)
        return [
            FretPosition(string=int(s), fret=int(o) + start_fret)
            for s, o in zip(strings, offsets)
        ]

    def octaves_of(self, position: FretPosition) -> List[FretPosition]:
        """Cells exactly one octave above or below the given cell."""
        note = self.note_at(position.string, position.fret)
        return [
            candidate
            for candidate in self.note_positions(note.pitch_class)
            if self.is_octave(position, candidate)
        ]

    def scale_box(
        self,
        root: PitchLike,
        scale: ScaleLike,
        start_fret: int,
        span: int = 4
    ) -> List[List[int]]:
        """
        Scale notes inside a fret window, one fret list per string.

        A window of `span` frets starting at `start_fret` is one playing
        position; sliding it up the neck walks through the scale's boxes.

        Example:
            >>> Fretboard().scale_box("E", "minor_pentatonic", 0)
            [[0, 3], [0, 2], [0, 2], [0, 2], [0, 3], [0, 3]]
        """
        if span < 1:
            raise ValueError(f"Span must be at least 1. Got: {span}")
        end_fret = min(start_fret + span - 1, self.fret_count)
        mask = self.scale_mask(root, scale)
        return [
            [fret for fret in range(max(start_fret, 0), end_fret + 1) if mask[string, fret]]
            for string in range(self.string_count)
        ]
