"""
Tests for fretlab/theory/scales.py

Run with: pytest tests/test_scales.py -v
"""

import pytest

from fretlab.data.schema import ScaleType
from fretlab.theory.scales import (
    SCALE_TYPES,
    UnknownScaleError,
    get_scale_type,
    is_in_scale,
    scale_note_names,
    scale_notes,
)


class TestScaleNotes:

    def test_c_major(self):
        assert scale_note_names("C", "major") == ["C", "D", "E", "F", "G", "A", "B"]

    def test_a_minor_pentatonic(self):
        assert scale_note_names("A", "minor_pentatonic") == ["A", "C", "D", "E", "G"]

    def test_g_major_wraps_past_b(self):
        assert scale_notes("G", "major") == [7, 9, 11, 0, 2, 4, 6]

    def test_flat_root(self):
        assert scale_note_names("Bb", "major")[0] == "A#"

    def test_diminished_has_eight_notes(self):
        assert len(scale_notes("C", "diminished")) == 8

    @pytest.mark.parametrize("scale_id", sorted(SCALE_TYPES))
    @pytest.mark.parametrize("root", range(12))
    def test_every_scale_from_every_root(self, scale_id, root):
        """Length matches the offsets, no duplicates, root first."""
        notes = scale_notes(root, scale_id)
        assert len(notes) == len(SCALE_TYPES[scale_id].offsets)
        assert len(set(notes)) == len(notes)
        assert notes[0] == root


class TestScaleLookup:

    @pytest.mark.parametrize("spelling", ["minor_pentatonic", "Minor Pentatonic", "minor-pentatonic"])
    def test_id_spellings(self, spelling):
        assert get_scale_type(spelling).id == "minor_pentatonic"

    def test_scale_type_passes_through(self):
        scale = SCALE_TYPES["dorian"]
        assert get_scale_type(scale) is scale

    def test_unknown_scale_raises(self):
        with pytest.raises(UnknownScaleError):
            scale_notes("C", "bebop")

    def test_unknown_root_raises(self):
        with pytest.raises(ValueError):
            scale_notes("H", "major")

    def test_is_in_scale(self):
        assert is_in_scale("E", "minor", "F#")
        assert not is_in_scale("E", "minor", "F")
        assert is_in_scale("C", "blues", 6)


class TestScaleTypeModel:
    """Offsets must describe a real scale."""

    @pytest.mark.parametrize("offsets", [(2, 4, 7), (0, 4, 4), (0, 7, 4), (0, 5, 12)])
    def test_bad_offsets_rejected(self, offsets):
        with pytest.raises(ValueError):
            ScaleType(id="bad", name="Bad", offsets=offsets)
