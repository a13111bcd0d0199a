"""
Tests for fretlab/theory/harmony.py

Run with: pytest tests/test_harmony.py -v
"""

import pytest

from fretlab.data.schema import Key
from fretlab.theory.harmony import (
    as_key,
    diatonic_chords,
    get_chord_from_degree,
    get_parallel_key,
    get_relative_key,
    is_chord_in_key,
    numeral_for_chord,
    resolve_numeral,
    resolve_numerals,
    roman_numerals,
    validate_progression,
)
from fretlab.theory.notes import UnknownNoteError


def names(chords):
    return [c.name for c in chords]


class TestKeys:

    @pytest.mark.parametrize("text, root, mode", [
        ("G", 7, "major"),
        ("Am", 9, "minor"),
        ("Eb minor", 3, "minor"),
        ("F# major", 6, "major"),
        ("Bbm", 10, "minor"),
    ])
    def test_as_key(self, text, root, mode):
        key = as_key(text)
        assert key.root == root
        assert key.mode == mode

    def test_explicit_mode_wins(self):
        assert as_key("D", "minor").mode == "minor"
        assert as_key(Key(root=2), "minor").mode == "minor"

    def test_mode_is_case_insensitive(self):
        assert Key(root=0, mode="MAJOR").mode == "major"

    def test_unsupported_mode_rejected(self):
        with pytest.raises(ValueError):
            Key(root=0, mode="lydian")

    def test_unknown_key_root_raises(self):
        with pytest.raises(UnknownNoteError):
            as_key("Xb")

    def test_relative_and_parallel(self):
        assert get_relative_key("C").name == "A minor"
        assert get_relative_key("Em").name == "G major"
        assert get_parallel_key("C").name == "C minor"


class TestDiatonicChords:

    def test_c_major(self):
        assert names(diatonic_chords("C")) == ["C", "Dm", "Em", "F", "G", "Am", "Bdim"]

    def test_a_minor(self):
        assert names(diatonic_chords("Am")) == ["Am", "Bdim", "C", "Dm", "Em", "F", "G"]

    def test_g_major(self):
        assert names(diatonic_chords("G")) == ["G", "Am", "Bm", "C", "D", "Em", "F#dim"]

    def test_degree_lookup(self):
        assert get_chord_from_degree("D", 5).name == "A"

    @pytest.mark.parametrize("degree", [0, 8])
    def test_degree_out_of_range(self, degree):
        with pytest.raises(ValueError):
            get_chord_from_degree("C", degree)

    def test_roman_numerals(self):
        assert roman_numerals("major") == ["I", "ii", "iii", "IV", "V", "vi", "vii°"]
        assert roman_numerals("minor")[0] == "i"


class TestNumeralResolution:

    def test_g_vi_is_e_minor(self):
        assert resolve_numeral("G", "vi").name == "Em"

    def test_degree_sign_and_plain_alias(self):
        assert resolve_numeral("C", "vii°").name == "Bdim"
        assert resolve_numeral("C", "vii").name == "Bdim"
        assert resolve_numeral("Am", "ii").name == "Bdim"

    def test_unknown_numeral_is_none(self):
        assert resolve_numeral("C", "VIII") is None
        assert resolve_numeral("C", "i") is None

    def test_progression_in_c(self):
        assert names(resolve_numerals("C", ["I", "IV", "V", "I"])) == ["C", "F", "G", "C"]

    def test_unknown_numerals_are_dropped(self):
        assert names(resolve_numerals("G", ["I", "bVII", "V"])) == ["G", "D"]

    def test_minor_key_numerals(self):
        assert names(resolve_numerals("Em", ["i", "iv", "v", "i"])) == ["Em", "Am", "Bm", "Em"]

    def test_numeral_for_chord(self):
        assert numeral_for_chord("G", "Em") == "vi"
        assert numeral_for_chord("C", "G7") == "V"
        assert numeral_for_chord("C", "F#") is None
        assert numeral_for_chord("C", "Xb") is None


class TestValidation:

    def test_chord_in_key(self):
        assert is_chord_in_key("Am", "C")
        assert not is_chord_in_key("A", "C")

    def test_validate_progression(self):
        valid, invalid = validate_progression(["C", "G", "Bb"], "C")
        assert not valid
        assert invalid == ["Bb"]
