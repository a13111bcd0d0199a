"""
Tests for fretlab/theory/progressions.py

Run with: pytest tests/test_progressions.py -v
"""

from fretlab.theory.progressions import (
    get_progression,
    get_suggestions,
    list_progressions,
    progression_chords,
    song_structure,
)


class TestCatalog:

    def test_catalog_has_the_common_progressions(self):
        ids = [entry.id for entry in list_progressions()]
        assert "1-4-5-1" in ids
        assert "1-5-6-4" in ids
        assert "2-5-1" in ids

    def test_lookup_by_id_or_numerals(self):
        assert get_progression("1-5-6-4").numerals == ("I", "V", "vi", "IV")
        assert get_progression("I-V-vi-IV").id == "1-5-6-4"
        assert get_progression("9-9-9") is None

    def test_progression_chords(self):
        assert [c.name for c in progression_chords("1-5-6-4", "C")] == ["C", "G", "Am", "F"]
        assert [c.name for c in progression_chords("2-5-1", "Bb")] == ["Cm", "F", "A#"]

    def test_unknown_progression_has_no_chords(self):
        assert progression_chords("nope", "C") == []


class TestSuggestions:

    def test_known_progression(self):
        ideas = get_suggestions("1-4-5-1")
        assert "vi-IV-V-V" in ideas.bridge

    def test_custom_fallback(self):
        ideas = get_suggestions("Cmaj7-Am7-Fmaj7-G7")
        assert ideas == get_suggestions("custom")
        assert len(ideas.variations) == 3

    def test_song_structure(self):
        plan = song_structure("1-4-5-1")
        sections = [section for section, _ in plan]
        assert sections == [
            "Intro", "Verse", "Pre-Chorus", "Chorus", "Verse",
            "Pre-Chorus", "Chorus", "Bridge", "Chorus", "Outro",
        ]
        assert plan[0] == ("Intro", "I-IV-V-I")
        assert plan[1] == ("Verse", "I-IV-V-I (x2)")
        assert plan[2] == ("Pre-Chorus", "I-IV-V-IV")
        assert plan[7] == ("Bridge", "vi-IV-V-V")
