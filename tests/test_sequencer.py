"""
Tests for fretlab/playback/sequencer.py

Run with: pytest tests/test_sequencer.py -v
"""

import pytest

from fretlab.playback.sequencer import (
    ProgressionSequencer,
    resolve,
    seconds_per_step,
    step_pitches,
)
from fretlab.theory.chords import parse_chord


class RecordingOutput:
    """Test double for a synth: records calls in order."""

    def __init__(self):
        self.calls = []

    def silence(self):
        self.calls.append(("silence",))

    def trigger(self, notes, duration):
        self.calls.append(("trigger", [n.name for n in notes], duration))


def names(chords):
    return [c.name for c in chords]


class TestResolve:

    def test_one_four_five_one_in_c(self):
        assert names(resolve("C", ["I", "IV", "V", "I"])) == ["C", "F", "G", "C"]

    def test_unresolved_numerals_dropped(self):
        assert names(resolve("C", ["I", "???", "V"])) == ["C", "G"]


class TestStepPitches:

    def test_c_major_stays_in_octave(self):
        tones = step_pitches(parse_chord("C"), 4)
        assert [n.name for n in tones.notes] == ["C4", "E4", "G4"]

    def test_upper_tones_wrap_to_next_octave(self):
        tones = step_pitches(parse_chord("G"), 4)
        assert [n.name for n in tones.notes] == ["G4", "B4", "D5"]

    def test_minor_and_diminished(self):
        assert [n.name for n in step_pitches(parse_chord("Am"), 3).notes] == ["A3", "C4", "E4"]
        assert [n.name for n in step_pitches(parse_chord("Bdim"), 4).notes] == ["B4", "D5", "F5"]

    def test_triad_ascends(self):
        for symbol in ["C", "F#", "Bb", "Ebm", "G#dim", "D7"]:
            tones = step_pitches(parse_chord(symbol), 4)
            assert tones.root.midi < tones.third.midi < tones.fifth.midi

    def test_frequencies(self):
        tones = step_pitches(parse_chord("A"), 4)
        assert tones.frequencies[0] == pytest.approx(440.0)

    def test_accepts_symbol_strings(self):
        assert [n.name for n in step_pitches("Am", 3).notes] == ["A3", "C4", "E4"]

    def test_unreadable_symbol(self):
        with pytest.raises(ValueError):
            step_pitches("Xb")

    def test_highest_octave(self):
        assert [n.name for n in step_pitches("G", 8).notes] == ["G8", "B8", "D9"]

    @pytest.mark.parametrize("octave", [-2, 9])
    def test_octave_out_of_range(self, octave):
        with pytest.raises(ValueError, match="octave"):
            step_pitches(parse_chord("C"), octave)


class TestSequencer:

    @pytest.fixture
    def sequencer(self):
        return ProgressionSequencer(resolve("C", ["I", "IV", "V", "I"]))

    def test_starts_at_zero(self, sequencer):
        assert sequencer.index == 0
        assert sequencer.current().name == "C"
        assert len(sequencer) == 4

    def test_five_advances_over_four_steps(self, sequencer):
        for _ in range(5):
            sequencer.advance()
        assert sequencer.index == 1
        assert sequencer.current().name == "F"

    def test_first_tick_emits_step_zero(self, sequencer):
        first = sequencer.tick()
        second = sequencer.tick()
        assert (first.index, first.chord.name, first.restarted) == (0, "C", True)
        assert (second.index, second.chord.name, second.restarted) == (1, "F", False)

    def test_ticks_wrap(self, sequencer):
        steps = [sequencer.tick() for _ in range(6)]
        assert [s.index for s in steps] == [0, 1, 2, 3, 0, 1]

    def test_steps_carry_voicings(self, sequencer):
        step = sequencer.tick()
        assert step.voicing is not None
        assert step.voicing.chord == "C"

    def test_listeners(self, sequencer):
        seen = []
        sequencer.add_listener(seen.append)
        sequencer.tick()
        sequencer.tick()
        sequencer.remove_listener(seen.append)
        sequencer.tick()
        assert [s.chord.name for s in seen] == ["C", "F"]

    def test_load_resets(self, sequencer):
        sequencer.tick()
        sequencer.tick()
        sequencer.load_numerals("G", ["vi", "IV"])
        assert sequencer.index == 0
        step = sequencer.tick()
        assert step.chord.name == "Em"
        assert step.restarted

    def test_restart(self, sequencer):
        for _ in range(3):
            sequencer.tick()
        sequencer.restart()
        assert sequencer.tick().index == 0

    def test_empty_sequence(self):
        sequencer = ProgressionSequencer()
        assert sequencer.current() is None
        assert sequencer.advance() is None
        assert sequencer.tick() is None

    def test_output_silenced_before_each_trigger(self):
        output = RecordingOutput()
        sequencer = ProgressionSequencer(resolve("C", ["I", "V"]), output=output, note_duration=0.5)
        sequencer.tick()
        sequencer.tick()
        assert output.calls == [
            ("silence",),
            ("trigger", ["C4", "E4", "G4"], 0.5),
            ("silence",),
            ("trigger", ["G4", "B4", "D5"], 0.5),
        ]

    def test_octave(self):
        sequencer = ProgressionSequencer(resolve("C", ["I"]), octave=2)
        assert sequencer.tick().tones.root.name == "C2"

    def test_octave_checked_before_playback(self):
        with pytest.raises(ValueError):
            ProgressionSequencer(resolve("C", ["I", "V"]), octave=9)

    def test_top_octave_plays_every_step(self):
        sequencer = ProgressionSequencer(resolve("C", ["I", "V"]), octave=8)
        assert sequencer.tick().tones.root.name == "C8"
        assert [n.name for n in sequencer.tick().tones.notes] == ["G8", "B8", "D9"]


class TestTempo:

    def test_seconds_per_step(self):
        assert seconds_per_step(120, 4) == pytest.approx(2.0)
        assert seconds_per_step(60, 1) == pytest.approx(1.0)

    @pytest.mark.parametrize("bpm, beats", [(0, 4), (-10, 4), (120, 0)])
    def test_invalid_tempo(self, bpm, beats):
        with pytest.raises(ValueError):
            seconds_per_step(bpm, beats)
