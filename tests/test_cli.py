"""
Tests for fretlab/app/cli.py

Run with: pytest tests/test_cli.py -v
"""

import json

import pytest

from fretlab.app.cli import create_argument_parser, main


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out, captured.err


class TestParser:

    def test_flags_follow_the_subcommand(self):
        args = create_argument_parser().parse_args(["chord", "C", "--json", "-v"])
        assert args.command == "chord"
        assert args.json
        assert args.verbose

    def test_no_command_shows_help(self, capsys):
        code, out, _ = run(capsys)
        assert code == 1
        assert "usage" in out.lower()


class TestScaleCommand:

    def test_pretty(self, capsys):
        code, out, _ = run(capsys, "scale", "A", "minor_pentatonic")
        assert code == 0
        assert "A  C  D  E  G" in out
        assert "[A]" in out

    def test_json_box(self, capsys):
        code, out, _ = run(capsys, "scale", "E", "minor_pentatonic", "--span", "4", "--json")
        assert code == 0
        data = json.loads(out)
        assert data["notes"] == ["E", "G", "A", "B", "D"]
        assert data["positions"][0] == [0, 3]

    def test_unknown_scale(self, capsys):
        code, _, err = run(capsys, "scale", "C", "bebop")
        assert code == 1
        assert "Unknown scale" in err

    def test_bad_start_fret(self, capsys):
        code, _, _ = run(capsys, "scale", "C", "--start-fret", "30")
        assert code == 1


class TestChordCommand:

    def test_diagram(self, capsys):
        code, out, _ = run(capsys, "chord", "C", "Bdim")
        assert code == 0
        assert "8(10)(10)988" in out
        assert "x2343x" in out

    def test_unreadable_chord_has_no_diagram(self, capsys):
        code, out, _ = run(capsys, "chord", "Xb")
        assert code == 0
        assert "no diagram available" in out

    def test_json(self, capsys):
        code, out, _ = run(capsys, "chord", "G7", "Xb", "--json")
        data = json.loads(out)
        assert data[0]["tones"] == ["G", "B", "D", "F"]
        assert data[0]["voicing"]["shape_name"] == "E-shape major"
        assert data[1]["voicing"] is None

    def test_other_tuning_is_noted(self, capsys, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("tuning: drop_d\n", encoding="utf-8")
        code, out, _ = run(capsys, "chord", "C", "--config", str(path))
        assert code == 0
        assert "Diagrams are for standard tuning (configured: drop_d)" in out

    def test_standard_tuning_has_no_note(self, capsys):
        _, out, _ = run(capsys, "chord", "C")
        assert "Diagrams are for" not in out


class TestKeyCommand:

    def test_pretty(self, capsys):
        code, out, _ = run(capsys, "key", "G")
        assert code == 0
        assert "F#dim" in out
        assert "E minor" in out

    def test_json_minor(self, capsys):
        code, out, _ = run(capsys, "key", "A", "--mode", "minor", "--json")
        data = json.loads(out)
        assert data["key"] == "A minor"
        assert data["chords"][0] == {"numeral": "i", "chord": "Am"}

    def test_unknown_key(self, capsys):
        code, _, err = run(capsys, "key", "Xb")
        assert code == 1
        assert "Xb" in err


class TestProgressionCommand:

    def test_numerals(self, capsys):
        code, out, _ = run(capsys, "progression", "G", "I", "V", "vi", "IV")
        assert code == 0
        assert "G  →  D  →  Em  →  C" in out

    def test_steps_and_suggestions(self, capsys):
        code, out, _ = run(
            capsys, "progression", "C", "--id", "1-4-5-1", "--steps", "5", "--suggest", "--json"
        )
        data = json.loads(out)
        assert data["chords"] == ["C", "F", "G", "C"]
        assert [s["index"] for s in data["steps"]] == [0, 1, 2, 3, 0]
        assert data["steps"][2]["notes"] == ["G4", "B4", "D5"]
        assert data["seconds_per_step"] == pytest.approx(2.0)
        assert data["song_structure"][0] == ["Intro", "I-IV-V-I"]

    def test_list(self, capsys):
        code, out, _ = run(capsys, "progression", "--list")
        assert code == 0
        assert "1-5-6-4" in out

    def test_needs_numerals(self, capsys):
        code, _, _ = run(capsys, "progression", "C")
        assert code == 1

    def test_config_changes_tempo(self, capsys, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("bpm: 60\nbeats_per_chord: 2\n", encoding="utf-8")
        code, out, _ = run(capsys, "progression", "C", "I", "V", "--json", "--config", str(path))
        assert code == 0
        assert json.loads(out)["seconds_per_step"] == pytest.approx(2.0)


class TestCagedCommand:

    def test_all_shapes(self, capsys):
        code, out, _ = run(capsys, "caged")
        assert code == 0
        for tab in ["x32010", "x02220", "320003", "022100", "xx0232"]:
            assert tab in out

    def test_moved(self, capsys):
        code, out, _ = run(capsys, "caged", "C", "--root", "D", "--json")
        assert json.loads(out)[0]["chord"] == "D"


class TestTunerCommand:

    def test_single_reading(self, capsys):
        code, out, _ = run(capsys, "tuner", "110.0")
        assert code == 0
        assert "A2" in out
        assert "In tune!" in out

    def test_unstable_readings(self, capsys):
        code, _, err = run(capsys, "tuner", "110", "165", "220")
        assert code == 1
        assert "stable" in err

    def test_json(self, capsys):
        code, out, _ = run(capsys, "tuner", "82.0", "82.1", "82.2", "--json")
        data = json.loads(out)
        assert data["string"] == 0
        assert data["status"] == "flat"
