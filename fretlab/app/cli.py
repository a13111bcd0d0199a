"""
Command Line Interface for fretlab
==================================

A text front end over the theory and fretboard engine. Every engine
operation can be tried from the terminal without a UI or audio layer.

Usage Examples:
    # Scale notes and where they sit on the neck
    fretlab scale A minor_pentatonic

    # One scale box: five frets starting at fret 5
    fretlab scale A minor_pentatonic --start-fret 5 --span 4

    # Chord diagrams
    fretlab chord C Am Bdim

    # Diatonic chords of a key
    fretlab key G

    # A progression from numerals, or from the catalog
    fretlab progression G I V vi IV
    fretlab progression C --id 1-5-6-4 --suggest

    # CAGED shapes
    fretlab caged C --root D

    # Tuner feedback for measured frequencies
    fretlab tuner 110.5 110.8 111.0

    # JSON output for scripting, debug logging for details
    fretlab chord F --json
    fretlab progression Am i iv v --verbose
"""

import argparse
import json
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence

from fretlab import __version__
from fretlab.data.loader import load_settings
from fretlab.data.schema import EngineSettings, Voicing
from fretlab.fretboard.fretboard import Fretboard, string_number
from fretlab.fretboard.voicing import CAGED_ORDER, VOICING_TUNING, caged_voicing, find_voicing
from fretlab.playback.pitch import closest_string, stable_frequency
from fretlab.playback.sequencer import ProgressionSequencer, seconds_per_step
from fretlab.theory.chords import chord_tone_names, try_parse_chord
from fretlab.theory.harmony import (
    as_key,
    diatonic_chords,
    get_parallel_key,
    get_relative_key,
    roman_numerals,
)
from fretlab.theory.notes import as_pitch_class
from fretlab.theory.progressions import (
    get_progression,
    get_suggestions,
    list_progressions,
    song_structure,
)
from fretlab.theory.scales import SCALE_TYPES, get_scale_type, scale_note_names

logger = logging.getLogger(__name__)


BOX_WIDTH = 73

# Index 0 is the low E string
STRING_LABELS = ["E", "A", "D", "G", "B", "e"]

NO_DIAGRAM = "no diagram available"


# =============================================================================
# PART 1: ARGUMENT PARSER SETUP
# =============================================================================

def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the command-line parser with one subcommand per engine area.

    The output and logging flags live on every subcommand, so they can
    follow the subcommand's own arguments.
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--json",
        action="store_true",
        help="Output result as JSON (useful for scripting)"
    )
    common.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show debug logging from the engine"
    )
    common.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file overriding the engine defaults"
    )

    parser = argparse.ArgumentParser(
        prog="fretlab",
        description="""
🎸 fretlab - Scales, chords, keys and progressions on the guitar neck.
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    # ─────────────────────────────────────────────────────────────────────────
    # scale
    # ─────────────────────────────────────────────────────────────────────────
    scale = subparsers.add_parser("scale", parents=[common], help="Scale notes and fretboard map")
    scale.add_argument("root", help="Root note, e.g. A or F#")
    scale.add_argument(
        "scale",
        nargs="?",
        default="major",
        help=f"Scale type (default: major). One of: {', '.join(SCALE_TYPES)}"
    )
    scale.add_argument("--start-fret", type=int, default=0, help="First fret shown (default: 0)")
    scale.add_argument(
        "--span",
        type=int,
        default=13,
        help="Number of frets shown from the start fret (default: 13)"
    )

    # ─────────────────────────────────────────────────────────────────────────
    # chord
    # ─────────────────────────────────────────────────────────────────────────
    chord = subparsers.add_parser("chord", parents=[common], help="Chord tones and diagrams")
    chord.add_argument("symbols", nargs="+", help="Chord symbols, e.g. C Am F#dim G7")

    # ─────────────────────────────────────────────────────────────────────────
    # key
    # ─────────────────────────────────────────────────────────────────────────
    key = subparsers.add_parser("key", parents=[common], help="Diatonic chords of a key")
    key.add_argument("key", help="Key, e.g. G, Am or 'Eb minor'")
    key.add_argument("--mode", choices=["major", "minor"], default=None, help="Override the mode")

    # ─────────────────────────────────────────────────────────────────────────
    # progression
    # ─────────────────────────────────────────────────────────────────────────
    progression = subparsers.add_parser(
        "progression", parents=[common], help="Resolve and step through a progression"
    )
    progression.add_argument("key", nargs="?", default="C", help="Key (default: C)")
    progression.add_argument("numerals", nargs="*", help="Roman numerals, e.g. I V vi IV")
    progression.add_argument("--id", dest="progression_id", default=None, help="Catalog id, e.g. 1-5-6-4")
    progression.add_argument("--list", action="store_true", help="List the catalog progressions")
    progression.add_argument("--suggest", action="store_true", help="Show jam suggestions and a song plan")
    progression.add_argument(
        "--steps",
        type=int,
        default=0,
        help="Run the sequencer for this many clock ticks and show what plays"
    )

    # ─────────────────────────────────────────────────────────────────────────
    # caged
    # ─────────────────────────────────────────────────────────────────────────
    caged = subparsers.add_parser("caged", parents=[common], help="CAGED shapes")
    caged.add_argument(
        "shapes",
        nargs="*",
        default=list(CAGED_ORDER),
        help="Shape letters (default: all five)"
    )
    caged.add_argument("--root", default=None, help="Move the shapes to play this major chord")

    # ─────────────────────────────────────────────────────────────────────────
    # tuner
    # ─────────────────────────────────────────────────────────────────────────
    tuner = subparsers.add_parser("tuner", parents=[common], help="Tuning feedback for measured frequencies")
    tuner.add_argument(
        "frequencies",
        nargs="+",
        type=float,
        help="Detected frequencies in Hz; several readings are smoothed first"
    )

    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


# =============================================================================
# PART 2: OUTPUT FORMATTING FUNCTIONS
# =============================================================================

def format_box(title: str, rows: Sequence[str]) -> str:
    """Draw rows inside a titled box the width of the terminal output."""
    lines = [
        "┌" + "─" * BOX_WIDTH + "┐",
        "│" + f" {title} ".center(BOX_WIDTH) + "│",
        "├" + "─" * BOX_WIDTH + "┤",
    ]
    for row in rows:
        lines.append("│  " + row[:BOX_WIDTH - 3].ljust(BOX_WIDTH - 2) + "│")
    lines.append("└" + "─" * BOX_WIDTH + "┘")
    return "\n".join(lines)


def format_voicing(voicing: Optional[Voicing], label: str = "") -> List[str]:
    """
    Text diagram of a voicing, high string on top.

    Example output for C:
        C  x32010  (C shape, root fret 3)
        e |  0  open   third
        B |  1  f1     root
        ...
    """
    if voicing is None:
        return [f"{label}  {NO_DIAGRAM}".strip()]

    lines = [f"{voicing.chord}  {voicing.tab()}  ({voicing.shape_name}, root fret {voicing.root_fret})"]
    by_string = {p.string: p for p in voicing.positions}
    for string in reversed(range(len(STRING_LABELS))):
        position = by_string.get(string)
        if position is None:
            lines.append(f"{STRING_LABELS[string]} |  x")
            continue
        if position.fret == 0:
            finger = "open"
        elif position.finger:
            finger = f"f{position.finger}"
        else:
            finger = ""
        lines.append(f"{STRING_LABELS[string]} | {position.fret:>2}  {finger:<5}  {position.role}")
    for barre in voicing.barres:
        lines.append(
            f"Barre at fret {barre.fret}: strings "
            f"{STRING_LABELS[barre.from_string]}-{STRING_LABELS[barre.to_string]}"
        )
    return lines


def format_scale_map(board: Fretboard, root: str, scale: str, start_fret: int, end_fret: int) -> List[str]:
    """Fret-number header plus one row per string; scale notes are named."""
    mask = board.scale_mask(root, scale)
    frets = range(start_fret, end_fret + 1)
    root_pc = as_pitch_class(root)

    lines = ["    " + "".join(f"{fret:^5}" for fret in frets)]
    for string in reversed(range(board.string_count)):
        cells = []
        for fret in frets:
            if not mask[string, fret]:
                cells.append("  -  ")
                continue
            name = board.note_name_at(string, fret)
            if board.pitch_class_at(string, fret) == root_pc:
                name = f"[{name}]"
            cells.append(f"{name:^5}")
        lines.append(f"{STRING_LABELS[string]:>2} |" + "".join(cells))
    return lines


def to_json(payload: Any) -> str:
    return json.dumps(payload, indent=2, ensure_ascii=False)


def dump(model: Any) -> Optional[Dict]:
    if model is None:
        return None
    return model.model_dump(mode="json")


# =============================================================================
# PART 3: COMMANDS
# =============================================================================

def run_scale(args: argparse.Namespace, settings: EngineSettings) -> str:
    board = Fretboard.from_settings(settings)
    scale_type = get_scale_type(args.scale)
    names = scale_note_names(args.root, scale_type)

    start = args.start_fret
    if not 0 <= start <= board.fret_count:
        raise ValueError(f"Start fret must be 0-{board.fret_count}. Got: {start}")
    if args.span < 1:
        raise ValueError(f"Span must be at least 1. Got: {args.span}")
    end = min(start + args.span - 1, board.fret_count)

    if args.json:
        return to_json({
            "root": names[0],
            "scale": scale_type.id,
            "notes": names,
            "tuning": settings.tuning,
            "positions": board.scale_box(args.root, scale_type, start, end - start + 1),
        })

    rows = [
        f"Notes: {'  '.join(names)}",
        f"Tuning: {settings.tuning}   Frets {start}-{end}",
        "",
    ]
    rows.extend(format_scale_map(board, args.root, scale_type.id, start, end))
    return format_box(f"{names[0]} {scale_type.name.upper()}", rows)


def voicing_tuning_note(settings: EngineSettings) -> Optional[str]:
    """Notice shown when diagrams ignore the configured tuning."""
    if settings.tuning == VOICING_TUNING:
        return None
    logger.warning(
        "Chord diagrams are drawn for %s tuning, not %s", VOICING_TUNING, settings.tuning
    )
    return f"Diagrams are for {VOICING_TUNING} tuning (configured: {settings.tuning})"


def run_chord(args: argparse.Namespace, settings: EngineSettings) -> str:
    results = []
    blocks = []
    for symbol in args.symbols:
        chord = try_parse_chord(symbol)
        if chord is None:
            results.append({"symbol": symbol, "chord": None, "tones": [], "voicing": None})
            blocks.append(format_box(symbol, [f"Unknown chord symbol: {NO_DIAGRAM}"]))
            continue

        voicing = find_voicing(chord, settings.root_search_max_fret)
        tones = chord_tone_names(chord)
        results.append({
            "symbol": symbol,
            "chord": chord.name,
            "tones": tones,
            "voicing": dump(voicing),
        })
        rows = [f"Tones: {'  '.join(tones)}", ""]
        rows.extend(format_voicing(voicing, chord.name))
        blocks.append(format_box(chord.name, rows))

    note = voicing_tuning_note(settings)
    if args.json:
        return to_json(results)
    if note:
        blocks.append(note)
    return "\n".join(blocks)


def run_key(args: argparse.Namespace, settings: EngineSettings) -> str:
    key = as_key(args.key, args.mode)
    chords = diatonic_chords(key)
    numerals = roman_numerals(key.mode)
    relative = get_relative_key(key)
    parallel = get_parallel_key(key)

    if args.json:
        return to_json({
            "key": key.name,
            "chords": [{"numeral": n, "chord": c.name} for n, c in zip(numerals, chords)],
            "relative": relative.name,
            "parallel": parallel.name,
        })

    rows = [
        "  ".join(f"{n:<6}" for n in numerals),
        "  ".join(f"{c.name:<6}" for c in chords),
        "",
        f"Relative: {relative.name}   Parallel: {parallel.name}",
    ]
    return format_box(f"KEY OF {key.name.upper()}", rows)


def run_progression(args: argparse.Namespace, settings: EngineSettings) -> str:
    if args.list:
        entries = list_progressions()
        if args.json:
            return to_json([dump(entry) for entry in entries])
        return format_box(
            "COMMON PROGRESSIONS",
            [f"{entry.id:<10} {entry.name:<22} {entry.description}" for entry in entries],
        )

    numerals = list(args.numerals)
    if args.progression_id:
        entry = get_progression(args.progression_id)
        if entry is None:
            raise ValueError(f"Unknown progression: '{args.progression_id}'")
        numerals = list(entry.numerals)
    if not numerals:
        raise ValueError("Give Roman numerals or a catalog --id")

    key = as_key(args.key)
    sequencer = ProgressionSequencer(octave=settings.playback_octave)
    chords = sequencer.load_numerals(key, numerals)
    label = "-".join(numerals)

    emitted = []
    sequencer.add_listener(emitted.append)
    for _ in range(args.steps):
        sequencer.tick()
    step_seconds = seconds_per_step(settings.bpm, settings.beats_per_chord)

    voicings = [find_voicing(chord, settings.root_search_max_fret) for chord in chords]
    suggestion = get_suggestions(label) if args.suggest else None

    if args.json:
        payload = {
            "key": key.name,
            "numerals": numerals,
            "chords": [c.name for c in chords],
            "voicings": [dump(v) for v in voicings],
            "seconds_per_step": step_seconds,
            "steps": [
                {"index": s.index, "chord": s.chord.name, "notes": [n.name for n in s.tones.notes]}
                for s in emitted
            ],
        }
        if suggestion is not None:
            payload["suggestions"] = dump(suggestion)
            payload["song_structure"] = song_structure(label)
        return to_json(payload)

    blocks = []
    chord_line = "  →  ".join(c.name for c in chords) if chords else "(no chords)"
    rows = [
        chord_line,
        "",
        f"Tempo: {settings.bpm} BPM, {settings.beats_per_chord} beats per chord ({step_seconds:.2f}s)",
    ]
    for chord, voicing in zip(chords, voicings):
        rows.append(f"{chord.name:<6} {voicing.tab() if voicing else NO_DIAGRAM}")
    note = voicing_tuning_note(settings)
    if note:
        rows.append(note)
    blocks.append(format_box(f"{label} IN {key.name.upper()}", rows))

    if emitted:
        blocks.append(format_box("PLAYBACK", [
            f"Step {s.index + 1}: {s.chord.name:<6} " + " ".join(n.name for n in s.tones.notes)
            for s in emitted
        ]))

    if suggestion is not None:
        rows = [
            f"Bridge:     {', '.join(suggestion.bridge)}",
            f"Variations: {', '.join(suggestion.variations)}",
            f"Extensions: {', '.join(suggestion.extensions)}",
            "",
        ]
        rows.extend(f"{section:<11} {content}" for section, content in song_structure(label))
        blocks.append(format_box("JAM SUGGESTIONS", rows))

    return "\n".join(blocks)


def run_caged(args: argparse.Namespace, settings: EngineSettings) -> str:
    voicings = [caged_voicing(letter, args.root) for letter in args.shapes]
    if args.json:
        return to_json([dump(v) for v in voicings])

    rows = []
    for voicing in voicings:
        rows.extend(format_voicing(voicing))
        rows.append("")
    title = f"CAGED SHAPES FOR {voicings[0].chord}" if args.root else "CAGED SHAPES"
    return format_box(title, rows[:-1])


def run_tuner(args: argparse.Namespace, settings: EngineSettings) -> str:
    if len(args.frequencies) == 1:
        frequency = args.frequencies[0]
    else:
        frequency = stable_frequency(args.frequencies)
        if frequency is None:
            raise ValueError("Readings are not stable enough to tune against")

    reading = closest_string(frequency, settings.tuning)
    if args.json:
        payload = dump(reading)
        payload["status"] = reading.status
        return to_json(payload)

    return format_box("TUNER", [
        f"Measured: {reading.frequency:.1f} Hz",
        f"Closest:  {reading.note.name} (string {string_number(reading.string)}, {reading.note.frequency:.1f} Hz)",
        f"Offset:   {reading.cents:+.1f} cents",
        reading.instruction,
    ])


COMMANDS = {
    "scale": run_scale,
    "chord": run_chord,
    "key": run_key,
    "progression": run_progression,
    "caged": run_caged,
    "tuner": run_tuner,
}


# =============================================================================
# PART 4: MAIN ENTRY POINT
# =============================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Returns the process exit code: 0 on success, 1 for bad input.
    """
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    try:
        settings = load_settings(args.config)
        logger.debug("Running %s with %s", args.command, settings)
        output = COMMANDS[args.command](args, settings)
    except ValueError as e:
        print(f"⚠️  {e}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    sys.exit(main())
