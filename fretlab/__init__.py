"""
fretlab - Music Theory and Fretboard Mapping Engine

Turns keys, scales, chord names and Roman-numeral progressions into
fretboard geometry (frets, barres, muted strings) and into pitch sets
that an external playback clock can schedule.

Subpackages:
    - fretlab.data: Value types, YAML data tables and settings loader
    - fretlab.theory: Notes, scales, chord qualities, keys and numerals
    - fretlab.fretboard: Fretboard model and chord voicing synthesis
    - fretlab.playback: Progression sequencing and tuner math
    - fretlab.app: Command-line interface

Example usage:
    from fretlab.theory.harmony import resolve_numerals
    from fretlab.fretboard.voicing import find_voicing

    chords = resolve_numerals("G", ["I", "V", "vi", "IV"])
    print([c.name for c in chords])     # ['G', 'D', 'Em', 'C']
    print(find_voicing("Em").tab())     # '022000'
"""

__version__ = "0.1.0"
