"""
Fretboard Subpackage

Geometry of the neck:
    - fretboard.py: Tunings, (string, fret) to note mapping, scale maps
    - voicing.py: Chord symbols to playable voicings, CAGED shapes

Example usage:
    from fretlab.fretboard import Fretboard, find_voicing

    Fretboard().scale_box("A", "minor_pentatonic", 5)
    find_voicing("Am").tab()    # '577555'
"""

from fretlab.fretboard.fretboard import Fretboard, FretPosition, get_tuning
from fretlab.fretboard.voicing import caged_voicing, find_voicing, transpose_shape
