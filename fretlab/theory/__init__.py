"""
Theory Subpackage

Pure music theory, no fretboard:
    - notes.py: Pitch classes, enharmonic spelling, transposition
    - scales.py: Scale catalog and scale pitch sets
    - chords.py: Chord symbol parsing and triad intervals
    - harmony.py: Keys, diatonic chords, Roman numeral resolution
    - progressions.py: Common progressions and jam suggestions

Import from the modules directly; fretlab.data.schema depends on
notes.py, so this package does not import its modules eagerly.
"""
