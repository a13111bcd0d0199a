"""
App Subpackage

User-facing front ends:
    - cli.py: The `fretlab` command (scale, chord, key, progression,
      caged and tuner subcommands)

Usage:
    fretlab chord C Am F G
    python -m fretlab.app.cli key G
"""
