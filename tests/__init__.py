"""
Test Package

Contains unit tests for all modules.
Run with: pytest tests/ -v

Test files follow the pattern:
    test_<module_name>.py

Example:
    tests/test_harmony.py     - Tests for fretlab/theory/harmony.py
    tests/test_voicing.py     - Tests for fretlab/fretboard/voicing.py
    tests/test_sequencer.py   - Tests for fretlab/playback/sequencer.py
"""
