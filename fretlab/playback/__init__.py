"""
Playback Subpackage

Everything the audio layer needs, without making any sound itself:
    - sequencer.py: Resolved progressions, per-step pitches, clock ticks
    - pitch.py: Frequency to note, cents offsets, closest open string
"""
