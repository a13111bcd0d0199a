"""
Pitch Module - Tuner Arithmetic

Turns an already-detected frequency into tuner feedback: the nearest
open string of the active tuning and how many cents sharp or flat the
note is. Detecting the frequency from audio is the caller's job; this
module only smooths a short history of readings before comparing.

Usage:
    from fretlab.playback.pitch import closest_string

    reading = closest_string(111.0)
    reading.string     # 1 (the A string)
    reading.status     # 'flat'
    reading.instruction  # 'Tune up by 14.0¢'
"""

import math
from typing import Optional, Sequence, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field

from fretlab.data.schema import Note
from fretlab.fretboard.fretboard import get_tuning


# Guitar fundamentals fall inside this range
MIN_FREQUENCY = 75.0
MAX_FREQUENCY = 500.0

# Readings considered when judging stability
STABILITY_WINDOW = 5

IN_TUNE_CENTS = 5.0
CLOSE_CENTS = 15.0


def cents_between(detected: float, target: float) -> float:
    """Distance in cents from target to detected; positive means sharp."""
    if detected <= 0 or target <= 0:
        raise ValueError(f"Frequencies must be positive. Got: {detected}, {target}")
    return 1200 * math.log2(detected / target)


def frequency_to_note(frequency: float) -> Note:
    """Nearest equal-tempered note (A4 = 440 Hz)."""
    if frequency <= 0:
        raise ValueError(f"Frequency must be positive. Got: {frequency}")
    return Note.from_midi(int(round(69 + 12 * math.log2(frequency / 440.0))))


class TunerReading(BaseModel):
    """Result of comparing one frequency against the open strings."""
    model_config = ConfigDict(frozen=True)

    string: int = Field(..., ge=0, description="String index, 0 = lowest")
    note: Note = Field(..., description="Open-string target note")
    frequency: float = Field(..., gt=0, description="Frequency that was measured")
    cents: float = Field(..., description="Positive when sharp, negative when flat")

    @property
    def status(self) -> str:
        if abs(self.cents) <= IN_TUNE_CENTS:
            return "in_tune"
        return "sharp" if self.cents > 0 else "flat"

    @property
    def instruction(self) -> str:
        offset = abs(self.cents)
        if offset <= IN_TUNE_CENTS:
            return "In tune!"
        direction = "down" if self.cents > 0 else "up"
        if offset <= CLOSE_CENTS:
            return f"Tune {direction} slightly ({offset:.1f}¢)"
        return f"Tune {direction} by {offset:.1f}¢"


def closest_string(
    frequency: float,
    tuning: Union[str, Sequence[Note]] = "standard"
) -> TunerReading:
    """
    Find the open string whose pitch is closest (in cents) to a frequency.

    Ties go to the lower string.
    """
    notes = get_tuning(tuning) if isinstance(tuning, str) else list(tuning)
    if not notes:
        raise ValueError("A tuning needs at least one string")

    distances = [abs(cents_between(frequency, note.frequency)) for note in notes]
    string = int(np.argmin(distances))
    target = notes[string]
    return TunerReading(
        string=string,
        note=target,
        frequency=frequency,
        cents=cents_between(frequency, target.frequency),
    )


def stable_frequency(
    readings: Sequence[float],
    min_readings: int = 3,
    tolerance: float = 0.05,
    window: int = STABILITY_WINDOW
) -> Optional[float]:
    """
    Median of recent readings, or None while they still disagree.

    Readings outside the guitar range are ignored, and of the rest only
    the last `window` count, so an old reading from the previous string
    stops mattering. The median is reported only once at least
    `min_readings` remain and every one of them lies within `tolerance`
    (relative) of it.
    """
    if window < 1:
        raise ValueError(f"Window must be at least 1. Got: {window}")
    in_range = [r for r in readings if MIN_FREQUENCY <= r <= MAX_FREQUENCY]
    values = np.asarray(in_range[-window:], dtype=float)
    if len(values) < min_readings:
        return None

    median = float(np.sort(values)[len(values) // 2])
    if np.all(np.abs(values - median) / median < tolerance):
        return median
    return None
