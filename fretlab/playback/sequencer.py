"""
Sequencer Module - Stepping Through a Progression

Holds a resolved chord sequence and a step index. An external clock
calls tick() once per step; every emitted step silences whatever the
previous step left sounding before the new chord is triggered, so two
chords never overlap.

The engine never owns an audio device. Whatever plays the notes is
handed in as a NoteOutput and stays owned by the caller.

Usage:
    from fretlab.playback.sequencer import ProgressionSequencer, resolve

    sequencer = ProgressionSequencer(resolve("C", ["I", "IV", "V", "I"]))
    sequencer.add_listener(lambda step: print(step.chord.name))
    sequencer.tick()     # C
    sequencer.tick()     # F
"""

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, Sequence

from pydantic import BaseModel, ConfigDict

from fretlab.data.schema import ChordSymbol, Note, Voicing
from fretlab.fretboard.voicing import find_voicing
from fretlab.theory.chords import ChordLike, as_chord
from fretlab.theory.harmony import KeyLike, resolve_numerals

logger = logging.getLogger(__name__)


DEFAULT_OCTAVE = 4

# Upper triad tones may sit one octave above the root, and Note stops at 9
MIN_OCTAVE = -1
MAX_OCTAVE = 8


# =============================================================================
# PITCHES
# =============================================================================

class ChordTones(BaseModel):
    """Concrete root, third and fifth of one sequencer step."""
    model_config = ConfigDict(frozen=True)

    root: Note
    third: Note
    fifth: Note

    @property
    def notes(self) -> List[Note]:
        return [self.root, self.third, self.fifth]

    @property
    def frequencies(self) -> List[float]:
        return [note.frequency for note in self.notes]


def check_octave(octave: int) -> int:
    if not MIN_OCTAVE <= octave <= MAX_OCTAVE:
        raise ValueError(f"Playback octave must be {MIN_OCTAVE}-{MAX_OCTAVE}. Got: {octave}")
    return octave


def resolve(key: KeyLike, numerals: Sequence[str]) -> List[ChordSymbol]:
    """Chord symbols for a numeral list; unknown numerals are dropped."""
    return resolve_numerals(key, numerals)


def step_pitches(chord: ChordLike, octave: int = DEFAULT_OCTAVE) -> ChordTones:
    """
    Place a chord's triad in a concrete octave.

    The root sits in `octave`. The third and fifth stay in the same
    octave unless their pitch class is lower than the root's, in which
    case they move up one so the triad always ascends from the root.

    Raises:
        ValueError: If the octave leaves no room for the upper tones
        UnknownNoteError: If a symbol string has no readable root

    Example:
        >>> [str(n) for n in step_pitches(parse_chord("G"), 4).notes]
        ['G4', 'B4', 'D5']
    """
    chord = as_chord(chord)
    octave = check_octave(octave)
    third_pc, fifth_pc = chord.triad_pitch_classes[1:]

    def place(pitch_class: int) -> Note:
        return Note(
            pitch_class=pitch_class,
            octave=octave + 1 if pitch_class < chord.root else octave,
        )

    return ChordTones(
        root=Note(pitch_class=chord.root, octave=octave),
        third=place(third_pc),
        fifth=place(fifth_pc),
    )


def seconds_per_step(bpm: float, beats_per_step: int = 4) -> float:
    """Clock period for one sequencer step at a tempo."""
    if bpm <= 0:
        raise ValueError(f"BPM must be positive. Got: {bpm}")
    if beats_per_step < 1:
        raise ValueError(f"Beats per step must be at least 1. Got: {beats_per_step}")
    return 60.0 / bpm * beats_per_step


# =============================================================================
# SEQUENCER
# =============================================================================

class NoteOutput(Protocol):
    """Anything that can sound notes: a synth voice, a MIDI port, a test double."""

    def silence(self) -> None:
        ...

    def trigger(self, notes: Sequence[Note], duration: float) -> None:
        ...


@dataclass(frozen=True)
class SequenceStep:
    """
    One emitted step.

    Attributes:
        index: Position in the sequence
        chord: The chord symbol
        tones: Root, third and fifth placed in the playback octave
        voicing: Fretboard diagram for display, None if none exists
        restarted: True for the first step after a load or restart
    """
    index: int
    chord: ChordSymbol
    tones: ChordTones
    voicing: Optional[Voicing]
    restarted: bool = False


StepListener = Callable[[SequenceStep], None]


class ProgressionSequencer:
    """
    Cyclic step sequencer over a chord list.

    Attributes:
        chords: The loaded sequence
        octave: Octave the chord roots are placed in
        note_duration: Seconds each triggered chord is held
        index: Current step (0 after every load or restart)
    """

    def __init__(
        self,
        chords: Sequence[ChordSymbol] = (),
        octave: int = DEFAULT_OCTAVE,
        output: Optional[NoteOutput] = None,
        note_duration: float = 1.0
    ):
        self.octave = check_octave(octave)
        self.output = output
        self.note_duration = note_duration
        self._listeners: List[StepListener] = []
        self.chords: List[ChordSymbol] = []
        self.index = 0
        self._pending_restart = True
        self.load(chords)

    def __len__(self) -> int:
        return len(self.chords)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    def load(self, chords: Sequence[ChordSymbol]) -> None:
        """Replace the sequence; playback starts again from step 0."""
        self.chords = list(chords)
        self.restart()

    def load_numerals(self, key: KeyLike, numerals: Sequence[str]) -> List[ChordSymbol]:
        chords = resolve(key, numerals)
        self.load(chords)
        return chords

    def restart(self) -> None:
        """Drop the current position; the next tick emits step 0."""
        self.index = 0
        self._pending_restart = True
        logger.debug("Sequencer restarted with %d chords", len(self.chords))

    # -------------------------------------------------------------------------
    # Stepping
    # -------------------------------------------------------------------------

    def current(self) -> Optional[ChordSymbol]:
        if not self.chords:
            return None
        return self.chords[self.index]

    def advance(self) -> Optional[ChordSymbol]:
        """Move to the next step, wrapping to 0 after the last one."""
        if not self.chords:
            return None
        self.index = (self.index + 1) % len(self.chords)
        return self.chords[self.index]

    def step(self, restarted: bool = False) -> Optional[SequenceStep]:
        """Build the step at the current index without moving."""
        chord = self.current()
        if chord is None:
            return None
        return SequenceStep(
            index=self.index,
            chord=chord,
            tones=step_pitches(chord, self.octave),
            voicing=find_voicing(chord),
            restarted=restarted,
        )

    def tick(self) -> Optional[SequenceStep]:
        """
        Clock callback: emit one step.

        The first tick after a load or restart emits step 0; every later
        tick advances first. Returns None for an empty sequence.
        """
        if not self.chords:
            return None

        restarted = self._pending_restart
        if restarted:
            self._pending_restart = False
        else:
            self.advance()

        step = self.step(restarted=restarted)
        self._emit(step)
        return step

    def _emit(self, step: SequenceStep) -> None:
        if self.output is not None:
            self.output.silence()
            self.output.trigger(step.tones.notes, self.note_duration)
        for listener in list(self._listeners):
            listener(step)

    # -------------------------------------------------------------------------
    # Listeners
    # -------------------------------------------------------------------------

    def add_listener(self, listener: StepListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StepListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)
