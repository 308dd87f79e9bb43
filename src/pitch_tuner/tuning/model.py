"""Frequency <-> note conversion under a selectable temperament.

The note name and octave always come from equal-temperament geometry around
the reference (nearest MIDI number). The cents value is measured against the
frequency the active temperament expects for that note, so the same input
can read in tune under one temperament and off under another.
"""

from __future__ import annotations

import math
import threading
from dataclasses import dataclass
from typing import Dict, Optional, Union

from pitch_tuner.tuning.reference import MIDI_MAX, MIDI_MIN, TuningReference
from pitch_tuner.tuning.temperament import NOTE_NAMES, Temperament, ratio_for

# Input frequencies outside this band never map to a note
MIN_NOTE_FREQUENCY = 20.0
MAX_NOTE_FREQUENCY = 20_000.0


def round_half_away(x: float) -> int:
    """Round to nearest integer, ties away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


def note_index(name: str) -> Optional[int]:
    """Pitch-class index of a sharp-spelled name ("c#" -> 1), None if unknown."""
    try:
        return NOTE_NAMES.index(name.strip().upper())
    except ValueError:
        return None


def midi_to_octave(midi: int) -> int:
    """Octave number with C4 = MIDI 60."""
    return midi // 12 - 1


@dataclass(frozen=True)
class Note:
    name: str
    octave: int
    frequency: float  # input Hz
    cents: int  # deviation from the temperament's expected frequency

    @property
    def label(self) -> str:
        return f"{self.name}{self.octave}"

    @property
    def midi_note(self) -> int:
        return NOTE_NAMES.index(self.name) + (self.octave + 1) * 12


class TuningModel:
    """Converts between frequency and (name, octave, cents).

    Interface:
      model = TuningModel()                          # equal temperament, A4 = 440 Hz
      model.set_temperament("werckmeister")
      note = model.frequency_to_note(441.0)          # Note(name="A", octave=4, cents=4, ...)
      hz = model.note_to_frequency("C", 4)
      model.cents_deviation("E")                     # temperament vs equal, in cents

    The reference may be shared with other components; pass the same
    TuningReference to each.
    """

    def __init__(
        self,
        reference: Optional[TuningReference] = None,
        temperament: Union[Temperament, str] = Temperament.EQUAL,
    ):
        self.reference = reference or TuningReference()
        self._temperament = Temperament.parse(temperament)
        self._lock = threading.Lock()

    @property
    def temperament(self) -> Temperament:
        with self._lock:
            return self._temperament

    def set_temperament(self, temperament: Union[Temperament, str]) -> Temperament:
        """Select the active temperament by member or name.

        Raises:
            ValueError: For an unknown name.
        """
        value = Temperament.parse(temperament)
        with self._lock:
            self._temperament = value
        return value

    @property
    def a4_frequency(self) -> float:
        return self.reference.a4_frequency

    @property
    def a4_midi_note(self) -> int:
        return self.reference.a4_midi_note

    def set_a4_frequency(self, frequency: float) -> float:
        return self.reference.set_a4_frequency(frequency)

    def set_a4_midi_note(self, midi_note: int) -> int:
        return self.reference.set_a4_midi_note(midi_note)

    def frequency_to_note(self, frequency: Optional[float]) -> Optional[Note]:
        """Nearest note and its cents deviation, or None when out of range."""
        if frequency is None or not math.isfinite(frequency):
            return None
        if frequency <= 0 or not MIN_NOTE_FREQUENCY <= frequency <= MAX_NOTE_FREQUENCY:
            return None

        a4_frequency, a4_midi = self.reference.snapshot()
        temperament = self.temperament

        midi = round_half_away(12.0 * math.log2(frequency / a4_frequency) + a4_midi)
        if not MIDI_MIN <= midi <= MIDI_MAX:
            return None

        ratio = ratio_for(temperament, midi - a4_midi)
        if ratio <= 0:
            return None
        expected = a4_frequency * ratio

        return Note(
            name=NOTE_NAMES[midi % 12],
            octave=midi_to_octave(midi),
            frequency=frequency,
            cents=round_half_away(1200.0 * math.log2(frequency / expected)),
        )

    def note_to_frequency(self, name: str, octave: int) -> Optional[float]:
        """Frequency the active temperament assigns to name+octave, None if out of range."""
        index = note_index(name)
        if index is None:
            return None
        midi = index + (octave + 1) * 12
        if not MIDI_MIN <= midi <= MIDI_MAX:
            return None

        a4_frequency, a4_midi = self.reference.snapshot()
        ratio = ratio_for(self.temperament, midi - a4_midi)
        if ratio <= 0:
            return None
        return a4_frequency * ratio

    def cents_deviation(self, name: str) -> int:
        """How far the active temperament bends a pitch class from equal temperament.

        Unknown names read 0.
        """
        index = note_index(name)
        if index is None:
            return 0
        equal = ratio_for(Temperament.EQUAL, index)
        tempered = ratio_for(self.temperament, index)
        if equal <= 0 or tempered <= 0:
            return 0
        return round_half_away(1200.0 * math.log2(tempered / equal))

    def deviation_table(self) -> Dict[str, int]:
        """cents_deviation for all 12 pitch classes, C first."""
        return {name: self.cents_deviation(name) for name in NOTE_NAMES}
