"""Tuning reference: the frequency assigned to a reference MIDI note.

A TuningReference is shared between the settings side and the detection
thread. Every read and write goes through one lock, and `snapshot()` returns
frequency and MIDI note together so a conversion never mixes a new frequency
with a stale note.
"""

import logging
import threading
from typing import Dict, NamedTuple, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_A4_FREQUENCY = 440.0
DEFAULT_A4_MIDI_NOTE = 69

# Range profiles for set_a4_frequency clamping
STANDARD_A4_RANGE: Tuple[float, float] = (400.0, 480.0)
WIDE_A4_RANGE: Tuple[float, float] = (1.0, 990.0)

MIDI_MIN = 0
MIDI_MAX = 127


class FrequencyStandard(NamedTuple):
    name: str
    frequency: float


class MidiStandard(NamedTuple):
    name: str
    note: int
    description: str


# Common historical A4 pitches
FREQUENCY_STANDARDS: Dict[str, FrequencyStandard] = {
    "modern": FrequencyStandard("Modern Standard (A440)", 440.0),
    "baroque": FrequencyStandard("Baroque (A415)", 415.0),
    "classical": FrequencyStandard("Classical (A430)", 430.0),
    "verdi": FrequencyStandard("Verdi (A432)", 432.0),
    "historical": FrequencyStandard("Historical (A409)", 409.0),
    "early": FrequencyStandard("Early Music (A392)", 392.0),
}

MIDI_REFERENCE_STANDARDS: Tuple[MidiStandard, ...] = (
    MidiStandard("A4 (Standard)", 69, "Modern standard reference"),
    MidiStandard("C4 (Middle C)", 60, "Middle C reference"),
    MidiStandard("A3", 57, "Lower A reference"),
    MidiStandard("C5", 72, "Higher C reference"),
    MidiStandard("G4", 67, "G reference"),
    MidiStandard("D4", 62, "D reference"),
)


class ReferenceSnapshot(NamedTuple):
    a4_frequency: float
    a4_midi_note: int


class TuningReference:
    """Mutable, lock-protected reference pitch.

    Interface:
      ref = TuningReference()                 # 440 Hz on MIDI 69
      ref.set_a4_frequency(415.0)             # clamped to frequency_range
      ref.set_a4_midi_note(60)                # clamped to [0, 127]
      freq, midi = ref.snapshot()
    """

    def __init__(
        self,
        a4_frequency: float = DEFAULT_A4_FREQUENCY,
        a4_midi_note: int = DEFAULT_A4_MIDI_NOTE,
        frequency_range: Tuple[float, float] = WIDE_A4_RANGE,
    ):
        lo, hi = frequency_range
        if not 0 < lo <= hi:
            raise ValueError(f"frequency_range must satisfy 0 < low <= high, got {frequency_range}")
        self.frequency_range = (float(lo), float(hi))
        self._lock = threading.Lock()
        self._a4_frequency = self._clamp_frequency(a4_frequency)
        self._a4_midi_note = self._clamp_midi(a4_midi_note)

    def __repr__(self) -> str:
        freq, midi = self.snapshot()
        return f"TuningReference(a4_frequency={freq}, a4_midi_note={midi})"

    @property
    def a4_frequency(self) -> float:
        with self._lock:
            return self._a4_frequency

    @property
    def a4_midi_note(self) -> int:
        with self._lock:
            return self._a4_midi_note

    def snapshot(self) -> ReferenceSnapshot:
        """Frequency and MIDI note read under one lock acquisition."""
        with self._lock:
            return ReferenceSnapshot(self._a4_frequency, self._a4_midi_note)

    def set_a4_frequency(self, frequency: float) -> float:
        """Set the reference frequency, clamped to frequency_range. Returns the stored value."""
        value = self._clamp_frequency(frequency)
        with self._lock:
            self._a4_frequency = value
        logger.debug("A4 frequency set to %.2f Hz (requested %s)", value, frequency)
        return value

    def set_a4_midi_note(self, midi_note: int) -> int:
        """Set the reference MIDI note, clamped to [0, 127]. Returns the stored value."""
        value = self._clamp_midi(midi_note)
        with self._lock:
            self._a4_midi_note = value
        logger.debug("Reference MIDI note set to %d (requested %s)", value, midi_note)
        return value

    def apply_frequency_standard(self, key: str) -> float:
        """Set the reference frequency from FREQUENCY_STANDARDS by key ("baroque", ...).

        Raises:
            ValueError: For an unknown key.
        """
        standard: Optional[FrequencyStandard] = FREQUENCY_STANDARDS.get(key.lower())
        if standard is None:
            raise ValueError(
                f"Unknown frequency standard {key!r}, valid options: {sorted(FREQUENCY_STANDARDS)}"
            )
        return self.set_a4_frequency(standard.frequency)

    def _clamp_frequency(self, frequency: float) -> float:
        lo, hi = self.frequency_range
        return max(lo, min(hi, float(frequency)))

    @staticmethod
    def _clamp_midi(midi_note: int) -> int:
        return max(MIDI_MIN, min(MIDI_MAX, int(midi_note)))
