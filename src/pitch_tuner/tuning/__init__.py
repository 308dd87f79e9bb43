"""Temperaments, reference pitch and frequency/note conversion."""

from pitch_tuner.tuning.model import Note, TuningModel
from pitch_tuner.tuning.reference import (
    FREQUENCY_STANDARDS,
    MIDI_REFERENCE_STANDARDS,
    STANDARD_A4_RANGE,
    WIDE_A4_RANGE,
    TuningReference,
)
from pitch_tuner.tuning.temperament import NOTE_NAMES, Temperament, ratio_for, ratio_table

__all__ = [
    "FREQUENCY_STANDARDS",
    "MIDI_REFERENCE_STANDARDS",
    "NOTE_NAMES",
    "Note",
    "STANDARD_A4_RANGE",
    "Temperament",
    "TuningModel",
    "TuningReference",
    "WIDE_A4_RANGE",
    "ratio_for",
    "ratio_table",
]
