"""Pitch tuner engine - capture, spectral pitch detection, levels, temperaments, pipeline."""

from pitch_tuner.audio import AudioConfig, LevelMeter, SpectralAnalyzer
from pitch_tuner.pipeline import PitchDetectionPipeline, PitchResult
from pitch_tuner.tuning import Note, Temperament, TuningModel, TuningReference

__version__ = "0.1.0"
__all__ = [
    "AudioConfig",
    "LevelMeter",
    "Note",
    "PitchDetectionPipeline",
    "PitchResult",
    "SpectralAnalyzer",
    "Temperament",
    "TuningModel",
    "TuningReference",
]
