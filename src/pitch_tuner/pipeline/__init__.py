"""Block-level pitch detection pipeline."""

from pitch_tuner.pipeline.detector import PitchDetectionPipeline, PitchResult
from pitch_tuner.pipeline.history import PitchHistory

__all__ = ["PitchDetectionPipeline", "PitchHistory", "PitchResult"]
