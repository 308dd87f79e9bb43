"""Audio capture, framing, spectral analysis and level metering."""

from pitch_tuner.audio.config import AudioConfig
from pitch_tuner.audio.collector import AudioCollector, read_wav
from pitch_tuner.audio.chunker import FrameChunker
from pitch_tuner.audio.levels import LevelMeter, LevelReading
from pitch_tuner.audio.spectrum import SpectralAnalyzer, Spectrum, SpectrumPoint

__all__ = [
    "AudioConfig",
    "AudioCollector",
    "FrameChunker",
    "LevelMeter",
    "LevelReading",
    "SpectralAnalyzer",
    "Spectrum",
    "SpectrumPoint",
    "read_wav",
]
