"""Centralized audio capture and analysis configuration.

Encoding standards:
- Audio: mono float32, 44.1 kHz
- Analysis: 4096-sample frames, Hann window, real FFT
- Pitch search band: A0 (27.5 Hz) to C8 (4186 Hz)
- Noise gate: -60 dB peak magnitude
- Level meter: dBFS clamped to [-80, 0], RMS smoothed by EMA (alpha 0.1)
"""

import operator
from dataclasses import dataclass

A0_HZ = 27.5
C8_HZ = 4186.0


def is_power_of_two(n: int) -> bool:
    """True for 1, 2, 4, 8, ... (any integer type, numpy included)."""
    try:
        n = operator.index(n)
    except TypeError:
        return False
    return n > 0 and (n & (n - 1)) == 0


@dataclass(frozen=True)
class AudioConfig:
    """Audio capture and pitch analysis configuration."""

    # Recording
    sample_rate: int = 44_100
    channels: int = 1  # mono
    dtype: str = "float32"
    block_size: int = 4096  # samples requested per capture callback

    # Spectral analysis
    frame_size: int = 4096  # FFT size, power of two
    min_frequency: float = A0_HZ
    max_frequency: float = C8_HZ
    noise_threshold_db: float = -60.0

    # Level meter
    level_floor_db: float = -80.0
    level_smoothing: float = 0.1

    # Number of detected pitches kept for the history graph
    history_size: int = 100

    def __post_init__(self) -> None:
        if self.sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {self.sample_rate}")
        if self.channels < 1:
            raise ValueError(f"channels must be >= 1, got {self.channels}")
        if not is_power_of_two(self.frame_size):
            raise ValueError(f"frame_size must be a power of two, got {self.frame_size}")
        if self.block_size <= 0:
            raise ValueError(f"block_size must be positive, got {self.block_size}")
        if not 0 < self.min_frequency < self.max_frequency:
            raise ValueError(
                f"need 0 < min_frequency < max_frequency, "
                f"got {self.min_frequency} and {self.max_frequency}"
            )
        if self.level_floor_db >= 0:
            raise ValueError(f"level_floor_db must be negative, got {self.level_floor_db}")
        if not 0 < self.level_smoothing < 1:
            raise ValueError(
                f"level_smoothing must be in (0, 1), got {self.level_smoothing}"
            )
        if self.history_size < 1:
            raise ValueError(f"history_size must be >= 1, got {self.history_size}")

    @property
    def bin_spacing(self) -> float:
        """Frequency distance between adjacent FFT bins in Hz."""
        return self.sample_rate / self.frame_size

    @property
    def frame_duration_sec(self) -> float:
        """Duration of one analysis frame in seconds."""
        return self.frame_size / self.sample_rate

    @property
    def block_duration_sec(self) -> float:
        """Duration of one capture block in seconds."""
        return self.block_size / self.sample_rate
