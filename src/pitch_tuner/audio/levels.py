"""Loudness meter: EMA-smoothed RMS and instantaneous peak, in dBFS."""

from typing import NamedTuple, Optional

import numpy as np

from pitch_tuner.audio.config import AudioConfig

_LINEAR_FLOOR = 1e-10


class LevelReading(NamedTuple):
    rms: float  # dBFS, smoothed
    peak: float  # dBFS, current frame


def amplitude_to_dbfs(value: float) -> float:
    """Linear amplitude relative to full scale 1.0 -> dB."""
    return float(20.0 * np.log10(max(value, _LINEAR_FLOOR)))


class LevelMeter:
    """Per-frame RMS/peak meter with exponential smoothing of the RMS.

    smoothed = (1 - alpha) * smoothed + alpha * raw_rms_db

    Both outputs are clamped to [floor_db, 0]. Peak is not smoothed; any
    peak-hold decay belongs to the display layer.
    """

    def __init__(self, floor_db: float = -80.0, smoothing: float = 0.1):
        if floor_db >= 0:
            raise ValueError(f"floor_db must be negative, got {floor_db}")
        if not 0 < smoothing < 1:
            raise ValueError(f"smoothing must be in (0, 1), got {smoothing}")
        self.floor_db = floor_db
        self.smoothing = smoothing
        self._smoothed_db = floor_db

    @classmethod
    def from_config(cls, config: Optional[AudioConfig] = None) -> "LevelMeter":
        config = config or AudioConfig()
        return cls(floor_db=config.level_floor_db, smoothing=config.level_smoothing)

    @property
    def smoothed_db(self) -> float:
        """Unclamped smoothed RMS state."""
        return self._smoothed_db

    def reset(self) -> None:
        self._smoothed_db = self.floor_db

    def measure(self, frame: np.ndarray) -> LevelReading:
        """Measure one frame; an empty frame reads (floor, floor) and leaves state alone."""
        samples = np.asarray(frame, dtype=np.float64).reshape(-1)
        if samples.size == 0:
            return LevelReading(self.floor_db, self.floor_db)

        rms_db = amplitude_to_dbfs(float(np.sqrt(np.mean(samples**2))))
        peak_db = amplitude_to_dbfs(float(np.max(np.abs(samples))))

        a = self.smoothing
        self._smoothed_db = (1.0 - a) * self._smoothed_db + a * rms_db

        return LevelReading(self._clamp(self._smoothed_db), self._clamp(peak_db))

    def _clamp(self, db: float) -> float:
        return min(0.0, max(self.floor_db, db))
