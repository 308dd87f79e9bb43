"""Fixed-size history of detected pitches for graphing and stability stats."""

from typing import Optional

import numpy as np


class PitchHistory:
    """Ring buffer of the most recent detected frequencies (Hz)."""

    def __init__(self, size: int = 100):
        if size < 1:
            raise ValueError("size must be >= 1")
        self.size = size
        self._data = np.zeros(size, dtype=np.float64)
        self._write_idx = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def push(self, frequency: float) -> None:
        """Append one pitch; the oldest is overwritten once full."""
        self._data[self._write_idx] = frequency
        self._write_idx = (self._write_idx + 1) % self.size
        self._count = min(self._count + 1, self.size)

    def get_all(self) -> np.ndarray:
        """All buffered pitches, oldest first."""
        if self._count < self.size:
            return self._data[: self._count].copy()
        return np.roll(self._data, -self._write_idx)

    def latest(self) -> Optional[float]:
        if self._count == 0:
            return None
        return float(self._data[self._write_idx - 1])

    def mean(self) -> Optional[float]:
        if self._count == 0:
            return None
        return float(self.get_all().mean())

    def std(self) -> Optional[float]:
        """Population standard deviation; None until two pitches exist."""
        if self._count < 2:
            return None
        return float(self.get_all().std())

    def clear(self) -> None:
        self._write_idx = 0
        self._count = 0
