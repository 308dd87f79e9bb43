"""Spectral pitch estimation: Hann window, real FFT, peak pick, parabolic refinement.

One SpectralAnalyzer is built per (sample rate, frame size) pair and reused for
every frame of a capture session. Rebuild it when either parameter changes.
"""

import logging
import operator
from dataclasses import dataclass
from typing import Iterator, NamedTuple, Optional, Tuple

import numpy as np
from scipy import fft as sp_fft
from scipy.signal import get_window

from pitch_tuner.audio.config import A0_HZ, C8_HZ, AudioConfig, is_power_of_two

logger = logging.getLogger(__name__)

# Linear magnitude floor before dB conversion; 20*log10(1e-10) = -200 dB
MAGNITUDE_FLOOR = 1e-10
DEFAULT_NOISE_THRESHOLD_DB = -60.0

# Interpolation is skipped when the parabola is this flat
_FLAT_DENOMINATOR = 1e-10


class SpectrumPoint(NamedTuple):
    frequency: float  # Hz
    magnitude: float  # dB


@dataclass(frozen=True, eq=False)
class Spectrum:
    """Magnitude spectrum of one frame: N/2 bins ordered by frequency.

    Bin i sits at i * sample_rate / frame_size Hz. Compared and hashed by
    identity; use `np.array_equal` on the fields to compare contents.
    """

    frequencies: np.ndarray
    magnitudes: np.ndarray  # dB

    def __len__(self) -> int:
        return len(self.frequencies)

    def __iter__(self) -> Iterator[SpectrumPoint]:
        for f, m in zip(self.frequencies, self.magnitudes):
            yield SpectrumPoint(float(f), float(m))

    def __getitem__(self, i: int) -> SpectrumPoint:
        return SpectrumPoint(float(self.frequencies[i]), float(self.magnitudes[i]))

    def points(self) -> list:
        """(Hz, dB) pairs for plotting."""
        return list(self)

    def peak(self) -> Optional[SpectrumPoint]:
        """Loudest bin over the whole spectrum (not restricted to the musical band)."""
        if len(self) == 0:
            return None
        return self[int(np.argmax(self.magnitudes))]


def to_db(magnitude: np.ndarray) -> np.ndarray:
    """Linear magnitude -> dB with a floor, never -inf."""
    return 20.0 * np.log10(np.maximum(magnitude, MAGNITUDE_FLOOR))


def parabolic_offset(y_left: float, y_peak: float, y_right: float) -> Optional[float]:
    """Sub-bin offset of a peak from three linear magnitudes.

    Returns the vertex offset clamped to [-0.5, 0.5] bins, or None when the
    three points are too flat to fit.
    """
    denominator = y_left - 2.0 * y_peak + y_right
    if abs(denominator) <= _FLAT_DENOMINATOR:
        return None
    offset = 0.5 * (y_left - y_right) / denominator
    return float(np.clip(offset, -0.5, 0.5))


class SpectralAnalyzer:
    """Estimate the dominant frequency of a fixed-size frame.

    Interface:
      analyzer = SpectralAnalyzer(sample_rate=44_100, frame_size=4096)
      frequency, spectrum = analyzer.analyze(frame)   # frequency is None below the noise gate
    """

    def __init__(
        self,
        sample_rate: float,
        frame_size: int,
        *,
        min_frequency: float = A0_HZ,
        max_frequency: float = C8_HZ,
        noise_threshold_db: float = DEFAULT_NOISE_THRESHOLD_DB,
    ):
        """
        Args:
            sample_rate: Sample rate in Hz, must be positive.
            frame_size: FFT size, must be a power of two.
            min_frequency: Lowest frequency considered for the pitch peak.
            max_frequency: Highest frequency considered for the pitch peak.
            noise_threshold_db: Peak magnitude a pitch must exceed to be reported.
        """
        if sample_rate <= 0:
            raise ValueError(f"sample_rate must be positive, got {sample_rate}")
        if not is_power_of_two(frame_size):
            raise ValueError(f"frame_size must be a power of two, got {frame_size}")

        self.sample_rate = float(sample_rate)
        self.frame_size = operator.index(frame_size)
        self.min_frequency = min_frequency
        self.max_frequency = max_frequency
        self.noise_threshold_db = noise_threshold_db

        n_bins = frame_size // 2
        self._window = get_window("hann", frame_size, fftbins=True).astype(np.float64)
        self._windowed = np.empty(frame_size, dtype=np.float64)
        self._frequencies = np.arange(n_bins, dtype=np.float64) * self.sample_rate / frame_size
        self._frequencies.setflags(write=False)
        self._min_bin = max(0, int(min_frequency * frame_size / self.sample_rate))
        self._max_bin = min(n_bins - 1, int(max_frequency * frame_size / self.sample_rate))

        logger.debug(
            "SpectralAnalyzer: %d-point FFT at %.0f Hz, bin spacing %.3f Hz, search bins %d..%d",
            frame_size,
            self.sample_rate,
            self.bin_spacing,
            self._min_bin,
            self._max_bin,
        )

    @classmethod
    def from_config(cls, config: AudioConfig) -> "SpectralAnalyzer":
        return cls(
            config.sample_rate,
            config.frame_size,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
            noise_threshold_db=config.noise_threshold_db,
        )

    @property
    def bin_spacing(self) -> float:
        return self.sample_rate / self.frame_size

    @property
    def search_bins(self) -> Tuple[int, int]:
        """Inclusive bin range searched for the pitch peak; empty when lo > hi."""
        return self._min_bin, self._max_bin

    def spectrum(self, frame: np.ndarray) -> Spectrum:
        """Windowed magnitude spectrum of one frame in dB."""
        frame = self._check_frame(frame)
        np.multiply(frame, self._window, out=self._windowed)
        bins = sp_fft.rfft(self._windowed)[: self.frame_size // 2]
        return Spectrum(frequencies=self._frequencies, magnitudes=to_db(np.abs(bins)))

    def analyze(self, frame: np.ndarray) -> Tuple[Optional[float], Spectrum]:
        """Analyze one frame into (dominant frequency or None, full spectrum).

        Args:
            frame: Mono samples, length must equal frame_size.

        Returns:
            The refined peak frequency in Hz when the band peak exceeds the
            noise threshold, else None; the spectrum is always returned.

        Raises:
            ValueError: If the frame length differs from frame_size.
        """
        spectrum = self.spectrum(frame)
        lo, hi = self._min_bin, self._max_bin
        if lo > hi:
            return None, spectrum

        band = spectrum.magnitudes[lo : hi + 1]
        peak = int(np.argmax(band))
        peak_db = float(band[peak])
        if peak_db <= self.noise_threshold_db:
            return None, spectrum
        return self._refine(band, lo, peak), spectrum

    def _refine(self, band: np.ndarray, lo: int, peak: int) -> float:
        """Parabolic interpolation of the band peak; raw bin frequency at band edges."""
        raw = float(self._frequencies[lo + peak])
        if peak == 0 or peak == len(band) - 1:
            return raw
        # parabola fits better on linear magnitude than on dB
        y_left, y_peak, y_right = 10.0 ** (band[peak - 1 : peak + 2] / 20.0)
        offset = parabolic_offset(y_left, y_peak, y_right)
        if offset is None:
            return raw
        return raw + offset * self.bin_spacing

    def _check_frame(self, frame: np.ndarray) -> np.ndarray:
        frame = np.asarray(frame, dtype=np.float64)
        if frame.ndim != 1 or frame.shape[0] != self.frame_size:
            raise ValueError(
                f"frame must have shape ({self.frame_size},), got {frame.shape}"
            )
        return frame
