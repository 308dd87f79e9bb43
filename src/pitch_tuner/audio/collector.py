"""Mono audio capture for the tuner, plus WAV input for offline runs."""

import logging
import queue
from pathlib import Path
from typing import Iterator, Optional, Tuple, Union

import numpy as np

try:
    import sounddevice as sd
except ImportError:
    sd = None  # type: ignore

from pitch_tuner.audio.config import AudioConfig

logger = logging.getLogger(__name__)


def _require_sounddevice() -> None:
    if sd is None:
        raise ImportError("sounddevice is required for recording. pip install sounddevice")


def read_wav(filepath: Union[str, Path]) -> Tuple[np.ndarray, int]:
    """Read a WAV file as mono float32 in [-1, 1].

    Returns:
        (samples, sample_rate)
    """
    import scipy.io.wavfile as wavfile

    sr, audio = wavfile.read(str(filepath))
    if audio.dtype == np.int16:
        audio = audio.astype(np.float32) / 32768.0
    elif audio.dtype == np.int32:
        audio = audio.astype(np.float32) / 2147483648.0
    elif audio.dtype == np.uint8:
        audio = (audio.astype(np.float32) - 128.0) / 128.0
    if audio.ndim > 1:
        audio = audio.mean(axis=1)
    return audio.astype(np.float32), int(sr)


class AudioCollector:
    """Records mono float32 PCM for pitch detection, in blocks pushed by the device."""

    def __init__(self, config: Optional[AudioConfig] = None):
        self.config = config or AudioConfig()

    def record_chunk(
        self,
        duration_sec: float,
        device: Optional[int] = None,
    ) -> np.ndarray:
        """Record a single chunk of audio.

        Args:
            duration_sec: Recording duration in seconds.
            device: Input device index (None = default).

        Returns:
            Mono float32 array, shape (n_samples,), normalized [-1, 1].
        """
        _require_sounddevice()

        samples = int(duration_sec * self.config.sample_rate)
        rec = sd.rec(
            samples,
            samplerate=self.config.sample_rate,
            channels=self.config.channels,
            dtype=self.config.dtype,
            device=device,
        )
        sd.wait()
        return rec.reshape(len(rec), -1).mean(axis=1).astype(np.float32)

    def record_stream(
        self,
        block_size: Optional[int] = None,
        device: Optional[int] = None,
    ) -> Iterator[np.ndarray]:
        """Stream capture blocks as the device delivers them.

        The device callback only copies the block into a queue, so the audio
        thread is never held up by analysis.

        Args:
            block_size: Samples per block requested from the device
                (None = config.block_size). The host may deliver other sizes.
            device: Input device index (None = default).

        Yields:
            Mono float32 blocks, shape (n_samples,).
        """
        _require_sounddevice()

        blocksize = block_size or self.config.block_size
        q: "queue.Queue[np.ndarray]" = queue.Queue()

        def callback(indata: np.ndarray, _frames: int, _time: object, status: object) -> None:
            if status:
                logger.warning("Input stream status: %s", status)
            # mean() copies, so the device buffer can be reused
            q.put(indata.mean(axis=1, dtype=np.float32))

        with sd.InputStream(
            samplerate=self.config.sample_rate,
            channels=self.config.channels,
            dtype=self.config.dtype,
            blocksize=blocksize,
            device=device,
            callback=callback,
        ):
            logger.debug(
                "Capturing %d Hz, %d channel(s), block %d", self.config.sample_rate,
                self.config.channels, blocksize,
            )
            while True:
                yield q.get()

    def wav_blocks(
        self,
        filepath: Union[str, Path],
        block_size: Optional[int] = None,
    ) -> Iterator[np.ndarray]:
        """Yield a WAV file in capture-sized blocks, like a live stream would.

        Raises:
            ValueError: If the file's sample rate differs from config.sample_rate.
        """
        audio, sr = read_wav(filepath)
        if sr != self.config.sample_rate:
            raise ValueError(
                f"Expected {self.config.sample_rate} Hz, got {sr} Hz. Resample the file."
            )
        blocksize = block_size or self.config.block_size
        for i in range(0, len(audio), blocksize):
            block = audio[i : i + blocksize]
            if len(block) > 0:
                yield block
