"""Per-block pitch detection: audio block -> frames -> spectrum + levels -> note.

Glue that wires the audio and tuning components. Each incoming block is cut
into analysis frames; the first frame with a detected pitch wins and the rest
of the block is skipped. If no frame has a pitch, the last frame's spectrum
and levels are still emitted so a display can keep moving. A block shorter
than one frame emits nothing.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, Iterator, Optional

import numpy as np

from pitch_tuner.audio import (
    AudioCollector,
    AudioConfig,
    FrameChunker,
    LevelMeter,
    LevelReading,
    SpectralAnalyzer,
    Spectrum,
)
from pitch_tuner.pipeline.history import PitchHistory
from pitch_tuner.tuning import Note, TuningModel

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PitchResult:
    """One emitted analysis result."""

    frequency: Optional[float]  # Hz, None below the noise gate
    spectrum: Spectrum
    levels: LevelReading
    note: Optional[Note] = None  # only when frequency is present


ResultCallback = Callable[[PitchResult], None]


class PitchDetectionPipeline:
    """Runs FrameChunker -> SpectralAnalyzer + LevelMeter -> TuningModel per block.

    The analyzer and level meter belong to this pipeline; run one pipeline
    per concurrent audio stream. The TuningModel may be shared.

    Interface:
      pipeline = PitchDetectionPipeline(
          config=AudioConfig(sample_rate=48_000),
          tuning=TuningModel(temperament="just"),
          on_result=print,
      )
      result = pipeline.process_block(samples)   # from a capture callback
      pipeline.run()                             # or: blocks until stop(), reading the microphone
    """

    def __init__(
        self,
        config: Optional[AudioConfig] = None,
        tuning: Optional[TuningModel] = None,
        analyzer: Optional[SpectralAnalyzer] = None,
        level_meter: Optional[LevelMeter] = None,
        on_result: Optional[ResultCallback] = None,
        audio_collector: Optional[AudioCollector] = None,
        history: Optional[PitchHistory] = None,
    ):
        self.config = config or AudioConfig()
        self.tuning = tuning or TuningModel()
        self.analyzer = analyzer or SpectralAnalyzer.from_config(self.config)
        if self.analyzer.frame_size != self.config.frame_size:
            raise ValueError(
                f"analyzer frame_size {self.analyzer.frame_size} does not match "
                f"config frame_size {self.config.frame_size}"
            )
        self.level_meter = level_meter or LevelMeter.from_config(self.config)
        self.chunker = FrameChunker(self.config.frame_size)
        self.on_result = on_result or (lambda r: None)
        self.audio_collector = audio_collector or AudioCollector(self.config)
        self.history = history or PitchHistory(self.config.history_size)

        self._stopped = False

    @property
    def sample_rate(self) -> float:
        return self.analyzer.sample_rate

    @property
    def frame_size(self) -> int:
        return self.analyzer.frame_size

    def stop(self) -> None:
        """Signal the run loop to exit (checked each block)."""
        self._stopped = True

    def reconfigure(
        self,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
    ) -> None:
        """Rebuild analyzer, chunker and meter after a device format change.

        Raises:
            ValueError: If the new parameters are invalid; the old state is kept.
        """
        kwargs = {}
        if sample_rate is not None:
            kwargs["sample_rate"] = int(sample_rate)
        if frame_size is not None:
            kwargs["frame_size"] = int(frame_size)
        if not kwargs:
            return
        config = replace(self.config, **kwargs)
        analyzer = SpectralAnalyzer.from_config(config)

        self.config = config
        self.analyzer = analyzer
        self.chunker = FrameChunker(config.frame_size)
        self.level_meter = LevelMeter.from_config(config)
        self.audio_collector = AudioCollector(config)
        logger.debug(
            "Pipeline reconfigured: %d Hz, frame %d", config.sample_rate, config.frame_size
        )

    def process_block(
        self,
        block: np.ndarray,
        sample_rate: Optional[float] = None,
    ) -> Optional[PitchResult]:
        """Analyze one capture block and return its result, or None.

        Args:
            block: Mono samples of any length.
            sample_rate: Rate the block was captured at, if known. A block at
                a different rate than the analyzer's is skipped.

        Returns:
            The first frame with a pitch, else the last frame's result; None
            if the block holds less than one frame or has the wrong rate.
        """
        if sample_rate is not None and float(sample_rate) != self.sample_rate:
            logger.warning(
                "Skipping block at %s Hz; pipeline is configured for %s Hz",
                sample_rate,
                self.sample_rate,
            )
            return None

        last: Optional[PitchResult] = None
        for frame in self.chunker.frames(block):
            frequency, spectrum = self.analyzer.analyze(frame)
            levels = self.level_meter.measure(frame)
            if frequency is not None:
                self.history.push(frequency)
                return PitchResult(
                    frequency=frequency,
                    spectrum=spectrum,
                    levels=levels,
                    note=self.tuning.frequency_to_note(frequency),
                )
            last = PitchResult(frequency=None, spectrum=spectrum, levels=levels)
        return last

    def analyze_all(self, block: np.ndarray) -> list[PitchResult]:
        """Analyze every frame of a block without stopping at the first pitch.

        Every detected pitch is pushed to the history, in frame order.
        """
        results = []
        for frame in self.chunker.frames(block):
            frequency, spectrum = self.analyzer.analyze(frame)
            levels = self.level_meter.measure(frame)
            if frequency is not None:
                self.history.push(frequency)
            note = self.tuning.frequency_to_note(frequency)
            results.append(PitchResult(frequency, spectrum, levels, note))
        return results

    def _emit(self, block: np.ndarray) -> Optional[PitchResult]:
        block = np.asarray(block, dtype=np.float32).reshape(-1)
        if block.size == 0:
            return None
        result = self.process_block(block)
        if result is not None:
            self.on_result(result)
        return result

    def run(
        self,
        audio_iterator: Optional[Iterator[np.ndarray]] = None,
        device: Optional[int] = None,
    ) -> None:
        """Run until stopped or the iterator is exhausted.

        Args:
            audio_iterator: Source of capture blocks. If None, read the
                microphone via audio_collector.record_stream().
            device: Microphone device index when using live audio (ignored if
                audio_iterator is provided).
        """
        self._stopped = False
        if audio_iterator is None:
            audio_iterator = self.audio_collector.record_stream(device=device)
        for block in audio_iterator:
            if self._stopped:
                break
            self._emit(block)

    def run_for_n_results(
        self,
        n: int,
        audio_iterator: Iterator[np.ndarray],
    ) -> list[PitchResult]:
        """Run until n results have been emitted or blocks run out; used for tests."""
        self._stopped = False
        results: list[PitchResult] = []
        for block in audio_iterator:
            if len(results) >= n or self._stopped:
                break
            result = self._emit(block)
            if result is not None:
                results.append(result)
        return results
