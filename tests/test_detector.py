"""Unit tests for PitchDetectionPipeline (block -> frames -> pitch result)."""

from __future__ import annotations

import unittest
from typing import List

import numpy as np

from pitch_tuner.audio import AudioConfig, SpectralAnalyzer
from pitch_tuner.pipeline import PitchDetectionPipeline, PitchHistory, PitchResult
from pitch_tuner.tuning import Temperament, TuningModel, TuningReference

SAMPLE_RATE = 8_000
FRAME = 1024


def _sine(freq: float, n: int, amplitude: float = 0.5) -> np.ndarray:
    t = np.arange(n) / SAMPLE_RATE
    return (amplitude * np.sin(2 * np.pi * freq * t)).astype(np.float32)


def _silence(n: int) -> np.ndarray:
    return np.zeros(n, dtype=np.float32)


class TestPitchDetectionPipeline(unittest.TestCase):
    """Tests for PitchDetectionPipeline.process_block and friends."""

    def setUp(self) -> None:
        self.config = AudioConfig(sample_rate=SAMPLE_RATE, frame_size=FRAME, block_size=FRAME)
        self.emitted: List[PitchResult] = []
        self.pipeline = PitchDetectionPipeline(config=self.config, on_result=self.emitted.append)

    def test_single_frame_with_pitch(self) -> None:
        result = self.pipeline.process_block(_sine(440.0, FRAME))
        self.assertIsNotNone(result)
        self.assertAlmostEqual(result.frequency, 440.0, delta=2.0)
        self.assertEqual((result.note.name, result.note.octave), ("A", 4))
        self.assertEqual(len(result.spectrum), FRAME // 2)

    def test_short_block_emits_nothing(self) -> None:
        self.assertIsNone(self.pipeline.process_block(_sine(440.0, FRAME - 1)))
        self.assertIsNone(self.pipeline.process_block(_silence(0)))

    def test_silent_block_keeps_last_frame(self) -> None:
        result = self.pipeline.process_block(_silence(2 * FRAME))
        self.assertIsNotNone(result)
        self.assertIsNone(result.frequency)
        self.assertIsNone(result.note)
        self.assertEqual(result.levels.rms, self.config.level_floor_db)
        self.assertEqual(len(self.pipeline.history), 0)

    def test_first_frame_with_pitch_wins(self) -> None:
        block = np.concatenate([_silence(FRAME), _sine(440.0, FRAME), _sine(220.0, FRAME)])
        result = self.pipeline.process_block(block)
        self.assertEqual(result.note.label, "A4")

    def test_remaining_frames_are_skipped(self) -> None:
        """Frames after the winning one never reach the level meter."""
        loud = np.full(FRAME, 0.9, dtype=np.float32)
        block = np.concatenate([_sine(440.0, FRAME, amplitude=0.01), loud])
        self.pipeline.process_block(block)
        smoothed_after_one = self.pipeline.level_meter.smoothed_db

        meter_check = PitchDetectionPipeline(config=self.config)
        meter_check.level_meter.measure(_sine(440.0, FRAME, amplitude=0.01))
        self.assertAlmostEqual(smoothed_after_one, meter_check.level_meter.smoothed_db)

    def test_trailing_partial_frame_dropped(self) -> None:
        block = np.concatenate([_silence(FRAME), _sine(440.0, FRAME // 2)])
        result = self.pipeline.process_block(block)
        self.assertIsNone(result.frequency)

    def test_rate_mismatch_skips_block(self) -> None:
        with self.assertLogs("pitch_tuner.pipeline.detector", level="WARNING"):
            self.assertIsNone(self.pipeline.process_block(_sine(440.0, FRAME), sample_rate=44_100))
        self.assertIsNotNone(self.pipeline.process_block(_sine(440.0, FRAME), sample_rate=SAMPLE_RATE))

    def test_history_records_pitches(self) -> None:
        for _ in range(3):
            self.pipeline.process_block(_sine(440.0, FRAME))
        self.pipeline.process_block(_silence(FRAME))
        self.assertEqual(len(self.pipeline.history), 3)
        self.assertAlmostEqual(self.pipeline.history.mean(), 440.0, delta=2.0)

    def test_uses_shared_tuning(self) -> None:
        reference = TuningReference()
        tuning = TuningModel(reference, Temperament.JUST)
        pipeline = PitchDetectionPipeline(config=self.config, tuning=tuning)
        reference.set_a4_frequency(432.0)
        result = pipeline.process_block(_sine(440.0, FRAME))
        self.assertEqual(result.note.name, "A")
        self.assertGreater(result.note.cents, 25)

    def test_analyze_all(self) -> None:
        block = np.concatenate([_silence(FRAME), _sine(440.0, FRAME), _silence(FRAME)])
        results = self.pipeline.analyze_all(block)
        self.assertEqual(len(results), 3)
        self.assertIsNone(results[0].frequency)
        self.assertIsNotNone(results[1].frequency)
        self.assertEqual(results[1].note.label, "A4")
        self.assertIsNone(results[2].note)

    def test_analyze_all_records_history(self) -> None:
        block = np.concatenate([_sine(440.0, FRAME), _silence(FRAME), _sine(880.0, FRAME)])
        results = self.pipeline.analyze_all(block)
        self.assertEqual(len(self.pipeline.history), 2)
        np.testing.assert_array_equal(
            self.pipeline.history.get_all(), [results[0].frequency, results[2].frequency]
        )

    def test_results_compare_without_error(self) -> None:
        first = self.pipeline.process_block(_sine(440.0, FRAME))
        second = self.pipeline.process_block(_sine(440.0, FRAME))
        self.assertEqual(first, first)
        self.assertNotEqual(first, second)
        self.assertEqual(len({first, second}), 2)

    def test_mismatched_analyzer(self) -> None:
        with self.assertRaises(ValueError):
            PitchDetectionPipeline(config=self.config, analyzer=SpectralAnalyzer(SAMPLE_RATE, 2048))


class TestRunLoop(unittest.TestCase):
    """run / run_for_n_results / stop with a synthetic block source."""

    def setUp(self) -> None:
        self.config = AudioConfig(sample_rate=SAMPLE_RATE, frame_size=FRAME, block_size=FRAME)

    def test_run_emits_each_block(self) -> None:
        emitted: List[PitchResult] = []
        pipeline = PitchDetectionPipeline(config=self.config, on_result=emitted.append)
        blocks = [_sine(440.0, FRAME), _silence(FRAME), _sine(880.0, FRAME), _silence(10)]
        pipeline.run(audio_iterator=iter(blocks))
        self.assertEqual(len(emitted), 3)
        self.assertEqual(emitted[0].note.label, "A4")
        self.assertIsNone(emitted[1].frequency)
        self.assertEqual(emitted[2].note.label, "A5")

    def test_run_for_n_results(self) -> None:
        pipeline = PitchDetectionPipeline(config=self.config)
        blocks = (_sine(440.0, FRAME) for _ in range(10))
        results = pipeline.run_for_n_results(4, blocks)
        self.assertEqual(len(results), 4)
        self.assertTrue(all(r.note.label == "A4" for r in results))

    def test_run_for_n_results_exhausted(self) -> None:
        pipeline = PitchDetectionPipeline(config=self.config)
        results = pipeline.run_for_n_results(5, iter([_sine(440.0, FRAME), _silence(100)]))
        self.assertEqual(len(results), 1)

    def test_stop_from_callback(self) -> None:
        emitted: List[PitchResult] = []
        pipeline = PitchDetectionPipeline(config=self.config)

        def on_result(result: PitchResult) -> None:
            emitted.append(result)
            pipeline.stop()

        pipeline.on_result = on_result
        pipeline.run(audio_iterator=iter([_sine(440.0, FRAME)] * 5))
        self.assertEqual(len(emitted), 1)


class TestReconfigure(unittest.TestCase):
    """Sample-rate and frame-size changes rebuild the analysis chain."""

    def setUp(self) -> None:
        self.pipeline = PitchDetectionPipeline(
            config=AudioConfig(sample_rate=SAMPLE_RATE, frame_size=FRAME)
        )

    def test_new_sample_rate(self) -> None:
        self.pipeline.reconfigure(sample_rate=16_000)
        self.assertEqual(self.pipeline.sample_rate, 16_000.0)
        self.assertEqual(self.pipeline.config.sample_rate, 16_000)
        self.assertIsNone(self.pipeline.process_block(_sine(440.0, FRAME), sample_rate=SAMPLE_RATE))

        t = np.arange(FRAME) / 16_000
        block = (0.5 * np.sin(2 * np.pi * 440.0 * t)).astype(np.float32)
        self.assertEqual(self.pipeline.process_block(block).note.label, "A4")

    def test_new_frame_size(self) -> None:
        self.pipeline.reconfigure(frame_size=2048)
        self.assertEqual(self.pipeline.frame_size, 2048)
        self.assertIsNone(self.pipeline.process_block(_sine(440.0, FRAME)))
        self.assertIsNotNone(self.pipeline.process_block(_sine(440.0, 2048)))

    def test_invalid_keeps_old_state(self) -> None:
        analyzer = self.pipeline.analyzer
        with self.assertRaises(ValueError):
            self.pipeline.reconfigure(frame_size=1000)
        self.assertIs(self.pipeline.analyzer, analyzer)
        self.assertEqual(self.pipeline.frame_size, FRAME)

    def test_no_change(self) -> None:
        analyzer = self.pipeline.analyzer
        self.pipeline.reconfigure()
        self.assertIs(self.pipeline.analyzer, analyzer)


class TestPitchHistory(unittest.TestCase):
    """Ring buffer of detected frequencies."""

    def test_empty(self) -> None:
        history = PitchHistory(4)
        self.assertEqual(len(history), 0)
        self.assertIsNone(history.latest())
        self.assertIsNone(history.mean())
        self.assertIsNone(history.std())
        self.assertEqual(history.get_all().size, 0)

    def test_wraps_oldest_first(self) -> None:
        history = PitchHistory(3)
        for f in (100.0, 200.0, 300.0, 400.0, 500.0):
            history.push(f)
        self.assertEqual(len(history), 3)
        np.testing.assert_array_equal(history.get_all(), [300.0, 400.0, 500.0])
        self.assertEqual(history.latest(), 500.0)
        self.assertAlmostEqual(history.mean(), 400.0)

    def test_std(self) -> None:
        history = PitchHistory()
        history.push(438.0)
        self.assertIsNone(history.std())
        history.push(442.0)
        self.assertAlmostEqual(history.std(), 2.0)

    def test_clear(self) -> None:
        history = PitchHistory(2)
        history.push(1.0)
        history.clear()
        self.assertEqual(len(history), 0)
        self.assertIsNone(history.latest())

    def test_invalid_size(self) -> None:
        with self.assertRaises(ValueError):
            PitchHistory(0)


if __name__ == "__main__":
    unittest.main(verbosity=2)
