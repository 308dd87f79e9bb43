"""CLI: live tuner from the microphone, or pitch readout of a WAV file."""

import argparse
import logging
import sys
from pathlib import Path

from pitch_tuner.audio import AudioCollector
from pitch_tuner.audio.config import AudioConfig
from pitch_tuner.display import cents_needle, level_label, note_label
from pitch_tuner.pipeline import PitchDetectionPipeline, PitchResult
from pitch_tuner.tuning import FREQUENCY_STANDARDS, Temperament, TuningModel, TuningReference


def _print_result(result: PitchResult) -> None:
    if result.frequency is None:
        print(f"{'--':>10}  {'':>10}  {level_label(result.levels)}")
        return
    needle = cents_needle(result.note.cents) if result.note is not None else ""
    print(
        f"{note_label(result.note):>10}  {result.frequency:8.2f} Hz  "
        f"{level_label(result.levels)}  {needle}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Real-time pitch detection and tuning")
    parser.add_argument(
        "--file",
        "-f",
        type=Path,
        default=None,
        help="Analyze a WAV file instead of the microphone",
    )
    parser.add_argument(
        "--device",
        type=int,
        default=None,
        help="Input device index (list with --list-devices)",
    )
    parser.add_argument(
        "--list-devices",
        action="store_true",
        help="List available audio input devices and exit",
    )
    parser.add_argument(
        "--list-temperaments",
        action="store_true",
        help="List temperaments with their deviation from equal temperament and exit",
    )
    parser.add_argument(
        "--temperament",
        "-t",
        default=Temperament.EQUAL.value,
        help="Temperament name (default: equal)",
    )
    parser.add_argument(
        "--a4",
        type=float,
        default=None,
        help="Reference frequency in Hz (default: 440)",
    )
    parser.add_argument(
        "--standard",
        choices=sorted(FREQUENCY_STANDARDS),
        default=None,
        help="Historical reference pitch preset (overridden by --a4)",
    )
    parser.add_argument(
        "--reference-midi",
        type=int,
        default=69,
        help="MIDI note the reference frequency is assigned to (default: 69 = A4)",
    )
    parser.add_argument(
        "--sample-rate",
        type=int,
        default=AudioConfig.sample_rate,
        help=f"Capture sample rate in Hz (default: {AudioConfig.sample_rate})",
    )
    parser.add_argument(
        "--frame-size",
        type=int,
        default=AudioConfig.frame_size,
        help=f"FFT frame size, power of two (default: {AudioConfig.frame_size})",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Debug logging",
    )
    return parser


def list_temperaments() -> None:
    model = TuningModel()
    for temperament in Temperament:
        model.set_temperament(temperament)
        deviations = " ".join(f"{c:+4d}" for c in model.deviation_table().values())
        print(f"{temperament.value:22} {deviations}  {temperament.description}")


def main() -> None:
    args = build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_devices:
        try:
            import sounddevice as sd
            print(sd.query_devices())
        except ImportError:
            print("sounddevice not installed: pip install sounddevice", file=sys.stderr)
            sys.exit(1)
        return

    if args.list_temperaments:
        list_temperaments()
        return

    try:
        config = AudioConfig(sample_rate=args.sample_rate, frame_size=args.frame_size)
        temperament = Temperament.parse(args.temperament)
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)

    reference = TuningReference(a4_midi_note=args.reference_midi)
    if args.standard:
        reference.apply_frequency_standard(args.standard)
    if args.a4 is not None:
        reference.set_a4_frequency(args.a4)

    pipeline = PitchDetectionPipeline(
        config=config,
        tuning=TuningModel(reference, temperament),
        on_result=_print_result,
    )

    print(
        f"{temperament.label}, reference {reference.a4_frequency:.1f} Hz "
        f"on MIDI {reference.a4_midi_note}, {config.sample_rate} Hz / {config.frame_size}-point FFT"
    )

    if args.file is not None:
        try:
            blocks = AudioCollector(config).wav_blocks(args.file)
            pipeline.run(audio_iterator=blocks)
        except ValueError as exc:
            print(f"error: {exc}", file=sys.stderr)
            sys.exit(2)
    else:
        print("Play a note into the microphone. Press Ctrl+C to stop.\n")
        try:
            pipeline.run(device=args.device)
        except KeyboardInterrupt:
            print("\nStopped.")

    mean = pipeline.history.mean()
    if mean is not None:
        std = pipeline.history.std() or 0.0
        print(f"Pitch history: {len(pipeline.history)} readings, mean {mean:.2f} Hz, std {std:.2f} Hz")


if __name__ == "__main__":
    main()
