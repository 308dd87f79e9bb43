"""Text formatting for tuner output (notes, cents, levels)."""

from typing import Optional

from pitch_tuner.audio.levels import LevelReading
from pitch_tuner.tuning.model import Note, midi_to_octave
from pitch_tuner.tuning.temperament import NOTE_NAMES

# |cents| at or below this reads as in tune
DEFAULT_CENTS_TOLERANCE = 5
# |cents| at or below this reads as close
CLOSE_CENTS = 15

IN_TUNE_MARK = "✓"  # check mark
CENTS_SIGN = "¢"


def format_cents(cents: int, tolerance: int = DEFAULT_CENTS_TOLERANCE) -> str:
    """Check mark inside the tolerance, else signed cents ("+7¢", "-12¢")."""
    if -tolerance <= cents <= tolerance:
        return IN_TUNE_MARK
    if cents > 0:
        return f"+{cents}{CENTS_SIGN}"
    return f"{cents}{CENTS_SIGN}"


def cents_status(cents: int, tolerance: int = DEFAULT_CENTS_TOLERANCE) -> str:
    """Classify cents as "in_tune", "close" or "off"."""
    magnitude = abs(cents)
    if magnitude <= tolerance:
        return "in_tune"
    if magnitude <= CLOSE_CENTS:
        return "close"
    return "off"


def midi_note_name(midi_note: int) -> str:
    """MIDI number -> "A4" style name."""
    return f"{NOTE_NAMES[midi_note % 12]}{midi_to_octave(midi_note)}"


def note_label(note: Optional[Note], tolerance: int = DEFAULT_CENTS_TOLERANCE) -> str:
    """Note name, octave and cents ("A4 +7¢"), or "Unknown" when no note was found."""
    if note is None:
        return "Unknown"
    return f"{note.label} {format_cents(note.cents, tolerance)}"


def level_label(levels: LevelReading) -> str:
    return f"rms {levels.rms:6.1f} dB  peak {levels.peak:6.1f} dB"


def cents_needle(cents: int, width: int = 25, span: int = 50) -> str:
    """ASCII needle centered on 0 cents, clipped at +/- span."""
    c = max(-span, min(span, cents))
    mid = width // 2
    pos = mid + int(round(c / span * mid))
    bar = ["-"] * width
    bar[mid] = "|"
    bar[pos] = "^"
    return "".join(bar)
