"""Temperaments: one canonical 12-ratio table per tuning system.

Each table lists the frequency ratio of scale degrees 0..11 relative to the
tonic (degree 0 is always 1.0). Equal temperament and the equal-division
scales are generated; the historical temperaments are literal ratios.

Lookups outside one octave wrap the degree with a floored modulo and scale by
whole octaves, so `ratio_for(t, s) == table[s % 12] * 2 ** (s // 12)`. For
equal temperament this is exactly 2 ** (s / 12).
"""

from __future__ import annotations

from enum import Enum
from typing import Dict, Tuple

NOTE_NAMES: Tuple[str, ...] = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

Ratios = Tuple[float, ...]


class Temperament(str, Enum):
    EQUAL = "equal"
    JUST = "just"
    PYTHAGOREAN = "pythagorean"
    MEANTONE = "meantone"
    WELL = "well"
    KIRNBERGER = "kirnberger"
    WERCKMEISTER = "werckmeister"
    YOUNG = "young"
    VALOTTI = "valotti"
    KELLNER = "kellner"
    NEIDHARDT = "neidhardt"
    QUARTER_COMMA = "quarter-comma"
    THIRD_COMMA = "third-comma"
    SIXTH_COMMA = "sixth-comma"
    SILBERMANN = "silbermann"
    RAMEAU = "rameau"
    MARPURG = "marpurg"
    SORGE = "sorge"
    TARTINI = "tartini"
    PYTHAGOREAN_EXTENDED = "pythagorean-extended"
    JUST_EXTENDED = "just-extended"
    QUARTER_TONE = "quarter-tone"
    BOHLEN_PIERCE = "bohlen-pierce"
    WENDY_CARLOS = "wendy-carlos-alpha"
    HARRY_PARTCH = "harry-partch"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def ratios(self) -> Ratios:
        return _TABLES[self]

    @classmethod
    def parse(cls, name: "str | Temperament") -> "Temperament":
        """Look up by value ("quarter-comma"), member name ("QUARTER_COMMA") or label.

        Raises:
            ValueError: If nothing matches.
        """
        if isinstance(name, cls):
            return name
        key = str(name).strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower(), member.label.lower()):
                return member
        raise ValueError(
            f"Unknown temperament {name!r}, valid options: {[m.value for m in cls]}"
        )


def _equal_division(steps: int, per_octave: float) -> Ratios:
    return tuple(2.0 ** (s / per_octave) for s in range(steps))


_JUST: Ratios = (
    1.0,
    16 / 15,  # minor second
    9 / 8,  # major second
    6 / 5,  # minor third
    5 / 4,  # major third
    4 / 3,  # perfect fourth
    45 / 32,  # augmented fourth
    3 / 2,  # perfect fifth
    8 / 5,  # minor sixth
    5 / 3,  # major sixth
    9 / 5,  # minor seventh
    15 / 8,  # major seventh
)

_PYTHAGOREAN: Ratios = (
    1.0,
    256 / 243,  # limma
    9 / 8,
    32 / 27,
    81 / 64,  # ditone
    4 / 3,
    729 / 512,
    3 / 2,
    128 / 81,
    27 / 16,
    16 / 9,
    243 / 128,
)

_QUARTER_COMMA: Ratios = (
    1.0, 1.0449, 1.1180, 1.1963, 1.2500, 1.3375,
    1.3975, 1.4953, 1.5625, 1.6719, 1.7487, 1.8692,
)

_THIRD_COMMA: Ratios = (
    1.0, 1.0524, 1.1194, 1.1937, 1.2537, 1.3404,
    1.4047, 1.5023, 1.5789, 1.6808, 1.7639, 1.8816,
)

_SIXTH_COMMA: Ratios = (
    1.0, 1.0571, 1.1207, 1.1917, 1.2567, 1.3428,
    1.4107, 1.5056, 1.5928, 1.6857, 1.7736, 1.8857,
)

# Near-equal well temperament with pure E (5/4), A (5/3) and B (15/8)
_WELL: Ratios = (
    1.0, 1.0595, 1.1225, 1.1892, 1.2500, 1.3348,
    1.4142, 1.4983, 1.5802, 1.6667, 1.7818, 1.8750,
)

# Pure-interval well temperaments sharing the 9/8, 5/4, 4/3, 3/2, 8/5, 5/3 skeleton
_KIRNBERGER: Ratios = (
    1.0, 1.0535, 1.125, 1.1852, 1.25, 1.3333,
    1.4063, 1.5, 1.6, 1.6667, 1.7778, 1.875,
)

_WERCKMEISTER: Ratios = (
    1.0, 1.0583, 1.125, 1.1852, 1.25, 1.3333,
    1.4063, 1.5, 1.6, 1.6667, 1.7778, 1.875,
)

_BOHLEN_PIERCE: Ratios = (
    1.0, 1.0679, 1.1403, 1.2185, 1.3027, 1.3933,
    1.4909, 1.5963, 1.7071, 1.8257, 1.9525, 2.0897,
)

_PARTCH_STEPS = (0, 4, 8, 11, 15, 18, 22, 26, 29, 33, 36, 40)

# Wendy Carlos alpha: 15.39 cents per step
_ALPHA_STEP_CENTS = 15.39

_TABLES: Dict[Temperament, Ratios] = {
    Temperament.EQUAL: _equal_division(12, 12),
    Temperament.JUST: _JUST,
    Temperament.PYTHAGOREAN: _PYTHAGOREAN,
    Temperament.MEANTONE: _QUARTER_COMMA,
    Temperament.WELL: _WELL,
    Temperament.KIRNBERGER: _KIRNBERGER,
    Temperament.WERCKMEISTER: _WERCKMEISTER,
    Temperament.YOUNG: _WELL,
    Temperament.VALOTTI: _WERCKMEISTER,
    Temperament.KELLNER: _WERCKMEISTER,
    Temperament.NEIDHARDT: _WELL,
    Temperament.QUARTER_COMMA: _QUARTER_COMMA,
    Temperament.THIRD_COMMA: _THIRD_COMMA,
    Temperament.SIXTH_COMMA: _SIXTH_COMMA,
    Temperament.SILBERMANN: _WERCKMEISTER,
    Temperament.RAMEAU: _WELL,
    Temperament.MARPURG: _WERCKMEISTER,
    Temperament.SORGE: _WELL,
    Temperament.TARTINI: _JUST,
    Temperament.PYTHAGOREAN_EXTENDED: _PYTHAGOREAN,
    Temperament.JUST_EXTENDED: _JUST,
    Temperament.QUARTER_TONE: _equal_division(12, 24),
    Temperament.BOHLEN_PIERCE: _BOHLEN_PIERCE,
    Temperament.WENDY_CARLOS: _equal_division(12, 1200 / _ALPHA_STEP_CENTS),
    Temperament.HARRY_PARTCH: tuple(2.0 ** (step / 43) for step in _PARTCH_STEPS),
}

_LABELS: Dict[Temperament, str] = {
    Temperament.EQUAL: "Equal Temperament",
    Temperament.JUST: "Just Intonation",
    Temperament.PYTHAGOREAN: "Pythagorean Tuning",
    Temperament.MEANTONE: "Meantone Temperament",
    Temperament.WELL: "Well Temperament",
    Temperament.KIRNBERGER: "Kirnberger III",
    Temperament.WERCKMEISTER: "Werckmeister III",
    Temperament.YOUNG: "Young Temperament",
    Temperament.VALOTTI: "Valotti Temperament",
    Temperament.KELLNER: "Kellner Temperament",
    Temperament.NEIDHARDT: "Neidhardt",
    Temperament.QUARTER_COMMA: "Quarter-Comma Meantone",
    Temperament.THIRD_COMMA: "Third-Comma Meantone",
    Temperament.SIXTH_COMMA: "Sixth-Comma Meantone",
    Temperament.SILBERMANN: "Silbermann",
    Temperament.RAMEAU: "Rameau",
    Temperament.MARPURG: "Marpurg",
    Temperament.SORGE: "Sorge",
    Temperament.TARTINI: "Tartini",
    Temperament.PYTHAGOREAN_EXTENDED: "Pythagorean Extended",
    Temperament.JUST_EXTENDED: "Just Intonation Extended",
    Temperament.QUARTER_TONE: "Quarter-Tone",
    Temperament.BOHLEN_PIERCE: "Bohlen-Pierce",
    Temperament.WENDY_CARLOS: "Wendy Carlos Alpha",
    Temperament.HARRY_PARTCH: "Harry Partch 43-Tone",
}

_DESCRIPTIONS: Dict[Temperament, str] = {
    Temperament.EQUAL: "Standard modern tuning. Each semitone is exactly 100 cents.",
    Temperament.JUST: "Pure intervals based on simple frequency ratios. More harmonious but limited to certain keys.",
    Temperament.PYTHAGOREAN: "Based on perfect fifths (3:2 ratio). Bright, pure fifths but problematic thirds.",
    Temperament.MEANTONE: "Historical temperament that tempers fifths to improve thirds. Good for Renaissance music.",
    Temperament.WELL: "Compromise tuning that works well in all keys. Bach's preferred temperament.",
    Temperament.KIRNBERGER: "Johann Kirnberger's temperament. Pure thirds in C, F, G major. Good for Bach's music.",
    Temperament.WERCKMEISTER: "Andreas Werckmeister's temperament. Well-balanced for all keys. Popular in Baroque period.",
    Temperament.YOUNG: "Thomas Young's temperament. Excellent for Classical and early Romantic music.",
    Temperament.VALOTTI: "Francesco Antonio Vallotti's temperament. Favors flat keys. Good for Italian Baroque.",
    Temperament.KELLNER: "Herbert Anton Kellner's temperament. Based on historical research. Good for Bach.",
    Temperament.NEIDHARDT: "Johann Georg Neidhardt's temperament. Well-tempered system with character.",
    Temperament.QUARTER_COMMA: "Quarter-comma meantone. Pure major thirds, tempered fifths. Renaissance standard.",
    Temperament.THIRD_COMMA: "Third-comma meantone. Compromise between pure thirds and usable fifths.",
    Temperament.SIXTH_COMMA: "Sixth-comma meantone. Closer to equal temperament while preserving character.",
    Temperament.SILBERMANN: "Gottfried Silbermann's organ tuning. Bright, clear character for Baroque organs.",
    Temperament.RAMEAU: "Jean-Philippe Rameau's theoretical temperament. French Baroque theoretical approach.",
    Temperament.MARPURG: "Friedrich Wilhelm Marpurg's well-tempered system. Systematic approach to temperament.",
    Temperament.SORGE: "Georg Andreas Sorge's temperament. German Baroque organ tuning.",
    Temperament.TARTINI: "Giuseppe Tartini's violin-based tuning. Based on natural harmonics of strings.",
    Temperament.PYTHAGOREAN_EXTENDED: "Extended Pythagorean tuning. Pure fifths throughout, bright character.",
    Temperament.JUST_EXTENDED: "Extended just intonation. More complex ratios for richer harmonies.",
    Temperament.QUARTER_TONE: "Quarter-tone system. 24 tones per octave for microtonal music.",
    Temperament.BOHLEN_PIERCE: "Bohlen-Pierce scale. Based on 3:1 ratio, 13 tones per octave.",
    Temperament.WENDY_CARLOS: "Wendy Carlos Alpha scale. 15.39 cents per step, 78 steps per octave.",
    Temperament.HARRY_PARTCH: "Harry Partch's 43-tone scale. Just intonation with 43 divisions per octave.",
}


def ratio_table(temperament: Temperament) -> Ratios:
    """The 12 degree ratios of a temperament, tonic first."""
    return _TABLES[Temperament.parse(temperament)]


def ratio_for(temperament: Temperament, semitones: int) -> float:
    """Frequency ratio `semitones` steps above (or below) the reference note."""
    table = _TABLES[temperament]
    degree = semitones % 12  # floored: -1 -> 11
    octaves = semitones // 12
    return table[degree] * 2.0 ** octaves
