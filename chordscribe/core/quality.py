"""Chord qualities and chord label parsing/formatting.

Qualities form a closed set. Each member carries the suffix used in chord
labels (e.g. ``"m7"`` in ``"Am7"``) and its intervals in semitones from
the root. Member order is the canonical order used to break ties during
template matching.
"""

import re
import warnings
from enum import Enum
from typing import Dict, Tuple

from .constants import PITCH_NAMES, N_PITCH_CLASSES
from .errors import InvalidChordLabelError, UnknownChordQualityWarning


class ChordQuality(Enum):
    """Chord quality with its label suffix and intervals."""

    MAJOR = ("major", "", (0, 4, 7))
    MINOR = ("minor", "m", (0, 3, 7))
    DOMINANT_7 = ("dominant7", "7", (0, 4, 7, 10))
    MAJOR_7 = ("major7", "maj7", (0, 4, 7, 11))
    MINOR_7 = ("minor7", "m7", (0, 3, 7, 10))
    DIMINISHED = ("diminished", "dim", (0, 3, 6))
    AUGMENTED = ("augmented", "aug", (0, 4, 8))
    SUS2 = ("sus2", "sus2", (0, 2, 7))
    SUS4 = ("sus4", "sus4", (0, 5, 7))

    def __init__(self, quality_name: str, suffix: str, intervals: Tuple[int, ...]):
        self.quality_name = quality_name
        self.suffix = suffix
        self.intervals = intervals

    def template(self) -> Tuple[float, ...]:
        """Binary root-relative 12-bin template (root at index 0)."""
        return tuple(
            1.0 if i in self.intervals else 0.0 for i in range(N_PITCH_CLASSES)
        )

    @classmethod
    def from_suffix(cls, suffix: str) -> "ChordQuality":
        """Look up a quality by label suffix or accepted alias.

        Raises:
            KeyError: If the suffix is not recognized
        """
        return SUFFIX_TABLE[suffix]


# Canonical suffixes plus the aliases commonly found in chord charts
SUFFIX_TABLE: Dict[str, ChordQuality] = {q.suffix: q for q in ChordQuality}
SUFFIX_TABLE.update({
    "maj": ChordQuality.MAJOR,
    "M": ChordQuality.MAJOR,
    "min": ChordQuality.MINOR,
    "dom7": ChordQuality.DOMINANT_7,
    "M7": ChordQuality.MAJOR_7,
    "min7": ChordQuality.MINOR_7,
})

NATURAL_PITCH_CLASSES = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}

_LABEL_RE = re.compile(r"^([A-G])([#b]?)(.*)$")


def format_chord_label(root: int, quality: ChordQuality) -> str:
    """Format a chord name, e.g. (9, MINOR) -> 'Am'."""
    return f"{PITCH_NAMES[root % N_PITCH_CLASSES]}{quality.suffix}"


def parse_chord_label(label: str) -> Tuple[int, ChordQuality]:
    """
    Parse a chord label into (root pitch class, quality).

    Flats are folded into their sharp enharmonic (Bb -> A#). An unknown
    quality suffix falls back to major and emits UnknownChordQualityWarning.

    Args:
        label: Chord name such as "C", "Ebm7" or "F#sus4"

    Returns:
        Tuple of (root pitch class 0-11, ChordQuality)

    Raises:
        InvalidChordLabelError: If the root note cannot be read
    """
    match = _LABEL_RE.match(label.strip())
    if not match:
        raise InvalidChordLabelError(f"Could not parse chord label: {label!r}")

    letter, accidental, suffix = match.groups()
    root = NATURAL_PITCH_CLASSES[letter]
    if accidental == "#":
        root += 1
    elif accidental == "b":
        root -= 1
    root %= N_PITCH_CLASSES

    try:
        quality = ChordQuality.from_suffix(suffix)
    except KeyError:
        warnings.warn(
            f"Unknown chord quality {suffix!r} in {label!r}, using major",
            UnknownChordQualityWarning,
            stacklevel=2,
        )
        quality = ChordQuality.MAJOR

    return root, quality
