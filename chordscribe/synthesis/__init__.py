"""Synthesis layer - Turn chord segments into note events."""

from .notes import (
    synthesize,
    chord_pitches,
    root_pitch,
    block_chord,
    arpeggiate,
)

__all__ = [
    "synthesize",
    "chord_pitches",
    "root_pitch",
    "block_chord",
    "arpeggiate",
]
