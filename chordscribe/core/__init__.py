"""Core types, constants and errors for chordscribe."""

from .constants import (
    PITCH_NAMES,
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_SIZE,
    DEFAULT_MIN_CHORD_DURATION,
    DEFAULT_TEMPO,
    CHORDS_TRACK,
    MELODY_TRACK,
)
from .errors import (
    ChordscribeError,
    ConfigurationError,
    InvalidInputError,
    AnalysisFailure,
    AnalysisCancelled,
    InvalidChordLabelError,
    ChordscribeWarning,
    DegenerateVectorWarning,
    UnknownChordQualityWarning,
)
from .quality import ChordQuality, format_chord_label, parse_chord_label
from .types import (
    AudioSamples,
    Frame,
    ChromaVector,
    ChordCandidate,
    ChordSegment,
    NoteEvent,
    Track,
    NoteSequence,
    seconds_to_beats,
)

__all__ = [
    "PITCH_NAMES",
    "DEFAULT_FRAME_SIZE",
    "DEFAULT_HOP_SIZE",
    "DEFAULT_MIN_CHORD_DURATION",
    "DEFAULT_TEMPO",
    "CHORDS_TRACK",
    "MELODY_TRACK",
    # Errors and warnings
    "ChordscribeError",
    "ConfigurationError",
    "InvalidInputError",
    "AnalysisFailure",
    "AnalysisCancelled",
    "InvalidChordLabelError",
    "ChordscribeWarning",
    "DegenerateVectorWarning",
    "UnknownChordQualityWarning",
    # Qualities
    "ChordQuality",
    "format_chord_label",
    "parse_chord_label",
    # Types
    "AudioSamples",
    "Frame",
    "ChromaVector",
    "ChordCandidate",
    "ChordSegment",
    "NoteEvent",
    "Track",
    "NoteSequence",
    "seconds_to_beats",
]
