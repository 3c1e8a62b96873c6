"""Exceptions and warnings raised by chordscribe."""


class ChordscribeError(Exception):
    """Base class for all chordscribe errors."""


class ConfigurationError(ChordscribeError, ValueError):
    """Structurally invalid configuration, reported before any processing."""


class InvalidInputError(ChordscribeError, ValueError):
    """Sample buffer that cannot be analyzed (empty, too short, wrong shape)."""


class AnalysisFailure(ChordscribeError, RuntimeError):
    """Numerical failure inside the spectral transform."""


class AnalysisCancelled(ChordscribeError):
    """Raised when a caller's cancellation event is set mid-run."""


class InvalidChordLabelError(ChordscribeError, ValueError):
    """Chord label whose root note cannot be read."""


class ChordscribeWarning(UserWarning):
    """Base class for non-fatal diagnostics."""


class DegenerateVectorWarning(ChordscribeWarning):
    """Chroma vectors with zero energy or zero variance were encountered."""


class UnknownChordQualityWarning(ChordscribeWarning):
    """A chord label carried a quality suffix that is not recognized."""
