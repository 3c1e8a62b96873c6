"""End-to-end chord recognition and note synthesis.

Frames → spectrum → chroma → template match (per frame, parallelizable),
then smoothing (sequential) and synthesis.
"""

import logging
import threading
import warnings
from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional, Tuple

import numpy as np

from .analysis.chroma import pitch_class_profile
from .analysis.spectrum import magnitude_spectrum
from .config import AnalysisConfig, SynthesisConfig
from .core import (
    AnalysisCancelled,
    AudioSamples,
    ChordCandidate,
    ChordSegment,
    ChromaVector,
    ConfigurationError,
    DegenerateVectorWarning,
    Frame,
    InvalidInputError,
    NoteSequence,
)
from .engine import AnalysisEngine, open_engine
from .inference.matcher import match_chroma
from .inference.smoothing import smooth
from .inference.templates import TemplateBank, DEFAULT_TEMPLATE_BANK
from .synthesis.notes import synthesize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChordTranscription:
    """Result of a full run: chord segments plus synthesized notes."""

    segments: Tuple[ChordSegment, ...]
    notes: NoteSequence
    duration: float
    sample_rate: int

    @property
    def labels(self) -> List[str]:
        return [s.label for s in self.segments]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-serializable summary."""
        return {
            "duration": self.duration,
            "sample_rate": self.sample_rate,
            "chords": [s.to_dict() for s in self.segments],
            **self.notes.to_dict(),
        }


def _check_cancelled(cancel_event: Optional[threading.Event]) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise AnalysisCancelled("Chord analysis cancelled")


def chroma_for_frame(frame: Frame, engine: AnalysisEngine) -> ChromaVector:
    """Pitch-class profile of one frame, timestamped."""
    spectrum = magnitude_spectrum(frame.samples, engine.window)
    bins = pitch_class_profile(spectrum, engine.bin_classes, engine.config.noise_floor)
    start, end = engine.config.frame_times(frame.index, engine.sample_rate)
    return ChromaVector(bins=bins, start=start, end=end)


def _analyze_frame(
    frame: Frame,
    engine: AnalysisEngine,
    cancel_event: Optional[threading.Event],
) -> Tuple[ChordCandidate, bool]:
    _check_cancelled(cancel_event)
    chroma = chroma_for_frame(frame, engine)
    degenerate = bool(np.ptp(chroma.bins) == 0)
    return match_chroma(chroma, engine.bank), degenerate


def _warn_degenerate(count: int, stacklevel: int) -> None:
    # stacklevel is counted from the function calling this helper
    warnings.warn(
        f"{count} frame(s) had flat or silent chroma; "
        "their correlation was taken as 0",
        DegenerateVectorWarning,
        stacklevel=stacklevel + 1,
    )


def iter_candidates(
    audio: AudioSamples,
    engine: AnalysisEngine,
    cancel_event: Optional[threading.Event] = None,
    flat_frames: Optional[List[ChordCandidate]] = None,
) -> Iterator[ChordCandidate]:
    """
    Best chord candidate for every frame, in frame order.

    Frames are analyzed on the engine's thread pool when it has one;
    results still come back in frame order.

    Candidates from frames with a flat chroma vector are appended to
    ``flat_frames`` when a list is given, and the caller reports them.
    Otherwise a single DegenerateVectorWarning is emitted once the
    iterator is exhausted.

    Raises:
        ConfigurationError: If the audio and engine sample rates differ
        AnalysisCancelled: If ``cancel_event`` is set
    """
    if audio.sample_rate != engine.sample_rate:
        raise ConfigurationError(
            f"Audio sample rate {audio.sample_rate} Hz does not match "
            f"engine sample rate {engine.sample_rate} Hz"
        )

    frames = engine.sequencer.frames(audio)
    if engine.executor is not None:
        results = engine.executor.map(
            lambda frame: _analyze_frame(frame, engine, cancel_event), frames
        )
    else:
        results = (_analyze_frame(frame, engine, cancel_event) for frame in frames)

    report = flat_frames is None
    if report:
        flat_frames = []
    for candidate, degenerate in results:
        if degenerate:
            flat_frames.append(candidate)
        yield candidate

    if report and flat_frames:
        _warn_degenerate(len(flat_frames), stacklevel=2)


def recognize_chords(
    audio: AudioSamples,
    engine: AnalysisEngine,
    cancel_event: Optional[threading.Event] = None,
) -> List[ChordSegment]:
    """
    Detect timed chord segments in ``audio``.

    A buffer shorter than one frame is not an error: the result is an
    empty list. Flat or silent frames are reported as one
    DegenerateVectorWarning attributed to the caller.

    Args:
        audio: Mono samples
        engine: Engine from ``acquire_engine``/``open_engine``
        cancel_event: Optional event checked between frames

    Returns:
        Non-overlapping ChordSegments ordered by start time
    """
    try:
        n_frames = engine.sequencer.require_frames(audio)
    except InvalidInputError as e:
        logger.info("No chords detected: %s", e)
        return []

    logger.info(
        "Analyzing %d frames (%.2fs of audio at %d Hz)",
        n_frames, audio.duration, audio.sample_rate,
    )
    flat_frames: List[ChordCandidate] = []
    candidates = iter_candidates(audio, engine, cancel_event, flat_frames)
    segments = smooth(candidates, engine.config.min_chord_duration)
    if flat_frames:
        _warn_degenerate(len(flat_frames), stacklevel=2)
    logger.info("Detected %d chord segments", len(segments))
    return segments


def transcribe(
    audio: AudioSamples,
    analysis: Optional[AnalysisConfig] = None,
    synthesis: Optional[SynthesisConfig] = None,
    bank: TemplateBank = DEFAULT_TEMPLATE_BANK,
    cancel_event: Optional[threading.Event] = None,
) -> ChordTranscription:
    """
    Recognize chords and synthesize note tracks in one call.

    Args:
        audio: Mono samples
        analysis: Analysis settings (defaults used if None)
        synthesis: Synthesis settings (defaults used if None)
        bank: Chord templates to match against
        cancel_event: Optional cooperative cancellation flag

    Returns:
        ChordTranscription
    """
    with open_engine(audio.sample_rate, analysis, bank) as engine:
        segments = recognize_chords(audio, engine, cancel_event)

    notes = synthesize(segments, synthesis, cancel_event)
    return ChordTranscription(
        segments=tuple(segments),
        notes=notes,
        duration=audio.duration,
        sample_rate=audio.sample_rate,
    )
