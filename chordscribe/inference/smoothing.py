"""Segment smoothing: merge per-frame candidates into timed chord segments.

Two phases:
    1. Merge consecutive candidates with the same label into one segment.
    2. Drop segments shorter than a minimum duration.

Neighbours are not re-merged across a dropped segment, so ``C, F(short), C``
stays two separate C segments after filtering.
"""

import logging
from typing import Iterable, Iterator, List, Optional

from ..core import ChordCandidate, ChordSegment
from ..core.constants import DEFAULT_MIN_CHORD_DURATION

logger = logging.getLogger(__name__)


class _OpenSegment:
    """Accumulator for the segment currently being extended."""

    __slots__ = ("label", "start", "end", "confidence_sum", "count")

    def __init__(self, candidate: ChordCandidate):
        self.label = candidate.label
        self.start = candidate.start
        self.end = candidate.end
        self.confidence_sum = candidate.confidence
        self.count = 1

    def extend(self, candidate: ChordCandidate) -> None:
        self.end = candidate.end
        self.confidence_sum += candidate.confidence
        self.count += 1

    def close(self) -> Optional[ChordSegment]:
        """Freeze into a ChordSegment; no-chord runs produce None."""
        if self.label is None:
            return None
        return ChordSegment(
            label=self.label,
            start=self.start,
            end=self.end,
            confidence=self.confidence_sum / self.count,
        )


def iter_merged(candidates: Iterable[ChordCandidate]) -> Iterator[ChordSegment]:
    """
    Merge consecutive equal-label candidates, streaming.

    Candidates must arrive in time order. The segment confidence is the
    mean of the merged candidates' confidences. Runs of no-chord
    candidates close the open segment and are not emitted.
    """
    current: Optional[_OpenSegment] = None
    for candidate in candidates:
        if current is None:
            current = _OpenSegment(candidate)
        elif candidate.label == current.label:
            current.extend(candidate)
        else:
            segment = current.close()
            if segment is not None:
                yield segment
            current = _OpenSegment(candidate)

    if current is not None:
        segment = current.close()
        if segment is not None:
            yield segment


def merge_candidates(candidates: Iterable[ChordCandidate]) -> List[ChordSegment]:
    """Merge phase only. See ``iter_merged``."""
    return list(iter_merged(candidates))


def filter_segments(
    segments: Iterable[ChordSegment],
    min_chord_duration: float = DEFAULT_MIN_CHORD_DURATION,
) -> List[ChordSegment]:
    """Drop segments whose duration is strictly less than ``min_chord_duration``."""
    kept = [s for s in segments if s.duration >= min_chord_duration]
    return kept


def smooth(
    candidates: Iterable[ChordCandidate],
    min_chord_duration: float = DEFAULT_MIN_CHORD_DURATION,
) -> List[ChordSegment]:
    """
    Turn per-frame candidates into chord segments.

    Args:
        candidates: Per-frame candidates in time order
        min_chord_duration: Minimum segment duration in seconds

    Returns:
        Non-overlapping segments ordered by start time
    """
    merged = merge_candidates(candidates)
    segments = filter_segments(merged, min_chord_duration)
    logger.debug(
        "Smoothing kept %d of %d merged segments (min %.2fs)",
        len(segments), len(merged), min_chord_duration,
    )
    return segments
