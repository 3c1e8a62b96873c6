"""Tests for merging and filtering chord candidates into segments."""

import pytest
from pathlib import Path
import sys

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from chordscribe.core import ChordCandidate, ChordQuality, ChordSegment
from chordscribe.inference import merge_candidates, filter_segments, smooth, iter_merged


def candidate(root, quality, start, end, confidence=0.9) -> ChordCandidate:
    return ChordCandidate(root=root, quality=quality, confidence=confidence, start=start, end=end)


def frames(labels, hop: float = 0.1, confidence: float = 0.9) -> list:
    """Build per-frame candidates from (root, quality) pairs; None is silence."""
    result = []
    for i, label in enumerate(labels):
        start, end = i * hop, (i + 1) * hop
        if label is None:
            result.append(ChordCandidate.no_chord(start, end))
        else:
            result.append(candidate(label[0], label[1], start, end, confidence))
    return result


C = (0, ChordQuality.MAJOR)
AM = (9, ChordQuality.MINOR)
G7 = (7, ChordQuality.DOMINANT_7)
F = (5, ChordQuality.MAJOR)


class TestMerge:
    """Tests for the merge phase."""

    def test_empty_input(self):
        assert merge_candidates([]) == []

    def test_single_candidate(self):
        segments = merge_candidates([candidate(0, ChordQuality.MAJOR, 0.0, 0.1, 0.7)])
        assert segments == [ChordSegment(label="C", start=0.0, end=0.1, confidence=0.7)]

    def test_equal_labels_merge(self):
        segments = merge_candidates(frames([C, C, C, AM, AM]))

        assert [s.label for s in segments] == ["C", "Am"]
        assert segments[0].start == 0.0
        assert segments[0].end == pytest.approx(0.3)
        assert segments[1].start == pytest.approx(0.3)
        assert segments[1].end == pytest.approx(0.5)

    def test_confidence_is_mean_of_merged(self):
        candidates = [
            candidate(0, ChordQuality.MAJOR, 0.0, 0.1, 0.9),
            candidate(0, ChordQuality.MAJOR, 0.1, 0.2, 0.6),
            candidate(0, ChordQuality.MAJOR, 0.2, 0.3, 0.3),
        ]
        [segment] = merge_candidates(candidates)
        assert segment.confidence == pytest.approx(0.6)

    def test_same_root_different_quality_does_not_merge(self):
        segments = merge_candidates(frames([C, (0, ChordQuality.MINOR), C]))
        assert [s.label for s in segments] == ["C", "Cm", "C"]

    def test_no_chord_splits_and_is_dropped(self):
        segments = merge_candidates(frames([C, C, None, None, C, AM]))
        assert [s.label for s in segments] == ["C", "C", "Am"]
        assert segments[0].end == pytest.approx(0.2)
        assert segments[1].start == pytest.approx(0.4)

    def test_all_silence(self):
        assert merge_candidates(frames([None, None, None])) == []

    def test_streaming(self):
        stream = iter_merged(iter(frames([C, AM, G7])))
        assert next(stream).label == "C"
        assert next(stream).label == "Am"
        assert next(stream).label == "G7"
        with pytest.raises(StopIteration):
            next(stream)


class TestFilter:
    """Tests for the minimum-duration filter."""

    def test_filtering_example(self):
        """Durations [0.2, 1.0, 0.3, 2.0] with a 0.5s minimum keep 1.0 and 2.0."""
        merged = [
            ChordSegment("C", 0.0, 0.2, 0.5),
            ChordSegment("Am", 0.2, 1.2, 0.8),
            ChordSegment("F", 1.2, 1.5, 0.6),
            ChordSegment("G7", 1.5, 3.5, 0.9),
        ]
        kept = filter_segments(merged, min_chord_duration=0.5)

        assert kept == [merged[1], merged[3]]

    def test_boundary_duration_is_kept(self):
        segment = ChordSegment("C", 0.0, 0.5, 1.0)
        assert filter_segments([segment], 0.5) == [segment]

    def test_zero_minimum_keeps_everything(self):
        merged = [ChordSegment("C", 0.0, 0.01, 1.0), ChordSegment("F", 0.01, 0.02, 1.0)]
        assert filter_segments(merged, 0.0) == merged


class TestSmooth:
    """Tests for merge followed by filter."""

    def test_neighbours_are_not_remerged(self):
        """A dropped short chord leaves its neighbours as separate segments."""
        labels = [C] * 6 + [F] * 2 + [C] * 6
        segments = smooth(frames(labels), min_chord_duration=0.5)

        assert [s.label for s in segments] == ["C", "C"]
        assert segments[0].end == pytest.approx(0.6)
        assert segments[1].start == pytest.approx(0.8)

    def test_segments_ordered_and_non_overlapping(self):
        labels = [C] * 7 + [AM] * 3 + [G7] * 8 + [None] * 2 + [F] * 9
        segments = smooth(frames(labels), min_chord_duration=0.25)

        assert [s.label for s in segments] == ["C", "Am", "G7", "F"]
        for a, b in zip(segments, segments[1:]):
            assert a.end <= b.start
        for s in segments:
            assert s.start < s.end

    def test_default_minimum(self):
        labels = [C] * 4 + [AM] * 6
        segments = smooth(frames(labels))
        assert [s.label for s in segments] == ["Am"]
