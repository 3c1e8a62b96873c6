"""Inference layer - Chord recognition from pitch-class profiles.

Pipeline: Chroma → [Template matching] → Candidates → [Smoothing] → Segments
"""

from .templates import ChordTemplate, TemplateBank, DEFAULT_TEMPLATE_BANK
from .matcher import pearson_correlation, correlation_matrix, match_chroma
from .smoothing import iter_merged, merge_candidates, filter_segments, smooth

__all__ = [
    # Templates
    "ChordTemplate",
    "TemplateBank",
    "DEFAULT_TEMPLATE_BANK",
    # Matching
    "pearson_correlation",
    "correlation_matrix",
    "match_chroma",
    # Smoothing
    "iter_merged",
    "merge_candidates",
    "filter_segments",
    "smooth",
]
