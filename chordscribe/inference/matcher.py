"""Template matching: pick the chord whose template best fits a chroma vector."""

import numpy as np

from ..core import ChordCandidate, ChromaVector
from ..core.constants import N_PITCH_CLASSES
from .templates import TemplateBank, DEFAULT_TEMPLATE_BANK

_ROUNDING_TOLERANCE = 1e-12


def pearson_correlation(a: np.ndarray, b: np.ndarray) -> float:
    """
    Pearson correlation of two equal-length vectors.

    Returns 0.0 instead of NaN when either vector has zero variance.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError("Vectors must have the same length")
    return float(_correlate(a, b[np.newaxis, :])[0])


def _correlate(chroma: np.ndarray, templates: np.ndarray) -> np.ndarray:
    """Correlation of ``chroma`` against each row of ``templates``."""
    n = chroma.shape[0]
    sum_a = chroma.sum()
    sum_a2 = np.dot(chroma, chroma)
    sum_b = templates.sum(axis=1)
    sum_b2 = np.einsum("ij,ij->i", templates, templates)
    sum_ab = templates @ chroma

    numerator = n * sum_ab - sum_a * sum_b
    spread_a = n * sum_a2 - sum_a ** 2
    spread_b = n * sum_b2 - sum_b ** 2
    # Rounding can leave a constant vector with a tiny nonzero spread
    if spread_a <= _ROUNDING_TOLERANCE * n * sum_a2:
        spread_a = 0.0
    spread_b = np.where(spread_b <= _ROUNDING_TOLERANCE * n * sum_b2, 0.0, spread_b)
    denominator = np.sqrt(spread_a * spread_b)

    scores = np.zeros(len(templates))
    valid = denominator > 0
    scores[valid] = numerator[valid] / denominator[valid]
    return scores


def correlation_matrix(
    chroma: np.ndarray,
    bank: TemplateBank = DEFAULT_TEMPLATE_BANK,
) -> np.ndarray:
    """
    Score a chroma vector against every (quality, root) pair.

    Returns:
        Array of shape ``(len(bank), 12)``; entry ``[q, root]`` is the
        correlation with quality ``q`` rooted at ``root``
    """
    chroma = np.asarray(chroma, dtype=np.float64)
    if chroma.shape != (N_PITCH_CLASSES,):
        raise ValueError(f"Expected 12 chroma bins, got {chroma.shape}")
    scores = _correlate(chroma, bank.matrix)
    return scores.reshape(len(bank), N_PITCH_CLASSES)


def match_chroma(
    chroma: ChromaVector,
    bank: TemplateBank = DEFAULT_TEMPLATE_BANK,
) -> ChordCandidate:
    """
    Find the best chord for one chroma vector.

    The highest correlation wins. On a tie the quality listed first in
    ``bank`` wins, then the lowest root. A silent vector yields the
    no-chord candidate.
    """
    if chroma.is_silent:
        return ChordCandidate.no_chord(chroma.start, chroma.end)

    scores = _correlate(chroma.bins, bank.matrix)
    # argmax returns the first maximum; rows are quality-major, root-minor
    best = int(np.argmax(scores))
    root, quality = bank.row_to_chord(best)
    return ChordCandidate(
        root=root,
        quality=quality,
        confidence=float(scores[best]),
        start=chroma.start,
        end=chroma.end,
    )
