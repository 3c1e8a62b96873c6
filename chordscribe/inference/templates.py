"""Chord template bank.

Templates are binary 12-bin vectors in root-relative form (root at index
0). The bank precomputes every rotation so that matching a frame is a
single matrix product.
"""

from dataclasses import dataclass
from typing import Iterable, Tuple

import numpy as np

from ..core import ChordQuality
from ..core.constants import N_PITCH_CLASSES


@dataclass(frozen=True)
class ChordTemplate:
    """A quality and its root-relative weight vector."""

    quality: ChordQuality
    weights: Tuple[float, ...]

    def __post_init__(self):
        if len(self.weights) != N_PITCH_CLASSES:
            raise ValueError(f"Template for {self.quality.quality_name} needs 12 weights")

    @classmethod
    def from_quality(cls, quality: ChordQuality) -> "ChordTemplate":
        return cls(quality=quality, weights=quality.template())

    def rotated(self, root: int) -> np.ndarray:
        """Weights moved so the root sits at pitch class ``root``."""
        return np.roll(np.asarray(self.weights, dtype=np.float64), root)


class TemplateBank:
    """Immutable ordered set of chord templates.

    Order matters: it is the tie-break order used by the matcher.
    ``matrix`` has one row per (template, root) pair, template-major, so
    row ``t * 12 + root`` is template ``t`` rotated to ``root``.
    """

    __slots__ = ("_templates", "_matrix")

    def __init__(self, templates: Iterable[ChordTemplate]):
        templates = tuple(templates)
        if not templates:
            raise ValueError("TemplateBank needs at least one template")
        matrix = np.array([
            template.rotated(root)
            for template in templates
            for root in range(N_PITCH_CLASSES)
        ])
        matrix.flags.writeable = False
        object.__setattr__(self, "_templates", templates)
        object.__setattr__(self, "_matrix", matrix)

    def __setattr__(self, name, value):
        raise AttributeError("TemplateBank is immutable")

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self):
        return iter(self._templates)

    @property
    def templates(self) -> Tuple[ChordTemplate, ...]:
        return self._templates

    @property
    def qualities(self) -> Tuple[ChordQuality, ...]:
        return tuple(t.quality for t in self._templates)

    @property
    def matrix(self) -> np.ndarray:
        """Rotated templates, shape ``(len(self) * 12, 12)``."""
        return self._matrix

    def row_to_chord(self, row: int) -> Tuple[int, ChordQuality]:
        """Map a matrix row back to (root, quality)."""
        template_index, root = divmod(row, N_PITCH_CLASSES)
        return root, self._templates[template_index].quality

    @classmethod
    def default(cls) -> "TemplateBank":
        """All qualities in canonical order."""
        return cls(ChordTemplate.from_quality(q) for q in ChordQuality)


DEFAULT_TEMPLATE_BANK = TemplateBank.default()
