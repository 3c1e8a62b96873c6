"""Configuration for chord analysis and note synthesis.

Settings can come from keyword arguments, an optional JSON file with
``analysis`` and ``synthesis`` sections, and ``CHORDSCRIBE_*`` environment
variables (environment wins over the file).
"""

import json
import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from .core.constants import (
    DEFAULT_FRAME_SIZE,
    DEFAULT_HOP_SIZE,
    DEFAULT_MIN_CHORD_DURATION,
    REFERENCE_FREQUENCY,
    DEFAULT_MIN_FREQUENCY,
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_NOISE_FLOOR,
    DEFAULT_OCTAVE,
    DEFAULT_VELOCITY,
    DEFAULT_ACCOMPANIMENT_VELOCITY,
    DEFAULT_MAX_SUB_BEAT,
    DEFAULT_ARTICULATION,
    DEFAULT_TEMPO,
)
from .core.errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "CHORDSCRIBE_"


@dataclass(frozen=True)
class AnalysisConfig:
    """Frame analysis and smoothing settings."""

    frame_size: int = DEFAULT_FRAME_SIZE
    hop_size: int = DEFAULT_HOP_SIZE
    min_chord_duration: float = DEFAULT_MIN_CHORD_DURATION
    reference_frequency: float = REFERENCE_FREQUENCY
    min_frequency: float = DEFAULT_MIN_FREQUENCY
    max_frequency: float = DEFAULT_MAX_FREQUENCY
    noise_floor: float = DEFAULT_NOISE_FLOOR
    workers: int = 1

    def __post_init__(self):
        if self.frame_size <= 0:
            raise ConfigurationError(f"frame_size must be positive, got {self.frame_size}")
        if self.hop_size <= 0:
            raise ConfigurationError(f"hop_size must be positive, got {self.hop_size}")
        if self.hop_size > self.frame_size:
            raise ConfigurationError(
                f"hop_size ({self.hop_size}) must not exceed frame_size ({self.frame_size})"
            )
        if self.min_chord_duration < 0:
            raise ConfigurationError("min_chord_duration must be >= 0")
        if self.reference_frequency <= 0:
            raise ConfigurationError("reference_frequency must be positive")
        if not 0 <= self.min_frequency < self.max_frequency:
            raise ConfigurationError(
                f"Invalid frequency range [{self.min_frequency}, {self.max_frequency}]"
            )
        if self.noise_floor < 0:
            raise ConfigurationError("noise_floor must be >= 0")
        if self.workers < 1:
            raise ConfigurationError(f"workers must be >= 1, got {self.workers}")

    def frame_times(self, index: int, sample_rate: int) -> Tuple[float, float]:
        """Start and end time (seconds) attributed to frame ``index``."""
        start = index * self.hop_size / sample_rate
        end = (index + 1) * self.hop_size / sample_rate
        return start, end


@dataclass(frozen=True)
class SynthesisConfig:
    """Chord-to-notes settings.

    When the melody track is enabled the chord track plays at
    ``accompaniment_velocity`` so the arpeggio sits on top.
    """

    octave: int = DEFAULT_OCTAVE
    velocity: float = DEFAULT_VELOCITY
    accompaniment_velocity: float = DEFAULT_ACCOMPANIMENT_VELOCITY
    melody: bool = False
    melody_velocity: float = DEFAULT_VELOCITY
    max_sub_beat: float = DEFAULT_MAX_SUB_BEAT
    articulation: float = DEFAULT_ARTICULATION
    tempo: float = DEFAULT_TEMPO

    def __post_init__(self):
        for name in ("velocity", "accompaniment_velocity", "melody_velocity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(f"{name} must be in [0, 1], got {value}")
        if self.max_sub_beat <= 0:
            raise ConfigurationError("max_sub_beat must be positive")
        if not 0.0 < self.articulation <= 1.0:
            raise ConfigurationError("articulation must be in (0, 1]")
        if self.tempo <= 0:
            raise ConfigurationError(f"tempo must be positive, got {self.tempo}")

    @property
    def chord_velocity(self) -> float:
        """Velocity used for the chords track."""
        return self.accompaniment_velocity if self.melody else self.velocity


def _coerce(value: Any, target_type: Any) -> Any:
    if target_type in (bool, "bool"):
        if isinstance(value, str):
            return value.strip().lower() in ("1", "true", "yes", "on")
        return bool(value)
    if target_type in (int, "int"):
        return int(value)
    if target_type in (float, "float"):
        return float(value)
    return value


def _apply_overrides(config, values: Mapping[str, Any], source: str):
    known = {f.name: f.type for f in fields(config)}
    updates = {}
    for key, value in values.items():
        if key not in known:
            logger.warning("Ignoring unknown %s setting %r", source, key)
            continue
        try:
            updates[key] = _coerce(value, known[key])
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid value for {key!r} in {source}: {value!r}") from e
    return replace(config, **updates) if updates else config


def _env_section(section: str, environ: Mapping[str, str]) -> Dict[str, str]:
    prefix = f"{ENV_PREFIX}{section.upper()}_"
    return {
        key[len(prefix):].lower(): value
        for key, value in environ.items()
        if key.startswith(prefix)
    }


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Tuple[AnalysisConfig, SynthesisConfig]:
    """
    Build configuration from an optional JSON file and the environment.

    Environment variables look like ``CHORDSCRIBE_ANALYSIS_HOP_SIZE=1024`` or
    ``CHORDSCRIBE_SYNTHESIS_MELODY=true``.

    Args:
        path: Optional JSON file with ``analysis``/``synthesis`` sections
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Tuple of (AnalysisConfig, SynthesisConfig)

    Raises:
        FileNotFoundError: If ``path`` is given but does not exist
        ConfigurationError: If a value is invalid
    """
    environ = os.environ if environ is None else environ
    analysis = AnalysisConfig()
    synthesis = SynthesisConfig()

    if path is not None:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        with open(config_path, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ConfigurationError(f"Invalid JSON in {config_path}: {e}") from e
        analysis = _apply_overrides(analysis, data.get("analysis", {}), str(config_path))
        synthesis = _apply_overrides(synthesis, data.get("synthesis", {}), str(config_path))
        logger.info("Loaded configuration from %s", config_path)

    analysis = _apply_overrides(analysis, _env_section("analysis", environ), "environment")
    synthesis = _apply_overrides(synthesis, _env_section("synthesis", environ), "environment")
    return analysis, synthesis
