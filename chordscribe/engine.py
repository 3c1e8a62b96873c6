"""Analysis engine: the precomputed, read-only state shared by every frame.

An engine is built once per (configuration, sample rate) by
``acquire_engine`` and passed explicitly to the pipeline functions. When
``workers > 1`` it also owns a thread pool, which ``release_engine`` shuts
down. Prefer the ``open_engine`` context manager:

    with open_engine(sr, config) as engine:
        segments = recognize_chords(audio, engine)
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import numpy as np

from .analysis.chroma import pitch_class_map
from .analysis.framing import FrameSequencer
from .analysis.spectrum import analysis_window, bin_frequencies
from .config import AnalysisConfig
from .core import ConfigurationError
from .inference.templates import TemplateBank, DEFAULT_TEMPLATE_BANK

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class AnalysisEngine:
    """Ready-to-use analysis state. Treat as opaque."""

    config: AnalysisConfig
    sample_rate: int
    sequencer: FrameSequencer
    window: np.ndarray
    bin_classes: np.ndarray
    bank: TemplateBank
    executor: Optional[ThreadPoolExecutor] = None


def acquire_engine(
    sample_rate: int,
    config: Optional[AnalysisConfig] = None,
    bank: TemplateBank = DEFAULT_TEMPLATE_BANK,
) -> AnalysisEngine:
    """
    Build an engine for audio at ``sample_rate``.

    Raises:
        ConfigurationError: If ``sample_rate`` is not positive or the
            frequency range lies above the Nyquist frequency
    """
    config = config or AnalysisConfig()
    if sample_rate <= 0:
        raise ConfigurationError(f"sample_rate must be positive, got {sample_rate}")
    if config.min_frequency >= sample_rate / 2:
        raise ConfigurationError(
            f"min_frequency {config.min_frequency} Hz is above Nyquist "
            f"for {sample_rate} Hz audio"
        )

    frequencies = bin_frequencies(config.frame_size, sample_rate)
    executor = None
    if config.workers > 1:
        executor = ThreadPoolExecutor(
            max_workers=config.workers,
            thread_name_prefix="chordscribe",
        )

    logger.debug(
        "Engine ready: sr=%d frame=%d hop=%d workers=%d",
        sample_rate, config.frame_size, config.hop_size, config.workers,
    )
    return AnalysisEngine(
        config=config,
        sample_rate=sample_rate,
        sequencer=FrameSequencer(config.frame_size, config.hop_size),
        window=analysis_window(config.frame_size),
        bin_classes=pitch_class_map(
            frequencies,
            reference_frequency=config.reference_frequency,
            min_frequency=config.min_frequency,
            max_frequency=config.max_frequency,
        ),
        bank=bank,
        executor=executor,
    )


def release_engine(engine: AnalysisEngine) -> None:
    """Release resources held by ``engine`` (its thread pool, if any)."""
    if engine.executor is not None:
        engine.executor.shutdown(wait=True)


@contextmanager
def open_engine(
    sample_rate: int,
    config: Optional[AnalysisConfig] = None,
    bank: TemplateBank = DEFAULT_TEMPLATE_BANK,
) -> Iterator[AnalysisEngine]:
    """Context manager around ``acquire_engine``/``release_engine``."""
    engine = acquire_engine(sample_rate, config, bank)
    try:
        yield engine
    finally:
        release_engine(engine)
