"""Pitch-class profile (chroma / HPCP) from a magnitude spectrum."""

import numpy as np

from ..core.constants import (
    N_PITCH_CLASSES,
    REFERENCE_FREQUENCY,
    REFERENCE_MIDI,
    DEFAULT_MIN_FREQUENCY,
    DEFAULT_MAX_FREQUENCY,
    DEFAULT_NOISE_FLOOR,
)

EXCLUDED_BIN = -1


def frequency_to_pitch_class(
    frequencies: np.ndarray,
    reference_frequency: float = REFERENCE_FREQUENCY,
) -> np.ndarray:
    """Map frequencies (Hz, > 0) to equal-tempered pitch classes, 0 = C."""
    frequencies = np.asarray(frequencies, dtype=np.float64)
    midi = REFERENCE_MIDI + 12 * np.log2(frequencies / reference_frequency)
    return np.mod(np.rint(midi).astype(int), N_PITCH_CLASSES)


def pitch_class_map(
    frequencies: np.ndarray,
    reference_frequency: float = REFERENCE_FREQUENCY,
    min_frequency: float = DEFAULT_MIN_FREQUENCY,
    max_frequency: float = DEFAULT_MAX_FREQUENCY,
) -> np.ndarray:
    """
    Assign every spectrum bin to a pitch class.

    Bins at 0 Hz or outside [min_frequency, max_frequency] are marked
    ``EXCLUDED_BIN`` and contribute nothing to the profile.

    Returns:
        Integer array, same length as ``frequencies`` (read-only)
    """
    frequencies = np.asarray(frequencies, dtype=np.float64)
    classes = np.full(len(frequencies), EXCLUDED_BIN, dtype=int)
    in_range = (
        (frequencies > 0)
        & (frequencies >= min_frequency)
        & (frequencies <= max_frequency)
    )
    classes[in_range] = frequency_to_pitch_class(
        frequencies[in_range], reference_frequency
    )
    classes.flags.writeable = False
    return classes


def pitch_class_profile(
    spectrum: np.ndarray,
    bin_classes: np.ndarray,
    noise_floor: float = DEFAULT_NOISE_FLOOR,
) -> np.ndarray:
    """
    Fold a magnitude spectrum into a 12-bin chroma vector normalized to [0, 1].

    Energy (squared magnitude) is summed per pitch class and divided by the
    largest class so the peak bin is 1.0. If the peak does not exceed
    ``noise_floor`` the zero vector is returned, meaning "no chord".

    Args:
        spectrum: Magnitude spectrum
        bin_classes: Pitch class per bin, from ``pitch_class_map``
        noise_floor: Minimum peak class energy

    Returns:
        Array of 12 floats
    """
    used = bin_classes != EXCLUDED_BIN
    energy = np.bincount(
        bin_classes[used],
        weights=np.square(spectrum[used]),
        minlength=N_PITCH_CLASSES,
    )
    peak = energy.max()
    if peak <= noise_floor:
        return np.zeros(N_PITCH_CLASSES)
    return energy / peak
