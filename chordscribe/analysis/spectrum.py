"""Windowed magnitude spectrum of a single frame."""

import numpy as np
import librosa

from ..core import AnalysisFailure


def analysis_window(frame_size: int) -> np.ndarray:
    """Periodic Hann window of length ``frame_size`` (read-only)."""
    window = librosa.filters.get_window("hann", frame_size, fftbins=True)
    window = np.asarray(window, dtype=np.float64)
    window.flags.writeable = False
    return window


def bin_frequencies(frame_size: int, sample_rate: int) -> np.ndarray:
    """Center frequency (Hz) of each non-negative FFT bin."""
    return librosa.fft_frequencies(sr=sample_rate, n_fft=frame_size)


def magnitude_spectrum(frame: np.ndarray, window: np.ndarray) -> np.ndarray:
    """
    Window a frame and return the magnitude of its DFT.

    Args:
        frame: Frame samples, same length as ``window``
        window: Analysis window

    Returns:
        Magnitudes of the ``len(frame) // 2 + 1`` non-negative frequency bins

    Raises:
        AnalysisFailure: If the transform fails or produces non-finite values
    """
    if len(frame) != len(window):
        raise AnalysisFailure(
            f"Frame length {len(frame)} does not match window length {len(window)}"
        )
    try:
        with np.errstate(over="raise", invalid="raise"):
            spectrum = np.abs(np.fft.rfft(frame * window))
    except (ValueError, FloatingPointError) as e:
        raise AnalysisFailure(f"Spectral transform failed: {e}") from e

    if not np.all(np.isfinite(spectrum)):
        raise AnalysisFailure("Spectral transform produced non-finite magnitudes")
    return spectrum
