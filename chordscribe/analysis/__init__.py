"""Analysis layer - Low-level signal analysis.

This layer turns raw samples into pitch-class profiles:
- Frame sequencing (overlapping fixed-size frames)
- Windowed magnitude spectrum
- Pitch-class profile (chroma / HPCP)
"""

from .framing import FrameSequencer
from .spectrum import analysis_window, bin_frequencies, magnitude_spectrum
from .chroma import frequency_to_pitch_class, pitch_class_map, pitch_class_profile

__all__ = [
    "FrameSequencer",
    "analysis_window",
    "bin_frequencies",
    "magnitude_spectrum",
    "frequency_to_pitch_class",
    "pitch_class_map",
    "pitch_class_profile",
]
