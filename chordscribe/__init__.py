"""chordscribe - Audio to chord chart and MIDI.

Architecture Layers:
    1. input/      - Audio loading
    2. analysis/   - Framing, windowed spectrum, pitch-class profile
    3. inference/  - Template matching and segment smoothing
    4. synthesis/  - Chord segments to note events
    5. output/     - Export (MIDI)
"""

__version__ = "0.1.0"

# Core types
from .core import (
    AudioSamples,
    ChordQuality,
    ChordSegment,
    NoteEvent,
    Track,
    NoteSequence,
    ChordscribeError,
    ConfigurationError,
)

# Configuration
from .config import AnalysisConfig, SynthesisConfig, load_config

# Input layer
from .input import AudioLoader

# Analysis layer
from .analysis import FrameSequencer

# Inference layer
from .inference import TemplateBank, DEFAULT_TEMPLATE_BANK, match_chroma, smooth

# Synthesis layer
from .synthesis import synthesize

# Output layer
from .output import MIDIExporter

# Pipeline
from .engine import AnalysisEngine, acquire_engine, release_engine, open_engine
from .pipeline import ChordTranscription, recognize_chords, transcribe

__all__ = [
    # Core
    "AudioSamples",
    "ChordQuality",
    "ChordSegment",
    "NoteEvent",
    "Track",
    "NoteSequence",
    "ChordscribeError",
    "ConfigurationError",
    # Config
    "AnalysisConfig",
    "SynthesisConfig",
    "load_config",
    # Input
    "AudioLoader",
    # Analysis
    "FrameSequencer",
    # Inference
    "TemplateBank",
    "DEFAULT_TEMPLATE_BANK",
    "match_chroma",
    "smooth",
    # Synthesis
    "synthesize",
    # Output
    "MIDIExporter",
    # Pipeline
    "AnalysisEngine",
    "acquire_engine",
    "release_engine",
    "open_engine",
    "ChordTranscription",
    "recognize_chords",
    "transcribe",
]
