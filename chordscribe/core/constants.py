"""Global constants for chordscribe."""

# Pitch names, sharps only (0 = C)
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
N_PITCH_CLASSES = 12

# Frame analysis defaults
DEFAULT_FRAME_SIZE = 4096
DEFAULT_HOP_SIZE = 2048  # 50% overlap
DEFAULT_MIN_CHORD_DURATION = 0.5

# Pitch-class profile defaults
REFERENCE_FREQUENCY = 440.0  # A4
REFERENCE_MIDI = 69
DEFAULT_MIN_FREQUENCY = 40.0
DEFAULT_MAX_FREQUENCY = 5000.0
DEFAULT_NOISE_FLOOR = 1e-6

# Synthesis defaults
DEFAULT_OCTAVE = 4  # C4 = 60
DEFAULT_VELOCITY = 0.8
DEFAULT_ACCOMPANIMENT_VELOCITY = 0.6
DEFAULT_MAX_SUB_BEAT = 0.25
DEFAULT_ARTICULATION = 0.8
DEFAULT_TEMPO = 120.0

CHORDS_TRACK = "chords"
MELODY_TRACK = "melody"

# MIDI ranges
MIDI_MIN = 0
MIDI_MAX = 127
