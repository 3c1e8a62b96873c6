"""Output layer - Export synthesized notes.

The MIDI byte encoding itself is done by pretty_midi.
"""

from .midi import MIDIExporter, velocity_to_midi

__all__ = [
    "MIDIExporter",
    "velocity_to_midi",
]
