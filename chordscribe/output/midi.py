"""MIDI export: hand a NoteSequence to pretty_midi for serialization."""

import pretty_midi
from pathlib import Path

from ..core import NoteSequence, Track
from ..core.constants import MIDI_MAX


def velocity_to_midi(velocity: float) -> int:
    """Map a [0, 1] velocity to MIDI 1-127 (0 would be a note-off)."""
    return max(1, min(MIDI_MAX, int(round(velocity * MIDI_MAX))))


class MIDIExporter:
    """Export note tracks to MIDI format, one instrument per track."""

    def __init__(self, instrument_program: int = 0):
        """
        Initialize MIDIExporter.

        Args:
            instrument_program: MIDI program number (0-127) for every track
        """
        self.instrument_program = instrument_program

    def _track_to_instrument(self, track: Track) -> pretty_midi.Instrument:
        instrument = pretty_midi.Instrument(
            program=self.instrument_program,
            name=track.name,
        )
        for note in track.notes:
            instrument.notes.append(pretty_midi.Note(
                velocity=velocity_to_midi(note.velocity),
                pitch=note.pitch,
                start=note.start,
                end=note.end,
            ))
        return instrument

    def to_pretty_midi(self, sequence: NoteSequence) -> pretty_midi.PrettyMIDI:
        """Convert a NoteSequence to a PrettyMIDI object without saving."""
        midi = pretty_midi.PrettyMIDI(initial_tempo=sequence.tempo)
        # pretty_midi assigns channels in instrument order
        for track in sorted(sequence.tracks, key=lambda t: t.channel):
            midi.instruments.append(self._track_to_instrument(track))
        return midi

    def export(self, sequence: NoteSequence, output_path: str) -> None:
        """
        Export a NoteSequence to a MIDI file.

        Args:
            sequence: Tracks and tempo to write
            output_path: Path to output MIDI file
        """
        midi = self.to_pretty_midi(sequence)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        midi.write(str(output_path))
