"""Chord-to-notes synthesis.

Turns chord segments into note events: a block-chord "chords" track and,
optionally, an arpeggiated "melody" track one octave higher.
"""

import logging
import math
import threading
import warnings
from typing import Iterable, List, Optional, Sequence, Tuple

from ..config import SynthesisConfig
from ..core import (
    AnalysisCancelled,
    ChordSegment,
    InvalidChordLabelError,
    NoteEvent,
    NoteSequence,
    Track,
    UnknownChordQualityWarning,
    parse_chord_label,
)
from ..core.constants import CHORDS_TRACK, MELODY_TRACK, MIDI_MIN, MIDI_MAX

logger = logging.getLogger(__name__)

# Slack for floor(duration / sub_beat) when the ratio is an exact integer
_EPSILON = 1e-9


def root_pitch(root: int, octave: int = 4) -> int:
    """MIDI pitch of pitch class ``root`` in ``octave`` (C4 = 60)."""
    return 12 * (octave + 1) + root


def chord_pitches(label: str, octave: int = 4) -> Tuple[int, ...]:
    """
    Pitches of a chord label voiced upward from the root.

    Examples:
        >>> chord_pitches("Am")
        (69, 72, 76)

    Raises:
        InvalidChordLabelError: If the root cannot be read
    """
    root, quality = parse_chord_label(label)
    base = root_pitch(root, octave)
    return tuple(base + interval for interval in quality.intervals)


def _in_midi_range(pitch: int) -> bool:
    return MIDI_MIN <= pitch <= MIDI_MAX


def block_chord(
    segment: ChordSegment,
    pitches: Sequence[int],
    velocity: float,
) -> List[NoteEvent]:
    """One note per pitch, all spanning the whole segment."""
    return [
        NoteEvent(
            pitch=pitch,
            start=segment.start,
            duration=segment.duration,
            velocity=velocity,
        )
        for pitch in pitches
        if _in_midi_range(pitch)
    ]


def arpeggiate(
    segment: ChordSegment,
    pitches: Sequence[int],
    velocity: float,
    max_sub_beat: float = 0.25,
    articulation: float = 0.8,
) -> List[NoteEvent]:
    """
    Cycle through ``pitches`` one octave up in equal sub-beats.

    The sub-beat is ``min(max_sub_beat, duration / len(pitches))`` and each
    note lasts ``articulation`` of a sub-beat.
    """
    if not pitches or segment.duration <= 0:
        return []

    sub_beat = min(max_sub_beat, segment.duration / len(pitches))
    n_steps = int(math.floor(segment.duration / sub_beat + _EPSILON))

    notes = []
    for step in range(n_steps):
        pitch = pitches[step % len(pitches)] + 12
        if not _in_midi_range(pitch):
            continue
        notes.append(NoteEvent(
            pitch=pitch,
            start=segment.start + step * sub_beat,
            duration=sub_beat * articulation,
            velocity=velocity,
        ))
    return notes


def synthesize(
    segments: Iterable[ChordSegment],
    config: Optional[SynthesisConfig] = None,
    cancel_event: Optional[threading.Event] = None,
) -> NoteSequence:
    """
    Convert chord segments into note tracks.

    Segments whose root cannot be read are skipped with a warning. Unknown
    qualities are voiced as major (see ``parse_chord_label``).

    Args:
        segments: Chord segments in time order
        config: Synthesis settings (defaults used if None)
        cancel_event: Optional event checked between segments

    Returns:
        NoteSequence with a "chords" track, plus "melody" if enabled

    Raises:
        AnalysisCancelled: If ``cancel_event`` is set
    """
    config = config or SynthesisConfig()
    chord_notes: List[NoteEvent] = []
    melody_notes: List[NoteEvent] = []

    for segment in segments:
        if cancel_event is not None and cancel_event.is_set():
            raise AnalysisCancelled("Synthesis cancelled")

        try:
            pitches = chord_pitches(segment.label, config.octave)
        except InvalidChordLabelError as e:
            warnings.warn(
                f"{e}; skipping segment at {segment.start:.2f}s",
                UnknownChordQualityWarning,
                stacklevel=2,
            )
            continue

        chord_notes.extend(block_chord(segment, pitches, config.chord_velocity))
        if config.melody:
            melody_notes.extend(arpeggiate(
                segment,
                pitches,
                config.melody_velocity,
                max_sub_beat=config.max_sub_beat,
                articulation=config.articulation,
            ))

    tracks = [Track(name=CHORDS_TRACK, notes=tuple(chord_notes), channel=0)]
    if config.melody:
        tracks.append(Track(name=MELODY_TRACK, notes=tuple(melody_notes), channel=1))

    logger.debug(
        "Synthesized %s",
        ", ".join(f"{t.name}: {len(t)} notes" for t in tracks),
    )
    return NoteSequence(tracks=tuple(tracks), tempo=config.tempo)
