"""Value types passed between pipeline stages.

Every type here is immutable once constructed. Arrays held by these types
are marked read-only.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from .constants import N_PITCH_CLASSES
from .errors import ConfigurationError, InvalidInputError
from .quality import ChordQuality, format_chord_label


def _readonly(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


def seconds_to_beats(seconds: float, tempo: float) -> float:
    """Convert a time in seconds to beats at the given tempo (BPM)."""
    return seconds * tempo / 60.0


@dataclass(frozen=True, eq=False)
class AudioSamples:
    """Mono floating-point sample buffer plus its sample rate.

    A 2-D array is downmixed to mono by averaging the channels. Both
    ``(channels, n_samples)`` and the ``(n_samples, channels)`` layout
    returned by ``soundfile.read`` are accepted; the shorter axis is taken
    as channels.
    """

    samples: np.ndarray
    sample_rate: int

    def __post_init__(self):
        if self.sample_rate <= 0:
            raise ConfigurationError(
                f"sample_rate must be positive, got {self.sample_rate}"
            )

        samples = np.array(self.samples, dtype=np.float64)
        if samples.ndim == 2:
            # Channels are the shorter axis: (channels, n) or (n, channels)
            channel_axis = 0 if samples.shape[0] <= samples.shape[1] else 1
            samples = samples.mean(axis=channel_axis)
        elif samples.ndim != 1:
            raise InvalidInputError(
                f"Expected mono or 2-D multichannel audio, got shape {samples.shape}"
            )
        object.__setattr__(self, "samples", _readonly(samples))

    def __len__(self) -> int:
        return len(self.samples)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return len(self.samples) / self.sample_rate


@dataclass(frozen=True, eq=False)
class Frame:
    """Fixed-length slice of an AudioSamples buffer."""

    index: int
    offset: int  # first sample
    samples: np.ndarray


@dataclass(frozen=True, eq=False)
class ChromaVector:
    """12-bin pitch-class profile for one frame (0 = C ... 11 = B)."""

    bins: np.ndarray
    start: float
    end: float

    def __post_init__(self):
        bins = np.array(self.bins, dtype=np.float64)
        if bins.shape != (N_PITCH_CLASSES,):
            raise ValueError(f"Chroma vector must have 12 bins, got {bins.shape}")
        object.__setattr__(self, "bins", _readonly(bins))

    @property
    def is_silent(self) -> bool:
        """True when no pitch class carries energy."""
        return not np.any(self.bins)


@dataclass(frozen=True)
class ChordCandidate:
    """Best template match for one chroma vector.

    ``root`` and ``quality`` are both None for a silent frame (no chord).
    """

    root: Optional[int]
    quality: Optional[ChordQuality]
    confidence: float
    start: float
    end: float

    @classmethod
    def no_chord(cls, start: float, end: float) -> "ChordCandidate":
        return cls(root=None, quality=None, confidence=0.0, start=start, end=end)

    @property
    def is_chord(self) -> bool:
        return self.quality is not None

    @property
    def label(self) -> Optional[str]:
        """Chord name (e.g. 'G7'), or None for no chord."""
        if self.quality is None:
            return None
        return format_chord_label(self.root, self.quality)


@dataclass(frozen=True)
class ChordSegment:
    """A chord label active over [start, end)."""

    label: str
    start: float
    end: float
    confidence: float

    @property
    def duration(self) -> float:
        return self.end - self.start

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chord": self.label,
            "start": self.start,
            "end": self.end,
            "confidence": self.confidence,
        }


@dataclass(frozen=True)
class NoteEvent:
    """A timed pitch. Times in seconds, velocity in [0, 1]."""

    pitch: int  # MIDI pitch (0-127)
    start: float
    duration: float
    velocity: float = 0.8

    @property
    def end(self) -> float:
        return self.start + self.duration

    def start_beat(self, tempo: float) -> float:
        """Start time expressed in beats at ``tempo`` BPM."""
        return seconds_to_beats(self.start, tempo)

    def duration_beats(self, tempo: float) -> float:
        return seconds_to_beats(self.duration, tempo)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pitch": self.pitch,
            "start": self.start,
            "duration": self.duration,
            "velocity": self.velocity,
        }


@dataclass(frozen=True)
class Track:
    """Ordered note events sharing one name/channel.

    ``channel`` orders tracks in exported MIDI files. pretty_midi numbers
    channels by instrument order, so channels 0, 1, ... come out as written.
    """

    name: str
    notes: Tuple[NoteEvent, ...] = ()
    channel: int = 0

    def __len__(self) -> int:
        return len(self.notes)

    @property
    def pitches(self) -> Tuple[int, ...]:
        return tuple(n.pitch for n in self.notes)


@dataclass(frozen=True)
class NoteSequence:
    """Tracks plus a global tempo: everything a MIDI serializer needs."""

    tracks: Tuple[Track, ...] = field(default_factory=tuple)
    tempo: float = 120.0

    def track(self, name: str) -> Track:
        """Get a track by name.

        Raises:
            KeyError: If no track has that name
        """
        for track in self.tracks:
            if track.name == name:
                return track
        raise KeyError(name)

    @property
    def track_names(self) -> Tuple[str, ...]:
        return tuple(t.name for t in self.tracks)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tempo": self.tempo,
            "tracks": [
                {
                    "name": t.name,
                    "channel": t.channel,
                    "notes": [n.to_dict() for n in t.notes],
                }
                for t in self.tracks
            ],
        }
