"""Frame sequencing: slice a sample buffer into overlapping frames."""

from typing import Iterator

from ..core import AudioSamples, Frame, InvalidInputError
from ..core.constants import DEFAULT_FRAME_SIZE, DEFAULT_HOP_SIZE
from ..core.errors import ConfigurationError


class FrameSequencer:
    """Produce fixed-size frames at offsets 0, hop, 2*hop, ...

    Iteration is lazy and restartable: each call to ``frames`` starts a new
    generator over the same buffer. Frames overlap by
    ``frame_size - hop_size`` samples and the last partial frame is dropped.
    """

    def __init__(
        self,
        frame_size: int = DEFAULT_FRAME_SIZE,
        hop_size: int = DEFAULT_HOP_SIZE,
    ):
        if frame_size <= 0 or hop_size <= 0:
            raise ConfigurationError("frame_size and hop_size must be positive")
        if hop_size > frame_size:
            raise ConfigurationError(
                f"hop_size ({hop_size}) must not exceed frame_size ({frame_size})"
            )
        self.frame_size = frame_size
        self.hop_size = hop_size

    def count(self, n_samples: int) -> int:
        """Number of complete frames in a buffer of ``n_samples``."""
        if n_samples < self.frame_size:
            return 0
        return (n_samples - self.frame_size) // self.hop_size + 1

    def frames(self, audio: AudioSamples) -> Iterator[Frame]:
        """Yield frames of ``audio`` in time order."""
        samples = audio.samples
        offset = 0
        index = 0
        while offset + self.frame_size <= len(samples):
            yield Frame(
                index=index,
                offset=offset,
                samples=samples[offset:offset + self.frame_size],
            )
            offset += self.hop_size
            index += 1

    def require_frames(self, audio: AudioSamples) -> int:
        """
        Check that ``audio`` holds at least one frame.

        Returns:
            Number of frames

        Raises:
            InvalidInputError: If the buffer is empty or shorter than a frame
        """
        n_frames = self.count(len(audio))
        if n_frames == 0:
            raise InvalidInputError(
                f"Audio has {len(audio)} samples, fewer than one frame "
                f"({self.frame_size})"
            )
        return n_frames
