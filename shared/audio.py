"""Shared audio value types and checks.

Provides SampleBuffer (the channel-major sample container passed between
stages), safety_check, and make_impulse used by renderers and tests.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, eq=False)
class SampleBuffer:
    """Multichannel float audio: samples has shape (channel_count, frame_count).

    Values are nominally in [-1, 1] but nothing enforces it; the WAV encoder clamps.
    """

    sample_rate: int
    samples: np.ndarray

    def __post_init__(self):
        arr = np.asarray(self.samples, dtype=np.float64)
        if arr.ndim == 1:
            arr = arr[np.newaxis, :]
        if arr.ndim != 2:
            raise ValueError(f"samples must be (channels, frames), got shape {arr.shape}")
        object.__setattr__(self, "samples", arr)

    @property
    def channel_count(self) -> int:
        return self.samples.shape[0]

    @property
    def frame_count(self) -> int:
        return self.samples.shape[1]

    @property
    def duration(self) -> float:
        """Length in seconds at the buffer's own sample rate."""
        if self.sample_rate <= 0:
            return 0.0
        return self.frame_count / self.sample_rate

    @property
    def is_empty(self) -> bool:
        return self.channel_count == 0 or self.frame_count == 0

    @classmethod
    def from_channels(cls, channels, sample_rate: int) -> SampleBuffer:
        """Build from one sequence of floats per channel (all the same length)."""
        channels = [np.asarray(c, dtype=np.float64) for c in channels]
        if not channels:
            return cls(sample_rate, np.zeros((0, 0)))
        lengths = {len(c) for c in channels}
        if len(lengths) > 1:
            raise ValueError(f"channels differ in length: {sorted(lengths)}")
        return cls(sample_rate, np.stack(channels))

    @classmethod
    def from_frames(cls, data: np.ndarray, sample_rate: int) -> SampleBuffer:
        """Build from a (frames,) or (frames, channels) array, as audio libraries return."""
        data = np.asarray(data, dtype=np.float64)
        if data.ndim == 1:
            return cls(sample_rate, data[np.newaxis, :])
        return cls(sample_rate, data.T.copy())

    @classmethod
    def silence(cls, channel_count: int, frame_count: int, sample_rate: int) -> SampleBuffer:
        return cls(sample_rate, np.zeros((channel_count, frame_count)))

    def frames(self) -> np.ndarray:
        """(frames, channels) C-contiguous copy for playback and file writers."""
        return np.ascontiguousarray(self.samples.T)


def safety_check(output):
    """Reject non-finite output. Out-of-range but finite values pass; the encoder clamps.

    Returns (ok, error_message).
    """
    if output.size and not np.all(np.isfinite(output)):
        return False, "ERROR: output diverged (non-finite values)"
    return True, ""


def make_impulse(sr=44100, seconds=0.5):
    """Generate a unit impulse (click) for testing."""
    n = int(sr * seconds)
    impulse = np.zeros(n)
    impulse[0] = 1.0
    return impulse
