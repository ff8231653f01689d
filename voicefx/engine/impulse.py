"""Synthetic reverb impulse: decaying uniform noise, one independent draw per channel.

For sample i of a kernel of `length` samples:
    n   = length - i
    vol = (n / length) ** decay
    h[i] = uniform(-1, 1) * vol

Not a measured room. A fresh kernel is drawn for every render, so two renders
of the same clip through a reverb voice differ in their tails.
"""

from __future__ import annotations

import threading
from typing import Protocol

import numpy as np


class RandomSource(Protocol):
    """Anything that can draw uniform floats; numpy.random.Generator qualifies."""

    def uniform(self, low: float, high: float, size=None) -> np.ndarray: ...


_local = threading.local()


def default_source() -> RandomSource:
    """Per-thread generator, seeded from OS entropy on first use in each thread."""
    rng = getattr(_local, "rng", None)
    if rng is None:
        rng = np.random.default_rng()
        _local.rng = rng
    return rng


def generate_impulse(channel_count: int, sample_rate: int, decay: float,
                     duration: float, rng: RandomSource | None = None) -> np.ndarray:
    """Return a (channel_count, length) float64 noise kernel.

    length = round(duration * sample_rate). Channels are drawn one after the
    other from `rng` so a seeded source gives a reproducible kernel.
    """
    if rng is None:
        rng = default_source()
    length = int(round(duration * sample_rate))
    if length <= 0 or channel_count <= 0:
        return np.zeros((max(channel_count, 0), 0))

    n = length - np.arange(length, dtype=np.float64)
    envelope = (n / length) ** decay

    ir = np.empty((channel_count, length))
    for ch in range(channel_count):
        ir[ch] = np.asarray(rng.uniform(-1.0, 1.0, length), dtype=np.float64) * envelope
    return ir
