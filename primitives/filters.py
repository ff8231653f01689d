"""Per-sample filter processors and coefficient design.

The stateful classes here mirror the buffer kernels in primitives/dsp.py one
sample at a time; they are the readable reference the kernels are checked against.
"""

import numpy as np


def one_pole_coeff(cutoff_hz: float, sr: int) -> float:
    """Feedback coefficient for a one-pole lowpass with a -3 dB point near cutoff_hz.

    a = exp(-2*pi*fc/sr). A cutoff at or above Nyquist returns 0 (bypass).
    """
    if cutoff_hz <= 0:
        return 1.0
    if cutoff_hz >= sr / 2.0:
        return 0.0
    return float(np.exp(-2.0 * np.pi * cutoff_hz / sr))


class OnePoleFilter:
    """One-pole lowpass filter (damping).

    y[n] = (1 - a) * x[n] + a * y[n-1]

    a=0: no filtering (output = input)
    a close to 1: heavy lowpass (only very low frequencies pass)
    """

    def __init__(self, coeff: float = 0.5):
        self.coeff = coeff
        self.y1 = 0.0  # previous output

    @classmethod
    def from_cutoff(cls, cutoff_hz: float, sr: int) -> "OnePoleFilter":
        return cls(coeff=one_pole_coeff(cutoff_hz, sr))

    def process(self, x: float) -> float:
        self.y1 = (1.0 - self.coeff) * x + self.coeff * self.y1
        return self.y1


class FeedbackComb:
    """Circular-buffer echo: y[n] = x[n] + g * y[n-D].

    Usage:
        comb = FeedbackComb(delay_samples=13230, feedback=0.4)
        out = comb.process(sample)
    """

    def __init__(self, delay_samples: int, feedback: float):
        self.delay = delay_samples
        self.feedback = feedback
        self.buffer = np.zeros(max(delay_samples, 1), dtype=np.float64)
        self.idx = 0

    def process(self, x: float) -> float:
        if self.delay <= 0:
            return x
        delayed = self.buffer[self.idx]
        y = x + self.feedback * delayed
        self.buffer[self.idx] = y
        self.idx = (self.idx + 1) % self.delay
        return y
