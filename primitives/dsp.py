"""Numba-based whole-buffer DSP kernels for the voice effect chains.

Each function processes one channel (1-D float64 array) and returns a new array.
"""

import numpy as np
from numba import njit


@njit(cache=True)
def rate_read(audio, step, n_out):
    """Read `audio` with a cursor advancing `step` input samples per output sample.

    step > 1 shortens and raises pitch, step < 1 lengthens and lowers it.
    Linear interpolation between neighbours; past the end of the input is silence.
    """
    n_in = len(audio)
    out = np.zeros(n_out)
    for j in range(n_out):
        pos = j * step
        i0 = int(pos)
        if i0 >= n_in:
            break
        frac = pos - i0
        s0 = audio[i0]
        s1 = audio[i0 + 1] if i0 + 1 < n_in else 0.0
        out[j] = s0 + frac * (s1 - s0)
    return out


@njit(cache=True)
def ring_modulate(audio, carrier_hz, sr):
    """Multiply by a bipolar sine carrier: y = x * sin(2*pi*f*n/sr)."""
    n = len(audio)
    out = np.zeros(n)
    w = 2.0 * np.pi * carrier_hz / sr
    for i in range(n):
        out[i] = audio[i] * np.sin(w * i)
    return out


@njit(cache=True)
def one_pole_lowpass(audio, coeff):
    """One-pole lowpass filter. coeff=0 is bypass, higher = darker."""
    n = len(audio)
    out = np.zeros(n)
    y1 = 0.0
    for i in range(n):
        y1 = (1.0 - coeff) * audio[i] + coeff * y1
        out[i] = y1
    return out


@njit(cache=True)
def feedback_comb(audio, delay_samples, feedback):
    """Feedback comb: y[n] = x[n] + feedback * y[n - delay_samples].

    The dry signal passes straight through; every repeat is scaled by
    `feedback` once more than the one before it.
    """
    n = len(audio)
    out = np.zeros(n)
    if delay_samples <= 0:
        out[:] = audio
        return out
    buf = np.zeros(delay_samples)
    idx = 0
    for i in range(n):
        delayed = buf[idx]
        y = audio[i] + feedback * delayed
        buf[idx] = y
        idx = (idx + 1) % delay_samples
        out[i] = y
    return out
