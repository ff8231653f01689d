"""Signal chain executor — turns a captured clip into the processed voice.

Signal flow (per channel):
    Input -> [Rate-scaled read @ SR] -> one of:
        PassThrough         copy
        RingModulated       x * sin(2*pi*f*n/SR) -> one-pole lowpass
        ConvolutionReverb   dry * dry_gain + (dry (*) noise impulse) * wet_gain
        DelayFeedback       y[n] = x[n] + g * y[n-D]
    -> Output (fixed length, see params.output_length)

The read step changes duration and pitch together; there is no time-stretch.
Mixed values are not renormalized here: the WAV encoder clamps.
"""

import logging
import time

import numpy as np
from scipy.signal import fftconvolve

from primitives.dsp import feedback_comb, one_pole_lowpass, rate_read, ring_modulate
from primitives.filters import one_pole_coeff
from shared.audio import SampleBuffer
from voicefx.engine.impulse import generate_impulse
from voicefx.engine.params import SR, ChainKind, EffectProfile, output_length

log = logging.getLogger(__name__)


def resample_channels(buffer: SampleBuffer, playback_rate: float, n_out: int,
                      sr: int = SR) -> np.ndarray:
    """Read every channel at `playback_rate` into an (channels, n_out) array at sr."""
    step = float(playback_rate) * buffer.sample_rate / sr
    out = np.zeros((buffer.channel_count, n_out))
    for ch in range(buffer.channel_count):
        out[ch] = rate_read(buffer.samples[ch], step, n_out)
    return out


def _ring_modulated(dry, profile, sr):
    coeff = one_pole_coeff(profile.lowpass_hz, sr)
    out = np.empty_like(dry)
    for ch in range(dry.shape[0]):
        out[ch] = one_pole_lowpass(ring_modulate(dry[ch], profile.ring_freq_hz, sr), coeff)
    return out


def _convolution_reverb(dry, profile, sr, rng):
    n_ch, n_out = dry.shape
    ir = generate_impulse(n_ch, sr, profile.reverb_decay, profile.tail_seconds, rng=rng)
    wet = np.zeros_like(dry)
    if ir.shape[1] > 0 and n_out > 0:
        for ch in range(n_ch):
            # full convolution is n_out + len(ir) - 1 long; keep what fits
            wet[ch] = fftconvolve(dry[ch], ir[ch], mode="full")[:n_out]
    return dry * profile.dry_gain + wet * profile.wet_gain


def _delay_feedback(dry, profile, sr):
    delay_samples = int(round(profile.delay_seconds * sr))
    out = np.empty_like(dry)
    for ch in range(dry.shape[0]):
        out[ch] = feedback_comb(dry[ch], delay_samples, profile.feedback_gain)
    return out


def render_chain(buffer: SampleBuffer, profile: EffectProfile, rng=None,
                 sr: int = SR) -> SampleBuffer:
    """The single entry point for processing. Preview, download and batch
    rendering all call this same function.

    Args:
        buffer: captured clip at any sample rate
        profile: resolved effect profile (see engine/params.py)
        rng: random source for the reverb impulse (default: per-thread generator)
        sr: output sample rate

    Returns:
        new SampleBuffer at sr, output_length(...) frames, same channel count
    """
    t0 = time.perf_counter()
    n_out = output_length(buffer.frame_count, buffer.sample_rate, profile, sr)
    dry = resample_channels(buffer, profile.playback_rate, n_out, sr)

    if profile.chain is ChainKind.RING_MODULATED:
        result = _ring_modulated(dry, profile, sr)
    elif profile.chain is ChainKind.CONVOLUTION_REVERB:
        result = _convolution_reverb(dry, profile, sr, rng)
    elif profile.chain is ChainKind.DELAY_FEEDBACK:
        result = _delay_feedback(dry, profile, sr)
    else:
        result = dry

    elapsed = time.perf_counter() - t0
    duration = n_out / sr
    rtf = duration / elapsed if elapsed > 0 else float('inf')
    log.info("render %s %.2fs audio, %d ch in %.3fs (%.0fx RT)",
             profile.chain.value, duration, buffer.channel_count, elapsed, rtf)
    return SampleBuffer(sr, result)
