"""16-bit PCM WAV encoding and clip decoding.

encode() produces the canonical 44-byte RIFF/WAVE header followed by
interleaved little-endian int16 frames. Quantization is asymmetric so that
both ends of the signed range are reachable:

    x = clip(x, -1, 1)
    q = trunc(x * 32768)  if x < 0
        trunc(x * 32767)  otherwise
"""

import io
import logging

import numpy as np
import soundfile as sf
from scipy.io import wavfile

from shared.audio import SampleBuffer
from voicefx.engine.errors import DecodeFailure

log = logging.getLogger(__name__)

MIME_TYPE = "audio/wav"
HEADER_SIZE = 44


def quantize(samples: np.ndarray) -> np.ndarray:
    """Float samples -> int16 codes, same shape."""
    x = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(x < 0, x * 32768.0, x * 32767.0)
    return np.trunc(scaled).astype(np.int16)


def dequantize(codes: np.ndarray) -> np.ndarray:
    """Inverse of quantize() up to one step of truncation error."""
    c = np.asarray(codes).astype(np.float64)
    return np.where(c < 0, c / 32768.0, c / 32767.0)


def encode(buffer: SampleBuffer) -> bytes:
    """Serialize a SampleBuffer as a 16-bit PCM WAV byte string."""
    clipped = int(np.count_nonzero(np.abs(buffer.samples) > 1.0))
    if clipped:
        log.debug("clipping %d of %d samples", clipped, buffer.samples.size)

    # (channels, frames) -> (frames, channels) so rows are interleaved frames
    pcm = np.ascontiguousarray(quantize(buffer.samples).T)
    out = io.BytesIO()
    wavfile.write(out, int(buffer.sample_rate), pcm)
    return out.getvalue()


def header_only(channel_count: int, sample_rate: int) -> bytes:
    """A valid WAV with no frames (data chunk size 0)."""
    return encode(SampleBuffer.silence(max(channel_count, 1), 0, sample_rate))


def _to_float(data: np.ndarray) -> np.ndarray:
    if data.dtype == np.int16:
        return dequantize(data)
    if data.dtype == np.int32:
        return data.astype(np.float64) / 2147483648.0
    if data.dtype == np.uint8:
        return (data.astype(np.float64) - 128.0) / 128.0
    return data.astype(np.float64)


def decode(data: bytes) -> SampleBuffer:
    """Parse an in-memory WAV into a SampleBuffer at the file's own rate."""
    try:
        sr, frames = wavfile.read(io.BytesIO(data))
    except (ValueError, EOFError) as err:
        raise DecodeFailure(f"could not decode WAV data: {err}") from err
    return SampleBuffer.from_frames(_to_float(frames), sr)


def load_clip(path) -> SampleBuffer:
    """Read any libsndfile-supported file at its native rate, all channels kept."""
    try:
        frames, sr = sf.read(str(path), dtype="float64", always_2d=True)
    except (sf.LibsndfileError, RuntimeError, OSError) as err:
        raise DecodeFailure(f"could not read {path}: {err}") from err
    return SampleBuffer.from_frames(frames, sr)


def save_clip(path, data: bytes):
    """Write encoded WAV bytes to disk."""
    with open(path, "wb") as f:
        f.write(data)
