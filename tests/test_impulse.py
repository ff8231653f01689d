"""Test the synthetic reverb impulse generator.

Run: uv run pytest tests/test_impulse.py
"""

import os
import sys
import threading

import numpy as np

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from voicefx.engine.impulse import default_source, generate_impulse
from voicefx.engine.params import SR


class FixedSource:
    """Always draws the same value, so the kernel is the bare envelope."""

    def __init__(self, value):
        self.value = value

    def uniform(self, low, high, size=None):
        return np.full(size, self.value)


def test_shape_and_length():
    ir = generate_impulse(2, SR, 2.5, 2.0, rng=np.random.default_rng(0))
    assert ir.shape == (2, 2 * SR)
    ir = generate_impulse(1, 8000, 1.0, 0.33333, rng=np.random.default_rng(0))
    assert ir.shape == (1, round(0.33333 * 8000))


def test_envelope_values():
    length = 10
    ir = generate_impulse(1, 10, 2.0, 1.0, rng=FixedSource(1.0))
    n = length - np.arange(length)
    assert np.allclose(ir[0], (n / length) ** 2.0)
    assert ir[0, 0] == 1.0
    assert np.all(np.diff(ir[0]) < 0)


def test_seeded_source_is_reproducible():
    a = generate_impulse(2, SR, 1.0, 0.5, rng=np.random.default_rng(1234))
    b = generate_impulse(2, SR, 1.0, 0.5, rng=np.random.default_rng(1234))
    assert np.array_equal(a, b)

    rng = np.random.default_rng(1234)
    length = SR // 2
    env = ((length - np.arange(length)) / length) ** 1.0
    left = rng.uniform(-1.0, 1.0, length) * env
    right = rng.uniform(-1.0, 1.0, length) * env
    assert np.array_equal(a[0], left)
    assert np.array_equal(a[1], right)


def test_channels_are_decorrelated_and_bounded():
    ir = generate_impulse(2, SR, 2.5, 1.0, rng=np.random.default_rng(7))
    assert np.max(np.abs(ir)) <= 1.0
    corr = np.corrcoef(ir[0], ir[1])[0, 1]
    assert abs(corr) < 0.05


def test_tail_decays():
    ir = generate_impulse(1, SR, 2.5, 2.0, rng=np.random.default_rng(3))
    quarter = ir.shape[1] // 4
    head = np.sqrt(np.mean(ir[0, :quarter] ** 2))
    tail = np.sqrt(np.mean(ir[0, -quarter:] ** 2))
    assert tail < 0.05 * head


def test_zero_duration_is_empty():
    assert generate_impulse(2, SR, 2.5, 0.0).shape == (2, 0)


def test_default_source_is_per_thread():
    seen = {}

    def grab(key):
        seen[key] = default_source()

    threads = [threading.Thread(target=grab, args=(i,)) for i in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert seen[0] is not seen[1]
    assert default_source() is default_source()
