"""Test the effect profile table and output-length arithmetic.

Run: uv run pytest tests/test_params.py
"""

import math
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
from voicefx.engine.errors import InvalidEffect, RenderError
from voicefx.engine.params import (
    EFFECT_NAMES, PROFILES, SR, ChainKind, EffectId, EffectProfile,
    output_length, parse_effect, resolve,
)


RATES = {
    "normal": 1.0, "helium": 1.4, "child": 1.6, "women": 1.25, "giant": 0.7,
    "gorilla": 0.65, "robot": 1.0, "cave": 1.0, "musician": 1.0, "echo": 1.0,
}


def test_every_identifier_resolves():
    assert set(EFFECT_NAMES) == set(RATES)
    for name, rate in RATES.items():
        profile = resolve(parse_effect(name))
        assert profile.playback_rate == rate


def test_chain_kinds():
    for name in ("normal", "helium", "child", "women", "giant", "gorilla"):
        assert resolve(EffectId(name)).chain is ChainKind.PASS_THROUGH
        assert resolve(EffectId(name)).tail_seconds == 0.5
    assert resolve(EffectId.ROBOT).chain is ChainKind.RING_MODULATED
    assert resolve(EffectId.CAVE).chain is ChainKind.CONVOLUTION_REVERB
    assert resolve(EffectId.MUSICIAN).chain is ChainKind.CONVOLUTION_REVERB
    assert resolve(EffectId.ECHO).chain is ChainKind.DELAY_FEEDBACK


def test_effect_parameters():
    robot = resolve(EffectId.ROBOT)
    assert (robot.ring_freq_hz, robot.lowpass_hz, robot.tail_seconds) == (50.0, 2000.0, 0.5)

    cave = resolve(EffectId.CAVE)
    assert (cave.reverb_decay, cave.dry_gain, cave.wet_gain, cave.tail_seconds) == \
        (2.5, 0.3, 0.9, 2.0)

    musician = resolve(EffectId.MUSICIAN)
    assert (musician.reverb_decay, musician.dry_gain, musician.wet_gain,
            musician.tail_seconds) == (1.0, 0.8, 0.4, 1.5)

    echo = resolve(EffectId.ECHO)
    assert (echo.delay_seconds, echo.feedback_gain, echo.tail_seconds) == (0.3, 0.4, 2.0)


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PROFILES[EffectId.NORMAL] = EffectProfile(playback_rate=3.0)


def test_parse_effect_rejects_unknown():
    assert parse_effect(" cave ") is EffectId.CAVE
    assert parse_effect(EffectId.ECHO) is EffectId.ECHO
    for bad in ("alien", "", "Cave", None, 3):
        with pytest.raises(InvalidEffect) as info:
            parse_effect(bad)
        assert info.value.tag == "invalid_effect"
        assert isinstance(info.value, RenderError)


def test_profile_validation():
    with pytest.raises(ValueError):
        EffectProfile(feedback_gain=1.0)
    with pytest.raises(ValueError):
        EffectProfile(playback_rate=0.0)
    with pytest.raises(ValueError):
        EffectProfile(tail_seconds=-0.1)


@pytest.mark.parametrize("name", ["normal", "helium", "child", "women", "giant", "gorilla"])
def test_pass_through_output_length(name):
    profile = resolve(EffectId(name))
    input_len = 44100 / 44100  # one second
    expected = math.ceil((input_len / profile.playback_rate) * 44100) + 22050
    assert output_length(44100, 44100, profile) == expected


def test_output_length_is_at_output_rate():
    profile = resolve(EffectId.NORMAL)
    # 1s captured at 48 kHz is still 1s (44100 samples) at SR
    assert output_length(48000, 48000, profile) == SR + SR // 2
    assert output_length(0, 48000, resolve(EffectId.ECHO)) == 2 * SR
