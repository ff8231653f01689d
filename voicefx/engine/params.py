"""Effect profiles for the voice changer.

One row per voice. Every render looks its row up here; nothing in a profile
changes after import. Only the fields used by the row's chain kind matter.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from voicefx.engine.errors import InvalidEffect

SR = 44100  # every render is produced at this rate, whatever the capture rate


class EffectId(str, Enum):
    NORMAL = "normal"
    HELIUM = "helium"
    CHILD = "child"
    WOMEN = "women"
    GIANT = "giant"
    GORILLA = "gorilla"
    ROBOT = "robot"
    CAVE = "cave"
    MUSICIAN = "musician"
    ECHO = "echo"


class ChainKind(Enum):
    PASS_THROUGH = "pass_through"
    RING_MODULATED = "ring_modulated"
    CONVOLUTION_REVERB = "convolution_reverb"
    DELAY_FEEDBACK = "delay_feedback"


@dataclass(frozen=True)
class EffectProfile:
    playback_rate: float = 1.0
    tail_seconds: float = 0.5
    chain: ChainKind = ChainKind.PASS_THROUGH

    # ConvolutionReverb
    reverb_decay: float = 0.0   # envelope exponent of the noise impulse
    dry_gain: float = 1.0
    wet_gain: float = 0.0

    # DelayFeedback
    delay_seconds: float = 0.0
    feedback_gain: float = 0.0  # must stay below 1 so echoes die out in the tail

    # RingModulated
    ring_freq_hz: float = 0.0
    lowpass_hz: float = 0.0

    def __post_init__(self):
        if not self.playback_rate > 0:
            raise ValueError(f"playback_rate must be > 0, got {self.playback_rate}")
        if not self.tail_seconds >= 0:
            raise ValueError(f"tail_seconds must be >= 0, got {self.tail_seconds}")
        if not 0.0 <= self.feedback_gain < 1.0:
            raise ValueError(f"feedback_gain must be in [0, 1), got {self.feedback_gain}")


# ── Table ─────────────────────────────────────────────────────────────

_PROFILES = {
    EffectId.NORMAL: EffectProfile(playback_rate=1.0),
    EffectId.HELIUM: EffectProfile(playback_rate=1.4),
    EffectId.CHILD: EffectProfile(playback_rate=1.6),      # highest pitch-up
    EffectId.WOMEN: EffectProfile(playback_rate=1.25),
    EffectId.GIANT: EffectProfile(playback_rate=0.7),
    EffectId.GORILLA: EffectProfile(playback_rate=0.65),   # deepest
    EffectId.ROBOT: EffectProfile(
        chain=ChainKind.RING_MODULATED,
        ring_freq_hz=50.0, lowpass_hz=2000.0),
    EffectId.CAVE: EffectProfile(
        tail_seconds=2.0, chain=ChainKind.CONVOLUTION_REVERB,
        reverb_decay=2.5, dry_gain=0.3, wet_gain=0.9),     # mostly wet
    EffectId.MUSICIAN: EffectProfile(
        tail_seconds=1.5, chain=ChainKind.CONVOLUTION_REVERB,
        reverb_decay=1.0, dry_gain=0.8, wet_gain=0.4),     # mostly dry
    EffectId.ECHO: EffectProfile(
        tail_seconds=2.0, chain=ChainKind.DELAY_FEEDBACK,
        delay_seconds=0.3, feedback_gain=0.4),
}

PROFILES = MappingProxyType(_PROFILES)

EFFECT_NAMES = tuple(e.value for e in EffectId)


def parse_effect(effect) -> EffectId:
    """Map a user-facing identifier (or an EffectId) to EffectId.

    Raises InvalidEffect for anything outside the closed set.
    """
    if isinstance(effect, EffectId):
        return effect
    if isinstance(effect, str):
        try:
            return EffectId(effect.strip())
        except ValueError:
            pass
    raise InvalidEffect(effect)


def resolve(effect_id: EffectId) -> EffectProfile:
    return PROFILES[effect_id]


def output_length(frame_count: int, input_rate: float, profile: EffectProfile,
                  sr: int = SR) -> int:
    """Number of output samples: resampled input duration plus the effect tail, at sr."""
    body = math.ceil(frame_count / input_rate / profile.playback_rate * sr)
    return body + round(profile.tail_seconds * sr)
