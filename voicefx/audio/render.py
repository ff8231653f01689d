"""Offline voice rendering: clip + effect name -> WAV bytes.

Usage:
    python -m voicefx.main input.wav [output.wav] [--effect cave]
    python -m voicefx.main input.wav out_dir --all --workers 4
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import math
import os
import time
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from shared.audio import SampleBuffer, safety_check
from voicefx.audio.wav import MIME_TYPE, decode, encode, header_only, load_clip, save_clip
from voicefx.engine.chain import render_chain
from voicefx.engine.errors import RenderError, RenderFailure
from voicefx.engine.params import EFFECT_NAMES, SR, EffectId, parse_effect, resolve

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    """Tagged outcome of one render: data on success, error tag otherwise."""

    data: bytes | None = None
    error: str | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.error is None


def render_effect(buffer: SampleBuffer, effect, rng=None) -> bytes:
    """Render `buffer` through `effect` and return a complete WAV file.

    Raises InvalidEffect before doing any work if the effect is unknown, and
    RenderFailure for a non-finite/non-positive sample rate or diverged output.
    An empty clip (no channels or no frames) gives a header-only WAV.
    """
    effect_id = parse_effect(effect)
    profile = resolve(effect_id)
    log.debug("effect %s -> %s", effect_id.value, profile)

    if buffer.is_empty:
        return header_only(buffer.channel_count, SR)
    if not (math.isfinite(buffer.sample_rate) and buffer.sample_rate > 0):
        raise RenderFailure(f"invalid input sample rate: {buffer.sample_rate}")

    output = render_chain(buffer, profile, rng=rng)
    ok, msg = safety_check(output.samples)
    if not ok:
        raise RenderFailure(msg)
    return encode(output)


def try_render(buffer: SampleBuffer, effect, rng=None) -> RenderResult:
    """render_effect() with failures returned as a tagged RenderResult."""
    try:
        return RenderResult(data=render_effect(buffer, effect, rng=rng))
    except RenderError as err:
        log.warning("render %r failed (%s): %s", effect, err.tag, err)
        return RenderResult(error=err.tag, message=str(err))


def render_many(buffer: SampleBuffer, effects, workers: int | None = None) -> dict:
    """Render several effects of the same clip concurrently.

    Renders share nothing but the read-only input, so they run on a plain
    thread pool. Returns {EffectId: wav bytes}; the first failure propagates.
    """
    effect_ids = [parse_effect(e) for e in effects]
    if not effect_ids:
        return {}
    n_workers = workers or min(len(effect_ids), os.cpu_count() or 1)
    with ThreadPoolExecutor(max_workers=n_workers) as pool:
        futures = {e: pool.submit(render_effect, buffer, e) for e in effect_ids}
        return {e: f.result() for e, f in futures.items()}


async def render_effect_async(buffer: SampleBuffer, effect, executor=None) -> bytes:
    """Run one blocking render on an executor from asyncio code."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, render_effect, buffer, effect)


def suggested_filename(effect, timestamp_ms: int | None = None) -> str:
    """Download name used by the front-end: voice_<effect>_<unix ms>.wav."""
    effect_id = parse_effect(effect)
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"voice_{effect_id.value}_{timestamp_ms}.wav"


def _preview(data: bytes):
    from shared.streaming import StreamPlayer

    return StreamPlayer().play(decode(data))


def build_parser():
    parser = argparse.ArgumentParser(description="Voice changer offline renderer")
    parser.add_argument("input", help="Recorded clip (any format libsndfile reads)")
    parser.add_argument("output", nargs="?",
                        help="Output WAV (or directory with --all); "
                             "default voice_<effect>_<timestamp>.wav")
    parser.add_argument("--effect", default=EffectId.NORMAL.value, choices=EFFECT_NAMES)
    parser.add_argument("--all", action="store_true",
                        help="Render every effect into the output directory")
    parser.add_argument("--workers", type=int, help="Worker threads for --all")
    parser.add_argument("--play", action="store_true", help="Play the result when done")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def run(args) -> int:
    try:
        clip = load_clip(args.input)
    except RenderError as err:
        log.error("%s", err)
        return 1
    log.info("Loaded %s: %d frames, %d Hz, %d ch",
             args.input, clip.frame_count, clip.sample_rate, clip.channel_count)

    if args.all:
        out_dir = args.output or "."
        os.makedirs(out_dir, exist_ok=True)
        try:
            rendered = render_many(clip, list(EffectId), workers=args.workers)
        except RenderError as err:
            log.error("%s", err)
            return 1
        stamp = int(time.time() * 1000)
        for effect_id, data in rendered.items():
            path = os.path.join(out_dir, suggested_filename(effect_id, stamp))
            save_clip(path, data)
            log.info("Saved %s (%d bytes, %s)", path, len(data), MIME_TYPE)
        return 0

    result = try_render(clip, args.effect)
    if not result.ok:
        log.error("Could not process audio: %s", result.message)
        return 1
    path = args.output or suggested_filename(args.effect)
    save_clip(path, result.data)
    log.info("Saved %s (%d bytes)", path, len(result.data))
    if args.play:
        _preview(result.data)
    return 0
