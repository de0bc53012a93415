"""
project: Delve
module: level_api.py
License: MIT

Level generation API routes.

Serves seeded level layouts as JSON or plain text and lets a client start
generating the next level in the background while the current one is played.
"""

import hashlib
import random
import threading

from flask import Blueprint, Response, current_app, jsonify, request

from delve.logging_utils import get_logger
from delve.mapgen import GenerationHandle, MapGenConfigError, MapGenSettings, generate_from_settings

log = get_logger("level_api")

bp_level = Blueprint("level", __name__)

TABLE_SEEDS = 256

# (seed, width, height) -> GenerationHandle. Handles may still be running;
# readers join them. Boards served from here are only ever read.
_level_cache: dict = {}
_level_cache_lock = threading.Lock()


def _coerce_seed(payload_seed) -> int:
    """Convert a provided seed (int or str) into a PRNG table index."""
    if payload_seed is None or isinstance(payload_seed, bool):
        return random.randrange(TABLE_SEEDS)
    if isinstance(payload_seed, int):
        return payload_seed % TABLE_SEEDS
    if isinstance(payload_seed, str):
        s = payload_seed.strip()
        if not s:
            return random.randrange(TABLE_SEEDS)
        if s.isdigit():
            return int(s) % TABLE_SEEDS
        return hashlib.sha256(s.encode("utf-8")).digest()[0]
    return random.randrange(TABLE_SEEDS)


def _int_param(source: dict, name: str, default: int) -> int:
    raw = source.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise MapGenConfigError(f"{name} must be an integer, got {raw!r}")


def _settings_from(source: dict) -> MapGenSettings:
    cfg = current_app.config
    settings = MapGenSettings(
        width=_int_param(source, "width", cfg["MAPGEN_WIDTH"]),
        height=_int_param(source, "height", cfg["MAPGEN_HEIGHT"]),
        render_width=cfg["MAPGEN_RENDER_WIDTH"],
        render_height=cfg["MAPGEN_RENDER_HEIGHT"],
        seed=_coerce_seed(source.get("seed")),
        step_delay=cfg["MAPGEN_STEP_DELAY"],
    )
    return settings.validate()


def get_cached_level(settings: MapGenSettings, *, throttle: bool = False) -> GenerationHandle:
    if current_app.config.get("MAPGEN_DISABLE_CACHE"):
        return generate_from_settings(settings, throttle=throttle)
    key = (settings.seed, settings.width, settings.height)
    with _level_cache_lock:
        handle = _level_cache.get(key)
        if handle is not None:
            return handle
        handle = generate_from_settings(settings, throttle=throttle)
        _level_cache[key] = handle
        cap = current_app.config.get("MAPGEN_CACHE_MAX", 8)
        while len(_level_cache) > cap:
            oldest = next(iter(_level_cache))
            if oldest == key:
                break
            # Nobody can join an evicted level, so let it finish at full speed
            _level_cache.pop(oldest).lift_throttle()
    return handle


def join_level(settings: MapGenSettings, handle: GenerationHandle):
    """Wait for ``handle``; a failed generation is dropped so the next request retries."""
    try:
        return handle.result()
    except Exception:
        key = (settings.seed, settings.width, settings.height)
        with _level_cache_lock:
            if _level_cache.get(key) is handle:
                del _level_cache[key]
        log.error(event="level_failed", seed=settings.seed, width=settings.width, height=settings.height)
        raise


def clear_level_cache() -> None:
    with _level_cache_lock:
        _level_cache.clear()


@bp_level.route("/api/level/map")
def level_map():
    """
    Return a generated level.
    Query: width, height, seed (all optional)
    Response: { 'seed', 'width', 'height', 'render_width', 'render_height', 'rows', 'doors', 'metrics' }
    """
    settings = _settings_from(request.args)
    board = join_level(settings, get_cached_level(settings))
    payload = {"seed": settings.seed, **board.to_dict(), "metrics": board.metrics}
    return jsonify(payload)


@bp_level.route("/api/level/ascii")
def level_ascii():
    settings = _settings_from(request.args)
    board = join_level(settings, get_cached_level(settings))
    return Response("\n".join(board.to_rows()) + "\n", mimetype="text/plain")


@bp_level.route("/api/level/pregenerate", methods=["POST"])
def pregenerate():
    """Start a throttled background generation.

    Body JSON (all optional): { "seed": <int|str>, "width": <int>, "height": <int> }
    Response (202): { "seed", "width", "height", "ready" }
    A later GET /api/level/map with the same parameters joins the pending work.
    """
    data = request.get_json(silent=True) or {}
    settings = _settings_from(data)
    handle = get_cached_level(settings, throttle=True)
    log.info(event="pregenerate", seed=settings.seed, width=settings.width, height=settings.height)
    return (
        jsonify(
            {
                "seed": settings.seed,
                "width": settings.width,
                "height": settings.height,
                "ready": handle.done(),
            }
        ),
        202,
    )
