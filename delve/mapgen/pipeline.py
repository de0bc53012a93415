"""Pipeline orchestration for level generation.

Runs the structural phases in order on the calling thread:

    subdivide -> adjacency -> rooms -> doors (+ boundary cleanup)

The region tree is local to ``run_pipeline`` and dropped when it returns;
only the board (with its metrics dict) leaves this module.
"""
from __future__ import annotations

import threading
import time
from typing import Optional

from ..logging_utils import get_logger
from .adjacency import resolve_adjacency
from .board import Board
from .config import MapGenSettings
from .doors import place_all_doors
from .metrics import init_metrics
from .random_table import TableRandom, shared_random
from .regions import build_region_tree
from .rooms import create_map_rooms

log = get_logger("mapgen")


def resolve_rng(settings: MapGenSettings, rng: Optional[TableRandom] = None) -> TableRandom:
    """Explicit rng wins; otherwise a private stream for seeded runs, else the shared stream."""
    if rng is not None:
        return rng
    if settings.seed is not None:
        return TableRandom(settings.seed)
    return shared_random()


def run_pipeline(
    settings: MapGenSettings,
    rng: Optional[TableRandom] = None,
    throttle: Optional[threading.Event] = None,
) -> Board:
    """Generate a board for ``settings``.

    ``throttle`` gates ``settings.step_delay``: while the event is set every
    PRNG draw sleeps first, which keeps background pre-generation from
    competing with the foreground. Without an event the delay always applies.
    """
    settings.validate()
    rng = resolve_rng(settings, rng)
    metrics = init_metrics()
    phase_times = {}

    def _phase(label, fn, *a, **k):
        ps = time.perf_counter()
        r = fn(*a, **k)
        phase_times[label] = int((time.perf_counter() - ps) * 1000)
        return r

    def _before_draw():
        if throttle is None or throttle.is_set():
            time.sleep(settings.step_delay)

    log.info(
        event="mapgen_start",
        width=settings.width,
        height=settings.height,
        seed=settings.seed,
        index=rng.index,
    )
    start = time.perf_counter()
    tree = _phase(
        "subdivide",
        build_region_tree,
        settings,
        rng,
        metrics,
        _before_draw if settings.step_delay > 0 else None,
    )
    _phase("adjacency", resolve_adjacency, tree, metrics)
    board = Board(settings.width, settings.height, settings.render_width, settings.render_height)
    _phase("rooms", create_map_rooms, tree, board)
    _phase("doors", place_all_doors, tree, board, metrics)
    metrics["runtime_ms"] = int((time.perf_counter() - start) * 1000)
    metrics["phase_ms"] = phase_times
    board.metrics = metrics
    log.info(
        event="mapgen_done",
        leaves=metrics["leaves"],
        doors=metrics["doors_placed"],
        runtime_ms=metrics["runtime_ms"],
    )
    return board


__all__ = ["resolve_rng", "run_pipeline"]
