"""Background level generation.

``generate`` validates its arguments on the calling thread, schedules the
pipeline on a small shared worker pool and returns at once. The caller joins
the returned handle to take ownership of the finished board; nothing is
observable before then. There is no cancellation: once submitted, a
generation always runs to completion.
"""
from __future__ import annotations

import os
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Set

from .board import Board
from .config import MapGenSettings
from .pipeline import run_pipeline
from .random_table import TableRandom

_executor: Optional[ThreadPoolExecutor] = None
_executor_lock = threading.Lock()

# Throttle events of submitted generations that have not finished yet
_pending_throttles: Set[threading.Event] = set()
_pending_lock = threading.Lock()


def _get_executor() -> ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = ThreadPoolExecutor(
                max_workers=int(os.getenv("MAPGEN_WORKERS", "2")),
                thread_name_prefix="mapgen",
            )
        return _executor


def _forget_throttle(event: threading.Event) -> None:
    with _pending_lock:
        _pending_throttles.discard(event)


def lift_throttles() -> int:
    """Run every pending generation at full speed; return how many were throttled.

    A caller blocking on any level means background work is now in its way,
    whichever handle it joined.
    """
    with _pending_lock:
        events = list(_pending_throttles)
    lifted = 0
    for event in events:
        if event.is_set():
            event.clear()
            lifted += 1
    return lifted


class GenerationHandle:
    """Joinable handle for one in-flight generation."""

    def __init__(self, future: "Future[Board]", settings: MapGenSettings, throttle: threading.Event):
        self._future = future
        self._throttle = throttle
        self.settings = settings

    @property
    def throttled(self) -> bool:
        return self._throttle.is_set()

    def done(self) -> bool:
        return self._future.done()

    def lift_throttle(self) -> None:
        self._throttle.clear()

    def result(self, timeout: Optional[float] = None) -> Board:
        """Block until the board is assembled and return it.

        Someone is now waiting, so this and every other pending generation
        runs unthrottled from here on.
        """
        self._throttle.clear()
        lift_throttles()
        return self._future.result(timeout)

    def __repr__(self) -> str:
        state = "done" if self.done() else "running"
        return f"GenerationHandle({self.settings.width}x{self.settings.height}, {state})"


def generate_from_settings(
    settings: MapGenSettings,
    *,
    rng: Optional[TableRandom] = None,
    throttle: bool = False,
) -> GenerationHandle:
    settings.validate()
    event = threading.Event()
    if throttle:
        event.set()
        with _pending_lock:
            _pending_throttles.add(event)
    future = _get_executor().submit(run_pipeline, settings, rng, event)
    if throttle:
        future.add_done_callback(lambda _f: _forget_throttle(event))
    return GenerationHandle(future, settings, event)


def generate(
    width: int,
    height: int,
    render_width: int,
    render_height: int,
    *,
    seed: Optional[int] = None,
    rng: Optional[TableRandom] = None,
    throttle: bool = False,
    step_delay: float = 0.0,
) -> GenerationHandle:
    settings = MapGenSettings(
        width=width,
        height=height,
        render_width=render_width,
        render_height=render_height,
        seed=seed,
        step_delay=step_delay,
    )
    return generate_from_settings(settings, rng=rng, throttle=throttle)


__all__ = ["GenerationHandle", "generate", "generate_from_settings", "lift_throttles"]
