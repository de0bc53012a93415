import threading
import time

import pytest

from delve.mapgen import Board, GenerationHandle, MapGenConfigError, MapGenSettings, generate, run_pipeline
from delve.mapgen.generator import generate_from_settings, lift_throttles
from tests.mapgen_test_utils import build_board


def test_generate_returns_joinable_handle():
    handle = generate(51, 41, 45, 15, seed=3)
    assert isinstance(handle, GenerationHandle)
    board = handle.result(timeout=30)
    assert isinstance(board, Board)
    assert handle.done()
    assert board == build_board(51, 41, seed=3)
    assert (board.render_width, board.render_height) == (45, 15)


def test_invalid_dimensions_fail_before_scheduling():
    with pytest.raises(MapGenConfigError):
        generate(50, 41, 45, 15)
    with pytest.raises(MapGenConfigError):
        generate(51, 1, 45, 15)


def test_invalid_seed_fails_synchronously():
    with pytest.raises(MapGenConfigError):
        generate_from_settings(MapGenSettings(seed=256))


def test_result_clears_throttle():
    handle = generate(51, 41, 45, 15, seed=3, throttle=True, step_delay=0.001)
    assert handle.throttled
    board = handle.result(timeout=30)
    assert not handle.throttled
    assert board == build_board(51, 41, seed=3)


def test_unthrottled_event_skips_step_delay():
    settings = MapGenSettings(width=151, height=151, seed=3, step_delay=5.0)
    started = time.perf_counter()
    run_pipeline(settings, throttle=threading.Event())
    assert time.perf_counter() - started < 5.0


def test_concurrent_generations_are_independent():
    handles = [generate(101, 101, 45, 15, seed=s) for s in (1, 2, 1)]
    boards = [h.result(timeout=30) for h in handles]
    assert boards[0] == boards[2]
    assert boards[0] is not boards[2]


def test_handle_repr_mentions_size():
    handle = generate(21, 21, 45, 15, seed=1)
    handle.result(timeout=30)
    assert repr(handle) == "GenerationHandle(21x21, done)"


def test_joining_any_handle_lifts_every_throttle():
    # Enough throttled work to occupy the default two workers for several seconds
    background = [generate(151, 151, 45, 15, seed=s, throttle=True, step_delay=0.05) for s in (1, 2)]
    started = time.perf_counter()
    board = generate(51, 41, 45, 15, seed=3, step_delay=0.05).result(timeout=30)
    assert time.perf_counter() - started < 2.0
    assert board == build_board(51, 41, seed=3)
    assert not any(h.throttled for h in background)
    for h in background:
        h.result(timeout=30)


def test_lift_throttles_reports_pending_work():
    handle = generate(151, 151, 45, 15, seed=1, throttle=True, step_delay=0.05)
    assert lift_throttles() >= 1
    assert not handle.throttled
    handle.result(timeout=30)
    assert lift_throttles() == 0
