from delve.mapgen import MapGenSettings, TableRandom, run_pipeline
from delve.mapgen.pipeline import resolve_rng
from delve.mapgen.random_table import initialize_with, shared_random
from tests.mapgen_test_utils import build_board


def test_same_seed_same_board():
    assert build_board(151, 151, seed=42) == build_board(151, 151, seed=42)


def test_different_seeds_usually_differ():
    boards = {tuple(build_board(151, 151, seed=s).to_rows()) for s in (1, 2, 3, 4)}
    assert len(boards) > 1


def test_explicit_rng_matches_seed():
    settings = MapGenSettings(width=101, height=101)
    assert run_pipeline(settings, TableRandom(17)) == build_board(101, 101, seed=17)


def test_unseeded_run_draws_from_shared_stream():
    initialize_with(17)
    unseeded = run_pipeline(MapGenSettings(width=101, height=101))
    assert shared_random().index != 17
    assert unseeded == build_board(101, 101, seed=17)


def test_resolve_rng_precedence():
    own = TableRandom(5)
    seeded = MapGenSettings(seed=9)
    assert resolve_rng(seeded, own) is own
    assert resolve_rng(seeded).index == 9
    assert resolve_rng(MapGenSettings()) is shared_random()


def test_seeded_run_leaves_shared_stream_alone():
    initialize_with(100)
    build_board(151, 151, seed=3)
    assert shared_random().index == 100
