from delve.mapgen.metrics import init_metrics
from tests.mapgen_test_utils import build_board


def test_init_metrics_keys():
    m = init_metrics()
    for key in (
        "leaves",
        "internal_nodes",
        "max_depth",
        "splits_abandoned",
        "axis_flips",
        "adjacency_edges",
        "doors_placed",
        "boundary_doors_removed",
        "runtime_ms",
    ):
        assert m[key] == 0
    assert m["phase_ms"] == {}


def test_pipeline_populates_metrics():
    board = build_board(151, 151, seed=1)
    m = board.metrics
    assert m["leaves"] >= 2
    assert m["internal_nodes"] == m["leaves"] - 1
    assert m["max_depth"] >= 1
    assert set(m["phase_ms"]) == {"subdivide", "adjacency", "rooms", "doors"}
    assert m["runtime_ms"] >= 0


def test_abandoned_split_counted():
    m = build_board(21, 21, seed=0).metrics
    assert m["leaves"] == 1
    assert m["splits_abandoned"] == 1
    assert m["axis_flips"] == 1
    assert m["doors_placed"] == 0
