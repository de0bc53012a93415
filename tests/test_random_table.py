import os

import pytest

from delve.mapgen import random_table
from delve.mapgen.random_table import RANDOM_TABLE, TABLE_SIZE, TableRandom


def test_table_is_byte_permutation():
    assert TABLE_SIZE == 256
    assert sorted(RANDOM_TABLE) == list(range(256))


def test_stream_reads_table_in_order():
    r = TableRandom(0)
    assert [r.random() for _ in range(4)] == [0, 8, 109, 220]
    assert r.index == 4


def test_index_wraps_after_last_entry():
    r = TableRandom(255)
    assert r.random() == RANDOM_TABLE[255]
    assert r.index == 0
    assert r.random() == RANDOM_TABLE[0]


def test_seed_reduces_modulo_table_size():
    r = TableRandom()
    r.seed(256 + 3)
    assert r.index == 3
    assert TableRandom(-1).index == 255


def test_random_bool_uses_low_bit():
    r = TableRandom(0)
    # 0 -> False, 8 -> False, 109 -> True
    assert [r.random_bool() for _ in range(3)] == [False, False, True]


def test_random_in_range_offsets_by_start():
    r = TableRandom(2)  # next draw is 109
    assert r.random_in_range(range(10, 15)) == 109 % 5 + 10


def test_random_in_range_rejects_empty_range():
    with pytest.raises(ValueError):
        TableRandom(0).random_in_range(range(5, 5))


def test_random_index_edge_cases():
    r = TableRandom(2)
    assert r.random_index(0) is None
    assert r.index == 2  # no draw consumed
    assert r.random_index(300) == 109  # larger than the table: raw byte
    assert r.random_index(7) == 220 % 7


def test_independent_streams_do_not_interfere():
    a, b = TableRandom(10), TableRandom(10)
    first = [a.random() for _ in range(5)]
    assert b.index == 10
    assert [b.random() for _ in range(5)] == first


def test_initialize_seeds_shared_stream_from_pid():
    index = random_table.initialize()
    assert index == os.getpid() & 0xFF
    assert random_table.shared_random().index == index


def test_module_helpers_draw_from_shared_stream():
    random_table.initialize_with(0)
    assert random_table.random() == 0
    assert random_table.random_bool() is False  # 8
    assert random_table.random_in_range(range(0, 10)) == 109 % 10
    assert random_table.random_index(0) is None
    assert random_table.shared_random().index == 3
