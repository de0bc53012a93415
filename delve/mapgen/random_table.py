"""Table-driven byte generator used by level generation.

Every draw reads the next entry of a fixed 256-byte permutation table and
advances an 8-bit counter, so the whole stream is determined by the starting
index. A process-wide instance backs the module-level helpers; generation
calls that need isolation construct their own ``TableRandom``.
"""
from __future__ import annotations

import os
import threading
from typing import Optional

from ..logging_utils import get_logger

log = get_logger("mapgen.random")

RANDOM_TABLE = (
    0, 8, 109, 220, 222, 241, 155, 115, 75, 248, 245, 137, 16, 66, 74, 21,
    209, 47, 80, 238, 154, 27, 205, 130, 161, 89, 65, 36, 95, 110, 85, 48,
    210, 142, 211, 240, 22, 67, 200, 50, 28, 188, 52, 140, 208, 120, 68, 151,
    62, 51, 184, 190, 91, 204, 152, 215, 149, 104, 25, 178, 252, 183, 202, 182,
    141, 197, 4, 81, 181, 242, 145, 23, 39, 227, 157, 207, 225, 193, 219, 97,
    122, 179, 249, 1, 175, 144, 55, 218, 29, 246, 167, 53, 169, 116, 191, 131,
    2, 235, 10, 92, 9, 147, 138, 77, 69, 172, 78, 176, 173, 213, 174, 119,
    94, 158, 41, 30, 230, 49, 111, 164, 70, 35, 5, 37, 171, 57, 132, 156,
    11, 56, 42, 153, 133, 229, 73, 146, 64, 61, 102, 192, 135, 106, 38, 199,
    195, 86, 96, 203, 121, 101, 170, 247, 180, 113, 72, 250, 108, 7, 255, 237,
    129, 226, 79, 107, 112, 166, 103, 233, 24, 223, 239, 124, 198, 58, 60, 82,
    128, 3, 185, 40, 143, 217, 148, 224, 83, 206, 163, 45, 63, 90, 168, 114,
    59, 33, 159, 99, 12, 139, 127, 100, 125, 196, 15, 44, 194, 253, 54, 14,
    117, 228, 71, 6, 160, 93, 186, 87, 244, 134, 20, 32, 123, 251, 26, 13,
    17, 46, 34, 231, 232, 76, 31, 221, 88, 18, 216, 165, 212, 105, 201, 234,
    98, 43, 19, 177, 254, 150, 189, 84, 118, 214, 187, 136, 126, 162, 236, 243,
)

TABLE_SIZE = len(RANDOM_TABLE)


class TableRandom:
    """Byte stream over ``RANDOM_TABLE`` starting at ``index``.

    The counter wraps at 256. Draws are serialised with a lock so a shared
    instance behaves like an atomic counter when several generations run at
    once (their draws interleave).
    """

    def __init__(self, index: int = 0):
        self._index = index % TABLE_SIZE
        self._lock = threading.Lock()

    @property
    def index(self) -> int:
        return self._index

    def seed(self, index: int) -> None:
        with self._lock:
            self._index = index % TABLE_SIZE

    def random(self) -> int:
        with self._lock:
            value = RANDOM_TABLE[self._index]
            self._index = (self._index + 1) % TABLE_SIZE
        return value

    def random_bool(self) -> bool:
        return self.random() & 0b0000_0001 == 1

    def random_in_range(self, span: range) -> int:
        """Return a byte-derived value in ``span`` (start inclusive, stop exclusive)."""
        width = span.stop - span.start
        if width <= 0:
            raise ValueError(f"empty range {span!r}")
        return self.random() % width + span.start

    def random_index(self, max_len: int) -> Optional[int]:
        """Index into a collection of ``max_len`` items, or None when it is empty.

        Collections larger than the table only ever see the first 256 slots.
        """
        if max_len > TABLE_SIZE:
            return self.random()
        if max_len <= 0:
            return None
        return self.random() % max_len

    def __repr__(self) -> str:
        return f"TableRandom(index={self._index})"


_shared = TableRandom()


def shared_random() -> TableRandom:
    return _shared


def initialize() -> int:
    """Seed the process-wide stream from the process id."""
    index = os.getpid() & 0b1111_1111
    _shared.seed(index)
    log.info(event="random_initialized", index=index, source="pid")
    return index


def initialize_with(index: int) -> None:
    _shared.seed(index)
    log.debug(event="random_initialized", index=index % TABLE_SIZE, source="explicit")


def random() -> int:
    return _shared.random()


def random_bool() -> bool:
    return _shared.random_bool()


def random_in_range(span: range) -> int:
    return _shared.random_in_range(span)


def random_index(max_len: int) -> Optional[int]:
    return _shared.random_index(max_len)


__all__ = [
    "RANDOM_TABLE",
    "TABLE_SIZE",
    "TableRandom",
    "shared_random",
    "initialize",
    "initialize_with",
    "random",
    "random_bool",
    "random_in_range",
    "random_index",
]
