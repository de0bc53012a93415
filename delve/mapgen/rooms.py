from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Tuple

from .board import Board
from .regions import ROOT, Region, RegionTree


@dataclass(frozen=True)
class Room:
    """Inclusive wall rectangle of a leaf region."""

    x1: int
    y1: int
    x2: int
    y2: int

    @classmethod
    def from_region(cls, region: Region) -> "Room":
        return cls(region.x_start, region.y_start, region.x_end, region.y_end)

    def outline(self) -> Iterator[Tuple[int, int]]:
        for x in range(self.x1, self.x2 + 1):
            yield x, self.y1
            yield x, self.y2
        for y in range(self.y1 + 1, self.y2):
            yield self.x1, y
            yield self.x2, y

    def interior(self) -> Iterator[Tuple[int, int]]:
        for y in range(self.y1 + 1, self.y2):
            for x in range(self.x1 + 1, self.x2):
                yield x, y

    @property
    def center(self) -> Tuple[int, int]:
        return ((self.x1 + self.x2) // 2, (self.y1 + self.y2) // 2)


def create_map_rooms(tree: RegionTree, board: Board, index: int = ROOT) -> None:
    region = tree[index]
    if region.is_leaf:
        board.make_room(
            (region.x_start, region.y_start),
            (region.x_end + 1, region.y_end + 1),
        )
        return
    for child in region.children:
        create_map_rooms(tree, board, child)


def leaf_rooms(tree: RegionTree) -> List[Room]:
    return [Room.from_region(tree[i]) for i in tree.leaves()]


__all__ = ["Room", "create_map_rooms", "leaf_rooms"]
