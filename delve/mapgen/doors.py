"""Door placement: one closed door per retained adjacency edge.

Functions mutate the board in place. Both ends of an edge compute the same
cell, so placing from every leaf is idempotent.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from .board import Board, Coord2D
from .config import LayoutInvariantError
from .occupants import Door, Wall
from .regions import ROOT, Region, RegionTree


def _overlap(leaf_start: int, leaf_end: int, other_start: int, other_end: int) -> Tuple[int, int]:
    low = max(leaf_start, other_start)
    high = min(leaf_end, other_end)
    if low >= high:
        raise LayoutInvariantError(
            f"adjacent regions share no border: [{leaf_start},{leaf_end}) vs [{other_start},{other_end})"
        )
    return low, high


def door_positions(leaf: Region, tree: RegionTree) -> List[Coord2D]:
    """Door cells for every adjacency edge of ``leaf`` (midpoint of the shared border, rounded down)."""
    out: List[Coord2D] = []
    for other in (tree[i] for i in leaf.up):
        low, high = _overlap(leaf.x_start, leaf.x_end, other.x_start, other.x_end)
        out.append(((low + high) // 2, leaf.y_start))
    for other in (tree[i] for i in leaf.down):
        low, high = _overlap(leaf.x_start, leaf.x_end, other.x_start, other.x_end)
        out.append(((low + high) // 2, leaf.y_end))
    for other in (tree[i] for i in leaf.left):
        low, high = _overlap(leaf.y_start, leaf.y_end, other.y_start, other.y_end)
        out.append((leaf.x_start, (low + high) // 2))
    for other in (tree[i] for i in leaf.right):
        low, high = _overlap(leaf.y_start, leaf.y_end, other.y_start, other.y_end)
        out.append((leaf.x_end, (low + high) // 2))
    return out


def place_doors(tree: RegionTree, board: Board, index: int = ROOT) -> int:
    """Write a closed door for every edge below ``index``; return the number of door writes."""
    region = tree[index]
    if not region.is_leaf:
        return sum(place_doors(tree, board, child) for child in region.children)
    placed = 0
    for pos in door_positions(region, tree):
        board[pos] = Door(open=False)
        placed += 1
    return placed


def strip_boundary_doors(board: Board) -> int:
    """Turn any door on the outermost ring back into wall; return how many were converted."""
    converted = 0
    for x, y in board.border_cells():
        if isinstance(board[x, y], Door):
            board[x, y] = Wall()
            converted += 1
    return converted


def place_all_doors(tree: RegionTree, board: Board, metrics: Optional[Dict[str, Any]] = None) -> None:
    place_doors(tree, board)
    removed = strip_boundary_doors(board)
    if metrics is not None:
        metrics["doors_placed"] = len(board.doors())
        metrics["boundary_doors_removed"] = removed


__all__ = ["door_positions", "place_doors", "strip_boundary_doors", "place_all_doors"]
