"""Structural diagnostics for generated boards.

Used by ``scripts/diagnose_seeds.py`` and the test-suite. Every list in the
result should be empty for a healthy board.
"""
from __future__ import annotations

from collections import deque
from typing import Dict, List, Optional, Set

from .board import Board, Coord2D
from .occupants import Door


def _passable(board: Board, x: int, y: int) -> bool:
    occupant = board[x, y]
    return occupant is None or isinstance(occupant, Door)


def reachable_from(board: Board, start: Coord2D) -> Set[Coord2D]:
    """Floor and door cells reachable from ``start``; doors count as passable whether open or not."""
    if not board.in_bounds(*start) or not _passable(board, *start):
        return set()
    seen = {start}
    queue = deque([start])
    while queue:
        x, y = queue.popleft()
        for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
            nx, ny = x + dx, y + dy
            if (nx, ny) in seen or not board.in_bounds(nx, ny):
                continue
            if _passable(board, nx, ny):
                seen.add((nx, ny))
                queue.append((nx, ny))
    return seen


def first_floor(board: Board) -> Optional[Coord2D]:
    for x, y, occupant in board.iter_cells():
        if occupant is None:
            return x, y
    return None


def analyze(board: Board) -> Dict[str, List[Coord2D]]:
    border = set(board.border_cells())
    boundary_doors = [pos for pos in board.doors() if pos in border]
    open_border = [pos for pos in border if board[pos] is None]
    floor = [(x, y) for x, y, occ in board.iter_cells() if occ is None]
    start = first_floor(board)
    reached = reachable_from(board, start) if start else set()
    unreachable = [pos for pos in floor if pos not in reached]
    loose_doors = []
    for x, y in board.doors():
        n = board.wall_neighbors(x, y)
        if not ((n["left"] and n["right"]) or (n["up"] and n["down"])):
            loose_doors.append((x, y))
    return {
        "boundary_doors": boundary_doors,
        "open_border": sorted(open_border),
        "unreachable_floor": unreachable,
        "loose_doors": loose_doors,
    }


__all__ = ["analyze", "reachable_from", "first_floor"]
