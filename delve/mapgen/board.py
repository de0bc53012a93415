"""Row-major occupant grid produced by level generation.

Cells are addressed as ``board[x, y]`` and hold ``None`` (floor), a ``Wall``
or a ``Door``. Renderers pick wall glyphs from ``wall_neighbors``; the board
itself never decides how anything is drawn.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Optional, Tuple

from .occupants import Door, Occupant, Wall, occupant_char

Coord2D = Tuple[int, int]


class Board:
    def __init__(self, width: int, height: int, render_width: int = 0, render_height: int = 0):
        self.width = width
        self.height = height
        # Offset from the player to the edge of the viewport (a radius, not a size)
        self.render_width = render_width
        self.render_height = render_height
        self.cells: List[Optional[Occupant]] = [None] * (width * height)
        self.metrics: Dict[str, Any] = {}

    def to_index(self, x: int, y: int) -> int:
        return y * self.width + x

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def __getitem__(self, pos: Coord2D) -> Optional[Occupant]:
        x, y = pos
        if not self.in_bounds(x, y):
            raise IndexError(f"{pos} outside {self.width}x{self.height} board")
        return self.cells[self.to_index(x, y)]

    def __setitem__(self, pos: Coord2D, occupant: Optional[Occupant]) -> None:
        x, y = pos
        if not self.in_bounds(x, y):
            raise IndexError(f"{pos} outside {self.width}x{self.height} board")
        self.cells[self.to_index(x, y)] = occupant

    def make_room(self, corner1: Coord2D, corner2: Coord2D) -> None:
        """Outline the rectangle from ``corner1`` (inclusive) to ``corner2`` (exclusive) with walls."""
        (x1, y1), (x2, y2) = corner1, corner2
        for x in range(x1, x2):
            self[x, y1] = Wall()
            self[x, y2 - 1] = Wall()
        for y in range(y1, y2):
            self[x1, y] = Wall()
            self[x2 - 1, y] = Wall()

    def has_collision(self, x: int, y: int) -> bool:
        occupant = self[x, y]
        return occupant is not None and occupant.has_collision()

    def connects_to_wall(self, x: int, y: int) -> bool:
        occupant = self[x, y]
        return occupant is not None and occupant.wall_connectable()

    def wall_neighbors(self, x: int, y: int) -> Dict[str, bool]:
        """Which orthogonal neighbours continue a wall line; off-board counts as not connected."""
        out = {}
        for name, (dx, dy) in (("up", (0, -1)), ("down", (0, 1)), ("left", (-1, 0)), ("right", (1, 0))):
            nx, ny = x + dx, y + dy
            out[name] = self.in_bounds(nx, ny) and self.connects_to_wall(nx, ny)
        return out

    def iter_cells(self) -> Iterator[Tuple[int, int, Optional[Occupant]]]:
        for index, occupant in enumerate(self.cells):
            yield index % self.width, index // self.width, occupant

    def doors(self) -> List[Coord2D]:
        return [(x, y) for x, y, occ in self.iter_cells() if isinstance(occ, Door)]

    def border_cells(self) -> Iterator[Coord2D]:
        """Outermost ring, each cell once."""
        w, h = self.width, self.height
        for x in range(w):
            yield x, 0
            if h > 1:
                yield x, h - 1
        for y in range(1, h - 1):
            yield 0, y
            if w > 1:
                yield w - 1, y

    def to_rows(self) -> List[str]:
        return [
            "".join(occupant_char(self.cells[y * self.width + x]) for x in range(self.width))
            for y in range(self.height)
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "render_width": self.render_width,
            "render_height": self.render_height,
            "rows": self.to_rows(),
            "doors": [list(pos) for pos in self.doors()],
        }

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (self.width, self.height, self.cells) == (other.width, other.height, other.cells)

    def __repr__(self) -> str:
        return f"Board({self.width}x{self.height}, doors={len(self.doors())})"


__all__ = ["Board", "Coord2D"]
