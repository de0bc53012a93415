"""Binary space partition of the level interior.

Regions live in a flat arena (``RegionTree.regions``) and refer to their
children and adjacent leaves by index. Extents are half-open and aligned to
the subdivision interval; a leaf's wall outline is drawn on both ends of its
extents, so neighbouring leaves share their border row or column.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import LayoutInvariantError, MapGenSettings
from .random_table import TableRandom

ROOT = 0


class Axis(Enum):
    VERTICAL = "vertical"  # split line runs top to bottom, cutting the x extent
    HORIZONTAL = "horizontal"  # split line runs left to right, cutting the y extent

    def flipped(self) -> "Axis":
        return Axis.HORIZONTAL if self is Axis.VERTICAL else Axis.VERTICAL


@dataclass
class Region:
    x_start: int
    x_end: int
    y_start: int
    y_end: int
    depth: int = 0
    axis: Optional[Axis] = None
    children: Optional[Tuple[int, int]] = None
    up: List[int] = field(default_factory=list)
    down: List[int] = field(default_factory=list)
    left: List[int] = field(default_factory=list)
    right: List[int] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return self.children is None

    @property
    def x_len(self) -> int:
        return self.x_end - self.x_start

    @property
    def y_len(self) -> int:
        return self.y_end - self.y_start

    def same_bounds(self, other: "Region") -> bool:
        return (self.x_start, self.x_end, self.y_start, self.y_end) == (
            other.x_start,
            other.x_end,
            other.y_start,
            other.y_end,
        )

    def adjacency(self) -> Dict[str, List[int]]:
        return {"up": self.up, "down": self.down, "left": self.left, "right": self.right}


class RegionTree:
    def __init__(self, x_extent: int, y_extent: int):
        self.regions: List[Region] = [Region(0, x_extent, 0, y_extent)]

    def __getitem__(self, index: int) -> Region:
        return self.regions[index]

    def __len__(self) -> int:
        return len(self.regions)

    @property
    def root(self) -> Region:
        return self.regions[ROOT]

    def _add(self, region: Region) -> int:
        self.regions.append(region)
        return len(self.regions) - 1

    def leaves(self, index: int = ROOT) -> List[int]:
        """Leaf indices in depth-first order (lower child first)."""
        out: List[int] = []
        self._collect_leaves(index, out)
        return out

    def _collect_leaves(self, index: int, out: List[int]) -> None:
        region = self.regions[index]
        if region.is_leaf:
            out.append(index)
            return
        low, high = region.children
        self._collect_leaves(low, out)
        self._collect_leaves(high, out)

    def subdivide(
        self,
        rng: TableRandom,
        *,
        interval: int,
        minimum: int,
        metrics: Optional[Dict[str, Any]] = None,
        before_draw: Optional[Callable[[], None]] = None,
    ) -> None:
        metrics = metrics if metrics is not None else {}
        self._subdivide(ROOT, rng, interval, minimum, metrics, before_draw)

    def _subdivide(self, index, rng, interval, minimum, metrics, before_draw) -> None:
        region = self.regions[index]
        x_len, y_len = region.x_len, region.y_len
        if x_len <= minimum or y_len <= minimum:
            return
        axis = Axis.VERTICAL if x_len > y_len else Axis.HORIZONTAL
        if before_draw:
            before_draw()
        if rng.random() & 0b0011_1111 == 0:
            # 1 in 64 to cut the other axis instead
            axis = axis.flipped()
            metrics["axis_flips"] = metrics.get("axis_flips", 0) + 1
        if axis is Axis.VERTICAL:
            start, end = region.x_start, region.x_end
        else:
            start, end = region.y_start, region.y_end
        axis_len = end - start
        if axis_len <= minimum:
            return
        num_splits = axis_len // interval - 2
        if num_splits <= 0:
            return
        if before_draw:
            before_draw()
        split = (rng.random() % num_splits + 1) * interval + start
        if split - start < minimum or end - split < minimum:
            metrics["splits_abandoned"] = metrics.get("splits_abandoned", 0) + 1
            return
        depth = region.depth + 1
        if axis is Axis.VERTICAL:
            low = Region(region.x_start, split, region.y_start, region.y_end, depth=depth)
            high = Region(split, region.x_end, region.y_start, region.y_end, depth=depth)
        else:
            low = Region(region.x_start, region.x_end, region.y_start, split, depth=depth)
            high = Region(region.x_start, region.x_end, split, region.y_end, depth=depth)
        region.axis = axis
        region.children = (self._add(low), self._add(high))
        for child in region.children:
            self._subdivide(child, rng, interval, minimum, metrics, before_draw)

    def check_partition(self, index: int = ROOT) -> None:
        """Raise LayoutInvariantError unless every internal node is split exactly by its children."""
        region = self.regions[index]
        if region.is_leaf:
            return
        low, high = (self.regions[i] for i in region.children)
        if region.axis is Axis.VERTICAL:
            ok = (
                low.x_start == region.x_start
                and low.x_end == high.x_start
                and high.x_end == region.x_end
                and (low.y_start, low.y_end) == (high.y_start, high.y_end) == (region.y_start, region.y_end)
            )
        else:
            ok = (
                low.y_start == region.y_start
                and low.y_end == high.y_start
                and high.y_end == region.y_end
                and (low.x_start, low.x_end) == (high.x_start, high.x_end) == (region.x_start, region.x_end)
            )
        if not ok or region.up or region.down or region.left or region.right:
            raise LayoutInvariantError(f"region {index} is not partitioned by its children")
        for child in region.children:
            self.check_partition(child)


def build_region_tree(
    settings: MapGenSettings,
    rng: TableRandom,
    metrics: Optional[Dict[str, Any]] = None,
    before_draw: Optional[Callable[[], None]] = None,
) -> RegionTree:
    tree = RegionTree(settings.width - 1, settings.height - 1)
    tree.subdivide(
        rng,
        interval=settings.interval,
        minimum=settings.minimum,
        metrics=metrics,
        before_draw=before_draw,
    )
    if metrics is not None:
        leaves = tree.leaves()
        metrics["leaves"] = len(leaves)
        metrics["internal_nodes"] = len(tree) - len(leaves)
        metrics["max_depth"] = max(tree[i].depth for i in leaves)
    return tree


__all__ = ["Axis", "Region", "RegionTree", "ROOT", "build_region_tree"]
