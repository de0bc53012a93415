"""Leaf adjacency: seed every direction with every leaf, then prune.

Pruning keeps a candidate only when it touches the leaf on that side and the
two extents overlap on the perpendicular axis. The comparisons below are the
canonical ones; door placement depends on exactly which pairs survive.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

from .regions import ROOT, Region, RegionTree

DIRECTIONS = ("up", "down", "left", "right")


def fill_leaf_adjacents(tree: RegionTree, candidates: List[int], index: int = ROOT) -> None:
    region = tree[index]
    if not region.is_leaf:
        for child in region.children:
            fill_leaf_adjacents(tree, candidates, child)
        return
    region.up = list(candidates)
    region.down = list(candidates)
    region.left = list(candidates)
    region.right = list(candidates)


def _keep_up(leaf: Region, other: Region) -> bool:
    if leaf.y_start != other.y_end:
        return False
    return not (other.x_end <= leaf.x_start or other.x_start >= leaf.x_end)


def _keep_down(leaf: Region, other: Region) -> bool:
    if leaf.y_end != other.y_start:
        return False
    return not (other.x_end <= leaf.x_start or other.x_start >= leaf.x_end)


def _keep_left(leaf: Region, other: Region) -> bool:
    if leaf.x_start != other.x_end:
        return False
    return not (other.y_end <= leaf.y_start or other.y_start >= leaf.y_end)


def _keep_right(leaf: Region, other: Region) -> bool:
    if leaf.x_end != other.x_start:
        return False
    return not (other.y_end <= leaf.y_start or other.y_start >= leaf.y_end)


_RULES = {"up": _keep_up, "down": _keep_down, "left": _keep_left, "right": _keep_right}


def remove_extra_adjacents(tree: RegionTree, index: int = ROOT) -> None:
    region = tree[index]
    if not region.is_leaf:
        for child in region.children:
            remove_extra_adjacents(tree, child)
        return
    for direction in DIRECTIONS:
        keep = _RULES[direction]
        kept = []
        for other_index in getattr(region, direction):
            other = tree[other_index]
            if other.same_bounds(region):
                continue
            if keep(region, other):
                kept.append(other_index)
        setattr(region, direction, kept)


def resolve_adjacency(tree: RegionTree, metrics: Optional[Dict[str, Any]] = None) -> int:
    """Populate every leaf's four adjacency lists; return the number of retained edges.

    Each shared border is seen from both sides, so an edge counts once per pair.
    """
    leaves = tree.leaves()
    fill_leaf_adjacents(tree, leaves)
    remove_extra_adjacents(tree)
    edges = sum(len(tree[i].up) + len(tree[i].left) for i in leaves)
    if metrics is not None:
        metrics["adjacency_edges"] = edges
    return edges


__all__ = ["DIRECTIONS", "fill_leaf_adjacents", "remove_extra_adjacents", "resolve_adjacency"]
