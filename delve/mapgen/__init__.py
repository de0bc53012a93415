"""Public level generation interface."""

from .board import Board
from .config import INTERVAL, MINIMUM, LayoutInvariantError, MapGenConfigError, MapGenSettings
from .generator import GenerationHandle, generate, generate_from_settings
from .occupants import Door, Wall, parse_occupant
from .pipeline import run_pipeline
from .random_table import TableRandom
from .tiles import DOOR, FLOOR, OPEN_DOOR, WALL

__all__ = [
    "Board",
    "Door",
    "Wall",
    "parse_occupant",
    "INTERVAL",
    "MINIMUM",
    "MapGenSettings",
    "MapGenConfigError",
    "LayoutInvariantError",
    "TableRandom",
    "GenerationHandle",
    "generate",
    "generate_from_settings",
    "run_pipeline",
    "DOOR",
    "FLOOR",
    "OPEN_DOOR",
    "WALL",
]
