"""Occupant kinds a generated board can hold.

An empty cell (``None``) is floor. Gameplay systems may flip ``Door.open``
after generation; the generator itself only ever creates closed doors.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .tiles import DOOR, FLOOR, OPEN_DOOR, WALL


@dataclass(frozen=True)
class Wall:
    char = WALL

    def has_collision(self) -> bool:
        return True

    def wall_connectable(self) -> bool:
        return True

    def __str__(self) -> str:
        return "wall"


@dataclass
class Door:
    open: bool = False

    @property
    def char(self) -> str:
        return OPEN_DOOR if self.open else DOOR

    def has_collision(self) -> bool:
        return not self.open

    def wall_connectable(self) -> bool:
        # An open doorway breaks the wall line visually.
        return not self.open

    def __str__(self) -> str:
        return "open door" if self.open else "closed door"


Occupant = Union[Wall, Door]


def parse_occupant(text: str) -> Occupant:
    """Parse ``"wall"``, ``"door"``, ``"door open"`` or ``"door closed"``."""
    parts = text.split()
    if not parts:
        raise ValueError("You have to specify an occupant type")
    kind, args = parts[0].lower(), [a.lower() for a in parts[1:]]
    if kind == "wall":
        return Wall()
    if kind == "door":
        if not args or args[0] in ("closed", "false", "0"):
            return Door(open=False)
        if args[0] in ("open", "true", "1"):
            return Door(open=True)
        raise ValueError(f"{args[0]} is not a valid door state")
    raise ValueError(f"{kind} is not a valid occupant type")


def occupant_char(occupant: Optional[Occupant]) -> str:
    return FLOOR if occupant is None else occupant.char


__all__ = ["Wall", "Door", "Occupant", "parse_occupant", "occupant_char"]
