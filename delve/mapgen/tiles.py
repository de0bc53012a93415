# Tile characters for plain-text dumps of a board
WALL = "W"
DOOR = "D"
OPEN_DOOR = "O"
FLOOR = "."

__all__ = ["WALL", "DOOR", "OPEN_DOOR", "FLOOR"]
