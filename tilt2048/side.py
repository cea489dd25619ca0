from enum import Enum


class Side(Enum):
    """The four directions a board can be tilted toward.

    Each side is a coordinate rotation. Seen from a side's perspective,
    tilting toward that side is always tilting toward increasing row, so
    one compaction routine serves all four directions.
    """

    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def from_perspective(self, col: int, row: int, size: int) -> tuple[int, int]:
        """Map (col, row) seen from this side to absolute coordinates."""
        last = size - 1
        if self is Side.NORTH:
            return col, row
        if self is Side.EAST:
            return row, last - col
        if self is Side.SOUTH:
            return last - col, last - row
        return last - row, col

    def to_perspective(self, col: int, row: int, size: int) -> tuple[int, int]:
        """Map absolute (col, row) into this side's rotated frame."""
        last = size - 1
        if self is Side.NORTH:
            return col, row
        if self is Side.EAST:
            return last - row, col
        if self is Side.SOUTH:
            return last - col, last - row
        return row, last - col
