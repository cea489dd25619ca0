from contextlib import contextmanager
from typing import Iterator, Sequence

import numpy as np

from tilt2048.errors import OccupiedCellError
from tilt2048.side import Side
from tilt2048.tile import Tile


class Grid:
    """Square board of optional tiles, addressed by (col, row).

    Row 0 is the bottom edge. While a perspective is applied, `tile` and
    `move` take coordinates in that side's rotated frame; stored tiles
    always carry their absolute position.
    """

    cells: list[list[Tile | None]]

    def __init__(self, size: int):
        if size < 2:
            raise ValueError(f"board size must be at least 2, got {size}")
        self._size = size
        self.cells = [[None] * size for _ in range(size)]
        self._perspective = Side.NORTH

    @classmethod
    def from_values(cls, values: Sequence[Sequence[int]] | np.ndarray) -> "Grid":
        """Build a grid from a (row, col) layout where 0 means empty."""
        raw = np.asarray(values)
        if raw.dtype.kind not in "iu":
            raise ValueError(f"layout values must be integers, got dtype {raw.dtype}")
        if raw.ndim != 2 or raw.shape[0] != raw.shape[1]:
            raise ValueError(f"layout must be square, got shape {raw.shape}")
        grid = cls(raw.shape[0])
        for row in range(grid.size):
            for col in range(grid.size):
                value = int(raw[row, col])
                if value != 0:
                    grid.place(Tile(value, col, row))
        return grid

    @property
    def size(self) -> int:
        return self._size

    @property
    def perspective(self) -> Side:
        return self._perspective

    def _absolute(self, col: int, row: int) -> tuple[int, int]:
        if not (0 <= col < self._size and 0 <= row < self._size):
            raise IndexError(f"({col}, {row}) is outside a {self._size}x{self._size} board")
        return self._perspective.from_perspective(col, row, self._size)

    def tile(self, col: int, row: int) -> Tile | None:
        c, r = self._absolute(col, row)
        return self.cells[c][r]

    def place(self, tile: Tile):
        """Put `tile` at its own absolute position."""
        col, row = tile.position
        if not (0 <= col < self._size and 0 <= row < self._size):
            raise IndexError(f"({col}, {row}) is outside a {self._size}x{self._size} board")
        if self.cells[col][row] is not None:
            raise OccupiedCellError(col, row)
        self.cells[col][row] = tile

    def move(self, col: int, row: int, tile: Tile) -> bool:
        """Move `tile` to (col, row) in the current perspective.

        An equal-valued tile already at the destination is replaced by the
        doubled tile. Returns True iff a merge happened.
        """
        c, r = self._absolute(col, row)
        if tile.position == (c, r):
            return False
        target = self.cells[c][r]
        if target is not None and target.value != tile.value:
            raise OccupiedCellError(c, r)
        self.cells[tile.col][tile.row] = None
        if target is None:
            self.cells[c][r] = tile.at(c, r)
            return False
        self.cells[c][r] = tile.doubled(c, r)
        return True

    def clear(self):
        for column in self.cells:
            column[:] = [None] * self._size

    def apply_perspective(self, side: Side):
        if self._perspective is not Side.NORTH:
            raise RuntimeError(f"perspective {self._perspective.name} is already applied")
        self._perspective = side

    def restore_perspective(self):
        self._perspective = Side.NORTH

    @contextmanager
    def viewed_from(self, side: Side) -> Iterator["Grid"]:
        """Apply `side` for the duration of the block, then restore NORTH."""
        self.apply_perspective(side)
        try:
            yield self
        finally:
            self.restore_perspective()

    def tiles(self) -> Iterator[Tile]:
        for column in self.cells:
            for tile in column:
                if tile is not None:
                    yield tile

    def values(self) -> np.ndarray:
        """Tile values as a (row, col) array, 0 for empty cells."""
        out = np.zeros((self._size, self._size), dtype=np.int64)
        for tile in self.tiles():
            out[tile.row, tile.col] = tile.value
        return out
