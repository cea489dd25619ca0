import logging
from typing import Callable, Sequence

import numpy as np

from tilt2048 import rules
from tilt2048.config import DEFAULT_SIZE, MAX_PIECE, GameConfig
from tilt2048.grid import Grid
from tilt2048.side import Side
from tilt2048.tile import Tile
from tilt2048.tilt import tilt

logger = logging.getLogger(__name__)


class Model:
    """State of one game of 2048: board, score, best score and game over.

    Coordinates are (col, row) with (0, 0) the bottom-left corner. Every
    call that changes observable state notifies the subscribed callbacks
    exactly once.
    """

    def __init__(self, size: int = DEFAULT_SIZE, *, max_piece: int = MAX_PIECE):
        self.grid = Grid(size)
        self.max_piece = max_piece
        self._score = 0
        self._max_score = 0
        self._game_over = False
        self._listeners: list[Callable[["Model"], None]] = []

    @classmethod
    def from_values(
        cls,
        values: Sequence[Sequence[int]] | np.ndarray,
        score: int = 0,
        max_score: int = 0,
        game_over: bool = False,
        *,
        max_piece: int = MAX_PIECE,
    ) -> "Model":
        """A model with the given (row, col) layout, 0 for empty cells.

        Row 0 of `values` is the bottom row. Mostly useful for tests.
        """
        grid = Grid.from_values(values)
        model = cls(grid.size, max_piece=max_piece)
        model.grid = grid
        model._score = score
        model._max_score = max_score
        model._game_over = game_over
        return model

    @classmethod
    def from_config(cls, config: GameConfig) -> "Model":
        return cls(config.size, max_piece=config.max_piece)

    @property
    def size(self) -> int:
        return self.grid.size

    @property
    def score(self) -> int:
        return self._score

    @property
    def max_score(self) -> int:
        """Best score so far, updated when a game ends."""
        return self._max_score

    def tile(self, col: int, row: int) -> Tile | None:
        return self.grid.tile(col, row)

    def values(self) -> np.ndarray:
        return self.grid.values()

    def subscribe(self, callback: Callable[["Model"], None]):
        self._listeners.append(callback)

    def unsubscribe(self, callback: Callable[["Model"], None]):
        self._listeners.remove(callback)

    def _changed(self):
        for callback in list(self._listeners):
            callback(self)

    def _check_game_over(self):
        over = rules.is_over(self.grid, self.max_piece)
        if over and not self._game_over:
            logger.debug("game over with score %d", self._score)
        self._game_over = over

    def game_over(self) -> bool:
        """Return True iff no move is left or the max piece is on the board."""
        self._check_game_over()
        if self._game_over:
            self._max_score = max(self._score, self._max_score)
        return self._game_over

    def clear(self):
        """Empty the board and reset the score. The best score is kept."""
        if self._score == 0 and not self._game_over and next(self.grid.tiles(), None) is None:
            return
        self._score = 0
        self._game_over = False
        self.grid.clear()
        self._changed()

    def add_tile(self, tile: Tile):
        """Add `tile` at its position, which must be empty."""
        self.grid.place(tile)
        self._check_game_over()
        self._changed()

    def tilt(self, side: Side) -> bool:
        """Tilt the board toward `side`. Return True iff the board changed."""
        result = tilt(self.grid, side)
        if result.changed:
            self._score += result.score
            self._check_game_over()
            logger.debug("tilt %s scored %d", side.name, result.score)
            self._changed()
        return result.changed

    def __str__(self) -> str:
        lines = ["", "["]
        for row in range(self.size - 1, -1, -1):
            cells = []
            for col in range(self.size):
                tile = self.tile(col, row)
                cells.append("|    " if tile is None else f"|{tile.value:4d}")
            lines.append("".join(cells) + "|")
        over = "over" if self.game_over() else "not over"
        lines.append(f"] {self.score} (max: {self.max_score}) (game is {over}) ")
        return "\n".join(lines) + "\n"

    def __eq__(self, other) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))
