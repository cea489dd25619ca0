import logging
import random

from tilt2048.config import GameConfig
from tilt2048.model import Model
from tilt2048.side import Side
from tilt2048.tile import Tile

logger = logging.getLogger(__name__)


class Game:
    """A 2048 game that drops a random tile after every effective move."""

    model: Model

    def __init__(self, config: GameConfig | None = None, rng: random.Random | None = None):
        self.config = config or GameConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.model = Model.from_config(self.config)
        self._place()
        self._place()

    def _place(self):
        places = []
        for col in range(self.model.size):
            for row in range(self.model.size):
                if self.model.tile(col, row) is None:
                    places.append((col, row))
        if len(places) == 0:
            return
        col, row = self.rng.choice(places)
        value = self.rng.choices(self.config.spawn_values, self.config.spawn_weights)[0]
        logger.debug("spawn %d at (%d, %d)", value, col, row)
        self.model.add_tile(Tile(value, col, row))

    def move(self, side: Side) -> bool:
        """
        Play a move in the game. Return whether the move changed the board.
        """
        if self.model.tilt(side):
            self._place()
            return True
        return False

    def clone(self) -> "Game":
        g = Game.__new__(Game)
        g.config = self.config
        g.rng = random.Random()
        g.rng.setstate(self.rng.getstate())
        g.model = Model.from_values(
            self.model.values(),
            self.model.score,
            self.model.max_score,
            max_piece=self.model.max_piece,
        )
        return g

    def valid(self, side: Side) -> bool:
        return self.clone().model.tilt(side)

    def alive(self) -> bool:
        return not self.model.game_over()

    def display(self):
        print(self.model)
