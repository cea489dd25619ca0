from dataclasses import dataclass

DEFAULT_SIZE = 4
# A tile of this value ends the game.
MAX_PIECE = 2048


@dataclass(frozen=True)
class GameConfig:
    """Settings of one game: board side length, winning tile and spawn odds."""

    size: int = DEFAULT_SIZE
    max_piece: int = MAX_PIECE
    spawn_values: tuple[int, ...] = (2, 4)
    spawn_weights: tuple[float, ...] = (0.9, 0.1)
    seed: int | None = None

    def __post_init__(self):
        if self.size < 2:
            raise ValueError(f"board size must be at least 2, got {self.size}")
        if self.max_piece < 2 or self.max_piece & (self.max_piece - 1) != 0:
            raise ValueError(f"max_piece must be a power of two, got {self.max_piece}")
        if len(self.spawn_values) != len(self.spawn_weights):
            raise ValueError("spawn_values and spawn_weights differ in length")
        if not self.spawn_values:
            raise ValueError("at least one spawn value is required")
