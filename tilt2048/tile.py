from dataclasses import dataclass


@dataclass(frozen=True)
class Tile:
    """A numbered tile at an absolute (col, row) position.

    Tiles are never mutated: moving or merging produces a new tile.
    """

    value: int
    col: int
    row: int

    def __post_init__(self):
        if self.value <= 0 or self.value & (self.value - 1) != 0:
            raise ValueError(f"tile value must be a power of two, got {self.value}")

    @property
    def position(self) -> tuple[int, int]:
        return self.col, self.row

    def at(self, col: int, row: int) -> "Tile":
        return Tile(self.value, col, row)

    def doubled(self, col: int, row: int) -> "Tile":
        return Tile(self.value * 2, col, row)
