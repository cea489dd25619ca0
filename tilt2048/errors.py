class OccupiedCellError(ValueError):
    """Raised when a tile is put onto a cell that already holds one."""

    def __init__(self, col: int, row: int):
        super().__init__(f"cell ({col}, {row}) is already occupied")
        self.col = col
        self.row = row
