"""Terminal-state checks for a grid. All functions are pure."""
from tilt2048.config import MAX_PIECE
from tilt2048.grid import Grid

_NEIGHBOURS = ((1, 0), (-1, 0), (0, 1), (0, -1))


def empty_space_exists(grid: Grid) -> bool:
    return any(grid.tile(col, row) is None for col in range(grid.size) for row in range(grid.size))


def max_tile_exists(grid: Grid, max_piece: int = MAX_PIECE) -> bool:
    return any(tile.value == max_piece for tile in grid.tiles())


def at_least_one_move_exists(grid: Grid) -> bool:
    """True if some cell is empty or two neighbouring tiles share a value."""
    if empty_space_exists(grid):
        return True
    size = grid.size
    for col in range(size):
        for row in range(size):
            value = grid.tile(col, row).value
            for dc, dr in _NEIGHBOURS:
                c, r = col + dc, row + dr
                if not (0 <= c < size and 0 <= r < size):
                    continue
                if grid.tile(c, r).value == value:
                    return True
    return False


def is_over(grid: Grid, max_piece: int = MAX_PIECE) -> bool:
    return max_tile_exists(grid, max_piece) or not at_least_one_move_exists(grid)
