from typing import NamedTuple

from tilt2048.grid import Grid
from tilt2048.side import Side


class TiltResult(NamedTuple):
    changed: bool
    score: int


def _tilt_column(grid: Grid, col: int) -> TiltResult:
    # Merge flags live only for this column pass.
    out: list[list] = []  # [value, merged]
    changed = False
    score = 0
    far = grid.size - 1
    for row in range(far, -1, -1):
        tile = grid.tile(col, row)
        if tile is None:
            continue
        if out and out[-1][0] == tile.value and not out[-1][1]:
            dest = far - (len(out) - 1)
            grid.move(col, dest, tile)
            out[-1] = [tile.value * 2, True]
            score += tile.value * 2
            changed = True
        else:
            dest = far - len(out)
            out.append([tile.value, False])
            if dest != row:
                grid.move(col, dest, tile)
                changed = True
    return TiltResult(changed, score)


def tilt(grid: Grid, side: Side) -> TiltResult:
    """Tilt every column of `grid` toward `side`.

    Tiles nearer the moving edge claim merges first, a merged tile does not
    merge again in the same tilt, and of three equal tiles in a line the
    leading two merge. The grid is modified in place; the caller owns the
    score.
    """
    changed = False
    score = 0
    with grid.viewed_from(side):
        for col in range(grid.size):
            result = _tilt_column(grid, col)
            changed = changed or result.changed
            score += result.score
    return TiltResult(changed, score)
