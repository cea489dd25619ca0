import numpy as np
import pytest

from tilt2048.config import GameConfig
from tilt2048.errors import OccupiedCellError
from tilt2048.model import Model
from tilt2048.side import Side
from tilt2048.tile import Tile


@pytest.fixture
def signals():
    return []


@pytest.fixture
def model(signals):
    m = Model.from_values(
        [
            [2, 2, 0, 0],
            [0, 4, 0, 0],
            [0, 0, 0, 0],
            [0, 0, 0, 8],
        ]
    )
    m.subscribe(signals.append)
    return m


def test_new_model():
    m = Model(3)
    assert m.size == 3
    assert m.score == 0
    assert m.max_score == 0
    assert not m.game_over()
    assert m.tile(0, 0) is None


def test_from_config():
    m = Model.from_config(GameConfig(size=5, max_piece=64))
    assert m.size == 5
    assert m.max_piece == 64


def test_layout_round_trip(random_layout):
    layout = random_layout(4)
    m = Model.from_values(layout, score=12, max_score=40)
    for col in range(4):
        for row in range(4):
            tile = m.tile(col, row)
            if layout[row, col] == 0:
                assert tile is None
            else:
                assert tile == Tile(int(layout[row, col]), col, row)
    np.testing.assert_array_equal(m.values(), layout)
    assert m.score == 12
    assert m.max_score == 40


def test_tilt_scores_and_signals_once(model, signals):
    assert model.tilt(Side.WEST)
    assert model.score == 4
    assert model.tile(0, 0) == Tile(4, 0, 0)
    assert signals == [model]


def test_unchanged_tilt_does_not_signal(model, signals):
    model.tilt(Side.WEST)
    signals.clear()
    assert not model.tilt(Side.WEST)
    assert model.score == 4
    assert signals == []


def test_score_never_decreases(model):
    scores = [model.score]
    for side in [Side.NORTH, Side.WEST, Side.SOUTH, Side.EAST, Side.NORTH, Side.WEST]:
        model.tilt(side)
        scores.append(model.score)
    assert scores == sorted(scores)


def test_add_tile(model, signals):
    model.add_tile(Tile(2, 2, 2))
    assert model.tile(2, 2) == Tile(2, 2, 2)
    assert signals == [model]


def test_add_tile_on_occupied_cell(model, signals):
    with pytest.raises(OccupiedCellError):
        model.add_tile(Tile(4, 0, 0))
    assert model.tile(0, 0) == Tile(2, 0, 0)
    assert signals == []


def test_add_tile_can_end_game(signals):
    m = Model.from_values([[2, 4], [8, 0]])
    m.subscribe(signals.append)
    m.add_tile(Tile(2, 1, 1))
    assert m.game_over()
    assert signals == [m]


def test_clear_keeps_max_score(signals):
    m = Model.from_values([[2, 4], [8, 2]], score=100, max_score=50)
    assert m.game_over()
    assert m.max_score == 100
    m.subscribe(signals.append)
    m.clear()
    assert m.score == 0
    assert m.max_score == 100
    assert not m.game_over()
    assert m.tile(0, 0) is None
    assert signals == [m]


def test_max_score_not_updated_before_game_over():
    m = Model.from_values([[2, 2], [0, 0]], score=100, max_score=50)
    assert not m.game_over()
    assert m.max_score == 50


def test_max_score_at_least_score_after_game_over():
    m = Model.from_values([[2, 4], [8, 2]], score=30, max_score=10)
    m.game_over()
    assert m.max_score >= m.score


def test_reaching_max_piece_ends_game():
    layout = np.zeros((4, 4), dtype=int)
    layout[0, :2] = [1024, 1024]
    m = Model.from_values(layout)
    assert not m.game_over()
    assert m.tilt(Side.WEST)
    assert m.score == 2048
    assert m.game_over()
    assert m.max_score == 2048


def test_custom_max_piece():
    m = Model.from_values([[8, 8], [0, 0]], max_piece=16)
    m.tilt(Side.EAST)
    assert m.game_over()


def test_unsubscribe(model, signals):
    model.unsubscribe(signals.append)
    model.tilt(Side.NORTH)
    assert signals == []


def test_str():
    m = Model.from_values([[2, 0], [0, 4]])
    assert str(m) == "\n[\n|    |   4|\n|   2|    |\n] 0 (max: 0) (game is not over) \n"


def test_str_reports_game_over():
    m = Model.from_values([[2, 4], [8, 2]], score=6)
    assert str(m).endswith("] 6 (max: 6) (game is over) \n")


def test_value_equality():
    a = Model.from_values([[2, 0], [0, 4]], score=4)
    b = Model.from_values([[0, 0], [2, 4]], score=0)
    assert a != b
    c = Model.from_values([[2, 0], [0, 4]], score=4)
    assert a == c
    assert hash(a) == hash(c)
    assert a != "not a model"


def test_equal_after_different_histories():
    a = Model.from_values([[2, 2, 0], [0, 0, 0], [0, 0, 0]])
    b = Model.from_values([[0, 2, 2], [0, 0, 0], [0, 0, 0]])
    a.tilt(Side.WEST)
    b.tilt(Side.WEST)
    assert a == b
    assert len({a, b}) == 1


def test_clear_on_empty_model_does_not_signal(signals):
    m = Model(2)
    m.subscribe(signals.append)
    m.clear()
    assert signals == []


def test_clear_resets_score_on_empty_board(signals):
    m = Model.from_values([[0, 0], [0, 0]], score=8)
    m.subscribe(signals.append)
    m.clear()
    assert m.score == 0
    assert signals == [m]
