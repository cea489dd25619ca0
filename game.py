from tilt2048.game import Game
from tilt2048.side import Side


if __name__ == "__main__":
    game = Game()

    key_mapping = {
        "w": Side.NORTH,
        "d": Side.EAST,
        "s": Side.SOUTH,
        "a": Side.WEST,
    }

    game.display()

    while game.alive():
        key = input()
        if key in key_mapping:
            game.move(key_mapping[key])
            game.display()
        else:
            break
