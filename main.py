import logging

import torch

from tilt2048.config import GameConfig
from tilt2048.logging_config import setup_logging
from tilt2048.rollout import play_random_games, save_rollout_plot, summarize


if __name__ == "__main__":
    setup_logging(logging.DEBUG)

    rollout_cfg = {
        "num_envs": 256,
        "size": 4,
        "max_piece": 2048,
        "seed": 0,
        "plot_path": "images/rollouts/random.png",
    }

    device = torch.device("mps" if torch.backends.mps.is_available() else "cpu")
    # device = torch.device("cpu")
    print(f"Using device: {device}")

    config = GameConfig(size=rollout_cfg["size"], max_piece=rollout_cfg["max_piece"])
    generator = torch.Generator(device=device)
    generator.manual_seed(rollout_cfg["seed"])

    result = play_random_games(rollout_cfg["num_envs"], device, config, generator)
    for key, value in summarize(result).items():
        print(f"{key}: {value}")

    save_rollout_plot(result, rollout_cfg["plot_path"])
