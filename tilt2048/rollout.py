import logging
import os
from dataclasses import dataclass

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
import torch

from tilt2048.config import GameConfig
from tilt2048.vec_game import VectorizedGame

logger = logging.getLogger(__name__)


@dataclass
class RolloutResult:
    scores: torch.Tensor
    max_tiles: torch.Tensor
    lengths: torch.Tensor


def play_random_games(
    num_envs: int,
    device: torch.device,
    config: GameConfig | None = None,
    generator: torch.Generator | None = None,
    max_steps: int = 100_000,
) -> RolloutResult:
    """Play `num_envs` games with uniformly random valid moves until all end."""
    vec_game = VectorizedGame(num_envs, device, config, generator)

    scores = torch.zeros(num_envs, dtype=torch.long, device=device)
    lengths = torch.zeros(num_envs, dtype=torch.long, device=device)
    done = vec_game.get_done()

    for _ in range(max_steps):
        if done.all():
            break
        moves = vec_game.get_moves()
        valid = vec_game.get_valid_actions(moves[0])

        # Finished boards still need a distribution to sample from
        valid[valid.sum(dim=1) == 0] = 1.0
        actions = torch.multinomial(valid, 1, generator=generator).squeeze(1)

        previous = vec_game.board.clone()
        _, is_valid, rewards = vec_game.step(actions, moves)

        # Finished boards are frozen
        vec_game.board[done] = previous[done]
        active = is_valid & ~done
        scores += torch.where(active, rewards.long(), torch.zeros_like(scores))
        lengths += active.long()
        done = done | vec_game.get_done()
    else:
        logger.warning("rollout stopped after %d steps", max_steps)

    max_tiles = vec_game.board.view(num_envs, -1).amax(dim=1)
    logger.debug("finished %d rollouts", num_envs)
    return RolloutResult(scores=scores.cpu(), max_tiles=max_tiles.cpu(), lengths=lengths.cpu())


def summarize(result: RolloutResult) -> dict[str, float | int]:
    scores = result.scores.float()
    return {
        "games": int(len(result.scores)),
        "mean_score": float(scores.mean().item()),
        "median_score": float(scores.median().item()),
        "best_score": int(result.scores.max().item()),
        "mean_length": float(result.lengths.float().mean().item()),
        "best_tile": int(result.max_tiles.max().item()),
    }


def save_rollout_plot(result: RolloutResult, path: str):
    """Save score and max tile histograms of `result` as an image."""
    out_dir = os.path.dirname(path)
    if out_dir and not os.path.exists(out_dir):
        os.makedirs(out_dir, exist_ok=True)

    fig, (ax_scores, ax_tiles) = plt.subplots(1, 2, figsize=(10, 4))

    ax_scores.hist(result.scores.numpy(), bins=20, color="#1f77b4")
    ax_scores.set_title("Score distribution")
    ax_scores.set_xlabel("score")
    ax_scores.set_ylabel("count")

    tiles = result.max_tiles.numpy()
    exponents, counts = np.unique(np.log2(tiles).astype(int), return_counts=True)
    ax_tiles.bar([str(2**e) for e in exponents], counts, color="#ff7f0e")
    ax_tiles.set_title("Highest tile")
    ax_tiles.set_xlabel("tile")

    plt.tight_layout()
    fig.savefig(path)
    plt.close(fig)
