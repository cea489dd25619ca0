import torch

from tilt2048.config import GameConfig
from tilt2048.side import Side

# Quarter turns that bring each side to the left edge (column 0) of a
# (row, col) board whose row 0 is the bottom row.
_ROTATIONS = {
    Side.NORTH: -1,
    Side.EAST: 2,
    Side.SOUTH: 1,
    Side.WEST: 0,
}


def _shift_left(x: torch.Tensor) -> torch.Tensor:
    # x: (M, N)
    mask = x != 0
    # stable sort descending puts True (non-zeros) first, preserving order
    _, indices = torch.sort(mask.int(), dim=1, descending=True, stable=True)
    return torch.gather(x, 1, indices)


def _move_left(boards: torch.Tensor) -> tuple[torch.Tensor, torch.Tensor]:
    # boards: (B, N, N)
    n = boards.shape[-1]
    x = _shift_left(boards.reshape(-1, n).clone())
    score = torch.zeros(x.shape[0], dtype=x.dtype, device=x.device)

    # A merged pair zeroes its trailing cell, so the next comparison cannot
    # reuse either tile.
    for i in range(n - 1):
        c = (x[:, i] == x[:, i + 1]) & (x[:, i] != 0)
        x[c, i] *= 2
        x[c, i + 1] = 0
        score += torch.where(c, x[:, i], torch.zeros_like(score))

    x = _shift_left(x)
    return x.view(boards.shape), score.view(boards.shape[0], n).sum(dim=1)


def tilt_boards(boards: torch.Tensor, side: Side) -> tuple[torch.Tensor, torch.Tensor]:
    """
    Tilt a batch of (row, col) boards toward `side`.

    Returns the tilted boards, shape (B, N, N), and the points scored by
    each board, shape (B,).
    """
    k = _ROTATIONS[side]
    rotated = torch.rot90(boards, k, [1, 2])
    moved, score = _move_left(rotated)
    return torch.rot90(moved, -k, [1, 2]), score


class VectorizedGame:
    """Many independent games stepped together on one device."""

    def __init__(
        self,
        num_envs,
        device,
        config: GameConfig | None = None,
        generator: torch.Generator | None = None,
    ):
        self.config = config or GameConfig()
        self.num_envs = num_envs
        self.device = device
        self.size = self.config.size
        self.generator = generator
        self.spawn_values = torch.tensor(self.config.spawn_values, dtype=torch.int32, device=device)
        self.spawn_weights = torch.tensor(self.config.spawn_weights, dtype=torch.float, device=device)
        self.board = torch.zeros(
            (num_envs, self.size, self.size), dtype=torch.int32, device=device
        )
        self.reset()

    def set_states(self, env_indices, states):
        if len(env_indices) == 0:
            return
        self.board[env_indices] = states.to(self.device).to(self.board.dtype)

    def reset(self, env_indices=None):
        if env_indices is None:
            self.board.fill_(0)
            env_indices = torch.arange(self.num_envs, device=self.device)

        if len(env_indices) > 0:
            self.board[env_indices] = 0
            self.add_random_tile(env_indices)
            self.add_random_tile(env_indices)

    def add_random_tile(self, env_indices):
        # env_indices: (K,)
        cells = self.size * self.size
        flat_boards = self.board[env_indices].view(-1, cells)
        empty_mask = flat_boards == 0

        # Full boards get no tile
        has_empty = empty_mask.any(dim=1)
        env_indices = env_indices[has_empty]
        if len(env_indices) == 0:
            return
        flat_boards = flat_boards[has_empty]
        probs = empty_mask[has_empty].float()

        flat_indices = torch.multinomial(probs, 1, generator=self.generator).squeeze(-1)
        choice = torch.multinomial(
            self.spawn_weights.repeat(len(env_indices), 1),
            1,
            generator=self.generator,
        ).squeeze(-1)
        vals = self.spawn_values[choice]

        update_mask = torch.nn.functional.one_hot(flat_indices, cells).bool()
        flat_boards[update_mask] = vals
        self.board[env_indices] = flat_boards.view(-1, self.size, self.size)

    def get_moves(self) -> tuple[torch.Tensor, torch.Tensor]:
        """
        Returns the next state for each side, shape (B, 4, N, N), and the
        matching scores, shape (B, 4), both ordered like `Side`.
        """
        boards = []
        scores = []
        for side in Side:
            moved, score = tilt_boards(self.board, side)
            boards.append(moved)
            scores.append(score)
        return torch.stack(boards, dim=1), torch.stack(scores, dim=1)

    def get_valid_actions(self, all_next_states=None):
        # Returns (B, 4) float tensor, 1.0 where the tilt changes the board
        if all_next_states is None:
            all_next_states, _ = self.get_moves()
        current = self.board.unsqueeze(1)
        diff = (all_next_states != current).view(self.num_envs, 4, -1).any(dim=2)
        return diff.float()

    def step(self, actions, moves=None):
        """
        Apply one side index per board. Boards whose action does not change
        them stay as they are and get no new tile.
        """
        if moves is None:
            moves = self.get_moves()
        all_next_states, all_scores = moves

        batch_indices = torch.arange(self.num_envs, device=self.device)
        next_states = all_next_states[batch_indices, actions]
        rewards = all_scores[batch_indices, actions]

        is_valid = (
            next_states.view(self.num_envs, -1) != self.board.view(self.num_envs, -1)
        ).any(dim=1)

        self.board = next_states.clone()

        valid_indices = torch.nonzero(is_valid).squeeze(-1)
        self.add_random_tile(valid_indices)

        return self.board.clone(), is_valid, torch.where(is_valid, rewards, torch.zeros_like(rewards))

    def get_done(self):
        # Done on a max piece, or when the board is full and nothing merges
        flat = self.board.view(self.num_envs, -1)
        won = (flat == self.config.max_piece).any(dim=1)
        has_empty = (flat == 0).any(dim=1)

        if has_empty.all():
            return won

        # Any empty cell leaves a legal move, so only full boards need the check
        valid = self.get_valid_actions()
        is_stuck = valid.sum(dim=1) == 0
        return won | (is_stuck & (~has_empty))
