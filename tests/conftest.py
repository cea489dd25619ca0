import numpy as np
import pytest
import torch


@pytest.fixture
def device():
    return torch.device("cpu")


@pytest.fixture
def random_layout():
    """Factory of random (row, col) layouts, 0 for empty cells."""
    rng = np.random.default_rng(2048)

    def make(size, values=(0, 0, 2, 4, 8, 16)):
        return rng.choice(values, size=(size, size))

    return make
