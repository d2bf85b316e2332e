import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from epigrid.population import HealthState, Population

I = HealthState.INFECTED
U = HealthState.UNINFECTED
R = HealthState.RECOVERED


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


def make_pop(cells, states, res, is_moving=None, time_sick=None):
    """Population from a list of (gx, gy) grid cells."""
    cells = np.asarray(cells, dtype=np.int32).reshape(-1, 2)
    n = cells.shape[0]
    return Population(
        gx=cells[:, 0].copy(),
        gy=cells[:, 1].copy(),
        is_moving=np.zeros(n, dtype=bool) if is_moving is None else np.asarray(is_moving, dtype=bool),
        state=np.asarray(states, dtype=np.int8),
        time_sick=np.zeros(n, dtype=np.int32) if time_sick is None else np.asarray(time_sick, dtype=np.int32),
        res=res,
    )


class FixedChoice:
    """Stand-in generator whose integers() always returns the same value."""

    def __init__(self, value):
        self.value = value

    def integers(self, low, high, size=None):
        return np.full(size, self.value, dtype=np.int64)
