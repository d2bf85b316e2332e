
import numpy as np

from .population import Population


def do_random_walks(pop: Population, rng: np.random.Generator):
    """
    Random walk on each person that's moving: with probability 1/4 each try
    left, right, up or down by one grid cell. The bound is checked on the
    current coordinate (x > 0 before moving left, x < 1 before moving right).
    """
    movers = np.flatnonzero(pop.is_moving)
    if movers.size == 0:
        return

    choice = rng.integers(0, 4, size=movers.size)
    gx = pop.gx[movers]
    gy = pop.gy[movers]

    # x > 0  <=>  gx > 0 ;  x < 1  <=>  gx < res
    gx[(choice == 0) & (gx > 0)] -= 1
    gx[(choice == 1) & (gx < pop.res)] += 1
    gy[(choice == 2) & (gy < pop.res)] += 1
    gy[(choice == 3) & (gy > 0)] -= 1

    pop.gx[movers] = gx
    pop.gy[movers] = gy
