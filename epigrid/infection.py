"""
infection.py
------------
One hour of disease dynamics: proximity transmission, sickness timers and
recovery.

Proximity is a square neighbourhood: an uninfected person j catches the
disease from an infected person i when they are within `dist` of each other
in both the x and the y coordinate (strictly). It is evaluated on integer
grid offsets, |gx_i - gx_j| < round(dist * res, 9); the rounding keeps a
whole number of cells whole (3 * (1/10) * 10 is 3.0000000000000004).

Two interchangeable neighbour searches:
- "dense":  pairwise scan with numpy broadcasting, chunked to bound memory.
- "kdtree": scipy cKDTree over the infected people, Chebyshev metric.
"""

from __future__ import annotations
import logging
import math
import numpy as np
from scipy.spatial import cKDTree

from .population import HealthState, Population

logger = logging.getLogger(__name__)

METHODS = ("kdtree", "dense")

# susceptible rows per broadcast block in the dense scan
DENSE_CHUNK = 2048

# dist * res is rounded to this many decimals before comparing offsets
REACH_DECIMALS = 9


def cell_reach(dist: float, res: int) -> float:
    """Proximity threshold in grid cells."""
    return round(dist * res, REACH_DECIMALS)


def _exposed_dense(sx, sy, ix, iy, reach: float) -> np.ndarray:
    """Boolean mask over susceptibles: any infected within `reach` cells on both axes."""
    hit = np.zeros(sx.size, dtype=bool)
    ix = ix.astype(np.int64)
    iy = iy.astype(np.int64)
    for start in range(0, sx.size, DENSE_CHUNK):
        stop = start + DENSE_CHUNK
        dx = np.abs(sx[start:stop, None].astype(np.int64) - ix[None, :])
        dy = np.abs(sy[start:stop, None].astype(np.int64) - iy[None, :])
        hit[start:stop] = ((dx < reach) & (dy < reach)).any(axis=1)
    return hit


def _exposed_kdtree(sx, sy, ix, iy, reach: float) -> np.ndarray:
    # offsets are integers, so d < reach  <=>  d <= ceil(reach) - 1
    r = math.ceil(reach) - 1
    if r < 0:
        return np.zeros(sx.size, dtype=bool)
    tree = cKDTree(np.column_stack((ix, iy)).astype(float))
    pts = np.column_stack((sx, sy)).astype(float)
    n_near = tree.query_ball_point(pts, r=r, p=np.inf, return_length=True)
    return np.asarray(n_near) > 0


def update_infections(pop: Population, dist: float, recovery_time: int, method: str = "kdtree"):
    """
    Advance infection state by one hour, in place.

    Order: snapshot who is infected -> transmit from that snapshot ->
    increment time_sick of the snapshot -> recover the snapshot members whose
    time_sick reached recovery_time. People infected during this call start
    at time_sick 0 and do not infect anyone until the next call.
    """
    if dist < 0:
        raise ValueError(f"dist must be >= 0, got {dist}")
    if recovery_time < 0:
        raise ValueError(f"recovery_time must be >= 0, got {recovery_time}")
    if method not in METHODS:
        raise ValueError(f"unknown method {method!r}; expected one of {METHODS}")

    was_infected = pop.state == HealthState.INFECTED
    susceptible = pop.state == HealthState.UNINFECTED

    # transmission
    inf_idx = np.flatnonzero(was_infected)
    sus_idx = np.flatnonzero(susceptible)
    if inf_idx.size and sus_idx.size:
        reach = cell_reach(dist, pop.res)
        search = _exposed_kdtree if method == "kdtree" else _exposed_dense
        hit = search(pop.gx[sus_idx], pop.gy[sus_idx],
                     pop.gx[inf_idx], pop.gy[inf_idx], reach)
        new_idx = sus_idx[hit]
        if new_idx.size:
            pop.state[new_idx] = HealthState.INFECTED
            pop.time_sick[new_idx] = 0
            logger.debug("%d new infections", new_idx.size)

    # progression
    pop.time_sick[was_infected] += 1

    # recovery
    recovered = was_infected & (pop.time_sick >= recovery_time)
    if recovered.any():
        pop.state[recovered] = HealthState.RECOVERED
