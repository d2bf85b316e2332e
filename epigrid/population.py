"""
population.py
-------------
Columnar agent state for the grid epidemic.

Positions are stored as integer grid indices (gx, gy) in [0, res]; the unit
square coordinates are x = gx / res and y = gy / res. Keeping integers avoids
drift from repeatedly adding/subtracting 1/res.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import IntEnum
import numpy as np


class HealthState(IntEnum):
    """The three states a person can be in."""
    INFECTED = 0
    UNINFECTED = 1
    RECOVERED = 2


@dataclass
class Population:
    gx: np.ndarray          # int32 grid column, 0..res
    gy: np.ndarray          # int32 grid row, 0..res
    is_moving: np.ndarray   # bool, fixed for the whole run
    state: np.ndarray       # int8 HealthState values
    time_sick: np.ndarray   # int32 hours since infection
    res: int

    def __post_init__(self):
        n = self.gx.shape[0]
        for name in ("gy", "is_moving", "state", "time_sick"):
            if getattr(self, name).shape != (n,):
                raise ValueError(f"{name} must have shape ({n},)")
        if self.res < 1:
            raise ValueError("res must be >= 1")
        if n == 0:
            return
        for name in ("gx", "gy"):
            g = getattr(self, name)
            if g.min() < 0 or g.max() > self.res:
                raise ValueError(f"{name} must lie in [0, {self.res}]")
        if self.state.min() < min(HealthState) or self.state.max() > max(HealthState):
            raise ValueError("state holds values that are not a HealthState")
        if self.time_sick.min() < 0:
            raise ValueError("time_sick must be >= 0")

    @property
    def N(self) -> int:
        return int(self.gx.shape[0])

    @property
    def pixel(self) -> float:
        return 1.0 / self.res

    @property
    def xcoords(self) -> np.ndarray:
        return self.gx / self.res

    @property
    def ycoords(self) -> np.ndarray:
        return self.gy / self.res

    def counts(self):
        """(infected, uninfected, recovered) head counts."""
        c = np.bincount(self.state, minlength=3)
        return (int(c[HealthState.INFECTED]),
                int(c[HealthState.UNINFECTED]),
                int(c[HealthState.RECOVERED]))

    @classmethod
    def from_coords(cls, xcoords, ycoords, states, res, is_moving=None, time_sick=None):
        """
        Build a population from unit-square coordinates, snapping each one to
        the nearest grid index. Mostly useful for hand-built scenarios.
        """
        x = np.asarray(xcoords, dtype=float)
        y = np.asarray(ycoords, dtype=float)
        n = x.shape[0]
        if is_moving is None:
            is_moving = np.zeros(n, dtype=bool)
        if time_sick is None:
            time_sick = np.zeros(n, dtype=np.int32)
        return cls(
            gx=np.rint(x * res).astype(np.int32),
            gy=np.rint(y * res).astype(np.int32),
            is_moving=np.asarray(is_moving, dtype=bool).copy(),
            state=np.asarray(states, dtype=np.int8).copy(),
            time_sick=np.asarray(time_sick, dtype=np.int32).copy(),
            res=int(res),
        )


def validate_population_args(num_people: int, num_moving: int, res: int):
    if num_people < 1:
        raise ValueError(f"num_people must be >= 1, got {num_people}")
    if num_moving < 0:
        raise ValueError(f"num_moving must be >= 0, got {num_moving}")
    if num_moving > num_people:
        raise ValueError(
            f"num_moving ({num_moving}) cannot exceed num_people ({num_people})"
        )
    if res < 1:
        raise ValueError(f"res must be >= 1, got {res}")


def initialize_population(num_people: int, num_moving: int, res: int, rng: np.random.Generator) -> Population:
    """
    Place people uniformly at random on the res x res grid, mark the first
    `num_moving` of them as moving, and infect person 0.
    """
    validate_population_args(num_people, num_moving, res)

    # x and y are drawn per person, x first, so a seeded run is reproducible
    draws = rng.integers(0, res, size=(num_people, 2), dtype=np.int32)
    gx = draws[:, 0].copy()
    gy = draws[:, 1].copy()

    is_moving = np.arange(num_people) < num_moving
    state = np.full(num_people, HealthState.UNINFECTED, dtype=np.int8)
    time_sick = np.zeros(num_people, dtype=np.int32)

    state[0] = HealthState.INFECTED  # patient zero

    return Population(gx=gx, gy=gy, is_moving=is_moving, state=state,
                      time_sick=time_sick, res=int(res))
