"""
sim.py
------
Hour-by-hour driver for the grid epidemic.

Each hour: (optional frame) -> random walks -> infection update -> tally.
A single numpy Generator, seeded once per run, feeds both the initial
placement and every random walk.

Public API: simulate(**kwargs) -> TimeSeries, summarize(series) -> dict
"""

from __future__ import annotations
import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
import pandas as pd
import psutil

from .config import DEFAULTS, HOURS_PER_DAY, SimulationConfig
from .infection import update_infections
from .motion import do_random_walks
from .population import HealthState, initialize_population

logger = logging.getLogger(__name__)


@dataclass
class TimeSeries:
    """Per-hour head counts plus the run metadata the charts need."""
    infected: np.ndarray
    uninfected: np.ndarray
    recovered: np.ndarray
    num_people: int
    num_moving: int
    res: int
    recovery_time: int

    @property
    def num_hours(self) -> int:
        return int(self.infected.size)

    def to_frame(self) -> pd.DataFrame:
        df = pd.DataFrame({
            "infected": self.infected,
            "uninfected": self.uninfected,
            "recovered": self.recovered,
        })
        df.index.name = "hour"
        return df


def _log_progress(hour, pop):
    n_inf, n_unf, n_rec = pop.counts()
    memory_usage = psutil.Process().memory_info().rss / 1024 / 1024
    logger.info("Hour %d (day %d): %d infected, %d uninfected, %d recovered, Memory: %.1f MB",
                hour, hour // HOURS_PER_DAY, n_inf, n_unf, n_rec, memory_usage)


def simulate(
    num_people=DEFAULTS["num_people"],
    num_moving=DEFAULTS["num_moving"],
    num_hours=DEFAULTS["num_hours"],
    res=DEFAULTS["res"],
    recovery_time=DEFAULTS["recovery_time"],
    seed=None,
    rng: Optional[np.random.Generator] = None,
    renderer: Optional[Callable] = None,   # renderer(x, y, states, pixel, hour)
    frame_delay=0.0,                       # seconds to pause after each frame
    reporter: Optional[Callable] = None,   # reporter(series), once at the end
    method=DEFAULTS["method"],
    dist_factor=DEFAULTS["dist_factor"],
    progress_every=0,                      # log a progress line every k hours (0 = off)
) -> TimeSeries:
    """
    Run one epidemic on a res x res grid for num_hours hours.

    Person 0 starts infected, the first num_moving people random-walk, and an
    uninfected person catches the disease when an infected one is closer than
    dist_factor grid cells on both axes. Infected people recover after
    recovery_time hours.
    """
    cfg = SimulationConfig(
        num_people=num_people, num_moving=num_moving, num_hours=num_hours,
        res=res, recovery_time=recovery_time, seed=seed,
        dist_factor=dist_factor, method=method,
    ).validate()

    if rng is None:
        rng = np.random.default_rng(seed)

    pop = initialize_population(cfg.num_people, cfg.num_moving, cfg.res, rng)
    dist = cfg.dist_factor * pop.pixel

    infected = np.zeros(cfg.num_hours, dtype=np.int64)
    uninfected = np.zeros(cfg.num_hours, dtype=np.int64)
    recovered = np.zeros(cfg.num_hours, dtype=np.int64)

    logger.info("Starting simulation: N=%d moving=%d hours=%d res=%d recovery=%d",
                cfg.num_people, cfg.num_moving, cfg.num_hours, cfg.res, cfg.recovery_time)
    start_time = time.time()

    for hour in range(cfg.num_hours):
        if renderer is not None:
            renderer(pop.xcoords, pop.ycoords, pop.state.copy(), pop.pixel, hour)
            if frame_delay > 0:
                time.sleep(frame_delay)

        do_random_walks(pop, rng)
        update_infections(pop, dist, cfg.recovery_time, method=cfg.method)

        counts = np.bincount(pop.state, minlength=3)
        infected[hour] = counts[HealthState.INFECTED]
        uninfected[hour] = counts[HealthState.UNINFECTED]
        recovered[hour] = counts[HealthState.RECOVERED]

        if progress_every and hour % progress_every == 0:
            _log_progress(hour, pop)

    logger.info("Simulation completed in %.2f seconds", time.time() - start_time)

    series = TimeSeries(
        infected=infected, uninfected=uninfected, recovered=recovered,
        num_people=cfg.num_people, num_moving=cfg.num_moving,
        res=cfg.res, recovery_time=cfg.recovery_time,
    )
    if reporter is not None:
        reporter(series)
    return series


def summarize(series: TimeSeries) -> dict:
    """Flat summary metrics for one run (one row of a sweep)."""
    if series.num_hours == 0:
        return {
            "peak_infected": 0, "peak_hour": 0, "total_infected": 1,
            "final_recovered": 0, "epidemic_hours": 0,
        }
    active = np.flatnonzero(series.infected > 0)
    return {
        "peak_infected": int(series.infected.max()),
        "peak_hour": int(series.infected.argmax()),
        # everybody who ever left the uninfected state, patient zero included
        "total_infected": int(series.num_people - series.uninfected[-1]),
        "final_recovered": int(series.recovered[-1]),
        "epidemic_hours": int(active[-1] + 1) if active.size else 0,
    }
