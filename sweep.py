import logging
import multiprocessing as mp
import time
from concurrent.futures import ProcessPoolExecutor, as_completed

import numpy as np
import pandas as pd

from epigrid.config import HOURS_PER_DAY
from epigrid.logs import init_worker_logging
from epigrid.sim import simulate, summarize

logger = logging.getLogger(__name__)

# Smaller than the reference run so a sweep finishes in minutes
DEFAULTS = dict(
    num_people=1000,
    num_moving=1000,
    num_hours=60 * HOURS_PER_DAY,
    res=200,
    recovery_time=14 * HOURS_PER_DAY,
)

# How many people keep moving around vs. staying home
RANGES = {
    "num_moving": [1000, 500, 250, 100, 0],
}

METRICS = ["peak_infected", "peak_hour", "total_infected", "final_recovered", "epidemic_hours"]


def run_single(task):
    """Run one (param, value, run, seed) task and return its summary row."""
    pname, val, r, seed, base = task
    params = dict(base)
    params[pname] = val
    series = simulate(seed=seed, **params)
    out = summarize(series)
    out.update(dict(param_name=pname, param_value=val, run=r, seed=seed))
    return out


def _worker(task):
    try:
        return run_single(task)
    except Exception:
        logger.exception("Run failed: %s=%s run=%s", task[0], task[1], task[2])
        return None


def make_tasks(n_runs, seed, ranges=None, defaults=None):
    ranges = RANGES if ranges is None else ranges
    base = DEFAULTS.copy()
    if defaults:
        base.update(defaults)
    rs = np.random.RandomState(seed)
    tasks = []
    for pname, values in ranges.items():
        for val in values:
            for r in range(n_runs):
                tasks.append((pname, val, r, int(rs.randint(0, 2**31-1)), base))
    return tasks


def run_sweep(n_runs=20, seed=0, out_csv="results.csv", ranges=None, defaults=None, n_workers=1,
              log_dir="logs"):
    """
    Run every parameter value in `ranges` n_runs times and write one summary
    row per run to out_csv.

    Per-run seeds come from a master RandomState(seed), so a sweep is
    reproducible regardless of n_workers. Worker processes log to
    log_dir/worker-<pid>.log.
    """
    tasks = make_tasks(n_runs, seed, ranges=ranges, defaults=defaults)
    logger.info("Running %d simulations with %d worker(s)", len(tasks), n_workers)
    start_time = time.time()

    rows = []
    if n_workers <= 1:
        for task in tasks:
            out = _worker(task)
            if out is not None:
                rows.append(out)
    else:
        with ProcessPoolExecutor(max_workers=n_workers, mp_context=mp.get_context("spawn"),
                                 initializer=init_worker_logging, initargs=(log_dir,)) as executor:
            futures = {executor.submit(_worker, task): task for task in tasks}
            for future in as_completed(futures):
                out = future.result()
                if out is not None:
                    rows.append(out)
                    if len(rows) % 10 == 0:
                        logger.info("%d/%d complete", len(rows), len(tasks))

    df = pd.DataFrame(rows, columns=METRICS + ["param_name", "param_value", "run", "seed"])
    df = df.sort_values(["param_name", "param_value", "run"], kind="stable").reset_index(drop=True)
    if out_csv:
        df.to_csv(out_csv, index=False)
    logger.info("Wrote %d rows in %.1f s", len(df), time.time() - start_time)
    return df


if __name__ == "__main__":
    from epigrid.logs import setup_main_logging
    setup_main_logging()
    df = run_sweep(n_runs=8, seed=42, out_csv="results.csv")
    print("Wrote", len(df), "rows to results.csv")
