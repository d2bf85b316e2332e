"""
Run the reference epidemic (1000 people, all moving, 120 days, 2 week
recovery) or a num_moving sweep, and write CSV + PNG outputs.

  python run_example.py                      # single run
  python run_example.py --render             # with live frames
  python run_example.py --sweep --runs 8 --workers 4
"""

import argparse
import logging

from epigrid.config import DEFAULTS, HOURS_PER_DAY, SimulationConfig
from epigrid.logs import setup_main_logging
from epigrid.sim import simulate, summarize
from plot_results import FrameRenderer, make_grid, plot_time_series
from sweep import run_sweep

logger = logging.getLogger("run_example")


def build_parser():
    p = argparse.ArgumentParser(description="Grid random-walk epidemic simulation")
    p.add_argument("--num-people", type=int, default=DEFAULTS["num_people"])
    p.add_argument("--num-moving", type=int, default=DEFAULTS["num_moving"])
    p.add_argument("--num-hours", type=int, default=DEFAULTS["num_hours"])
    p.add_argument("--res", type=int, default=DEFAULTS["res"], help="Grid resolution")
    p.add_argument("--recovery-time", type=int, default=DEFAULTS["recovery_time"],
                   help="Hours until an infected person recovers")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--method", choices=["kdtree", "dense"], default=DEFAULTS["method"])
    p.add_argument("--render", action="store_true", help="Draw a frame every hour")
    p.add_argument("--frame-delay", type=float, default=0.0, help="Seconds to pause per frame")
    p.add_argument("--frames-dir", type=str, default=None, help="Save frames here")
    p.add_argument("--out-csv", type=str, default="timeseries.csv")
    p.add_argument("--out-png", type=str, default="timeseries.png")
    p.add_argument("--sweep", action="store_true", help="Sweep num_moving instead of a single run")
    p.add_argument("--runs", type=int, default=8, help="Runs per parameter value (sweep)")
    p.add_argument("--workers", type=int, default=1, help="Parallel processes (sweep)")
    p.add_argument("--log-dir", type=str, default="logs")
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    setup_main_logging(args.log_dir)

    if args.sweep:
        df = run_sweep(n_runs=args.runs, seed=args.seed or 0, out_csv=args.out_csv,
                       n_workers=args.workers, log_dir=args.log_dir)
        png = make_grid(df, out_png=args.out_png)
        logger.info("Wrote %s and %s", args.out_csv, png)
        return df

    cfg = SimulationConfig(
        num_people=args.num_people, num_moving=args.num_moving, num_hours=args.num_hours,
        res=args.res, recovery_time=args.recovery_time, seed=args.seed, method=args.method,
    ).validate()

    renderer = FrameRenderer(out_dir=args.frames_dir, show=args.frames_dir is None) if args.render else None
    try:
        series = simulate(
            **cfg.as_kwargs(),
            renderer=renderer,
            frame_delay=args.frame_delay,
            reporter=lambda s: plot_time_series(s, out_png=args.out_png),
            progress_every=HOURS_PER_DAY * 10,
        )
    finally:
        if renderer is not None:
            renderer.close()

    series.to_frame().to_csv(args.out_csv)
    for key, val in summarize(series).items():
        logger.info("%s: %s", key, val)
    logger.info("Wrote %s and %s", args.out_csv, args.out_png)
    return series


if __name__ == "__main__":
    main()
