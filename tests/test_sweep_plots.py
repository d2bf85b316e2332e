import os

import pandas as pd
import pytest

from epigrid.sim import simulate
from plot_results import FrameRenderer, make_grid, plot_time_series
from sweep import METRICS, make_tasks, run_sweep

TINY = dict(num_people=20, num_hours=30, res=10, recovery_time=6)


def test_tasks_are_seeded_reproducibly():
    a = make_tasks(3, seed=42, ranges={"num_moving": [0, 10]}, defaults=TINY)
    b = make_tasks(3, seed=42, ranges={"num_moving": [0, 10]}, defaults=TINY)
    assert len(a) == 6
    assert [t[3] for t in a] == [t[3] for t in b]
    assert len({t[3] for t in a}) == 6
    assert a[0][4]["num_people"] == 20


def test_run_sweep_rows_and_csv(tmp_path):
    out_csv = tmp_path / "results.csv"
    df = run_sweep(n_runs=2, seed=1, out_csv=str(out_csv),
                   ranges={"num_moving": [0, 20]}, defaults=TINY)
    assert len(df) == 4
    for col in METRICS + ["param_name", "param_value", "run", "seed"]:
        assert col in df.columns
    assert set(df["param_value"]) == {0, 20}
    assert (df["total_infected"] >= 1).all()
    assert (df["total_infected"] <= 20).all()

    back = pd.read_csv(out_csv)
    assert len(back) == 4

    again = run_sweep(n_runs=2, seed=1, out_csv=None,
                      ranges={"num_moving": [0, 20]}, defaults=TINY)
    pd.testing.assert_frame_equal(df, again)


def test_process_pool_matches_sequential(tmp_path):
    ranges = {"num_moving": [0, 20]}
    seq = run_sweep(n_runs=2, seed=9, out_csv=None, ranges=ranges, defaults=TINY)
    par = run_sweep(n_runs=2, seed=9, out_csv=None, ranges=ranges, defaults=TINY,
                    n_workers=2, log_dir=str(tmp_path / "logs"))
    pd.testing.assert_frame_equal(seq, par)
    worker_logs = [n for n in os.listdir(tmp_path / "logs") if n.startswith("worker-")]
    assert worker_logs


def test_failed_runs_are_skipped():
    # num_moving > num_people is rejected, the other value still runs
    df = run_sweep(n_runs=1, seed=0, out_csv=None,
                   ranges={"num_moving": [5, 50]}, defaults=TINY)
    assert list(df["param_value"]) == [5]


def test_make_grid_writes_png(tmp_path):
    df = run_sweep(n_runs=2, seed=3, out_csv=None,
                   ranges={"num_moving": [0, 20], "recovery_time": [3, 6]},
                   defaults=dict(TINY, num_moving=20))
    assert set(df["param_name"]) == {"num_moving", "recovery_time"}
    out = make_grid(df, out_png=str(tmp_path / "grid.png"))
    assert os.path.getsize(out) > 0


def test_plot_time_series(tmp_path):
    series = simulate(seed=0, num_moving=20, **TINY)
    out = plot_time_series(series, out_png=str(tmp_path / "ts.png"))
    assert os.path.getsize(out) > 0


def test_frame_renderer_saves_frames(tmp_path):
    frames = tmp_path / "frames"
    renderer = FrameRenderer(out_dir=str(frames), show=False, every=10)
    try:
        simulate(seed=0, num_moving=20, renderer=renderer, **TINY)
    finally:
        renderer.close()
    names = sorted(os.listdir(frames))
    assert names == ["frame_00000.png", "frame_00010.png", "frame_00020.png"]


def test_frame_renderer_every_must_be_positive():
    r = FrameRenderer(show=False, every=0)
    assert r.every == 1
    r.close()
