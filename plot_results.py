import os

import numpy as np
import pandas as pd
import matplotlib.pyplot as plt

from epigrid.config import HOURS_PER_DAY
from epigrid.population import HealthState

COLORS = {
    HealthState.INFECTED: "red",
    HealthState.UNINFECTED: "gray",
    HealthState.RECOVERED: "black",
}

METRICS = [
    ("peak_infected", "Peak infected"),
    ("peak_hour", "Peak hour"),
    ("total_infected", "Ever infected"),
    ("epidemic_hours", "Epidemic length (h)"),
]

LABELS = {
    "num_moving": "Moving\npeople",
    "recovery_time": "Recovery\ntime (h)",
    "num_people": "Population",
    "res": "Grid\nresolution",
}


class FrameRenderer:
    """
    Draws one frame per hour: every person as a square marker coloured by
    health state. Frames are shown interactively (plt.pause) and/or saved as
    frame_00000.png ... into out_dir.
    """

    def __init__(self, out_dir=None, show=True, every=1, figsize=(6, 6)):
        self.out_dir = out_dir
        self.show = show
        self.every = max(1, int(every))
        self.figsize = figsize
        self.fig = None
        self.ax = None
        if out_dir:
            os.makedirs(out_dir, exist_ok=True)

    def __call__(self, xcoords, ycoords, states, pixel, hour):
        if hour % self.every:
            return
        if self.fig is None:
            self.fig, self.ax = plt.subplots(figsize=self.figsize)
        ax = self.ax
        ax.clear()
        # marker side ~ one grid cell
        size = max(1.0, (pixel * self.figsize[0] * 72) ** 2)
        for state, color in COLORS.items():
            m = states == state
            if np.any(m):
                ax.scatter(xcoords[m], ycoords[m], s=size, c=color, marker="s", linewidths=0)
        ax.set_xlim(-pixel, 1 + pixel)
        ax.set_ylim(-pixel, 1 + pixel)
        ax.set_aspect("equal")
        ax.set_xticks([])
        ax.set_yticks([])
        ax.set_title(f"Hour {hour} (day {hour // HOURS_PER_DAY})")
        if self.out_dir:
            self.fig.savefig(os.path.join(self.out_dir, f"frame_{hour:05d}.png"), dpi=100)
        if self.show:
            plt.pause(0.001)

    def close(self):
        if self.fig is not None:
            plt.close(self.fig)
            self.fig = None
            self.ax = None


def plot_time_series(series, out_png="timeseries.png"):
    """Infected / uninfected / recovered counts over time, x axis in days."""
    days = np.arange(series.num_hours) / HOURS_PER_DAY
    fig, ax = plt.subplots(figsize=(8, 5))
    ax.plot(days, series.infected, color=COLORS[HealthState.INFECTED], label="Infected")
    ax.plot(days, series.uninfected, color=COLORS[HealthState.UNINFECTED], label="Uninfected")
    ax.plot(days, series.recovered, color=COLORS[HealthState.RECOVERED], label="Recovered")
    ax.set_xlabel("Day")
    ax.set_ylabel("People")
    ax.set_title(f"{series.num_people} people, {series.num_moving} moving, resolution {series.res}")
    ax.legend()
    fig.tight_layout()
    if out_png:
        fig.savefig(out_png, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out_png


def make_grid(df, out_png="figure.png"):
    """One column per swept parameter, one row per summary metric."""
    cols = list(dict.fromkeys(df["param_name"]))
    rows = METRICS
    nrows = len(rows)
    ncols = len(cols)

    fig, axes = plt.subplots(nrows, ncols, figsize=(3 * ncols + 1, 9), squeeze=False)

    for c, pname in enumerate(cols):
        sub = df[df["param_name"] == pname]
        values = sorted(sub["param_value"].unique())
        for r, (mkey, mlabel) in enumerate(rows):
            ax = axes[r, c]
            data = []
            means = []
            for v in values:
                d = sub[sub["param_value"] == v][mkey].values
                data.append(d)
                means.append(np.mean(d) if len(d) > 0 else np.nan)
            ax.boxplot(data, showfliers=False)
            ax.set_xticks(range(1, len(values) + 1))
            ax.set_xticklabels([str(v) for v in values])
            ax.plot(range(1, len(values) + 1), means, marker="^", color="red", markersize=5)
            if r == 0:
                ax.set_title(LABELS.get(pname, pname), fontsize=10)
            if c == 0:
                ax.set_ylabel(mlabel, fontsize=9)
            ax.tick_params(axis="both", labelsize=8)

    fig.tight_layout()
    fig.savefig(out_png, dpi=200, bbox_inches="tight")
    plt.close(fig)
    return out_png


if __name__ == "__main__":
    df = pd.read_csv("results.csv")
    out = make_grid(df, out_png="figure.png")
    print("Saved", out)
