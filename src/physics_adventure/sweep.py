"""Parameter sweeps that answer the mechanics challenges numerically."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .core.config import SIM_CFG
from .core.controller import RunController, create_scenario
from .core.logging_utils import setup_logging
from .core.model import INCLINE_RANGES, PROJECTILE_RANGES
from .core.timekeeping import ManualScheduler

logger = logging.getLogger(__name__)

FIGURES_DIR = Path("figures")
ANGLE_POINTS = 17
SECOND_AXIS_POINTS = 13
MAX_TICKS = SIM_CFG.ticks_for(60.0)


def simulate(kind: str, max_ticks: int = MAX_TICKS, **params: float) -> RunController:
    """Run one scenario headless on a manual clock and return it stopped."""

    scheduler = ManualScheduler()
    scenario = create_scenario(kind, scheduler, **params)
    scenario.start()
    scheduler.advance(max_ticks)
    if scenario.status().is_running:
        scenario.stop()
    return scenario


def sweep_projectile(angle_points: int = ANGLE_POINTS, speed_points: int = SECOND_AXIS_POINTS):
    """Simulated landing distance for each (angle, speed) pair."""

    angles = np.linspace(PROJECTILE_RANGES["angle"].lo, PROJECTILE_RANGES["angle"].hi, angle_points)
    speeds = np.linspace(PROJECTILE_RANGES["speed"].lo, PROJECTILE_RANGES["speed"].hi, speed_points)
    results = np.zeros((angles.size, speeds.size), dtype=float)
    for i, angle in enumerate(angles):
        for j, speed in enumerate(speeds):
            results[i, j] = simulate("projectile", angle=angle, speed=speed).state().x
        logger.info("projectile sweep: %d/%d angles done", i + 1, angles.size)
    return angles, speeds, results


def sweep_incline(angle_points: int = ANGLE_POINTS, friction_points: int = SECOND_AXIS_POINTS):
    """Simulated time to the end of the ramp; NaN where the block never moves."""

    angles = np.linspace(INCLINE_RANGES["angle"].lo, INCLINE_RANGES["angle"].hi, angle_points)
    frictions = np.linspace(INCLINE_RANGES["friction"].lo, INCLINE_RANGES["friction"].hi, friction_points)
    results = np.full((angles.size, frictions.size), np.nan)
    for i, angle in enumerate(angles):
        for j, mu in enumerate(frictions):
            scenario = simulate("incline", angle=angle, friction=mu)
            if scenario.state().x >= scenario.sim.ramp_length:
                results[i, j] = scenario.state().t
        logger.info("incline sweep: %d/%d angles done", i + 1, angles.size)
    return angles, frictions, results


def plot_heatmap(
    out: Path,
    x_values: np.ndarray,
    angles: np.ndarray,
    results: np.ndarray,
    xlabel: str,
    cbar_label: str,
    title: str,
) -> Path:
    out.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots(figsize=(8, 5))
    extent = [x_values.min(), x_values.max(), angles.min(), angles.max()]
    im = ax.imshow(np.ma.masked_invalid(results), origin="lower", extent=extent, aspect="auto", cmap="viridis")
    cbar = fig.colorbar(im)
    cbar.set_label(cbar_label)
    ax.set_xlabel(xlabel)
    ax.set_ylabel("Angle [°]")
    ax.set_title(title)
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def best_projectile_angle(angles: np.ndarray, results: np.ndarray) -> float:
    """Angle with the longest mean simulated range over all speeds."""

    return float(angles[int(np.argmax(results.mean(axis=1)))])


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Sweep scenario parameters and plot the outcome.")
    parser.add_argument("scenario", choices=["projectile", "incline"])
    parser.add_argument("--out", default=str(FIGURES_DIR), help="Directory for the heatmap")
    parser.add_argument("--points", type=int, default=ANGLE_POINTS, help="Samples along the angle axis")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    if args.points < 2:
        parser.error("--points must be at least 2")
    if args.verbose:
        setup_logging(logging.INFO)

    out_dir = Path(args.out)
    if args.scenario == "projectile":
        angles, speeds, results = sweep_projectile(args.points)
        out = plot_heatmap(
            out_dir / "projectile_range.png",
            speeds,
            angles,
            results,
            "Launch speed [m/s]",
            "Landing distance [m]",
            "Simulated range per launch angle and speed",
        )
        print(f"Longest mean range at {best_projectile_angle(angles, results):.1f}°")
    else:
        angles, frictions, results = sweep_incline(args.points)
        out = plot_heatmap(
            out_dir / "incline_time.png",
            frictions,
            angles,
            results,
            "Friction μ",
            "Time to target [s]",
            "Simulated time to the end of the ramp",
        )
        stuck = int(np.isnan(results).sum())
        print(f"{stuck} of {results.size} configurations never leave the start")
    print(f"Heatmap saved to {out}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
