"""Run sandbox scenarios without a UI and summarise the result."""
from __future__ import annotations

import argparse
import logging
import math
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt

from .core.config import SIM_CFG
from .core.controller import RunController, ScenarioBase, create_scenario
from .core.errors import SimulationError
from .core.logging_utils import setup_logging
from .core.model import ScenarioKind
from .core.timekeeping import ManualScheduler, RealTimeScheduler, Scheduler
from .data.scenarios import SCENARIO_DEFINITIONS, SCENARIOS, STELLAR_STAGES

DEFAULT_MAX_TICKS = SIM_CFG.ticks_for(60.0)


def parse_assignments(values: Sequence[str]) -> Dict[str, str]:
    overrides: Dict[str, str] = {}
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name:
            raise ValueError(f"expected name=value, got {item!r}")
        overrides[name.strip()] = value.strip()
    return overrides


def record_trace(scenario: RunController) -> List[dict]:
    """Collect a state snapshot after every tick (kept in memory only)."""

    trace: List[dict] = []
    last_tick = [-1]

    def on_change(sc: ScenarioBase) -> None:
        if sc.ticks != last_tick[0]:
            last_tick[0] = sc.ticks
            trace.append(sc.state().as_dict())

    scenario.subscribe(on_change)
    return trace


def run_scenario(scenario: RunController, max_ticks: int) -> int:
    """Start ``scenario`` and drive its scheduler; stop it at ``max_ticks``."""

    scenario.start()
    scheduler = scenario.scheduler
    if isinstance(scheduler, RealTimeScheduler):
        scheduler.run(max_calls=max_ticks)
    elif isinstance(scheduler, ManualScheduler):
        scheduler.advance(max_ticks)
    else:
        raise TypeError(f"unsupported scheduler {type(scheduler).__name__}")
    if scenario.status().is_running:
        scenario.stop()
    return scenario.ticks


def trace_columns(trace: List[dict]) -> Dict[str, np.ndarray]:
    if not trace:
        return {}
    return {key: np.asarray([row[key] for row in trace], dtype=float) for key in trace[0]}


def plot_trace(path: Path, scenario: RunController, trace: List[dict]) -> None:
    ts = trace_columns(trace)
    if not ts:
        raise ValueError("nothing to plot: the run produced no ticks")
    params = scenario.get_parameters()
    kind = scenario.kind

    fig, ax = plt.subplots(figsize=(7, 4))
    if kind is ScenarioKind.INCLINE:
        ax.plot(ts["t"], ts["x"], color="#4dabf7", label="x [m]")
        ax.plot(ts["t"], ts["v"], color="#ffa94d", label="v [m/s]")
        ax.set_xlabel("t [s]")
        ax.set_title(f"Ramp: {params.angle:.0f}°, μ = {params.friction:.2f}")
        ax.legend()
    elif kind is ScenarioKind.PROJECTILE:
        ax.plot(ts["x"], ts["y"], color="#6bc5c0", lw=1.5)
        ax.axhline(0.0, color="#8d6e63", alpha=0.5)
        ax.scatter([scenario.sim.projectile_target_x], [0.0], color="#f76707", s=60, label="Target")
        ax.set_xlabel("x [m]")
        ax.set_ylabel("y [m]")
        ax.set_title(f"Projectile: {params.angle:.0f}°, {params.speed:.1f} m/s")
        ax.legend()
    elif kind is ScenarioKind.PENDULUM:
        ax.plot(ts["t"], np.degrees(ts["theta"]), color="#9775fa")
        ax.set_xlabel("t [s]")
        ax.set_ylabel("θ [°]")
        ax.set_title(f"Pendulum: L = {params.length:.1f} m")
    else:
        radius = params.radius
        ax.plot(radius * np.cos(ts["phase"]), radius * np.sin(ts["phase"]), color="#94d82d")
        ax.scatter([0.0], [0.0], color="#ffd43b", s=60)
        ax.set_aspect("equal", "box")
        ax.set_title(f"{kind.value.capitalize()}: r = {radius:.1f}, v = {params.speed:.1f}")
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    fig.savefig(path, dpi=150)
    plt.close(fig)


def format_value(value: Optional[float]) -> str:
    if value is None:
        return "n/a"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if math.isfinite(value) and (abs(value) >= 1e5 or 0 < abs(value) < 1e-3):
        return f"{value:.4e}"
    return f"{value:.4f}"


def print_summary(scenario: ScenarioBase) -> None:
    info = SCENARIOS[scenario.kind.value]
    print(f"{info.level}: {info.name}")
    print(" Parameters:")
    for name, value in scenario.get_parameters().as_dict().items():
        print(f"  {name} = {format_value(value)}")
    print(" Derived:")
    for name, value in scenario.derived().items():
        print(f"  {name} = {format_value(value)}")
    if scenario.kind is ScenarioKind.STELLAR:
        print(" Stages:")
        for stage in STELLAR_STAGES:
            print(f"  {stage.name}: {stage.process}; {stage.traits}")
    if isinstance(scenario, RunController):
        print(f" Status: {scenario.status()} after {scenario.ticks} ticks")
        print(" Final state:")
        for name, value in scenario.state().as_dict().items():
            print(f"  {name} = {format_value(value)}")


def cmd_list(args: argparse.Namespace) -> int:
    for info in SCENARIO_DEFINITIONS:
        print(f"{info.key:<11} {info.level:<12} {info.name}")
        print(f"{'':<11} {info.description}")
        if args.challenges:
            print(f"{'':<11} Q: {info.question}")
            print(f"{'':<11} A: {info.answer}")
            print(f"{'':<11} {info.insight_title}: {info.insight}")
            print(f"{'':<11} Learn more: {info.lecture} <{info.lecture_url}>")
    return 0


def cmd_run(args: argparse.Namespace, parser: argparse.ArgumentParser) -> int:
    try:
        overrides = parse_assignments(args.set or [])
    except ValueError as err:
        parser.error(str(err))

    scheduler: Scheduler
    if args.realtime:
        scheduler = RealTimeScheduler(late_warning=SIM_CFG.late_tick_warning)
    else:
        scheduler = ManualScheduler()
    try:
        scenario = create_scenario(args.kind, scheduler, **overrides)
    except SimulationError as err:
        parser.error(str(err))

    with scenario:
        if not isinstance(scenario, RunController):
            print_summary(scenario)
            return 0
        trace = record_trace(scenario)
        run_scenario(scenario, args.max_ticks)
        print_summary(scenario)
        if args.plot:
            plot_trace(Path(args.plot), scenario, trace)
            print(f"Figure saved to {args.plot}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run physics sandbox scenarios headless.")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="-v for info, -vv for debug")
    sub = parser.add_subparsers(dest="command", required=True)

    list_parser = sub.add_parser("list", help="List the available scenarios")
    list_parser.add_argument("--challenges", action="store_true", help="Include challenge questions")

    run_parser = sub.add_parser("run", help="Run one scenario to completion")
    run_parser.add_argument("kind", choices=[kind.value for kind in ScenarioKind])
    run_parser.add_argument("--set", action="append", metavar="NAME=VALUE", help="Override a parameter")
    run_parser.add_argument("--max-ticks", type=int, default=DEFAULT_MAX_TICKS)
    run_parser.add_argument("--realtime", action="store_true", help="Pace ticks on the wall clock")
    run_parser.add_argument("--plot", metavar="PATH", help="Save a figure of the run")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.verbose:
        setup_logging(logging.DEBUG if args.verbose > 1 else logging.INFO)
    if args.command == "list":
        return cmd_list(args)
    return cmd_run(args, parser)


if __name__ == "__main__":
    raise SystemExit(main())
