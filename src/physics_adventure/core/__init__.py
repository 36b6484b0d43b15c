"""Simulation core: formulas, scenario models, integrators and run loop."""

from .config import PHYSICS_CFG, SIM_CFG, PhysicsCfg, SimulationCfg
from .controller import RunController, ScenarioBase, StaticScenario, create_scenario
from .errors import (
    InvalidTransition,
    ParameterError,
    ParameterValueError,
    ScenarioClosedError,
    SimulationError,
    UnknownParameterError,
)
from .model import RunPhase, RunStatus, ScenarioKind, StopReason
from .timekeeping import ManualScheduler, RealTimeScheduler

__all__ = [
    "InvalidTransition",
    "ManualScheduler",
    "PHYSICS_CFG",
    "ParameterError",
    "ParameterValueError",
    "PhysicsCfg",
    "RealTimeScheduler",
    "RunController",
    "RunPhase",
    "RunStatus",
    "SIM_CFG",
    "ScenarioBase",
    "ScenarioClosedError",
    "ScenarioKind",
    "SimulationCfg",
    "SimulationError",
    "StaticScenario",
    "StopReason",
    "UnknownParameterError",
    "create_scenario",
]
