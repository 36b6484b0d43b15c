"""Exceptions raised by the simulation core."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .model import RunStatus


class SimulationError(Exception):
    """Base exception for simulation-related errors."""


class InvalidTransition(SimulationError):
    """A lifecycle call that is not allowed from the current run status."""

    def __init__(self, current: "RunStatus", requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"cannot {requested}() while {current}")


class ScenarioClosedError(SimulationError):
    """Raised by lifecycle calls on a scenario that has been closed."""


class ParameterError(SimulationError):
    """Base class for rejected parameter writes."""


class UnknownParameterError(ParameterError, KeyError):
    def __init__(self, scenario: str, name: str) -> None:
        self.scenario = scenario
        self.name = name
        super().__init__(f"{scenario} has no parameter {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class ParameterValueError(ParameterError, ValueError):
    pass


__all__ = [
    "InvalidTransition",
    "ParameterError",
    "ParameterValueError",
    "ScenarioClosedError",
    "SimulationError",
    "UnknownParameterError",
]
