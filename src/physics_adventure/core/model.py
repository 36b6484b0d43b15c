"""Data models for scenario parameters, simulation state and run status."""
from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from enum import Enum
from typing import ClassVar, Optional

from .errors import ParameterValueError, UnknownParameterError
from .formulas import clamp, pendulum_bob_position


class ScenarioKind(Enum):
    INCLINE = "incline"
    PROJECTILE = "projectile"
    PENDULUM = "pendulum"
    CIRCULAR = "circular"
    ORBITAL = "orbital"
    LENSING = "lensing"
    STELLAR = "stellar"

    @property
    def animated(self) -> bool:
        return self not in (ScenarioKind.LENSING, ScenarioKind.STELLAR)


class RunPhase(Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class StopReason(Enum):
    USER_REQUESTED = "user_requested"
    TARGET_REACHED = "target_reached"
    TIME_LIMIT_EXCEEDED = "time_limit_exceeded"


@dataclass(frozen=True)
class RunStatus:
    """Lifecycle status; ``reason`` is set only while stopped."""

    phase: RunPhase
    reason: Optional[StopReason] = None

    @classmethod
    def stopped(cls, reason: StopReason) -> "RunStatus":
        return cls(RunPhase.STOPPED, reason)

    @property
    def is_running(self) -> bool:
        return self.phase is RunPhase.RUNNING

    def __str__(self) -> str:
        if self.reason is None:
            return self.phase.value
        return f"{self.phase.value}({self.reason.value})"


IDLE = RunStatus(RunPhase.IDLE)
RUNNING = RunStatus(RunPhase.RUNNING)


@dataclass(frozen=True)
class ParamRange:
    lo: float
    hi: float
    default: float
    unit: str = ""

    def clamp(self, value: float) -> float:
        return clamp(value, self.lo, self.hi)


# --- Parameters --------------------------------------------------------------


@dataclass
class ScenarioParameters:
    """User-editable inputs; every write is clamped into :attr:`RANGES`."""

    KIND: ClassVar[ScenarioKind]
    RANGES: ClassVar[dict[str, ParamRange]] = {}

    def __post_init__(self) -> None:
        for name in self.RANGES:
            self.set(name, getattr(self, name))

    def set(self, name: str, value: float) -> float:
        """Clamp and store ``value``; return what was actually stored."""

        bounds = self.RANGES.get(name)
        if bounds is None:
            raise UnknownParameterError(self.KIND.value, name)
        try:
            number = float(value)
        except (TypeError, ValueError) as err:
            raise ParameterValueError(f"{name}: expected a number, got {value!r}") from err
        if math.isnan(number):
            raise ParameterValueError(f"{name}: NaN is not a valid value")
        stored = bounds.clamp(number)
        setattr(self, name, stored)
        return stored

    def as_dict(self) -> dict[str, float]:
        return asdict(self)

    def copy(self) -> "ScenarioParameters":
        return replace(self)


INCLINE_RANGES = {
    "angle": ParamRange(5.0, 45.0, 20.0, "deg"),
    "friction": ParamRange(0.0, 0.2, 0.05),
    "mass": ParamRange(0.5, 5.0, 1.0, "kg"),
}

PROJECTILE_RANGES = {
    "angle": ParamRange(5.0, 85.0, 45.0, "deg"),
    "speed": ParamRange(10.0, 40.0, 20.0, "m/s"),
}

PENDULUM_RANGES = {
    "length": ParamRange(0.5, 2.5, 1.0, "m"),
    "initial_angle": ParamRange(5.0, 60.0, 30.0, "deg"),
}

CIRCULAR_RANGES = {
    "speed": ParamRange(5.0, 25.0, 10.0, "m/s"),
    "radius": ParamRange(1.0, 4.0, 2.0, "m"),
}

ORBITAL_RANGES = {
    "speed": ParamRange(5.0, 35.0, 7.8, "km/s"),
    "radius": ParamRange(0.4, 5.0, 1.0, "AU"),
}

LENSING_RANGES = {
    "lens_strength": ParamRange(0.5, 3.0, 1.0),
    "source_distance": ParamRange(0.5, 4.0, 2.0, "Mpc"),
}

STELLAR_RANGES = {
    "mass": ParamRange(0.5, 20.0, 1.0, "M_sun"),
}


@dataclass
class InclineParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.INCLINE
    RANGES: ClassVar[dict[str, ParamRange]] = INCLINE_RANGES

    angle: float = INCLINE_RANGES["angle"].default
    friction: float = INCLINE_RANGES["friction"].default
    # Cancels out of the translational acceleration; kept for the challenge.
    mass: float = INCLINE_RANGES["mass"].default


@dataclass
class ProjectileParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.PROJECTILE
    RANGES: ClassVar[dict[str, ParamRange]] = PROJECTILE_RANGES

    angle: float = PROJECTILE_RANGES["angle"].default
    speed: float = PROJECTILE_RANGES["speed"].default


@dataclass
class PendulumParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.PENDULUM
    RANGES: ClassVar[dict[str, ParamRange]] = PENDULUM_RANGES

    length: float = PENDULUM_RANGES["length"].default
    initial_angle: float = PENDULUM_RANGES["initial_angle"].default


@dataclass
class CircularParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.CIRCULAR
    RANGES: ClassVar[dict[str, ParamRange]] = CIRCULAR_RANGES

    speed: float = CIRCULAR_RANGES["speed"].default
    radius: float = CIRCULAR_RANGES["radius"].default


@dataclass
class OrbitalParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.ORBITAL
    RANGES: ClassVar[dict[str, ParamRange]] = ORBITAL_RANGES

    speed: float = ORBITAL_RANGES["speed"].default
    radius: float = ORBITAL_RANGES["radius"].default


@dataclass
class LensingParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.LENSING
    RANGES: ClassVar[dict[str, ParamRange]] = LENSING_RANGES

    lens_strength: float = LENSING_RANGES["lens_strength"].default
    source_distance: float = LENSING_RANGES["source_distance"].default


@dataclass
class StellarParams(ScenarioParameters):
    KIND: ClassVar[ScenarioKind] = ScenarioKind.STELLAR
    RANGES: ClassVar[dict[str, ParamRange]] = STELLAR_RANGES

    mass: float = STELLAR_RANGES["mass"].default


PARAMETER_TYPES: dict[ScenarioKind, type[ScenarioParameters]] = {
    cls.KIND: cls
    for cls in (
        InclineParams,
        ProjectileParams,
        PendulumParams,
        CircularParams,
        OrbitalParams,
        LensingParams,
        StellarParams,
    )
}


# --- State -------------------------------------------------------------------


@dataclass
class ScenarioState:
    """Mutable simulation variables; ``t`` is elapsed simulated time."""

    t: float = 0.0

    def copy(self) -> "ScenarioState":
        return replace(self)

    def as_dict(self) -> dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass
class InclineState(ScenarioState):
    x: float = 0.0
    v: float = 0.0


@dataclass
class ProjectileState(ScenarioState):
    x: float = 0.0
    y: float = 0.0
    landed: bool = False
    target_hit: bool = False


@dataclass
class PendulumState(ScenarioState):
    theta: float = 0.0
    omega: float = 0.0

    @property
    def angle_deg(self) -> float:
        return math.degrees(self.theta)

    def bob_position(self, length: float) -> tuple[float, float]:
        return pendulum_bob_position(self.theta, length)


@dataclass
class PhaseState(ScenarioState):
    phase: float = 0.0

    def position(self, radius: float) -> tuple[float, float]:
        return radius * math.cos(self.phase), radius * math.sin(self.phase)


@dataclass
class CircularState(PhaseState):
    pass


@dataclass
class OrbitalState(PhaseState):
    pass


__all__ = [
    "CircularParams",
    "CircularState",
    "IDLE",
    "InclineParams",
    "InclineState",
    "LensingParams",
    "OrbitalParams",
    "OrbitalState",
    "PARAMETER_TYPES",
    "ParamRange",
    "PendulumParams",
    "PendulumState",
    "PhaseState",
    "ProjectileParams",
    "ProjectileState",
    "RUNNING",
    "RunPhase",
    "RunStatus",
    "ScenarioKind",
    "ScenarioParameters",
    "ScenarioState",
    "StellarParams",
    "StopReason",
]
