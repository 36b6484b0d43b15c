"""Fixed-step integrators, one per animated scenario.

Each integrator advances a state by one tick using semi-implicit Euler:
velocity first, then position from the updated velocity, then elapsed
time. ``tick`` returns the new state and whether the run should continue.
"""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Callable, ClassVar, Optional

from . import formulas
from .config import PHYSICS_CFG, SIM_CFG, PhysicsCfg, SimulationCfg
from .model import (
    CircularParams,
    CircularState,
    InclineParams,
    InclineState,
    LensingParams,
    OrbitalParams,
    OrbitalState,
    PendulumParams,
    PendulumState,
    ProjectileParams,
    ProjectileState,
    ScenarioKind,
    ScenarioParameters,
    ScenarioState,
    StellarParams,
    StopReason,
)

Derived = dict[str, Optional[float]]


class Integrator:
    """Scenario-specific tick function plus its derived quantities."""

    kind: ClassVar[ScenarioKind]
    stop_reason: ClassVar[StopReason]

    def __init__(self, physics: PhysicsCfg = PHYSICS_CFG, sim: SimulationCfg = SIM_CFG) -> None:
        self.physics = physics
        self.sim = sim

    def initial_state(self, params: ScenarioParameters) -> ScenarioState:
        raise NotImplementedError

    def tick(self, state: ScenarioState, params: ScenarioParameters, dt: float) -> tuple[ScenarioState, bool]:
        raise NotImplementedError

    def derived(self, params: ScenarioParameters) -> Derived:
        raise NotImplementedError


class InclineIntegrator(Integrator):
    kind = ScenarioKind.INCLINE
    stop_reason = StopReason.TARGET_REACHED

    def initial_state(self, params: InclineParams) -> InclineState:
        return InclineState()

    def tick(self, state: InclineState, params: InclineParams, dt: float) -> tuple[InclineState, bool]:
        a = formulas.incline_acceleration(math.radians(params.angle), params.friction, self.physics)
        v = state.v + a * dt
        x = state.x + v * dt
        t = state.t + dt
        if x >= self.sim.ramp_length:
            return InclineState(t=t, x=self.sim.ramp_length, v=v), False
        return InclineState(t=t, x=x, v=v), True

    def derived(self, params: InclineParams) -> Derived:
        theta = math.radians(params.angle)
        a = formulas.incline_acceleration(theta, params.friction, self.physics)
        return {
            "acceleration": a,
            "time_to_target": formulas.incline_time_to_travel(
                self.sim.ramp_length, theta, params.friction, self.physics
            ),
            "speed_at_target": math.sqrt(2.0 * a * self.sim.ramp_length),
            "ramp_length": self.sim.ramp_length,
        }


class ProjectileIntegrator(Integrator):
    """Position is analytic in ``t``; only elapsed time is integrated."""

    kind = ScenarioKind.PROJECTILE
    stop_reason = StopReason.TARGET_REACHED

    def initial_state(self, params: ProjectileParams) -> ProjectileState:
        return ProjectileState()

    def tick(self, state: ProjectileState, params: ProjectileParams, dt: float) -> tuple[ProjectileState, bool]:
        theta = math.radians(params.angle)
        t = state.t + dt
        x = formulas.projectile_x(params.speed, theta, t)
        y = formulas.projectile_height(params.speed, theta, t, self.physics)
        if y < 0.0:
            hit = abs(x - self.sim.projectile_target_x) <= self.sim.projectile_target_tolerance
            return ProjectileState(t=t, x=x, y=y, landed=True, target_hit=hit), False
        return ProjectileState(t=t, x=x, y=y), True

    def derived(self, params: ProjectileParams) -> Derived:
        theta = math.radians(params.angle)
        return {
            "range": formulas.projectile_range(params.speed, theta, self.physics),
            "flight_time": formulas.projectile_flight_time(params.speed, theta, self.physics),
            "max_height": formulas.projectile_max_height(params.speed, theta, self.physics),
            "acceleration": self.physics.g,
            "target_x": self.sim.projectile_target_x,
        }

    def trajectory(self, params: ProjectileParams):
        return formulas.projectile_trajectory(
            params.speed,
            math.radians(params.angle),
            self.sim.trajectory_step,
            self.sim.trajectory_samples,
            self.physics,
        )


class PendulumIntegrator(Integrator):
    kind = ScenarioKind.PENDULUM
    stop_reason = StopReason.TIME_LIMIT_EXCEEDED

    def initial_state(self, params: PendulumParams) -> PendulumState:
        return PendulumState(theta=math.radians(params.initial_angle))

    def tick(self, state: PendulumState, params: PendulumParams, dt: float) -> tuple[PendulumState, bool]:
        alpha = formulas.pendulum_angular_accel(state.theta, params.length, self.physics)
        omega = state.omega + alpha * dt
        theta = state.theta + omega * dt
        t = state.t + dt
        limit = self.sim.pendulum_period_limit * formulas.pendulum_period(params.length, self.physics)
        return PendulumState(t=t, theta=theta, omega=omega), not t > limit

    def derived(self, params: PendulumParams) -> Derived:
        theta0 = math.radians(params.initial_angle)
        return {
            "period": formulas.pendulum_period(params.length, self.physics),
            "angular_frequency": math.sqrt(self.physics.g / params.length),
            "acceleration": abs(formulas.pendulum_angular_accel(theta0, params.length, self.physics)) * params.length,
        }


class CircularIntegrator(Integrator):
    kind = ScenarioKind.CIRCULAR
    stop_reason = StopReason.TIME_LIMIT_EXCEEDED

    def initial_state(self, params: CircularParams) -> CircularState:
        return CircularState()

    def tick(self, state: CircularState, params: CircularParams, dt: float) -> tuple[CircularState, bool]:
        omega = formulas.angular_speed(params.speed, params.radius)
        t = state.t + dt
        new_state = replace(state, phase=state.phase + omega * dt, t=t)
        limit = self.sim.circular_period_limit * formulas.circular_period(params.speed, params.radius)
        return new_state, not t > limit

    def derived(self, params: CircularParams) -> Derived:
        return {
            "acceleration": formulas.centripetal_acceleration(params.speed, params.radius),
            "period": formulas.circular_period(params.speed, params.radius),
            "angular_speed": formulas.angular_speed(params.speed, params.radius),
        }


class OrbitalIntegrator(Integrator):
    """Animates a circular orbit; the phase rate is a display scaling."""

    kind = ScenarioKind.ORBITAL
    stop_reason = StopReason.TIME_LIMIT_EXCEEDED

    def initial_state(self, params: OrbitalParams) -> OrbitalState:
        return OrbitalState()

    def tick(self, state: OrbitalState, params: OrbitalParams, dt: float) -> tuple[OrbitalState, bool]:
        omega = formulas.orbital_display_angular_speed(params.speed, params.radius, self.physics)
        t = state.t + dt
        new_state = replace(state, phase=state.phase + omega * dt, t=t)
        limit = self.sim.orbital_period_limit * formulas.orbital_period(params.radius, self.physics)
        return new_state, not t > limit

    def derived(self, params: OrbitalParams) -> Derived:
        r_m = params.radius * self.physics.astronomical_unit
        v_ms = params.speed * 1_000.0
        return {
            "period": formulas.orbital_period(params.radius, self.physics),
            "period_years": formulas.orbital_period_years(params.radius, self.physics),
            "acceleration": formulas.centripetal_acceleration(v_ms, r_m),
            "angular_speed": formulas.orbital_display_angular_speed(params.speed, params.radius, self.physics),
        }


def lensing_derived(params: LensingParams, physics: PhysicsCfg = PHYSICS_CFG) -> Derived:
    deflection = formulas.deflection_angle(params.lens_strength, params.source_distance, physics)
    return {
        "deflection_angle": deflection,
        "einstein_ring": formulas.einstein_ring_visible(deflection, physics),
    }


def stellar_derived(params: StellarParams, physics: PhysicsCfg = PHYSICS_CFG) -> Derived:
    return {
        "luminosity": formulas.stellar_luminosity(params.mass, physics),
        "lifespan": formulas.stellar_lifespan(params.mass, physics),
    }


INTEGRATORS: dict[ScenarioKind, type[Integrator]] = {
    cls.kind: cls
    for cls in (
        InclineIntegrator,
        ProjectileIntegrator,
        PendulumIntegrator,
        CircularIntegrator,
        OrbitalIntegrator,
    )
}

STATIC_DERIVED: dict[ScenarioKind, Callable[[ScenarioParameters, PhysicsCfg], Derived]] = {
    ScenarioKind.LENSING: lensing_derived,
    ScenarioKind.STELLAR: stellar_derived,
}


__all__ = [
    "CircularIntegrator",
    "Derived",
    "INTEGRATORS",
    "InclineIntegrator",
    "Integrator",
    "OrbitalIntegrator",
    "PendulumIntegrator",
    "ProjectileIntegrator",
    "STATIC_DERIVED",
    "lensing_derived",
    "stellar_derived",
]
