"""Closed-form physics helpers for the sandbox scenarios.

Every function here is pure: angles are in radians unless the name says
otherwise, and the parameter ranges enforced by :mod:`.model` keep every
denominator bounded away from zero.
"""
from __future__ import annotations

import math

import numpy as np

from .config import PHYSICS_CFG, PhysicsCfg


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* between *lo* and *hi*."""

    return max(lo, min(hi, value))


# --- Incline -----------------------------------------------------------------


def incline_acceleration(theta: float, mu: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Acceleration along a ramp of angle ``theta`` with kinetic friction ``mu``.

    ``a = g(sin θ - μ cos θ)``, floored at zero: once friction cancels the
    gravity component the block stays put instead of sliding uphill.
    """

    a = cfg.g * (math.sin(theta) - mu * math.cos(theta))
    return max(0.0, a)


def incline_time_to_travel(distance: float, theta: float, mu: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float | None:
    """Time to slide ``distance`` from rest, or ``None`` if the block never moves."""

    a = incline_acceleration(theta, mu, cfg)
    if a <= 0.0:
        return None
    return math.sqrt(2.0 * distance / a)


# --- Projectile --------------------------------------------------------------


def projectile_height(v0: float, theta: float, t: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return v0 * math.sin(theta) * t - 0.5 * cfg.g * t * t


def projectile_x(v0: float, theta: float, t: float) -> float:
    return v0 * math.cos(theta) * t


def projectile_range(v0: float, theta: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Vacuum range ``v0² sin 2θ / g`` on level ground."""

    return v0 * v0 * math.sin(2.0 * theta) / cfg.g


def projectile_flight_time(v0: float, theta: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return 2.0 * v0 * math.sin(theta) / cfg.g


def projectile_max_height(v0: float, theta: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    vy = v0 * math.sin(theta)
    return vy * vy / (2.0 * cfg.g)


def projectile_trajectory(
    v0: float,
    theta: float,
    step: float = 0.05,
    samples: int = 100,
    cfg: PhysicsCfg = PHYSICS_CFG,
) -> tuple[np.ndarray, np.ndarray]:
    """Sample the flight path every ``step`` seconds, keeping points above ground."""

    t = np.arange(samples + 1, dtype=float) * step
    x = v0 * math.cos(theta) * t
    y = v0 * math.sin(theta) * t - 0.5 * cfg.g * t * t
    above = y >= 0.0
    return x[above], y[above]


# --- Pendulum ----------------------------------------------------------------


def pendulum_angular_accel(theta: float, length: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Full nonlinear pendulum: ``α = -(g/L) sin θ``."""

    return -(cfg.g / length) * math.sin(theta)


def pendulum_period(length: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Small-angle period ``2π√(L/g)``.

    This is the displayed period and the run's time bound. It is knowingly
    shorter than the true period of the nonlinear swing at large amplitudes.
    """

    return 2.0 * math.pi * math.sqrt(length / cfg.g)


def pendulum_bob_position(theta: float, length: float) -> tuple[float, float]:
    """Bob position relative to the pivot, ``y`` measured downward."""

    return length * math.sin(theta), length * math.cos(theta)


# --- Circular motion ---------------------------------------------------------


def centripetal_acceleration(v: float, r: float) -> float:
    return v * v / r


def circular_period(v: float, r: float) -> float:
    return 2.0 * math.pi * r / v


def angular_speed(v: float, r: float) -> float:
    return v / r


# --- Astronomy ---------------------------------------------------------------


def orbital_period(radius_au: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Kepler's third law for a circular solar orbit, in seconds."""

    r = radius_au * cfg.astronomical_unit
    return 2.0 * math.pi * math.sqrt(r**3 / cfg.mu_sun)


def orbital_period_years(radius_au: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    return orbital_period(radius_au, cfg) / cfg.seconds_per_year


def orbital_display_angular_speed(speed_kms: float, radius_au: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Angular speed that drives the orbit animation (scaled, not physical)."""

    return speed_kms / (radius_au * cfg.orbital_display_scale)


def deflection_angle(lens_strength: float, distance: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Toy lensing model: linear in lens strength, inverse in source distance.

    Not general-relativistic; the result is in degrees.
    """

    return lens_strength * cfg.lensing_reference_deflection / distance


def einstein_ring_visible(deflection: float, cfg: PhysicsCfg = PHYSICS_CFG) -> bool:
    return abs(deflection) > cfg.einstein_ring_threshold


def stellar_luminosity(mass: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Main-sequence luminosity in solar units, ``L ∝ M^3.5``."""

    return mass**cfg.luminosity_exponent


def stellar_lifespan(mass: float, cfg: PhysicsCfg = PHYSICS_CFG) -> float:
    """Main-sequence lifetime in billions of years, ``t ∝ M/L ∝ M^-2.5``."""

    return cfg.sun_lifespan_gyr * mass**cfg.lifespan_exponent


__all__ = [
    "angular_speed",
    "centripetal_acceleration",
    "circular_period",
    "clamp",
    "deflection_angle",
    "einstein_ring_visible",
    "incline_acceleration",
    "incline_time_to_travel",
    "orbital_display_angular_speed",
    "orbital_period",
    "orbital_period_years",
    "pendulum_angular_accel",
    "pendulum_bob_position",
    "pendulum_period",
    "projectile_flight_time",
    "projectile_height",
    "projectile_max_height",
    "projectile_range",
    "projectile_trajectory",
    "projectile_x",
    "stellar_lifespan",
    "stellar_luminosity",
]
