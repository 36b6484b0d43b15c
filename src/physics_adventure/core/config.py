"""Configuration dataclasses for the physics sandbox."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PhysicsCfg:
    g: float = 9.81
    gravitational_constant: float = 6.674e-11
    sun_mass: float = 1.989e30
    astronomical_unit: float = 1.496e11
    seconds_per_year: float = 365.25 * 24 * 3600
    lensing_reference_deflection: float = 1.75
    # deflection in degrees above which the image wraps into an Einstein ring
    einstein_ring_threshold: float = 0.5
    sun_lifespan_gyr: float = 10.0
    luminosity_exponent: float = 3.5
    # km/s over AU -> displayed rad/s for the orbit animation
    orbital_display_scale: float = 149.6

    @property
    def mu_sun(self) -> float:
        return self.gravitational_constant * self.sun_mass

    @property
    def lifespan_exponent(self) -> float:
        return 1.0 - self.luminosity_exponent


@dataclass(frozen=True)
class SimulationCfg:
    dt: float = 1.0 / 60.0
    ramp_length: float = 5.0
    projectile_target_x: float = 40.0
    projectile_target_tolerance: float = 1.0
    trajectory_step: float = 0.05
    trajectory_samples: int = 100
    pendulum_period_limit: float = 3.0
    circular_period_limit: float = 3.0
    orbital_period_limit: float = 0.5
    log_every_ticks: int = 60
    late_tick_warning: float = 0.05

    def ticks_for(self, seconds: float) -> int:
        return int(round(seconds / self.dt))


PHYSICS_CFG = PhysicsCfg()
SIM_CFG = SimulationCfg()


__all__ = ["PHYSICS_CFG", "SIM_CFG", "PhysicsCfg", "SimulationCfg"]
