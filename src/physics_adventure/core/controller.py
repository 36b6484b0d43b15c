"""Run-loop controller that owns a scenario's lifecycle.

A :class:`RunController` holds one scenario instance: its parameters, its
state and its :class:`~.model.RunStatus`. While running it asks the
injected scheduler for exactly one callback per ``dt``; each callback
applies one integrator tick and either reschedules or stops.
"""
from __future__ import annotations

import logging
import threading
import weakref
from typing import Callable, Optional

from .config import PHYSICS_CFG, SIM_CFG, PhysicsCfg, SimulationCfg
from .errors import InvalidTransition, ScenarioClosedError
from .integrators import INTEGRATORS, STATIC_DERIVED, Derived, Integrator
from .model import (
    IDLE,
    PARAMETER_TYPES,
    RUNNING,
    RunStatus,
    ScenarioKind,
    ScenarioParameters,
    ScenarioState,
    StopReason,
)
from .timekeeping import ManualScheduler, ScheduledCall, Scheduler

logger = logging.getLogger(__name__)

Listener = Callable[["ScenarioBase"], None]


class ScenarioBase:
    """Parameters, derived quantities and change notification."""

    def __init__(self, kind: ScenarioKind, params: ScenarioParameters) -> None:
        if params.KIND is not kind:
            raise TypeError(f"{type(params).__name__} does not belong to the {kind.value} scenario")
        self.kind = kind
        self._params = params
        self._lock = threading.Lock()
        self._listeners: list[Listener] = []
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get_parameters(self) -> ScenarioParameters:
        with self._lock:
            return self._params.copy()

    def set_parameter(self, name: str, value: float) -> float:
        """Clamp and store a parameter; takes effect from the next tick."""

        with self._lock:
            stored = self._params.set(name, value)
        if stored != float(value):
            logger.debug("%s.%s=%r clamped to %g", self.kind.value, name, value, stored)
        self._notify()
        return stored

    def derived(self) -> Derived:
        return self._derive(self.get_parameters())

    def _derive(self, params: ScenarioParameters) -> Derived:
        raise NotImplementedError

    def status(self) -> RunStatus:
        return IDLE

    def subscribe(self, callback: Listener) -> Callable[[], None]:
        """Call ``callback(scenario)`` after every change; returns an unsubscribe."""

        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        for callback in list(self._listeners):
            callback(self)

    def close(self) -> None:
        self._closed = True
        self._listeners.clear()

    def __enter__(self) -> "ScenarioBase":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


class StaticScenario(ScenarioBase):
    """Formula-only scenario (stellar evolution, lensing): no ticks, no run."""

    def __init__(
        self,
        kind: ScenarioKind,
        params: Optional[ScenarioParameters] = None,
        physics: PhysicsCfg = PHYSICS_CFG,
    ) -> None:
        if kind not in STATIC_DERIVED:
            raise ValueError(f"{kind.value} is an animated scenario; use RunController")
        super().__init__(kind, params if params is not None else PARAMETER_TYPES[kind]())
        self.physics = physics

    def _derive(self, params: ScenarioParameters) -> Derived:
        return STATIC_DERIVED[self.kind](params, self.physics)


class _PendingTick:
    """Slot holding the controller's one outstanding scheduler call."""

    __slots__ = ("call",)

    def __init__(self) -> None:
        self.call: Optional[ScheduledCall] = None

    def cancel(self) -> None:
        if self.call is not None:
            self.call.cancel()
            self.call = None


def _weak_tick(controller: "RunController") -> Callable[[], None]:
    """Scheduler callback that does not keep ``controller`` alive."""

    ref = weakref.WeakMethod(controller._tick)

    def fire() -> None:
        tick = ref()
        if tick is not None:
            tick()

    return fire


class RunController(ScenarioBase):
    """Owns ``Idle -> Running -> Stopped`` for one animated scenario."""

    def __init__(
        self,
        integrator: Integrator,
        params: Optional[ScenarioParameters] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        kind = integrator.kind
        super().__init__(kind, params if params is not None else PARAMETER_TYPES[kind]())
        self.integrator = integrator
        self.scheduler = scheduler if scheduler is not None else ManualScheduler()
        self.sim = integrator.sim
        self._status = IDLE
        self._state = integrator.initial_state(self._params)
        self._pending = _PendingTick()
        self._ticks = 0
        # A discarded controller must not leave a live tick in a shared scheduler.
        weakref.finalize(self, self._pending.cancel)

    @property
    def dt(self) -> float:
        return self.sim.dt

    @property
    def ticks(self) -> int:
        return self._ticks

    def status(self) -> RunStatus:
        return self._status

    def state(self) -> ScenarioState:
        """Read-only snapshot of the current state."""

        return self._state.copy()

    def _derive(self, params: ScenarioParameters) -> Derived:
        return self.integrator.derived(params)

    # --- lifecycle -----------------------------------------------------------

    def start(self) -> None:
        """Reset state from the live parameters and begin ticking."""

        self._ensure_open()
        if self._status.is_running:
            raise InvalidTransition(self._status, "start")
        params = self.get_parameters()
        self._state = self.integrator.initial_state(params)
        self._ticks = 0
        self._status = RUNNING
        self._schedule()
        logger.info("%s started with %s", self.kind.value, params.as_dict())
        self._notify()

    def stop(self) -> None:
        self._ensure_open()
        if not self._status.is_running:
            raise InvalidTransition(self._status, "stop")
        self._cancel_pending()
        self._status = RunStatus.stopped(StopReason.USER_REQUESTED)
        logger.info("%s stopped by user after %d ticks", self.kind.value, self._ticks)
        self._notify()

    def reset(self) -> None:
        """Return to idle with initial state, from any status."""

        self._ensure_open()
        self._cancel_pending()
        self._state = self.integrator.initial_state(self.get_parameters())
        self._ticks = 0
        self._status = IDLE
        logger.debug("%s reset", self.kind.value)
        self._notify()

    def close(self) -> None:
        """Cancel any pending tick; the controller cannot be restarted."""

        self._cancel_pending()
        if self._status.is_running:
            self._status = RunStatus.stopped(StopReason.USER_REQUESTED)
        super().close()

    # --- ticking -------------------------------------------------------------

    def _schedule(self) -> None:
        self._pending.call = self.scheduler.call_later(self.sim.dt, _weak_tick(self))

    def _cancel_pending(self) -> None:
        self._pending.cancel()

    def _tick(self) -> None:
        self._pending.call = None
        if not self._status.is_running or self._closed:
            return
        params = self.get_parameters()
        self._state, proceed = self.integrator.tick(self._state, params, self.sim.dt)
        self._ticks += 1
        if self._ticks % self.sim.log_every_ticks == 0:
            logger.debug("%s tick %d: %s", self.kind.value, self._ticks, self._state.as_dict())
        if proceed:
            self._schedule()
        else:
            self._status = RunStatus.stopped(self.integrator.stop_reason)
            logger.info(
                "%s finished: %s after %d ticks (t=%.3f s)",
                self.kind.value,
                self._status.reason.value,
                self._ticks,
                self._state.t,
            )
        self._notify()

    def _ensure_open(self) -> None:
        if self._closed:
            raise ScenarioClosedError(f"{self.kind.value} scenario is closed")


def create_scenario(
    kind: ScenarioKind | str,
    scheduler: Optional[Scheduler] = None,
    physics: PhysicsCfg = PHYSICS_CFG,
    sim: SimulationCfg = SIM_CFG,
    **overrides: float,
) -> ScenarioBase:
    """Build a scenario with default parameters, then apply ``overrides``."""

    kind = ScenarioKind(kind)
    params = PARAMETER_TYPES[kind]()
    for name, value in overrides.items():
        params.set(name, value)
    integrator_cls = INTEGRATORS.get(kind)
    if integrator_cls is None:
        return StaticScenario(kind, params, physics)
    return RunController(integrator_cls(physics, sim), params, scheduler)


__all__ = ["RunController", "ScenarioBase", "StaticScenario", "create_scenario"]
