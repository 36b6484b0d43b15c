"""Lifecycle of the run-loop controller and the static scenarios."""
import gc
import math
import random
import weakref

import pytest

from physics_adventure.core.controller import RunController, StaticScenario, create_scenario
from physics_adventure.core.errors import (
    InvalidTransition,
    ScenarioClosedError,
    UnknownParameterError,
)
from physics_adventure.core.config import SimulationCfg
from physics_adventure.core.integrators import InclineIntegrator, PendulumIntegrator
from physics_adventure.core.model import (
    IDLE,
    RUNNING,
    CircularState,
    InclineParams,
    RunPhase,
    ScenarioKind,
    StopReason,
)


def snapshot(controller):
    return controller.status(), controller.state(), controller.ticks, controller.scheduler.pending


def test_new_controller_is_idle_with_initial_state(make_scenario):
    scenario = make_scenario("circular")
    assert scenario.status() == IDLE
    assert scenario.state() == CircularState()
    assert scenario.ticks == 0


def test_start_schedules_exactly_one_tick(make_scenario, scheduler):
    scenario = make_scenario("circular")
    scenario.start()
    assert scenario.status() == RUNNING
    assert scheduler.pending == 1
    assert scheduler.advance() == 1
    assert scenario.ticks == 1
    assert scheduler.pending == 1
    assert scheduler.now() == pytest.approx(scenario.dt)


def test_start_while_running_is_rejected_without_mutation(make_scenario, scheduler):
    scenario = make_scenario("pendulum")
    scenario.start()
    scheduler.advance(5)
    before = snapshot(scenario)
    with pytest.raises(InvalidTransition) as info:
        scenario.start()
    assert info.value.current == RUNNING
    assert info.value.requested == "start"
    assert snapshot(scenario) == before


@pytest.mark.parametrize("prepare", ["idle", "stopped", "finished"])
def test_stop_outside_running_is_rejected(make_scenario, scheduler, prepare):
    scenario = make_scenario("projectile")
    if prepare == "stopped":
        scenario.start()
        scenario.stop()
    elif prepare == "finished":
        scenario.start()
        scheduler.run_until_idle()
    before = snapshot(scenario)
    with pytest.raises(InvalidTransition) as info:
        scenario.stop()
    assert info.value.requested == "stop"
    assert snapshot(scenario) == before


def test_stop_cancels_pending_tick_and_freezes_state(make_scenario, scheduler):
    scenario = make_scenario("circular")
    scenario.start()
    scheduler.advance(10)
    scenario.stop()
    frozen = scenario.state()
    assert scenario.status().reason is StopReason.USER_REQUESTED
    assert scheduler.pending == 0
    assert scheduler.advance(100) == 0
    assert scenario.state() == frozen


def test_restart_after_stop_resets_state(make_scenario, scheduler):
    scenario = make_scenario("circular")
    scenario.start()
    scheduler.advance(10)
    scenario.stop()
    scenario.start()
    assert scenario.state() == CircularState()
    assert scenario.ticks == 0
    assert scheduler.pending == 1


def test_no_stale_tick_survives_a_restart(make_scenario, scheduler):
    scenario = make_scenario("circular")
    scenario.start()
    scenario.stop()
    scenario.start()
    scenario.reset()
    scenario.start()
    assert scheduler.pending == 1
    scheduler.advance()
    assert scenario.ticks == 1


def test_start_reads_live_initial_angle(make_scenario):
    scenario = make_scenario("pendulum")
    scenario.set_parameter("initial_angle", 50.0)
    scenario.start()
    assert scenario.state().theta == pytest.approx(math.radians(50.0))


def test_reset_from_running_returns_to_idle(make_scenario, scheduler):
    scenario = make_scenario("incline")
    scenario.start()
    scheduler.advance(20)
    scenario.reset()
    assert scenario.status() == IDLE
    assert scenario.state().x == 0.0
    assert scheduler.pending == 0


@pytest.mark.parametrize("kind", ["incline", "projectile", "pendulum", "circular", "orbital"])
def test_reset_is_idempotent(make_scenario, scheduler, kind):
    scenario = make_scenario(kind)
    scenario.start()
    scheduler.advance(7)
    scenario.reset()
    first = scenario.state()
    scenario.reset()
    assert scenario.state() == first
    assert scenario.status() == IDLE


def test_parameter_change_only_affects_later_ticks(make_scenario, scheduler):
    scenario = make_scenario("circular", speed=10.0, radius=2.0)
    scenario.start()
    scheduler.advance(10)
    elapsed = scenario.state().t
    phase = scenario.state().phase
    scenario.set_parameter("speed", 20.0)
    assert scenario.state().t == elapsed
    assert scenario.state().phase == phase
    scheduler.advance(10)
    assert scenario.state().phase == pytest.approx(phase + 10 * 10.0 * scenario.dt)


def test_set_parameter_clamps_and_reports(make_scenario):
    scenario = make_scenario("incline")
    assert scenario.set_parameter("angle", 90.0) == 45.0
    assert scenario.get_parameters().angle == 45.0
    with pytest.raises(UnknownParameterError):
        scenario.set_parameter("radius", 1.0)


def test_get_parameters_and_state_are_copies(make_scenario):
    scenario = make_scenario("incline")
    params = scenario.get_parameters()
    params.angle = 40.0
    state = scenario.state()
    state.x = 3.0
    assert scenario.get_parameters().angle == 20.0
    assert scenario.state().x == 0.0


def test_derived_is_never_stale(make_scenario):
    scenario = make_scenario("pendulum", length=1.0)
    first = scenario.derived()["period"]
    scenario.set_parameter("length", 2.0)
    assert scenario.derived()["period"] == pytest.approx(first * math.sqrt(2.0))


def test_listeners_see_ticks_and_parameter_writes(make_scenario, scheduler):
    scenario = make_scenario("circular")
    seen = []
    unsubscribe = scenario.subscribe(lambda sc: seen.append((sc.status().phase, sc.ticks)))
    scenario.start()
    scheduler.advance(2)
    scenario.set_parameter("radius", 3.0)
    scenario.stop()
    unsubscribe()
    scenario.reset()
    assert seen == [
        (RunPhase.RUNNING, 0),
        (RunPhase.RUNNING, 1),
        (RunPhase.RUNNING, 2),
        (RunPhase.RUNNING, 2),
        (RunPhase.STOPPED, 2),
    ]


def test_close_cancels_and_refuses_restart(make_scenario, scheduler):
    scenario = make_scenario("circular")
    scenario.start()
    scheduler.advance(3)
    scenario.close()
    assert scheduler.pending == 0
    assert scheduler.advance(10) == 0
    assert scenario.ticks == 3
    assert scenario.closed
    with pytest.raises(ScenarioClosedError):
        scenario.start()


def test_discarded_running_controller_never_ticks_again(scheduler):
    scenario = create_scenario("orbital", scheduler)
    scenario.start()
    scheduler.advance(3)
    alive = weakref.ref(scenario)
    del scenario
    gc.collect()
    assert alive() is None
    assert scheduler.pending == 0
    assert scheduler.advance(1000) == 0


def test_discarding_one_controller_leaves_others_ticking(scheduler):
    kept = create_scenario("circular", scheduler)
    dropped = create_scenario("orbital", scheduler)
    kept.start()
    dropped.start()
    del dropped
    gc.collect()
    assert scheduler.advance(5) == 5
    assert kept.ticks == 5
    kept.close()


def test_controller_takes_its_step_from_the_integrator(scheduler):
    sim = SimulationCfg(dt=0.1, ramp_length=1.0)
    controller = RunController(InclineIntegrator(sim=sim), scheduler=scheduler)
    assert controller.sim is sim
    assert controller.dt == 0.1
    controller.start()
    scheduler.run_until_idle()
    assert controller.status().reason is StopReason.TARGET_REACHED
    assert controller.state().x == 1.0
    assert controller.state().t == pytest.approx(controller.ticks * 0.1)


def test_context_manager_closes(scheduler):
    with create_scenario("pendulum", scheduler) as scenario:
        scenario.start()
    assert scheduler.pending == 0
    assert scenario.status().reason is StopReason.USER_REQUESTED


def test_independent_instances_share_nothing(make_scenario, scheduler):
    first = make_scenario("circular")
    second = make_scenario("circular")
    first.start()
    scheduler.advance(5)
    second.set_parameter("speed", 25.0)
    assert second.status() == IDLE
    assert second.state() == CircularState()
    assert first.get_parameters().speed == 10.0


def test_random_command_sequences_keep_status_consistent(make_scenario, scheduler):
    rng = random.Random(1234)
    scenario = make_scenario("projectile")
    for _ in range(400):
        command = rng.choice(["start", "stop", "reset", "tick", "tick"])
        before = snapshot(scenario)
        if command == "tick":
            scheduler.advance(rng.randint(1, 40))
        else:
            running = scenario.status().is_running
            should_fail = (command == "start" and running) or (command == "stop" and not running)
            if should_fail:
                with pytest.raises(InvalidTransition):
                    getattr(scenario, command)()
                assert snapshot(scenario) == before
            else:
                getattr(scenario, command)()
        status = scenario.status()
        assert status.phase in set(RunPhase)
        assert (status.reason is None) == (status.phase is not RunPhase.STOPPED)
        assert scheduler.pending == (1 if status.is_running else 0)


def test_controller_rejects_mismatched_parameters(scheduler):
    with pytest.raises(TypeError):
        RunController(PendulumIntegrator(), InclineParams(), scheduler)


def test_create_scenario_applies_overrides():
    scenario = create_scenario(ScenarioKind.PROJECTILE, angle=100, speed=15)
    assert isinstance(scenario, RunController)
    assert scenario.get_parameters().as_dict() == {"angle": 85.0, "speed": 15.0}


def test_stellar_scenario_is_formula_only():
    scenario = create_scenario("stellar")
    assert isinstance(scenario, StaticScenario)
    assert scenario.status() == IDLE
    assert scenario.derived() == pytest.approx({"luminosity": 1.0, "lifespan": 10.0})
    assert scenario.set_parameter("mass", 100.0) == 20.0
    assert scenario.derived()["luminosity"] == pytest.approx(20.0**3.5)
    assert not hasattr(scenario, "start")


def test_lensing_scenario_recomputes_deflection():
    scenario = create_scenario("lensing")
    assert scenario.derived()["deflection_angle"] == pytest.approx(0.875)
    scenario.set_parameter("lens_strength", 2.0)
    assert scenario.derived()["deflection_angle"] == pytest.approx(1.75)


def test_lensing_reports_einstein_ring_above_half_a_degree():
    scenario = create_scenario("lensing")
    assert scenario.derived()["einstein_ring"] is True
    scenario.set_parameter("lens_strength", 0.5)
    scenario.set_parameter("source_distance", 4.0)
    assert scenario.derived()["deflection_angle"] == pytest.approx(0.21875)
    assert scenario.derived()["einstein_ring"] is False


def test_static_scenario_rejects_animated_kinds():
    with pytest.raises(ValueError):
        StaticScenario(ScenarioKind.CIRCULAR)
