"""Parameter clamping, state snapshots and run status values."""
import math

import pytest

from physics_adventure.core.errors import ParameterValueError, UnknownParameterError
from physics_adventure.core.model import (
    IDLE,
    PARAMETER_TYPES,
    RUNNING,
    InclineParams,
    PendulumParams,
    PendulumState,
    ProjectileParams,
    ProjectileState,
    RunPhase,
    RunStatus,
    ScenarioKind,
    StellarParams,
    StopReason,
)


def test_defaults_sit_inside_their_ranges():
    for kind, cls in PARAMETER_TYPES.items():
        params = cls()
        assert params.KIND is kind
        for name, bounds in cls.RANGES.items():
            assert bounds.lo <= getattr(params, name) <= bounds.hi


def test_documented_defaults():
    assert InclineParams().as_dict() == {"angle": 20.0, "friction": 0.05, "mass": 1.0}
    assert ProjectileParams().as_dict() == {"angle": 45.0, "speed": 20.0}
    assert PendulumParams().as_dict() == {"length": 1.0, "initial_angle": 30.0}


def test_constructor_clamps_out_of_range_values():
    params = InclineParams(angle=90.0, friction=-1.0)
    assert params.angle == 45.0
    assert params.friction == 0.0


@pytest.mark.parametrize(
    "name, value, expected",
    [
        ("angle", 2.0, 5.0),
        ("angle", 100.0, 85.0),
        ("angle", 30.0, 30.0),
        ("speed", 0.0, 10.0),
        ("speed", math.inf, 40.0),
    ],
)
def test_set_clamps_to_nearest_bound(name, value, expected):
    params = ProjectileParams()
    assert params.set(name, value) == expected
    assert getattr(params, name) == expected


def test_set_accepts_numeric_strings():
    params = StellarParams()
    assert params.set("mass", "2.5") == 2.5


def test_unknown_parameter_is_rejected():
    params = InclineParams()
    with pytest.raises(UnknownParameterError) as info:
        params.set("gravity", 3.0)
    assert isinstance(info.value, KeyError)
    assert "gravity" in str(info.value)


@pytest.mark.parametrize("value", [math.nan, "fast", None])
def test_non_numeric_values_are_rejected_without_mutation(value):
    params = InclineParams()
    with pytest.raises(ParameterValueError):
        params.set("angle", value)
    assert params.angle == 20.0


def test_parameter_copy_is_independent():
    params = InclineParams()
    clone = params.copy()
    clone.set("angle", 40.0)
    assert params.angle == 20.0


def test_state_copy_and_dict():
    state = ProjectileState(t=1.0, x=2.0, y=3.0)
    clone = state.copy()
    clone.x = 99.0
    assert state.x == 2.0
    assert state.as_dict() == {"t": 1.0, "x": 2.0, "y": 3.0, "landed": False, "target_hit": False}


def test_pendulum_state_reports_degrees():
    assert PendulumState(theta=math.pi / 6).angle_deg == pytest.approx(30.0)


def test_pendulum_state_bob_hangs_below_the_pivot():
    assert PendulumState(theta=0.0).bob_position(1.5) == pytest.approx((0.0, 1.5))
    x, y = PendulumState(theta=-math.pi / 6).bob_position(2.0)
    assert x == pytest.approx(-1.0)
    assert y == pytest.approx(math.sqrt(3.0))


def test_run_status_values():
    assert IDLE.phase is RunPhase.IDLE and IDLE.reason is None
    assert RUNNING.is_running
    stopped = RunStatus.stopped(StopReason.TARGET_REACHED)
    assert not stopped.is_running
    assert str(stopped) == "stopped(target_reached)"
    assert str(IDLE) == "idle"
    assert stopped == RunStatus(RunPhase.STOPPED, StopReason.TARGET_REACHED)


def test_animated_kinds():
    assert ScenarioKind.PENDULUM.animated
    assert not ScenarioKind.STELLAR.animated
    assert not ScenarioKind.LENSING.animated
