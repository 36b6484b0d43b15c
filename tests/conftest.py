"""Shared fixtures for the simulation core tests.

Every controller here runs on a :class:`ManualScheduler`, so tests advance
ticks one call at a time and no wall-clock time passes.
"""
import pytest

from physics_adventure.core.controller import create_scenario
from physics_adventure.core.timekeeping import ManualScheduler


class FakeClock:
    """Deterministic clock whose ``sleep`` just moves time forward."""

    def __init__(self, start=0.0):
        self.now = start
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def make_scenario(scheduler):
    """Factory for scenarios bound to the test's manual scheduler."""

    created = []

    def factory(kind, **params):
        scenario = create_scenario(kind, scheduler, **params)
        created.append(scenario)
        return scenario

    yield factory
    for scenario in created:
        scenario.close()


@pytest.fixture
def fake_clock():
    return FakeClock()
