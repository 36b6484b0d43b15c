"""Schedulers that drive fixed-step ticks.

The run loop never sleeps by itself: it asks a scheduler to call it back
after ``dt``. :class:`ManualScheduler` advances a logical clock on demand
for tests and headless runs; :class:`RealTimeScheduler` waits on the wall
clock. Neither one ever changes the step size, so a late callback still
advances the simulation by exactly one ``dt``.
"""
from __future__ import annotations

import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

logger = logging.getLogger(__name__)


@dataclass
class FrameTimer:
    """High resolution timer based on :func:`time.perf_counter`."""

    clock: Callable[[], float] = time.perf_counter
    last_time: float = field(default=0.0)

    def __post_init__(self) -> None:
        self.last_time = self.clock()

    def tick(self) -> float:
        now = self.clock()
        dt = now - self.last_time
        self.last_time = now
        return dt


@dataclass
class ScheduledCall:
    """Handle for one pending callback. A cancelled call never fires."""

    due: float
    callback: Callable[[], None]
    cancelled: bool = False
    fired: bool = False

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class Scheduler:
    """Priority queue of callbacks ordered by due time, then insertion."""

    def __init__(self) -> None:
        self._queue: list[tuple[float, int, ScheduledCall]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        raise NotImplementedError

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(due=self.now() + max(0.0, delay), callback=callback)
        heapq.heappush(self._queue, (call.due, next(self._counter), call))
        return call

    @property
    def pending(self) -> int:
        return sum(1 for _, _, call in self._queue if call.active)

    def _peek(self) -> Optional[ScheduledCall]:
        while self._queue and not self._queue[0][2].active:
            heapq.heappop(self._queue)
        return self._queue[0][2] if self._queue else None

    def _fire(self, call: ScheduledCall) -> None:
        heapq.heappop(self._queue)
        call.fired = True
        call.callback()


class ManualScheduler(Scheduler):
    """Logical clock that only moves when :meth:`advance` is called."""

    def __init__(self, start: float = 0.0) -> None:
        super().__init__()
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, calls: int = 1) -> int:
        """Fire up to ``calls`` pending callbacks in due order."""

        fired = 0
        while fired < calls:
            call = self._peek()
            if call is None:
                break
            self._now = max(self._now, call.due)
            self._fire(call)
            fired += 1
        return fired

    def advance_time(self, seconds: float) -> int:
        """Fire everything due within the next ``seconds`` of logical time."""

        deadline = self._now + seconds
        fired = 0
        while True:
            call = self._peek()
            if call is None or call.due > deadline:
                break
            self._now = max(self._now, call.due)
            self._fire(call)
            fired += 1
        self._now = deadline
        return fired

    def run_until_idle(self, max_calls: int = 1_000_000) -> int:
        return self.advance(max_calls)


class RealTimeScheduler(Scheduler):
    """Cooperative wall-clock scheduler run from the calling thread."""

    def __init__(
        self,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
        late_warning: float = 0.05,
    ) -> None:
        super().__init__()
        self._clock = clock
        self._sleep = sleep
        self.late_warning = late_warning
        self.timer = FrameTimer(clock=clock)
        self.last_interval = 0.0

    def now(self) -> float:
        return self._clock()

    def run(self, max_calls: Optional[int] = None) -> int:
        """Block until no callbacks remain (or ``max_calls`` have fired)."""

        fired = 0
        self.timer.tick()
        while max_calls is None or fired < max_calls:
            call = self._peek()
            if call is None:
                break
            wait = call.due - self._clock()
            if wait > 0.0:
                # Re-peek after waking: the call may have been cancelled meanwhile.
                self._sleep(wait)
                continue
            lateness = -wait
            self.last_interval = self.timer.tick()
            if lateness > self.late_warning:
                logger.warning(
                    "Tick fired %.3f s late (%.3f s since the previous tick)", lateness, self.last_interval
                )
            self._fire(call)
            fired += 1
        return fired


__all__ = ["FrameTimer", "ManualScheduler", "RealTimeScheduler", "ScheduledCall", "Scheduler"]
