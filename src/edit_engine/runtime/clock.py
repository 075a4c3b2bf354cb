"""Deferred-callback clocks injected into the history manager.

The engine never reads wall-clock time itself. Hosts poll
``MonotonicClock.process_due`` from their event loop; tests advance a
``ManualClock`` explicitly.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Protocol

Callback = Callable[[], None]


@dataclass(slots=True)
class TimerHandle:
    deadline: float
    delay_ms: int
    generation: int
    callback: Callback = field(repr=False)


class Clock(Protocol):
    def schedule(self, delay_ms: int, callback: Callback) -> TimerHandle:
        ...

    def cancel(self, handle: TimerHandle) -> None:
        ...


class MonotonicClock:
    """Clock whose due callbacks fire when the host calls ``process_due``."""

    def __init__(self) -> None:
        self._pending: Dict[int, TimerHandle] = {}
        self._counter = 0

    def now(self) -> float:
        return time.monotonic()

    @property
    def pending(self) -> int:
        return len(self._pending)

    def schedule(self, delay_ms: int, callback: Callback) -> TimerHandle:
        if delay_ms < 0:
            raise ValueError("delay_ms must be non-negative")
        self._counter += 1
        handle = TimerHandle(
            deadline=self.now() + (delay_ms / 1000.0),
            delay_ms=delay_ms,
            generation=self._counter,
            callback=callback,
        )
        self._pending[handle.generation] = handle
        return handle

    def cancel(self, handle: TimerHandle) -> None:
        self._pending.pop(handle.generation, None)

    def process_due(self) -> int:
        """Fire every expired callback in deadline order; return the count."""

        now = self.now()
        expired: List[TimerHandle] = sorted(
            (timer for timer in self._pending.values() if timer.deadline <= now),
            key=lambda timer: (timer.deadline, timer.generation),
        )
        fired = 0
        for timer in expired:
            # an earlier callback may have cancelled this one
            if self._pending.pop(timer.generation, None) is None:
                continue
            timer.callback()
            fired += 1
        return fired


class ManualClock(MonotonicClock):
    """Deterministic clock for tests: time only moves through ``advance``."""

    def __init__(self, start: float = 0.0) -> None:
        super().__init__()
        self._now = start

    def now(self) -> float:
        return self._now

    def advance(self, delay_ms: int) -> int:
        self._now += delay_ms / 1000.0
        return self.process_due()


__all__ = ["Callback", "Clock", "ManualClock", "MonotonicClock", "TimerHandle"]
