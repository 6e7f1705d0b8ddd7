"""Frame pacing and FPS bookkeeping for the interactive demo."""

from __future__ import annotations

import math
import time
from typing import Callable

TimeSource = Callable[[], float]
Sleeper = Callable[[float], None]


class Clock:
    """Sleeps just long enough to keep a steady tick rate."""

    def __init__(self, *, now: TimeSource = time.perf_counter, sleep: Sleeper = time.sleep) -> None:
        self._now = now
        self._sleep = sleep
        self._last_tick = now()

    def tick(self, ticks_per_second: float) -> float:
        """Wait for the next tick and return seconds elapsed since the previous one."""
        if not math.isfinite(ticks_per_second) or ticks_per_second <= 0.0:
            raise ValueError(
                f"Invalid ticks_per_second ({ticks_per_second!r}): must be finite and positive"
            )

        wakeup = self._last_tick + 1.0 / ticks_per_second
        now = self._now()
        if wakeup > now:
            self._sleep(wakeup - now)
            now = self._now()

        elapsed = now - self._last_tick
        self._last_tick = now
        return elapsed


class EventsPerSecondTracker:
    def __init__(self, *, now: TimeSource = time.perf_counter) -> None:
        self._now = now
        self._last_reset = now()
        self._events = 0

    def event(self) -> None:
        self._events += 1

    def mean(self) -> float:
        elapsed = self._now() - self._last_reset
        if elapsed <= 0.0:
            return 0.0
        return self._events / elapsed

    def reset(self) -> None:
        self._last_reset = self._now()
        self._events = 0


class ApproximateTimer:
    """Counts how many whole intervals elapse as time deltas are fed in."""

    def __init__(self, interval: float) -> None:
        if interval <= 0.0:
            raise ValueError("ApproximateTimer interval must be positive")
        self.interval = interval
        self.remaining = interval

    def update(self, delta: float) -> int:
        difference = self.remaining - delta
        overruns = int(-(difference // self.interval))
        self.remaining = difference % self.interval
        return overruns


__all__ = ["ApproximateTimer", "Clock", "EventsPerSecondTracker"]
