"""One-second repeating tick source.

Runs on the calling thread. Each callback runs to completion before the
next deadline is computed, so ticks never overlap. An optional idle hook
runs on the same thread while waiting for a deadline, which is where a
presenter applies user input between ticks.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from loguru import logger


class IntervalTicker:
    """Call a function once per interval until a stop condition holds.

    Deadlines are anchored to a monotonic clock so a slow callback shortens
    the following sleep instead of shifting every later tick. If the
    ticker falls more than one interval behind it resynchronizes rather
    than delivering a burst of catch-up ticks.
    """

    def __init__(
        self,
        interval_seconds: float = 1.0,
        *,
        poll_interval_seconds: float = 0.05,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be positive, got {interval_seconds}")
        if poll_interval_seconds <= 0:
            raise ValueError(f"poll_interval_seconds must be positive, got {poll_interval_seconds}")
        self.interval_seconds = interval_seconds
        self.poll_interval_seconds = poll_interval_seconds
        self._clock = clock
        self._sleep = sleep

    def run(
        self,
        callback: Callable[[], None],
        until: Callable[[], bool],
        idle: Callable[[], None] | None = None,
    ) -> int:
        """Tick until until() returns True.

        Exceptions raised by callback, idle or sleep (including
        KeyboardInterrupt) propagate and stop the ticker.

        Args:
            callback: Function invoked once per interval
            until: Stop condition, checked before every tick
            idle: Optional function invoked every poll interval while waiting

        Returns:
            Number of ticks delivered
        """
        ticks = 0
        next_deadline = self._clock() + self.interval_seconds

        while not until():
            self._wait(next_deadline, until, idle)
            if until():
                break

            callback()
            ticks += 1
            next_deadline += self.interval_seconds

            lag = self._clock() - next_deadline
            if lag > self.interval_seconds:
                logger.debug(f"Ticker fell behind by {lag:.2f}s, resynchronizing")
                next_deadline = self._clock() + self.interval_seconds

        return ticks

    def _wait(
        self,
        deadline: float,
        until: Callable[[], bool],
        idle: Callable[[], None] | None,
    ) -> None:
        while True:
            delay = deadline - self._clock()
            if delay <= 0:
                return
            if idle is None:
                self._sleep(delay)
                return
            self._sleep(min(delay, self.poll_interval_seconds))
            idle()
            if until():
                return
