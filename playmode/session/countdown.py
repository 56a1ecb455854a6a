"""Countdown engine.

Drives a single integer-seconds countdown to zero at one-second
granularity. The engine never schedules anything itself: an external tick
source calls tick() once per second while the engine is ticking.

Edge-triggered callbacks:
- on_tick: after every decrement
- on_preview: once per initialization, when the countdown crosses
  PREVIEW_LEAD_SECONDS on a step longer than PREVIEW_MIN_DURATION_SECONDS
- on_expired: once, when the countdown reaches zero

Preview and expiry run even if on_tick raises, so a decrement is never
left half applied.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from playmode.session.errors import InvalidDurationError
from playmode.session.models import CountdownKind, CountdownState

PREVIEW_LEAD_SECONDS = 10
PREVIEW_MIN_DURATION_SECONDS = 15

TickCallback = Callable[[CountdownState], None]


def require_positive_seconds(seconds: int, label: str) -> int:
    """Validate a duration in whole seconds.

    Args:
        seconds: Value to validate
        label: Human-readable name used in the error message

    Returns:
        The validated value

    Raises:
        InvalidDurationError: If seconds is not a positive integer
    """
    if isinstance(seconds, bool) or not isinstance(seconds, int) or seconds <= 0:
        logger.warning(f"Rejected {label}: {seconds!r}")
        raise InvalidDurationError(
            f"{label} must be a positive number of seconds",
            details=[f"{label}={seconds!r}"],
        )
    return seconds


class CountdownEngine:
    """Single countdown, reinitialized for every step it times.

    The engine is not ticking after initialize(); resume() starts the tick
    source and pause() stops it. Both are idempotent.
    """

    def __init__(
        self,
        *,
        on_expired: Callable[[], None],
        on_preview: Callable[[], None] | None = None,
        on_tick: TickCallback | None = None,
        kind: CountdownKind = CountdownKind.WORKOUT,
    ) -> None:
        self.kind = kind
        self.state: CountdownState | None = None
        self._on_expired = on_expired
        self._on_preview = on_preview
        self._on_tick = on_tick
        self._ticking = False

    @property
    def is_active(self) -> bool:
        """True when initialized and not yet expired."""
        return self.state is not None and not self.state.is_expired

    @property
    def is_ticking(self) -> bool:
        return self._ticking

    @property
    def seconds_remaining(self) -> int:
        return self.state.seconds_remaining if self.state else 0

    @property
    def total_duration(self) -> int:
        return self.state.total_duration if self.state else 0

    @property
    def preview_fired(self) -> bool:
        return bool(self.state and self.state.armed_preview_fired)

    def initialize(self, duration_seconds: int) -> None:
        """Reset the countdown to a fresh duration and cancel ticking.

        Raises:
            InvalidDurationError: If duration_seconds is not positive
        """
        require_positive_seconds(duration_seconds, f"{self.kind} duration")
        self._ticking = False
        self.state = CountdownState(
            kind=self.kind,
            total_duration=duration_seconds,
            seconds_remaining=duration_seconds,
        )
        logger.debug(f"{self.kind} countdown initialized", duration_seconds=duration_seconds)

    def resume(self) -> None:
        if not self.is_active:
            return
        self._ticking = True

    def pause(self) -> None:
        self._ticking = False

    def cancel(self) -> None:
        """Stop the tick source for good; remaining time stays readable."""
        self._ticking = False

    def tick(self) -> bool:
        """Advance the countdown by one second.

        Returns:
            True if the tick decremented the countdown, False if it was a no-op
        """
        if not self._ticking or self.state is None or self.state.is_expired:
            return False

        state = self.state
        state.seconds_remaining -= 1

        # A failing tick listener must not strand the countdown at 0 unexpired.
        try:
            if self._on_tick:
                self._on_tick(state)
        finally:
            self._after_decrement(state)

        return True

    def add_seconds(self, seconds: int) -> bool:
        """Add time to the running countdown without restarting it.

        The preview arm is left untouched so adding time back above the
        preview threshold never fires the preview twice.

        Returns:
            True if time was added, False if the countdown is not active

        Raises:
            InvalidDurationError: If seconds is not positive
        """
        require_positive_seconds(seconds, "added time")
        if not self.is_active:
            return False
        self.state.seconds_remaining += seconds
        return True

    def _after_decrement(self, state: CountdownState) -> None:
        if self._preview_due(state):
            state.armed_preview_fired = True
            logger.debug("Up next preview due", seconds_remaining=state.seconds_remaining)
            self._on_preview()

        if state.seconds_remaining == 0:
            self._ticking = False
            logger.debug(f"{self.kind} countdown expired", total_duration=state.total_duration)
            self._on_expired()

    def _preview_due(self, state: CountdownState) -> bool:
        return (
            self._on_preview is not None
            and not state.armed_preview_fired
            and state.seconds_remaining == PREVIEW_LEAD_SECONDS
            and state.total_duration > PREVIEW_MIN_DURATION_SECONDS
        )
