"""Transition manager.

Runs the fixed-length interstitial countdown between two workout steps.
It reuses the countdown mechanism but is tagged as a transition, never
fires a preview, and offers no way to add time.
"""

from __future__ import annotations

from collections.abc import Callable

from loguru import logger

from playmode.session.countdown import CountdownEngine, TickCallback
from playmode.session.models import CountdownKind


class TransitionManager:
    def __init__(
        self,
        *,
        on_expired: Callable[[], None],
        on_tick: TickCallback | None = None,
    ) -> None:
        self._countdown = CountdownEngine(
            kind=CountdownKind.TRANSITION,
            on_expired=on_expired,
            on_tick=on_tick,
        )

    @property
    def is_active(self) -> bool:
        return self._countdown.is_active

    @property
    def is_ticking(self) -> bool:
        return self._countdown.is_ticking

    @property
    def seconds_remaining(self) -> int:
        return self._countdown.seconds_remaining

    @property
    def total_duration(self) -> int:
        return self._countdown.total_duration

    def start(self, transition_seconds: int) -> None:
        """Start a transition countdown.

        Raises:
            InvalidDurationError: If transition_seconds is not positive
        """
        self._countdown.initialize(transition_seconds)
        self._countdown.resume()
        logger.debug("Transition started", transition_seconds=transition_seconds)

    def tick(self) -> bool:
        return self._countdown.tick()

    def pause(self) -> None:
        self._countdown.pause()

    def resume(self) -> None:
        self._countdown.resume()

    def cancel(self) -> None:
        self._countdown.cancel()
