"""Root conftest for all tests.

Shared fixtures for building step lists, recording session events, and
capturing loguru output.
"""

from collections.abc import Callable

import pytest
from loguru import logger

from playmode.session.events import SessionEvent
from playmode.session.models import WorkoutStep


class EventRecorder:
    """Listener that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[SessionEvent] = []

    def __call__(self, event: SessionEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: type[SessionEvent]) -> list[SessionEvent]:
        return [event for event in self.events if isinstance(event, event_type)]

    def count(self, event_type: type[SessionEvent]) -> int:
        return len(self.of_type(event_type))

    def names(self) -> list[str]:
        return [type(event).__name__ for event in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def make_steps() -> Callable[..., list[WorkoutStep]]:
    """Factory: make_steps(30, 45, 20) -> three steps with those durations."""

    def _make(*durations: int) -> list[WorkoutStep]:
        return [
            WorkoutStep(id=f"step-{index}", name=f"Workout {index + 1}", duration_seconds=duration)
            for index, duration in enumerate(durations)
        ]

    return _make


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)
