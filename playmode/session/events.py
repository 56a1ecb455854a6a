"""Play Mode event surface.

Presentation layers subscribe to the controller and receive these events
synchronously, in the order the state changes happen. Haptic and audio
feedback are left to the subscriber.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from playmode.session.models import CountdownKind, SessionPhase, WorkoutStep


class NoticeCode(StrEnum):
    FIRST_STEP = "first_step"
    LAST_STEP = "last_step"
    TRANSITION_LOCKED = "transition_locked"


NOTICE_MESSAGES: dict[NoticeCode, str] = {
    NoticeCode.FIRST_STEP: "This is the first workout in the class.",
    NoticeCode.LAST_STEP: "This is the last workout in the class.",
    NoticeCode.TRANSITION_LOCKED: "Controls are locked during the transition.",
}


@dataclass(frozen=True)
class SessionEvent:
    """Base class for all events emitted by the session controller."""


@dataclass(frozen=True)
class StepStarted(SessionEvent):
    index: int
    step: WorkoutStep
    duration_seconds: int


@dataclass(frozen=True)
class CountdownTicked(SessionEvent):
    kind: CountdownKind
    seconds_remaining: int
    elapsed_total_seconds: int


@dataclass(frozen=True)
class PreviewDue(SessionEvent):
    index: int
    seconds_remaining: int
    next_step: WorkoutStep


@dataclass(frozen=True)
class Expired(SessionEvent):
    index: int


@dataclass(frozen=True)
class TransitionStarted(SessionEvent):
    from_index: int
    to_index: int
    duration_seconds: int


@dataclass(frozen=True)
class TransitionExpired(SessionEvent):
    to_index: int


@dataclass(frozen=True)
class StepSkipped(SessionEvent):
    from_index: int
    to_index: int


@dataclass(frozen=True)
class StepRestarted(SessionEvent):
    index: int
    duration_seconds: int


@dataclass(frozen=True)
class TimeAdded(SessionEvent):
    seconds: int
    seconds_remaining: int


@dataclass(frozen=True)
class SessionPaused(SessionEvent):
    phase: SessionPhase


@dataclass(frozen=True)
class SessionResumed(SessionEvent):
    phase: SessionPhase


@dataclass(frozen=True)
class SessionCompleted(SessionEvent):
    total_elapsed: int


@dataclass(frozen=True)
class SessionAborted(SessionEvent):
    elapsed_total_seconds: int


@dataclass(frozen=True)
class Notice(SessionEvent):
    code: NoticeCode
    message: str

    @classmethod
    def for_code(cls, code: NoticeCode) -> Notice:
        return cls(code=code, message=NOTICE_MESSAGES[code])


EventListener = Callable[[SessionEvent], None]
