"""Presentation helpers for Play Mode.

Pure functions and a read-only snapshot model. Presenters render from
these; nothing here mutates a session.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum

from pydantic import BaseModel, ConfigDict

from playmode.session.models import CountdownKind, SessionPhase, WorkoutStep

CRITICAL_SECONDS = 10
CAUTION_SECONDS = 30


class Urgency(StrEnum):
    NORMAL = "normal"
    CAUTION = "caution"
    CRITICAL = "critical"


class SessionSnapshot(BaseModel):
    """Point-in-time view of a Play Mode session."""

    model_config = ConfigDict(frozen=True)

    phase: SessionPhase | None
    current_index: int
    step_count: int
    current_step: WorkoutStep | None
    next_step: WorkoutStep | None
    countdown_kind: CountdownKind
    seconds_remaining: int
    total_duration: int
    elapsed_total_seconds: int
    show_up_next: bool
    progress: float

    @property
    def is_transitioning(self) -> bool:
        return self.countdown_kind == CountdownKind.TRANSITION

    @property
    def clock(self) -> str:
        return format_clock(self.seconds_remaining)

    @property
    def urgency(self) -> Urgency:
        return countdown_urgency(self.seconds_remaining)


def format_clock(seconds: int) -> str:
    """Format seconds as m:ss (e.g. 90 -> "1:30")."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def countdown_urgency(seconds_remaining: int) -> Urgency:
    if seconds_remaining <= CRITICAL_SECONDS:
        return Urgency.CRITICAL
    if seconds_remaining <= CAUTION_SECONDS:
        return Urgency.CAUTION
    return Urgency.NORMAL


def progress_fraction(current_index: int, step_count: int) -> float:
    """Fraction of steps reached, counting the current one."""
    if step_count <= 0:
        return 0.0
    return min(1.0, (current_index + 1) / step_count)


def estimate_class_seconds(steps: Sequence[WorkoutStep], transition_seconds: int) -> int:
    """Planned class length: every step plus one transition between each pair."""
    if not steps:
        return 0
    return sum(step.duration_seconds for step in steps) + transition_seconds * (len(steps) - 1)
