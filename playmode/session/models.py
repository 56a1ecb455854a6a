"""Play Mode core models.

WorkoutStep is supplied by the step source and never mutated during a
session. CountdownState belongs to exactly one countdown and is replaced
whenever that countdown is reinitialized.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class SessionPhase(StrEnum):
    RUNNING = "running"
    PAUSED = "paused"
    TRANSITIONING = "transitioning"
    COMPLETED = "completed"
    ABORTED = "aborted"

    @property
    def is_terminal(self) -> bool:
        return self in {SessionPhase.COMPLETED, SessionPhase.ABORTED}


class CountdownKind(StrEnum):
    WORKOUT = "workout"
    TRANSITION = "transition"


class WorkoutStep(BaseModel):
    """A single timed block of exercise content delivered in Play Mode."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    duration_seconds: int
    coaching_cues: str | None = None
    media_reference: str | None = None
    media_type: str | None = None
    description: str | None = None


@dataclass
class CountdownState:
    """Mutable countdown state owned by a single countdown.

    Attributes:
        kind: What this countdown is timing (workout step or transition)
        total_duration: Duration the countdown was initialized with
        seconds_remaining: Seconds left, never negative
        armed_preview_fired: True once the "up next" preview fired for this step
    """

    kind: CountdownKind
    total_duration: int
    seconds_remaining: int
    armed_preview_fired: bool = False

    @property
    def is_expired(self) -> bool:
        return self.seconds_remaining == 0
