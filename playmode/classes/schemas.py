"""Class file schemas (Pydantic).

A class is an ordered list of workouts as the instructor app stores them:
catalog fields (name, description, default duration, media) combined with
per-class overrides (duration override, instructor cues).
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from playmode.config.settings import settings
from playmode.session.errors import InvalidSessionError
from playmode.session.models import WorkoutStep

UNNAMED_WORKOUT = "Unnamed Workout"


class ClassWorkout(BaseModel):
    """One workout slot within a class."""

    id: str | int | None = None
    workout_name: str | None = None
    workout_description: str | None = None
    default_duration: int | None = None
    duration_override: int | None = None
    instructor_cues: str | None = None
    media_url: str | None = None
    media_type: str | None = None

    def to_step(self, index: int, default_duration: int) -> WorkoutStep:
        """Map this slot to a Play Mode step.

        Empty or zero values fall back: id to "workout-<index>", name to
        "Unnamed Workout", duration to the override, then the catalog
        default, then default_duration.
        """
        return WorkoutStep(
            id=str(self.id) if self.id not in (None, "") else f"workout-{index}",
            name=self.workout_name or UNNAMED_WORKOUT,
            duration_seconds=self.duration_override or self.default_duration or default_duration,
            coaching_cues=self.instructor_cues or None,
            media_reference=self.media_url or None,
            media_type=self.media_type or None,
            description=self.workout_description or None,
        )


class ClassPlan(BaseModel):
    """A class ready to be delivered in Play Mode."""

    id: str | int | None = None
    name: str
    class_type: str | None = None
    transition_seconds: int | None = Field(None, gt=0)
    workouts: list[ClassWorkout] = Field(default_factory=list)

    def to_steps(self, default_duration: int | None = None) -> list[WorkoutStep]:
        """Build the ordered Play Mode steps for this class.

        Raises:
            InvalidSessionError: If the class has no workouts
        """
        if not self.workouts:
            raise InvalidSessionError("This class has no workouts to play.", details=[f"class={self.name}"])

        if default_duration is None:
            default_duration = settings.default_step_seconds
        return [workout.to_step(index, default_duration) for index, workout in enumerate(self.workouts)]
