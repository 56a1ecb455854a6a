"""Play Mode session controller.

Single source of truth for a Play Mode activation. Owns the step list,
the current position, the phase, and the decision between advancing to
the next step and completing the session.

Rules:
- Only tick() and the explicit operations below mutate state
- Exactly one countdown ticks at a time (workout or transition)
- Pause is allowed during a transition; skip, restart, and add-time are not
- Boundary and locked controls are no-ops that emit a Notice
- State changes are complete before listeners are notified
- Nothing is persisted; an aborted session is simply discarded
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from loguru import logger

from playmode.config.settings import settings
from playmode.session.countdown import CountdownEngine, require_positive_seconds
from playmode.session.display import SessionSnapshot, progress_fraction
from playmode.session.errors import InvalidDurationError, InvalidSessionError, SessionStateError
from playmode.session.events import (
    CountdownTicked,
    EventListener,
    Expired,
    Notice,
    NoticeCode,
    PreviewDue,
    SessionAborted,
    SessionCompleted,
    SessionEvent,
    SessionPaused,
    SessionResumed,
    StepRestarted,
    StepSkipped,
    StepStarted,
    TimeAdded,
    TransitionExpired,
    TransitionStarted,
)
from playmode.session.models import CountdownKind, CountdownState, SessionPhase, WorkoutStep
from playmode.session.transition import TransitionManager


def validate_steps(steps: Sequence[WorkoutStep] | None) -> tuple[WorkoutStep, ...]:
    """Validate a step list before a session starts.

    Args:
        steps: Ordered workout steps supplied by the step source

    Returns:
        The steps as an immutable tuple

    Raises:
        InvalidSessionError: If the list is empty or has duplicate ids
        InvalidDurationError: If any step duration is not positive
    """
    if not steps:
        logger.warning("Rejected Play Mode session without steps")
        raise InvalidSessionError("Cannot start Play Mode without workouts")

    steps = tuple(steps)

    seen: set[str] = set()
    duplicates: list[str] = []
    for step in steps:
        if step.id in seen:
            duplicates.append(step.id)
        seen.add(step.id)
    if duplicates:
        logger.warning("Rejected Play Mode session with duplicate step ids", duplicates=duplicates)
        raise InvalidSessionError("Step ids must be unique within a session", details=duplicates)

    bad_durations = [f"{step.id}={step.duration_seconds}" for step in steps if step.duration_seconds <= 0]
    if bad_durations:
        logger.warning("Rejected Play Mode session with non-positive durations", steps=bad_durations)
        raise InvalidDurationError("Every step needs a positive duration", details=bad_durations)

    return steps


class SessionController:
    """Sequences workout steps through countdowns and transitions.

    Attributes:
        transition_seconds: Length of the interstitial between two steps
        current_index: Index of the current step
        elapsed_total_seconds: Seconds ticked so far, paused time excluded
        phase: Current phase, None until start() succeeds
        countdown: Workout countdown engine
        transition: Transition manager
    """

    def __init__(
        self,
        transition_seconds: int | None = None,
        *,
        listeners: Sequence[EventListener] = (),
    ) -> None:
        if transition_seconds is None:
            transition_seconds = settings.transition_seconds
        self.transition_seconds = require_positive_seconds(transition_seconds, "transition duration")

        self.current_index = 0
        self.elapsed_total_seconds = 0
        self.phase: SessionPhase | None = None

        self._steps: tuple[WorkoutStep, ...] = ()
        self._paused_from: SessionPhase | None = None
        self._listeners: list[EventListener] = list(listeners)

        self.countdown = CountdownEngine(
            kind=CountdownKind.WORKOUT,
            on_expired=self.on_countdown_expired,
            on_preview=self._on_preview_due,
            on_tick=self._on_tick,
        )
        self.transition = TransitionManager(
            on_expired=self.on_transition_expired,
            on_tick=self._on_tick,
        )

    # ----- Read-only views -----

    @property
    def steps(self) -> tuple[WorkoutStep, ...]:
        return self._steps

    @property
    def current_step(self) -> WorkoutStep | None:
        if not self._steps:
            return None
        return self._steps[self.current_index]

    @property
    def next_step(self) -> WorkoutStep | None:
        next_index = self.current_index + 1
        if next_index >= len(self._steps):
            return None
        return self._steps[next_index]

    @property
    def is_last_step(self) -> bool:
        return self.current_index == len(self._steps) - 1

    @property
    def in_transition(self) -> bool:
        """True while transitioning, including a transition that is paused."""
        if self.phase == SessionPhase.TRANSITIONING:
            return True
        return self.phase == SessionPhase.PAUSED and self._paused_from == SessionPhase.TRANSITIONING

    @property
    def countdown_kind(self) -> CountdownKind:
        return CountdownKind.TRANSITION if self.in_transition else CountdownKind.WORKOUT

    @property
    def seconds_remaining(self) -> int:
        return self._active_countdown().seconds_remaining

    def snapshot(self) -> SessionSnapshot:
        active = self._active_countdown()
        next_step = self.next_step
        show_up_next = (
            not self.in_transition
            and next_step is not None
            and self.countdown.is_active
            and self.countdown.preview_fired
        )
        return SessionSnapshot(
            phase=self.phase,
            current_index=self.current_index,
            step_count=len(self._steps),
            current_step=self.current_step,
            next_step=next_step,
            countdown_kind=self.countdown_kind,
            seconds_remaining=active.seconds_remaining,
            total_duration=active.total_duration,
            elapsed_total_seconds=self.elapsed_total_seconds,
            show_up_next=show_up_next,
            progress=progress_fraction(self.current_index, len(self._steps)),
        )

    # ----- Event surface -----

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener for every session event.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: SessionEvent) -> None:
        for listener in list(self._listeners):
            listener(event)

    def _notice(self, code: NoticeCode) -> None:
        logger.info(f"Play Mode notice: {code}")
        self._emit(Notice.for_code(code))

    # ----- Lifecycle -----

    def start(self, steps: Sequence[WorkoutStep] | None) -> None:
        """Start the session at the first step.

        Raises:
            SessionStateError: If the controller was already started
            InvalidSessionError: If steps is empty or has duplicate ids
            InvalidDurationError: If any step duration is not positive
        """
        if self.phase is not None:
            raise SessionStateError("Play Mode session already started", details=[f"phase={self.phase}"])

        self._steps = validate_steps(steps)
        self.current_index = 0
        self.elapsed_total_seconds = 0
        self.phase = SessionPhase.RUNNING

        logger.info(
            "Play Mode session started",
            step_count=len(self._steps),
            transition_seconds=self.transition_seconds,
        )
        self._begin_step(0)

    def tick(self) -> None:
        """Deliver one second from the external tick source.

        A tick arriving while paused, completed, or aborted is a no-op.
        """
        self._require_started()
        if self.phase not in {SessionPhase.RUNNING, SessionPhase.TRANSITIONING}:
            return
        self._active_countdown().tick()

    def on_countdown_expired(self) -> None:
        """Handle expiry of the workout countdown."""
        self._require_started()
        if self.phase != SessionPhase.RUNNING:
            return

        index = self.current_index

        if self.is_last_step:
            self.phase = SessionPhase.COMPLETED
            self._stop_all()
            logger.info("Play Mode session completed", total_elapsed=self.elapsed_total_seconds)
            self._emit(Expired(index=index))
            self._emit(SessionCompleted(total_elapsed=self.elapsed_total_seconds))
            return

        self.phase = SessionPhase.TRANSITIONING
        self.transition.start(self.transition_seconds)
        logger.info("Play Mode transition started", from_index=index, to_index=index + 1)
        self._emit(Expired(index=index))
        self._emit(
            TransitionStarted(
                from_index=index,
                to_index=index + 1,
                duration_seconds=self.transition_seconds,
            )
        )

    def on_transition_expired(self) -> None:
        """Handle expiry of the transition countdown: advance one step."""
        self._require_started()
        if self.phase != SessionPhase.TRANSITIONING:
            return

        to_index = self.current_index + 1
        self.phase = SessionPhase.RUNNING
        self._begin_step(to_index, announce=[TransitionExpired(to_index=to_index)])

    def abort(self) -> None:
        """Stop everything and discard the session without completing it."""
        self._require_started()
        if self.phase.is_terminal:
            return

        self.phase = SessionPhase.ABORTED
        self._paused_from = None
        self._stop_all()
        logger.info(
            "Play Mode session aborted",
            index=self.current_index,
            elapsed_total_seconds=self.elapsed_total_seconds,
        )
        self._emit(SessionAborted(elapsed_total_seconds=self.elapsed_total_seconds))

    # ----- Pause -----

    def toggle_pause(self) -> None:
        self._require_started()
        if self.phase == SessionPhase.PAUSED:
            self.resume()
        else:
            self.pause()

    def pause(self) -> None:
        """Pause the active countdown. Idempotent."""
        self._require_started()
        if self.phase.is_terminal or self.phase == SessionPhase.PAUSED:
            return

        self._active_countdown().pause()
        self._paused_from = self.phase
        self.phase = SessionPhase.PAUSED
        logger.debug("Play Mode paused", paused_from=self._paused_from)
        self._emit(SessionPaused(phase=self._paused_from))

    def resume(self) -> None:
        """Resume from pause into the phase that was paused. Idempotent."""
        self._require_started()
        if self.phase != SessionPhase.PAUSED:
            return

        self.phase = self._paused_from or SessionPhase.RUNNING
        self._paused_from = None
        self._active_countdown().resume()
        logger.debug("Play Mode resumed", phase=self.phase)
        self._emit(SessionResumed(phase=self.phase))

    # ----- Manual controls -----

    def skip_forward(self) -> None:
        self._require_started()
        if not self._controls_available():
            return
        if self.is_last_step:
            self._notice(NoticeCode.LAST_STEP)
            return
        self._skip_to(self.current_index + 1)

    def skip_backward(self) -> None:
        self._require_started()
        if not self._controls_available():
            return
        if self.current_index == 0:
            self._notice(NoticeCode.FIRST_STEP)
            return
        self._skip_to(self.current_index - 1)

    def restart_current_step(self) -> None:
        """Restart the current step from its full duration."""
        self._require_started()
        if not self._controls_available():
            return

        step = self.current_step
        self.countdown.initialize(step.duration_seconds)
        if self.phase == SessionPhase.RUNNING:
            self.countdown.resume()
        logger.info("Play Mode step restarted", index=self.current_index)
        self._emit(StepRestarted(index=self.current_index, duration_seconds=step.duration_seconds))

    def add_seconds(self, seconds: int) -> None:
        """Add time to the current workout countdown.

        Raises:
            InvalidDurationError: If seconds is not positive
        """
        self._require_started()
        require_positive_seconds(seconds, "added time")
        if not self._controls_available():
            return
        if self.countdown.add_seconds(seconds):
            logger.debug("Play Mode time added", seconds=seconds, seconds_remaining=self.countdown.seconds_remaining)
            self._emit(TimeAdded(seconds=seconds, seconds_remaining=self.countdown.seconds_remaining))

    # ----- Internals -----

    def _require_started(self) -> None:
        if self.phase is None:
            raise SessionStateError("Play Mode session has not been started")

    def _controls_available(self) -> bool:
        """Manual step controls are dead in terminal phases and locked during transitions."""
        if self.phase.is_terminal:
            return False
        if self.in_transition:
            self._notice(NoticeCode.TRANSITION_LOCKED)
            return False
        return True

    def _active_countdown(self) -> CountdownEngine | TransitionManager:
        return self.transition if self.in_transition else self.countdown

    def _begin_step(self, index: int, announce: Sequence[SessionEvent] = ()) -> None:
        """Load a step into the workout countdown, then notify listeners.

        A paused session stays paused on the new step until resumed.

        Args:
            index: Step to load
            announce: Events to emit before StepStarted, once the step is loaded
        """
        self.current_index = index
        step = self._steps[index]
        self.countdown.initialize(step.duration_seconds)
        if self.phase == SessionPhase.RUNNING:
            self.countdown.resume()
        logger.info("Play Mode step started", index=index, duration_seconds=step.duration_seconds)

        for event in announce:
            self._emit(event)
        self._emit(StepStarted(index=index, step=step, duration_seconds=step.duration_seconds))

    def _skip_to(self, to_index: int) -> None:
        from_index = self.current_index
        self.countdown.cancel()
        self._begin_step(to_index, announce=[StepSkipped(from_index=from_index, to_index=to_index)])

    def _stop_all(self) -> None:
        self.countdown.cancel()
        self.transition.cancel()

    def _on_tick(self, state: CountdownState) -> None:
        self.elapsed_total_seconds += 1
        self._emit(
            CountdownTicked(
                kind=state.kind,
                seconds_remaining=state.seconds_remaining,
                elapsed_total_seconds=self.elapsed_total_seconds,
            )
        )

    def _on_preview_due(self) -> None:
        next_step = self.next_step
        if next_step is None:
            return
        self._emit(
            PreviewDue(
                index=self.current_index,
                seconds_remaining=self.countdown.seconds_remaining,
                next_step=next_step,
            )
        )
