"""Play Mode error types.

Standard error codes:
- INVALID_SESSION: Step list is empty or has duplicate step ids
- INVALID_DURATION: A countdown, transition, or time adjustment is not positive
- INVALID_STATE: Operation called on a controller in the wrong lifecycle state

Boundary conditions (skipping past the first or last step, controls used
during a transition) are not errors. They surface as Notice events.
"""


class PlayModeError(RuntimeError):
    """Base error for Play Mode.

    Attributes:
        code: Error code (e.g., "INVALID_SESSION", "INVALID_DURATION")
        details: List of error detail strings
    """

    code = "PLAY_MODE_ERROR"

    def __init__(self, message: str, details: list[str] | None = None):
        self.message = message
        self.details = details or []
        super().__init__(f"{self.code}: {message}")


class InvalidSessionError(PlayModeError):
    """Raised when a session is started with an empty or malformed step list."""

    code = "INVALID_SESSION"


class InvalidDurationError(PlayModeError):
    """Raised when a duration is zero or negative.

    Fatal to the step it was raised for; callers should treat the
    session data as corrupt.
    """

    code = "INVALID_DURATION"


class SessionStateError(PlayModeError):
    """Raised when the controller is used before start() or started twice."""

    code = "INVALID_STATE"
