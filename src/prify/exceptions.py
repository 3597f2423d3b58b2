"""PRify exceptions."""


class PrifyError(Exception):
    """Base exception for PRify errors."""
    pass


class NotAuthenticatedError(PrifyError):
    """Raised when an operation needs a signed-in user and there is none."""

    def __init__(self, message: str = "No authenticated user found"):
        super().__init__(message)


class NotFoundError(PrifyError):
    """Raised when a workout, exercise, set or category does not exist."""
    pass


class DuplicateError(PrifyError):
    """Raised when a unique name is already taken."""
    pass


class RecordSyncError(PrifyError):
    """Raised when a personal record pass hit at least one persistence error.

    Records written before the failure are kept. ``results`` holds the
    outcome of every exercise that was checked, ``cause`` the first error.
    """

    def __init__(self, message: str, cause: Exception, results: list | None = None):
        super().__init__(message)
        self.cause = cause
        self.results = results or []
