"""Error taxonomy for the tracker."""


class CalaiError(Exception):
    """Base class for application errors."""


class EstimationError(CalaiError):
    """Food estimation failed or returned unusable data."""

    user_message = "Failed to analyze. Please try again or check your connection."


class PlanCalculationError(CalaiError):
    """Plan collaborator failed to produce a usable plan."""


class ValidationError(CalaiError, ValueError):
    """Profile input is malformed."""


class DuplicateEntryError(CalaiError, ValueError):
    """A food log entry id was already appended."""


class RequestInProgressError(CalaiError):
    """An estimation request is already outstanding."""


class StorageError(CalaiError):
    """Persisted state could not be read."""
