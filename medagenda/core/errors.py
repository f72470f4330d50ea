"""Domain errors raised by the scheduling services.

Routers translate these into HTTP responses; nothing below the route layer
knows about status codes.
"""


class SchedulingError(Exception):
    """Base class for every error the scheduling services raise."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidReference(SchedulingError):
    """Unknown doctor or consultation type, or one owned by another doctor."""


class InvalidRange(SchedulingError):
    """A start that does not come before its end, or malformed/overlapping windows."""


class RecordNotFound(SchedulingError):
    pass


class DuplicateRecord(SchedulingError):
    pass


class SlotConflict(SchedulingError):
    """The requested time range is no longer free for the doctor."""
