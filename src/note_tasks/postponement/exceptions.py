"""Custom exceptions for task postponement functionality."""


class PostponementError(Exception):
    """Base exception for postponement errors."""

    pass


class NotPostponableError(PostponementError):
    """Exception raised when a task has no due, scheduled or start date."""

    pass


class NoActiveDocumentError(PostponementError):
    """Exception raised when relocation has no active note to move into."""

    pass


class PersistenceError(PostponementError):
    """Exception raised when saving a task or writing a note fails."""

    pass


class TaskLineNotFoundError(PersistenceError):
    """Exception raised when the original task line can no longer be found."""

    pass


class HistoryError(PostponementError):
    """Exception raised for task history journal errors."""

    pass


class InvalidOptionError(PostponementError):
    """Exception raised for unknown postponement option keys."""

    pass
