class TrackerError(Exception):
    """Base exception for assignment tracker errors."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(TrackerError):
    """Raised when input is malformed or missing."""

    status_code = 400


class AuthError(TrackerError):
    """Raised when there is no session or the role is insufficient."""

    status_code = 403


class QuotaExceeded(TrackerError):
    """Raised when a class already holds the weekly maximum of assignments."""

    status_code = 400

    def __init__(self, class_name, limit):
        super().__init__(
            f'Assignment quota for class {class_name} has reached the maximum of {limit} per week'
        )
        self.class_name = class_name
        self.limit = limit


class NotFound(TrackerError):
    """Raised when a referenced entity does not exist."""

    status_code = 404


class Conflict(TrackerError):
    """Raised when a uniqueness rule would be violated."""

    status_code = 409


class StorageError(TrackerError):
    """Raised when the database rejects a write."""

    status_code = 500


class ProviderError(TrackerError):
    """Raised when the messaging provider is misconfigured or fails."""

    status_code = 400


class AlreadySent(ProviderError):
    """Raised when a reminder was already dispatched for an assignment."""
