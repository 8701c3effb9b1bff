"""Application errors.

Every error carries a user-facing message and maps to one HTTP status code.
The handlers registered in ``app.main`` render them as ``{"error": message}``.
"""


class BirthdayTrackerError(Exception):
    """Base class for all application errors."""

    status_code = 500

    def __init__(self, message: str = "An unexpected error occurred"):
        self.message = message
        super().__init__(message)


class ValidationError(BirthdayTrackerError):
    """Malformed client input."""

    status_code = 400


class InvalidMonth(ValidationError):
    def __init__(self, month=None):
        super().__init__("Invalid month" if month is None else f"Invalid month: {month}")


class InvalidDay(ValidationError):
    def __init__(self, month=None):
        super().__init__(
            "Invalid day" if month is None else f"Invalid day for month {month}"
        )


class Unauthenticated(BirthdayTrackerError):
    """Missing or invalid credential."""

    status_code = 401


class ExpiredToken(Unauthenticated):
    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class NotYetValid(Unauthenticated):
    def __init__(self, message: str = "Token is not yet valid"):
        super().__init__(message)


class BadSignature(Unauthenticated):
    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class MalformedClaims(Unauthenticated):
    def __init__(self, message: str = "Invalid token claims"):
        super().__init__(message)


class Forbidden(BirthdayTrackerError):
    """Valid credential, insufficient rights."""

    status_code = 403

    def __init__(self, message: str = "Access denied"):
        super().__init__(message)


class NotFound(BirthdayTrackerError):
    """Referenced entity does not exist."""

    status_code = 404

    def __init__(self, resource: str = "Resource"):
        self.resource = resource
        super().__init__(f"{resource} not found")


class Conflict(BirthdayTrackerError):
    """Unique constraint violation, e.g. a duplicate email."""

    status_code = 409


class InternalFailure(BirthdayTrackerError):
    """Store or hashing failure. The message is never shown to clients."""

    status_code = 500
