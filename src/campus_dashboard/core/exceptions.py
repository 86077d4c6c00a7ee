"""Custom exception classes for the Campus Dashboard backend.

Managers raise these; route handlers and the global exception handlers map
them onto HTTP status codes.
"""


class CampusDashboardError(Exception):
    """Base exception for all Campus Dashboard errors."""

    pass


class RecordNotFoundError(CampusDashboardError):
    """Raised when a requested row does not exist."""

    def __init__(self, kind: str, record_id=None):
        """Initialize the exception.

        Args:
            kind: Human readable entity name, e.g. "Coaching slot".
            record_id: The identifier that was looked up.
        """
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} not found")


class ValidationError(CampusDashboardError):
    """Raised when request data fails a domain check."""

    pass


class BookingError(CampusDashboardError):
    """Raised when a booking or group join violates capacity or membership rules."""

    pass


class UserAlreadyExistsError(CampusDashboardError):
    """Raised when trying to create a user whose email is taken."""

    pass


class AuthenticationError(CampusDashboardError):
    """Raised when credentials or tokens cannot be verified."""

    pass
