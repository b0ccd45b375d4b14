"""
SafeReport - Error Types
Exceptions raised by the domain layers and mapped to HTTP responses by the API.
"""


class SafeReportError(Exception):
    """Base class for all application errors."""

    status_code = 500
    public_message = "Internal error"

    def __init__(self, message: str = ""):
        super().__init__(message or self.public_message)
        self.message = message or self.public_message


class ValidationError(SafeReportError):
    """A submission is missing or has malformed required fields."""
    status_code = 400
    public_message = "Invalid report submission"


class Unauthorized(SafeReportError):
    """The caller is not an authenticated operator."""
    status_code = 401
    public_message = "Unauthorized"


class NotFound(SafeReportError):
    """No report exists for the given external identifier."""
    status_code = 404
    public_message = "Report not found"


class StoreError(SafeReportError):
    """Persistence layer unavailable or a constraint was violated."""
    status_code = 500
    public_message = "Failed to access report store"


class DuplicateReportId(StoreError):
    """The generated report identifier already exists."""


class ClassificationError(SafeReportError):
    """The image model is unavailable or returned nothing usable."""
    status_code = 500
    public_message = "Failed to analyze image"


class GeolocationError(SafeReportError):
    """An address or coordinate pair could not be resolved."""
    status_code = 502
    public_message = "Failed to resolve location"


class TriageError(SafeReportError):
    """A status change was rejected."""
    status_code = 409
    public_message = "Status change rejected"


class InvalidTransition(TriageError):
    """The requested status is not reachable from the current one."""


class Conflict(TriageError):
    """The report changed since it was read."""
    public_message = "Report was modified by another operator"
