"""
Platform-wide exception hierarchy.

Services raise these; ``app.utils.errors.register_error_handlers`` maps them
to HTTP responses once for the whole app, so blueprints never translate
errors by hand.

Usage:
    from app.core.exceptions import NotFoundError, ValidationError

    raise NotFoundError(resource="Proposal", resource_id=proposal_id)
    raise ValidationError("Invalid vote type", details={"voteType": "maybe"})
"""


class AppError(Exception):
    """Base class. ``http_status`` and ``code`` drive the JSON error response."""

    http_status = 500
    code = "ERR_INTERNAL"

    def __init__(self, message: str, details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message)


class ValidationError(AppError):
    """Missing or malformed input. Maps to HTTP 400."""

    http_status = 400
    code = "ERR_VALIDATION"


class AuthRequiredError(AppError):
    """The endpoint needs an authenticated caller. Maps to HTTP 401."""

    http_status = 401
    code = "ERR_AUTH_REQUIRED"

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message)


class ForbiddenError(AppError):
    """Authenticated, but not allowed to touch this resource. Maps to HTTP 403."""

    http_status = 403
    code = "ERR_FORBIDDEN"

    def __init__(self, message: str = "Not authorized") -> None:
        super().__init__(message)


class NotFoundError(AppError):
    """Raised when a requested resource does not exist.

    Args:
        resource: Human-readable entity name (e.g. "Proposal").
        resource_id: The key that was looked up. Logged, not returned.
    """

    http_status = 404
    code = "ERR_NOT_FOUND"

    def __init__(self, resource: str, resource_id: str | None = None) -> None:
        self.resource = resource
        self.resource_id = resource_id
        super().__init__(f"{resource} not found")


class InvalidStateError(AppError):
    """The target exists but its lifecycle state forbids the operation.

    Example: voting on a proposal whose status is ``draft`` or ``closed``.
    Maps to HTTP 400.
    """

    http_status = 400
    code = "ERR_INVALID_STATE"


class InternalError(AppError):
    """Storage or system fault. The message returned to callers is generic."""

    http_status = 500
    code = "ERR_INTERNAL"


class SchemaConvergenceError(InternalError):
    """Table creation, column repair or reseeding failed during a cold start."""

    code = "ERR_SCHEMA"
