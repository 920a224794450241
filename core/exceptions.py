"""
Domain exceptions.

Each exception carries the HTTP status and machine-readable code it maps to;
``core.middleware.error_handling`` turns them into the standard error body.
"""

from typing import Any, Optional


class AppError(Exception):
    """Base class for errors that map onto a client-facing response."""

    status_code: int = 500
    code: str = "INTERNAL_SERVER_ERROR"
    default_message: str = "An unexpected error occurred"

    def __init__(self, message: Optional[str] = None, details: Any = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400
    code = "VALIDATION_ERROR"
    default_message = "Request validation failed"


class AuthenticationError(AppError):
    """Bad or missing credentials."""

    status_code = 401
    code = "UNAUTHENTICATED"
    default_message = "Unauthorized"


class AccountInactiveError(AuthenticationError):
    """Credentials are valid but the account has not been activated."""

    code = "ACCOUNT_PENDING_ACTIVATION"
    default_message = "Account is inactive. Please contact an administrator."


class AuthorizationError(AppError):
    """Authenticated, but the role is not allowed to do this."""

    status_code = 403
    code = "FORBIDDEN"
    default_message = "Forbidden: Insufficient permissions"


class InvariantViolation(AppError):
    """A request that would break a system-wide invariant."""

    status_code = 403
    code = "INVARIANT_VIOLATION"
    default_message = "The requested change violates a system invariant"


class LastAdminError(InvariantViolation):
    code = "LAST_ADMIN"
    default_message = "Cannot remove the last active admin account"


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"
    default_message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str, resource_id: Any) -> "NotFoundError":
        return cls(f"{resource} {resource_id} not found")


class InvalidStateTransition(AppError):
    """Interview status change that the state machine does not allow."""

    status_code = 409
    code = "INVALID_STATE_TRANSITION"
    default_message = "Invalid status transition"
