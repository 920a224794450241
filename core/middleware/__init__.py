"""
Core middleware package.

- Error handling with sensitive data sanitization
- Structured request logging with masking
- Bearer-token authentication backed by login sessions
- Role-based authorization gates
"""

from core.middleware.error_handling import (
    ErrorHandlingMiddleware,
    setup_error_handlers,
    sanitize_error_message,
)

from core.middleware.logging import (
    StructuredLoggingMiddleware,
    setup_logging,
    get_logger,
)

from core.middleware.authentication import (
    AuthenticationMiddleware,
    get_current_user,
    get_current_session,
)

from core.middleware.authorization import (
    check_role,
    is_role_allowed,
    visible_interviews_filter,
    can_view_interview,
    can_act_on_interview,
)

__all__ = [
    # Error handling
    "ErrorHandlingMiddleware",
    "setup_error_handlers",
    "sanitize_error_message",
    # Logging
    "StructuredLoggingMiddleware",
    "setup_logging",
    "get_logger",
    # Authentication
    "AuthenticationMiddleware",
    "get_current_user",
    "get_current_session",
    # Authorization
    "check_role",
    "is_role_allowed",
    "visible_interviews_filter",
    "can_view_interview",
    "can_act_on_interview",
]
