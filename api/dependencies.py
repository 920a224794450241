"""FastAPI dependencies for dependency injection."""

from typing import Optional

from fastapi import Depends, Request

from core.middleware.authentication import get_current_session, get_current_user
from core.middleware.authorization import (
    HR_ROLES,
    INTERVIEW_CONDUCT_ROLES,
    QUESTION_AUTHOR_ROLES,
    STAFF_ROLES,
    check_role,
)
from database.engine import get_db
from database.models.users import User, UserRole, UserSession

__all__ = [
    "get_db",
    "require_authenticated_user",
    "get_optional_user",
    "require_session",
    "require_admin",
    "require_hr",
    "require_staff",
    "require_question_author",
    "require_interview_conductor",
]


async def require_authenticated_user(request: Request) -> User:
    """User attached by the authentication middleware; 401 otherwise."""
    return get_current_user(request)


async def get_optional_user(request: Request) -> Optional[User]:
    """User on public endpoints when a valid token was sent, else None."""
    return request.scope.get("user")


async def require_session(
    request: Request,
    current_user: User = Depends(require_authenticated_user),
) -> UserSession:
    return get_current_session(request)


require_admin = check_role(UserRole.ADMIN)
require_hr = check_role(*HR_ROLES)
require_staff = check_role(*STAFF_ROLES)
require_question_author = check_role(*QUESTION_AUTHOR_ROLES)
require_interview_conductor = check_role(*INTERVIEW_CONDUCT_ROLES)
