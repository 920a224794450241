"""
Role-based authorization.

Roles form a closed enumeration, so every gate reduces to a pure predicate
over (role, allowed roles). ``check_role`` wraps that predicate as a FastAPI
dependency; the interview helpers encode who may see or act on which
interview.
"""

import logging
from typing import Callable, Iterable

from fastapi import Request
from sqlalchemy import false, true
from sqlalchemy.sql.elements import ColumnElement

from core.exceptions import AuthorizationError
from core.middleware.authentication import get_current_user
from database.models.interviews import Interview
from database.models.users import User, UserRole

logger = logging.getLogger(__name__)


# Roles that see every interview
INTERVIEW_READ_ALL_ROLES = frozenset({UserRole.ADMIN, UserRole.HR, UserRole.DIRECTOR})

# Roles that manage interviews regardless of assignee
INTERVIEW_MANAGE_ROLES = frozenset({UserRole.ADMIN, UserRole.HR})

HR_ROLES = (UserRole.ADMIN, UserRole.HR)
STAFF_ROLES = tuple(UserRole)
QUESTION_AUTHOR_ROLES = (UserRole.ADMIN, UserRole.HR, UserRole.TECHNICAL_INTERVIEWER)
INTERVIEW_CONDUCT_ROLES = (UserRole.ADMIN, UserRole.HR, UserRole.TECHNICAL_INTERVIEWER)


def is_role_allowed(role: UserRole | str | None, allowed_roles: Iterable[UserRole]) -> bool:
    """
    Pure role gate. Unknown role strings are never allowed.
    """
    if role is None:
        return False
    try:
        role = UserRole(role)
    except ValueError:
        return False
    return role in frozenset(allowed_roles)


def check_role(*allowed_roles: UserRole) -> Callable:
    """
    Dependency factory: 401 without a user, 403 when the role is not allowed.

    Usage:
        @router.get("/users", dependencies=[Depends(check_role(UserRole.ADMIN))])
    """
    allowed = frozenset(allowed_roles)

    def dependency(request: Request) -> User:
        user = get_current_user(request)
        if not is_role_allowed(user.role, allowed):
            logger.info(
                f"Role {user.role} denied on {request.method} {request.url.path}"
            )
            raise AuthorizationError()
        return user

    return dependency


def visible_interviews_filter(user: User) -> ColumnElement[bool]:
    """
    WHERE clause selecting the interviews ``user`` may list.

    admin, hr and director see everything, a technical interviewer sees only
    interviews assigned to them, and any other role sees nothing.
    """
    if is_role_allowed(user.role, INTERVIEW_READ_ALL_ROLES):
        return true()
    if is_role_allowed(user.role, (UserRole.TECHNICAL_INTERVIEWER,)):
        return Interview.assignee_id == user.id
    return false()


def can_view_interview(user: User, interview: Interview) -> bool:
    if is_role_allowed(user.role, INTERVIEW_READ_ALL_ROLES):
        return True
    if is_role_allowed(user.role, (UserRole.TECHNICAL_INTERVIEWER,)):
        return interview.assignee_id is not None and interview.assignee_id == user.id
    return False


def can_act_on_interview(user: User, interview: Interview) -> bool:
    """Start, score and summarize. Directors are read-only."""
    if is_role_allowed(user.role, INTERVIEW_MANAGE_ROLES):
        return True
    if is_role_allowed(user.role, (UserRole.TECHNICAL_INTERVIEWER,)):
        return interview.assignee_id is not None and interview.assignee_id == user.id
    return False


def ensure_can_view_interview(user: User, interview: Interview) -> None:
    if not can_view_interview(user, interview):
        raise AuthorizationError()


def ensure_can_act_on_interview(user: User, interview: Interview) -> None:
    if not can_act_on_interview(user, interview):
        raise AuthorizationError()
