"""
User service functions: registration, login sessions and account management.

Every function takes the request's ``AsyncSession`` and commits its own work.
"""

from datetime import timedelta
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import (
    AccountInactiveError,
    AuthenticationError,
    LastAdminError,
    NotFoundError,
    ValidationError,
)
from core.security import (
    AuditAction,
    ResourceType,
    create_access_token,
    generate_session_token,
    hash_password_async,
    log_audit_event,
    verify_password_async,
)
from core.utils.datetime import now
from database.models.users import User, UserRole, UserSession

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"
PENDING_ACTIVATION = "Registration successful. Your account is pending activation by an administrator."


async def get_user_by_username(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user(db: AsyncSession, user_id: int) -> Optional[User]:
    return await db.get(User, user_id)


async def list_users(db: AsyncSession) -> List[User]:
    result = await db.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def count_active_admins(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count(User.id)).where(User.role == UserRole.ADMIN, User.active.is_(True))
    )
    return result.scalar_one()


async def register_user(
    db: AsyncSession,
    username: str,
    password: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    """
    Self-registration. The account is always an inactive technical
    interviewer, whatever the client asked for.
    """
    if await get_user_by_username(db, username):
        raise ValidationError("Username already exists")

    user = User(
        username=username,
        password=await hash_password_async(password),
        name=name,
        email=email,
        role=UserRole.TECHNICAL_INTERVIEWER,
        active=False,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)

    log_audit_event(AuditAction.REGISTER, ResourceType.USER, user.id, user_id=user.id)
    return user


async def create_user(
    db: AsyncSession,
    username: str,
    password: str,
    role: UserRole,
    active: bool = True,
    name: Optional[str] = None,
    email: Optional[str] = None,
) -> User:
    """Create an account with an explicit role. Used for seeding."""
    user = User(
        username=username,
        password=await hash_password_async(password),
        role=role,
        active=active,
        name=name,
        email=email,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


async def authenticate(db: AsyncSession, username: str, password: str) -> User:
    """
    Check credentials, then the activation flag.

    Raises:
        AuthenticationError: unknown user, wrong password or malformed hash
        AccountInactiveError: credentials are right but the account is inactive
    """
    user = await get_user_by_username(db, username)
    if user is None or not await verify_password_async(password, user.password):
        raise AuthenticationError(INVALID_CREDENTIALS)

    if not user.active:
        raise AccountInactiveError()

    return user


async def login(
    db: AsyncSession,
    username: str,
    password: str,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> Dict[str, Any]:
    """Authenticate and open a session. Returns the access token and user."""
    user = await authenticate(db, username, password)

    session = UserSession(
        user_id=user.id,
        session_token=generate_session_token(),
        expires_at=now() + timedelta(hours=settings.session_expire_hours),
        ip_address=ip_address,
        user_agent=user_agent[:255] if user_agent else None,
    )
    db.add(session)
    await db.commit()
    await db.refresh(session)

    token_lifetime = timedelta(minutes=settings.access_token_expire_minutes)
    access_token = create_access_token(
        user_id=user.id,
        session_id=session.id,
        role=user.role.value,
        expires_delta=token_lifetime,
    )

    log_audit_event(AuditAction.LOGIN, ResourceType.USER, user.id, user_id=user.id)
    logger.info(f"User {user.id} logged in (session {session.id})")

    return {
        "access_token": access_token,
        "token_type": "bearer",
        "expires_in": int(token_lifetime.total_seconds()),
        "user": user,
    }


async def logout(db: AsyncSession, session_id: int) -> bool:
    session = await db.get(UserSession, session_id)
    if session is None or session.revoked_at is not None:
        return False

    session.revoked_at = now()
    await db.commit()

    log_audit_event(AuditAction.LOGOUT, ResourceType.USER, session.user_id, user_id=session.user_id)
    return True


async def change_password(
    db: AsyncSession,
    user_id: int,
    current_password: str,
    new_password: str,
) -> None:
    user = await db.get(User, user_id)
    if user is None:
        raise NotFoundError.for_resource("User", user_id)

    if not await verify_password_async(current_password, user.password):
        raise ValidationError("Current password is incorrect")

    user.password = await hash_password_async(new_password)
    await db.commit()

    log_audit_event(AuditAction.PASSWORD_CHANGE, ResourceType.USER, user.id, user_id=user.id)


async def update_user(
    db: AsyncSession,
    user_id: int,
    changes: Dict[str, Any],
    acting_user_id: Optional[int] = None,
) -> Optional[User]:
    """
    Partial admin update of role, active flag, name or email.

    Refuses to demote or deactivate the last active admin.
    """
    user = await db.get(User, user_id)
    if user is None:
        return None

    new_role = changes.get("role", user.role)
    new_active = changes.get("active", user.active)
    loses_admin = (
        user.role == UserRole.ADMIN
        and user.active
        and (new_role != UserRole.ADMIN or not new_active)
    )
    if loses_admin and await count_active_admins(db) <= 1:
        raise LastAdminError(
            "Cannot demote or deactivate the last active admin account"
        )

    previous = {"role": user.role.value, "active": user.active}
    for field in ("role", "active", "name", "email"):
        if field in changes:
            setattr(user, field, changes[field])

    await db.commit()
    await db.refresh(user)

    if "role" in changes or "active" in changes:
        log_audit_event(
            AuditAction.ROLE_CHANGE,
            ResourceType.USER,
            user.id,
            user_id=acting_user_id,
            details={
                "before": previous,
                "after": {"role": user.role.value, "active": user.active},
            },
        )
    return user


async def delete_user(
    db: AsyncSession,
    user_id: int,
    acting_user_id: Optional[int] = None,
) -> bool:
    """
    Delete an account.

    Raises:
        ValidationError: an admin tried to delete their own account
        LastAdminError: the target is the only admin left
    """
    user = await db.get(User, user_id)
    if user is None:
        return False

    if user.role == UserRole.ADMIN:
        admin_count = (
            await db.execute(select(func.count(User.id)).where(User.role == UserRole.ADMIN))
        ).scalar_one()
        remaining_active = await count_active_admins(db) - (1 if user.active else 0)
        if admin_count <= 1 or remaining_active < 1:
            raise LastAdminError("Cannot delete the last admin account")

    if acting_user_id is not None and acting_user_id == user_id:
        raise ValidationError("You cannot delete your own account")

    await db.delete(user)
    await db.commit()

    log_audit_event(AuditAction.DELETE, ResourceType.USER, user_id, user_id=acting_user_id)
    return True
