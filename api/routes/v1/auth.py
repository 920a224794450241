"""
Authentication endpoints.

Provides:
- Self-registration (always an inactive technical interviewer)
- Username/password login returning a bearer token bound to a session
- Logout (revokes the session)
- Current user and password change
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_authenticated_user, require_session
from api.schemas.common import MessageResponse
from api.schemas.users import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
    UserResponse,
)
from api.services import users as user_service
from core.middleware.logging import get_client_ip
from database.models.users import User, UserSession

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
)
async def register(payload: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """
    Create an account pending admin activation. Any role or active flag in
    the payload is ignored.
    """
    user = await user_service.register_user(
        db,
        username=payload.username,
        password=payload.password,
        name=payload.name,
        email=payload.email,
    )
    return {"user": user, "message": user_service.PENDING_ACTIVATION}


@router.post("/login", response_model=LoginResponse, summary="Login")
async def login(payload: LoginRequest, request: Request, db: AsyncSession = Depends(get_db)):
    return await user_service.login(
        db,
        username=payload.username,
        password=payload.password,
        ip_address=get_client_ip(request),
        user_agent=request.headers.get("user-agent"),
    )


@router.post("/logout", response_model=MessageResponse, summary="Logout")
async def logout(
    session: UserSession = Depends(require_session),
    db: AsyncSession = Depends(get_db),
):
    await user_service.logout(db, session.id)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse, summary="Current User")
async def current_user(user: User = Depends(require_authenticated_user)):
    return user


@router.post("/change-password", response_model=MessageResponse, summary="Change Password")
async def change_password(
    payload: ChangePasswordRequest,
    user: User = Depends(require_authenticated_user),
    db: AsyncSession = Depends(get_db),
):
    await user_service.change_password(db, user.id, payload.current_password, payload.new_password)
    return {"message": "Password updated successfully"}
