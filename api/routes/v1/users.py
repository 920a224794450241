"""User management endpoints (admin only)."""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_admin
from api.schemas.users import UserResponse, UserUpdateRequest
from api.services import users as user_service
from core.exceptions import NotFoundError
from database.models.users import User

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=List[UserResponse], dependencies=[Depends(require_admin)])
async def list_users(db: AsyncSession = Depends(get_db)):
    return await user_service.list_users(db)


@router.get("/{user_id}", response_model=UserResponse, dependencies=[Depends(require_admin)])
async def get_user(user_id: int = Path(..., description="User ID"), db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user(db, user_id)
    if user is None:
        raise NotFoundError.for_resource("User", user_id)
    return user


@router.patch("/{user_id}", response_model=UserResponse)
async def update_user(
    payload: UserUpdateRequest,
    user_id: int = Path(..., description="User ID"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Activate, deactivate or change the role of an account."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    user = await user_service.update_user(db, user_id, changes, acting_user_id=admin.id)
    if user is None:
        raise NotFoundError.for_resource("User", user_id)
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int = Path(..., description="User ID"),
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    if not await user_service.delete_user(db, user_id, acting_user_id=admin.id):
        raise NotFoundError.for_resource("User", user_id)
