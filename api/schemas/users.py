"""Schemas for authentication and user management."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field, field_validator

from api.schemas.common import CamelModel
from database.models.users import UserRole


class RegisterRequest(CamelModel):
    """
    Self-registration payload.

    ``role`` and ``active`` are accepted so clients that send them are not
    rejected, but the server always overrides both.
    """

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=128)
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None
    role: Optional[str] = Field(None, description="Ignored; new accounts are technical interviewers")
    active: Optional[bool] = Field(None, description="Ignored; new accounts start inactive")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        v = v.strip()
        if not v.replace("_", "").replace(".", "").replace("-", "").isalnum():
            raise ValueError("Username may only contain letters, digits, '.', '_' and '-'")
        return v


class LoginRequest(CamelModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ChangePasswordRequest(CamelModel):
    current_password: str = Field(..., min_length=1, description="Current password")
    new_password: str = Field(..., min_length=6, max_length=128, description="New password")


class UserUpdateRequest(CamelModel):
    """Admin edit of another account. Omitted fields are left unchanged."""

    role: Optional[UserRole] = None
    active: Optional[bool] = None
    name: Optional[str] = Field(None, max_length=200)
    email: Optional[EmailStr] = None


class UserResponse(CamelModel):
    id: int
    username: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: UserRole
    active: bool
    created_at: Optional[datetime] = None


class RegisterResponse(CamelModel):
    user: UserResponse
    message: str


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Token lifetime in seconds")
    user: UserResponse
