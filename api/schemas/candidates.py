"""Schemas for candidates."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from api.schemas.common import CamelModel
from database.models.candidates import CandidateStatus


class CandidateCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    resume_path: Optional[str] = Field(None, max_length=500)


class CandidateUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=50)
    notes: Optional[str] = None
    resume_path: Optional[str] = Field(None, max_length=500)
    status: Optional[CandidateStatus] = None


class CandidateResponse(CamelModel):
    id: int
    name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    resume_path: Optional[str] = None
    status: CandidateStatus
    created_at: Optional[datetime] = None
