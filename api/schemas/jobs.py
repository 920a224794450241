"""Schemas for job positions and applications."""

from datetime import datetime
from typing import Optional

from pydantic import EmailStr, Field

from api.schemas.candidates import CandidateResponse
from api.schemas.common import CamelModel
from database.models.applications import ApplicationStatus


class JobPositionCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    level: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    requirements: list[str] = Field(default_factory=list)
    is_open: bool = True


class JobPositionUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = Field(None, max_length=100)
    level: Optional[str] = Field(None, max_length=100)
    location: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    requirements: Optional[list[str]] = None
    is_open: Optional[bool] = None


class JobPositionResponse(CamelModel):
    id: int
    title: str
    department: Optional[str] = None
    level: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    requirements: list[str] = Field(default_factory=list)
    is_open: bool
    created_at: Optional[datetime] = None


class ApplicationSubmit(CamelModel):
    """Public application form."""

    full_name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=50)
    resume: Optional[str] = Field(None, description="Path returned by the resume upload endpoint")
    cover_letter: Optional[str] = None
    job_id: int


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicationResponse(CamelModel):
    id: int
    candidate_id: int
    job_id: int
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    resume_path: Optional[str] = None
    created_at: Optional[datetime] = None


class ApplicationDetailResponse(ApplicationResponse):
    candidate: Optional[CandidateResponse] = None
    job: Optional[JobPositionResponse] = None


class ApplicationSubmitResponse(CamelModel):
    message: str
    application: ApplicationResponse
    candidate: CandidateResponse


class ResumeUploadResponse(CamelModel):
    path: str
    original_filename: str
    suggested_name: Optional[str] = None
