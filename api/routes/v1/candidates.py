"""Candidate management endpoints (HR and admin)."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_hr
from api.schemas.candidates import CandidateCreate, CandidateResponse, CandidateUpdate
from api.schemas.interviews import InterviewResponse
from api.services import candidates as candidate_service
from core.exceptions import NotFoundError
from database.models.candidates import CandidateStatus
from database.models.users import User

router = APIRouter(prefix="/candidates", tags=["candidates"], dependencies=[Depends(require_hr)])


@router.get("", response_model=List[CandidateResponse])
async def list_candidates(
    status: Optional[CandidateStatus] = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db),
):
    return await candidate_service.get_candidates(db, status=status)


@router.get("/{candidate_id}", response_model=CandidateResponse)
async def get_candidate(candidate_id: int = Path(..., description="Candidate ID"), db: AsyncSession = Depends(get_db)):
    candidate = await candidate_service.get_candidate(db, candidate_id)
    if candidate is None:
        raise NotFoundError.for_resource("Candidate", candidate_id)
    return candidate


@router.get("/{candidate_id}/interviews", response_model=List[InterviewResponse])
async def get_candidate_interviews(
    candidate_id: int = Path(..., description="Candidate ID"),
    db: AsyncSession = Depends(get_db),
):
    if await candidate_service.get_candidate(db, candidate_id) is None:
        raise NotFoundError.for_resource("Candidate", candidate_id)
    return await candidate_service.get_candidate_interviews(db, candidate_id)


@router.post("", response_model=CandidateResponse, status_code=status.HTTP_201_CREATED)
async def create_candidate(
    payload: CandidateCreate,
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    """Candidates added by HR go straight to in_progress."""
    return await candidate_service.create_candidate(
        db, payload.model_dump(), status=CandidateStatus.IN_PROGRESS, acting_user_id=user.id
    )


@router.put("/{candidate_id}", response_model=CandidateResponse)
async def update_candidate(
    payload: CandidateUpdate,
    candidate_id: int = Path(..., description="Candidate ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    candidate = await candidate_service.update_candidate(
        db, candidate_id, payload.model_dump(exclude_unset=True), acting_user_id=user.id
    )
    if candidate is None:
        raise NotFoundError.for_resource("Candidate", candidate_id)
    return candidate


@router.delete("/{candidate_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_candidate(
    candidate_id: int = Path(..., description="Candidate ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    if not await candidate_service.delete_candidate(db, candidate_id, acting_user_id=user.id):
        raise NotFoundError.for_resource("Candidate", candidate_id)
