"""
Interview endpoints.

HR and admins schedule, edit, cancel and delete interviews and record the
final decision. The assigned technical interviewer (or HR/admin) starts the
interview, scores its questions and generates the summary. Directors read
everything but change nothing.
"""

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_hr, require_interview_conductor, require_staff
from api.schemas.interviews import (
    HRDecisionRequest,
    InterviewCreate,
    InterviewDetailResponse,
    InterviewGenerate,
    InterviewQuestionResponse,
    InterviewResponse,
    InterviewUpdate,
    ScorePreviewResponse,
)
from api.services import interviews as interview_service
from core.exceptions import NotFoundError
from database.models.users import User

router = APIRouter(prefix="/interviews", tags=["interviews"])


@router.get("", response_model=List[InterviewResponse])
async def list_interviews(user: User = Depends(require_staff), db: AsyncSession = Depends(get_db)):
    """Technical interviewers only see interviews assigned to them."""
    return await interview_service.list_interviews(db, user)


@router.post("", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
async def create_interview(
    payload: InterviewCreate,
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    return await interview_service.create_interview(db, payload.model_dump(), user)


@router.post(
    "/generate",
    response_model=InterviewDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate Interview",
)
async def generate_interview(
    payload: InterviewGenerate,
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    """Schedule an interview with randomly drawn questions attached."""
    data = payload.model_dump(exclude={"filter"})
    return await interview_service.generate_interview(db, data, payload.filter, user)


@router.get("/{interview_id}", response_model=InterviewResponse)
async def get_interview(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    return await interview_service.get_interview_for_user(db, interview_id, user)


@router.get("/{interview_id}/details", response_model=InterviewDetailResponse)
async def get_interview_details(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await interview_service.get_interview_for_user(db, interview_id, user)
    return await interview_service.get_interview_with_details(db, interview_id)


@router.put("/{interview_id}", response_model=InterviewResponse, dependencies=[Depends(require_hr)])
async def update_interview(
    payload: InterviewUpdate,
    interview_id: int = Path(..., description="Interview ID"),
    db: AsyncSession = Depends(get_db),
):
    interview = await interview_service.update_interview(
        db, interview_id, payload.model_dump(exclude_unset=True)
    )
    if interview is None:
        raise NotFoundError.for_resource("Interview", interview_id)
    return interview


@router.delete(
    "/{interview_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(require_hr)],
)
async def delete_interview(interview_id: int = Path(..., description="Interview ID"), db: AsyncSession = Depends(get_db)):
    if not await interview_service.delete_interview(db, interview_id):
        raise NotFoundError.for_resource("Interview", interview_id)


@router.get("/{interview_id}/questions", response_model=List[InterviewQuestionResponse])
async def get_interview_questions(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    await interview_service.get_interview_for_user(db, interview_id, user)
    return await interview_service.get_interview_questions(db, interview_id)


# ==================== Lifecycle ===================== #
@router.post("/{interview_id}/start", response_model=InterviewResponse)
async def start_interview(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_interview_conductor),
    db: AsyncSession = Depends(get_db),
):
    return await interview_service.start_interview(db, interview_id, user)


@router.post("/{interview_id}/cancel", response_model=InterviewResponse)
async def cancel_interview(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    return await interview_service.cancel_interview(db, interview_id, user)


@router.post("/{interview_id}/summary", response_model=InterviewResponse, summary="Generate Summary")
async def generate_summary(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_interview_conductor),
    db: AsyncSession = Depends(get_db),
):
    """
    Compute and store skill scores, the overall score and a recommendation,
    then mark the interview completed. An interview with nothing scored is
    returned unchanged.
    """
    return await interview_service.generate_interview_summary(db, interview_id, user)


@router.get("/{interview_id}/score-preview", response_model=ScorePreviewResponse)
async def get_score_preview(
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    """Live estimate from the current question scores; nothing is saved."""
    await interview_service.get_interview_for_user(db, interview_id, user)
    return asdict(await interview_service.get_score_preview(db, interview_id))


@router.post("/{interview_id}/decision", response_model=InterviewResponse, summary="Record HR Decision")
async def record_decision(
    payload: HRDecisionRequest,
    interview_id: int = Path(..., description="Interview ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    return await interview_service.record_hr_decision(
        db, interview_id, payload.decision, payload.hr_notes, user
    )
