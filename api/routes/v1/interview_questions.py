"""Endpoints for the questions attached to an interview and their scores."""

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_interview_conductor, require_staff
from api.schemas.interviews import (
    InterviewQuestionCreate,
    InterviewQuestionResponse,
    InterviewQuestionUpdate,
)
from api.services import interviews as interview_service
from core.exceptions import NotFoundError
from core.middleware.authorization import ensure_can_act_on_interview, ensure_can_view_interview
from database.models.interviews import InterviewQuestion
from database.models.users import User

router = APIRouter(prefix="/interview-questions", tags=["interview-questions"])


async def _load(db: AsyncSession, interview_question_id: int) -> InterviewQuestion:
    interview_question = await interview_service.get_interview_question(db, interview_question_id)
    if interview_question is None:
        raise NotFoundError.for_resource("Interview question", interview_question_id)
    return interview_question


async def _parent(db: AsyncSession, interview_id: int):
    interview = await interview_service.get_interview(db, interview_id)
    if interview is None:
        raise NotFoundError.for_resource("Interview", interview_id)
    return interview


@router.post("", response_model=InterviewQuestionResponse, status_code=status.HTTP_201_CREATED)
async def create_interview_question(
    payload: InterviewQuestionCreate,
    user: User = Depends(require_interview_conductor),
    db: AsyncSession = Depends(get_db),
):
    ensure_can_act_on_interview(user, await _parent(db, payload.interview_id))
    return await interview_service.create_interview_question(db, payload.model_dump())


@router.get("/{interview_question_id}", response_model=InterviewQuestionResponse)
async def get_interview_question(
    interview_question_id: int = Path(..., description="Interview question ID"),
    user: User = Depends(require_staff),
    db: AsyncSession = Depends(get_db),
):
    interview_question = await _load(db, interview_question_id)
    ensure_can_view_interview(user, await _parent(db, interview_question.interview_id))
    return interview_question


@router.put("/{interview_question_id}", response_model=InterviewQuestionResponse)
async def update_interview_question(
    payload: InterviewQuestionUpdate,
    interview_question_id: int = Path(..., description="Interview question ID"),
    user: User = Depends(require_interview_conductor),
    db: AsyncSession = Depends(get_db),
):
    """Score, annotate or skip a question. The interview totals are not recomputed."""
    interview_question = await _load(db, interview_question_id)
    ensure_can_act_on_interview(user, await _parent(db, interview_question.interview_id))
    return await interview_service.update_interview_question(
        db, interview_question_id, payload.model_dump(exclude_unset=True)
    )


@router.delete("/{interview_question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview_question(
    interview_question_id: int = Path(..., description="Interview question ID"),
    user: User = Depends(require_interview_conductor),
    db: AsyncSession = Depends(get_db),
):
    interview_question = await _load(db, interview_question_id)
    ensure_can_act_on_interview(user, await _parent(db, interview_question.interview_id))
    await interview_service.delete_interview_question(db, interview_question_id)
