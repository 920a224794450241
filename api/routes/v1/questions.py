"""
Question bank endpoints.

Lookups (technologies, experience levels, question types), question CRUD,
and random question generation. Every staff role can read; directors cannot
write.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_question_author, require_staff
from api.schemas.questions import (
    LookupResponse,
    QuestionCreate,
    QuestionDetailResponse,
    QuestionFilter,
    QuestionUpdate,
)
from api.services import questions as question_service
from core.exceptions import NotFoundError
from database.models.users import User

router = APIRouter(tags=["questions"])


# ==================== Lookups ===================== #
@router.get(
    "/technologies",
    response_model=List[LookupResponse],
    dependencies=[Depends(require_staff)],
)
async def list_technologies(db: AsyncSession = Depends(get_db)):
    return await question_service.get_technologies(db)


@router.get(
    "/experience-levels",
    response_model=List[LookupResponse],
    dependencies=[Depends(require_staff)],
)
async def list_experience_levels(db: AsyncSession = Depends(get_db)):
    return await question_service.get_experience_levels(db)


@router.get(
    "/question-types",
    response_model=List[LookupResponse],
    dependencies=[Depends(require_staff)],
)
async def list_question_types(db: AsyncSession = Depends(get_db)):
    return await question_service.get_question_types(db)


# ==================== Questions ===================== #
@router.get(
    "/questions",
    response_model=List[QuestionDetailResponse],
    dependencies=[Depends(require_staff)],
)
async def list_questions(db: AsyncSession = Depends(get_db)):
    return await question_service.get_questions(db)


@router.post(
    "/questions/generate",
    response_model=List[QuestionDetailResponse],
    dependencies=[Depends(require_staff)],
    summary="Generate Questions",
)
async def generate_questions(payload: QuestionFilter, db: AsyncSession = Depends(get_db)):
    """Draw up to ``count`` distinct random questions matching the filter."""
    return await question_service.get_random_questions(db, payload)


@router.get(
    "/questions/{question_id}",
    response_model=QuestionDetailResponse,
    dependencies=[Depends(require_staff)],
)
async def get_question(question_id: int = Path(..., description="Question ID"), db: AsyncSession = Depends(get_db)):
    question = await question_service.get_question(db, question_id)
    if question is None:
        raise NotFoundError.for_resource("Question", question_id)
    return question


@router.post(
    "/questions",
    response_model=QuestionDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_question(
    payload: QuestionCreate,
    user: User = Depends(require_question_author),
    db: AsyncSession = Depends(get_db),
):
    return await question_service.create_question(db, payload.model_dump(), acting_user_id=user.id)


@router.put("/questions/{question_id}", response_model=QuestionDetailResponse)
async def update_question(
    payload: QuestionUpdate,
    question_id: int = Path(..., description="Question ID"),
    user: User = Depends(require_question_author),
    db: AsyncSession = Depends(get_db),
):
    question = await question_service.update_question(
        db, question_id, payload.model_dump(exclude_unset=True), acting_user_id=user.id
    )
    if question is None:
        raise NotFoundError.for_resource("Question", question_id)
    return question


@router.delete("/questions/{question_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_question(
    question_id: int = Path(..., description="Question ID"),
    user: User = Depends(require_question_author),
    db: AsyncSession = Depends(get_db),
):
    if not await question_service.delete_question(db, question_id, acting_user_id=user.id):
        raise NotFoundError.for_resource("Question", question_id)
