"""Question bank service functions."""

import logging
import random
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.questions import QuestionFilter
from core.exceptions import ValidationError
from core.security import AuditAction, ResourceType, log_audit_event
from database.models.questions import ExperienceLevel, Question, QuestionType, Technology

logger = logging.getLogger(__name__)


# ==================== Lookups ===================== #
async def get_technologies(db: AsyncSession) -> List[Technology]:
    result = await db.execute(select(Technology).order_by(Technology.id))
    return list(result.scalars().all())


async def get_technology(db: AsyncSession, technology_id: int) -> Optional[Technology]:
    return await db.get(Technology, technology_id)


async def get_experience_levels(db: AsyncSession) -> List[ExperienceLevel]:
    result = await db.execute(select(ExperienceLevel).order_by(ExperienceLevel.id))
    return list(result.scalars().all())


async def get_experience_level(db: AsyncSession, level_id: int) -> Optional[ExperienceLevel]:
    return await db.get(ExperienceLevel, level_id)


async def get_question_types(db: AsyncSession) -> List[QuestionType]:
    result = await db.execute(select(QuestionType).order_by(QuestionType.id))
    return list(result.scalars().all())


async def get_question_type(db: AsyncSession, type_id: int) -> Optional[QuestionType]:
    return await db.get(QuestionType, type_id)


# ==================== Questions ===================== #
async def get_questions(db: AsyncSession) -> List[Question]:
    result = await db.execute(select(Question).order_by(Question.id))
    return list(result.scalars().unique().all())


async def get_question(db: AsyncSession, question_id: int) -> Optional[Question]:
    return await db.get(Question, question_id)


async def get_filtered_questions(db: AsyncSession, filter: QuestionFilter) -> List[Question]:
    """Apply whichever of the three id filters are set, ANDed together."""
    query = select(Question)
    if filter.technology_id is not None:
        query = query.where(Question.technology_id == filter.technology_id)
    if filter.experience_level_id is not None:
        query = query.where(Question.experience_level_id == filter.experience_level_id)
    if filter.question_type_id is not None:
        query = query.where(Question.question_type_id == filter.question_type_id)

    result = await db.execute(query.order_by(Question.id))
    return list(result.scalars().unique().all())


async def get_random_questions(
    db: AsyncSession,
    filter: QuestionFilter,
    rng: Optional[random.Random] = None,
) -> List[Question]:
    """
    Uniform sample without replacement of at most ``filter.count`` questions
    matching the filter. Never returns the same id twice.
    """
    matches = await get_filtered_questions(db, filter)

    unique: Dict[int, Question] = {}
    for question in matches:
        unique.setdefault(question.id, question)

    pool = list(unique.values())
    k = min(filter.count, len(pool))
    return (rng or random).sample(pool, k)


async def _check_references(db: AsyncSession, data: Dict[str, Any]) -> None:
    lookups = (
        ("technology_id", get_technology, "Technology"),
        ("experience_level_id", get_experience_level, "Experience level"),
        ("question_type_id", get_question_type, "Question type"),
    )
    for field, lookup, label in lookups:
        if field in data and data[field] is not None:
            if await lookup(db, data[field]) is None:
                raise ValidationError(f"{label} {data[field]} does not exist")


async def create_question(
    db: AsyncSession, data: Dict[str, Any], acting_user_id: Optional[int] = None
) -> Question:
    await _check_references(db, data)
    question = Question(**data)
    db.add(question)
    await db.commit()
    await db.refresh(question)
    logger.info(f"Created question {question.id} (custom={question.is_custom})")

    log_audit_event(AuditAction.CREATE, ResourceType.QUESTION, question.id, user_id=acting_user_id)
    return question


async def update_question(
    db: AsyncSession,
    question_id: int,
    changes: Dict[str, Any],
    acting_user_id: Optional[int] = None,
) -> Optional[Question]:
    question = await db.get(Question, question_id)
    if question is None:
        return None

    await _check_references(db, changes)
    for field, value in changes.items():
        # every question column is required, so an explicit null means "unchanged"
        if value is not None:
            setattr(question, field, value)

    await db.commit()
    await db.refresh(question)

    log_audit_event(
        AuditAction.UPDATE,
        ResourceType.QUESTION,
        question.id,
        user_id=acting_user_id,
        details={"fields": sorted(changes)},
    )
    return question


async def delete_question(
    db: AsyncSession, question_id: int, acting_user_id: Optional[int] = None
) -> bool:
    """
    Delete a bank question. Interview questions that reference it are left
    in place and show up without their question afterwards.
    """
    question = await db.get(Question, question_id)
    if question is None:
        return False

    await db.delete(question)
    await db.commit()
    logger.info(f"Deleted question {question_id}")

    log_audit_event(AuditAction.DELETE, ResourceType.QUESTION, question_id, user_id=acting_user_id)
    return True
