"""Candidate service functions."""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import AuditAction, ResourceType, log_audit_event
from database.models.applications import JobApplication
from database.models.candidates import Candidate, CandidateStatus
from database.models.interviews import Interview, InterviewQuestion

logger = logging.getLogger(__name__)


async def get_candidates(db: AsyncSession, status: Optional[CandidateStatus] = None) -> List[Candidate]:
    query = select(Candidate)
    if status is not None:
        query = query.where(Candidate.status == status)
    result = await db.execute(query.order_by(Candidate.created_at.desc(), Candidate.id.desc()))
    return list(result.scalars().all())


async def get_candidate(db: AsyncSession, candidate_id: int) -> Optional[Candidate]:
    return await db.get(Candidate, candidate_id)


async def create_candidate(
    db: AsyncSession,
    data: Dict[str, Any],
    status: CandidateStatus = CandidateStatus.NEW,
    acting_user_id: Optional[int] = None,
) -> Candidate:
    """
    Create a candidate. Candidates added directly by HR start in_progress;
    those coming through the public application form start as new.
    """
    candidate = Candidate(**data, status=status)
    db.add(candidate)
    await db.commit()
    await db.refresh(candidate)
    logger.info(f"Created candidate {candidate.id} with status {candidate.status.value}")

    log_audit_event(
        AuditAction.CREATE,
        ResourceType.CANDIDATE,
        candidate.id,
        user_id=acting_user_id,
        details={"name": candidate.name, "email": candidate.email, "status": candidate.status.value},
        contains_pii=True,
    )
    return candidate


async def update_candidate(
    db: AsyncSession,
    candidate_id: int,
    changes: Dict[str, Any],
    acting_user_id: Optional[int] = None,
) -> Optional[Candidate]:
    candidate = await db.get(Candidate, candidate_id)
    if candidate is None:
        return None

    for field, value in changes.items():
        if field in ("name", "email", "status") and value is None:
            continue
        setattr(candidate, field, value)

    await db.commit()
    await db.refresh(candidate)

    log_audit_event(
        AuditAction.UPDATE,
        ResourceType.CANDIDATE,
        candidate.id,
        user_id=acting_user_id,
        details=changes,
        contains_pii=True,
    )
    return candidate


async def delete_candidate(
    db: AsyncSession, candidate_id: int, acting_user_id: Optional[int] = None
) -> bool:
    """Delete a candidate together with their interviews and applications."""
    candidate = await db.get(Candidate, candidate_id)
    if candidate is None:
        return False

    interview_ids = select(Interview.id).where(Interview.candidate_id == candidate_id)
    await db.execute(
        delete(InterviewQuestion).where(InterviewQuestion.interview_id.in_(interview_ids))
    )
    await db.execute(delete(Interview).where(Interview.candidate_id == candidate_id))
    await db.execute(delete(JobApplication).where(JobApplication.candidate_id == candidate_id))
    await db.delete(candidate)
    await db.commit()
    logger.info(f"Deleted candidate {candidate_id}")

    log_audit_event(AuditAction.DELETE, ResourceType.CANDIDATE, candidate_id, user_id=acting_user_id)
    return True


async def get_candidate_interviews(db: AsyncSession, candidate_id: int) -> List[Interview]:
    result = await db.execute(
        select(Interview)
        .where(Interview.candidate_id == candidate_id)
        .order_by(Interview.date.desc(), Interview.id.desc())
    )
    return list(result.scalars().all())
