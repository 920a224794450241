"""Job position service functions."""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.security import AuditAction, ResourceType, log_audit_event
from database.models.jobs import JobPosition

logger = logging.getLogger(__name__)


async def list_jobs(db: AsyncSession, include_closed: bool = False) -> List[JobPosition]:
    """Open positions, newest first. ``include_closed`` is for HR views."""
    query = select(JobPosition)
    if not include_closed:
        query = query.where(JobPosition.is_open.is_(True))
    result = await db.execute(query.order_by(JobPosition.created_at.desc(), JobPosition.id.desc()))
    return list(result.scalars().all())


async def get_job(db: AsyncSession, job_id: int) -> Optional[JobPosition]:
    return await db.get(JobPosition, job_id)


async def create_job(
    db: AsyncSession, data: Dict[str, Any], acting_user_id: Optional[int] = None
) -> JobPosition:
    job = JobPosition(**data)
    db.add(job)
    await db.commit()
    await db.refresh(job)
    logger.info(f"Created job position {job.id}: {job.title}")

    log_audit_event(AuditAction.CREATE, ResourceType.JOB, job.id, user_id=acting_user_id)
    return job


async def update_job(
    db: AsyncSession,
    job_id: int,
    changes: Dict[str, Any],
    acting_user_id: Optional[int] = None,
) -> Optional[JobPosition]:
    job = await db.get(JobPosition, job_id)
    if job is None:
        return None

    for field, value in changes.items():
        if field in ("title", "requirements", "is_open") and value is None:
            continue
        setattr(job, field, value)

    await db.commit()
    await db.refresh(job)

    log_audit_event(
        AuditAction.UPDATE,
        ResourceType.JOB,
        job.id,
        user_id=acting_user_id,
        details={"fields": sorted(changes)},
    )
    return job


async def delete_job(db: AsyncSession, job_id: int, acting_user_id: Optional[int] = None) -> bool:
    """Delete a position; its applications go with it."""
    job = await db.get(JobPosition, job_id)
    if job is None:
        return False

    await db.delete(job)
    await db.commit()
    logger.info(f"Deleted job position {job_id}")

    log_audit_event(AuditAction.DELETE, ResourceType.JOB, job_id, user_id=acting_user_id)
    return True
