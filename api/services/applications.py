"""
Job application service functions.

Applying through the public form creates a fresh candidate. Reviewing an
application drives that candidate's status: accepted moves them to
in_progress, rejected sends them back to new. The routes schedule the
matching notification email from the returned data.
"""

from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from core.exceptions import NotFoundError, ValidationError
from core.security import AuditAction, ResourceType, log_audit_event
from database.models.applications import ApplicationStatus, JobApplication
from database.models.candidates import Candidate, CandidateStatus
from database.models.jobs import JobPosition

logger = logging.getLogger(__name__)

APPLICATION_RECEIVED = "Application submitted successfully"

# Candidate status implied by each review outcome
CANDIDATE_STATUS_FOR_DECISION = {
    ApplicationStatus.ACCEPTED: CandidateStatus.IN_PROGRESS,
    ApplicationStatus.REJECTED: CandidateStatus.NEW,
}


async def list_applications(
    db: AsyncSession,
    job_id: Optional[int] = None,
    status: Optional[ApplicationStatus] = None,
) -> List[JobApplication]:
    query = select(JobApplication).options(
        selectinload(JobApplication.candidate),
        selectinload(JobApplication.job),
    )
    if job_id is not None:
        query = query.where(JobApplication.job_id == job_id)
    if status is not None:
        query = query.where(JobApplication.status == status)

    result = await db.execute(
        query.order_by(JobApplication.created_at.desc(), JobApplication.id.desc())
    )
    return list(result.scalars().all())


async def get_application(db: AsyncSession, application_id: int) -> Optional[JobApplication]:
    result = await db.execute(
        select(JobApplication)
        .options(selectinload(JobApplication.candidate), selectinload(JobApplication.job))
        .where(JobApplication.id == application_id)
    )
    return result.scalar_one_or_none()


async def submit_application(db: AsyncSession, data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Handle a public application: create the candidate (status new) and a
    pending application in one transaction.

    Raises:
        NotFoundError: unknown job
        ValidationError: the job is closed
    """
    job = await db.get(JobPosition, data["job_id"])
    if job is None:
        raise NotFoundError.for_resource("Job position", data["job_id"])
    if not job.is_open:
        raise ValidationError("This position is no longer accepting applications")

    candidate = Candidate(
        name=data["full_name"],
        email=data["email"],
        phone=data["phone"],
        resume_path=data.get("resume"),
        status=CandidateStatus.NEW,
    )
    db.add(candidate)
    await db.flush()

    application = JobApplication(
        candidate_id=candidate.id,
        job_id=job.id,
        status=ApplicationStatus.PENDING,
        cover_letter=data.get("cover_letter"),
        resume_path=data.get("resume"),
    )
    db.add(application)
    await db.commit()
    await db.refresh(application)
    await db.refresh(candidate)

    logger.info(f"Application {application.id} received for job {job.id}")
    return {"application": application, "candidate": candidate, "job": job}


async def update_application_status(
    db: AsyncSession,
    application_id: int,
    status: ApplicationStatus,
    acting_user_id: Optional[int] = None,
) -> Optional[Dict[str, Any]]:
    """
    Set an application's review status and move the candidate accordingly.

    Returns None for an unknown application.
    """
    application = await db.get(JobApplication, application_id)
    if application is None:
        return None

    candidate = await db.get(Candidate, application.candidate_id)
    if candidate is None:
        raise NotFoundError.for_resource("Candidate", application.candidate_id)
    job = await db.get(JobPosition, application.job_id)

    previous = application.status
    application.status = status
    if status in CANDIDATE_STATUS_FOR_DECISION:
        candidate.status = CANDIDATE_STATUS_FOR_DECISION[status]

    await db.commit()
    await db.refresh(application)

    log_audit_event(
        AuditAction.STATUS_CHANGE,
        ResourceType.APPLICATION,
        application.id,
        user_id=acting_user_id,
        details={
            "before": previous.value,
            "after": status.value,
            "candidate_status": candidate.status.value,
        },
    )
    return {"application": application, "candidate": candidate, "job": job}
