"""
Job application endpoints.

Submitting an application is public; reviewing applications is for HR and
admins. Candidate notification emails are sent after the response.
"""

from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, require_hr
from api.schemas.jobs import (
    ApplicationDetailResponse,
    ApplicationStatusUpdate,
    ApplicationSubmit,
    ApplicationSubmitResponse,
)
from api.services import applications as application_service
from core.exceptions import NotFoundError
from core.integrations.email import (
    send_application_accepted,
    send_application_confirmation,
    send_application_rejected,
)
from database.models.applications import ApplicationStatus
from database.models.users import User

router = APIRouter(prefix="/applications", tags=["applications"])


def _columns(obj) -> dict:
    return {column.key: getattr(obj, column.key) for column in obj.__table__.columns}


STATUS_NOTIFICATIONS = {
    ApplicationStatus.ACCEPTED: send_application_accepted,
    ApplicationStatus.REJECTED: send_application_rejected,
}


@router.post("", response_model=ApplicationSubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_application(
    payload: ApplicationSubmit,
    background_tasks: BackgroundTasks,
    db: AsyncSession = Depends(get_db),
):
    result = await application_service.submit_application(db, payload.model_dump())

    candidate, job = result["candidate"], result["job"]
    background_tasks.add_task(send_application_confirmation, candidate.email, candidate.name, job.title)

    return {
        "message": application_service.APPLICATION_RECEIVED,
        "application": result["application"],
        "candidate": candidate,
    }


@router.get("", response_model=List[ApplicationDetailResponse], dependencies=[Depends(require_hr)])
async def list_applications(
    job_id: Optional[int] = Query(None, alias="jobId", description="Filter by job"),
    status: Optional[ApplicationStatus] = Query(None, description="Filter by status"),
    db: AsyncSession = Depends(get_db),
):
    return await application_service.list_applications(db, job_id=job_id, status=status)


@router.get("/{application_id}", response_model=ApplicationDetailResponse, dependencies=[Depends(require_hr)])
async def get_application(application_id: int = Path(..., description="Application ID"), db: AsyncSession = Depends(get_db)):
    application = await application_service.get_application(db, application_id)
    if application is None:
        raise NotFoundError.for_resource("Application", application_id)
    return application


@router.put("/{application_id}/status", response_model=ApplicationDetailResponse)
async def update_application_status(
    payload: ApplicationStatusUpdate,
    background_tasks: BackgroundTasks,
    application_id: int = Path(..., description="Application ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    """
    Accepting moves the candidate to in_progress, rejecting moves them back
    to new. Both notify the candidate by email.
    """
    result = await application_service.update_application_status(
        db, application_id, payload.status, acting_user_id=user.id
    )
    if result is None:
        raise NotFoundError.for_resource("Application", application_id)

    notify = STATUS_NOTIFICATIONS.get(payload.status)
    if notify is not None:
        candidate, job = result["candidate"], result["job"]
        job_title = job.title if job else "Position"
        background_tasks.add_task(notify, candidate.email, candidate.name, job_title)

    return {**_columns(result["application"]), "candidate": result["candidate"], "job": result["job"]}
