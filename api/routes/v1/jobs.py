"""
Job position endpoints.

Listing and viewing open positions is public (the job board). HR and admins
manage positions and may also see closed ones.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db, get_optional_user, require_hr
from api.schemas.jobs import JobPositionCreate, JobPositionResponse, JobPositionUpdate
from api.services import jobs as job_service
from core.exceptions import NotFoundError
from core.middleware.authorization import HR_ROLES, is_role_allowed
from database.models.users import User

router = APIRouter(prefix="/jobs", tags=["jobs"])


def _is_hr(user: Optional[User]) -> bool:
    return user is not None and is_role_allowed(user.role, HR_ROLES)


@router.get("", response_model=List[JobPositionResponse], summary="List Jobs")
async def list_jobs(
    include_closed: bool = Query(False, alias="includeClosed", description="HR only"),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.list_jobs(db, include_closed=include_closed and _is_hr(user))


@router.get("/{job_id}", response_model=JobPositionResponse, summary="Get Job Details")
async def get_job(
    job_id: int = Path(..., description="Job ID"),
    user: Optional[User] = Depends(get_optional_user),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.get_job(db, job_id)
    if job is None or (not job.is_open and not _is_hr(user)):
        raise NotFoundError.for_resource("Job position", job_id)
    return job


@router.post("", response_model=JobPositionResponse, status_code=status.HTTP_201_CREATED)
async def create_job(
    payload: JobPositionCreate,
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    return await job_service.create_job(db, payload.model_dump(), acting_user_id=user.id)


@router.put("/{job_id}", response_model=JobPositionResponse)
async def update_job(
    payload: JobPositionUpdate,
    job_id: int = Path(..., description="Job ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    job = await job_service.update_job(
        db, job_id, payload.model_dump(exclude_unset=True), acting_user_id=user.id
    )
    if job is None:
        raise NotFoundError.for_resource("Job position", job_id)
    return job


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: int = Path(..., description="Job ID"),
    user: User = Depends(require_hr),
    db: AsyncSession = Depends(get_db),
):
    if not await job_service.delete_job(db, job_id, acting_user_id=user.id):
        raise NotFoundError.for_resource("Job position", job_id)
