"""
Job application endpoints.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.dependencies import CurrentUser, get_db
from recruitment.core.permissions import Roles, require_roles
from recruitment.schemas.job_application import (
    ApplicationStatistics,
    JobApplicationCreate,
    JobApplicationRead,
    JobApplicationReview,
    JobApplicationReviewResult,
)
from recruitment.services.job_application_service import JobApplicationService

router = APIRouter(prefix="/job-applications", tags=["Job Applications"])


@router.post("", response_model=JobApplicationRead, status_code=201)
async def submit_application(
    data: JobApplicationCreate,
    current_user: CurrentUser = Depends(require_roles([Roles.CANDIDATE])),
    db: AsyncSession = Depends(get_db),
):
    service = JobApplicationService(db)
    return await service.create(current_user.id, data)


@router.get("/mine", response_model=list[JobApplicationRead])
async def list_my_applications(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    current_user: CurrentUser = Depends(require_roles([Roles.CANDIDATE])),
    db: AsyncSession = Depends(get_db),
):
    service = JobApplicationService(db)
    return await service.list_for_candidate(current_user.id, page, limit)


@router.get("/statistics", response_model=ApplicationStatistics)
async def get_statistics(
    site_id: Optional[UUID] = None,
    department_id: Optional[UUID] = None,
    current_user: CurrentUser = Depends(require_roles(Roles.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    service = JobApplicationService(db)
    return await service.get_statistics(site_id, department_id)


@router.post("/{application_id}/review", response_model=JobApplicationReviewResult)
async def review_application(
    application_id: UUID,
    data: JobApplicationReview,
    current_user: CurrentUser = Depends(require_roles(Roles.STAFF)),
    db: AsyncSession = Depends(get_db),
):
    """Approve (spawning a candidature) or reject a pending application."""
    service = JobApplicationService(db)
    return await service.review(application_id, current_user.id, data)


@router.post("/{application_id}/withdraw", response_model=JobApplicationRead)
async def withdraw_application(
    application_id: UUID,
    current_user: CurrentUser = Depends(require_roles([Roles.CANDIDATE])),
    db: AsyncSession = Depends(get_db),
):
    service = JobApplicationService(db)
    return await service.withdraw(application_id, current_user.id)
