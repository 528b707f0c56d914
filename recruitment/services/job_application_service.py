"""
Job application service.

Approving an application is the entry point of the evaluation workflow: the
application update and the new pending candidature are committed together.
"""

import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.db.session import run_atomic
from recruitment.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
)
from recruitment.models.enums import ApplicationStatus, CandidatureStatus
from recruitment.models.job_application import JobApplication
from recruitment.repositories.candidature_repository import CandidatureRepository
from recruitment.repositories.job_application_repository import JobApplicationRepository
from recruitment.repositories.site_repository import SiteRepository
from recruitment.schemas.job_application import (
    ApplicationStatistics,
    JobApplicationCreate,
    JobApplicationRead,
    JobApplicationReview,
    JobApplicationReviewResult,
)

logger = logging.getLogger(__name__)


class JobApplicationService:
    """Service for job application submission and review."""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.repo = JobApplicationRepository(db)
        self.candidatures = CandidatureRepository(db)
        self.sites = SiteRepository(db)

    async def get_application(self, application_id: UUID) -> JobApplication:
        application = await self.repo.get_by_id(application_id)
        if not application:
            raise NotFoundError("Job application", application_id)
        return application

    async def create(self, candidate_id: UUID, data: JobApplicationCreate) -> JobApplication:
        site = await self.sites.get_site(data.site_id)
        if not site:
            raise NotFoundError("Site", data.site_id)
        if not site.is_active:
            raise InvalidArgumentError("Site is not active", {"site_id": str(site.id)})

        department = await self.sites.get_department(data.department_id)
        if not department:
            raise NotFoundError("Department", data.department_id)
        if not department.is_active:
            raise InvalidArgumentError("Department is not active", {"department_id": str(department.id)})

        duplicate = await self.repo.find_pending_duplicate(
            candidate_id,
            data.site_id,
            data.department_id,
            data.target_position,
        )
        if duplicate:
            raise ConflictError(
                "You already have a pending application for this position",
                {"job_application_id": str(duplicate.id)},
            )

        async with run_atomic(self.db):
            application = await self.repo.create(candidate_id=candidate_id, **data.model_dump())

        logger.info("Job application %s submitted by %s", application.id, candidate_id)
        return application

    async def review(
        self,
        application_id: UUID,
        reviewer_id: UUID,
        data: JobApplicationReview,
    ) -> JobApplicationReviewResult:
        """
        Approve or reject a pending application.

        Approval spawns exactly one pending candidature in the same unit.
        """
        application = await self.get_application(application_id)
        if application.status != ApplicationStatus.PENDING:
            raise PreconditionFailedError(application.status, [ApplicationStatus.PENDING], "review application")

        approved = data.decision == ApplicationStatus.APPROVED.value
        if not approved and not data.rejection_reason:
            raise InvalidArgumentError(
                "Rejection reason is required when rejecting an application",
                {"field": "rejection_reason"},
            )
        if approved and await self.candidatures.get_by_job_application(application.id):
            raise ConflictError(
                "Job application already has a candidature",
                {"job_application_id": str(application.id)},
            )

        candidature = None
        async with run_atomic(self.db):
            application.status = ApplicationStatus.APPROVED if approved else ApplicationStatus.REJECTED
            application.reviewed_by = reviewer_id
            application.reviewed_at = datetime.now(timezone.utc)
            application.rejection_reason = None if approved else data.rejection_reason
            if approved:
                candidature = await self.candidatures.create(
                    job_application_id=application.id,
                    status=CandidatureStatus.PENDING,
                )

        logger.info("Job application %s %s by %s", application.id, application.status.value, reviewer_id)
        return JobApplicationReviewResult(
            application=JobApplicationRead.model_validate(application),
            candidature_id=candidature.id if candidature else None,
        )

    async def withdraw(self, application_id: UUID, candidate_id: UUID) -> JobApplication:
        application = await self.get_application(application_id)
        if application.candidate_id != candidate_id:
            raise ForbiddenError(
                "You can only withdraw your own applications",
                {"job_application_id": str(application_id)},
            )
        if application.status != ApplicationStatus.PENDING:
            raise PreconditionFailedError(application.status, [ApplicationStatus.PENDING], "withdraw application")

        async with run_atomic(self.db):
            application.status = ApplicationStatus.WITHDRAWN
        return application

    async def list_for_candidate(self, candidate_id: UUID, page: int = 1, limit: int = 20) -> list[JobApplication]:
        return await self.repo.list(candidate_id=candidate_id, skip=(page - 1) * limit, limit=limit)

    async def get_statistics(
        self,
        site_id: Optional[UUID] = None,
        department_id: Optional[UUID] = None,
    ) -> ApplicationStatistics:
        counts = {status.value: 0 for status in ApplicationStatus}
        counts.update(await self.repo.count_by_status(site_id=site_id, department_id=department_id))
        return ApplicationStatistics(total=sum(counts.values()), by_status=counts)
