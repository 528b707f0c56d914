"""
Repository for JobApplication database operations.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, and_
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.enums import ApplicationStatus
from recruitment.models.job_application import JobApplication


class JobApplicationRepository:
    """Repository for JobApplication operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, application_id: UUID) -> Optional[JobApplication]:
        return await self.db.get(JobApplication, application_id)

    async def find_pending_duplicate(
        self,
        candidate_id: UUID,
        site_id: UUID,
        department_id: UUID,
        target_position: str,
    ) -> Optional[JobApplication]:
        """A still-pending application of the same candidate for the same post."""
        result = await self.db.execute(
            select(JobApplication).where(
                and_(
                    JobApplication.candidate_id == candidate_id,
                    JobApplication.site_id == site_id,
                    JobApplication.department_id == department_id,
                    JobApplication.target_position == target_position,
                    JobApplication.status == ApplicationStatus.PENDING,
                )
            )
        )
        return result.scalars().first()

    async def create(self, **fields) -> JobApplication:
        application = JobApplication(**fields)
        self.db.add(application)
        await self.db.flush()
        return application

    async def list(
        self,
        candidate_id: Optional[UUID] = None,
        status: Optional[ApplicationStatus] = None,
        site_id: Optional[UUID] = None,
        skip: int = 0,
        limit: int = 50,
    ) -> list[JobApplication]:
        query = select(JobApplication)
        if candidate_id:
            query = query.where(JobApplication.candidate_id == candidate_id)
        if status:
            query = query.where(JobApplication.status == status)
        if site_id:
            query = query.where(JobApplication.site_id == site_id)

        query = query.order_by(JobApplication.created_at.desc()).offset(skip).limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def count_by_status(
        self,
        site_id: Optional[UUID] = None,
        department_id: Optional[UUID] = None,
    ) -> dict[str, int]:
        query = select(JobApplication.status, func.count()).group_by(JobApplication.status)
        if site_id:
            query = query.where(JobApplication.site_id == site_id)
        if department_id:
            query = query.where(JobApplication.department_id == department_id)
        result = await self.db.execute(query)
        return {
            getattr(status, "value", status): count
            for status, count in result.all()
        }
