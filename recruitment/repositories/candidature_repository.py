"""
Repository for Candidature, its transition log and technical interview.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import select, func, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.models.candidature import (
    Candidature,
    CandidatureStateTransition,
    TechnicalInterview,
)
from recruitment.models.enums import CandidatureStatus
from recruitment.models.job_application import JobApplication
from recruitment.models.user import User


SORTABLE_FIELDS = {
    "created_at": Candidature.created_at,
    "exam_date": Candidature.exam_date,
    "status": Candidature.status,
}


class CandidatureRepository:
    """Repository for Candidature operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, candidature_id: UUID) -> Optional[Candidature]:
        return await self.db.get(Candidature, candidature_id)

    async def get_by_job_application(self, job_application_id: UUID) -> Optional[Candidature]:
        result = await self.db.execute(
            select(Candidature).where(Candidature.job_application_id == job_application_id)
        )
        return result.scalar_one_or_none()

    async def create(self, **fields) -> Candidature:
        candidature = Candidature(**fields)
        self.db.add(candidature)
        await self.db.flush()
        return candidature

    async def add_transition(
        self,
        candidature_id: UUID,
        from_status: Optional[CandidatureStatus],
        to_status: CandidatureStatus,
        transitioned_by: UUID,
        reason: Optional[str] = None,
    ) -> CandidatureStateTransition:
        """Append one audit row. Does not commit."""
        transition = CandidatureStateTransition(
            candidature_id=candidature_id,
            from_status=from_status,
            to_status=to_status,
            transitioned_by=transitioned_by,
            reason=reason,
        )
        self.db.add(transition)
        await self.db.flush()
        return transition

    async def list_transitions(self, candidature_id: UUID) -> list[CandidatureStateTransition]:
        """Audit trail, newest first."""
        result = await self.db.execute(
            select(CandidatureStateTransition)
            .where(CandidatureStateTransition.candidature_id == candidature_id)
            .order_by(
                CandidatureStateTransition.transitioned_at.desc(),
                CandidatureStateTransition.created_at.desc(),
            )
        )
        return list(result.scalars().all())

    async def get_interview(self, candidature_id: UUID) -> Optional[TechnicalInterview]:
        result = await self.db.execute(
            select(TechnicalInterview).where(TechnicalInterview.candidature_id == candidature_id)
        )
        return result.scalar_one_or_none()

    async def create_interview(self, **fields) -> TechnicalInterview:
        interview = TechnicalInterview(**fields)
        self.db.add(interview)
        await self.db.flush()
        return interview

    async def list(
        self,
        status: Optional[CandidatureStatus] = None,
        assigned_to: Optional[UUID] = None,
        site_id: Optional[UUID] = None,
        department_id: Optional[UUID] = None,
        search: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        skip: int = 0,
        limit: int = 20,
    ) -> tuple[list[Candidature], int]:
        """Filtered page plus the total count of matching rows."""
        query = (
            select(Candidature)
            .join(JobApplication, Candidature.job_application_id == JobApplication.id)
            .join(User, JobApplication.candidate_id == User.id)
        )

        conditions = []
        if status:
            conditions.append(Candidature.status == status)
        if assigned_to:
            conditions.append(Candidature.assigned_psychologue_id == assigned_to)
        if site_id:
            conditions.append(JobApplication.site_id == site_id)
        if department_id:
            conditions.append(JobApplication.department_id == department_id)
        if search:
            pattern = f"%{search.lower()}%"
            conditions.append(
                or_(
                    func.lower(Candidature.dp_number).like(pattern),
                    func.lower(User.first_name).like(pattern),
                    func.lower(User.last_name).like(pattern),
                    func.lower(User.email).like(pattern),
                )
            )
        if created_from:
            conditions.append(Candidature.created_at >= created_from)
        if created_to:
            conditions.append(Candidature.created_at <= created_to)

        if conditions:
            query = query.where(and_(*conditions))

        count_result = await self.db.execute(
            select(func.count()).select_from(query.with_only_columns(Candidature.id).subquery())
        )
        total = int(count_result.scalar_one())

        column = SORTABLE_FIELDS.get(sort_by, Candidature.created_at)
        order = column.asc() if sort_order == "asc" else column.desc()
        query = query.order_by(order).offset(skip).limit(limit)

        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def count_by_status(
        self,
        psychologue_id: Optional[UUID] = None,
        site_id: Optional[UUID] = None,
    ) -> dict[str, int]:
        query = select(Candidature.status, func.count(Candidature.id)).group_by(Candidature.status)
        if psychologue_id:
            query = query.where(Candidature.assigned_psychologue_id == psychologue_id)
        if site_id:
            query = query.join(
                JobApplication, Candidature.job_application_id == JobApplication.id
            ).where(JobApplication.site_id == site_id)

        result = await self.db.execute(query)
        return {
            getattr(status, "value", status): count
            for status, count in result.all()
        }

    async def count_exams_between(
        self,
        start: datetime,
        end: datetime,
        statuses: list[CandidatureStatus],
        site_id: Optional[UUID] = None,
    ) -> int:
        query = select(func.count(Candidature.id)).where(
            Candidature.exam_date >= start,
            Candidature.exam_date < end,
            Candidature.status.in_(statuses),
        )
        if site_id:
            query = query.join(
                JobApplication, Candidature.job_application_id == JobApplication.id
            ).where(JobApplication.site_id == site_id)
        result = await self.db.execute(query)
        return int(result.scalar_one())
