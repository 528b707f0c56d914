"""
Candidature endpoints: creation, lifecycle actions and read views.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.dependencies import CurrentUser, get_db
from recruitment.core.permissions import Roles, require_roles
from recruitment.models.enums import CandidatureStatus
from recruitment.schemas.base import PaginatedResponse
from recruitment.schemas.candidature import (
    AssignPsychologueRequest,
    AssignTestsRequest,
    CandidatureCreate,
    CandidatureLegacyCreate,
    CandidatureManualCreate,
    CandidatureRead,
    CandidatureResults,
    CandidatureUpdate,
    DashboardRead,
    DecisionRequest,
    LegacyCandidatureResult,
    StatusChangeRequest,
    TechnicalInterviewCreate,
    TechnicalInterviewRead,
    TransitionRead,
)
from recruitment.services.candidature_service import CandidatureService
from recruitment.services.candidature_state_machine import CandidatureEvent
from recruitment.services.notification_service import NotificationService, get_notifier

router = APIRouter(prefix="/candidatures", tags=["Candidatures"])

staff_only = require_roles(Roles.STAFF)


def get_service(
    db: AsyncSession = Depends(get_db),
    notifier: NotificationService = Depends(get_notifier),
) -> CandidatureService:
    return CandidatureService(db, notifier)


@router.get("", response_model=PaginatedResponse[CandidatureRead])
async def list_candidatures(
    status: Optional[CandidatureStatus] = None,
    assigned_to: Optional[str] = Query(default=None, description='"me" or a psychologue id'),
    site_id: Optional[UUID] = None,
    department_id: Optional[UUID] = None,
    search: Optional[str] = None,
    created_from: Optional[datetime] = None,
    created_to: Optional[datetime] = None,
    sort_by: str = Query(default="created_at", pattern="^(created_at|exam_date|status)$"),
    sort_order: str = Query(default="desc", pattern="^(asc|desc)$"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=20, ge=1, le=100),
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.list_candidatures(
        current_user_id=current_user.id,
        status=status,
        assigned_to=assigned_to,
        site_id=site_id,
        department_id=department_id,
        search=search,
        created_from=created_from,
        created_to=created_to,
        sort_by=sort_by,
        sort_order=sort_order,
        page=page,
        limit=limit,
    )


@router.get("/dashboard", response_model=DashboardRead)
async def get_dashboard(
    site_id: Optional[UUID] = None,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    """Status counts for my assignments and globally, plus today's exams."""
    return await service.get_dashboard(current_user.id, site_id)


@router.post("", response_model=CandidatureRead, status_code=201)
async def create_candidature(
    data: CandidatureCreate,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.create_from_application(data, current_user.id)


@router.post("/manual", response_model=CandidatureRead, status_code=201)
async def create_manual_candidature(
    data: CandidatureManualCreate,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.create_manual(data, current_user.id)


@router.post("/legacy", response_model=LegacyCandidatureResult, status_code=201)
async def create_legacy_candidature(
    data: CandidatureLegacyCreate,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    """Walk-in candidate: creates the account, application and candidature."""
    return await service.create_legacy(data, current_user.id)


@router.get("/{candidature_id}", response_model=CandidatureRead)
async def get_candidature(
    candidature_id: UUID,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.get_candidature(candidature_id)


@router.patch("/{candidature_id}", response_model=CandidatureRead)
async def update_candidature(
    candidature_id: UUID,
    data: CandidatureUpdate,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.update_candidature(candidature_id, data, current_user.id)


@router.post("/{candidature_id}/assign-psychologue", response_model=CandidatureRead)
async def assign_psychologue(
    candidature_id: UUID,
    data: AssignPsychologueRequest,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.assign_psychologue(candidature_id, data.psychologue_id, current_user.id)


@router.post("/{candidature_id}/assign-tests", response_model=CandidatureRead)
async def assign_tests(
    candidature_id: UUID,
    data: AssignTestsRequest,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.assign_tests(candidature_id, data, current_user.id)


@router.post("/{candidature_id}/status", response_model=CandidatureRead)
async def change_status(
    candidature_id: UUID,
    data: StatusChangeRequest,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.change_status(
        candidature_id,
        CandidatureEvent(data.event),
        current_user.id,
        data.reason,
    )


@router.post("/{candidature_id}/decision", response_model=CandidatureRead)
async def make_decision(
    candidature_id: UUID,
    data: DecisionRequest,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.make_decision(candidature_id, data, current_user.id)


@router.post("/{candidature_id}/archive", response_model=CandidatureRead)
async def archive_candidature(
    candidature_id: UUID,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.archive(candidature_id, current_user.id)


@router.put("/{candidature_id}/technical-interview", response_model=TechnicalInterviewRead)
async def record_technical_interview(
    candidature_id: UUID,
    data: TechnicalInterviewCreate,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.record_technical_interview(candidature_id, data, current_user.id)


@router.get("/{candidature_id}/transitions", response_model=list[TransitionRead])
async def get_transitions(
    candidature_id: UUID,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.get_transitions(candidature_id)


@router.get("/{candidature_id}/results", response_model=CandidatureResults)
async def get_results(
    candidature_id: UUID,
    current_user: CurrentUser = Depends(staff_only),
    service: CandidatureService = Depends(get_service),
):
    return await service.get_results(candidature_id)
