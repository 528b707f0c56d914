"""
Candidature service.

Creation (from an approved application, manual, legacy walk-in), the
status-changing actions and read views of candidatures. Status changes go
through ``candidature_state_machine.apply_transition`` and are written
together with their CandidatureStateTransition row in one ``run_atomic``
unit; all validation reads happen before the unit is entered.
"""

import logging
import math
from datetime import datetime, timedelta, timezone
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from recruitment.core.security import generate_temporary_password, hash_password
from recruitment.db.session import run_atomic
from recruitment.errors import (
    ConflictError,
    InvalidArgumentError,
    InvalidReferenceError,
    NotFoundError,
    PreconditionFailedError,
)
from recruitment.models.candidature import Candidature, CandidatureStateTransition, TechnicalInterview
from recruitment.models.enums import ApplicationStatus, CandidatureStatus, UserRole, UserStatus
from recruitment.models.job_application import JobApplication
from recruitment.models.user import User
from recruitment.repositories.candidature_repository import CandidatureRepository
from recruitment.repositories.job_application_repository import JobApplicationRepository
from recruitment.repositories.logical_test_repository import LogicalTestRepository
from recruitment.repositories.site_repository import SiteRepository
from recruitment.repositories.user_repository import UserRepository
from recruitment.schemas.base import PaginatedResponse
from recruitment.schemas.candidature import (
    AssignedTestSummary,
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
    LegacyUserSummary,
    TechnicalInterviewCreate,
    TechnicalInterviewRead,
)
from recruitment.services.candidature_state_machine import (
    CandidatureEvent,
    apply_transition,
    initial_status,
)
from recruitment.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

EXAM_DAY_STATUSES = [CandidatureStatus.ASSIGNED, CandidatureStatus.IN_PROGRESS]


def empty_status_counts() -> dict[str, int]:
    return {status.value: 0 for status in CandidatureStatus}


class CandidatureService:
    """Lifecycle operations on candidatures."""

    def __init__(self, db: AsyncSession, notifier: Optional[NotificationService] = None):
        self.db = db
        self.notifier = notifier or NotificationService()
        self.repo = CandidatureRepository(db)
        self.applications = JobApplicationRepository(db)
        self.users = UserRepository(db)
        self.sites = SiteRepository(db)
        self.tests = LogicalTestRepository(db)

    # ------------------------------------------------------------------
    # Lookups / guards
    # ------------------------------------------------------------------

    async def get_candidature(self, candidature_id: UUID) -> Candidature:
        candidature = await self.repo.get_by_id(candidature_id)
        if not candidature:
            raise NotFoundError("Candidature", candidature_id)
        return candidature

    async def _get_psychologue(self, psychologue_id: UUID) -> User:
        psychologue = await self.users.get_by_id(psychologue_id)
        if not psychologue or psychologue.role != UserRole.PSYCHOLOGUE:
            raise InvalidReferenceError("psychologue", psychologue_id, "user is not a psychologue")
        return psychologue

    async def _ensure_site_and_department(self, site_id: UUID, department_id: UUID) -> None:
        site = await self.sites.get_site(site_id)
        if not site:
            raise NotFoundError("Site", site_id)
        if not site.is_active:
            raise InvalidReferenceError("site", site_id, "inactive")
        department = await self.sites.get_department(department_id)
        if not department:
            raise NotFoundError("Department", department_id)
        if not department.is_active:
            raise InvalidReferenceError("department", department_id, "inactive")

    async def _record_transition(
        self,
        candidature: Candidature,
        from_status: Optional[CandidatureStatus],
        to_status: CandidatureStatus,
        actor_id: UUID,
        reason: Optional[str],
    ) -> None:
        candidature.status = to_status
        await self.repo.add_transition(candidature.id, from_status, to_status, actor_id, reason)
        logger.info(
            "Candidature %s: %s -> %s by %s",
            candidature.id,
            from_status.value if from_status else None,
            to_status.value,
            actor_id,
        )

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    async def create_from_application(self, data: CandidatureCreate, actor_id: UUID) -> Candidature:
        application = await self.applications.get_by_id(data.job_application_id)
        if not application:
            raise NotFoundError("Job application", data.job_application_id)
        if application.status != ApplicationStatus.APPROVED:
            raise PreconditionFailedError(
                application.status,
                [ApplicationStatus.APPROVED],
                "create a candidature for this job application",
            )
        if await self.repo.get_by_job_application(application.id):
            raise ConflictError(
                "Job application already has a candidature",
                {"job_application_id": str(application.id)},
            )

        psychologue = None
        if data.assigned_psychologue_id:
            psychologue = await self._get_psychologue(data.assigned_psychologue_id)

        async with run_atomic(self.db):
            candidature = await self._spawn(
                application.id,
                actor_id,
                psychologue=psychologue,
                dp_number=data.dp_number,
                exam_date=data.exam_date,
            )

        logger.info("Candidature created: %s for job application %s", candidature.id, application.id)
        return candidature

    async def _spawn(
        self,
        job_application_id: UUID,
        actor_id: UUID,
        psychologue: Optional[User] = None,
        **fields,
    ) -> Candidature:
        """Insert the candidature row (and its initial assignment log). Caller owns the unit."""
        status = initial_status(with_psychologue=psychologue is not None)
        if psychologue is not None:
            fields.update(
                assigned_psychologue_id=psychologue.id,
                assigned_by=actor_id,
                assignment_date=datetime.now(timezone.utc),
            )
        candidature = await self.repo.create(
            job_application_id=job_application_id,
            status=status,
            **fields,
        )
        if status != CandidatureStatus.PENDING:
            await self.repo.add_transition(
                candidature.id,
                CandidatureStatus.PENDING,
                status,
                actor_id,
                "Initial assignment",
            )
        return candidature

    async def create_manual(self, data: CandidatureManualCreate, actor_id: UUID) -> Candidature:
        candidate = await self.users.get_by_id(data.candidate_id)
        if not candidate or candidate.role != UserRole.CANDIDATE:
            raise NotFoundError("Candidate", data.candidate_id)
        await self._ensure_site_and_department(data.site_id, data.department_id)
        if data.previous_candidature_id and not await self.repo.get_by_id(data.previous_candidature_id):
            raise NotFoundError("Previous candidature", data.previous_candidature_id)

        psychologue = None
        if data.assigned_psychologue_id:
            psychologue = await self._get_psychologue(data.assigned_psychologue_id)

        async with run_atomic(self.db):
            application = await self.applications.create(
                candidate_id=candidate.id,
                site_id=data.site_id,
                department_id=data.department_id,
                target_position=data.target_position,
                current_position=data.current_position,
                education_level=data.education_level,
                status=ApplicationStatus.APPROVED,
                reviewed_by=actor_id,
                reviewed_at=datetime.now(timezone.utc),
            )
            candidature = await self._spawn(
                application.id,
                actor_id,
                psychologue=psychologue,
                dp_number=data.dp_number,
                exam_date=data.exam_date,
                previous_candidature_id=data.previous_candidature_id,
                is_reevaluation=data.previous_candidature_id is not None,
            )

        logger.info("Manual candidature created: %s (re-evaluation=%s)", candidature.id, candidature.is_reevaluation)
        return candidature

    async def create_legacy(self, data: CandidatureLegacyCreate, actor_id: UUID) -> LegacyCandidatureResult:
        """
        Walk-in candidate: user account, approved application, candidature and
        optional technical interview, created as one unit.

        The account-created email is sent after the unit commits; a failed
        send is reported as ``email_sent=False`` and does not undo anything.
        """
        info = data.candidate
        if await self.users.get_by_email(info.email):
            raise ConflictError("Email already exists", {"email": info.email})
        await self._ensure_site_and_department(data.site_id, data.department_id)

        temporary_password = generate_temporary_password()
        password_hash = hash_password(temporary_password)
        now = datetime.now(timezone.utc)

        async with run_atomic(self.db):
            user = await self.users.create(
                email=info.email,
                password_hash=password_hash,
                first_name=info.first_name,
                last_name=info.last_name,
                phone=info.phone,
                gender=info.gender,
                date_of_birth=info.date_of_birth,
                role=UserRole.CANDIDATE,
                status=UserStatus.ACTIVE,
                is_email_verified=True,
            )
            application = await self.applications.create(
                candidate_id=user.id,
                site_id=data.site_id,
                department_id=data.department_id,
                target_position=data.position_applied or "Not specified",
                status=ApplicationStatus.APPROVED,
                reviewed_by=actor_id,
                reviewed_at=now,
            )
            candidature = await self._spawn(application.id, actor_id, dp_number=data.dp_number)
            interview = None
            if data.technical_interview:
                interview = await self.repo.create_interview(
                    candidature_id=candidature.id,
                    conducted_by=actor_id,
                    **data.technical_interview.model_dump(),
                )

        logger.info("Legacy candidature created: %s for %s", candidature.id, user.email)

        send_credentials = data.send_credentials is not False
        email_sent = False
        if send_credentials:
            email_sent = await self._notify(
                self.notifier.send_account_created(info.email, info.first_name, temporary_password),
                "account created",
                info.email,
            )

        return LegacyCandidatureResult(
            candidature=CandidatureRead.model_validate(candidature),
            user=LegacyUserSummary.model_validate(user),
            technical_interview=TechnicalInterviewRead.model_validate(interview) if interview else None,
            email_sent=email_sent,
            temporary_password=None if send_credentials else temporary_password,
        )

    async def _notify(self, send, label: str, email: str) -> bool:
        """Await a notifier call; any failure becomes False."""
        try:
            return bool(await send)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to send %s email to %s: %s", label, email, exc)
            return False

    # ------------------------------------------------------------------
    # Field updates (no status change)
    # ------------------------------------------------------------------

    async def update_candidature(self, candidature_id: UUID, data: CandidatureUpdate, actor_id: UUID) -> Candidature:
        candidature = await self.get_candidature(candidature_id)
        update_data = data.model_dump(exclude_unset=True)
        if update_data.get("assigned_psychologue_id"):
            await self._get_psychologue(update_data["assigned_psychologue_id"])

        async with run_atomic(self.db):
            for field, value in update_data.items():
                setattr(candidature, field, value)
            if "assigned_psychologue_id" in update_data:
                candidature.assigned_by = actor_id
                candidature.assignment_date = datetime.now(timezone.utc)
        return candidature

    async def record_technical_interview(
        self,
        candidature_id: UUID,
        data: TechnicalInterviewCreate,
        actor_id: UUID,
    ) -> TechnicalInterview:
        """Create the interview record, or overwrite the existing one."""
        await self.get_candidature(candidature_id)
        interview = await self.repo.get_interview(candidature_id)

        async with run_atomic(self.db):
            if interview:
                for field, value in data.model_dump().items():
                    setattr(interview, field, value)
                interview.conducted_by = actor_id
            else:
                interview = await self.repo.create_interview(
                    candidature_id=candidature_id,
                    conducted_by=actor_id,
                    **data.model_dump(),
                )
        return interview

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    async def assign_psychologue(self, candidature_id: UUID, psychologue_id: UUID, actor_id: UUID) -> Candidature:
        candidature = await self.get_candidature(candidature_id)
        current = candidature.status
        target = apply_transition(current, CandidatureEvent.ASSIGN_PSYCHOLOGUE)
        psychologue = await self._get_psychologue(psychologue_id)

        async with run_atomic(self.db):
            candidature.assigned_psychologue_id = psychologue.id
            candidature.assigned_by = actor_id
            candidature.assignment_date = datetime.now(timezone.utc)
            if target != current:
                await self._record_transition(
                    candidature,
                    current,
                    target,
                    actor_id,
                    f"Assigned to {psychologue.full_name}",
                )
        return candidature

    async def assign_tests(self, candidature_id: UUID, data: AssignTestsRequest, actor_id: UUID) -> Candidature:
        """
        Attach the main, optional and personality tests.

        Repeating the call with the same arguments leaves the same state and
        logs nothing further: only a real status change is logged.
        """
        candidature = await self.get_candidature(candidature_id)
        current = candidature.status
        target = apply_transition(current, CandidatureEvent.ASSIGN_TESTS)

        main_test = await self.tests.get_by_id(data.logical_test_id)
        if not main_test:
            raise NotFoundError("Logical test", data.logical_test_id)
        if data.optional_logical_test_id and not await self.tests.get_by_id(data.optional_logical_test_id):
            raise NotFoundError("Optional logical test", data.optional_logical_test_id)

        personality_test_id = None
        if data.include_personality_test is not False:
            personality = await self.tests.get_first_active_personality_test()
            personality_test_id = personality.id if personality else None

        async with run_atomic(self.db):
            candidature.assigned_logical_test_id = main_test.id
            candidature.assigned_optional_logical_test_id = data.optional_logical_test_id
            candidature.assigned_personality_test_id = personality_test_id
            if data.exam_date is not None:
                candidature.exam_date = data.exam_date
            if target != current:
                await self._record_transition(candidature, current, target, actor_id, "Tests assigned")

        if data.notify_candidate is not False:
            await self._send_assignment_notice(candidature)
        return candidature

    async def _send_assignment_notice(self, candidature: Candidature) -> bool:
        application = await self.applications.get_by_id(candidature.job_application_id)
        candidate = await self.users.get_by_id(application.candidate_id) if application else None
        if candidate is None:
            return False
        return await self._notify(
            self.notifier.send_test_assignment_notice(candidate.email, candidate.first_name, candidature.exam_date),
            "test assignment",
            candidate.email,
        )

    async def change_status(
        self,
        candidature_id: UUID,
        event: CandidatureEvent,
        actor_id: UUID,
        reason: Optional[str] = None,
    ) -> Candidature:
        """Progress events raised by the attempt engine (start, complete, start_review)."""
        candidature = await self.get_candidature(candidature_id)
        current = candidature.status
        target = apply_transition(current, event)

        async with run_atomic(self.db):
            await self._record_transition(candidature, current, target, actor_id, reason)
        return candidature

    async def make_decision(self, candidature_id: UUID, data: DecisionRequest, actor_id: UUID) -> Candidature:
        candidature = await self.get_candidature(candidature_id)
        current = candidature.status
        target = apply_transition(current, CandidatureEvent.DECIDE)

        reason = f"Decision: {data.decision.value}"
        if data.comments:
            reason = f"{reason} - {data.comments}"

        async with run_atomic(self.db):
            candidature.decision = data.decision
            candidature.decision_date = datetime.now(timezone.utc)
            candidature.decision_by = actor_id
            candidature.decision_comments = data.comments
            await self._record_transition(candidature, current, target, actor_id, reason)
        return candidature

    async def archive(self, candidature_id: UUID, actor_id: UUID) -> Candidature:
        candidature = await self.get_candidature(candidature_id)
        current = candidature.status
        target = apply_transition(current, CandidatureEvent.ARCHIVE)

        async with run_atomic(self.db):
            await self._record_transition(candidature, current, target, actor_id, "Archived")
        return candidature

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_transitions(self, candidature_id: UUID) -> list[CandidatureStateTransition]:
        await self.get_candidature(candidature_id)
        return await self.repo.list_transitions(candidature_id)

    async def get_results(self, candidature_id: UUID) -> CandidatureResults:
        candidature = await self.get_candidature(candidature_id)

        async def logical_summary(test_id: Optional[UUID]) -> Optional[AssignedTestSummary]:
            if not test_id:
                return None
            test = await self.tests.get_by_id(test_id)
            if not test:
                return None
            name = test.translations[0].name if test.translations else None
            return AssignedTestSummary(id=test.id, code=test.code.value, name=name, is_active=test.is_active)

        personality = None
        if candidature.assigned_personality_test_id:
            test = await self.tests.get_personality_test(candidature.assigned_personality_test_id)
            if test:
                personality = AssignedTestSummary(id=test.id, name=test.name, is_active=test.is_active)

        return CandidatureResults(
            candidature_id=candidature.id,
            status=candidature.status,
            logical_test=await logical_summary(candidature.assigned_logical_test_id),
            optional_logical_test=await logical_summary(candidature.assigned_optional_logical_test_id),
            personality_test=personality,
        )

    async def list_candidatures(
        self,
        current_user_id: Optional[UUID] = None,
        status: Optional[CandidatureStatus] = None,
        assigned_to: Optional[str] = None,
        site_id: Optional[UUID] = None,
        department_id: Optional[UUID] = None,
        search: Optional[str] = None,
        created_from: Optional[datetime] = None,
        created_to: Optional[datetime] = None,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 20,
    ) -> PaginatedResponse[CandidatureRead]:
        assignee: Optional[UUID] = None
        if assigned_to == "me":
            assignee = current_user_id
        elif assigned_to:
            try:
                assignee = UUID(assigned_to)
            except ValueError:
                raise InvalidArgumentError(
                    'assigned_to must be "me" or a user id',
                    {"assigned_to": assigned_to},
                )

        items, total = await self.repo.list(
            status=status,
            assigned_to=assignee,
            site_id=site_id,
            department_id=department_id,
            search=search,
            created_from=created_from,
            created_to=created_to,
            sort_by=sort_by,
            sort_order=sort_order,
            skip=(page - 1) * limit,
            limit=limit,
        )
        return PaginatedResponse[CandidatureRead](
            items=[CandidatureRead.model_validate(item) for item in items],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if limit else 0,
        )

    async def get_dashboard(self, user_id: UUID, site_id: Optional[UUID] = None) -> DashboardRead:
        my_counts = empty_status_counts()
        my_counts.update(await self.repo.count_by_status(psychologue_id=user_id))
        my_counts["total"] = sum(my_counts.values())

        global_counts = empty_status_counts()
        global_counts.update(await self.repo.count_by_status(site_id=site_id))
        global_counts["total"] = sum(global_counts.values())

        start = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
        todays_exams = await self.repo.count_exams_between(
            start,
            start + timedelta(days=1),
            EXAM_DAY_STATUSES,
            site_id=site_id,
        )
        return DashboardRead(
            my_assignments=my_counts,
            global_stats=global_counts,
            todays_exams=todays_exams,
        )
