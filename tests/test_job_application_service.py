"""Job application submission, review and candidature spawning tests."""

import pytest
from sqlalchemy import func, select

from recruitment.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    PreconditionFailedError,
)
from recruitment.models.candidature import Candidature
from recruitment.models.enums import ApplicationStatus, CandidatureStatus
from recruitment.models.site import Site
from recruitment.schemas.job_application import JobApplicationCreate, JobApplicationReview
from recruitment.services.job_application_service import JobApplicationService
from tests.conftest import run_db


def application_payload(seed, position="Data Analyst"):
    return JobApplicationCreate(
        site_id=seed.site_id,
        department_id=seed.department_id,
        target_position=position,
        motivation="Curious about the team.",
    )


async def candidature_count(session):
    return await session.scalar(select(func.count()).select_from(Candidature))


@pytest.mark.db
def test_approval_spawns_one_pending_candidature():
    async def scenario(session, seed):
        service = JobApplicationService(session)
        application = await service.create(seed.candidate_id, application_payload(seed))
        assert application.status == ApplicationStatus.PENDING

        result = await service.review(
            application.id,
            seed.admin_id,
            JobApplicationReview(decision="approved"),
        )

        assert result.application.status == ApplicationStatus.APPROVED
        assert result.application.reviewed_by == seed.admin_id
        assert result.application.reviewed_at is not None
        assert result.candidature_id is not None

        candidature = await session.get(Candidature, result.candidature_id)
        assert candidature.status == CandidatureStatus.PENDING
        assert candidature.job_application_id == application.id
        assert await candidature_count(session) == 1

        # already reviewed
        with pytest.raises(PreconditionFailedError):
            await service.review(application.id, seed.admin_id, JobApplicationReview(decision="approved"))
        assert await candidature_count(session) == 1

    run_db(scenario)


@pytest.mark.db
def test_rejection_requires_reason_and_spawns_nothing():
    async def scenario(session, seed):
        service = JobApplicationService(session)
        application = await service.create(seed.candidate_id, application_payload(seed))

        with pytest.raises(InvalidArgumentError):
            await service.review(application.id, seed.admin_id, JobApplicationReview(decision="rejected"))

        result = await service.review(
            application.id,
            seed.admin_id,
            JobApplicationReview(decision="rejected", rejection_reason="Position filled"),
        )
        assert result.application.status == ApplicationStatus.REJECTED
        assert result.application.rejection_reason == "Position filled"
        assert result.candidature_id is None
        assert await candidature_count(session) == 0

    run_db(scenario)


@pytest.mark.db
def test_duplicate_pending_application_conflicts():
    async def scenario(session, seed):
        service = JobApplicationService(session)
        await service.create(seed.candidate_id, application_payload(seed))

        with pytest.raises(ConflictError):
            await service.create(seed.candidate_id, application_payload(seed))

        other = await service.create(seed.candidate_id, application_payload(seed, position="Engineer"))
        assert other.target_position == "Engineer"

    run_db(scenario)


@pytest.mark.db
def test_inactive_site_is_rejected():
    async def scenario(session, seed):
        site = await session.get(Site, seed.site_id)
        site.is_active = False
        await session.commit()

        service = JobApplicationService(session)
        with pytest.raises(InvalidArgumentError):
            await service.create(seed.candidate_id, application_payload(seed))

        with pytest.raises(NotFoundError):
            await service.create(
                seed.candidate_id,
                JobApplicationCreate(
                    site_id=seed.department_id,
                    department_id=seed.department_id,
                    target_position="Analyst",
                ),
            )

    run_db(scenario)


@pytest.mark.db
def test_withdraw_own_pending_application_only():
    async def scenario(session, seed):
        service = JobApplicationService(session)
        application = await service.create(seed.candidate_id, application_payload(seed))

        with pytest.raises(ForbiddenError):
            await service.withdraw(application.id, seed.admin_id)

        withdrawn = await service.withdraw(application.id, seed.candidate_id)
        assert withdrawn.status == ApplicationStatus.WITHDRAWN

        with pytest.raises(PreconditionFailedError):
            await service.withdraw(application.id, seed.candidate_id)

        with pytest.raises(PreconditionFailedError):
            await service.review(application.id, seed.admin_id, JobApplicationReview(decision="approved"))

    run_db(scenario)


@pytest.mark.db
def test_statistics_count_every_status():
    async def scenario(session, seed):
        service = JobApplicationService(session)
        first = await service.create(seed.candidate_id, application_payload(seed, "A"))
        second = await service.create(seed.candidate_id, application_payload(seed, "B"))
        await service.create(seed.candidate_id, application_payload(seed, "C"))
        await service.review(first.id, seed.admin_id, JobApplicationReview(decision="approved"))
        await service.withdraw(second.id, seed.candidate_id)

        stats = await service.get_statistics()
        assert stats.total == 3
        assert stats.by_status == {"pending": 1, "approved": 1, "rejected": 0, "withdrawn": 1}

        mine = await service.list_for_candidate(seed.candidate_id)
        assert len(mine) == 3

    run_db(scenario)
