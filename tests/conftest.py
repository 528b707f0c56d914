"""
Pytest configuration and shared fixtures.

Service tests run against a throwaway in-memory SQLite database (aiosqlite),
created and seeded per test by ``run_db``.
"""

import asyncio
import fnmatch
import uuid
from dataclasses import dataclass

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import recruitment.models  # noqa: F401
from recruitment.db.base import Base
from recruitment.models.enums import (
    LogicalQuestionType,
    LogicalTestCode,
    UserRole,
    UserStatus,
)
from recruitment.models.language import Language
from recruitment.models.logical_test import LogicalTest, LogicalTestTranslation
from recruitment.models.personality_test import PersonalityTest
from recruitment.models.site import Department, Site
from recruitment.models.user import User

TEST_DATABASE_URL = "sqlite+aiosqlite://"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "db: runs against the in-memory SQLite schema")


class InMemoryCache:
    """Stand-in for CacheService keeping JSON-able values in a dict."""

    def __init__(self):
        self.store = {}
        self.set_calls = []

    async def get(self, key):
        return self.store.get(key)

    async def set(self, key, value, ttl_seconds):
        self.set_calls.append((key, ttl_seconds))
        self.store[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)

    async def delete_pattern(self, pattern):
        for key in [k for k in self.store if fnmatch.fnmatch(k, pattern)]:
            del self.store[key]


class RecordingNotifier:
    """Stand-in for NotificationService recording every send."""

    def __init__(self, result=True, error=None):
        self.result = result
        self.error = error
        self.sent = []

    async def send_account_created(self, email, first_name, temporary_password):
        self.sent.append(("account_created", email, temporary_password))
        if self.error:
            raise self.error
        return self.result

    async def send_test_assignment_notice(self, email, first_name, exam_date=None):
        self.sent.append(("test_assignment", email, exam_date))
        if self.error:
            raise self.error
        return self.result


@dataclass
class Seed:
    admin_id: uuid.UUID
    psychologue_id: uuid.UUID
    candidate_id: uuid.UUID
    site_id: uuid.UUID
    department_id: uuid.UUID
    d70_test_id: uuid.UUID
    personality_test_id: uuid.UUID


async def seed_data(session: AsyncSession) -> Seed:
    """Languages fr (default) / en / es (inactive), three users, one site, one test."""
    session.add_all(
        [
            Language(code="fr", name="Français", is_active=True, is_default=True),
            Language(code="en", name="English", is_active=True, is_default=False),
            Language(code="es", name="Español", is_active=False, is_default=False),
        ]
    )

    admin = User(
        email="admin@test.com",
        first_name="Ada",
        last_name="Admin",
        role=UserRole.ADMIN,
        status=UserStatus.ACTIVE,
    )
    psychologue = User(
        email="psy@test.com",
        first_name="Paul",
        last_name="Martin",
        role=UserRole.PSYCHOLOGUE,
        status=UserStatus.ACTIVE,
    )
    candidate = User(
        email="candidate@test.com",
        first_name="Claire",
        last_name="Dupont",
        role=UserRole.CANDIDATE,
        status=UserStatus.ACTIVE,
    )
    site = Site(name="Headquarters", code="HQ", country="France")
    department = Department(name="Engineering", code="ENG")
    d70 = LogicalTest(
        code=LogicalTestCode.D_70,
        question_type=LogicalQuestionType.DOMINO,
        duration_minutes=25,
        total_questions=44,
        translations=[
            LogicalTestTranslation(
                language_code="fr",
                name="Test D-70",
                instructions="Trouvez le domino manquant.",
            )
        ],
    )
    personality = PersonalityTest(name="Inventaire de personnalité", duration_minutes=45)
    session.add_all([admin, psychologue, candidate, site, department, d70, personality])
    await session.commit()

    return Seed(
        admin_id=admin.id,
        psychologue_id=psychologue.id,
        candidate_id=candidate.id,
        site_id=site.id,
        department_id=department.id,
        d70_test_id=d70.id,
        personality_test_id=personality.id,
    )


async def create_schema():
    engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    return engine


async def _with_session(fn):
    engine = await create_schema()
    session_maker = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    try:
        async with session_maker() as session:
            seed = await seed_data(session)
            return await fn(session, seed)
    finally:
        await engine.dispose()


def run_db(fn):
    """Run ``await fn(session, seed)`` against a fresh seeded database."""
    return asyncio.run(_with_session(fn))


@pytest.fixture
def cache():
    return InMemoryCache()


@pytest.fixture
def notifier():
    return RecordingNotifier()
