"""
HTTP smoke tests: routing, identity headers, role gates and the error shape.

The app runs under TestClient with the database, cache and notifier swapped
for in-memory stand-ins. The database is created inside the client's event
loop so the aiosqlite connection never crosses loops.
"""

import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from recruitment.db.session import get_db
from recruitment.main import app
from recruitment.services.cache_service import get_cache
from recruitment.services.notification_service import get_notifier
from tests.conftest import InMemoryCache, RecordingNotifier, create_schema, seed_data


class AppDatabase:
    def __init__(self):
        self.engine = None
        self.session_maker = None
        self.seed = None

    async def setup(self):
        self.engine = await create_schema()
        self.session_maker = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)
        async with self.session_maker() as session:
            self.seed = await seed_data(session)

    async def dispose(self):
        await self.engine.dispose()

    async def get_db(self):
        async with self.session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


@pytest.fixture
def api():
    database = AppDatabase()
    cache = InMemoryCache()
    notifier = RecordingNotifier()
    app.dependency_overrides[get_db] = database.get_db
    app.dependency_overrides[get_cache] = lambda: cache
    app.dependency_overrides[get_notifier] = lambda: notifier
    with TestClient(app) as client:
        client.portal.call(database.setup)
        yield client, database.seed, notifier
        client.portal.call(database.dispose)
    app.dependency_overrides.clear()


def as_user(user_id, role):
    return {"X-User-Id": str(user_id), "X-User-Role": role}


def test_missing_identity_headers_is_unauthorized(api):
    client, seed, _ = api
    response = client.get("/languages")
    assert response.status_code == 401

    response = client.get("/languages", headers={"X-User-Id": "not-a-uuid", "X-User-Role": "admin"})
    assert response.status_code == 401


def test_languages_are_listed_default_first(api):
    client, seed, _ = api
    response = client.get("/languages", headers=as_user(seed.candidate_id, "candidate"))
    assert response.status_code == 200
    assert [lang["code"] for lang in response.json()] == ["fr", "en"]

    response = client.get("/languages/default", headers=as_user(seed.candidate_id, "candidate"))
    assert response.json() == {"code": "fr"}


def test_role_gates(api):
    client, seed, _ = api
    payload = {
        "code": "D_2000",
        "question_type": "DOMINO",
        "duration_minutes": 20,
        "translations": [{"language_code": "fr", "name": "D-2000", "instructions": "..."}],
    }
    response = client.post("/logical-tests", json=payload, headers=as_user(seed.psychologue_id, "psychologue"))
    assert response.status_code == 403

    response = client.post("/logical-tests", json=payload, headers=as_user(seed.admin_id, "admin"))
    assert response.status_code == 201
    assert response.json()["code"] == "D_2000"

    response = client.get("/candidatures", headers=as_user(seed.candidate_id, "candidate"))
    assert response.status_code == 403


def test_domain_errors_use_the_error_envelope(api):
    client, seed, _ = api
    admin = as_user(seed.admin_id, "admin")

    response = client.get(f"/logical-tests/{uuid.uuid4()}", headers=admin)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "not_found"

    response = client.put(
        f"/logical-tests/{seed.d70_test_id}/classifications",
        headers=admin,
        json=[
            {"display_order": 1, "min_score": 0, "max_score": 20, "translations": [{"language_code": "fr", "label": "Bas"}]},
            {"display_order": 2, "min_score": 20, "max_score": 44, "translations": [{"language_code": "fr", "label": "Haut"}]},
        ],
    )
    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "invalid_range"
    assert error["details"]["display_order"] == 2

    response = client.delete(f"/translations/test/{seed.d70_test_id}/fr", headers=admin)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "last_translation"

    response = client.post("/languages/fr/toggle-active", headers=admin)
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "default_language_locked"


def test_application_to_assigned_candidature(api):
    client, seed, notifier = api
    candidate = as_user(seed.candidate_id, "candidate")
    staff = as_user(seed.psychologue_id, "psychologue")

    response = client.post(
        "/job-applications",
        headers=candidate,
        json={
            "site_id": str(seed.site_id),
            "department_id": str(seed.department_id),
            "target_position": "Data Analyst",
        },
    )
    assert response.status_code == 201
    application_id = response.json()["id"]

    response = client.post(f"/job-applications/{application_id}/review", headers=staff, json={"decision": "approved"})
    assert response.status_code == 200
    candidature_id = response.json()["candidature_id"]
    assert candidature_id is not None

    response = client.get(f"/candidatures/{candidature_id}", headers=staff)
    assert response.json()["status"] == "pending"

    response = client.post(
        f"/candidatures/{candidature_id}/assign-tests",
        headers=staff,
        json={"logical_test_id": str(seed.d70_test_id)},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "assigned"
    assert body["assigned_logical_test_id"] == str(seed.d70_test_id)
    assert body["assigned_personality_test_id"] == str(seed.personality_test_id)
    assert [kind for kind, *_ in notifier.sent] == ["test_assignment"]

    response = client.get(f"/candidatures/{candidature_id}/transitions", headers=staff)
    assert [(t["from_status"], t["to_status"]) for t in response.json()] == [("pending", "assigned")]

    # a second approval attempt on the same application is refused
    response = client.post(f"/job-applications/{application_id}/review", headers=staff, json={"decision": "approved"})
    assert response.status_code == 400
    assert response.json()["error"]["code"] == "precondition_failed"
