"""Cache and notification best-effort behaviour."""

import asyncio
import smtplib
import uuid

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from recruitment.services import cache_service
from recruitment.services.cache_service import CacheService
from recruitment.services.notification_service import NotificationService


class BrokenRedis:
    """Every command fails as if the server were unreachable."""

    def __init__(self):
        self.calls = 0

    async def get(self, key):
        self.calls += 1
        raise RedisConnectionError("connection refused")

    async def set(self, key, value, ex=None):
        self.calls += 1
        raise RedisConnectionError("connection refused")

    async def delete(self, *keys):
        self.calls += 1
        raise RedisConnectionError("connection refused")

    async def scan_iter(self, match=None, count=None):
        self.calls += 1
        raise RedisConnectionError("connection refused")
        yield  # pragma: no cover


class DictRedis:
    def __init__(self):
        self.data = {}
        self.ttls = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex

    async def delete(self, *keys):
        for key in keys:
            self.data.pop(key, None)

    async def scan_iter(self, match=None, count=None):
        prefix = match.rstrip("*")
        for key in list(self.data):
            if key.startswith(prefix):
                yield key


@pytest.mark.unit
def test_cache_failures_are_swallowed():
    async def scenario():
        client = BrokenRedis()
        cache = CacheService(client=client, enabled=True)
        assert await cache.get("logical:test:x:fr") is None
        await cache.set("logical:test:x:fr", {"name": "D-70"}, 60)
        await cache.delete("logical:test:x:fr")
        await cache.delete_pattern("logical:tests:list:*")
        assert client.calls == 4

    asyncio.run(scenario())


@pytest.mark.unit
def test_disabled_cache_never_touches_client():
    async def scenario():
        client = BrokenRedis()
        cache = CacheService(client=client, enabled=False)
        await cache.set("k", 1, 60)
        assert await cache.get("k") is None
        await cache.delete("k")
        await cache.delete_pattern("*")
        assert client.calls == 0

    asyncio.run(scenario())


@pytest.mark.unit
def test_cache_round_trips_json_with_ttl():
    async def scenario():
        client = DictRedis()
        cache = CacheService(client=client, enabled=True)
        await cache.set("logical:tests:list:abc", [{"code": "D_70"}], 300)
        assert client.ttls["logical:tests:list:abc"] == 300
        assert await cache.get("logical:tests:list:abc") == [{"code": "D_70"}]

        client.data["logical:test:bad:fr"] = "{not json"
        assert await cache.get("logical:test:bad:fr") is None

        await cache.delete_pattern("logical:tests:list:*")
        assert client.data == {"logical:test:bad:fr": "{not json"}

    asyncio.run(scenario())


@pytest.mark.unit
def test_list_key_is_stable_for_equal_filters():
    first = cache_service.test_list_key({"is_active": True, "code": None, "lang": "fr"})
    second = cache_service.test_list_key({"lang": "fr", "code": None, "is_active": True})
    other = cache_service.test_list_key({"lang": "en", "code": None, "is_active": True})
    assert first == second
    assert first != other
    assert first.startswith("logical:tests:list:")


@pytest.mark.unit
def test_notifier_reports_failure_instead_of_raising(monkeypatch):
    notifier = NotificationService(host="smtp.test", port=25, user="", password="", sender="noreply@test.com")

    def refuse(message):
        raise smtplib.SMTPServerDisconnected("gone")

    monkeypatch.setattr(notifier, "_deliver", refuse)
    assert asyncio.run(notifier.send_account_created("c@test.com", "Claire", "pw")) is False


@pytest.mark.unit
def test_notifier_sends_when_configured(monkeypatch):
    notifier = NotificationService(host="smtp.test", port=25, user="", password="", sender="noreply@test.com")
    delivered = []
    monkeypatch.setattr(notifier, "_deliver", delivered.append)

    assert asyncio.run(notifier.send_test_assignment_notice("c@test.com", "Claire")) is True
    assert delivered[0]["To"] == "c@test.com"


@pytest.mark.unit
def test_unconfigured_notifier_skips_sending():
    notifier = NotificationService(host="", port=0)
    assert asyncio.run(notifier.send_account_created("c@test.com", "Claire", "pw")) is False


@pytest.mark.unit
def test_language_qualified_keys_follow_domain_kind_id_language():
    test_id = uuid.UUID("7d1f5f0e-3c1a-4c1e-9f59-0c7c2f0f6a11")
    assert cache_service.test_key(test_id, "fr") == f"logical:test:{test_id}:fr"
    assert cache_service.classifications_key(test_id, "en") == f"logical:classifications:{test_id}:en"
    assert cache_service.questions_key(test_id, "fr") == f"logical:questions:{test_id}:fr"
