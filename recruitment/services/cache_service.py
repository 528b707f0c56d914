"""
Best-effort key/value cache in front of resolved, language-specific reads.

Every call may fail (Redis down, timeout, bad payload); failures are logged
and swallowed so callers always fall back to the database.
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, Optional
from uuid import UUID

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import RedisError

from recruitment.core.config import settings

logger = logging.getLogger(__name__)

CACHE_PREFIX = "logical"


def test_key(test_id: UUID | str, language_code: str) -> str:
    return f"{CACHE_PREFIX}:test:{test_id}:{language_code}"


def test_list_key(filters: dict[str, Any]) -> str:
    canonical = json.dumps(filters, sort_keys=True, separators=(",", ":"), default=str)
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
    return f"{CACHE_PREFIX}:tests:list:{digest}"


def classifications_key(test_id: UUID | str, language_code: str) -> str:
    return f"{CACHE_PREFIX}:classifications:{test_id}:{language_code}"


def questions_key(test_id: UUID | str, language_code: str) -> str:
    return f"{CACHE_PREFIX}:questions:{test_id}:{language_code}"


_pool: Optional[ConnectionPool] = None


def _get_pool() -> ConnectionPool:
    global _pool
    if _pool is None:
        _pool = ConnectionPool.from_url(
            settings.REDIS_URL,
            socket_timeout=settings.CACHE_SOCKET_TIMEOUT_SECONDS,
            socket_connect_timeout=settings.CACHE_SOCKET_TIMEOUT_SECONDS,
            decode_responses=True,
        )
    return _pool


class CacheService:
    """JSON values in Redis with per-key TTL."""

    def __init__(self, client: Optional[Redis] = None, enabled: Optional[bool] = None):
        self.enabled = settings.CACHE_ENABLED if enabled is None else enabled
        self._client = client

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis(connection_pool=_get_pool())
        return self._client

    async def get(self, key: str) -> Optional[Any]:
        """Cached value, or None on miss or any cache failure."""
        if not self.enabled:
            return None
        try:
            raw = await self.client.get(key)
        except (RedisError, OSError) as exc:
            logger.warning("Cache get failed for %s: %s", key, exc)
            return None
        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding undecodable cache entry %s: %s", key, exc)
            return None
        logger.debug("Cache hit: %s", key)
        return value

    async def set(self, key: str, value: Any, ttl_seconds: int) -> None:
        if not self.enabled:
            return
        try:
            payload = json.dumps(value, default=str)
            await self.client.set(key, payload, ex=ttl_seconds)
        except (RedisError, OSError, TypeError, ValueError) as exc:
            logger.warning("Cache set failed for %s: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        if not self.enabled or not keys:
            return
        try:
            await self.client.delete(*keys)
        except (RedisError, OSError) as exc:
            logger.warning("Cache delete failed for %s: %s", ", ".join(keys), exc)

    async def delete_pattern(self, pattern: str) -> None:
        """Drop every key matching a glob pattern (used for list caches)."""
        if not self.enabled:
            return
        try:
            keys = [key async for key in self.client.scan_iter(match=pattern, count=200)]
            if keys:
                await self.client.delete(*keys)
        except (RedisError, OSError) as exc:
            logger.warning("Cache pattern delete failed for %s: %s", pattern, exc)


_cache: Optional[CacheService] = None


def get_cache() -> CacheService:
    """FastAPI dependency returning the process-wide cache service."""
    global _cache
    if _cache is None:
        _cache = CacheService()
    return _cache


async def close_cache() -> None:
    """Release the Redis connection pool on shutdown."""
    global _cache, _pool
    if _cache is not None and _cache._client is not None:
        await _cache._client.aclose()
    if _pool is not None:
        await _pool.aclose()
    _cache = None
    _pool = None
