# hackforge/services/cache.py
"""
Optional Redis response cache.

Enabled only when REDIS_URL is set and the server answers a ping. Every
operation is best-effort: Redis errors are logged and read as a miss (or
ignored for writes), so a broken cache never fails a request.
"""
import json
import re
from typing import Any, Dict, Optional

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from hackforge.core.config import settings
from hackforge.core.logging import log


class CacheService:
    """JSON values in Redis with per-key TTL."""

    def __init__(self, redis_url: Optional[str] = None, default_ttl: Optional[int] = None):
        self.redis_url = redis_url
        self.default_ttl = default_ttl or settings.cache.default_ttl
        self.client: Optional[aioredis.Redis] = None
        self.is_connected = False

    async def connect(self) -> bool:
        """Open the client and ping it. Returns whether the cache is usable."""
        if not self.redis_url:
            log("CACHE", "REDIS_URL not configured. Caching disabled.")
            return False

        try:
            self.client = aioredis.from_url(
                self.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
            )
            await self.client.ping()
            self.is_connected = True
            log("CACHE", "✅ Redis connected")
        except (RedisError, OSError) as e:
            log("CACHE", f"⚠️ Redis not available: {e}")
            self.client = None
            self.is_connected = False
        return self.is_connected

    async def close(self) -> None:
        if self.client is not None:
            await self.client.aclose()
            log("CACHE", "🔌 Redis connection closed")
        self.client = None
        self.is_connected = False

    @property
    def enabled(self) -> bool:
        return self.is_connected and self.client is not None

    async def get(self, key: str) -> Optional[Any]:
        if not self.enabled:
            return None
        try:
            value = await self.client.get(key)
        except RedisError as e:
            log("CACHE", f"Cache get error for {key}: {e}")
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except json.JSONDecodeError:
            log("CACHE", f"Discarding non-JSON value at {key}")
            return None

    async def set(self, key: str, value: Any, ttl: Optional[int] = None) -> None:
        if not self.enabled:
            return
        try:
            await self.client.setex(key, ttl or self.default_ttl, json.dumps(value, default=str))
        except RedisError as e:
            log("CACHE", f"Cache set error for {key}: {e}")

    async def delete(self, key: str) -> None:
        if not self.enabled:
            return
        try:
            await self.client.delete(key)
        except RedisError as e:
            log("CACHE", f"Cache delete error for {key}: {e}")

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern. Returns how many were removed."""
        if not self.enabled:
            return 0
        removed = 0
        try:
            async for key in self.client.scan_iter(match=pattern, count=100):
                removed += await self.client.delete(key)
        except RedisError as e:
            log("CACHE", f"Cache delete_pattern error for {pattern}: {e}")
        return removed

    async def flush(self) -> None:
        if not self.enabled:
            return
        try:
            await self.client.flushdb()
        except RedisError as e:
            log("CACHE", f"Cache flush error: {e}")

    async def ping(self) -> bool:
        """Round-trip a short-lived key; used by the health check."""
        if not self.enabled:
            return False
        try:
            await self.client.setex("health:test", 1, "test")
            return True
        except RedisError as e:
            log("CACHE", f"Cache health check failed: {e}")
            return False

    @staticmethod
    def generate_key(prefix: str, params: Dict[str, Any]) -> str:
        """``prefix:k1:v1|k2:v2`` with keys sorted, so equal params give equal keys."""
        parts = "|".join(f"{k}:{params[k]}" for k in sorted(params))
        return f"{prefix}:{parts}"


cache_service = CacheService(settings.cache.redis_url)

GLOB_SPECIAL = re.compile(r"([*?\[\]\\])")


def escape_glob(value: str) -> str:
    """Backslash-escape Redis glob metacharacters so ``value`` matches literally."""
    return GLOB_SPECIAL.sub(r"\\\1", value)


def project_cache_prefix(user_id: str) -> str:
    return f"{settings.cache.key_prefix}:projects:{user_id}"


async def invalidate_user_projects(user_id: str) -> None:
    removed = await cache_service.delete_pattern(f"{escape_glob(project_cache_prefix(user_id))}:*")
    if removed:
        log("CACHE", f"Invalidated {removed} cached project responses for {user_id}")
