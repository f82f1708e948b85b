"""
Tests for the Redis response cache, using an in-process stand-in client.
"""
import re

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hackforge.services import cache as cache_module
from hackforge.services.cache import CacheService, escape_glob, invalidate_user_projects


def redis_glob(pattern):
    """Compile a Redis MATCH pattern: * ? [...] and backslash escapes."""
    out, i = [], 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "\\" and i + 1 < len(pattern):
            out.append(re.escape(pattern[i + 1]))
            i += 2
            continue
        if ch == "*":
            out.append(".*")
        elif ch == "?":
            out.append(".")
        elif ch == "[" and "]" in pattern[i + 1:]:
            end = pattern.index("]", i + 1)
            out.append(pattern[i:end + 1])
            i = end + 1
            continue
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out), re.DOTALL)


class FakeRedis:
    """Just enough of redis.asyncio.Redis for CacheService."""

    def __init__(self):
        self.store = {}
        self.ttls = {}
        self.fail = False

    def _check(self):
        if self.fail:
            raise RedisConnectionError("redis went away")

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        self._check()
        self.store[key] = value
        self.ttls[key] = ttl

    async def delete(self, key):
        self._check()
        return 1 if self.store.pop(key, None) is not None else 0

    async def scan_iter(self, match=None, count=None):
        self._check()
        for key in list(self.store):
            if match is None or redis_glob(match).fullmatch(key):
                yield key

    async def flushdb(self):
        self._check()
        self.store.clear()

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def cache(fake_redis):
    service = CacheService("redis://test", default_ttl=60)
    service.client = fake_redis
    service.is_connected = True
    return service


@pytest.mark.asyncio
async def test_disabled_without_url():
    service = CacheService(None)
    assert await service.connect() is False
    assert service.enabled is False
    assert await service.get("anything") is None
    await service.set("anything", {"a": 1})
    assert await service.ping() is False


@pytest.mark.asyncio
async def test_set_and_get_round_trip(cache, fake_redis):
    await cache.set("api:key", {"projects": [1, 2]})

    assert await cache.get("api:key") == {"projects": [1, 2]}
    assert fake_redis.ttls["api:key"] == 60


@pytest.mark.asyncio
async def test_set_with_custom_ttl(cache, fake_redis):
    await cache.set("api:key", "value", ttl=5)
    assert fake_redis.ttls["api:key"] == 5


@pytest.mark.asyncio
async def test_get_miss_and_bad_json(cache, fake_redis):
    assert await cache.get("missing") is None
    fake_redis.store["broken"] = "{not json"
    assert await cache.get("broken") is None


@pytest.mark.asyncio
async def test_delete_pattern(cache, fake_redis):
    await cache.set("api:projects:alice:list:a", 1)
    await cache.set("api:projects:alice:item:1", 2)
    await cache.set("api:projects:bob:list:a", 3)

    removed = await cache.delete_pattern("api:projects:alice:*")

    assert removed == 2
    assert list(fake_redis.store) == ["api:projects:bob:list:a"]


@pytest.mark.asyncio
async def test_flush_and_delete(cache, fake_redis):
    await cache.set("a", 1)
    await cache.set("b", 2)
    await cache.delete("a")
    assert list(fake_redis.store) == ["b"]

    await cache.flush()
    assert fake_redis.store == {}


@pytest.mark.asyncio
async def test_ping_writes_health_key(cache, fake_redis):
    assert await cache.ping() is True
    assert fake_redis.store["health:test"] == "test"
    assert fake_redis.ttls["health:test"] == 1


@pytest.mark.asyncio
async def test_errors_become_misses(cache, fake_redis):
    fake_redis.fail = True

    assert await cache.get("key") is None
    await cache.set("key", 1)
    await cache.delete("key")
    assert await cache.delete_pattern("*") == 0
    await cache.flush()
    assert await cache.ping() is False


def test_generate_key_sorts_params():
    key = CacheService.generate_key("api:projects:u", {"page": 2, "limit": 10, "search": ""})
    assert key == "api:projects:u:limit:10|page:2|search:"
    assert key == CacheService.generate_key("api:projects:u", {"search": "", "page": 2, "limit": 10})


# ═══════════════════════════════════════════════════════
# PROJECT ROUTES THROUGH THE CACHE
# ═══════════════════════════════════════════════════════

@pytest.mark.asyncio
async def test_project_routes_use_cache(async_client, cache, fake_redis, monkeypatch):
    monkeypatch.setattr(cache_module, "cache_service", cache)
    monkeypatch.setattr("hackforge.api.projects.cache_service", cache)

    created = (await async_client.post(
        "/api/projects",
        json={"title": "Cached", "prompt": "a prompt", "generatedCode": "code", "userId": "alice"},
    )).json()["project"]

    first = (await async_client.get("/api/projects", params={"userId": "alice"})).json()
    assert first["pagination"]["total"] == 1
    assert any(k.startswith("api:projects:alice:list:") for k in fake_redis.store)

    await async_client.get(f"/api/projects/{created['_id']}", params={"userId": "alice"})
    assert f"api:projects:alice:item:{created['_id']}" in fake_redis.store

    # a write drops every cached response for that user
    await async_client.patch(f"/api/projects/{created['_id']}/favorite", json={"userId": "alice"})
    assert not any(k.startswith("api:projects:alice:") for k in fake_redis.store)

    refreshed = (await async_client.get(f"/api/projects/{created['_id']}", params={"userId": "alice"})).json()
    assert refreshed["project"]["isFavorite"] is True


def test_escape_glob_backslashes_metacharacters():
    assert escape_glob("alice") == "alice"
    assert escape_glob("team[1]") == "team\\[1\\]"
    assert escape_glob("*?") == "\\*\\?"
    assert escape_glob("a\\b") == "a\\\\b"


@pytest.mark.asyncio
async def test_invalidate_user_with_brackets_in_id(cache, fake_redis, monkeypatch):
    monkeypatch.setattr(cache_module, "cache_service", cache)
    await cache.set("api:projects:team[1]:list:a", 1)
    await cache.set("api:projects:team[1]:item:x", 2)
    await cache.set("api:projects:team1:list:a", 3)

    await invalidate_user_projects("team[1]")

    assert list(fake_redis.store) == ["api:projects:team1:list:a"]


@pytest.mark.asyncio
async def test_invalidate_wildcard_user_leaves_other_users(cache, fake_redis, monkeypatch):
    monkeypatch.setattr(cache_module, "cache_service", cache)
    await cache.set("api:projects:*:list:a", 1)
    await cache.set("api:projects:bob:list:a", 2)
    await cache.set("api:projects:alice:item:y", 3)

    await invalidate_user_projects("*")

    assert sorted(fake_redis.store) == ["api:projects:alice:item:y", "api:projects:bob:list:a"]
