"""Unit tests for the effective permission cache adapters.

Redis is mocked (AsyncMock client); the in-memory adapter runs as is.
"""

import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.core.enums import ErrorCode
from src.core.errors import UnavailableError
from src.core.result import Failure, Success
from src.domain.entities import EffectivePermissions
from src.domain.enums import Capability
from src.infrastructure.cache import (
    InMemoryPermissionCache,
    RedisPermissionCache,
    permission_key,
)


def snapshot(user_id: str = "u1", org_id: str = "o1") -> EffectivePermissions:
    return EffectivePermissions(
        user_id=user_id,
        org_id=org_id,
        capabilities={Capability.CAN_VIEW: True, Capability.HAVE_API_ACCESS: True},
    )


@pytest.fixture
def redis_client():
    client = AsyncMock()
    client.get.return_value = None
    return client


@pytest.mark.unit
class TestPermissionKey:
    def test_key_layout(self):
        assert permission_key("o1", "u1") == "authz:perms:o1:u1"


@pytest.mark.unit
class TestRedisPermissionCache:
    @pytest.mark.asyncio
    async def test_miss(self, redis_client):
        cache = RedisPermissionCache(redis_client=redis_client)

        result = await cache.get("u1", "o1")

        assert result == Success(value=None)
        redis_client.get.assert_awaited_once_with("authz:perms:o1:u1")

    @pytest.mark.asyncio
    async def test_set_then_get_round_trips_payload(self, redis_client):
        # Arrange
        cache = RedisPermissionCache(redis_client=redis_client)
        original = snapshot()

        # Act
        await cache.set(original, 120)
        key, ttl, raw = redis_client.setex.await_args.args
        redis_client.get.return_value = raw.encode("utf-8")
        result = await cache.get("u1", "o1")

        # Assert
        assert key == "authz:perms:o1:u1"
        assert ttl == 120
        assert json.loads(raw)["capabilities"]["can_view"] is True
        assert result.value.to_dict() == original.to_dict()
        assert result.value.computed_at == original.computed_at

    @pytest.mark.asyncio
    async def test_redis_error_is_unavailable(self, redis_client):
        redis_client.get.side_effect = RedisConnectionError("refused")
        cache = RedisPermissionCache(redis_client=redis_client)

        result = await cache.get("u1", "o1")

        assert isinstance(result, Failure)
        assert isinstance(result.error, UnavailableError)
        assert result.error.code == ErrorCode.CACHE_UNAVAILABLE
        assert result.error.retryable

    @pytest.mark.asyncio
    async def test_corrupt_payload_is_unavailable(self, redis_client):
        redis_client.get.return_value = b"not json"
        cache = RedisPermissionCache(redis_client=redis_client)

        result = await cache.get("u1", "o1")

        assert isinstance(result, Failure)

    @pytest.mark.asyncio
    async def test_invalidate_deletes_key(self, redis_client):
        cache = RedisPermissionCache(redis_client=redis_client)

        result = await cache.invalidate("u1", "o1")

        assert result == Success(value=None)
        redis_client.delete.assert_awaited_once_with("authz:perms:o1:u1")

    @pytest.mark.asyncio
    async def test_invalidate_org_scans_prefix(self):
        # Arrange
        client = MagicMock()
        client.delete = AsyncMock()

        async def scan_iter(match: str, count: int):
            assert match == "authz:perms:o1:*"
            for key in (b"authz:perms:o1:u1", b"authz:perms:o1:u2"):
                yield key

        client.scan_iter = scan_iter
        cache = RedisPermissionCache(redis_client=client)

        # Act
        result = await cache.invalidate_org("o1")

        # Assert
        assert result == Success(value=None)
        client.delete.assert_awaited_once_with(b"authz:perms:o1:u1", b"authz:perms:o1:u2")

    @pytest.mark.asyncio
    async def test_invalidate_org_escapes_glob_characters(self):
        client = MagicMock()
        client.delete = AsyncMock()
        patterns = []

        async def scan_iter(match: str, count: int):
            patterns.append(match)
            return
            yield

        client.scan_iter = scan_iter
        cache = RedisPermissionCache(redis_client=client)

        result = await cache.invalidate_org("o[1]*?\\")

        assert result == Success(value=None)
        assert patterns == ["authz:perms:o\\[1\\]\\*\\?\\\\:*"]
        client.delete.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_set_failure(self, redis_client):
        redis_client.setex.side_effect = RedisConnectionError("refused")
        cache = RedisPermissionCache(redis_client=redis_client)

        result = await cache.set(snapshot(), 60)

        assert isinstance(result, Failure)


@pytest.mark.unit
class TestInMemoryPermissionCache:
    @pytest.mark.asyncio
    async def test_set_get(self):
        cache = InMemoryPermissionCache()
        stored = snapshot()

        await cache.set(stored, 60)

        assert await cache.get("u1", "o1") == Success(value=stored)

    @pytest.mark.asyncio
    async def test_expired_entry_is_a_miss(self):
        cache = InMemoryPermissionCache()
        with patch("src.infrastructure.cache.permission_cache.time.monotonic", return_value=100.0):
            await cache.set(snapshot(), 10)
        with patch("src.infrastructure.cache.permission_cache.time.monotonic", return_value=111.0):
            result = await cache.get("u1", "o1")

        assert result == Success(value=None)

    @pytest.mark.asyncio
    async def test_invalidate_org_keeps_other_orgs(self):
        cache = InMemoryPermissionCache()
        await cache.set(snapshot("u1", "o1"), 60)
        await cache.set(snapshot("u1", "o2"), 60)

        await cache.invalidate_org("o1")

        assert await cache.get("u1", "o1") == Success(value=None)
        assert (await cache.get("u1", "o2")).value is not None
