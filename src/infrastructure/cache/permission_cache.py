"""Effective permission cache adapters.

Keys: ``authz:perms:{org_id}:{user_id}``. Values are the JSON payload of an
EffectivePermissions snapshot. Snapshots are replaced or deleted whole.

Both adapters implement PermissionCacheProtocol structurally. Redis errors
map to ``Failure(UnavailableError)``; callers recompute on any failure.
"""

import json
import re
import time

from redis.asyncio import Redis
from redis.exceptions import RedisError

from src.core.enums import ErrorCode
from src.core.errors import UnavailableError
from src.core.result import Failure, Result, Success
from src.domain.entities import EffectivePermissions

KEY_PREFIX = "authz:perms"
_GLOB_SPECIAL = re.compile(r"([\\*?\[\]])")


def permission_key(org_id: str, user_id: str) -> str:
    """Cache key of one (user, org) snapshot."""
    return f"{KEY_PREFIX}:{org_id}:{user_id}"


def _escape_glob(value: str) -> str:
    """Escape Redis glob metacharacters so ``value`` matches literally."""
    return _GLOB_SPECIAL.sub(r"\\\1", value)


def _cache_error(operation: str, key: str, error: Exception) -> UnavailableError:
    return UnavailableError(
        code=ErrorCode.CACHE_UNAVAILABLE,
        message=f"Permission cache {operation} failed",
        details={"key": key, "error": str(error)},
        dependency="cache",
    )


class RedisPermissionCache:
    """Redis implementation of PermissionCacheProtocol.

    Attributes:
        _redis: Async Redis client instance.
    """

    def __init__(self, redis_client: Redis) -> None:
        self._redis = redis_client

    async def get(
        self, user_id: str, org_id: str
    ) -> Result[EffectivePermissions | None, UnavailableError]:
        key = permission_key(org_id, user_id)
        try:
            raw = await self._redis.get(key)
        except RedisError as e:
            return Failure(error=_cache_error("get", key, e))
        if raw is None:
            return Success(value=None)
        try:
            payload = json.loads(raw.decode("utf-8") if isinstance(raw, bytes) else raw)
            return Success(value=EffectivePermissions.from_payload(payload))
        except (ValueError, KeyError) as e:
            return Failure(error=_cache_error("decode", key, e))

    async def set(
        self, snapshot: EffectivePermissions, ttl_seconds: int
    ) -> Result[None, UnavailableError]:
        key = permission_key(snapshot.org_id, snapshot.user_id)
        try:
            await self._redis.setex(key, ttl_seconds, json.dumps(snapshot.to_payload()))
        except RedisError as e:
            return Failure(error=_cache_error("set", key, e))
        return Success(value=None)

    async def invalidate(self, user_id: str, org_id: str) -> Result[None, UnavailableError]:
        key = permission_key(org_id, user_id)
        try:
            await self._redis.delete(key)
        except RedisError as e:
            return Failure(error=_cache_error("invalidate", key, e))
        return Success(value=None)

    async def invalidate_org(self, org_id: str) -> Result[None, UnavailableError]:
        pattern = f"{KEY_PREFIX}:{_escape_glob(org_id)}:*"
        try:
            keys = [key async for key in self._redis.scan_iter(match=pattern, count=100)]
            if keys:
                await self._redis.delete(*keys)
        except RedisError as e:
            return Failure(error=_cache_error("invalidate_org", pattern, e))
        return Success(value=None)


class InMemoryPermissionCache:
    """Process-local PermissionCacheProtocol implementation with TTL."""

    def __init__(self) -> None:
        self._entries: dict[str, tuple[EffectivePermissions, float]] = {}

    async def get(
        self, user_id: str, org_id: str
    ) -> Result[EffectivePermissions | None, UnavailableError]:
        key = permission_key(org_id, user_id)
        entry = self._entries.get(key)
        if entry is None:
            return Success(value=None)
        snapshot, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return Success(value=None)
        return Success(value=snapshot)

    async def set(
        self, snapshot: EffectivePermissions, ttl_seconds: int
    ) -> Result[None, UnavailableError]:
        self._entries[permission_key(snapshot.org_id, snapshot.user_id)] = (
            snapshot,
            time.monotonic() + ttl_seconds,
        )
        return Success(value=None)

    async def invalidate(self, user_id: str, org_id: str) -> Result[None, UnavailableError]:
        self._entries.pop(permission_key(org_id, user_id), None)
        return Success(value=None)

    async def invalidate_org(self, org_id: str) -> Result[None, UnavailableError]:
        prefix = f"{KEY_PREFIX}:{org_id}:"
        for key in [k for k in self._entries if k.startswith(prefix)]:
            del self._entries[key]
        return Success(value=None)
