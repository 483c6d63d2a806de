"""Cache adapters."""

from src.infrastructure.cache.permission_cache import (
    InMemoryPermissionCache,
    RedisPermissionCache,
    permission_key,
)

__all__ = ["InMemoryPermissionCache", "RedisPermissionCache", "permission_key"]
