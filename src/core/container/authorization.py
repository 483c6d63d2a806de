"""Authorization dependency factories.

Application-scoped singletons:
- RebacAuthorizer (checker + tuple mutations)
- Permission cache (Redis when REDIS_URL is set, else in-process)
- EffectivePermissionsService
- PermissionGate

Usage:
    # Presentation Layer (FastAPI Depends)
    from fastapi import Depends
    authz: AuthorizationProtocol = Depends(get_authorization)
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.container.infrastructure import get_logger, get_redis
from src.core.container.repositories import (
    get_role_repository,
    get_team_store,
    get_tuple_store,
)

if TYPE_CHECKING:
    from src.application.services import EffectivePermissionsService, PermissionGate
    from src.domain.protocols import AuthorizationProtocol, PermissionCacheProtocol


@lru_cache()
def get_authorization() -> "AuthorizationProtocol":
    """Get the ReBAC checker singleton (app-scoped)."""
    from src.infrastructure.authorization import RebacAuthorizer

    return RebacAuthorizer(
        tuple_store=get_tuple_store(),
        team_store=get_team_store(),
        logger=get_logger(),
        max_parent_depth=get_settings().authz_max_parent_depth,
    )


@lru_cache()
def get_permission_cache() -> "PermissionCacheProtocol":
    """Get the effective permission cache singleton."""
    redis_client = get_redis()
    if redis_client is None:
        from src.infrastructure.cache import InMemoryPermissionCache

        return InMemoryPermissionCache()

    from src.infrastructure.cache import RedisPermissionCache

    return RedisPermissionCache(redis_client=redis_client)


@lru_cache()
def get_effective_permissions_service() -> "EffectivePermissionsService":
    """Get the effective permission aggregator singleton."""
    from src.application.services import EffectivePermissionsService

    return EffectivePermissionsService(
        authorization=get_authorization(),
        roles=get_role_repository(),
        cache=get_permission_cache(),
        logger=get_logger(),
        ttl_seconds=get_settings().effective_permissions_ttl_seconds,
    )


@lru_cache()
def get_permission_gate() -> "PermissionGate":
    """Get the permission gate singleton."""
    from src.application.services import PermissionGate
    from src.core.container.events import get_event_bus

    return PermissionGate(
        authorization=get_authorization(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )
