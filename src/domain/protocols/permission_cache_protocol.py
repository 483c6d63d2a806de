"""Effective permission cache protocol (port).

Snapshots are replaced whole or deleted, never patched. Cache failures are
reported as ``Failure`` and callers fall back to recomputing (fail-open).
"""

from typing import Protocol

from src.core.errors import UnavailableError
from src.core.result import Result
from src.domain.entities import EffectivePermissions


class PermissionCacheProtocol(Protocol):
    """Cache of EffectivePermissions keyed by (user_id, org_id)."""

    async def get(
        self, user_id: str, org_id: str
    ) -> Result[EffectivePermissions | None, UnavailableError]:
        """Cached snapshot, Success(None) on a miss."""
        ...

    async def set(
        self, snapshot: EffectivePermissions, ttl_seconds: int
    ) -> Result[None, UnavailableError]:
        """Store (replace) a snapshot."""
        ...

    async def invalidate(self, user_id: str, org_id: str) -> Result[None, UnavailableError]:
        """Delete the snapshot of one (user, org) pair."""
        ...

    async def invalidate_org(self, org_id: str) -> Result[None, UnavailableError]:
        """Delete every snapshot of an org (team or org-wide tuple changes)."""
        ...
