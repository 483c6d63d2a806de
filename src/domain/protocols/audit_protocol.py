"""Audit trail protocol (port).

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (PostgresAuditAdapter, InMemoryAuditAdapter)

Audit entries are immutable. Inside a saga the audit write is a step of its
own, so an audit failure compensates the writes before it.

Usage:
    result = await audit.record(
        action=AuditAction.ACCESS_GRANTED,
        actor_id="u1",
        org_id="o1",
        message="Granted viewer on app:a1 to user:u2",
        details={"subject": "user:u2", "relation": "viewer", "object": "app:a1"},
    )
"""

from typing import Any, Protocol

from src.core.result import Result
from src.domain.enums import AuditAction
from src.domain.errors import AuditError


class AuditProtocol(Protocol):
    """Protocol for audit trail systems.

    Error Handling:
        All methods return Result types (Success or Failure).
        NEVER raise exceptions - wrap in Failure(AuditError(...)) instead.
    """

    async def record(
        self,
        *,
        action: AuditAction,
        actor_id: str | None,
        org_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        """Record an immutable audit entry.

        Args:
            action: What happened.
            actor_id: Who performed the action. None for system actions.
            org_id: Org the action belongs to.
            message: Human-readable summary.
            details: Additional structured context (JSONB).

        Returns:
            Success(None) or Failure(AuditError).
        """
        ...

    async def query(
        self,
        *,
        org_id: str,
        action: AuditAction | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[list[dict[str, Any]], AuditError]:
        """Audit entries of an org, newest first.

        Args:
            org_id: Org to query.
            action: Optional action filter.
            limit: Maximum results (capped at 1000).
            offset: Pagination offset.
        """
        ...
