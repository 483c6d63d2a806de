"""In-memory AuditProtocol implementation (tests and ``memory`` backend)."""

from datetime import UTC, datetime
from typing import Any

from uuid_extensions import uuid7

from src.core.result import Result, Success
from src.domain.enums import AuditAction
from src.domain.errors import AuditError


class InMemoryAuditAdapter:
    """List-backed audit trail. Entries are appended, never changed."""

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []

    async def record(
        self,
        *,
        action: AuditAction,
        actor_id: str | None,
        org_id: str,
        message: str,
        details: dict[str, Any] | None = None,
    ) -> Result[None, AuditError]:
        self.entries.append(
            {
                "id": str(uuid7()),
                "action": action.value,
                "actor_id": actor_id,
                "org_id": org_id,
                "message": message,
                "details": dict(details or {}),
                "timestamp": datetime.now(UTC).isoformat(),
            }
        )
        return Success(value=None)

    async def query(
        self,
        *,
        org_id: str,
        action: AuditAction | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Result[list[dict[str, Any]], AuditError]:
        matches = [
            entry
            for entry in reversed(self.entries)
            if entry["org_id"] == org_id
            and (action is None or entry["action"] == action.value)
        ]
        return Success(value=matches[offset : offset + min(limit, 1000)])
