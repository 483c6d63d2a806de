"""PostgreSQL implementation of AuditProtocol.

Append-only audit entries in ``audit_logs``. Each record commits in its own
session so a saga's audit step is durable on its own.

Usage:
    adapter = PostgresAuditAdapter(database)
    result = await adapter.record(
        action=AuditAction.GPG_KEY_CREATED,
        actor_id="u1",
        org_id="o1",
        message="GPG key created",
        details={"fingerprint": "..."},
    )
"""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.enums import AuditAction
from src.domain.errors import AuditError
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models.audit_log import AuditLog

_MAX_QUERY_LIMIT = 1000


class PostgresAuditAdapter:
    """PostgreSQL implementation of AuditProtocol.

    Stateless; all state lives in the database.

    Attributes:
        database: Database providing one session per call.
    """

    def __init__(self, database: Database) -> None:
        self.database = database

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

        Returns:
            Success(None) if recorded, Failure(AuditError) on a database error.

        Example:
            match await adapter.record(...):
                case Success():
                    ...
                case Failure(error=error):
                    logger.error("audit_failed", error_message=error.message)
        """
        try:
            async with self.database.get_session() as session:
                session.add(
                    AuditLog(
                        action=action.value,
                        actor_id=actor_id,
                        org_id=org_id,
                        message=message,
                        details=details,
                    )
                )
        except SQLAlchemyError as e:
            return Failure(
                error=AuditError(
                    message=f"Failed to record audit log: {e}",
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    details={
                        "action": action.value,
                        "org_id": org_id,
                        "error_type": type(e).__name__,
                    },
                )
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
        """Audit entries of an org, newest first (limit capped at 1000)."""
        stmt = (
            select(AuditLog)
            .where(AuditLog.org_id == org_id)
            .order_by(AuditLog.created_at.desc())
            .limit(min(limit, _MAX_QUERY_LIMIT))
            .offset(offset)
        )
        if action is not None:
            stmt = stmt.where(AuditLog.action == action.value)

        try:
            async with self.database.get_session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            return Failure(
                error=AuditError(
                    message=f"Failed to query audit logs: {e}",
                    code=ErrorCode.AUDIT_RECORD_FAILED,
                    details={"org_id": org_id, "error_type": type(e).__name__},
                )
            )

        return Success(
            value=[
                {
                    "id": str(row.id),
                    "action": row.action,
                    "actor_id": row.actor_id,
                    "org_id": row.org_id,
                    "message": row.message,
                    "details": row.details or {},
                    "timestamp": row.created_at.isoformat() if row.created_at else None,
                }
                for row in rows
            ]
        )
