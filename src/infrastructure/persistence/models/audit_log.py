"""Audit log database model.

Append-only: the repository exposes no update or delete.
"""

from typing import Any

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class AuditLog(BaseModel):
    """Audit log model (immutable).

    Fields:
        action: What happened (AuditAction value).
        actor_id: Who performed the action (None for system actions).
        org_id: Org the action belongs to.
        message: Human-readable summary.
        details: Additional structured context (JSONB).
    """

    __tablename__ = "audit_logs"

    action: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    actor_id: Mapped[str | None] = mapped_column(String(128), nullable=True)
    org_id: Mapped[str] = mapped_column(String(128), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    details: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, default=None
    )

    __table_args__ = (
        # "Show me everything that happened in org X, newest first"
        Index("idx_audit_org_created", "org_id", "created_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<AuditLog(id={self.id}, action={self.action!r}, "
            f"org_id={self.org_id!r}, created_at={self.created_at})>"
        )
