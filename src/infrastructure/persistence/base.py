"""Declarative bases for the authorization tables.

Append-only rows (relation tuples, resource links, team members, role
assignments, audit entries, GPG keys) derive from ``BaseModel``: they are
inserted and deleted, never updated. ``OrgRoleModel`` is the one mutable
table and derives from ``BaseMutableModel``.
"""

from datetime import datetime
from uuid import UUID as PythonUUID

from sqlalchemy import DateTime, Uuid, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from uuid_extensions import uuid7


class BaseModel(DeclarativeBase):
    """UUIDv7 ``id`` (generated in process, time-ordered) and ``created_at``."""

    __abstract__ = True

    id: Mapped[PythonUUID] = mapped_column(Uuid, primary_key=True, default=uuid7)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"


class BaseMutableModel(BaseModel):
    """Adds ``updated_at``, refreshed by the database on every UPDATE."""

    __abstract__ = True

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
