"""Org role and role assignment models."""

from uuid import UUID

from sqlalchemy import Boolean, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel, BaseMutableModel


class OrgRoleModel(BaseMutableModel):
    """Named set of capability flags, unique per (org_id, name)."""

    __tablename__ = "org_roles"

    org_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str] = mapped_column(String(7), nullable=False, default="#000000")
    is_master: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_admin: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_view: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_edit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    have_api_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    have_billing_options: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    have_webhook_access: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    have_gpg_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    have_cert_access: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    have_audit_access: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )

    __table_args__ = (UniqueConstraint("org_id", "name", name="uq_org_roles_name"),)


class RoleAssignmentModel(BaseModel):
    """The one role of a user's org membership. Unique per (user_id, org_id)."""

    __tablename__ = "role_assignments"

    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    org_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    role_id: Mapped[UUID] = mapped_column(
        ForeignKey("org_roles.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    __table_args__ = (
        UniqueConstraint("user_id", "org_id", name="uq_role_assignments_membership"),
    )
