"""Org role entity and role assignments.

A role is a named set of boolean capability flags, unique per org by name.
Each user's org membership has exactly one role assigned. Assigning a role
materializes its flags as org tuples (see ``Role.granted_relations``).
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7

from src.domain.enums import Relation


@dataclass(slots=True, kw_only=True)
class Role:
    """Org role with boolean capability flags.

    Attributes:
        id: Role identifier.
        org_id: Owning org.
        name: Unique name within the org.
        color: Display color (hex).
        is_master: Org owner (implies admin).
        is_admin: Org administrator.
        can_view / can_edit: Org-wide read / write.
        have_*: Feature flags mirrored as org relations.
    """

    org_id: str
    name: str
    id: UUID = field(default_factory=uuid7)
    color: str = "#000000"
    is_master: bool = False
    is_admin: bool = False
    can_view: bool = False
    can_edit: bool = False
    have_api_access: bool = False
    have_billing_options: bool = False
    have_webhook_access: bool = False
    have_gpg_access: bool = False
    have_cert_access: bool = False
    have_audit_access: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def flags(self) -> dict[Relation, bool]:
        """Role flags keyed by the org relation each one grants."""
        return {
            Relation.MASTER: self.is_master,
            Relation.ADMIN: self.is_admin,
            Relation.CAN_VIEW: self.can_view,
            Relation.CAN_EDIT: self.can_edit,
            Relation.HAVE_API_ACCESS: self.have_api_access,
            Relation.HAVE_BILLING_OPTIONS: self.have_billing_options,
            Relation.HAVE_WEBHOOK_ACCESS: self.have_webhook_access,
            Relation.HAVE_GPG_ACCESS: self.have_gpg_access,
            Relation.HAVE_CERT_ACCESS: self.have_cert_access,
            Relation.HAVE_AUDIT_ACCESS: self.have_audit_access,
        }

    def granted_relations(self) -> list[Relation]:
        """Org relations written for a user holding this role.

        Always includes MEMBER, then one relation per true flag.
        """
        granted = [Relation.MEMBER]
        granted.extend(relation for relation, enabled in self.flags().items() if enabled)
        return granted


@dataclass(frozen=True, slots=True, kw_only=True)
class RoleAssignment:
    """The single role assigned to a user's org membership."""

    user_id: str
    org_id: str
    role_id: UUID


_DEFAULT_ROLE_FLAGS: tuple[tuple[str, str, dict[str, bool]], ...] = (
    (
        "Org Admin",
        "#FF5733",
        {
            "is_master": True,
            "is_admin": True,
            "can_view": True,
            "can_edit": True,
            "have_api_access": True,
            "have_billing_options": True,
            "have_webhook_access": True,
            "have_gpg_access": True,
            "have_cert_access": True,
            "have_audit_access": True,
        },
    ),
    ("Billing Admin", "#33FF57", {"have_billing_options": True}),
    (
        "Manager",
        "#3357FF",
        {
            "can_view": True,
            "can_edit": True,
            "have_api_access": True,
            "have_webhook_access": True,
            "have_audit_access": True,
        },
    ),
    ("Developer", "#572F13", {"can_view": True, "can_edit": True}),
    ("Viewer", "#FF33A1", {"can_view": True}),
)


def default_roles(org_id: str) -> list[Role]:
    """Roles created for a new org."""
    return [
        Role(org_id=org_id, name=name, color=color, **flags)
        for name, color, flags in _DEFAULT_ROLE_FLAGS
    ]
