"""Domain entities.

Pure data and business rules, no framework dependencies.
"""

from src.domain.entities.effective_permissions import EffectivePermissions
from src.domain.entities.gpg_key import GpgKey
from src.domain.entities.permission_decision import PermissionDecision
from src.domain.entities.relation_tuple import (
    ObjectRef,
    RelationTuple,
    ResourceLink,
    SubjectRef,
)
from src.domain.entities.role import Role, RoleAssignment, default_roles
from src.domain.entities.team_membership import TeamMembership
from src.domain.entities.webhook_event import WebhookEvent

__all__ = [
    "EffectivePermissions",
    "GpgKey",
    "ObjectRef",
    "PermissionDecision",
    "RelationTuple",
    "ResourceLink",
    "Role",
    "RoleAssignment",
    "SubjectRef",
    "TeamMembership",
    "WebhookEvent",
    "default_roles",
]
