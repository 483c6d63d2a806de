"""Database models for the persistence layer.

Domain entities live in src/domain/entities/; these models are mapped to
and from them by the stores and repositories.
"""

from src.infrastructure.persistence.models.audit_log import AuditLog
from src.infrastructure.persistence.models.gpg_key import GpgKeyModel
from src.infrastructure.persistence.models.org_role import (
    OrgRoleModel,
    RoleAssignmentModel,
)
from src.infrastructure.persistence.models.relation_tuple import (
    RelationTupleModel,
    ResourceLinkModel,
)
from src.infrastructure.persistence.models.team_member import TeamMemberModel

__all__ = [
    "AuditLog",
    "GpgKeyModel",
    "OrgRoleModel",
    "RelationTupleModel",
    "ResourceLinkModel",
    "RoleAssignmentModel",
    "TeamMemberModel",
]
