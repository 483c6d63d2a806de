"""Request/response schemas for API endpoints.

Schemas are kept separate from domain entities (HTTP-layer concerns only).
"""

from src.schemas.authorization_schemas import (
    AccessGrantRequest,
    AccessGrantResponse,
    EffectivePermissionsResponse,
    PermissionCheckItem,
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionCheckResult,
    RoleAssignmentRequest,
    RoleAssignmentResponse,
    RoleResponse,
    TeamMemberRequest,
    TeamMemberResponse,
)
from src.schemas.gpg_key_schemas import GpgKeyCreateRequest, GpgKeyResponse

__all__ = [
    "AccessGrantRequest",
    "AccessGrantResponse",
    "EffectivePermissionsResponse",
    "GpgKeyCreateRequest",
    "GpgKeyResponse",
    "PermissionCheckItem",
    "PermissionCheckRequest",
    "PermissionCheckResponse",
    "PermissionCheckResult",
    "RoleAssignmentRequest",
    "RoleAssignmentResponse",
    "RoleResponse",
    "TeamMemberRequest",
    "TeamMemberResponse",
]
