"""Authorization request/response schemas.

Pydantic models for permission checks, access grants, team membership and
role assignment. Relation and type strings are validated by the checker,
not here, so an unknown relation comes back as a 400 with the checker's
error code.

RESTful Endpoints:
    POST   /api/v1/permissions/checks          - Batch check for the caller
    GET    /api/v1/permissions/me              - Caller's effective permissions
    POST   /api/v1/apps/{app_id}/access        - Grant access to an app
    DELETE /api/v1/apps/{app_id}/access        - Revoke access to an app
    POST   /api/v1/teams/{team_id}/members     - Add a team member
    DELETE /api/v1/teams/{team_id}/members/{user_id} - Remove a team member
    PUT    /api/v1/users/{user_id}/role        - Assign a role
    POST   /api/v1/roles/defaults              - Create default roles
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.domain.types import Identifier


# =============================================================================
# Permission checks
# =============================================================================


class PermissionCheckItem(BaseModel):
    """One (relation, object) pair to check for the caller."""

    relation: str = Field(..., description="Relation name", examples=["can_view"])
    object_type: str = Field(..., description="Object type", examples=["app"])
    object_id: Identifier = Field(..., description="Object identifier")


class PermissionCheckRequest(BaseModel):
    """Batch of checks for the authenticated user."""

    checks: list[PermissionCheckItem] = Field(..., min_length=1, max_length=100)


class PermissionCheckResult(PermissionCheckItem):
    allowed: bool = Field(..., description="Whether the caller holds the relation")


class PermissionCheckResponse(BaseModel):
    results: list[PermissionCheckResult]


class EffectivePermissionsResponse(BaseModel):
    """Capability snapshot of the caller in their org."""

    user_id: str
    org_id: str
    capabilities: dict[str, bool] = Field(
        ..., description="Every capability name mapped to a boolean"
    )
    computed_at: datetime

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "user_id": "user_01",
                "org_id": "org_01",
                "capabilities": {"is_admin": False, "can_view": True},
                "computed_at": "2026-01-01T00:00:00Z",
            }
        }
    )


# =============================================================================
# Access grants
# =============================================================================


class AccessGrantRequest(BaseModel):
    """Grant or revoke a relation on an object to a user or team."""

    subject_type: Literal["user", "team"] = Field(default="user")
    subject_id: Identifier
    relation: str = Field(..., examples=["editor"])


class AccessGrantResponse(BaseModel):
    subject: str = Field(..., examples=["team:team_01"])
    relation: str
    object: str = Field(..., examples=["app:app_01"])
    changed: bool = Field(
        ..., description="False when the grant already existed (or was already absent)"
    )


# =============================================================================
# Teams and roles
# =============================================================================


class TeamMemberRequest(BaseModel):
    user_id: Identifier


class TeamMemberResponse(BaseModel):
    team_id: str
    user_id: str
    changed: bool


class RoleAssignmentRequest(BaseModel):
    role_id: UUID


class RoleAssignmentResponse(BaseModel):
    user_id: str
    org_id: str
    role_id: UUID


class RoleResponse(BaseModel):
    id: UUID
    name: str
    color: str
    flags: dict[str, bool]
