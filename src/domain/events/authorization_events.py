"""Authorization domain events.

Emitted after a tuple, team membership or role mutation is durable, and for
every permission gate decision.

Handlers:
- Effective permission cache invalidation: AccessGranted, AccessRevoked,
  TeamMemberAdded, TeamMemberRemoved, RoleAssigned
- Logging: PermissionDecisionRecorded
"""

from dataclasses import dataclass

from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class AccessGranted(DomainEvent):
    """A relation tuple was written.

    Attributes:
        subject: "<type>:<id>" of the grantee.
        relation: Relation granted.
        object: "<type>:<id>" of the object.
        org_id: Org the object belongs to, when known.
        granted_by: Acting user id, None for system writes.
    """

    subject: str
    relation: str
    object: str
    org_id: str | None = None
    granted_by: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class AccessRevoked(DomainEvent):
    """A relation tuple was deleted."""

    subject: str
    relation: str
    object: str
    org_id: str | None = None
    revoked_by: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class TeamMemberAdded(DomainEvent):
    """A user joined a team."""

    team_id: str
    user_id: str
    org_id: str


@dataclass(frozen=True, kw_only=True, slots=True)
class TeamMemberRemoved(DomainEvent):
    """A user left a team."""

    team_id: str
    user_id: str
    org_id: str


@dataclass(frozen=True, kw_only=True, slots=True)
class RoleAssigned(DomainEvent):
    """A role was assigned to a user's org membership and tuples resynced."""

    user_id: str
    org_id: str
    role_id: str
    assigned_by: str | None = None


@dataclass(frozen=True, kw_only=True, slots=True)
class PermissionDecisionRecorded(DomainEvent):
    """The permission gate decided a request.

    Attributes:
        allowed: Final decision.
        reason_code: allowed, denied, missing_resource, invalid_argument,
            unavailable.
        subject: "user:<id>".
        relation: Relation required.
        object: "<type>:<id>", None when no object id resolved.
    """

    allowed: bool
    reason_code: str
    subject: str
    relation: str
    object: str | None = None
