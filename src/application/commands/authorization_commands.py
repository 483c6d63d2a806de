"""Authorization commands (CQRS write operations).

Commands represent intent to change who holds what.
All commands are immutable (frozen=True) and use keyword-only arguments (kw_only=True).

Pattern:
- Commands are data containers (no logic)
- Handlers run each command as a saga (tuple write + audit entry)
- Handlers return Result types
"""

from dataclasses import dataclass
from uuid import UUID

from src.domain.entities import ObjectRef, SubjectRef
from src.domain.enums import Relation


@dataclass(frozen=True, kw_only=True)
class GrantAccess:
    """Grant a relation on an object to a user or team.

    Attributes:
        subject: Grantee (user, or team meaning its members).
        relation: Relation to grant. Must be assignable on the object type.
        obj: Target object (app, env_type, gpg_key, certificate, ...).
        org_id: Org the object belongs to (audit and cache scope).
        actor_id: Acting user, None for system writes.

    Example:
        >>> command = GrantAccess(
        ...     subject=SubjectRef(subject_type=SubjectType.TEAM, subject_id="t1"),
        ...     relation=Relation.EDITOR,
        ...     obj=ObjectRef(object_type=ObjectType.APP, object_id="app-1"),
        ...     org_id="org-1",
        ... )
        >>> result = await handler.handle(command)
    """

    subject: SubjectRef
    relation: Relation
    obj: ObjectRef
    org_id: str
    actor_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class RevokeAccess:
    """Revoke a relation on an object. Revoking a missing grant is a no-op."""

    subject: SubjectRef
    relation: Relation
    obj: ObjectRef
    org_id: str
    actor_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class AddTeamMember:
    """Add a user to a team.

    Stored as a membership row plus a ``member`` tuple on the team.
    """

    team_id: str
    user_id: str
    org_id: str
    actor_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class RemoveTeamMember:
    """Remove a user from a team."""

    team_id: str
    user_id: str
    org_id: str
    actor_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class AssignRole:
    """Assign a role to a user's org membership.

    Replaces the user's previous org tuples with ``member`` plus one tuple
    per true flag of the role.
    """

    user_id: str
    org_id: str
    role_id: UUID
    actor_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class CreateDefaultRoles:
    """Create the default role set of a new org."""

    org_id: str
    actor_id: str | None = None


@dataclass(frozen=True, kw_only=True)
class LinkResource:
    """Attach a child object to its structural parent (app -> org, ...)."""

    child: ObjectRef
    parent: ObjectRef
    org_id: str
    actor_id: str | None = None
