"""Audit action types recorded by write operations.

Actions are recorded as a saga step of the operation they describe, so a
failed audit write rolls the operation back.

Usage:
    from src.domain.enums import AuditAction

    await audit.record(
        action=AuditAction.ACCESS_GRANTED,
        actor_id=user_id,
        org_id=org_id,
        message="Granted editor on app",
        details={"object_id": app_id},
    )
"""

from enum import Enum


class AuditAction(str, Enum):
    """Audit action types.

    String Enum:
        Values are snake_case strings used as the stored action and as the
        webhook event type.
    """

    # Access grants
    ACCESS_GRANTED = "access_granted"
    ACCESS_REVOKED = "access_revoked"

    # Teams
    TEAM_MEMBER_ADDED = "team_member_added"
    TEAM_MEMBER_REMOVED = "team_member_removed"

    # Roles
    ROLE_ASSIGNED = "role_assigned"
    DEFAULT_ROLES_CREATED = "default_roles_created"

    # GPG keys
    GPG_KEY_CREATED = "gpg_key_created"
    GPG_KEY_DELETED = "gpg_key_deleted"
