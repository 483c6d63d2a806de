"""Commands - Write operations that change state.

Commands represent intent to perform an action. They are immutable
dataclasses with imperative names (GrantAccess, AssignRole).

Each command has a corresponding handler in ``handlers/`` that runs it as a
saga (datastore write, tuple mutation, audit entry).
"""

from src.application.commands.authorization_commands import (
    AddTeamMember,
    AssignRole,
    CreateDefaultRoles,
    GrantAccess,
    LinkResource,
    RemoveTeamMember,
    RevokeAccess,
)
from src.application.commands.gpg_key_commands import CreateGpgKey, DeleteGpgKey

__all__ = [
    # Authorization commands
    "AddTeamMember",
    "AssignRole",
    "CreateDefaultRoles",
    "GrantAccess",
    "LinkResource",
    "RemoveTeamMember",
    "RevokeAccess",
    # GPG key commands
    "CreateGpgKey",
    "DeleteGpgKey",
]
