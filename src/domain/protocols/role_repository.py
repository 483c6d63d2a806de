"""RoleRepository protocol (port) for org roles and role assignments.

A role is unique per org by name; a user's org membership has exactly one
role assigned (unique per (user_id, org_id)).
"""

from typing import Protocol
from uuid import UUID

from src.core.errors import ConflictError, UnavailableError
from src.core.result import Result
from src.domain.entities import Role, RoleAssignment


class RoleRepository(Protocol):
    """Org role persistence.

    Implementations:
        - PostgresRoleRepository: ``org_roles`` / ``role_assignments``
        - InMemoryRoleRepository: tests and the ``memory`` backend
    """

    async def get(self, role_id: UUID) -> Result[Role | None, UnavailableError]:
        """Find a role by id. Success(None) when absent."""
        ...

    async def find_by_name(
        self, org_id: str, name: str
    ) -> Result[Role | None, UnavailableError]:
        """Find a role by its org-unique name."""
        ...

    async def list_by_org(self, org_id: str) -> Result[list[Role], UnavailableError]:
        """All roles of an org, ordered by name."""
        ...

    async def save(self, role: Role) -> Result[None, ConflictError | UnavailableError]:
        """Insert a role. Failure(ConflictError) on a duplicate (org_id, name)."""
        ...

    async def delete(self, role_id: UUID) -> Result[bool, UnavailableError]:
        """Delete a role. Success(False) when it did not exist."""
        ...

    async def get_assignment(
        self, user_id: str, org_id: str
    ) -> Result[RoleAssignment | None, UnavailableError]:
        """The user's current role assignment in the org."""
        ...

    async def assign(
        self, assignment: RoleAssignment
    ) -> Result[RoleAssignment | None, UnavailableError]:
        """Upsert the user's role assignment.

        Returns:
            Success(previous assignment or None).
        """
        ...

    async def remove_assignment(
        self, user_id: str, org_id: str
    ) -> Result[bool, UnavailableError]:
        """Remove the user's assignment. Success(False) when absent."""
        ...
