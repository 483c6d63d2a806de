"""In-memory repositories for tests and the ``memory`` backend.

Same contracts as the SQLAlchemy repositories, including the uniqueness
rules (role name per org, fingerprint).
"""

from dataclasses import replace
from uuid import UUID

from src.core.enums import ErrorCode
from src.core.errors import ConflictError, UnavailableError
from src.core.result import Failure, Result, Success
from src.domain.entities import GpgKey, Role, RoleAssignment


class InMemoryRoleRepository:
    """Dict-backed RoleRepository."""

    def __init__(self) -> None:
        self._roles: dict[UUID, Role] = {}
        self._assignments: dict[tuple[str, str], RoleAssignment] = {}

    async def get(self, role_id: UUID) -> Result[Role | None, UnavailableError]:
        role = self._roles.get(role_id)
        return Success(value=None if role is None else replace(role))

    async def find_by_name(
        self, org_id: str, name: str
    ) -> Result[Role | None, UnavailableError]:
        for role in self._roles.values():
            if role.org_id == org_id and role.name == name:
                return Success(value=replace(role))
        return Success(value=None)

    async def list_by_org(self, org_id: str) -> Result[list[Role], UnavailableError]:
        roles = sorted(
            (replace(r) for r in self._roles.values() if r.org_id == org_id),
            key=lambda r: r.name,
        )
        return Success(value=roles)

    async def save(self, role: Role) -> Result[None, ConflictError | UnavailableError]:
        if any(
            r.org_id == role.org_id and r.name == role.name and r.id != role.id
            for r in self._roles.values()
        ):
            return Failure(
                error=ConflictError(
                    code=ErrorCode.ROLE_ALREADY_EXISTS,
                    message=f"Role '{role.name}' already exists in org {role.org_id}",
                    resource_type="role",
                    conflicting_field="name",
                )
            )
        self._roles[role.id] = replace(role)
        return Success(value=None)

    async def delete(self, role_id: UUID) -> Result[bool, UnavailableError]:
        return Success(value=self._roles.pop(role_id, None) is not None)

    async def get_assignment(
        self, user_id: str, org_id: str
    ) -> Result[RoleAssignment | None, UnavailableError]:
        return Success(value=self._assignments.get((user_id, org_id)))

    async def assign(
        self, assignment: RoleAssignment
    ) -> Result[RoleAssignment | None, UnavailableError]:
        key = (assignment.user_id, assignment.org_id)
        previous = self._assignments.get(key)
        self._assignments[key] = assignment
        return Success(value=previous)

    async def remove_assignment(
        self, user_id: str, org_id: str
    ) -> Result[bool, UnavailableError]:
        return Success(value=self._assignments.pop((user_id, org_id), None) is not None)


class InMemoryGpgKeyRepository:
    """Dict-backed GpgKeyRepository."""

    def __init__(self) -> None:
        self._keys: dict[UUID, GpgKey] = {}

    async def get(self, gpg_key_id: UUID) -> Result[GpgKey | None, UnavailableError]:
        return Success(value=self._keys.get(gpg_key_id))

    async def list_by_org(self, org_id: str) -> Result[list[GpgKey], UnavailableError]:
        return Success(value=[k for k in self._keys.values() if k.org_id == org_id])

    async def save(
        self, gpg_key: GpgKey
    ) -> Result[None, ConflictError | UnavailableError]:
        if any(
            k.fingerprint == gpg_key.fingerprint and k.id != gpg_key.id
            for k in self._keys.values()
        ):
            return Failure(
                error=ConflictError(
                    code=ErrorCode.GPG_KEY_ALREADY_EXISTS,
                    message=f"GPG key {gpg_key.fingerprint} already exists",
                    resource_type="gpg_key",
                    conflicting_field="fingerprint",
                )
            )
        self._keys[gpg_key.id] = gpg_key
        return Success(value=None)

    async def delete(self, gpg_key_id: UUID) -> Result[bool, UnavailableError]:
        return Success(value=self._keys.pop(gpg_key_id, None) is not None)
