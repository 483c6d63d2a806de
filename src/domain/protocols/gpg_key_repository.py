"""GpgKeyRepository protocol (port) for GPG key metadata."""

from typing import Protocol
from uuid import UUID

from src.core.errors import ConflictError, UnavailableError
from src.core.result import Result
from src.domain.entities import GpgKey


class GpgKeyRepository(Protocol):
    """GPG key metadata persistence. Fingerprints are unique."""

    async def get(self, gpg_key_id: UUID) -> Result[GpgKey | None, UnavailableError]:
        ...

    async def list_by_org(self, org_id: str) -> Result[list[GpgKey], UnavailableError]:
        ...

    async def save(
        self, gpg_key: GpgKey
    ) -> Result[None, ConflictError | UnavailableError]:
        """Insert key metadata. Failure(ConflictError) on a duplicate fingerprint."""
        ...

    async def delete(self, gpg_key_id: UUID) -> Result[bool, UnavailableError]:
        """Delete key metadata. Success(False) when it did not exist."""
        ...
