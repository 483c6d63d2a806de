"""Repository implementations (adapters for the domain repository ports)."""

from src.infrastructure.persistence.repositories.gpg_key_repository import (
    PostgresGpgKeyRepository,
)
from src.infrastructure.persistence.repositories.in_memory_repositories import (
    InMemoryGpgKeyRepository,
    InMemoryRoleRepository,
)
from src.infrastructure.persistence.repositories.role_repository import (
    PostgresRoleRepository,
)

__all__ = [
    "InMemoryGpgKeyRepository",
    "InMemoryRoleRepository",
    "PostgresGpgKeyRepository",
    "PostgresRoleRepository",
]
