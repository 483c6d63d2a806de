"""PostgreSQL persistence for the ``postgres`` authorization backend.

- base: declarative bases (UUIDv7 ids, timestamps)
- database: async engine and per-operation sessions
- models: tuples, links, memberships, roles, GPG keys, audit entries
- repositories: role and GPG key repositories (Postgres and in-memory)
"""

from src.infrastructure.persistence.base import BaseModel
from src.infrastructure.persistence.database import Database

__all__ = ["BaseModel", "Database"]
