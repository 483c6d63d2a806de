"""Authorization infrastructure: ReBAC checker and its stores."""

from src.infrastructure.authorization.in_memory_team_store import (
    InMemoryTeamMembershipStore,
)
from src.infrastructure.authorization.in_memory_tuple_store import InMemoryTupleStore
from src.infrastructure.authorization.postgres_team_store import (
    PostgresTeamMembershipStore,
)
from src.infrastructure.authorization.postgres_tuple_store import PostgresTupleStore
from src.infrastructure.authorization.rebac_authorizer import RebacAuthorizer

__all__ = [
    "InMemoryTeamMembershipStore",
    "InMemoryTupleStore",
    "PostgresTeamMembershipStore",
    "PostgresTupleStore",
    "RebacAuthorizer",
]
