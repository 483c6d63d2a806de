"""In-memory team membership store."""

from src.core.errors import UnavailableError
from src.core.result import Result, Success
from src.domain.entities import TeamMembership


class InMemoryTeamMembershipStore:
    """Process-local TeamMembershipProtocol implementation."""

    def __init__(self) -> None:
        self._memberships: set[TeamMembership] = set()

    async def teams_for_user(self, user_id: str) -> Result[list[str], UnavailableError]:
        return Success(
            value=sorted(m.team_id for m in self._memberships if m.user_id == user_id)
        )

    async def members(self, team_id: str) -> Result[list[str], UnavailableError]:
        return Success(
            value=sorted(m.user_id for m in self._memberships if m.team_id == team_id)
        )

    async def is_member(self, team_id: str, user_id: str) -> Result[bool, UnavailableError]:
        return Success(
            value=TeamMembership(team_id=team_id, user_id=user_id) in self._memberships
        )

    async def add_member(self, membership: TeamMembership) -> Result[bool, UnavailableError]:
        if membership in self._memberships:
            return Success(value=False)
        self._memberships.add(membership)
        return Success(value=True)

    async def remove_member(
        self, membership: TeamMembership
    ) -> Result[bool, UnavailableError]:
        if membership not in self._memberships:
            return Success(value=False)
        self._memberships.discard(membership)
        return Success(value=True)
