"""Team membership store protocol (port).

Memberships only expand indirection for the checker: a tuple held by
``team:<id>`` applies to every member. Membership is single level; a team
is never a member of another team.
"""

from typing import Protocol

from src.core.errors import UnavailableError
from src.core.result import Result
from src.domain.entities import TeamMembership


class TeamMembershipProtocol(Protocol):
    """Team membership storage. Unique per (team_id, user_id)."""

    async def teams_for_user(self, user_id: str) -> Result[list[str], UnavailableError]:
        """Team ids the user belongs to."""
        ...

    async def members(self, team_id: str) -> Result[list[str], UnavailableError]:
        """User ids in the team."""
        ...

    async def is_member(
        self, team_id: str, user_id: str
    ) -> Result[bool, UnavailableError]:
        """Whether the user belongs to the team."""
        ...

    async def add_member(
        self, membership: TeamMembership
    ) -> Result[bool, UnavailableError]:
        """Add a membership. Success(False) when it already existed."""
        ...

    async def remove_member(
        self, membership: TeamMembership
    ) -> Result[bool, UnavailableError]:
        """Remove a membership. Success(False) when it did not exist."""
        ...
