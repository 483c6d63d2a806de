"""Team membership entity.

Membership only expands indirection: a user reaches the tuples granted to
each team they belong to. A membership never carries a relation itself, and
teams cannot be members of other teams.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True, kw_only=True)
class TeamMembership:
    """A user belonging to a team. Unique per (team_id, user_id)."""

    team_id: str
    user_id: str
