"""Team membership model."""

from sqlalchemy import String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class TeamMemberModel(BaseModel):
    """User in a team. Unique per (team_id, user_id)."""

    __tablename__ = "team_members"

    team_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("team_id", "user_id", name="uq_team_members_pair"),
    )
