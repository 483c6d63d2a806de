"""PostgreSQL team membership store."""

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.errors import UnavailableError
from src.core.result import Failure, Result, Success
from src.domain.entities import TeamMembership
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import TeamMemberModel


class PostgresTeamMembershipStore:
    """TeamMembershipProtocol implementation over ``team_members``."""

    def __init__(self, database: Database, logger: LoggerProtocol) -> None:
        self._database = database
        self._logger = logger

    def _unavailable(self, operation: str, exc: SQLAlchemyError) -> UnavailableError:
        self._logger.error("team_store_failed", error=exc, operation=operation)
        return UnavailableError(
            code=ErrorCode.TUPLE_STORE_UNAVAILABLE,
            message=f"Team membership {operation} failed",
            dependency="team_store",
        )

    async def _column(
        self, stmt: Select[tuple[str]], operation: str
    ) -> Result[list[str], UnavailableError]:
        try:
            async with self._database.get_session() as session:
                values = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable(operation, exc))
        return Success(value=sorted(values))

    async def teams_for_user(self, user_id: str) -> Result[list[str], UnavailableError]:
        return await self._column(
            select(TeamMemberModel.team_id).where(TeamMemberModel.user_id == user_id),
            "teams_for_user",
        )

    async def members(self, team_id: str) -> Result[list[str], UnavailableError]:
        return await self._column(
            select(TeamMemberModel.user_id).where(TeamMemberModel.team_id == team_id),
            "members",
        )

    async def is_member(self, team_id: str, user_id: str) -> Result[bool, UnavailableError]:
        stmt = (
            select(TeamMemberModel.id)
            .where(TeamMemberModel.team_id == team_id, TeamMemberModel.user_id == user_id)
            .limit(1)
        )
        try:
            async with self._database.get_session() as session:
                found = (await session.execute(stmt)).first() is not None
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("is_member", exc))
        return Success(value=found)

    async def add_member(self, membership: TeamMembership) -> Result[bool, UnavailableError]:
        try:
            async with self._database.get_session() as session:
                session.add(
                    TeamMemberModel(team_id=membership.team_id, user_id=membership.user_id)
                )
                await session.flush()
        except IntegrityError:
            return Success(value=False)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("add_member", exc))
        return Success(value=True)

    async def remove_member(
        self, membership: TeamMembership
    ) -> Result[bool, UnavailableError]:
        stmt = delete(TeamMemberModel).where(
            TeamMemberModel.team_id == membership.team_id,
            TeamMemberModel.user_id == membership.user_id,
        )
        try:
            async with self._database.get_session() as session:
                result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("remove_member", exc))
        return Success(value=result.rowcount > 0)
