"""RoleRepository - SQLAlchemy implementation of the RoleRepository protocol.

Maps between domain Role/RoleAssignment entities and the ``org_roles`` /
``role_assignments`` models. One session per operation.
"""

from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.errors import ConflictError, UnavailableError
from src.core.result import Failure, Result, Success
from src.domain.entities import Role, RoleAssignment
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import OrgRoleModel, RoleAssignmentModel

_FLAG_COLUMNS = (
    "is_master",
    "is_admin",
    "can_view",
    "can_edit",
    "have_api_access",
    "have_billing_options",
    "have_webhook_access",
    "have_gpg_access",
    "have_cert_access",
    "have_audit_access",
)


class PostgresRoleRepository:
    """SQLAlchemy implementation of RoleRepository.

    Example:
        >>> repo = PostgresRoleRepository(database, logger)
        >>> result = await repo.find_by_name("org_1", "Viewer")
    """

    def __init__(self, database: Database, logger: LoggerProtocol) -> None:
        self._database = database
        self._logger = logger

    def _unavailable(self, operation: str, exc: SQLAlchemyError) -> UnavailableError:
        self._logger.error("role_repository_failed", error=exc, operation=operation)
        return UnavailableError(
            code=ErrorCode.REPOSITORY_UNAVAILABLE,
            message=f"Role repository {operation} failed",
            dependency="database",
        )

    @staticmethod
    def _to_domain(model: OrgRoleModel) -> Role:
        return Role(
            id=model.id,
            org_id=model.org_id,
            name=model.name,
            color=model.color,
            created_at=model.created_at,
            updated_at=model.updated_at,
            **{column: getattr(model, column) for column in _FLAG_COLUMNS},
        )

    @staticmethod
    def _assignment(model: RoleAssignmentModel) -> RoleAssignment:
        return RoleAssignment(
            user_id=model.user_id, org_id=model.org_id, role_id=model.role_id
        )

    async def _one_role(
        self, stmt: Select[tuple[OrgRoleModel]], operation: str
    ) -> Result[Role | None, UnavailableError]:
        try:
            async with self._database.get_session() as session:
                model = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable(operation, exc))
        return Success(value=None if model is None else self._to_domain(model))

    async def get(self, role_id: UUID) -> Result[Role | None, UnavailableError]:
        return await self._one_role(
            select(OrgRoleModel).where(OrgRoleModel.id == role_id), "get"
        )

    async def find_by_name(
        self, org_id: str, name: str
    ) -> Result[Role | None, UnavailableError]:
        return await self._one_role(
            select(OrgRoleModel).where(
                OrgRoleModel.org_id == org_id, OrgRoleModel.name == name
            ),
            "find_by_name",
        )

    async def list_by_org(self, org_id: str) -> Result[list[Role], UnavailableError]:
        stmt = (
            select(OrgRoleModel)
            .where(OrgRoleModel.org_id == org_id)
            .order_by(OrgRoleModel.name)
        )
        try:
            async with self._database.get_session() as session:
                models = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("list_by_org", exc))
        return Success(value=[self._to_domain(model) for model in models])

    async def save(self, role: Role) -> Result[None, ConflictError | UnavailableError]:
        try:
            async with self._database.get_session() as session:
                session.add(
                    OrgRoleModel(
                        id=role.id,
                        org_id=role.org_id,
                        name=role.name,
                        color=role.color,
                        **{column: getattr(role, column) for column in _FLAG_COLUMNS},
                    )
                )
                await session.flush()
        except IntegrityError:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.ROLE_ALREADY_EXISTS,
                    message=f"Role '{role.name}' already exists in org {role.org_id}",
                    resource_type="role",
                    conflicting_field="name",
                )
            )
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("save", exc))
        return Success(value=None)

    async def delete(self, role_id: UUID) -> Result[bool, UnavailableError]:
        try:
            async with self._database.get_session() as session:
                result = await session.execute(
                    delete(OrgRoleModel).where(OrgRoleModel.id == role_id)
                )
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("delete", exc))
        return Success(value=result.rowcount > 0)

    async def get_assignment(
        self, user_id: str, org_id: str
    ) -> Result[RoleAssignment | None, UnavailableError]:
        stmt = select(RoleAssignmentModel).where(
            RoleAssignmentModel.user_id == user_id,
            RoleAssignmentModel.org_id == org_id,
        )
        try:
            async with self._database.get_session() as session:
                model = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("get_assignment", exc))
        return Success(value=None if model is None else self._assignment(model))

    async def assign(
        self, assignment: RoleAssignment
    ) -> Result[RoleAssignment | None, UnavailableError]:
        stmt = (
            select(RoleAssignmentModel)
            .where(
                RoleAssignmentModel.user_id == assignment.user_id,
                RoleAssignmentModel.org_id == assignment.org_id,
            )
            .with_for_update()
        )
        try:
            async with self._database.get_session() as session:
                model = (await session.execute(stmt)).scalar_one_or_none()
                previous = None if model is None else self._assignment(model)
                if model is None:
                    session.add(
                        RoleAssignmentModel(
                            user_id=assignment.user_id,
                            org_id=assignment.org_id,
                            role_id=assignment.role_id,
                        )
                    )
                else:
                    model.role_id = assignment.role_id
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("assign", exc))
        return Success(value=previous)

    async def remove_assignment(
        self, user_id: str, org_id: str
    ) -> Result[bool, UnavailableError]:
        stmt = delete(RoleAssignmentModel).where(
            RoleAssignmentModel.user_id == user_id,
            RoleAssignmentModel.org_id == org_id,
        )
        try:
            async with self._database.get_session() as session:
                result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("remove_assignment", exc))
        return Success(value=result.rowcount > 0)
