"""GpgKeyRepository - SQLAlchemy implementation of the GpgKeyRepository protocol."""

from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.errors import ConflictError, UnavailableError
from src.core.result import Failure, Result, Success
from src.domain.entities import GpgKey
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import GpgKeyModel


class PostgresGpgKeyRepository:
    """Maps GpgKey entities to the ``gpg_keys`` table."""

    def __init__(self, database: Database, logger: LoggerProtocol) -> None:
        self._database = database
        self._logger = logger

    def _unavailable(self, operation: str, exc: SQLAlchemyError) -> UnavailableError:
        self._logger.error("gpg_key_repository_failed", error=exc, operation=operation)
        return UnavailableError(
            code=ErrorCode.REPOSITORY_UNAVAILABLE,
            message=f"GPG key repository {operation} failed",
            dependency="database",
        )

    @staticmethod
    def _to_domain(model: GpgKeyModel) -> GpgKey:
        return GpgKey(
            id=model.id,
            org_id=model.org_id,
            user_id=model.user_id,
            name=model.name,
            email=model.email,
            fingerprint=model.fingerprint,
            algorithm=model.algorithm,
            key_size=model.key_size,
            public_key=model.public_key,
            usage_flags=list(model.usage_flags),
            is_default=model.is_default,
            expires_at=model.expires_at,
            created_at=model.created_at,
        )

    async def get(self, gpg_key_id: UUID) -> Result[GpgKey | None, UnavailableError]:
        stmt = select(GpgKeyModel).where(GpgKeyModel.id == gpg_key_id)
        try:
            async with self._database.get_session() as session:
                model = (await session.execute(stmt)).scalar_one_or_none()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("get", exc))
        return Success(value=None if model is None else self._to_domain(model))

    async def list_by_org(self, org_id: str) -> Result[list[GpgKey], UnavailableError]:
        stmt = (
            select(GpgKeyModel)
            .where(GpgKeyModel.org_id == org_id)
            .order_by(GpgKeyModel.created_at.desc())
        )
        try:
            async with self._database.get_session() as session:
                models = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("list_by_org", exc))
        return Success(value=[self._to_domain(model) for model in models])

    async def save(
        self, gpg_key: GpgKey
    ) -> Result[None, ConflictError | UnavailableError]:
        try:
            async with self._database.get_session() as session:
                session.add(
                    GpgKeyModel(
                        id=gpg_key.id,
                        org_id=gpg_key.org_id,
                        user_id=gpg_key.user_id,
                        name=gpg_key.name,
                        email=gpg_key.email,
                        fingerprint=gpg_key.fingerprint,
                        key_id=gpg_key.key_id,
                        algorithm=gpg_key.algorithm,
                        key_size=gpg_key.key_size,
                        public_key=gpg_key.public_key,
                        usage_flags=list(gpg_key.usage_flags),
                        is_default=gpg_key.is_default,
                        expires_at=gpg_key.expires_at,
                    )
                )
                await session.flush()
        except IntegrityError:
            return Failure(
                error=ConflictError(
                    code=ErrorCode.GPG_KEY_ALREADY_EXISTS,
                    message=f"GPG key {gpg_key.fingerprint} already exists",
                    resource_type="gpg_key",
                    conflicting_field="fingerprint",
                )
            )
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("save", exc))
        return Success(value=None)

    async def delete(self, gpg_key_id: UUID) -> Result[bool, UnavailableError]:
        try:
            async with self._database.get_session() as session:
                result = await session.execute(
                    delete(GpgKeyModel).where(GpgKeyModel.id == gpg_key_id)
                )
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("delete", exc))
        return Success(value=result.rowcount > 0)
