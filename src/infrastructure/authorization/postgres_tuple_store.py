"""PostgreSQL tuple store.

Each operation runs in its own session and commits on exit. SQLAlchemy
errors are turned into ``Failure(UnavailableError)`` at this boundary;
``IntegrityError`` on insert means the row already exists.
"""

from collections.abc import Collection, Sequence

from sqlalchemy import ColumnElement, and_, delete, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.enums import ErrorCode
from src.core.errors import UnavailableError
from src.core.result import Failure, Result, Success
from src.domain.entities import ObjectRef, RelationTuple, ResourceLink, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType
from src.domain.protocols import LoggerProtocol
from src.infrastructure.persistence.database import Database
from src.infrastructure.persistence.models import RelationTupleModel, ResourceLinkModel


class PostgresTupleStore:
    """TupleStoreProtocol implementation over ``relation_tuples``/``resource_links``."""

    def __init__(self, database: Database, logger: LoggerProtocol) -> None:
        self._database = database
        self._logger = logger

    def _unavailable(self, operation: str, exc: SQLAlchemyError) -> UnavailableError:
        self._logger.error("tuple_store_failed", error=exc, operation=operation)
        return UnavailableError(
            code=ErrorCode.TUPLE_STORE_UNAVAILABLE,
            message=f"Tuple store {operation} failed",
            dependency="tuple_store",
        )

    @staticmethod
    def _to_domain(model: RelationTupleModel) -> RelationTuple:
        return RelationTuple(
            subject_id=model.subject_id,
            subject_type=SubjectType(model.subject_type),
            relation=Relation(model.relation),
            object_type=ObjectType(model.object_type),
            object_id=model.object_id,
        )

    @staticmethod
    def _key(relation_tuple: RelationTuple) -> ColumnElement[bool]:
        return and_(
            RelationTupleModel.subject_type == relation_tuple.subject_type.value,
            RelationTupleModel.subject_id == relation_tuple.subject_id,
            RelationTupleModel.relation == relation_tuple.relation.value,
            RelationTupleModel.object_type == relation_tuple.object_type.value,
            RelationTupleModel.object_id == relation_tuple.object_id,
        )

    async def read_tuples(
        self,
        *,
        subject: SubjectRef | None = None,
        obj: ObjectRef | None = None,
        relation: Relation | None = None,
    ) -> Result[list[RelationTuple], UnavailableError]:
        stmt = select(RelationTupleModel)
        if subject is not None:
            stmt = stmt.where(
                RelationTupleModel.subject_type == subject.subject_type.value,
                RelationTupleModel.subject_id == subject.subject_id,
            )
        if obj is not None:
            stmt = stmt.where(
                RelationTupleModel.object_type == obj.object_type.value,
                RelationTupleModel.object_id == obj.object_id,
            )
        if relation is not None:
            stmt = stmt.where(RelationTupleModel.relation == relation.value)

        try:
            async with self._database.get_session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("read_tuples", exc))
        return Success(value=[self._to_domain(row) for row in rows])

    async def exists(
        self,
        subjects: Sequence[SubjectRef],
        relations: Collection[Relation],
        obj: ObjectRef,
    ) -> Result[bool, UnavailableError]:
        if not subjects or not relations:
            return Success(value=False)

        stmt = (
            select(RelationTupleModel.id)
            .where(
                RelationTupleModel.object_type == obj.object_type.value,
                RelationTupleModel.object_id == obj.object_id,
                RelationTupleModel.relation.in_([r.value for r in relations]),
                or_(
                    *(
                        and_(
                            RelationTupleModel.subject_type == s.subject_type.value,
                            RelationTupleModel.subject_id == s.subject_id,
                        )
                        for s in subjects
                    )
                ),
            )
            .limit(1)
        )
        try:
            async with self._database.get_session() as session:
                found = (await session.execute(stmt)).first() is not None
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("exists", exc))
        return Success(value=found)

    async def insert_tuple(
        self, relation_tuple: RelationTuple
    ) -> Result[bool, UnavailableError]:
        try:
            async with self._database.get_session() as session:
                session.add(
                    RelationTupleModel(
                        subject_type=relation_tuple.subject_type.value,
                        subject_id=relation_tuple.subject_id,
                        relation=relation_tuple.relation.value,
                        object_type=relation_tuple.object_type.value,
                        object_id=relation_tuple.object_id,
                    )
                )
                await session.flush()
        except IntegrityError:
            return Success(value=False)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("insert_tuple", exc))
        return Success(value=True)

    async def delete_tuple(
        self, relation_tuple: RelationTuple
    ) -> Result[bool, UnavailableError]:
        stmt = delete(RelationTupleModel).where(self._key(relation_tuple))
        try:
            async with self._database.get_session() as session:
                result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("delete_tuple", exc))
        return Success(value=result.rowcount > 0)

    async def parents(self, obj: ObjectRef) -> Result[list[ObjectRef], UnavailableError]:
        stmt = select(ResourceLinkModel).where(
            ResourceLinkModel.child_type == obj.object_type.value,
            ResourceLinkModel.child_id == obj.object_id,
        )
        try:
            async with self._database.get_session() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("parents", exc))
        return Success(
            value=[
                ObjectRef(object_type=ObjectType(row.parent_type), object_id=row.parent_id)
                for row in rows
            ]
        )

    async def link_parent(self, link: ResourceLink) -> Result[bool, UnavailableError]:
        try:
            async with self._database.get_session() as session:
                session.add(
                    ResourceLinkModel(
                        child_type=link.child.object_type.value,
                        child_id=link.child.object_id,
                        parent_type=link.parent.object_type.value,
                        parent_id=link.parent.object_id,
                    )
                )
                await session.flush()
        except IntegrityError:
            return Success(value=False)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("link_parent", exc))
        return Success(value=True)

    async def unlink_parent(self, link: ResourceLink) -> Result[bool, UnavailableError]:
        stmt = delete(ResourceLinkModel).where(
            ResourceLinkModel.child_type == link.child.object_type.value,
            ResourceLinkModel.child_id == link.child.object_id,
            ResourceLinkModel.parent_type == link.parent.object_type.value,
            ResourceLinkModel.parent_id == link.parent.object_id,
        )
        try:
            async with self._database.get_session() as session:
                result = await session.execute(stmt)
        except SQLAlchemyError as exc:
            return Failure(error=self._unavailable("unlink_parent", exc))
        return Success(value=result.rowcount > 0)
