"""Tuple store protocol (port) for relation tuples and structural links.

The store holds durable ``(subject, relation, object)`` facts plus the
child -> parent links the checker follows for structural inheritance.
Uniqueness is the store's job: writing an existing tuple or link reports
``False`` instead of failing, which is what makes grants idempotent.

All operations return ``Result``. Library exceptions never leave an adapter;
they come back as ``Failure(UnavailableError(...))`` with ``retryable=True``.

Implementations:
    - InMemoryTupleStore: tests and the ``memory`` backend
    - PostgresTupleStore: ``relation_tuples`` / ``resource_links`` tables
"""

from collections.abc import Collection, Sequence
from typing import Protocol

from src.core.errors import UnavailableError
from src.core.result import Result
from src.domain.entities import ObjectRef, RelationTuple, ResourceLink, SubjectRef
from src.domain.enums import Relation


class TupleStoreProtocol(Protocol):
    """Durable relation tuple storage."""

    async def read_tuples(
        self,
        *,
        subject: SubjectRef | None = None,
        obj: ObjectRef | None = None,
        relation: Relation | None = None,
    ) -> Result[list[RelationTuple], UnavailableError]:
        """Read tuples matching every given filter.

        Args:
            subject: Only tuples held by this subject.
            obj: Only tuples on this object.
            relation: Only tuples of this relation.

        Returns:
            Success(list) (possibly empty) or Failure(UnavailableError).
        """
        ...

    async def exists(
        self,
        subjects: Sequence[SubjectRef],
        relations: Collection[Relation],
        obj: ObjectRef,
    ) -> Result[bool, UnavailableError]:
        """Whether any subject holds any of ``relations`` on ``obj``.

        One round trip per checker node regardless of how many subjects
        (user plus teams) and satisfying relations are involved.
        """
        ...

    async def insert_tuple(
        self, relation_tuple: RelationTuple
    ) -> Result[bool, UnavailableError]:
        """Write a tuple.

        Returns:
            Success(True) when a row was written, Success(False) when the
            tuple already existed.
        """
        ...

    async def delete_tuple(
        self, relation_tuple: RelationTuple
    ) -> Result[bool, UnavailableError]:
        """Delete a tuple.

        Returns:
            Success(True) when a row was removed, Success(False) when the
            tuple did not exist.
        """
        ...

    async def parents(self, obj: ObjectRef) -> Result[list[ObjectRef], UnavailableError]:
        """Structural parents of ``obj`` (app -> org, env_type -> app/org, ...)."""
        ...

    async def link_parent(self, link: ResourceLink) -> Result[bool, UnavailableError]:
        """Record a child -> parent link. False when already linked."""
        ...

    async def unlink_parent(self, link: ResourceLink) -> Result[bool, UnavailableError]:
        """Remove a child -> parent link. False when it did not exist."""
        ...
