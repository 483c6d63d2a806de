"""In-memory tuple store.

Sets of frozen tuples and links; uniqueness comes for free from hashing.
Used by unit tests and the ``memory`` authorization backend. Operations never
fail, but still return Result like every other store.
"""

from collections.abc import Collection, Sequence

from src.core.errors import UnavailableError
from src.core.result import Result, Success
from src.domain.entities import ObjectRef, RelationTuple, ResourceLink, SubjectRef
from src.domain.enums import Relation


class InMemoryTupleStore:
    """Process-local TupleStoreProtocol implementation."""

    def __init__(self) -> None:
        self._tuples: set[RelationTuple] = set()
        self._links: set[ResourceLink] = set()

    async def read_tuples(
        self,
        *,
        subject: SubjectRef | None = None,
        obj: ObjectRef | None = None,
        relation: Relation | None = None,
    ) -> Result[list[RelationTuple], UnavailableError]:
        matches = [
            t
            for t in self._tuples
            if (subject is None or t.subject == subject)
            and (obj is None or t.object == obj)
            and (relation is None or t.relation == relation)
        ]
        matches.sort(key=str)
        return Success(value=matches)

    async def exists(
        self,
        subjects: Sequence[SubjectRef],
        relations: Collection[Relation],
        obj: ObjectRef,
    ) -> Result[bool, UnavailableError]:
        found = any(
            RelationTuple.of(subject, relation, obj) in self._tuples
            for subject in subjects
            for relation in relations
        )
        return Success(value=found)

    async def insert_tuple(
        self, relation_tuple: RelationTuple
    ) -> Result[bool, UnavailableError]:
        if relation_tuple in self._tuples:
            return Success(value=False)
        self._tuples.add(relation_tuple)
        return Success(value=True)

    async def delete_tuple(
        self, relation_tuple: RelationTuple
    ) -> Result[bool, UnavailableError]:
        if relation_tuple not in self._tuples:
            return Success(value=False)
        self._tuples.discard(relation_tuple)
        return Success(value=True)

    async def parents(self, obj: ObjectRef) -> Result[list[ObjectRef], UnavailableError]:
        return Success(value=[link.parent for link in self._links if link.child == obj])

    async def link_parent(self, link: ResourceLink) -> Result[bool, UnavailableError]:
        if link in self._links:
            return Success(value=False)
        self._links.add(link)
        return Success(value=True)

    async def unlink_parent(self, link: ResourceLink) -> Result[bool, UnavailableError]:
        if link not in self._links:
            return Success(value=False)
        self._links.discard(link)
        return Success(value=True)

    def __len__(self) -> int:
        return len(self._tuples)
