"""Relationship-based authorization checker.

Implements AuthorizationProtocol on top of a tuple store and a team
membership store.

Resolution for ``check(subject, relation, object)``:
    1. Direct tuple, or a tuple of any relation implying ``relation`` on the
       same object (org master => admin => member => can_view, ...).
    2. The same, held by any team the user belongs to (single level).
    3. Structural parents (app -> org, env_type -> app/org, ...), with the
       relation mapped to its parent counterpart, up to
       ``max_parent_depth`` hops.
    Intersection relations (org can_manage_api_keys) are the AND of their
    components. The result is the OR of every reachable grant; there is no
    explicit deny.

Traversal is an explicit work-list over ``(relation, object)`` nodes with a
visited set, so cyclic or diamond-shaped parent links terminate.

Each node costs one ``exists`` round trip covering every subject (user plus
teams) and every satisfying relation.
"""

from collections import deque
from collections.abc import Sequence
from dataclasses import dataclass

from src.core.enums import ErrorCode
from src.core.errors import DomainError, UnavailableError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.authorization_model import (
    PARENT_TYPES,
    intersection_components,
    is_assignable,
    parent_relations,
    satisfying_relations,
)
from src.domain.entities import ObjectRef, RelationTuple, ResourceLink, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType
from src.domain.protocols import (
    LoggerProtocol,
    TeamMembershipProtocol,
    TupleStoreProtocol,
)
from src.domain.validators import parse_object, parse_relation, parse_subject


@dataclass(frozen=True, slots=True)
class _Node:
    relation: Relation
    obj: ObjectRef
    depth: int


class RebacAuthorizer:
    """ReBAC checker plus the idempotent tuple mutations.

    Attributes:
        _tuples: Tuple and structural link storage.
        _teams: Team membership storage.
        _logger: Structured logger.
        _max_parent_depth: Maximum parent hops followed per check.
    """

    def __init__(
        self,
        tuple_store: TupleStoreProtocol,
        team_store: TeamMembershipProtocol,
        logger: LoggerProtocol,
        max_parent_depth: int = 3,
    ) -> None:
        self._tuples = tuple_store
        self._teams = team_store
        self._logger = logger
        self._max_parent_depth = max_parent_depth

    # =========================================================================
    # Checks
    # =========================================================================

    async def check(
        self,
        subject_id: str,
        subject_type: SubjectType | str,
        relation: Relation | str,
        object_type: ObjectType | str,
        object_id: str,
    ) -> Result[bool, DomainError]:
        """Decide whether the subject holds ``relation`` on the object.

        Returns:
            Success(bool), Failure(ValidationError) for malformed input,
            Failure(UnavailableError) when a store failed.
        """
        match self._parse(subject_id, subject_type, relation, object_type, object_id):
            case Failure() as failure:
                return failure
            case Success(value=(subject, parsed_relation, obj)):
                pass

        match await self._subjects(subject):
            case Failure() as failure:
                return failure
            case Success(value=subjects):
                pass

        result = await self._check_parsed(subject, subjects, parsed_relation, obj)
        if isinstance(result, Success):
            self._logger.debug(
                "authz_checked",
                subject=str(subject),
                relation=parsed_relation.value,
                object=str(obj),
                allowed=result.value,
            )
        return result

    async def batch_check(
        self,
        user_id: str,
        checks: Sequence[tuple[Relation | str, ObjectType | str, str]],
    ) -> Result[list[bool], DomainError]:
        """Check many ``(relation, object_type, object_id)`` triples for one user.

        Team memberships are read once for the whole batch.
        """
        match parse_subject(user_id, SubjectType.USER):
            case Failure() as failure:
                return failure
            case Success(value=subject):
                pass

        match await self._subjects(subject):
            case Failure() as failure:
                return failure
            case Success(value=subjects):
                pass

        results: list[bool] = []
        for relation, object_type, object_id in checks:
            match self._parse_target(relation, object_type, object_id):
                case Failure() as failure:
                    return failure
                case Success(value=(parsed_relation, obj)):
                    pass
            match await self._check_parsed(subject, subjects, parsed_relation, obj):
                case Failure() as failure:
                    return failure
                case Success(value=allowed):
                    results.append(allowed)
        return Success(value=results)

    # =========================================================================
    # Mutations
    # =========================================================================

    async def grant(
        self, subject: SubjectRef, relation: Relation, obj: ObjectRef
    ) -> Result[bool, DomainError]:
        """Write ``(subject, relation, obj)``.

        Returns:
            Success(True) when written, Success(False) when it already
            existed, Failure(ValidationError) for a non-assignable relation.
        """
        match self._validate_tuple(subject, relation, obj):
            case Failure() as failure:
                return failure
            case Success(value=relation_tuple):
                pass

        result = await self._tuples.insert_tuple(relation_tuple)
        match result:
            case Success(value=True):
                self._logger.info("tuple_written", tuple=str(relation_tuple))
            case Success(value=False):
                self._logger.debug("tuple_already_present", tuple=str(relation_tuple))
            case Failure(error=error):
                self._logger.warning(
                    "tuple_write_failed", tuple=str(relation_tuple), error_code=error.code.value
                )
        return result

    async def revoke(
        self, subject: SubjectRef, relation: Relation, obj: ObjectRef
    ) -> Result[bool, DomainError]:
        """Delete ``(subject, relation, obj)``. Success(False) when absent."""
        match self._validate_tuple(subject, relation, obj):
            case Failure() as failure:
                return failure
            case Success(value=relation_tuple):
                pass

        result = await self._tuples.delete_tuple(relation_tuple)
        match result:
            case Success(value=True):
                self._logger.info("tuple_deleted", tuple=str(relation_tuple))
            case Success(value=False):
                self._logger.debug("tuple_already_absent", tuple=str(relation_tuple))
            case Failure(error=error):
                self._logger.warning(
                    "tuple_delete_failed", tuple=str(relation_tuple), error_code=error.code.value
                )
        return result

    async def link_parent(
        self, child: ObjectRef, parent: ObjectRef
    ) -> Result[bool, DomainError]:
        """Link ``child`` to a structural parent of an allowed type."""
        match self._validate_link(child, parent):
            case Failure() as failure:
                return failure
            case Success(value=link):
                return await self._tuples.link_parent(link)

    async def unlink_parent(
        self, child: ObjectRef, parent: ObjectRef
    ) -> Result[bool, DomainError]:
        match self._validate_link(child, parent):
            case Failure() as failure:
                return failure
            case Success(value=link):
                return await self._tuples.unlink_parent(link)

    # =========================================================================
    # Resolution
    # =========================================================================

    async def _check_parsed(
        self,
        subject: SubjectRef,
        subjects: list[SubjectRef],
        relation: Relation,
        obj: ObjectRef,
    ) -> Result[bool, UnavailableError]:
        if (
            subject.subject_type is SubjectType.USER
            and obj.object_type is ObjectType.TEAM
            and relation is Relation.MEMBER
        ):
            match await self._teams.is_member(obj.object_id, subject.subject_id):
                case Failure() as failure:
                    return failure
                case Success(value=True):
                    return Success(value=True)
        return await self._resolve(subjects, relation, obj)

    async def _subjects(
        self, subject: SubjectRef
    ) -> Result[list[SubjectRef], UnavailableError]:
        """The subject plus, for users, every team they belong to."""
        if subject.subject_type is not SubjectType.USER:
            return Success(value=[subject])
        match await self._teams.teams_for_user(subject.subject_id):
            case Failure() as failure:
                return failure
            case Success(value=team_ids):
                return Success(
                    value=[
                        subject,
                        *(
                            SubjectRef(subject_type=SubjectType.TEAM, subject_id=team_id)
                            for team_id in team_ids
                        ),
                    ]
                )

    async def _resolve(
        self,
        subjects: list[SubjectRef],
        relation: Relation,
        obj: ObjectRef,
    ) -> Result[bool, UnavailableError]:
        pending: deque[_Node] = deque([_Node(relation, obj, 0)])
        visited: set[tuple[Relation, ObjectRef]] = set()

        while pending:
            node = pending.popleft()
            if (node.relation, node.obj) in visited:
                continue
            visited.add((node.relation, node.obj))

            components = intersection_components(node.obj.object_type, node.relation)
            if components is not None:
                match await self._resolve_all(subjects, components, node.obj):
                    case Failure() as failure:
                        return failure
                    case Success(value=True):
                        return Success(value=True)
                continue

            relations = satisfying_relations(node.obj.object_type, node.relation)
            match await self._tuples.exists(subjects, relations, node.obj):
                case Failure() as failure:
                    return failure
                case Success(value=True):
                    return Success(value=True)

            if node.depth >= self._max_parent_depth:
                continue

            match await self._tuples.parents(node.obj):
                case Failure() as failure:
                    return failure
                case Success(value=parents):
                    pass

            for parent in parents:
                if parent.object_type not in PARENT_TYPES[node.obj.object_type]:
                    continue
                for satisfied in relations:
                    for mapped in parent_relations(
                        node.obj.object_type, parent.object_type, satisfied
                    ):
                        pending.append(_Node(mapped, parent, node.depth + 1))

        return Success(value=False)

    async def _resolve_all(
        self,
        subjects: list[SubjectRef],
        relations: tuple[Relation, ...],
        obj: ObjectRef,
    ) -> Result[bool, UnavailableError]:
        """AND of the component relations of an intersection."""
        for component in relations:
            match await self._resolve(subjects, component, obj):
                case Failure() as failure:
                    return failure
                case Success(value=False):
                    return Success(value=False)
        return Success(value=True)

    # =========================================================================
    # Validation
    # =========================================================================

    @staticmethod
    def _parse_target(
        relation: Relation | str, object_type: ObjectType | str, object_id: str
    ) -> Result[tuple[Relation, ObjectRef], ValidationError]:
        match parse_object(object_type, object_id):
            case Failure() as failure:
                return failure
            case Success(value=obj):
                pass
        match parse_relation(relation, obj.object_type):
            case Failure() as failure:
                return failure
            case Success(value=parsed_relation):
                return Success(value=(parsed_relation, obj))

    def _parse(
        self,
        subject_id: str,
        subject_type: SubjectType | str,
        relation: Relation | str,
        object_type: ObjectType | str,
        object_id: str,
    ) -> Result[tuple[SubjectRef, Relation, ObjectRef], ValidationError]:
        match parse_subject(subject_id, subject_type):
            case Failure() as failure:
                return failure
            case Success(value=subject):
                pass
        match self._parse_target(relation, object_type, object_id):
            case Failure() as failure:
                return failure
            case Success(value=(parsed_relation, obj)):
                return Success(value=(subject, parsed_relation, obj))

    @staticmethod
    def _validate_tuple(
        subject: SubjectRef, relation: Relation, obj: ObjectRef
    ) -> Result[RelationTuple, ValidationError]:
        if not subject.subject_id.strip() or not obj.object_id.strip():
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_ARGUMENT,
                    message="Subject and object ids must not be blank",
                )
            )
        if not is_assignable(obj.object_type, relation):
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_RELATION,
                    message=f"Relation '{relation.value}' cannot be granted on "
                    f"'{obj.object_type.value}'",
                    field="relation",
                )
            )
        if subject.subject_type is SubjectType.TEAM and obj.object_type is ObjectType.TEAM:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_SUBJECT,
                    message="Teams cannot hold relations on other teams",
                    field="subject_type",
                )
            )
        return Success(value=RelationTuple.of(subject, relation, obj))

    @staticmethod
    def _validate_link(
        child: ObjectRef, parent: ObjectRef
    ) -> Result[ResourceLink, ValidationError]:
        if parent.object_type not in PARENT_TYPES[child.object_type]:
            return Failure(
                error=ValidationError(
                    code=ErrorCode.INVALID_OBJECT,
                    message=f"'{parent.object_type.value}' is not a parent type of "
                    f"'{child.object_type.value}'",
                    field="parent",
                )
            )
        return Success(value=ResourceLink(child=child, parent=parent))
