"""Reusable saga steps for authorization writes.

Each write handler runs as a saga: datastore change, tuple mutation, audit
entry. The steps here cover the tuple and audit parts and record what they
actually changed on the saga context, so a compensation only undoes real
changes (an idempotent grant of an existing tuple is never revoked on
rollback).

A tuple step that fails halfway undoes its own partial writes before
reporting the failure, since the orchestrator never compensates the step
that failed. Undoing, there and in compensations, is best-effort: every
tuple is attempted and a tuple that cannot be undone is left as is, never
re-applied. Tuples left behind by a partial forward write are logged here;
compensation failures are logged by the orchestrator.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any

from src.application.saga import SagaStep
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import ObjectRef, RelationTuple, ResourceLink, SubjectRef
from src.domain.enums import AuditAction, Relation
from src.domain.protocols import AuditProtocol, AuthorizationProtocol, LoggerProtocol


@dataclass(slots=True, kw_only=True)
class TupleSagaContext:
    """Mutable saga context tracking tuple and link changes.

    Attributes:
        written: Tuples this saga inserted.
        removed: Tuples this saga deleted.
        linked: Parent links this saga created.
        unlinked: Parent links this saga removed.
    """

    written: list[RelationTuple] = field(default_factory=list)
    removed: list[RelationTuple] = field(default_factory=list)
    linked: list[ResourceLink] = field(default_factory=list)
    unlinked: list[ResourceLink] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class AuditEntry:
    """Arguments of one ``AuditProtocol.record`` call."""

    action: AuditAction
    actor_id: str | None
    org_id: str
    message: str
    details: dict[str, Any] = field(default_factory=dict)


type _TupleWrite = Callable[
    [SubjectRef, Relation, ObjectRef], Awaitable[Result[bool, DomainError]]
]


@dataclass(slots=True)
class _Applied:
    """Outcome of applying one write to a batch of tuples."""

    changed: list[RelationTuple] = field(default_factory=list)
    failed: list[RelationTuple] = field(default_factory=list)
    error: DomainError | None = None


async def _apply(
    write: _TupleWrite, tuples: Sequence[RelationTuple], *, best_effort: bool
) -> _Applied:
    """Apply ``write`` to ``tuples`` in order.

    Stops at the first failure unless ``best_effort``, in which case every
    tuple is attempted and ``error`` is the first failure seen. Nothing is
    ever re-applied to undo this call's own changes.
    """
    applied = _Applied()
    for relation_tuple in tuples:
        match await write(relation_tuple.subject, relation_tuple.relation, relation_tuple.object):
            case Failure(error=error):
                applied.failed.append(relation_tuple)
                if applied.error is None:
                    applied.error = error
                if not best_effort:
                    break
            case Success(value=True):
                applied.changed.append(relation_tuple)
    return applied


async def _apply_or_undo(
    step: str,
    write: _TupleWrite,
    undo: _TupleWrite,
    tuples: Sequence[RelationTuple],
    logger: LoggerProtocol,
) -> Result[list[RelationTuple], DomainError]:
    """Forward tuple batch; a partial batch is undone before reporting the failure."""
    applied = await _apply(write, tuples, best_effort=False)
    if applied.error is None:
        return Success(value=applied.changed)

    undone = await _apply(undo, list(reversed(applied.changed)), best_effort=True)
    if undone.failed:
        logger.error(
            "tuple_partial_undo_incomplete",
            step=step,
            left_behind=[str(t) for t in undone.failed],
            error_code=undone.error.code.value if undone.error else None,
        )
    elif applied.changed:
        logger.warning(
            "tuple_partial_undo_completed",
            step=step,
            undone=[str(t) for t in undone.changed],
        )
    return Failure(error=applied.error)


async def _compensate(
    undo: _TupleWrite, tuples: Sequence[RelationTuple]
) -> Result[list[RelationTuple], DomainError]:
    """Best-effort undo: every tuple is attempted; the first failure is reported."""
    undone = await _apply(undo, tuples, best_effort=True)
    if undone.error is not None:
        return Failure(error=undone.error)
    return Success(value=undone.changed)


def write_tuples_step[C: TupleSagaContext](
    name: str,
    authorization: AuthorizationProtocol,
    tuples: Callable[[C], Sequence[RelationTuple]],
    logger: LoggerProtocol,
) -> SagaStep[C]:
    """Step granting ``tuples(context)``; compensation revokes what it wrote."""

    async def forward(context: C) -> Result[None, DomainError]:
        match await _apply_or_undo(
            name, authorization.grant, authorization.revoke, tuples(context), logger
        ):
            case Failure() as failure:
                return failure
            case Success(value=done):
                context.written.extend(done)
                return Success(value=None)

    async def compensate(context: C) -> Result[list[RelationTuple], DomainError]:
        written = [t for t in tuples(context) if t in context.written]
        return await _compensate(authorization.revoke, list(reversed(written)))

    return SagaStep(name, forward=forward, compensate=compensate)


def remove_tuples_step[C: TupleSagaContext](
    name: str,
    authorization: AuthorizationProtocol,
    tuples: Callable[[C], Sequence[RelationTuple]],
    logger: LoggerProtocol,
) -> SagaStep[C]:
    """Step revoking ``tuples(context)``; compensation re-grants what it removed."""

    async def forward(context: C) -> Result[None, DomainError]:
        match await _apply_or_undo(
            name, authorization.revoke, authorization.grant, tuples(context), logger
        ):
            case Failure() as failure:
                return failure
            case Success(value=done):
                context.removed.extend(done)
                return Success(value=None)

    async def compensate(context: C) -> Result[list[RelationTuple], DomainError]:
        removed = [t for t in tuples(context) if t in context.removed]
        return await _compensate(authorization.grant, list(reversed(removed)))

    return SagaStep(name, forward=forward, compensate=compensate)


def link_parent_step[C: TupleSagaContext](
    name: str,
    authorization: AuthorizationProtocol,
    link: Callable[[C], ResourceLink],
) -> SagaStep[C]:
    """Step linking a child object to its parent; compensation unlinks."""

    async def forward(context: C) -> Result[None, DomainError]:
        resource_link = link(context)
        match await authorization.link_parent(resource_link.child, resource_link.parent):
            case Failure() as failure:
                return failure
            case Success(value=created):
                if created:
                    context.linked.append(resource_link)
                return Success(value=None)

    async def compensate(context: C) -> Result[bool, DomainError] | None:
        resource_link = link(context)
        if resource_link not in context.linked:
            return None
        return await authorization.unlink_parent(resource_link.child, resource_link.parent)

    return SagaStep(name, forward=forward, compensate=compensate)


def unlink_parent_step[C: TupleSagaContext](
    name: str,
    authorization: AuthorizationProtocol,
    link: Callable[[C], ResourceLink],
) -> SagaStep[C]:
    """Step removing a parent link; compensation restores it."""

    async def forward(context: C) -> Result[None, DomainError]:
        resource_link = link(context)
        match await authorization.unlink_parent(resource_link.child, resource_link.parent):
            case Failure() as failure:
                return failure
            case Success(value=removed):
                if removed:
                    context.unlinked.append(resource_link)
                return Success(value=None)

    async def compensate(context: C) -> Result[bool, DomainError] | None:
        resource_link = link(context)
        if resource_link not in context.unlinked:
            return None
        return await authorization.link_parent(resource_link.child, resource_link.parent)

    return SagaStep(name, forward=forward, compensate=compensate)


def audit_step[C](
    audit: AuditProtocol,
    entry: Callable[[C], AuditEntry],
    name: str = "audit",
) -> SagaStep[C]:
    """Step writing one audit entry. Nothing to compensate."""

    async def forward(context: C) -> Result[None, DomainError]:
        built = entry(context)
        return await audit.record(
            action=built.action,
            actor_id=built.actor_id,
            org_id=built.org_id,
            message=built.message,
            details=built.details,
        )

    return SagaStep(name, forward=forward)
