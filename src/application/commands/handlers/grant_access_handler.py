"""Grant and revoke access handlers.

Flow (grant):
1. Saga step ``tuple_write``: write (subject, relation, object)
   (compensate: revoke it, only if this saga wrote it)
2. Saga step ``audit``: ACCESS_GRANTED entry
3. Publish AccessGranted (cache invalidation reacts to it)

Revoke mirrors it with ``tuple_delete`` (compensate: re-grant).

Architecture:
- Application layer ONLY imports from domain layer (entities, protocols, events)
- NO infrastructure imports (adapters are injected via protocols)
"""

from dataclasses import dataclass

from src.application.commands.authorization_commands import GrantAccess, RevokeAccess
from src.application.commands.handlers.saga_steps import (
    AuditEntry,
    TupleSagaContext,
    audit_step,
    remove_tuples_step,
    write_tuples_step,
)
from src.application.saga import SagaOrchestrator
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import RelationTuple
from src.domain.enums import AuditAction
from src.domain.events import AccessGranted, AccessRevoked
from src.domain.protocols import (
    AuditProtocol,
    AuthorizationProtocol,
    EventBusProtocol,
    LoggerProtocol,
)


@dataclass(slots=True, kw_only=True)
class AccessContext(TupleSagaContext):
    """Saga context of a single tuple grant or revoke."""

    relation_tuple: RelationTuple


class GrantAccessHandler:
    """Handler for GrantAccess. Idempotent: an existing grant is Success(False)."""

    def __init__(
        self,
        authorization: AuthorizationProtocol,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._authorization = authorization
        self._audit = audit
        self._orchestrator = orchestrator
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: GrantAccess) -> Result[bool, DomainError]:
        """Handle grant access command.

        Returns:
            Success(True) when the tuple was written, Success(False) when it
            already existed, Failure(SagaStepFailure) otherwise.
        """
        context = AccessContext(
            relation_tuple=RelationTuple.of(cmd.subject, cmd.relation, cmd.obj)
        )
        steps = [
            write_tuples_step(
                "tuple_write",
                self._authorization,
                lambda ctx: [ctx.relation_tuple],
                self._logger,
            ),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.ACCESS_GRANTED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=f"Granted {cmd.relation.value} on {cmd.obj} to {cmd.subject}",
                    details={
                        "subject": str(cmd.subject),
                        "relation": cmd.relation.value,
                        "object": str(cmd.obj),
                        "written": bool(ctx.written),
                    },
                ),
            ),
        ]

        match await self._orchestrator.execute("grant_access", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        await self._event_bus.publish(
            AccessGranted(
                subject=str(cmd.subject),
                relation=cmd.relation.value,
                object=str(cmd.obj),
                org_id=cmd.org_id,
                granted_by=cmd.actor_id,
            )
        )
        return Success(value=bool(context.written))


class RevokeAccessHandler:
    """Handler for RevokeAccess. Revoking a missing grant is Success(False)."""

    def __init__(
        self,
        authorization: AuthorizationProtocol,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._authorization = authorization
        self._audit = audit
        self._orchestrator = orchestrator
        self._event_bus = event_bus
        self._logger = logger

    async def handle(self, cmd: RevokeAccess) -> Result[bool, DomainError]:
        context = AccessContext(
            relation_tuple=RelationTuple.of(cmd.subject, cmd.relation, cmd.obj)
        )
        steps = [
            remove_tuples_step(
                "tuple_delete",
                self._authorization,
                lambda ctx: [ctx.relation_tuple],
                self._logger,
            ),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.ACCESS_REVOKED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=f"Revoked {cmd.relation.value} on {cmd.obj} from {cmd.subject}",
                    details={
                        "subject": str(cmd.subject),
                        "relation": cmd.relation.value,
                        "object": str(cmd.obj),
                        "removed": bool(ctx.removed),
                    },
                ),
            ),
        ]

        match await self._orchestrator.execute("revoke_access", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        await self._event_bus.publish(
            AccessRevoked(
                subject=str(cmd.subject),
                relation=cmd.relation.value,
                object=str(cmd.obj),
                org_id=cmd.org_id,
                revoked_by=cmd.actor_id,
            )
        )
        return Success(value=bool(context.removed))
