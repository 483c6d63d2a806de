"""GPG key handlers.

Create flow:
1. Saga step ``db_insert``: store key metadata (compensate: delete row)
2. Saga step ``owner_tuple``: creator#owner@gpg_key (compensate: revoke)
3. Saga step ``org_link``: gpg_key -> org parent link (compensate: unlink)
4. Saga step ``audit``: GPG_KEY_CREATED
5. Publish GpgKeyCreated
6. Webhook notification (best effort, never fails the operation)

If the audit write fails, the link, the owner tuple and the row are undone
in that order and the caller gets the audit error as the failure cause.

Delete flow:
1. Load the key (must belong to the org)
2. Read every tuple on the key
3. Saga step ``db_delete`` (compensate: re-insert row)
4. Saga step ``tuple_delete``: every tuple on the key (compensate: re-grant)
5. Saga step ``org_unlink`` (compensate: relink)
6. Saga step ``audit``: GPG_KEY_DELETED
7. Publish GpgKeyDeleted, then webhook notification
"""

from dataclasses import dataclass
from uuid import UUID

from src.application.commands.gpg_key_commands import CreateGpgKey, DeleteGpgKey
from src.application.commands.handlers.saga_steps import (
    AuditEntry,
    TupleSagaContext,
    audit_step,
    link_parent_step,
    remove_tuples_step,
    unlink_parent_step,
    write_tuples_step,
)
from src.application.saga import SagaOrchestrator, SagaStep
from src.core.enums import ErrorCode
from src.core.errors import DomainError, NotFoundError
from src.core.result import Failure, Result, Success
from src.domain.entities import (
    GpgKey,
    ObjectRef,
    RelationTuple,
    ResourceLink,
    SubjectRef,
    WebhookEvent,
)
from src.domain.enums import AuditAction, ObjectType, Relation, SubjectType
from src.domain.events import GpgKeyCreated, GpgKeyDeleted
from src.domain.protocols import (
    AuditProtocol,
    AuthorizationProtocol,
    EventBusProtocol,
    GpgKeyRepository,
    LoggerProtocol,
    TupleStoreProtocol,
    WebhookProtocol,
)


@dataclass(slots=True, kw_only=True)
class GpgKeyContext(TupleSagaContext):
    """Saga context shared by the create and delete flows."""

    gpg_key: GpgKey
    tuples_on_key: list[RelationTuple] | None = None
    row_deleted: bool = False

    @property
    def key_ref(self) -> ObjectRef:
        return ObjectRef(object_type=ObjectType.GPG_KEY, object_id=str(self.gpg_key.id))

    @property
    def org_link(self) -> ResourceLink:
        return ResourceLink(
            child=self.key_ref,
            parent=ObjectRef(object_type=ObjectType.ORG, object_id=self.gpg_key.org_id),
        )

    @property
    def owner_tuple(self) -> RelationTuple:
        return RelationTuple.of(
            SubjectRef(subject_type=SubjectType.USER, subject_id=self.gpg_key.user_id),
            Relation.OWNER,
            self.key_ref,
        )


class _GpgKeyHandler:
    def __init__(
        self,
        gpg_keys: GpgKeyRepository,
        authorization: AuthorizationProtocol,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
        event_bus: EventBusProtocol,
        webhooks: WebhookProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._gpg_keys = gpg_keys
        self._authorization = authorization
        self._audit = audit
        self._orchestrator = orchestrator
        self._event_bus = event_bus
        self._webhooks = webhooks
        self._logger = logger

    async def _notify(
        self, action: AuditAction, gpg_key: GpgKey, actor_id: str, message: str
    ) -> None:
        await self._webhooks.notify(
            WebhookEvent(
                event_type=action.value,
                org_id=gpg_key.org_id,
                user_id=actor_id,
                message=message,
                details={
                    "gpg_key_id": str(gpg_key.id),
                    "fingerprint": gpg_key.fingerprint,
                    "key_id": gpg_key.key_id,
                },
            )
        )


class CreateGpgKeyHandler(_GpgKeyHandler):
    """Handler for CreateGpgKey."""

    async def handle(self, cmd: CreateGpgKey) -> Result[GpgKey, DomainError]:
        """Handle create GPG key command.

        Returns:
            Success(GpgKey) once row, owner tuple, org link and audit entry
            are all durable. Failure(SagaStepFailure) otherwise, with every
            earlier step rolled back.
        """
        gpg_key = GpgKey(
            org_id=cmd.org_id,
            user_id=cmd.user_id,
            name=cmd.name,
            email=cmd.email,
            fingerprint=cmd.fingerprint.upper(),
            algorithm=cmd.algorithm,
            public_key=cmd.public_key,
            key_size=cmd.key_size,
            usage_flags=list(cmd.usage_flags),
            is_default=cmd.is_default,
            expires_at=cmd.expires_at,
        )
        context = GpgKeyContext(gpg_key=gpg_key)
        message = f"Created GPG key '{gpg_key.name}' ({gpg_key.key_id})"
        steps = [
            self._insert_step(),
            write_tuples_step(
                "owner_tuple",
                self._authorization,
                lambda ctx: [ctx.owner_tuple],
                self._logger,
            ),
            link_parent_step("org_link", self._authorization, lambda ctx: ctx.org_link),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.GPG_KEY_CREATED,
                    actor_id=cmd.user_id,
                    org_id=cmd.org_id,
                    message=message,
                    details={
                        "gpg_key_id": str(gpg_key.id),
                        "fingerprint": gpg_key.fingerprint,
                        "algorithm": gpg_key.algorithm,
                    },
                ),
            ),
        ]

        match await self._orchestrator.execute("gpg_key_create", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        self._logger.info(
            "gpg_key_created",
            gpg_key_id=str(gpg_key.id),
            org_id=gpg_key.org_id,
            user_id=gpg_key.user_id,
        )
        await self._event_bus.publish(
            GpgKeyCreated(
                gpg_key_id=str(gpg_key.id),
                org_id=gpg_key.org_id,
                user_id=gpg_key.user_id,
                fingerprint=gpg_key.fingerprint,
            )
        )
        await self._notify(AuditAction.GPG_KEY_CREATED, gpg_key, cmd.user_id, message)
        return Success(value=gpg_key)

    def _insert_step(self) -> SagaStep[GpgKeyContext]:
        async def forward(ctx: GpgKeyContext) -> Result[None, DomainError]:
            return await self._gpg_keys.save(ctx.gpg_key)

        async def compensate(ctx: GpgKeyContext) -> Result[bool, DomainError]:
            return await self._gpg_keys.delete(ctx.gpg_key.id)

        return SagaStep("db_insert", forward=forward, compensate=compensate)


class DeleteGpgKeyHandler(_GpgKeyHandler):
    """Handler for DeleteGpgKey."""

    def __init__(
        self,
        gpg_keys: GpgKeyRepository,
        tuples: TupleStoreProtocol,
        authorization: AuthorizationProtocol,
        audit: AuditProtocol,
        orchestrator: SagaOrchestrator,
        event_bus: EventBusProtocol,
        webhooks: WebhookProtocol,
        logger: LoggerProtocol,
    ) -> None:
        super().__init__(
            gpg_keys, authorization, audit, orchestrator, event_bus, webhooks, logger
        )
        self._tuples = tuples

    async def handle(self, cmd: DeleteGpgKey) -> Result[UUID, DomainError]:
        match await self._gpg_keys.get(cmd.gpg_key_id):
            case Failure() as failure:
                return failure
            case Success(value=GpgKey() as gpg_key) if gpg_key.org_id == cmd.org_id:
                pass
            case Success():
                return Failure(
                    error=NotFoundError(
                        code=ErrorCode.GPG_KEY_NOT_FOUND,
                        message=f"GPG key {cmd.gpg_key_id} not found",
                        resource_type="gpg_key",
                        resource_id=str(cmd.gpg_key_id),
                    )
                )

        context = GpgKeyContext(gpg_key=gpg_key)
        match await self._tuples.read_tuples(obj=context.key_ref):
            case Failure() as failure:
                return failure
            case Success(value=tuples_on_key):
                context.tuples_on_key = tuples_on_key

        message = f"Deleted GPG key '{gpg_key.name}' ({gpg_key.key_id})"
        steps = [
            self._delete_step(),
            remove_tuples_step(
                "tuple_delete",
                self._authorization,
                lambda ctx: ctx.tuples_on_key or [],
                self._logger,
            ),
            unlink_parent_step("org_unlink", self._authorization, lambda ctx: ctx.org_link),
            audit_step(
                self._audit,
                lambda ctx: AuditEntry(
                    action=AuditAction.GPG_KEY_DELETED,
                    actor_id=cmd.actor_id,
                    org_id=cmd.org_id,
                    message=message,
                    details={
                        "gpg_key_id": str(gpg_key.id),
                        "fingerprint": gpg_key.fingerprint,
                        "tuples_removed": len(ctx.removed),
                    },
                ),
            ),
        ]

        match await self._orchestrator.execute("gpg_key_delete", context, steps):
            case Failure() as failure:
                return failure
            case Success():
                pass

        self._logger.info(
            "gpg_key_deleted",
            gpg_key_id=str(gpg_key.id),
            org_id=gpg_key.org_id,
            actor_id=cmd.actor_id,
        )
        await self._event_bus.publish(
            GpgKeyDeleted(
                gpg_key_id=str(gpg_key.id),
                org_id=gpg_key.org_id,
                user_id=cmd.actor_id,
                fingerprint=gpg_key.fingerprint,
            )
        )
        await self._notify(AuditAction.GPG_KEY_DELETED, gpg_key, cmd.actor_id, message)
        return Success(value=gpg_key.id)

    def _delete_step(self) -> SagaStep[GpgKeyContext]:
        async def forward(ctx: GpgKeyContext) -> Result[None, DomainError]:
            match await self._gpg_keys.delete(ctx.gpg_key.id):
                case Failure() as failure:
                    return failure
                case Success(value=deleted):
                    ctx.row_deleted = deleted
                    return Success(value=None)

        async def compensate(ctx: GpgKeyContext) -> Result[None, DomainError] | None:
            if not ctx.row_deleted:
                return None
            return await self._gpg_keys.save(ctx.gpg_key)

        return SagaStep("db_delete", forward=forward, compensate=compensate)
