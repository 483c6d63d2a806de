"""Unit tests for the GPG key create/delete sagas.

Tests cover:
- Create stores the row, owner tuple and org link, audits, notifies
- Creator can manage the key; org admins inherit through the link
- Audit failure rolls back link, tuple and row; cause is the AuditError
- Webhook failure never fails the operation
- Delete removes row, every tuple on the key and the link
- Delete of a key of another org is not found
"""

from unittest.mock import AsyncMock
from uuid import uuid4

import httpx
import pytest

from src.application.commands.gpg_key_commands import CreateGpgKey, DeleteGpgKey
from src.application.commands.handlers.gpg_key_handler import (
    CreateGpgKeyHandler,
    DeleteGpgKeyHandler,
)
from src.core.enums import ErrorCode
from src.core.errors import ConflictError
from src.core.result import Failure, Success
from src.domain.entities import GpgKey, ObjectRef, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType
from src.domain.errors import AuditError, SagaStepFailure
from src.domain.events import GpgKeyCreated
from src.infrastructure.webhooks import HttpxWebhookDispatcher

FINGERPRINT = "3aa5c34371567bd2a9f1c54f2e8b6d1f0c7e4b9a"


def create_command(**overrides) -> CreateGpgKey:
    fields = {
        "org_id": "o1",
        "user_id": "u1",
        "name": "Release signing",
        "email": "release@example.com",
        "fingerprint": FINGERPRINT,
        "algorithm": "ecc-curve25519",
        "public_key": "-----BEGIN PGP PUBLIC KEY BLOCK-----\n...",
    }
    fields.update(overrides)
    return CreateGpgKey(**fields)


@pytest.fixture
def webhooks():
    dispatcher = AsyncMock()
    dispatcher.notify.return_value = None
    return dispatcher


@pytest.fixture
def create_handler(
    gpg_key_repository, authorizer, audit, orchestrator, event_bus, webhooks, mock_logger
):
    return CreateGpgKeyHandler(
        gpg_key_repository, authorizer, audit, orchestrator, event_bus, webhooks, mock_logger
    )


@pytest.fixture
def delete_handler(
    gpg_key_repository,
    tuple_store,
    authorizer,
    audit,
    orchestrator,
    event_bus,
    webhooks,
    mock_logger,
):
    return DeleteGpgKeyHandler(
        gpg_key_repository,
        tuple_store,
        authorizer,
        audit,
        orchestrator,
        event_bus,
        webhooks,
        mock_logger,
    )


def key_ref(gpg_key: GpgKey) -> ObjectRef:
    return ObjectRef(object_type=ObjectType.GPG_KEY, object_id=str(gpg_key.id))


@pytest.mark.unit
class TestCreateGpgKey:
    @pytest.mark.asyncio
    async def test_create_stores_key_and_owner(
        self, create_handler, gpg_key_repository, authorizer, audit, webhooks
    ):
        # Act
        result = await create_handler.handle(create_command())

        # Assert
        assert isinstance(result, Success)
        gpg_key = result.value
        assert gpg_key.fingerprint == FINGERPRINT.upper()
        assert gpg_key.key_id == FINGERPRINT.upper()[-16:]
        assert (await gpg_key_repository.get(gpg_key.id)).value is gpg_key
        assert await authorizer.check(
            "u1", "user", "can_manage", "gpg_key", str(gpg_key.id)
        ) == Success(value=True)
        assert audit.entries[0]["action"] == "gpg_key_created"
        webhooks.notify.assert_awaited_once()
        assert webhooks.notify.await_args.args[0].event_type == "gpg_key_created"

    @pytest.mark.asyncio
    async def test_org_admin_inherits_manage(self, create_handler, authorizer):
        await authorizer.grant(
            SubjectRef(subject_type=SubjectType.USER, subject_id="boss"),
            Relation.ADMIN,
            ObjectRef(object_type=ObjectType.ORG, object_id="o1"),
        )

        gpg_key = (await create_handler.handle(create_command())).value

        assert await authorizer.check(
            "boss", "user", "can_manage", "gpg_key", str(gpg_key.id)
        ) == Success(value=True)
        assert await authorizer.check(
            "boss", "user", "can_sign", "gpg_key", str(gpg_key.id)
        ) == Success(value=False)

    @pytest.mark.asyncio
    async def test_audit_failure_rolls_back_everything(
        self, create_handler, gpg_key_repository, tuple_store, audit, webhooks, event_bus
    ):
        # Arrange
        audit_error = AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="audit db down")
        audit.record = AsyncMock(return_value=Failure(error=audit_error))
        created_events = []

        async def collect(event) -> None:
            created_events.append(event)

        event_bus.subscribe(GpgKeyCreated, collect)

        # Act
        result = await create_handler.handle(create_command())

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, SagaStepFailure)
        assert result.error.cause is audit_error
        assert result.error.compensation_failures == ()
        assert (await gpg_key_repository.list_by_org("o1")).value == []
        assert len(tuple_store) == 0
        assert tuple_store._links == set()
        webhooks.notify.assert_not_awaited()
        assert created_events == []

    @pytest.mark.asyncio
    async def test_duplicate_fingerprint_conflicts(self, create_handler, tuple_store):
        await create_handler.handle(create_command())

        result = await create_handler.handle(create_command(name="Copy"))

        assert isinstance(result.error.cause, ConflictError)
        assert result.error.cause.code == ErrorCode.GPG_KEY_ALREADY_EXISTS
        assert len(tuple_store) == 1

    @pytest.mark.asyncio
    async def test_unreachable_webhook_does_not_fail_create(
        self,
        gpg_key_repository,
        authorizer,
        audit,
        orchestrator,
        event_bus,
        mock_logger,
        httpx_mock,
    ):
        # Arrange
        httpx_mock.add_exception(httpx.ConnectError("connection refused"))
        handler = CreateGpgKeyHandler(
            gpg_key_repository,
            authorizer,
            audit,
            orchestrator,
            event_bus,
            HttpxWebhookDispatcher(url="https://hooks.example.com/keys", logger=mock_logger),
            mock_logger,
        )

        # Act
        result = await handler.handle(create_command())

        # Assert
        assert isinstance(result, Success)
        assert (await gpg_key_repository.get(result.value.id)).value is not None


@pytest.mark.unit
class TestDeleteGpgKey:
    @pytest.mark.asyncio
    async def test_delete_removes_row_tuples_and_link(
        self, create_handler, delete_handler, gpg_key_repository, authorizer, tuple_store, audit
    ):
        # Arrange: a second user can sign with the key
        gpg_key = (await create_handler.handle(create_command())).value
        await authorizer.grant(
            SubjectRef(subject_type=SubjectType.USER, subject_id="u2"),
            Relation.SIGNER,
            key_ref(gpg_key),
        )

        # Act
        result = await delete_handler.handle(
            DeleteGpgKey(gpg_key_id=gpg_key.id, org_id="o1", actor_id="u1")
        )

        # Assert
        assert result == Success(value=gpg_key.id)
        assert (await gpg_key_repository.get(gpg_key.id)).value is None
        assert len(tuple_store) == 0
        assert tuple_store._links == set()
        assert audit.entries[-1]["details"]["tuples_removed"] == 2

    @pytest.mark.asyncio
    async def test_delete_unknown_key(self, delete_handler):
        result = await delete_handler.handle(
            DeleteGpgKey(gpg_key_id=uuid4(), org_id="o1", actor_id="u1")
        )

        assert result.error.code == ErrorCode.GPG_KEY_NOT_FOUND

    @pytest.mark.asyncio
    async def test_delete_key_of_other_org(self, create_handler, delete_handler):
        gpg_key = (await create_handler.handle(create_command(org_id="o2"))).value

        result = await delete_handler.handle(
            DeleteGpgKey(gpg_key_id=gpg_key.id, org_id="o1", actor_id="u1")
        )

        assert result.error.code == ErrorCode.GPG_KEY_NOT_FOUND

    @pytest.mark.asyncio
    async def test_audit_failure_restores_key(
        self, create_handler, delete_handler, gpg_key_repository, tuple_store, audit
    ):
        # Arrange
        gpg_key = (await create_handler.handle(create_command())).value
        audit.record = AsyncMock(
            return_value=Failure(
                error=AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="down")
            )
        )

        # Act
        result = await delete_handler.handle(
            DeleteGpgKey(gpg_key_id=gpg_key.id, org_id="o1", actor_id="u1")
        )

        # Assert
        assert isinstance(result, Failure)
        assert (await gpg_key_repository.get(gpg_key.id)).value is not None
        assert len(tuple_store) == 1
        assert len(tuple_store._links) == 1
