"""Unit tests for grant/revoke, team membership and link handlers.

Tests cover:
- Tuple written, audited and announced
- Idempotent grant and revoke (Success(False), nothing rolled back)
- Audit failure rolls back the tuple and surfaces the audit error
- Team membership writes both the row and the member tuple
- Validation failures never touch the stores
- Teams of another org and apps owned by another org are refused
"""

from unittest.mock import AsyncMock

import pytest

from src.application.commands.authorization_commands import (
    AddTeamMember,
    GrantAccess,
    LinkResource,
    RemoveTeamMember,
    RevokeAccess,
)
from src.application.commands.handlers.grant_access_handler import (
    GrantAccessHandler,
    RevokeAccessHandler,
)
from src.application.commands.handlers.link_resource_handler import LinkResourceHandler
from src.application.commands.handlers.team_member_handler import (
    AddTeamMemberHandler,
    RemoveTeamMemberHandler,
)
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, NotFoundError, ValidationError
from src.core.result import Failure, Success
from src.domain.entities import ObjectRef, RelationTuple, ResourceLink, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType
from src.domain.errors import AuditError, SagaStepFailure
from src.domain.events import AccessGranted, AccessRevoked, TeamMemberAdded

USER = SubjectRef(subject_type=SubjectType.USER, subject_id="u1")
APP = ObjectRef(object_type=ObjectType.APP, object_id="a1")
ORG = ObjectRef(object_type=ObjectType.ORG, object_id="o1")
OTHER_ORG = ObjectRef(object_type=ObjectType.ORG, object_id="o2")
TEAM = ObjectRef(object_type=ObjectType.TEAM, object_id="t1")


def _audit_down() -> Failure[AuditError]:
    return Failure(
        error=AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="audit db down")
    )


@pytest.fixture
def published(event_bus):
    events = []

    async def collect(event) -> None:
        events.append(event)

    for event_type in (AccessGranted, AccessRevoked, TeamMemberAdded):
        event_bus.subscribe(event_type, collect)
    return events


@pytest.fixture
def grant_handler(authorizer, audit, orchestrator, event_bus, mock_logger):
    return GrantAccessHandler(authorizer, audit, orchestrator, event_bus, mock_logger)


@pytest.fixture
def revoke_handler(authorizer, audit, orchestrator, event_bus, mock_logger):
    return RevokeAccessHandler(authorizer, audit, orchestrator, event_bus, mock_logger)


def grant(relation: Relation = Relation.EDITOR, subject: SubjectRef = USER) -> GrantAccess:
    return GrantAccess(subject=subject, relation=relation, obj=APP, org_id="o1", actor_id="admin")


@pytest.mark.unit
class TestGrantAccessHandler:
    @pytest.mark.asyncio
    async def test_grant_writes_audits_and_publishes(
        self, grant_handler, tuple_store, audit, published
    ):
        # Act
        result = await grant_handler.handle(grant())

        # Assert
        assert result == Success(value=True)
        assert RelationTuple.of(USER, Relation.EDITOR, APP) in tuple_store._tuples
        assert audit.entries[0]["action"] == "access_granted"
        assert audit.entries[0]["actor_id"] == "admin"
        assert audit.entries[0]["details"]["object"] == "app:a1"
        assert isinstance(published[0], AccessGranted)
        assert published[0].granted_by == "admin"

    @pytest.mark.asyncio
    async def test_grant_twice_is_idempotent(self, grant_handler, tuple_store):
        await grant_handler.handle(grant())

        result = await grant_handler.handle(grant())

        assert result == Success(value=False)
        assert len(tuple_store) == 1

    @pytest.mark.asyncio
    async def test_audit_failure_rolls_back_tuple(
        self, grant_handler, audit, tuple_store, published
    ):
        # Arrange
        audit.record = AsyncMock(return_value=_audit_down())

        # Act
        result = await grant_handler.handle(grant())

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, SagaStepFailure)
        assert result.error.step_name == "audit"
        assert isinstance(result.error.cause, AuditError)
        assert len(tuple_store) == 0
        assert published == []

    @pytest.mark.asyncio
    async def test_audit_failure_keeps_preexisting_tuple(
        self, grant_handler, authorizer, audit, tuple_store
    ):
        # Arrange: the tuple was there before this saga ran
        await authorizer.grant(USER, Relation.EDITOR, APP)
        audit.record = AsyncMock(return_value=_audit_down())

        # Act
        await grant_handler.handle(grant())

        # Assert
        assert len(tuple_store) == 1

    @pytest.mark.asyncio
    async def test_non_assignable_relation_is_validation_failure(
        self, grant_handler, tuple_store, audit
    ):
        result = await grant_handler.handle(grant(relation=Relation.SIGNER))

        assert isinstance(result, Failure)
        assert isinstance(result.error.cause, ValidationError)
        assert result.error.cause.code == ErrorCode.INVALID_RELATION
        assert len(tuple_store) == 0
        assert audit.entries == []


@pytest.mark.unit
class TestRevokeAccessHandler:
    @pytest.mark.asyncio
    async def test_revoke_existing(self, revoke_handler, authorizer, tuple_store, published):
        await authorizer.grant(USER, Relation.EDITOR, APP)

        result = await revoke_handler.handle(
            RevokeAccess(subject=USER, relation=Relation.EDITOR, obj=APP, org_id="o1")
        )

        assert result == Success(value=True)
        assert len(tuple_store) == 0
        assert isinstance(published[0], AccessRevoked)

    @pytest.mark.asyncio
    async def test_revoke_missing_is_noop(self, revoke_handler, audit):
        result = await revoke_handler.handle(
            RevokeAccess(subject=USER, relation=Relation.EDITOR, obj=APP, org_id="o1")
        )

        assert result == Success(value=False)
        assert audit.entries[0]["details"]["removed"] is False

    @pytest.mark.asyncio
    async def test_audit_failure_restores_tuple(
        self, revoke_handler, authorizer, audit, tuple_store
    ):
        await authorizer.grant(USER, Relation.EDITOR, APP)
        audit.record = AsyncMock(return_value=_audit_down())

        result = await revoke_handler.handle(
            RevokeAccess(subject=USER, relation=Relation.EDITOR, obj=APP, org_id="o1")
        )

        assert isinstance(result, Failure)
        assert RelationTuple.of(USER, Relation.EDITOR, APP) in tuple_store._tuples


@pytest.mark.unit
class TestTeamMemberHandlers:
    @pytest.fixture
    def add_handler(
        self, team_store, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
    ):
        return AddTeamMemberHandler(
            team_store, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
        )

    @pytest.fixture
    def remove_handler(
        self, team_store, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
    ):
        return RemoveTeamMemberHandler(
            team_store, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
        )

    @pytest.fixture(autouse=True)
    def team_in_org(self, tuple_store):
        tuple_store._links.add(ResourceLink(child=TEAM, parent=ORG))

    @pytest.mark.asyncio
    async def test_add_member_grants_team_access(
        self, add_handler, authorizer, team_store, published
    ):
        # Arrange: team t1 edits the app
        team = SubjectRef(subject_type=SubjectType.TEAM, subject_id="t1")
        await authorizer.grant(team, Relation.EDITOR, APP)

        # Act
        result = await add_handler.handle(AddTeamMember(team_id="t1", user_id="u1", org_id="o1"))

        # Assert
        assert result == Success(value=True)
        assert await team_store.is_member("t1", "u1") == Success(value=True)
        assert await authorizer.check("u1", "user", "member", "team", "t1") == Success(value=True)
        assert await authorizer.check("u1", "user", "can_edit", "app", "a1") == Success(value=True)
        assert published[0] == TeamMemberAdded(
            team_id="t1",
            user_id="u1",
            org_id="o1",
            event_id=published[0].event_id,
            occurred_at=published[0].occurred_at,
        )

    @pytest.mark.asyncio
    async def test_add_existing_member(self, add_handler):
        await add_handler.handle(AddTeamMember(team_id="t1", user_id="u1", org_id="o1"))

        result = await add_handler.handle(AddTeamMember(team_id="t1", user_id="u1", org_id="o1"))

        assert result == Success(value=False)

    @pytest.mark.asyncio
    async def test_add_rolls_back_membership_on_audit_failure(
        self, add_handler, audit, team_store, tuple_store
    ):
        audit.record = AsyncMock(return_value=_audit_down())

        result = await add_handler.handle(AddTeamMember(team_id="t1", user_id="u1", org_id="o1"))

        assert isinstance(result, Failure)
        assert await team_store.is_member("t1", "u1") == Success(value=False)
        assert len(tuple_store) == 0

    @pytest.mark.asyncio
    async def test_remove_member(self, add_handler, remove_handler, team_store, tuple_store):
        await add_handler.handle(AddTeamMember(team_id="t1", user_id="u1", org_id="o1"))

        result = await remove_handler.handle(
            RemoveTeamMember(team_id="t1", user_id="u1", org_id="o1")
        )

        assert result == Success(value=True)
        assert await team_store.is_member("t1", "u1") == Success(value=False)
        assert len(tuple_store) == 0

    @pytest.mark.asyncio
    async def test_team_of_another_org_is_not_found(
        self, add_handler, remove_handler, authorizer, team_store, audit
    ):
        # Arrange: t2 belongs to o2 and administers an app there
        team = SubjectRef(subject_type=SubjectType.TEAM, subject_id="t2")
        other_team = ObjectRef(object_type=ObjectType.TEAM, object_id="t2")
        await authorizer.link_parent(other_team, OTHER_ORG)
        await authorizer.grant(team, Relation.ADMIN, APP)

        # Act
        added = await add_handler.handle(AddTeamMember(team_id="t2", user_id="u1", org_id="o1"))
        removed = await remove_handler.handle(
            RemoveTeamMember(team_id="t2", user_id="u1", org_id="o1")
        )

        # Assert
        assert isinstance(added, Failure)
        assert isinstance(added.error, NotFoundError)
        assert added.error.code == ErrorCode.TEAM_NOT_FOUND
        assert isinstance(removed, Failure)
        assert await team_store.is_member("t2", "u1") == Success(value=False)
        assert await authorizer.check("u1", "user", "can_manage", "app", "a1") == Success(
            value=False
        )
        assert audit.entries == []

    @pytest.mark.asyncio
    async def test_unlinked_team_is_not_found(self, add_handler):
        result = await add_handler.handle(AddTeamMember(team_id="t9", user_id="u1", org_id="o1"))

        assert isinstance(result, Failure)
        assert result.error.resource_id == "t9"


@pytest.mark.unit
class TestLinkResourceHandler:
    @pytest.mark.asyncio
    async def test_link_enables_inheritance(self, tuple_store, authorizer, mock_logger):
        # Arrange
        handler = LinkResourceHandler(tuple_store, authorizer, mock_logger)
        await authorizer.grant(USER, Relation.ADMIN, ORG)

        # Act
        result = await handler.handle(LinkResource(child=APP, parent=ORG, org_id="o1"))

        # Assert
        assert result == Success(value=True)
        assert await authorizer.check("u1", "user", "can_manage", "app", "a1") == Success(
            value=True
        )

    @pytest.mark.asyncio
    async def test_invalid_parent_type(self, tuple_store, authorizer, mock_logger):
        handler = LinkResourceHandler(tuple_store, authorizer, mock_logger)

        result = await handler.handle(LinkResource(child=ORG, parent=APP, org_id="o1"))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_OBJECT

    @pytest.mark.asyncio
    async def test_app_of_another_org_is_conflict(self, tuple_store, authorizer, mock_logger):
        # Arrange: a1 belongs to o2; u1 administers o1
        handler = LinkResourceHandler(tuple_store, authorizer, mock_logger)
        await authorizer.link_parent(APP, OTHER_ORG)
        await authorizer.grant(USER, Relation.ADMIN, ORG)

        # Act
        result = await handler.handle(LinkResource(child=APP, parent=ORG, org_id="o1"))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error, ConflictError)
        assert result.error.code == ErrorCode.RESOURCE_ALREADY_LINKED
        assert await tuple_store.parents(APP) == Success(value=[OTHER_ORG])
        assert await authorizer.check("u1", "user", "can_manage", "app", "a1") == Success(
            value=False
        )

    @pytest.mark.asyncio
    async def test_relink_to_same_parent_is_idempotent(
        self, tuple_store, authorizer, mock_logger
    ):
        handler = LinkResourceHandler(tuple_store, authorizer, mock_logger)
        await handler.handle(LinkResource(child=APP, parent=ORG, org_id="o1"))

        result = await handler.handle(LinkResource(child=APP, parent=ORG, org_id="o1"))

        assert result == Success(value=False)
