"""Unit tests for AssignRoleHandler and CreateDefaultRolesHandler."""

from unittest.mock import AsyncMock
from uuid import uuid4

import pytest

from src.application.commands.authorization_commands import AssignRole, CreateDefaultRoles
from src.application.commands.handlers.assign_role_handler import (
    AssignRoleHandler,
    CreateDefaultRolesHandler,
)
from src.core.enums import ErrorCode
from src.core.errors import ConflictError, NotFoundError
from src.core.result import Failure, Success
from src.domain.entities import ObjectRef, Role, RoleAssignment, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType
from src.domain.errors import AuditError
from src.domain.events import RoleAssigned

USER = SubjectRef(subject_type=SubjectType.USER, subject_id="u1")
ORG = ObjectRef(object_type=ObjectType.ORG, object_id="o1")


@pytest.fixture
def handler(role_repository, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger):
    return AssignRoleHandler(
        role_repository, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
    )


async def org_relations(tuple_store) -> set[Relation]:
    result = await tuple_store.read_tuples(subject=USER, obj=ORG)
    return {t.relation for t in result.value}


async def saved(role_repository, role: Role) -> Role:
    await role_repository.save(role)
    return role


@pytest.mark.unit
class TestAssignRole:
    @pytest.mark.asyncio
    async def test_assign_writes_member_and_flag_tuples(
        self, handler, role_repository, tuple_store, audit
    ):
        # Arrange
        role = await saved(
            role_repository, Role(org_id="o1", name="Dev", can_view=True, can_edit=True)
        )

        # Act
        result = await handler.handle(
            AssignRole(user_id="u1", org_id="o1", role_id=role.id, actor_id="admin")
        )

        # Assert
        assert result == Success(
            value=RoleAssignment(user_id="u1", org_id="o1", role_id=role.id)
        )
        assert await org_relations(tuple_store) == {
            Relation.MEMBER,
            Relation.CAN_VIEW,
            Relation.CAN_EDIT,
        }
        assert audit.entries[0]["action"] == "role_assigned"
        assert audit.entries[0]["details"]["previous_role_id"] is None

    @pytest.mark.asyncio
    async def test_reassign_removes_flags_of_previous_role(
        self, handler, role_repository, tuple_store, audit
    ):
        # Arrange
        admin = await saved(role_repository, Role(org_id="o1", name="Admin", is_admin=True))
        viewer = await saved(role_repository, Role(org_id="o1", name="Viewer", can_view=True))
        await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=admin.id))

        # Act
        await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=viewer.id))

        # Assert
        assert await org_relations(tuple_store) == {Relation.MEMBER, Relation.CAN_VIEW}
        assignment = await role_repository.get_assignment("u1", "o1")
        assert assignment.value.role_id == viewer.id
        assert audit.entries[-1]["details"]["removed"] == ["admin"]

    @pytest.mark.asyncio
    async def test_direct_capability_grants_survive_resync(
        self, handler, role_repository, authorizer, tuple_store
    ):
        # Arrange: can_manage_teams granted directly, not through a role flag
        await authorizer.grant(USER, Relation.CAN_MANAGE_TEAMS, ORG)
        role = await saved(role_repository, Role(org_id="o1", name="Viewer", can_view=True))

        # Act
        await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=role.id))

        # Assert
        assert Relation.CAN_MANAGE_TEAMS in await org_relations(tuple_store)

    @pytest.mark.asyncio
    async def test_unknown_role(self, handler):
        result = await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=uuid4()))

        assert isinstance(result, Failure)
        assert isinstance(result.error, NotFoundError)
        assert result.error.code == ErrorCode.ROLE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_role_of_other_org_is_not_found(self, handler, role_repository):
        role = await saved(role_repository, Role(org_id="o2", name="Admin", is_admin=True))

        result = await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=role.id))

        assert result.error.code == ErrorCode.ROLE_NOT_FOUND

    @pytest.mark.asyncio
    async def test_audit_failure_restores_previous_state(
        self, handler, role_repository, tuple_store, audit
    ):
        # Arrange
        admin = await saved(role_repository, Role(org_id="o1", name="Admin", is_admin=True))
        viewer = await saved(role_repository, Role(org_id="o1", name="Viewer", can_view=True))
        await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=admin.id))
        audit.record = AsyncMock(
            return_value=Failure(
                error=AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="down")
            )
        )

        # Act
        result = await handler.handle(AssignRole(user_id="u1", org_id="o1", role_id=viewer.id))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error.cause, AuditError)
        assert await org_relations(tuple_store) == {Relation.MEMBER, Relation.ADMIN}
        assignment = await role_repository.get_assignment("u1", "o1")
        assert assignment.value.role_id == admin.id

    @pytest.mark.asyncio
    async def test_publishes_role_assigned(self, handler, role_repository, event_bus):
        seen = []

        async def collect(event) -> None:
            seen.append(event)

        event_bus.subscribe(RoleAssigned, collect)
        role = await saved(role_repository, Role(org_id="o1", name="Viewer", can_view=True))

        await handler.handle(
            AssignRole(user_id="u1", org_id="o1", role_id=role.id, actor_id="admin")
        )

        assert seen[0].role_id == str(role.id)
        assert seen[0].assigned_by == "admin"


@pytest.mark.unit
class TestCreateDefaultRoles:
    @pytest.mark.asyncio
    async def test_creates_five_roles(self, role_repository, audit, orchestrator):
        handler = CreateDefaultRolesHandler(role_repository, audit, orchestrator)

        result = await handler.handle(CreateDefaultRoles(org_id="o1", actor_id="admin"))

        assert [role.name for role in result.value] == [
            "Org Admin",
            "Billing Admin",
            "Manager",
            "Developer",
            "Viewer",
        ]
        stored = await role_repository.list_by_org("o1")
        assert len(stored.value) == 5
        assert audit.entries[0]["action"] == "default_roles_created"

    @pytest.mark.asyncio
    async def test_name_conflict_rolls_back_created_roles(
        self, role_repository, audit, orchestrator
    ):
        # Arrange: "Manager" already exists
        await role_repository.save(Role(org_id="o1", name="Manager"))
        handler = CreateDefaultRolesHandler(role_repository, audit, orchestrator)

        # Act
        result = await handler.handle(CreateDefaultRoles(org_id="o1"))

        # Assert
        assert isinstance(result, Failure)
        assert isinstance(result.error.cause, ConflictError)
        assert result.error.cause.code == ErrorCode.ROLE_ALREADY_EXISTS
        stored = await role_repository.list_by_org("o1")
        assert [role.name for role in stored.value] == ["Manager"]
        assert audit.entries == []
