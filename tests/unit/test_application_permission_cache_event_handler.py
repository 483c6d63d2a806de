"""Unit tests for PermissionCacheEventHandler invalidation scope."""

from unittest.mock import AsyncMock

import pytest

from src.application.event_handlers import PermissionCacheEventHandler
from src.application.services import EffectivePermissionsService
from src.domain.events import (
    AccessGranted,
    AccessRevoked,
    RoleAssigned,
    TeamMemberAdded,
    TeamMemberRemoved,
)
from src.infrastructure.cache import InMemoryPermissionCache


@pytest.fixture
def service():
    return AsyncMock()


@pytest.fixture
def handler(service):
    return PermissionCacheEventHandler(service=service)


@pytest.mark.unit
class TestAccessChanged:
    @pytest.mark.asyncio
    async def test_user_grant_on_org_invalidates_pair(self, handler, service):
        await handler.handle_access_changed(
            AccessGranted(subject="user:u1", relation="can_view", object="org:o1")
        )

        service.invalidate.assert_awaited_once_with("u1", "o1")
        service.invalidate_org.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_team_revoke_on_org_invalidates_org(self, handler, service):
        await handler.handle_access_changed(
            AccessRevoked(subject="team:t1", relation="can_edit", object="org:o1")
        )

        service.invalidate_org.assert_awaited_once_with("o1")
        service.invalidate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_grant_on_app_is_ignored(self, handler, service):
        await handler.handle_access_changed(
            AccessGranted(subject="user:u1", relation="editor", object="app:a1", org_id="o1")
        )

        service.invalidate.assert_not_awaited()
        service.invalidate_org.assert_not_awaited()


@pytest.mark.unit
class TestMembershipAndRoles:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("event_type", [TeamMemberAdded, TeamMemberRemoved])
    async def test_team_member_change_invalidates_pair(self, handler, service, event_type):
        await handler.handle_team_member_changed(
            event_type(team_id="t1", user_id="u1", org_id="o1")
        )

        service.invalidate.assert_awaited_once_with("u1", "o1")

    @pytest.mark.asyncio
    async def test_role_assigned_invalidates_pair(self, handler, service):
        await handler.handle_role_assigned(
            RoleAssigned(user_id="u1", org_id="o1", role_id="r1")
        )

        service.invalidate.assert_awaited_once_with("u1", "o1")


@pytest.mark.unit
class TestWithRealCache:
    @pytest.mark.asyncio
    async def test_role_change_drops_cached_snapshot(
        self, authorizer, role_repository, mock_logger
    ):
        # Arrange
        cache = InMemoryPermissionCache()
        service = EffectivePermissionsService(
            authorization=authorizer,
            roles=role_repository,
            cache=cache,
            logger=mock_logger,
            ttl_seconds=60,
        )
        await service.get("u1", "o1")
        assert (await cache.get("u1", "o1")).value is not None

        # Act
        await PermissionCacheEventHandler(service=service).handle_role_assigned(
            RoleAssigned(user_id="u1", org_id="o1", role_id="r1")
        )

        # Assert
        assert (await cache.get("u1", "o1")).value is None
