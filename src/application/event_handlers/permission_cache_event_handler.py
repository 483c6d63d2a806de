"""Effective permission cache invalidation.

Snapshots are never patched: any tuple, membership or role change that can
alter a (user, org) snapshot deletes it, and the next read recomputes.

Scope per event:
    - RoleAssigned, TeamMemberAdded/Removed: the one (user, org) pair
    - AccessGranted/Revoked on an org object:
        user subject -> that (user, org) pair
        team subject -> every snapshot of the org (members are not loaded)
    - AccessGranted/Revoked on any other object: nothing, since snapshots
      are computed from org relations only

Architecture:
    - Application layer, app-scoped singleton subscribed at container startup
    - Invalidation failures are logged by the service and never propagate
"""

from src.application.services.effective_permissions_service import (
    EffectivePermissionsService,
)
from src.domain.enums import ObjectType, SubjectType
from src.domain.events import (
    AccessGranted,
    AccessRevoked,
    RoleAssigned,
    TeamMemberAdded,
    TeamMemberRemoved,
)


class PermissionCacheEventHandler:
    """Deletes cached EffectivePermissions affected by a mutation.

    Example:
        >>> handler = PermissionCacheEventHandler(service=get_effective_permissions_service())
        >>> event_bus.subscribe(RoleAssigned, handler.handle_role_assigned)
    """

    def __init__(self, service: EffectivePermissionsService) -> None:
        self._service = service

    async def handle_access_changed(self, event: AccessGranted | AccessRevoked) -> None:
        object_type, _, object_id = event.object.partition(":")
        if object_type != ObjectType.ORG.value:
            return
        subject_type, _, subject_id = event.subject.partition(":")
        if subject_type == SubjectType.TEAM.value:
            await self._service.invalidate_org(object_id)
        else:
            await self._service.invalidate(subject_id, object_id)

    async def handle_team_member_changed(
        self, event: TeamMemberAdded | TeamMemberRemoved
    ) -> None:
        await self._service.invalidate(event.user_id, event.org_id)

    async def handle_role_assigned(self, event: RoleAssigned) -> None:
        await self._service.invalidate(event.user_id, event.org_id)
