"""Event bus dependency factory.

Application-scoped singleton for domain event publishing. All handlers are
subscribed here at first use:

    - LoggingEventHandler: structured log line per authorization/key event
    - PermissionCacheEventHandler: deletes affected effective permission
      snapshots after tuple, membership and role changes
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.protocols import EventBusProtocol


@lru_cache()
def get_event_bus() -> "EventBusProtocol":
    """Get event bus singleton (app-scoped).

    Usage:
        event_bus = get_event_bus()
        await event_bus.publish(AccessGranted(...))
    """
    from src.application.event_handlers import PermissionCacheEventHandler
    from src.core.container.authorization import get_effective_permissions_service
    from src.core.container.infrastructure import get_logger
    from src.domain.events import (
        AccessGranted,
        AccessRevoked,
        GpgKeyCreated,
        GpgKeyDeleted,
        RoleAssigned,
        TeamMemberAdded,
        TeamMemberRemoved,
    )
    from src.infrastructure.events import InMemoryEventBus
    from src.infrastructure.events.handlers import LoggingEventHandler

    event_bus = InMemoryEventBus(logger=get_logger())

    logging_handler = LoggingEventHandler(logger=get_logger())
    event_bus.subscribe(AccessGranted, logging_handler.handle_access_granted)
    event_bus.subscribe(AccessRevoked, logging_handler.handle_access_revoked)
    event_bus.subscribe(TeamMemberAdded, logging_handler.handle_team_member_added)
    event_bus.subscribe(TeamMemberRemoved, logging_handler.handle_team_member_removed)
    event_bus.subscribe(RoleAssigned, logging_handler.handle_role_assigned)
    event_bus.subscribe(GpgKeyCreated, logging_handler.handle_gpg_key_created)
    event_bus.subscribe(GpgKeyDeleted, logging_handler.handle_gpg_key_deleted)

    cache_handler = PermissionCacheEventHandler(
        service=get_effective_permissions_service()
    )
    event_bus.subscribe(AccessGranted, cache_handler.handle_access_changed)
    event_bus.subscribe(AccessRevoked, cache_handler.handle_access_changed)
    event_bus.subscribe(TeamMemberAdded, cache_handler.handle_team_member_changed)
    event_bus.subscribe(TeamMemberRemoved, cache_handler.handle_team_member_changed)
    event_bus.subscribe(RoleAssigned, cache_handler.handle_role_assigned)

    return event_bus
