"""Logging event handler for domain events.

Structured logging of authorization and GPG key events at INFO level.
Saga lifecycle is logged by the orchestrator itself with the saga bound to
the logger, so saga events are not subscribed here.

Structured Fields:
    - event_id: UUID for event correlation and deduplication
    - occurred_at: ISO 8601 timestamp (UTC)
    - event-specific identifiers (subject, relation, object, org_id, ...)

Usage:
    >>> handler = LoggingEventHandler(logger=get_logger())
    >>> event_bus.subscribe(AccessGranted, handler.handle_access_granted)
"""

from src.domain.events import (
    AccessGranted,
    AccessRevoked,
    DomainEvent,
    GpgKeyCreated,
    GpgKeyDeleted,
    RoleAssigned,
    TeamMemberAdded,
    TeamMemberRemoved,
)
from src.domain.protocols import LoggerProtocol


def _base(event: DomainEvent) -> dict[str, str]:
    return {
        "event_id": str(event.event_id),
        "occurred_at": event.occurred_at.isoformat(),
    }


class LoggingEventHandler:
    """Event handler for structured logging of domain events.

    Attributes:
        _logger: Logger protocol implementation (from container).
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._logger = logger

    # =========================================================================
    # Authorization Event Handlers
    # =========================================================================

    async def handle_access_granted(self, event: AccessGranted) -> None:
        self._logger.info(
            "access_granted",
            **_base(event),
            subject=event.subject,
            relation=event.relation,
            object=event.object,
            org_id=event.org_id,
            granted_by=event.granted_by,
        )

    async def handle_access_revoked(self, event: AccessRevoked) -> None:
        self._logger.info(
            "access_revoked",
            **_base(event),
            subject=event.subject,
            relation=event.relation,
            object=event.object,
            org_id=event.org_id,
            revoked_by=event.revoked_by,
        )

    async def handle_team_member_added(self, event: TeamMemberAdded) -> None:
        self._logger.info(
            "team_member_added",
            **_base(event),
            team_id=event.team_id,
            user_id=event.user_id,
            org_id=event.org_id,
        )

    async def handle_team_member_removed(self, event: TeamMemberRemoved) -> None:
        self._logger.info(
            "team_member_removed",
            **_base(event),
            team_id=event.team_id,
            user_id=event.user_id,
            org_id=event.org_id,
        )

    async def handle_role_assigned(self, event: RoleAssigned) -> None:
        self._logger.info(
            "role_assigned",
            **_base(event),
            user_id=event.user_id,
            org_id=event.org_id,
            role_id=event.role_id,
            assigned_by=event.assigned_by,
        )

    # =========================================================================
    # GPG Key Event Handlers
    # =========================================================================

    async def handle_gpg_key_created(self, event: GpgKeyCreated) -> None:
        self._logger.info(
            "gpg_key_created_event",
            **_base(event),
            gpg_key_id=event.gpg_key_id,
            org_id=event.org_id,
            fingerprint=event.fingerprint,
        )

    async def handle_gpg_key_deleted(self, event: GpgKeyDeleted) -> None:
        self._logger.info(
            "gpg_key_deleted_event",
            **_base(event),
            gpg_key_id=event.gpg_key_id,
            org_id=event.org_id,
            fingerprint=event.fingerprint,
        )

