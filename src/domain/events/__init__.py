"""Domain events.

Usage:
    from src.domain.events import AccessGranted, DomainEvent
"""

from src.domain.events.authorization_events import (
    AccessGranted,
    AccessRevoked,
    PermissionDecisionRecorded,
    RoleAssigned,
    TeamMemberAdded,
    TeamMemberRemoved,
)
from src.domain.events.base_event import DomainEvent
from src.domain.events.gpg_key_events import GpgKeyCreated, GpgKeyDeleted
from src.domain.events.saga_events import (
    SagaCompensated,
    SagaCompensationFailed,
    SagaCompleted,
    SagaStarted,
    SagaStepFailed,
)

__all__ = [
    "AccessGranted",
    "AccessRevoked",
    "DomainEvent",
    "GpgKeyCreated",
    "GpgKeyDeleted",
    "PermissionDecisionRecorded",
    "RoleAssigned",
    "SagaCompensated",
    "SagaCompensationFailed",
    "SagaCompleted",
    "SagaStarted",
    "SagaStepFailed",
    "TeamMemberAdded",
    "TeamMemberRemoved",
]
