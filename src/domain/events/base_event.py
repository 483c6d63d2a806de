"""Base domain event class.

Domain events represent "things that happened" and are always named in past
tense (AccessGranted, SagaCompensated).

Architecture:
    - Frozen dataclass (immutable after creation)
    - Auto-generated event_id (UUIDv7, time-ordered) for event tracking
    - occurred_at timestamp (UTC) for event ordering

Usage:
    >>> @dataclass(frozen=True, kw_only=True, slots=True)
    >>> class AccessGranted(DomainEvent):
    ...     subject: str
    ...     relation: str
    >>>
    >>> event = AccessGranted(subject="user:u1", relation="viewer")
    >>> print(event.event_id)  # Auto-generated UUID
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(frozen=True, kw_only=True, slots=True)
class DomainEvent:
    """Base class for all domain events.

    All domain events MUST:
        1. Inherit from this base class
        2. Use past tense naming
        3. Be frozen dataclasses with kw_only=True

    Attributes:
        event_id: Unique identifier for this event instance. Auto-generated
            UUIDv7 if not provided.
        occurred_at: Timestamp when the event occurred (UTC).
    """

    event_id: UUID = field(default_factory=uuid7)
    occurred_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def event_type(self) -> str:
        """Class name of the event, used as the log/event key."""
        return type(self).__name__
