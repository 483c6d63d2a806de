"""Event bus protocol (port) for domain events.

Implementations:
    - InMemoryEventBus: src/infrastructure/events/in_memory_event_bus.py

Usage:
    >>> event_bus = get_event_bus()
    >>> event_bus.subscribe(AccessGranted, invalidate_permissions)
    >>> await event_bus.publish(AccessGranted(subject="user:u1", ...))
"""

from collections.abc import Awaitable, Callable
from typing import Protocol

from src.domain.events.base_event import DomainEvent

# Type alias for event handler functions
EventHandler = Callable[[DomainEvent], Awaitable[None]]
"""Async event handler: takes one event, returns None, side effects only."""


class EventBusProtocol(Protocol):
    """Protocol for event bus implementations.

    Key Requirements:
        1. **Fail-open behavior**: One handler failure must NOT prevent other
           handlers from executing, and never reaches the publisher.
        2. **Async support**: All handlers are async.
        3. **Type-based routing**: Handlers registered for a type receive
           events of exactly that type.
        4. **No ordering guarantees**: Handlers execute concurrently.
    """

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register event handler for a specific event type.

        Args:
            event_type: Class of event to handle (exact type match).
            handler: Async function called with the event.
        """
        ...

    async def publish(
        self,
        event: DomainEvent,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Publish event to all registered handlers.

        Handler exceptions are logged but NOT propagated to the publisher.
        No handlers is a no-op.

        Args:
            event: Domain event to publish.
            metadata: Optional request metadata (request id, ...), available
                to handlers through ``get_metadata()``.
        """
        ...
