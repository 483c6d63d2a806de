"""In-memory event bus implementation.

Dictionary-based handler registry (event type -> handlers) with fail-open,
concurrent dispatch. Suitable for a single process; a broker-backed adapter
can replace it behind EventBusProtocol.

Usage:
    >>> bus = InMemoryEventBus(logger=get_logger())
    >>> bus.subscribe(AccessGranted, invalidate_permissions)
    >>> await bus.publish(AccessGranted(subject="user:u1", ...))
"""

import asyncio
from collections import defaultdict

from src.domain.events.base_event import DomainEvent
from src.domain.protocols.event_bus_protocol import EventHandler
from src.domain.protocols.logger_protocol import LoggerProtocol


class InMemoryEventBus:
    """In-memory event bus with fail-open behavior.

    Handlers for an event run concurrently (asyncio.gather); a failing
    handler is logged at warning level and never reaches the publisher.

    Attributes:
        _handlers: Event class -> async handlers.
        _logger: Logger for handler failures.
        _metadata: Metadata of the event currently being published.
    """

    def __init__(self, logger: LoggerProtocol) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)
        self._logger = logger
        self._metadata: dict[str, str] = {}

    def subscribe(
        self,
        event_type: type[DomainEvent],
        handler: EventHandler,
    ) -> None:
        """Register event handler for an exact event type."""
        self._handlers[event_type].append(handler)

    def handler_count(self, event_type: type[DomainEvent]) -> int:
        return len(self._handlers.get(event_type, []))

    def get_metadata(self) -> dict[str, str]:
        """Metadata passed with the event being published."""
        return dict(self._metadata)

    async def publish(
        self,
        event: DomainEvent,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Publish event to all registered handlers. Never raises."""
        event_type = type(event)
        handlers = self._handlers.get(event_type, [])

        if not handlers:
            return

        self._metadata = dict(metadata or {})
        self._logger.debug(
            "event_publishing",
            event_type=event_type.__name__,
            event_id=str(event.event_id),
            handler_count=len(handlers),
        )

        results = await asyncio.gather(
            *(handler(event) for handler in handlers),
            return_exceptions=True,
        )

        for handler, result in zip(handlers, results, strict=True):
            if isinstance(result, Exception):
                self._logger.warning(
                    "event_handler_failed",
                    event_type=event_type.__name__,
                    event_id=str(event.event_id),
                    handler_name=getattr(handler, "__name__", repr(handler)),
                    error_type=type(result).__name__,
                    error_message=str(result),
                )
