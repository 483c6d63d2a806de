"""Event bus adapter.

``InMemoryEventBus`` fans each event out to the handlers subscribed to its
exact type; a failing handler is logged and the others still run. The
logging and cache invalidation handlers are subscribed by
``src.core.container.events.get_event_bus``.
"""

from src.infrastructure.events.in_memory_event_bus import InMemoryEventBus

__all__ = ["InMemoryEventBus"]
