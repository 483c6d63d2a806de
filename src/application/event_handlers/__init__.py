"""Application event handlers (reactions to domain events)."""

from src.application.event_handlers.permission_cache_event_handler import (
    PermissionCacheEventHandler,
)

__all__ = ["PermissionCacheEventHandler"]
