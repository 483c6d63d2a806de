"""Container module - Centralized dependency injection.

Re-exports every factory so callers import from one place:

    from src.core.container import get_authorization, get_permission_gate

The container is organized into modules by concern:
- infrastructure: logger, database, redis
- repositories: stores, repositories, audit, webhook dispatcher
- authorization: checker, permission cache, aggregator, gate
- events: event bus and subscriptions
- handlers: saga orchestrator and command handler factories
"""

from src.core.container.authorization import (
    get_authorization,
    get_effective_permissions_service,
    get_permission_cache,
    get_permission_gate,
)
from src.core.container.events import get_event_bus
from src.core.container.handlers import (
    get_add_team_member_handler,
    get_assign_role_handler,
    get_create_default_roles_handler,
    get_create_gpg_key_handler,
    get_delete_gpg_key_handler,
    get_grant_access_handler,
    get_link_resource_handler,
    get_remove_team_member_handler,
    get_revoke_access_handler,
    get_saga_orchestrator,
)
from src.core.container.infrastructure import get_database, get_logger, get_redis
from src.core.container.repositories import (
    get_audit,
    get_gpg_key_repository,
    get_role_repository,
    get_team_store,
    get_tuple_store,
    get_webhook_dispatcher,
)

__all__ = [
    # Infrastructure
    "get_database",
    "get_logger",
    "get_redis",
    # Repositories and collaborators
    "get_audit",
    "get_gpg_key_repository",
    "get_role_repository",
    "get_team_store",
    "get_tuple_store",
    "get_webhook_dispatcher",
    # Authorization
    "get_authorization",
    "get_effective_permissions_service",
    "get_permission_cache",
    "get_permission_gate",
    # Events
    "get_event_bus",
    # Handlers
    "get_add_team_member_handler",
    "get_assign_role_handler",
    "get_create_default_roles_handler",
    "get_create_gpg_key_handler",
    "get_delete_gpg_key_handler",
    "get_grant_access_handler",
    "get_link_resource_handler",
    "get_remove_team_member_handler",
    "get_revoke_access_handler",
    "get_saga_orchestrator",
]
