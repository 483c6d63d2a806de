"""Repository and collaborator factories.

Backend selection follows ``AUTHZ_BACKEND``:
    - 'memory': in-process adapters (tests, local development)
    - 'postgres': SQLAlchemy adapters sharing the app Database
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import get_settings
from src.core.container.infrastructure import get_database, get_logger

if TYPE_CHECKING:
    from src.domain.protocols import (
        AuditProtocol,
        GpgKeyRepository,
        RoleRepository,
        TeamMembershipProtocol,
        TupleStoreProtocol,
        WebhookProtocol,
    )


@lru_cache()
def get_tuple_store() -> "TupleStoreProtocol":
    """Relation tuple store singleton."""
    if get_settings().uses_postgres_backend:
        from src.infrastructure.authorization import PostgresTupleStore

        return PostgresTupleStore(database=get_database(), logger=get_logger())

    from src.infrastructure.authorization import InMemoryTupleStore

    return InMemoryTupleStore()


@lru_cache()
def get_team_store() -> "TeamMembershipProtocol":
    """Team membership store singleton."""
    if get_settings().uses_postgres_backend:
        from src.infrastructure.authorization import PostgresTeamMembershipStore

        return PostgresTeamMembershipStore(database=get_database(), logger=get_logger())

    from src.infrastructure.authorization import InMemoryTeamMembershipStore

    return InMemoryTeamMembershipStore()


@lru_cache()
def get_role_repository() -> "RoleRepository":
    """Role and role assignment repository singleton."""
    if get_settings().uses_postgres_backend:
        from src.infrastructure.persistence.repositories import PostgresRoleRepository

        return PostgresRoleRepository(database=get_database(), logger=get_logger())

    from src.infrastructure.persistence.repositories import InMemoryRoleRepository

    return InMemoryRoleRepository()


@lru_cache()
def get_gpg_key_repository() -> "GpgKeyRepository":
    """GPG key metadata repository singleton."""
    if get_settings().uses_postgres_backend:
        from src.infrastructure.persistence.repositories import (
            PostgresGpgKeyRepository,
        )

        return PostgresGpgKeyRepository(database=get_database(), logger=get_logger())

    from src.infrastructure.persistence.repositories import InMemoryGpgKeyRepository

    return InMemoryGpgKeyRepository()


@lru_cache()
def get_audit() -> "AuditProtocol":
    """Audit trail adapter singleton."""
    if get_settings().uses_postgres_backend:
        from src.infrastructure.audit import PostgresAuditAdapter

        return PostgresAuditAdapter(database=get_database())

    from src.infrastructure.audit import InMemoryAuditAdapter

    return InMemoryAuditAdapter()


@lru_cache()
def get_webhook_dispatcher() -> "WebhookProtocol":
    """Webhook dispatcher singleton. A no-op when WEBHOOK_URL is unset."""
    from src.infrastructure.webhooks import HttpxWebhookDispatcher

    settings = get_settings()
    return HttpxWebhookDispatcher(
        url=settings.webhook_url,
        logger=get_logger(),
        timeout=settings.webhook_timeout_seconds,
    )
