"""Command handler factories.

Handlers are request-scoped (new instance per request) but every
collaborator they receive is an app-scoped singleton.

Usage:
    @router.post("/gpg-keys")
    async def create_gpg_key(
        handler: CreateGpgKeyHandler = Depends(get_create_gpg_key_handler),
    ): ...
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.container.authorization import get_authorization
from src.core.container.events import get_event_bus
from src.core.container.infrastructure import get_logger
from src.core.container.repositories import (
    get_audit,
    get_gpg_key_repository,
    get_role_repository,
    get_team_store,
    get_tuple_store,
    get_webhook_dispatcher,
)

if TYPE_CHECKING:
    from src.application.commands.handlers.assign_role_handler import (
        AssignRoleHandler,
        CreateDefaultRolesHandler,
    )
    from src.application.commands.handlers.gpg_key_handler import (
        CreateGpgKeyHandler,
        DeleteGpgKeyHandler,
    )
    from src.application.commands.handlers.grant_access_handler import (
        GrantAccessHandler,
        RevokeAccessHandler,
    )
    from src.application.commands.handlers.link_resource_handler import (
        LinkResourceHandler,
    )
    from src.application.commands.handlers.team_member_handler import (
        AddTeamMemberHandler,
        RemoveTeamMemberHandler,
    )
    from src.application.saga import SagaOrchestrator


@lru_cache()
def get_saga_orchestrator() -> "SagaOrchestrator":
    """Saga orchestrator singleton. Holds no per-saga state."""
    from src.application.saga import SagaOrchestrator

    return SagaOrchestrator(logger=get_logger(), event_bus=get_event_bus())


def get_grant_access_handler() -> "GrantAccessHandler":
    from src.application.commands.handlers.grant_access_handler import (
        GrantAccessHandler,
    )

    return GrantAccessHandler(
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


def get_revoke_access_handler() -> "RevokeAccessHandler":
    from src.application.commands.handlers.grant_access_handler import (
        RevokeAccessHandler,
    )

    return RevokeAccessHandler(
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


def get_add_team_member_handler() -> "AddTeamMemberHandler":
    from src.application.commands.handlers.team_member_handler import (
        AddTeamMemberHandler,
    )

    return AddTeamMemberHandler(
        teams=get_team_store(),
        tuples=get_tuple_store(),
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


def get_remove_team_member_handler() -> "RemoveTeamMemberHandler":
    from src.application.commands.handlers.team_member_handler import (
        RemoveTeamMemberHandler,
    )

    return RemoveTeamMemberHandler(
        teams=get_team_store(),
        tuples=get_tuple_store(),
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


def get_assign_role_handler() -> "AssignRoleHandler":
    from src.application.commands.handlers.assign_role_handler import (
        AssignRoleHandler,
    )

    return AssignRoleHandler(
        roles=get_role_repository(),
        tuples=get_tuple_store(),
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        logger=get_logger(),
    )


def get_create_default_roles_handler() -> "CreateDefaultRolesHandler":
    from src.application.commands.handlers.assign_role_handler import (
        CreateDefaultRolesHandler,
    )

    return CreateDefaultRolesHandler(
        roles=get_role_repository(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
    )


def get_link_resource_handler() -> "LinkResourceHandler":
    from src.application.commands.handlers.link_resource_handler import (
        LinkResourceHandler,
    )

    return LinkResourceHandler(
        tuples=get_tuple_store(),
        authorization=get_authorization(),
        logger=get_logger(),
    )


def get_create_gpg_key_handler() -> "CreateGpgKeyHandler":
    from src.application.commands.handlers.gpg_key_handler import CreateGpgKeyHandler

    return CreateGpgKeyHandler(
        gpg_keys=get_gpg_key_repository(),
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        webhooks=get_webhook_dispatcher(),
        logger=get_logger(),
    )


def get_delete_gpg_key_handler() -> "DeleteGpgKeyHandler":
    from src.application.commands.handlers.gpg_key_handler import DeleteGpgKeyHandler

    return DeleteGpgKeyHandler(
        gpg_keys=get_gpg_key_repository(),
        tuples=get_tuple_store(),
        authorization=get_authorization(),
        audit=get_audit(),
        orchestrator=get_saga_orchestrator(),
        event_bus=get_event_bus(),
        webhooks=get_webhook_dispatcher(),
        logger=get_logger(),
    )
