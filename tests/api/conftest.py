"""API test fixtures.

Each test gets a fresh app whose container factories are overridden with
in-memory collaborators from the root conftest. Identity is placed on
``request.state`` by a test middleware reading ``X-Test-User`` and
``X-Test-Org``, standing in for the upstream authenticator.

The lifespan is not run (TestClient is not used as a context manager).
"""

import asyncio

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

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
from src.application.services import EffectivePermissionsService, PermissionGate
from src.core import container
from src.domain.entities import ObjectRef, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType
from src.infrastructure.cache import InMemoryPermissionCache
from src.infrastructure.webhooks import HttpxWebhookDispatcher
from src.main import create_app


def grant(authorizer, user_id: str, relation: Relation, object_type: ObjectType, object_id: str):
    """Seed a user tuple outside the app's event loop."""
    asyncio.run(
        authorizer.grant(
            SubjectRef(subject_type=SubjectType.USER, subject_id=user_id),
            relation,
            ObjectRef(object_type=object_type, object_id=object_id),
        )
    )


def link(authorizer, object_type: ObjectType, object_id: str, org_id: str = "o1"):
    """Seed a structural child -> org link."""
    asyncio.run(
        authorizer.link_parent(
            ObjectRef(object_type=object_type, object_id=object_id),
            ObjectRef(object_type=ObjectType.ORG, object_id=org_id),
        )
    )


def identity(user_id: str = "u1", org_id: str = "o1") -> dict[str, str]:
    return {"X-Test-User": user_id, "X-Test-Org": org_id}


@pytest.fixture
def app(
    authorizer,
    tuple_store,
    team_store,
    role_repository,
    gpg_key_repository,
    audit,
    orchestrator,
    event_bus,
    mock_logger,
) -> FastAPI:
    app = create_app()

    @app.middleware("http")
    async def test_identity(request: Request, call_next):
        request.state.user_id = request.headers.get("X-Test-User")
        request.state.org_id = request.headers.get("X-Test-Org")
        return await call_next(request)

    service = EffectivePermissionsService(
        authorization=authorizer,
        roles=role_repository,
        cache=InMemoryPermissionCache(),
        logger=mock_logger,
    )
    webhooks = HttpxWebhookDispatcher(url=None, logger=mock_logger)
    gate = PermissionGate(authorization=authorizer, event_bus=event_bus, logger=mock_logger)

    overrides = {
        container.get_authorization: lambda: authorizer,
        container.get_permission_gate: lambda: gate,
        container.get_effective_permissions_service: lambda: service,
        container.get_grant_access_handler: lambda: GrantAccessHandler(
            authorizer, audit, orchestrator, event_bus, mock_logger
        ),
        container.get_revoke_access_handler: lambda: RevokeAccessHandler(
            authorizer, audit, orchestrator, event_bus, mock_logger
        ),
        container.get_link_resource_handler: lambda: LinkResourceHandler(
            tuple_store, authorizer, mock_logger
        ),
        container.get_add_team_member_handler: lambda: AddTeamMemberHandler(
            team_store, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
        ),
        container.get_remove_team_member_handler: lambda: RemoveTeamMemberHandler(
            team_store, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
        ),
        container.get_assign_role_handler: lambda: AssignRoleHandler(
            role_repository, tuple_store, authorizer, audit, orchestrator, event_bus, mock_logger
        ),
        container.get_create_default_roles_handler: lambda: CreateDefaultRolesHandler(
            role_repository, audit, orchestrator
        ),
        container.get_create_gpg_key_handler: lambda: CreateGpgKeyHandler(
            gpg_key_repository, authorizer, audit, orchestrator, event_bus, webhooks, mock_logger
        ),
        container.get_delete_gpg_key_handler: lambda: DeleteGpgKeyHandler(
            gpg_key_repository,
            tuple_store,
            authorizer,
            audit,
            orchestrator,
            event_bus,
            webhooks,
            mock_logger,
        ),
    }
    app.dependency_overrides.update(overrides)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
