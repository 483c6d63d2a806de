"""Shared pytest fixtures.

Every fixture builds fresh in-memory collaborators, so tests never share
tuples, memberships or cached snapshots. Async tests run on the
function-scoped loop configured in pyproject.toml.
"""

import asyncio
from unittest.mock import MagicMock

import pytest

from src.application.saga import SagaOrchestrator
from src.infrastructure.audit.in_memory_adapter import InMemoryAuditAdapter
from src.infrastructure.authorization import (
    InMemoryTeamMembershipStore,
    InMemoryTupleStore,
    RebacAuthorizer,
)
from src.infrastructure.cache.permission_cache import InMemoryPermissionCache
from src.infrastructure.events import InMemoryEventBus
from src.infrastructure.persistence.repositories.in_memory_repositories import (
    InMemoryGpgKeyRepository,
    InMemoryRoleRepository,
)


@pytest.fixture
def mock_logger():
    """LoggerProtocol double. ``bind`` returns the same mock so calls are visible."""
    logger = MagicMock()
    logger.bind.return_value = logger
    logger.with_context.return_value = logger
    return logger


@pytest.fixture
def tuple_store():
    return InMemoryTupleStore()


@pytest.fixture
def team_store():
    return InMemoryTeamMembershipStore()


@pytest.fixture
def authorizer(tuple_store, team_store, mock_logger):
    return RebacAuthorizer(
        tuple_store=tuple_store,
        team_store=team_store,
        logger=mock_logger,
        max_parent_depth=3,
    )


@pytest.fixture
def event_bus(mock_logger):
    return InMemoryEventBus(logger=mock_logger)


@pytest.fixture
def orchestrator(mock_logger, event_bus):
    return SagaOrchestrator(logger=mock_logger, event_bus=event_bus)


@pytest.fixture
def audit():
    return InMemoryAuditAdapter()


@pytest.fixture
def role_repository():
    return InMemoryRoleRepository()


@pytest.fixture
def gpg_key_repository():
    return InMemoryGpgKeyRepository()


@pytest.fixture
def permission_cache():
    return InMemoryPermissionCache()


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with in-memory or mocked dependencies")
    config.addinivalue_line("markers", "api: HTTP tests through the FastAPI app")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)
