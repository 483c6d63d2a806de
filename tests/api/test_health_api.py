"""API tests for the /health endpoint.

Tests cover:
- Memory backend is always healthy
- Postgres backend reports degraded when the database does not answer
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from src.core.config import get_settings
from src.main import create_app


def postgres_app() -> TestClient:
    settings = get_settings().model_copy(update={"authz_backend": "postgres"})
    with patch("src.main.get_settings", return_value=settings):
        app = create_app()
    return TestClient(app)


@pytest.mark.api
class TestHealth:
    def test_memory_backend_is_healthy(self):
        response = TestClient(create_app()).get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_unreachable_database_is_degraded(self):
        database = MagicMock()
        database.ping = AsyncMock(return_value=False)

        with patch("src.main.get_database", return_value=database):
            response = postgres_app().get("/health")

        assert response.json() == {"status": "degraded", "database": "unreachable"}
        database.ping.assert_awaited_once()

    def test_reachable_database_is_healthy(self):
        database = MagicMock()
        database.ping = AsyncMock(return_value=True)

        with patch("src.main.get_database", return_value=database):
            response = postgres_app().get("/health")

        assert response.json() == {"status": "healthy"}
