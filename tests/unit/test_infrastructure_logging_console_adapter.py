"""Unit tests for ConsoleAdapter (structured console logging).

Tests cover:
- LoggerProtocol methods forward message and context
- ``error=`` adds error_type and error_message
- bind returns a new adapter and leaves the original untouched

structlog is mocked; no output is produced.
"""

from unittest.mock import MagicMock, patch

import pytest

from src.infrastructure.logging.console_adapter import ConsoleAdapter


@pytest.fixture
def structlog_logger():
    with patch("src.infrastructure.logging.console_adapter.structlog") as mock_structlog:
        logger = MagicMock()
        mock_structlog.get_logger.return_value = logger
        yield logger


@pytest.mark.unit
class TestConsoleAdapterLogging:
    """Test ConsoleAdapter logging methods."""

    @pytest.mark.parametrize("level", ["debug", "info", "warning"])
    def test_forwards_message_and_context(self, structlog_logger, level):
        adapter = ConsoleAdapter()

        getattr(adapter, level)("permission_decision", user_id="u1", allowed=True)

        getattr(structlog_logger, level).assert_called_once_with(
            "permission_decision", user_id="u1", allowed=True
        )

    def test_error_adds_exception_fields(self, structlog_logger):
        adapter = ConsoleAdapter()

        adapter.error("saga_step_failed", error=RuntimeError("boom"), step="audit")

        structlog_logger.error.assert_called_once_with(
            "saga_step_failed",
            step="audit",
            error_type="RuntimeError",
            error_message="boom",
        )

    def test_critical_without_error(self, structlog_logger):
        adapter = ConsoleAdapter()

        adapter.critical("saga_compensation_incomplete", saga="gpg_key_create")

        structlog_logger.critical.assert_called_once_with(
            "saga_compensation_incomplete", saga="gpg_key_create"
        )


@pytest.mark.unit
class TestConsoleAdapterBinding:
    """Test context binding."""

    def test_bind_returns_new_adapter(self, structlog_logger):
        bound_logger = MagicMock()
        structlog_logger.bind.return_value = bound_logger
        adapter = ConsoleAdapter()

        bound = adapter.bind(trace_id="t-1")
        bound.info("event_publishing")

        assert bound is not adapter
        structlog_logger.bind.assert_called_once_with(trace_id="t-1")
        bound_logger.info.assert_called_once_with("event_publishing")
        structlog_logger.info.assert_not_called()

    def test_with_context_is_bind(self, structlog_logger):
        adapter = ConsoleAdapter()

        adapter.with_context(org_id="o1")

        structlog_logger.bind.assert_called_once_with(org_id="o1")
