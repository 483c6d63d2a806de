"""LoggerProtocol definition for structured logging.

Backend-agnostic structured logging port. Log calls carry an event name plus
key-value context; implementations render them (structlog console or JSON).

Context Binding:
    ``bind()`` returns a logger whose context is included in every later
    call. The saga orchestrator binds ``saga=<name>`` once per execution.

Security:
    Never log key material, tokens or passphrases. Subjects and object ids
    are fine.

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.info("access_granted", subject="user:u1", relation="viewer")

    saga_logger = logger.bind(saga="gpg_key_create")
    saga_logger.error("saga_step_failed", error=exc, step="db_insert")
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters."""

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message."""
        ...

    def error(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event name.
            error: Optional exception; implementations add error_type and
                error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: BaseException | None = None, **context: Any
    ) -> None:
        """Log a critical-level message.

        Used when rollback itself could not restore a consistent state
        (a saga ending in COMPENSATION_FAILED).
        """
        ...

    def bind(self, **context: Any) -> LoggerProtocol:
        """Return new logger with permanently bound context.

        The original logger instance remains unchanged.
        """
        ...

    def with_context(self, **context: Any) -> LoggerProtocol:
        """Alias for bind()."""
        ...
