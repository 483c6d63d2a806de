"""Base error class for Railway-Oriented Programming.

DomainError is the base of every error value in the package. Errors flow
through the system as data inside ``Failure``, never as raised exceptions.

Usage:
    from src.core.errors import DomainError

    @dataclass(frozen=True, slots=True, kw_only=True)
    class MyError(DomainError):
        pass  # Inherits code, message, details
"""

from dataclasses import dataclass
from typing import Any

from src.core.enums import ErrorCode


@dataclass(frozen=True, slots=True, kw_only=True)
class DomainError:
    """Base error (does NOT inherit from Exception).

    Attributes:
        code: Machine-readable error code.
        message: Human-readable error message.
        details: Optional context for debugging.
        retryable: Whether the caller may retry the same operation.
    """

    code: ErrorCode
    message: str
    details: dict[str, Any] | None = None
    retryable: bool = False

    def __str__(self) -> str:
        """String representation of error."""
        return f"{self.code.value}: {self.message}"
