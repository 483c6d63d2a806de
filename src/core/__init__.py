"""Core shared kernel.

Foundational utilities used across all architectural layers:
- Result types for railway-oriented programming
- Base error classes for error values
- Settings

The core module has NO dependencies on other application layers.
"""

from src.core.enums import ErrorCode
from src.core.errors import (
    ConflictError,
    DomainError,
    MissingResourceError,
    NotFoundError,
    PermissionDeniedError,
    UnavailableError,
    ValidationError,
)
from src.core.result import Failure, Result, Success

__all__ = [
    "ConflictError",
    "DomainError",
    "ErrorCode",
    "Failure",
    "MissingResourceError",
    "NotFoundError",
    "PermissionDeniedError",
    "Result",
    "Success",
    "UnavailableError",
    "ValidationError",
]
