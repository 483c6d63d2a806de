"""Core errors package.

Usage:
    from src.core.errors import DomainError, ValidationError, UnavailableError
"""

from src.core.errors.common_errors import (
    ConflictError,
    MissingResourceError,
    NotFoundError,
    PermissionDeniedError,
    UnavailableError,
    ValidationError,
)
from src.core.errors.domain_error import DomainError

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "PermissionDeniedError",
    "MissingResourceError",
    "UnavailableError",
]
