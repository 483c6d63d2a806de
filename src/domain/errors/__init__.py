"""Domain errors package.

Usage:
    from src.domain.errors import AuditError, SagaStepFailure
"""

from src.domain.errors.audit_error import AuditError
from src.domain.errors.saga_error import CompensationFailure, SagaStepFailure

__all__ = [
    "AuditError",
    "CompensationFailure",
    "SagaStepFailure",
]
