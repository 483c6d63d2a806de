"""Saga error types.

A forward step failure is surfaced to the caller as ``SagaStepFailure``
whose ``cause`` is the original error object (a ``DomainError`` returned in
a ``Failure`` or the raised exception), never a wrapper or a compensation
error. Compensation failures are collected alongside, for logging only.

Usage:
    result = await orchestrator.execute("gpg_key_create", context, steps)
    match result:
        case Failure(error=SagaStepFailure(cause=cause)):
            ...  # cause is exactly what the failing step produced
"""

from dataclasses import dataclass, field

from src.core.enums import ErrorCode
from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class CompensationFailure:
    """A compensating action that failed. Logged, never surfaced as the outcome.

    Attributes:
        step_name: Step whose compensation failed.
        cause: Error returned or raised by the compensation.
    """

    step_name: str
    cause: DomainError | BaseException


@dataclass(frozen=True, slots=True, kw_only=True)
class SagaStepFailure(DomainError):
    """Forward step failure of a saga.

    Attributes:
        saga_name: Name of the saga that failed.
        step_name: Step whose forward action failed.
        cause: The original error object of the failing step.
        compensation_failures: Compensations that failed during rollback.
    """

    code: ErrorCode = ErrorCode.SAGA_STEP_FAILED
    saga_name: str
    step_name: str
    cause: DomainError | BaseException
    compensation_failures: tuple[CompensationFailure, ...] = field(
        default_factory=tuple
    )
