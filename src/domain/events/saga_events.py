"""Saga lifecycle events.

Published by the saga orchestrator. Compensation failures are reported here
and in the log; they never replace the original step failure.
"""

from dataclasses import dataclass

from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class SagaStarted(DomainEvent):
    """Saga execution began."""

    saga_name: str
    step_names: tuple[str, ...]


@dataclass(frozen=True, kw_only=True, slots=True)
class SagaCompleted(DomainEvent):
    """All forward steps succeeded."""

    saga_name: str
    completed_steps: tuple[str, ...]


@dataclass(frozen=True, kw_only=True, slots=True)
class SagaStepFailed(DomainEvent):
    """A forward step failed; compensation follows."""

    saga_name: str
    step_name: str
    error_type: str
    error_message: str


@dataclass(frozen=True, kw_only=True, slots=True)
class SagaCompensationFailed(DomainEvent):
    """A compensating action failed. Rollback continued with earlier steps."""

    saga_name: str
    step_name: str
    error_type: str
    error_message: str


@dataclass(frozen=True, kw_only=True, slots=True)
class SagaCompensated(DomainEvent):
    """Rollback finished.

    Attributes:
        compensated_steps: Steps whose compensation succeeded, in run order.
        failed_compensations: Steps whose compensation failed.
    """

    saga_name: str
    failed_step: str
    compensated_steps: tuple[str, ...]
    failed_compensations: tuple[str, ...] = ()
