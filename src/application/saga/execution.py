"""Saga execution record and state machine.

States:
    IDLE -> RUNNING -> COMPLETED
    RUNNING -> COMPENSATING -> COMPENSATED | COMPENSATION_FAILED

An execution lives for one orchestrator call and has no persistent identity
beyond its id in logs and events.
"""

from dataclasses import dataclass, field
from typing import Any
from uuid import UUID

from uuid_extensions import uuid7

from src.application.saga.step import SagaStep
from src.core.errors import DomainError
from src.domain.enums import SagaState
from src.domain.errors import CompensationFailure

_TRANSITIONS: dict[SagaState, frozenset[SagaState]] = {
    SagaState.IDLE: frozenset({SagaState.RUNNING}),
    SagaState.RUNNING: frozenset({SagaState.COMPLETED, SagaState.COMPENSATING}),
    SagaState.COMPENSATING: frozenset(
        {SagaState.COMPENSATED, SagaState.COMPENSATION_FAILED}
    ),
}


class InvalidSagaTransition(RuntimeError):
    """Raised on an illegal state change (a bug in the orchestrator)."""


@dataclass(slots=True, kw_only=True)
class SagaExecution:
    """Ordered steps, completed-step record and terminal outcome.

    Attributes:
        name: Saga name.
        steps: Steps in run order.
        id: Execution id for log correlation.
        state: Current state.
        completed: Steps whose forward action succeeded, in completion order.
        compensated: Steps whose compensation succeeded, in run order.
        failed_step: Name of the step whose forward action failed.
        error: Original error of the failed step.
        compensation_failures: Compensations that failed.
    """

    name: str
    steps: tuple[SagaStep[Any], ...]
    id: UUID = field(default_factory=uuid7)
    state: SagaState = SagaState.IDLE
    completed: list[SagaStep[Any]] = field(default_factory=list)
    compensated: list[str] = field(default_factory=list)
    failed_step: str | None = None
    error: DomainError | BaseException | None = None
    compensation_failures: list[CompensationFailure] = field(default_factory=list)

    def transition(self, target: SagaState) -> None:
        if target not in _TRANSITIONS.get(self.state, frozenset()):
            raise InvalidSagaTransition(
                f"saga {self.name}: {self.state.value} -> {target.value}"
            )
        self.state = target

    def record_completed(self, step: SagaStep[Any]) -> None:
        self.completed.append(step)

    def record_failure(self, step_name: str, error: DomainError | BaseException) -> None:
        self.failed_step = step_name
        self.error = error

    @property
    def completed_step_names(self) -> tuple[str, ...]:
        return tuple(step.name for step in self.completed)

    @property
    def succeeded(self) -> bool:
        return self.state is SagaState.COMPLETED
