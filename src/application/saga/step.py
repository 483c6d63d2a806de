"""Saga step definition.

A step pairs a forward action with an optional compensating action. Both are
async callables taking the saga's shared, mutable context object.

A forward action fails when it raises or returns ``Failure``; any other
return value is success. Compensations follow the same rule.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

type StepAction[C] = Callable[[C], Awaitable[Any]]


@dataclass(frozen=True, slots=True)
class SagaStep[C]:
    """One step of a saga.

    Attributes:
        name: Step name, unique within its saga (used in logs and events).
        forward: Action that performs the step.
        compensate: Action that undoes a completed forward action. None for
            steps with nothing to undo (audit entries, reads).

    Example:
        >>> SagaStep(
        ...     "db_insert",
        ...     forward=insert_row,
        ...     compensate=delete_row,
        ... )
    """

    name: str
    forward: StepAction[C]
    compensate: StepAction[C] | None = None

    @property
    def compensable(self) -> bool:
        """Whether this step has a compensating action."""
        return self.compensate is not None
