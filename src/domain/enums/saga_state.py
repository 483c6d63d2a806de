"""Saga execution states.

Transitions:
    IDLE -> RUNNING
    RUNNING -> COMPLETED
    RUNNING -> COMPENSATING
    COMPENSATING -> COMPENSATED | COMPENSATION_FAILED
"""

from enum import Enum


class SagaState(str, Enum):
    """Lifecycle state of a single saga execution."""

    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    COMPENSATING = "compensating"
    COMPENSATED = "compensated"
    COMPENSATION_FAILED = "compensation_failed"
