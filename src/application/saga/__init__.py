"""Saga orchestration.

Usage:
    from src.application.saga import SagaOrchestrator, SagaStep
"""

from src.application.saga.execution import InvalidSagaTransition, SagaExecution
from src.application.saga.orchestrator import SagaAborted, SagaOrchestrator
from src.application.saga.step import SagaStep, StepAction

__all__ = [
    "InvalidSagaTransition",
    "SagaAborted",
    "SagaExecution",
    "SagaOrchestrator",
    "SagaStep",
    "StepAction",
]
