"""Saga orchestrator.

Runs an ordered list of steps spanning independent subsystems (datastore,
tuple store, audit, ...) with compensating rollback.

Semantics:
    - Steps run strictly one after another; step N+1 starts only after
      step N succeeded.
    - On a forward failure every previously completed step is compensated
      in reverse completion order. The failed step is never compensated.
      Steps without a compensation are skipped.
    - Every compensation is attempted even when an earlier one fails.
      Compensation failures are logged and published, never surfaced as
      the outcome.
    - The outcome always carries the original forward error object.
    - Nothing is retried.
    - Cancellation during a step compensates the completed steps and then
      propagates.

Independent sagas share no state and may run concurrently.

Usage:
    orchestrator = SagaOrchestrator(logger=logger, event_bus=event_bus)

    result = await orchestrator.execute("gpg_key_create", context, steps)
    match result:
        case Success(value=execution):
            ...
        case Failure(error=failure):
            original = failure.cause

    # Raising variant
    await orchestrator.run("gpg_key_create", context, steps)
"""

import asyncio
from collections.abc import Sequence
from typing import Any

from src.application.saga.execution import SagaExecution
from src.application.saga.step import SagaStep, StepAction
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.enums import SagaState
from src.domain.errors import CompensationFailure, SagaStepFailure
from src.domain.events import (
    DomainEvent,
    SagaCompensated,
    SagaCompensationFailed,
    SagaCompleted,
    SagaStarted,
    SagaStepFailed,
)
from src.domain.protocols import EventBusProtocol, LoggerProtocol


class SagaAborted(Exception):
    """Raised by ``run`` when the failing step returned a ``Failure``.

    Raised exceptions are re-raised as themselves; a ``DomainError`` value is
    not an exception, so it travels inside this one.

    Attributes:
        failure: The step failure, whose ``cause`` is the original error.
    """

    def __init__(self, failure: SagaStepFailure) -> None:
        super().__init__(f"{failure.saga_name}.{failure.step_name}: {failure.cause}")
        self.failure = failure

    @property
    def cause(self) -> DomainError | BaseException:
        return self.failure.cause


async def _invoke(action: StepAction[Any], context: Any) -> DomainError | Exception | None:
    """Run an action; return its error, or None on success."""
    try:
        outcome = await action(context)
    except Exception as exc:
        return exc
    if isinstance(outcome, Failure):
        return outcome.error
    return None


def _describe(error: DomainError | BaseException) -> tuple[str, str]:
    return type(error).__name__, str(error)


class SagaOrchestrator:
    """Sequential step runner with reverse-order compensation.

    Attributes:
        _logger: Structured logger; each execution binds ``saga`` and
            ``saga_id``.
        _event_bus: Receives saga lifecycle events (fail-open).
    """

    def __init__(self, logger: LoggerProtocol, event_bus: EventBusProtocol) -> None:
        self._logger = logger
        self._event_bus = event_bus

    async def execute[C](
        self,
        name: str,
        context: C,
        steps: Sequence[SagaStep[C]],
    ) -> Result[SagaExecution, SagaStepFailure]:
        """Run the saga.

        Args:
            name: Saga name (logs and events).
            context: Caller-owned mutable object passed to every action.
            steps: Steps in run order.

        Returns:
            Success(execution) when every step succeeded.
            Failure(SagaStepFailure) whose ``cause`` is the original error
            of the failing step.

        Raises:
            asyncio.CancelledError: After compensating, when the running step
                was cancelled.
        """
        execution = SagaExecution(name=name, steps=tuple(steps))
        log = self._logger.bind(saga=name, saga_id=str(execution.id))

        execution.transition(SagaState.RUNNING)
        log.info("saga_started", steps=[step.name for step in execution.steps])
        await self._publish(
            SagaStarted(
                saga_name=name,
                step_names=tuple(step.name for step in execution.steps),
            )
        )

        for step in execution.steps:
            try:
                error = await _invoke(step.forward, context)
            except asyncio.CancelledError as cancelled:
                log.warning("saga_step_cancelled", step=step.name)
                execution.record_failure(step.name, cancelled)
                await self._compensate(execution, context, log)
                raise

            if error is None:
                execution.record_completed(step)
                log.debug("saga_step_completed", step=step.name)
                continue

            execution.record_failure(step.name, error)
            error_type, error_message = _describe(error)
            log.error(
                "saga_step_failed",
                error=error if isinstance(error, BaseException) else None,
                step=step.name,
                error_type=error_type,
                error_message=error_message,
            )
            await self._publish(
                SagaStepFailed(
                    saga_name=name,
                    step_name=step.name,
                    error_type=error_type,
                    error_message=error_message,
                )
            )
            await self._compensate(execution, context, log)
            return Failure(
                error=SagaStepFailure(
                    message=f"Saga '{name}' failed at step '{step.name}'",
                    saga_name=name,
                    step_name=step.name,
                    cause=error,
                    compensation_failures=tuple(execution.compensation_failures),
                    retryable=isinstance(error, DomainError) and error.retryable,
                )
            )

        execution.transition(SagaState.COMPLETED)
        log.info("saga_completed", steps=list(execution.completed_step_names))
        await self._publish(
            SagaCompleted(
                saga_name=name,
                completed_steps=execution.completed_step_names,
            )
        )
        return Success(value=execution)

    async def run[C](
        self,
        name: str,
        context: C,
        steps: Sequence[SagaStep[C]],
    ) -> SagaExecution:
        """Run the saga, raising on failure.

        Raises:
            Exception: The exact exception object raised by the failing step.
            SagaAborted: When the failing step returned a ``Failure``.
        """
        result = await self.execute(name, context, steps)
        match result:
            case Success(value=execution):
                return execution
            case Failure(error=failure):
                if isinstance(failure.cause, BaseException):
                    raise failure.cause
                raise SagaAborted(failure)

    async def _compensate(
        self,
        execution: SagaExecution,
        context: Any,
        log: LoggerProtocol,
    ) -> None:
        """Compensate completed steps in reverse completion order."""
        execution.transition(SagaState.COMPENSATING)

        for step in reversed(execution.completed):
            if step.compensate is None:
                log.debug("saga_compensation_skipped", step=step.name)
                continue

            error = await _invoke(step.compensate, context)
            if error is None:
                execution.compensated.append(step.name)
                log.info("saga_step_compensated", step=step.name)
                continue

            execution.compensation_failures.append(
                CompensationFailure(step_name=step.name, cause=error)
            )
            error_type, error_message = _describe(error)
            log.error(
                "saga_compensation_failed",
                error=error if isinstance(error, BaseException) else None,
                step=step.name,
                error_type=error_type,
                error_message=error_message,
            )
            await self._publish(
                SagaCompensationFailed(
                    saga_name=execution.name,
                    step_name=step.name,
                    error_type=error_type,
                    error_message=error_message,
                )
            )

        failed_names = tuple(f.step_name for f in execution.compensation_failures)
        if failed_names:
            execution.transition(SagaState.COMPENSATION_FAILED)
            log.critical(
                "saga_compensation_incomplete",
                failed_step=execution.failed_step,
                failed_compensations=list(failed_names),
            )
        else:
            execution.transition(SagaState.COMPENSATED)
            log.info(
                "saga_compensated",
                failed_step=execution.failed_step,
                compensated=list(execution.compensated),
            )

        await self._publish(
            SagaCompensated(
                saga_name=execution.name,
                failed_step=execution.failed_step or "",
                compensated_steps=tuple(execution.compensated),
                failed_compensations=failed_names,
            )
        )

    async def _publish(self, event: DomainEvent) -> None:
        await self._event_bus.publish(event)
