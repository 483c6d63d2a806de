"""Unit tests for SagaOrchestrator.

Tests cover:
- Sequential execution and the completed outcome
- Reverse-order compensation of completed steps only
- Steps without compensation are skipped
- The outcome carries the original error even when a compensation fails
- Raised exceptions and returned Failures are both step failures
- Cancellation compensates and propagates
- run() re-raises the original exception
- Lifecycle events on the bus
"""

import asyncio
from dataclasses import dataclass, field

import pytest

from src.application.saga import SagaAborted, SagaOrchestrator, SagaStep
from src.core.enums import ErrorCode
from src.core.errors import UnavailableError
from src.core.result import Failure, Success
from src.domain.enums import SagaState
from src.domain.errors import AuditError, SagaStepFailure
from src.domain.events import SagaCompensated, SagaCompensationFailed, SagaStepFailed


@dataclass
class Journal:
    calls: list[str] = field(default_factory=list)


def recording_step(name: str, *, compensable: bool = True) -> SagaStep[Journal]:
    async def forward(journal: Journal) -> None:
        journal.calls.append(f"do:{name}")

    async def compensate(journal: Journal) -> None:
        journal.calls.append(f"undo:{name}")

    return SagaStep(name, forward=forward, compensate=compensate if compensable else None)


def failing_step(name: str, error) -> SagaStep[Journal]:
    async def forward(journal: Journal):
        journal.calls.append(f"do:{name}")
        if isinstance(error, BaseException):
            raise error
        return Failure(error=error)

    async def compensate(journal: Journal) -> None:
        journal.calls.append(f"undo:{name}")

    return SagaStep(name, forward=forward, compensate=compensate)


AUDIT_DOWN = AuditError(code=ErrorCode.AUDIT_RECORD_FAILED, message="audit db down")


@pytest.mark.unit
class TestSagaSuccess:
    @pytest.mark.asyncio
    async def test_runs_steps_in_order(self, orchestrator):
        journal = Journal()

        result = await orchestrator.execute(
            "demo", journal, [recording_step("a"), recording_step("b"), recording_step("c")]
        )

        assert isinstance(result, Success)
        assert result.value.state is SagaState.COMPLETED
        assert result.value.completed_step_names == ("a", "b", "c")
        assert journal.calls == ["do:a", "do:b", "do:c"]

    @pytest.mark.asyncio
    async def test_empty_saga_completes(self, orchestrator):
        result = await orchestrator.execute("empty", Journal(), [])

        assert isinstance(result, Success)
        assert result.value.succeeded


@pytest.mark.unit
class TestSagaCompensation:
    @pytest.mark.asyncio
    async def test_compensates_completed_steps_in_reverse(self, orchestrator):
        # Arrange
        journal = Journal()
        steps = [recording_step("a"), recording_step("b"), failing_step("c", AUDIT_DOWN)]

        # Act
        result = await orchestrator.execute("demo", journal, steps)

        # Assert: the failed step itself is never compensated
        assert journal.calls == ["do:a", "do:b", "do:c", "undo:b", "undo:a"]
        assert isinstance(result, Failure)
        assert result.error.step_name == "c"
        assert result.error.saga_name == "demo"

    @pytest.mark.asyncio
    async def test_later_steps_never_run(self, orchestrator):
        journal = Journal()

        await orchestrator.execute(
            "demo", journal, [failing_step("a", AUDIT_DOWN), recording_step("b")]
        )

        assert journal.calls == ["do:a"]

    @pytest.mark.asyncio
    async def test_non_compensable_step_is_skipped(self, orchestrator):
        journal = Journal()
        steps = [
            recording_step("a"),
            recording_step("audit", compensable=False),
            failing_step("c", AUDIT_DOWN),
        ]

        await orchestrator.execute("demo", journal, steps)

        assert journal.calls == ["do:a", "do:audit", "do:c", "undo:a"]

    @pytest.mark.asyncio
    async def test_outcome_is_original_error_object(self, orchestrator):
        result = await orchestrator.execute(
            "demo", Journal(), [recording_step("a"), failing_step("b", AUDIT_DOWN)]
        )

        assert isinstance(result.error, SagaStepFailure)
        assert result.error.cause is AUDIT_DOWN
        assert result.error.retryable is True

    @pytest.mark.asyncio
    async def test_raised_exception_is_cause(self, orchestrator):
        boom = RuntimeError("boom")

        result = await orchestrator.execute("demo", Journal(), [failing_step("a", boom)])

        assert result.error.cause is boom
        assert result.error.retryable is False

    @pytest.mark.asyncio
    async def test_failing_compensation_keeps_original_error(self, orchestrator):
        # Arrange: b's compensation raises, a's must still run
        journal = Journal()

        async def broken_undo(j: Journal) -> None:
            j.calls.append("undo:b")
            raise ConnectionError("tuple store gone")

        async def do_b(j: Journal) -> None:
            j.calls.append("do:b")

        steps = [
            recording_step("a"),
            SagaStep("b", forward=do_b, compensate=broken_undo),
            failing_step("c", AUDIT_DOWN),
        ]

        # Act
        result = await orchestrator.execute("demo", journal, steps)

        # Assert
        assert journal.calls == ["do:a", "do:b", "do:c", "undo:b", "undo:a"]
        assert result.error.cause is AUDIT_DOWN
        assert [f.step_name for f in result.error.compensation_failures] == ["b"]
        assert isinstance(result.error.compensation_failures[0].cause, ConnectionError)

    @pytest.mark.asyncio
    async def test_compensation_returning_failure_is_collected(self, orchestrator):
        unavailable = UnavailableError(
            code=ErrorCode.TUPLE_STORE_UNAVAILABLE, message="down", dependency="tuple_store"
        )

        async def undo(_: Journal):
            return Failure(error=unavailable)

        async def do(_: Journal) -> None:
            return None

        result = await orchestrator.execute(
            "demo",
            Journal(),
            [SagaStep("a", forward=do, compensate=undo), failing_step("b", AUDIT_DOWN)],
        )

        assert result.error.cause is AUDIT_DOWN
        assert result.error.compensation_failures[0].cause is unavailable


@pytest.mark.unit
class TestSagaEvents:
    @pytest.mark.asyncio
    async def test_publishes_failure_and_compensation_events(self, orchestrator, event_bus):
        # Arrange
        seen = []

        async def collect(event) -> None:
            seen.append(event)

        for event_type in (SagaStepFailed, SagaCompensationFailed, SagaCompensated):
            event_bus.subscribe(event_type, collect)

        # Act
        await orchestrator.execute(
            "demo", Journal(), [recording_step("a"), failing_step("b", AUDIT_DOWN)]
        )

        # Assert
        assert [type(e) for e in seen] == [SagaStepFailed, SagaCompensated]
        assert seen[0].step_name == "b"
        assert seen[1].compensated_steps == ("a",)
        assert seen[1].failed_compensations == ()

    @pytest.mark.asyncio
    async def test_logs_saga_failure(self, orchestrator, mock_logger):
        await orchestrator.execute("demo", Journal(), [failing_step("a", AUDIT_DOWN)])

        mock_logger.bind.assert_called()
        events = [c.args[0] for c in mock_logger.error.call_args_list]
        assert "saga_step_failed" in events


@pytest.mark.unit
class TestSagaCancellation:
    @pytest.mark.asyncio
    async def test_cancellation_compensates_then_propagates(self, orchestrator):
        # Arrange
        journal = Journal()
        started = asyncio.Event()

        async def hang(j: Journal) -> None:
            j.calls.append("do:slow")
            started.set()
            await asyncio.sleep(3600)

        steps = [recording_step("a"), SagaStep("slow", forward=hang)]
        task = asyncio.create_task(orchestrator.execute("demo", journal, steps))
        await started.wait()

        # Act
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        # Assert
        assert journal.calls == ["do:a", "do:slow", "undo:a"]


@pytest.mark.unit
class TestSagaRun:
    @pytest.mark.asyncio
    async def test_run_reraises_original_exception(self, orchestrator):
        boom = ValueError("bad row")

        with pytest.raises(ValueError) as exc_info:
            await orchestrator.run("demo", Journal(), [failing_step("a", boom)])

        assert exc_info.value is boom

    @pytest.mark.asyncio
    async def test_run_wraps_returned_failure(self, orchestrator):
        with pytest.raises(SagaAborted) as exc_info:
            await orchestrator.run("demo", Journal(), [failing_step("a", AUDIT_DOWN)])

        assert exc_info.value.cause is AUDIT_DOWN

    @pytest.mark.asyncio
    async def test_run_returns_execution(self, orchestrator):
        execution = await orchestrator.run("demo", Journal(), [recording_step("a")])

        assert execution.succeeded


@pytest.mark.unit
class TestSagaIndependence:
    @pytest.mark.asyncio
    async def test_concurrent_sagas_do_not_share_state(self, mock_logger, event_bus):
        orchestrator = SagaOrchestrator(logger=mock_logger, event_bus=event_bus)
        first, second = Journal(), Journal()

        results = await asyncio.gather(
            orchestrator.execute("one", first, [recording_step("a"), failing_step("b", AUDIT_DOWN)]),
            orchestrator.execute("two", second, [recording_step("x")]),
        )

        assert isinstance(results[0], Failure)
        assert isinstance(results[1], Success)
        assert first.calls == ["do:a", "do:b", "undo:a"]
        assert second.calls == ["do:x"]
