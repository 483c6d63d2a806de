"""Unit tests for PermissionGate.

Tests cover:
- Object id resolution order (path, query, body, org)
- ALLOWED / DENIED decisions
- Fail-closed reasons: MISSING_RESOURCE, INVALID_ARGUMENT, UNAVAILABLE
- Every decision is published as PermissionDecisionRecorded
"""

from unittest.mock import AsyncMock

import pytest

from src.application.services import PermissionGate, PermissionRequest, resolve_object_id
from src.core.enums import ErrorCode
from src.core.errors import MissingResourceError, UnavailableError
from src.core.result import Failure
from src.domain.entities import ObjectRef, SubjectRef
from src.domain.enums import DecisionReason, ObjectType, Relation, SubjectType
from src.domain.events import PermissionDecisionRecorded


def request_for(**overrides) -> PermissionRequest:
    fields = {
        "user_id": "u1",
        "org_id": "o1",
        "relation": Relation.CAN_EDIT,
        "object_type": ObjectType.APP,
        "object_id_param": "app_id",
    }
    fields.update(overrides)
    return PermissionRequest(**fields)


@pytest.fixture
def gate(authorizer, event_bus, mock_logger):
    return PermissionGate(authorization=authorizer, event_bus=event_bus, logger=mock_logger)


@pytest.fixture
def decisions(event_bus):
    recorded: list[PermissionDecisionRecorded] = []

    async def collect(event: PermissionDecisionRecorded) -> None:
        recorded.append(event)

    event_bus.subscribe(PermissionDecisionRecorded, collect)
    return recorded


@pytest.mark.unit
class TestResolveObjectId:
    def test_path_wins_over_query_and_body(self):
        request = request_for(
            path_params={"app_id": "from-path"},
            query_params={"app_id": "from-query"},
            body={"app_id": "from-body"},
        )

        assert resolve_object_id(request) == "from-path"

    def test_query_wins_over_body(self):
        request = request_for(query_params={"app_id": "from-query"}, body={"app_id": "b"})

        assert resolve_object_id(request) == "from-query"

    def test_body_used_last(self):
        assert resolve_object_id(request_for(body={"app_id": "from-body"})) == "from-body"

    def test_blank_value_falls_through(self):
        request = request_for(path_params={"app_id": "  "}, body={"app_id": "a2"})

        assert resolve_object_id(request) == "a2"

    def test_no_param_targets_org(self):
        request = request_for(object_id_param=None, object_type=ObjectType.ORG)

        assert resolve_object_id(request) == "o1"

    def test_configured_param_missing_everywhere(self):
        assert resolve_object_id(request_for()) is None


@pytest.mark.unit
class TestDecisions:
    @pytest.mark.asyncio
    async def test_allowed(self, gate, authorizer, decisions):
        # Arrange
        await authorizer.grant(
            SubjectRef(subject_type=SubjectType.USER, subject_id="u1"),
            Relation.EDITOR,
            ObjectRef(object_type=ObjectType.APP, object_id="a1"),
        )

        # Act
        decision = await gate.evaluate(request_for(path_params={"app_id": "a1"}))

        # Assert
        assert decision.allowed
        assert decision.reason_code is DecisionReason.ALLOWED
        assert decision.object == ObjectRef(object_type=ObjectType.APP, object_id="a1")
        assert decisions[0].allowed is True
        assert decisions[0].object == "app:a1"

    @pytest.mark.asyncio
    async def test_denied(self, gate, decisions):
        decision = await gate.evaluate(request_for(path_params={"app_id": "a1"}))

        assert not decision.allowed
        assert decision.reason_code is DecisionReason.DENIED
        assert decision.error is None
        assert decisions[0].reason_code == "denied"

    @pytest.mark.asyncio
    async def test_missing_resource_fails_closed(self, gate, authorizer, decisions):
        authorizer.check = AsyncMock()

        decision = await gate.evaluate(request_for())

        assert not decision.allowed
        assert decision.reason_code is DecisionReason.MISSING_RESOURCE
        assert isinstance(decision.error, MissingResourceError)
        assert decision.error.source == "app_id"
        authorizer.check.assert_not_awaited()
        assert decisions[0].object is None

    @pytest.mark.asyncio
    async def test_invalid_argument_is_not_a_policy_denial(self, gate):
        # can_sign is not a relation of app
        decision = await gate.evaluate(
            request_for(relation=Relation.CAN_SIGN, path_params={"app_id": "a1"})
        )

        assert not decision.allowed
        assert decision.reason_code is DecisionReason.INVALID_ARGUMENT
        assert decision.error.code == ErrorCode.INVALID_RELATION

    @pytest.mark.asyncio
    async def test_store_outage_is_unavailable(self, gate, tuple_store, mock_logger):
        # Arrange
        tuple_store.exists = AsyncMock(
            return_value=Failure(
                error=UnavailableError(
                    code=ErrorCode.TUPLE_STORE_UNAVAILABLE,
                    message="connection refused",
                    dependency="tuple_store",
                )
            )
        )

        # Act
        decision = await gate.evaluate(request_for(path_params={"app_id": "a1"}))

        # Assert
        assert not decision.allowed
        assert decision.reason_code is DecisionReason.UNAVAILABLE
        assert decision.error.retryable
        mock_logger.warning.assert_any_call(
            "permission_decision",
            error_code="tuple_store_unavailable",
            **decision.to_record(),
        )

    @pytest.mark.asyncio
    async def test_org_level_check(self, gate, authorizer):
        await authorizer.grant(
            SubjectRef(subject_type=SubjectType.USER, subject_id="u1"),
            Relation.ADMIN,
            ObjectRef(object_type=ObjectType.ORG, object_id="o1"),
        )

        decision = await gate.evaluate(
            request_for(
                relation=Relation.CAN_MANAGE_TEAMS,
                object_type=ObjectType.ORG,
                object_id_param=None,
            )
        )

        assert decision.allowed
        assert str(decision.object) == "org:o1"

    @pytest.mark.asyncio
    async def test_failing_event_handler_does_not_change_decision(self, gate, event_bus):
        async def broken(_event) -> None:
            raise RuntimeError("sink down")

        event_bus.subscribe(PermissionDecisionRecorded, broken)

        decision = await gate.evaluate(request_for(path_params={"app_id": "a1"}))

        assert decision.reason_code is DecisionReason.DENIED
