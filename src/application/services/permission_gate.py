"""Permission gate: request-level guard in front of mutating operations.

Resolves which object a request targets, asks the authorization checker
whether the identified user holds the required relation on it, and records
the decision. The gate fails closed: anything short of a positive check
result is a deny, but the reason keeps a policy denial apart from a missing
object id, bad input, or an unreachable datastore.

Object id resolution (first match wins):
    1. Path parameter named ``object_id_param``
    2. Query parameter of the same name
    3. Request body field of the same name
    4. ``org_id`` when no ``object_id_param`` is configured

A configured parameter found nowhere is a MISSING_RESOURCE deny.

The gate writes no audit entries. Every decision is logged and published as
``PermissionDecisionRecorded`` for observability collaborators.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from src.core.enums import ErrorCode
from src.core.errors import DomainError, MissingResourceError, ValidationError
from src.core.result import Failure, Result, Success
from src.domain.entities import ObjectRef, PermissionDecision, SubjectRef
from src.domain.enums import DecisionReason, ObjectType, Relation, SubjectType
from src.domain.events import PermissionDecisionRecorded
from src.domain.protocols import (
    AuthorizationProtocol,
    EventBusProtocol,
    LoggerProtocol,
)


@dataclass(frozen=True, slots=True, kw_only=True)
class PermissionRequest:
    """Everything the gate needs from an inbound request.

    Attributes:
        user_id: Authenticated user (from the upstream authenticator).
        org_id: Org of the authenticated session.
        relation: Relation the operation requires.
        object_type: Type of the object the operation targets.
        object_id_param: Name of the parameter carrying the object id, None
            to target the org itself.
        path_params: Matched path parameters.
        query_params: Query string parameters.
        body: Parsed JSON body, if any.
    """

    user_id: str
    org_id: str
    relation: Relation
    object_type: ObjectType
    object_id_param: str | None = None
    path_params: Mapping[str, Any] = field(default_factory=dict)
    query_params: Mapping[str, Any] = field(default_factory=dict)
    body: Mapping[str, Any] | None = None


def resolve_object_id(request: PermissionRequest) -> str | None:
    """Object id for ``request`` following the resolution order, or None."""
    name = request.object_id_param
    if name is None:
        return request.org_id or None
    for source in (request.path_params, request.query_params, request.body or {}):
        value = source.get(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return None


class PermissionGate:
    """Fail-closed guard around ``AuthorizationProtocol.check``."""

    def __init__(
        self,
        *,
        authorization: AuthorizationProtocol,
        event_bus: EventBusProtocol,
        logger: LoggerProtocol,
    ) -> None:
        self._authorization = authorization
        self._event_bus = event_bus
        self._logger = logger

    async def evaluate(self, request: PermissionRequest) -> PermissionDecision:
        """Decide ``request``. Never raises for a checker failure."""
        subject = SubjectRef(subject_type=SubjectType.USER, subject_id=request.user_id)
        object_id = resolve_object_id(request)

        if object_id is None:
            decision = PermissionDecision(
                allowed=False,
                reason_code=DecisionReason.MISSING_RESOURCE,
                subject=subject,
                relation=request.relation,
                error=MissingResourceError(
                    code=ErrorCode.MISSING_RESOURCE,
                    message=f"No value for '{request.object_id_param}' in path, query or body",
                    source=request.object_id_param,
                ),
            )
        else:
            obj = ObjectRef(object_type=request.object_type, object_id=object_id)
            result = await self._authorization.check(
                request.user_id,
                SubjectType.USER,
                request.relation,
                request.object_type,
                object_id,
            )
            decision = self._decide(result, subject, request.relation, obj)

        await self._record(decision)
        return decision

    @staticmethod
    def _decide(
        result: Result[bool, DomainError],
        subject: SubjectRef,
        relation: Relation,
        obj: ObjectRef,
    ) -> PermissionDecision:
        match result:
            case Success(value=True):
                return PermissionDecision(
                    allowed=True,
                    reason_code=DecisionReason.ALLOWED,
                    subject=subject,
                    relation=relation,
                    object=obj,
                )
            case Success():
                reason, error = DecisionReason.DENIED, None
            case Failure(error=ValidationError() as error):
                reason = DecisionReason.INVALID_ARGUMENT
            case Failure(error=error):
                # Store outages and any other checker failure: no decision was made.
                reason = DecisionReason.UNAVAILABLE
        return PermissionDecision(
            allowed=False,
            reason_code=reason,
            subject=subject,
            relation=relation,
            object=obj,
            error=error,
        )

    async def _record(self, decision: PermissionDecision) -> None:
        record = decision.to_record()
        if decision.allowed:
            self._logger.debug("permission_decision", **record)
        elif decision.reason_code is DecisionReason.UNAVAILABLE:
            self._logger.warning(
                "permission_decision",
                error_code=decision.error.code.value if decision.error else None,
                **record,
            )
        else:
            self._logger.info("permission_decision", **record)

        await self._event_bus.publish(PermissionDecisionRecorded(**record))
