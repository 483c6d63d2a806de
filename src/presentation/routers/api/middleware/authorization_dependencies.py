"""Permission gate dependencies.

FastAPI dependencies wrapping the permission gate. Use them on every
mutating route, after identity extraction.

Status mapping:
    - 401: no identity on the request
    - 400: configured object id parameter not found (MISSING_RESOURCE) or
      unparseable relation/type/id (INVALID_ARGUMENT)
    - 403: policy denial (DENIED)
    - 503: tuple store unreachable (UNAVAILABLE), never reported as a denial

Usage:
    @router.post("/apps/{app_id}/access")
    async def grant_app_access(
        decision: Annotated[
            PermissionDecision,
            Depends(require_permission(Relation.CAN_MANAGE, ObjectType.APP, "app_id")),
        ],
    ): ...
"""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any

from fastapi import Depends, HTTPException, Request, status

from src.application.services import PermissionGate, PermissionRequest
from src.core.container import get_permission_gate
from src.domain.entities import PermissionDecision
from src.domain.enums import DecisionReason, ObjectType, Relation
from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentIdentity,
    get_current_identity,
)

_STATUS_BY_REASON: dict[DecisionReason, int] = {
    DecisionReason.DENIED: status.HTTP_403_FORBIDDEN,
    DecisionReason.MISSING_RESOURCE: status.HTTP_400_BAD_REQUEST,
    DecisionReason.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    DecisionReason.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


async def _json_body(request: Request) -> dict[str, Any] | None:
    if request.method in {"GET", "HEAD", "DELETE"}:
        return None
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


def _denial(decision: PermissionDecision) -> HTTPException:
    target = str(decision.object) if decision.object else "unresolved object"
    detail: dict[str, Any] = {
        "detail": f"Permission denied: {decision.relation.value} on {target}",
        "reason_code": decision.reason_code.value,
    }
    if decision.error is not None:
        detail["detail"] = decision.error.message
        detail["code"] = decision.error.code.value
        detail["retryable"] = decision.error.retryable
    headers = (
        {"Retry-After": "1"}
        if decision.reason_code is DecisionReason.UNAVAILABLE
        else None
    )
    return HTTPException(
        status_code=_STATUS_BY_REASON[decision.reason_code],
        detail=detail,
        headers=headers,
    )


def require_permission(
    relation: Relation,
    object_type: ObjectType,
    object_id_param: str | None = None,
) -> Callable[..., Awaitable[PermissionDecision]]:
    """Create a dependency that requires ``relation`` on an object.

    Args:
        relation: Relation the route requires.
        object_type: Type of the targeted object.
        object_id_param: Path/query/body parameter carrying the object id.
            None targets the identity's org.

    Returns:
        Dependency returning the allow decision, raising HTTPException on
        any other decision.
    """

    async def permission_checker(
        request: Request,
        identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
        gate: Annotated[PermissionGate, Depends(get_permission_gate)],
    ) -> PermissionDecision:
        decision = await gate.evaluate(
            PermissionRequest(
                user_id=identity.user_id,
                org_id=identity.org_id,
                relation=relation,
                object_type=object_type,
                object_id_param=object_id_param,
                path_params=request.path_params,
                query_params=request.query_params,
                body=await _json_body(request) if object_id_param else None,
            )
        )
        if not decision.allowed:
            raise _denial(decision)
        return decision

    return permission_checker
