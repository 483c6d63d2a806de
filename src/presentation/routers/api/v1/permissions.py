"""Permissions resource router.

Read-side endpoints for the authenticated caller. They require an identity
but no particular relation: a user may always ask what they can do.

Endpoints:
    POST /api/v1/permissions/checks - Batch check (relation, object) pairs
    GET  /api/v1/permissions/me     - Effective capabilities in the caller's org
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from src.application.services import EffectivePermissionsService
from src.core.container import get_authorization, get_effective_permissions_service
from src.core.result import Failure, Success
from src.domain.protocols import AuthorizationProtocol
from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentIdentity,
    get_current_identity,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from src.schemas.authorization_schemas import (
    EffectivePermissionsResponse,
    PermissionCheckRequest,
    PermissionCheckResponse,
    PermissionCheckResult,
)

router = APIRouter(prefix="/permissions", tags=["Permissions"])


@router.post(
    "/checks",
    response_model=PermissionCheckResponse,
    responses={
        400: {"description": "Unknown relation or object type", "model": ProblemDetails},
        401: {"description": "Not authenticated", "model": ProblemDetails},
        503: {"description": "Tuple store unavailable", "model": ProblemDetails},
    },
    summary="Check permissions",
    description="Check several (relation, object) pairs for the caller at once.",
)
async def check_permissions(
    request: Request,
    data: PermissionCheckRequest,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    authorization: AuthorizationProtocol = Depends(get_authorization),
) -> PermissionCheckResponse | JSONResponse:
    """Batch permission check.

    POST /api/v1/permissions/checks → 200 OK

    Results come back in request order. One malformed item fails the whole
    batch with 400; a store outage is 503, never a list of false results.
    """
    checks = [(item.relation, item.object_type, item.object_id) for item in data.checks]
    match await authorization.batch_check(identity.user_id, checks):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=results):
            return PermissionCheckResponse(
                results=[
                    PermissionCheckResult(**item.model_dump(), allowed=allowed)
                    for item, allowed in zip(data.checks, results, strict=True)
                ]
            )


@router.get(
    "/me",
    status_code=status.HTTP_200_OK,
    response_model=EffectivePermissionsResponse,
    responses={
        401: {"description": "Not authenticated", "model": ProblemDetails},
        503: {"description": "Tuple or role store unavailable", "model": ProblemDetails},
    },
    summary="Get effective permissions",
    description="Capabilities of the caller in their org (role flags OR tuple grants).",
)
async def get_my_permissions(
    request: Request,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    service: EffectivePermissionsService = Depends(get_effective_permissions_service),
) -> EffectivePermissionsResponse | JSONResponse:
    match await service.get(identity.user_id, identity.org_id):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=snapshot):
            return EffectivePermissionsResponse(
                user_id=snapshot.user_id,
                org_id=snapshot.org_id,
                capabilities=snapshot.to_dict(),
                computed_at=snapshot.computed_at,
            )
