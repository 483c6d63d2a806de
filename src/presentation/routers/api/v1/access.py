"""App access router.

Endpoints:
    POST   /api/v1/apps/{app_id}/access  - Grant a relation on an app
    DELETE /api/v1/apps/{app_id}/access  - Revoke a relation on an app
    PUT    /api/v1/apps/{app_id}/org     - Link the app to the caller's org
                                          (409 when it belongs to another org)

Granting and revoking require ``can_manage`` on the app, which org admins
reach through the app -> org link.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse, Response

from src.application.commands.authorization_commands import (
    GrantAccess,
    LinkResource,
    RevokeAccess,
)
from src.application.commands.handlers.grant_access_handler import (
    GrantAccessHandler,
    RevokeAccessHandler,
)
from src.application.commands.handlers.link_resource_handler import (
    LinkResourceHandler,
)
from src.core.container import (
    get_grant_access_handler,
    get_link_resource_handler,
    get_revoke_access_handler,
)
from src.core.errors import DomainError
from src.core.result import Failure, Result, Success
from src.domain.entities import ObjectRef, SubjectRef
from src.domain.enums import ObjectType, Relation
from src.domain.validators import parse_object, parse_relation, parse_subject
from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentIdentity,
    get_current_identity,
)
from src.presentation.routers.api.middleware.authorization_dependencies import (
    require_permission,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from src.schemas.authorization_schemas import AccessGrantRequest, AccessGrantResponse

router = APIRouter(prefix="/apps", tags=["App Access"])

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    400: {"description": "Invalid subject or relation", "model": ProblemDetails},
    401: {"description": "Not authenticated", "model": ProblemDetails},
    403: {"description": "Caller cannot manage the app", "model": ProblemDetails},
    503: {"description": "Tuple store or audit unavailable", "model": ProblemDetails},
}


def _grant_target(
    app_id: str, data: AccessGrantRequest
) -> Result[tuple[SubjectRef, Relation, ObjectRef], DomainError]:
    match parse_subject(data.subject_id, data.subject_type):
        case Failure() as failure:
            return failure
        case Success(value=subject):
            pass
    match parse_object(ObjectType.APP, app_id):
        case Failure() as failure:
            return failure
        case Success(value=app):
            pass
    match parse_relation(data.relation, ObjectType.APP):
        case Failure() as failure:
            return failure
        case Success(value=relation):
            return Success(value=(subject, relation, app))


@router.post(
    "/{app_id}/access",
    status_code=status.HTTP_200_OK,
    response_model=AccessGrantResponse,
    responses=_ERROR_RESPONSES,
    dependencies=[
        Depends(require_permission(Relation.CAN_MANAGE, ObjectType.APP, "app_id"))
    ],
    summary="Grant app access",
    description="Grant a relation on the app to a user or a team.",
)
async def grant_app_access(
    request: Request,
    data: AccessGrantRequest,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    app_id: str = Path(..., description="App identifier"),
    handler: GrantAccessHandler = Depends(get_grant_access_handler),
) -> AccessGrantResponse | JSONResponse:
    """Grant access.

    POST /api/v1/apps/{app_id}/access → 200 OK

    ``changed`` is False when the grant already existed.
    """
    match _grant_target(app_id, data):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=(subject, relation, app)):
            pass

    command = GrantAccess(
        subject=subject,
        relation=relation,
        obj=app,
        org_id=identity.org_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=changed):
            return AccessGrantResponse(
                subject=str(subject),
                relation=relation.value,
                object=str(app),
                changed=changed,
            )


@router.delete(
    "/{app_id}/access",
    status_code=status.HTTP_200_OK,
    response_model=AccessGrantResponse,
    responses=_ERROR_RESPONSES,
    dependencies=[
        Depends(require_permission(Relation.CAN_MANAGE, ObjectType.APP, "app_id"))
    ],
    summary="Revoke app access",
    description="Revoke a relation on the app from a user or a team.",
)
async def revoke_app_access(
    request: Request,
    data: AccessGrantRequest,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    app_id: str = Path(..., description="App identifier"),
    handler: RevokeAccessHandler = Depends(get_revoke_access_handler),
) -> AccessGrantResponse | JSONResponse:
    match _grant_target(app_id, data):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=(subject, relation, app)):
            pass

    command = RevokeAccess(
        subject=subject,
        relation=relation,
        obj=app,
        org_id=identity.org_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=changed):
            return AccessGrantResponse(
                subject=str(subject),
                relation=relation.value,
                object=str(app),
                changed=changed,
            )


@router.put(
    "/{app_id}/org",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    responses=_ERROR_RESPONSES
    | {409: {"description": "App belongs to another org", "model": ProblemDetails}},
    dependencies=[Depends(require_permission(Relation.CAN_MANAGE_APPS, ObjectType.ORG))],
    summary="Link app to org",
    description="Attach the app to the caller's org so org roles reach it.",
)
async def link_app_to_org(
    request: Request,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    app_id: str = Path(..., description="App identifier"),
    handler: LinkResourceHandler = Depends(get_link_resource_handler),
) -> Response:
    command = LinkResource(
        child=ObjectRef(object_type=ObjectType.APP, object_id=app_id),
        parent=ObjectRef(object_type=ObjectType.ORG, object_id=identity.org_id),
        org_id=identity.org_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success():
            return Response(status_code=status.HTTP_204_NO_CONTENT)
