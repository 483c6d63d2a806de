"""Org roles router.

Endpoints:
    POST /api/v1/roles/defaults        - Create the default role set
    PUT  /api/v1/users/{user_id}/role  - Assign a role (resyncs org tuples)

Both require ``can_manage_roles`` on the caller's org.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse

from src.application.commands.authorization_commands import (
    AssignRole,
    CreateDefaultRoles,
)
from src.application.commands.handlers.assign_role_handler import (
    AssignRoleHandler,
    CreateDefaultRolesHandler,
)
from src.core.container import (
    get_assign_role_handler,
    get_create_default_roles_handler,
)
from src.core.result import Failure, Success
from src.domain.enums import ObjectType, Relation
from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentIdentity,
    get_current_identity,
)
from src.presentation.routers.api.middleware.authorization_dependencies import (
    require_permission,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from src.schemas.authorization_schemas import (
    RoleAssignmentRequest,
    RoleAssignmentResponse,
    RoleResponse,
)

router = APIRouter(
    tags=["Roles"],
    dependencies=[
        Depends(require_permission(Relation.CAN_MANAGE_ROLES, ObjectType.ORG))
    ],
)


@router.post(
    "/roles/defaults",
    status_code=status.HTTP_201_CREATED,
    response_model=list[RoleResponse],
    responses={
        403: {"description": "Caller cannot manage roles", "model": ProblemDetails},
        409: {"description": "Roles already exist", "model": ProblemDetails},
        503: {"description": "Store or audit unavailable", "model": ProblemDetails},
    },
    summary="Create default roles",
)
async def create_default_roles(
    request: Request,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    handler: CreateDefaultRolesHandler = Depends(get_create_default_roles_handler),
) -> list[RoleResponse] | JSONResponse:
    command = CreateDefaultRoles(org_id=identity.org_id, actor_id=identity.user_id)
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=roles):
            return [
                RoleResponse(
                    id=role.id,
                    name=role.name,
                    color=role.color,
                    flags={rel.value: on for rel, on in role.flags().items()},
                )
                for role in roles
            ]


@router.put(
    "/users/{user_id}/role",
    status_code=status.HTTP_200_OK,
    response_model=RoleAssignmentResponse,
    responses={
        403: {"description": "Caller cannot manage roles", "model": ProblemDetails},
        404: {"description": "Role not found in org", "model": ProblemDetails},
        503: {"description": "Store or audit unavailable", "model": ProblemDetails},
    },
    summary="Assign role",
    description="Assign a role to the user. Org tuples are resynced to the role flags.",
)
async def assign_role(
    request: Request,
    data: RoleAssignmentRequest,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    user_id: str = Path(..., description="User to assign"),
    handler: AssignRoleHandler = Depends(get_assign_role_handler),
) -> RoleAssignmentResponse | JSONResponse:
    command = AssignRole(
        user_id=user_id,
        org_id=identity.org_id,
        role_id=data.role_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=assignment):
            return RoleAssignmentResponse(
                user_id=assignment.user_id,
                org_id=assignment.org_id,
                role_id=assignment.role_id,
            )
