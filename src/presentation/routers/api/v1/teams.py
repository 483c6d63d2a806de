"""Team membership router.

Endpoints:
    POST   /api/v1/teams/{team_id}/members            - Add a member
    DELETE /api/v1/teams/{team_id}/members/{user_id}  - Remove a member
    PUT    /api/v1/teams/{team_id}/org                 - Link the team to the caller's org

All require ``can_manage_teams`` on the caller's org. Membership changes
only apply to teams linked to that org.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse, Response

from src.application.commands.authorization_commands import (
    AddTeamMember,
    LinkResource,
    RemoveTeamMember,
)
from src.application.commands.handlers.link_resource_handler import (
    LinkResourceHandler,
)
from src.application.commands.handlers.team_member_handler import (
    AddTeamMemberHandler,
    RemoveTeamMemberHandler,
)
from src.core.container import (
    get_add_team_member_handler,
    get_link_resource_handler,
    get_remove_team_member_handler,
)
from src.core.result import Failure, Success
from src.domain.entities import ObjectRef
from src.domain.enums import ObjectType, Relation
from src.presentation.routers.api.middleware.auth_dependencies import (
    CurrentIdentity,
    get_current_identity,
)
from src.presentation.routers.api.middleware.authorization_dependencies import (
    require_permission,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder, ProblemDetails
from src.schemas.authorization_schemas import TeamMemberRequest, TeamMemberResponse

router = APIRouter(
    prefix="/teams",
    tags=["Teams"],
    dependencies=[
        Depends(require_permission(Relation.CAN_MANAGE_TEAMS, ObjectType.ORG))
    ],
)

_ERROR_RESPONSES: dict[int | str, dict[str, object]] = {
    403: {"description": "Caller cannot manage teams", "model": ProblemDetails},
    404: {"description": "Team not linked to the caller's org", "model": ProblemDetails},
    503: {"description": "Store or audit unavailable", "model": ProblemDetails},
}


@router.post(
    "/{team_id}/members",
    status_code=status.HTTP_200_OK,
    response_model=TeamMemberResponse,
    responses=_ERROR_RESPONSES,
    summary="Add team member",
)
async def add_team_member(
    request: Request,
    data: TeamMemberRequest,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    team_id: str = Path(..., description="Team identifier"),
    handler: AddTeamMemberHandler = Depends(get_add_team_member_handler),
) -> TeamMemberResponse | JSONResponse:
    command = AddTeamMember(
        team_id=team_id,
        user_id=data.user_id,
        org_id=identity.org_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=changed):
            return TeamMemberResponse(team_id=team_id, user_id=data.user_id, changed=changed)


@router.delete(
    "/{team_id}/members/{user_id}",
    status_code=status.HTTP_200_OK,
    response_model=TeamMemberResponse,
    responses=_ERROR_RESPONSES,
    summary="Remove team member",
)
async def remove_team_member(
    request: Request,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    team_id: str = Path(..., description="Team identifier"),
    user_id: str = Path(..., description="Member to remove"),
    handler: RemoveTeamMemberHandler = Depends(get_remove_team_member_handler),
) -> TeamMemberResponse | JSONResponse:
    command = RemoveTeamMember(
        team_id=team_id,
        user_id=user_id,
        org_id=identity.org_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=changed):
            return TeamMemberResponse(team_id=team_id, user_id=user_id, changed=changed)


@router.put(
    "/{team_id}/org",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    responses={
        403: {"description": "Caller cannot manage teams", "model": ProblemDetails},
        409: {"description": "Team belongs to another org", "model": ProblemDetails},
        503: {"description": "Tuple store unavailable", "model": ProblemDetails},
    },
    summary="Link team to org",
    description="Attach the team to the caller's org so members can be managed.",
)
async def link_team_to_org(
    request: Request,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    team_id: str = Path(..., description="Team identifier"),
    handler: LinkResourceHandler = Depends(get_link_resource_handler),
) -> Response:
    command = LinkResource(
        child=ObjectRef(object_type=ObjectType.TEAM, object_id=team_id),
        parent=ObjectRef(object_type=ObjectType.ORG, object_id=identity.org_id),
        org_id=identity.org_id,
        actor_id=identity.user_id,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success():
            return Response(status_code=status.HTTP_204_NO_CONTENT)
