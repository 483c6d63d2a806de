"""GPG keys router.

Endpoints:
    POST   /api/v1/gpg-keys               - Store a key (requires have_gpg_access on the org)
    DELETE /api/v1/gpg-keys/{gpg_key_id}  - Delete a key (requires can_manage on the key)
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Request, status
from fastapi.responses import JSONResponse, Response

from src.application.commands.gpg_key_commands import CreateGpgKey, DeleteGpgKey
from src.application.commands.handlers.gpg_key_handler import (
    CreateGpgKeyHandler,
    DeleteGpgKeyHandler,
)
from src.core.container import get_create_gpg_key_handler, get_delete_gpg_key_handler
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
from src.schemas.gpg_key_schemas import GpgKeyCreateRequest, GpgKeyResponse

router = APIRouter(prefix="/gpg-keys", tags=["GPG Keys"])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=GpgKeyResponse,
    responses={
        403: {"description": "Org has no GPG access", "model": ProblemDetails},
        409: {"description": "Fingerprint already stored", "model": ProblemDetails},
        503: {"description": "Store or audit unavailable", "model": ProblemDetails},
    },
    dependencies=[Depends(require_permission(Relation.HAVE_GPG_ACCESS, ObjectType.ORG))],
    summary="Create GPG key",
    description="Store key metadata. The caller becomes the key owner.",
)
async def create_gpg_key(
    request: Request,
    data: GpgKeyCreateRequest,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    handler: CreateGpgKeyHandler = Depends(get_create_gpg_key_handler),
) -> GpgKeyResponse | JSONResponse:
    """Create a GPG key.

    POST /api/v1/gpg-keys → 201 Created

    Runs as a saga: row insert, owner tuple, org link, audit entry. Any
    failing step rolls back the earlier ones and the original cause is
    reported (an audit outage is a 503).
    """
    command = CreateGpgKey(
        org_id=identity.org_id,
        user_id=identity.user_id,
        name=data.name,
        email=str(data.email),
        fingerprint=data.fingerprint,
        algorithm=data.algorithm,
        public_key=data.public_key,
        key_size=data.key_size,
        usage_flags=tuple(data.usage_flags),
        is_default=data.is_default,
        expires_at=data.expires_at,
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success(value=gpg_key):
            return GpgKeyResponse(
                id=gpg_key.id,
                org_id=gpg_key.org_id,
                user_id=gpg_key.user_id,
                name=gpg_key.name,
                email=gpg_key.email,
                fingerprint=gpg_key.fingerprint,
                key_id=gpg_key.key_id,
                algorithm=gpg_key.algorithm,
                key_size=gpg_key.key_size,
                usage_flags=list(gpg_key.usage_flags),
                is_default=gpg_key.is_default,
                expires_at=gpg_key.expires_at,
                created_at=gpg_key.created_at,
            )


@router.delete(
    "/{gpg_key_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    response_model=None,
    responses={
        403: {"description": "Caller cannot manage the key", "model": ProblemDetails},
        404: {"description": "Key not found in org", "model": ProblemDetails},
        503: {"description": "Store or audit unavailable", "model": ProblemDetails},
    },
    dependencies=[
        Depends(require_permission(Relation.CAN_MANAGE, ObjectType.GPG_KEY, "gpg_key_id"))
    ],
    summary="Delete GPG key",
)
async def delete_gpg_key(
    request: Request,
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    gpg_key_id: UUID = Path(..., description="GPG key identifier"),
    handler: DeleteGpgKeyHandler = Depends(get_delete_gpg_key_handler),
) -> Response:
    command = DeleteGpgKey(
        gpg_key_id=gpg_key_id, org_id=identity.org_id, actor_id=identity.user_id
    )
    match await handler.handle(command):
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
        case Success():
            return Response(status_code=status.HTTP_204_NO_CONTENT)
