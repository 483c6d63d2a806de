"""Identity dependencies.

Token verification happens upstream: an authenticator middleware outside
this package places ``user_id`` and ``org_id`` on ``request.state``. These
dependencies only read that identity.

Usage:
    @router.get("/permissions/me")
    async def my_permissions(
        identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
    ): ...
"""

from dataclasses import dataclass

from fastapi import HTTPException, Request, status


@dataclass(frozen=True, slots=True, kw_only=True)
class CurrentIdentity:
    """Authenticated identity supplied by the upstream authenticator.

    Attributes:
        user_id: Authenticated user.
        org_id: Org the session acts in.
    """

    user_id: str
    org_id: str


def get_current_identity_optional(request: Request) -> CurrentIdentity | None:
    """Identity from ``request.state``, or None when absent or blank."""
    user_id = getattr(request.state, "user_id", None)
    org_id = getattr(request.state, "org_id", None)
    if not user_id or not org_id:
        return None
    return CurrentIdentity(user_id=str(user_id), org_id=str(org_id))


def get_current_identity(request: Request) -> CurrentIdentity:
    """Identity from ``request.state``.

    Raises:
        HTTPException 401: No authenticated identity on the request.
    """
    identity = get_current_identity_optional(request)
    if identity is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity
