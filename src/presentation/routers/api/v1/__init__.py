"""API v1 routers.

Resources:
    /api/v1/permissions            - Caller's checks and effective permissions
    /api/v1/apps/{id}/access       - App access grants
    /api/v1/teams/{id}/members     - Team membership
    /api/v1/roles, /users/{id}/role - Org roles
    /api/v1/gpg-keys               - GPG keys

Every mutating route is guarded by a ``require_permission`` dependency.
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.routers.api.v1 import access, gpg_keys, permissions, roles, teams

v1_router = APIRouter(prefix=settings.api_v1_prefix)
for _module in (permissions, access, teams, roles, gpg_keys):
    v1_router.include_router(_module.router)

__all__ = [
    "v1_router",
]
