"""Application services."""

from src.application.services.effective_permissions_service import (
    EffectivePermissionsService,
)
from src.application.services.permission_gate import (
    PermissionGate,
    PermissionRequest,
    resolve_object_id,
)

__all__ = [
    "EffectivePermissionsService",
    "PermissionGate",
    "PermissionRequest",
    "resolve_object_id",
]
