"""Domain protocols (ports).

Infrastructure adapters implement these structurally (no inheritance).

Usage:
    from src.domain.protocols import AuthorizationProtocol, TupleStoreProtocol
"""

from src.domain.protocols.audit_protocol import AuditProtocol
from src.domain.protocols.authorization_protocol import AuthorizationProtocol
from src.domain.protocols.event_bus_protocol import EventBusProtocol, EventHandler
from src.domain.protocols.gpg_key_repository import GpgKeyRepository
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.permission_cache_protocol import PermissionCacheProtocol
from src.domain.protocols.role_repository import RoleRepository
from src.domain.protocols.team_membership_protocol import TeamMembershipProtocol
from src.domain.protocols.tuple_store_protocol import TupleStoreProtocol
from src.domain.protocols.webhook_protocol import WebhookProtocol

__all__ = [
    "AuditProtocol",
    "AuthorizationProtocol",
    "EventBusProtocol",
    "EventHandler",
    "GpgKeyRepository",
    "LoggerProtocol",
    "PermissionCacheProtocol",
    "RoleRepository",
    "TeamMembershipProtocol",
    "TupleStoreProtocol",
    "WebhookProtocol",
]
