"""Effective permission snapshot for a (user, org) pair.

Derived state: the OR of the user's role flags and any tuple grant of the
equivalent org relation. A snapshot is never patched; a role or tuple change
invalidates it and the next read recomputes a fresh one.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Any

from src.domain.enums import Capability


@dataclass(frozen=True, slots=True, kw_only=True)
class EffectivePermissions:
    """Immutable capability snapshot.

    Attributes:
        user_id: Subject of the snapshot.
        org_id: Org the capabilities apply to.
        capabilities: Capability -> allowed. Every Capability is present.
        computed_at: When the snapshot was computed (UTC).
    """

    user_id: str
    org_id: str
    capabilities: Mapping[Capability, bool]
    computed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        complete = {cap: bool(self.capabilities.get(cap, False)) for cap in Capability}
        object.__setattr__(self, "capabilities", MappingProxyType(complete))

    def allows(self, capability: Capability) -> bool:
        return self.capabilities[capability]

    def to_dict(self) -> dict[str, bool]:
        """Capability names to booleans (API/cache representation)."""
        return {cap.value: allowed for cap, allowed in self.capabilities.items()}

    def to_payload(self) -> dict[str, Any]:
        """Full serializable form, including identity and timestamp."""
        return {
            "user_id": self.user_id,
            "org_id": self.org_id,
            "capabilities": self.to_dict(),
            "computed_at": self.computed_at.isoformat(),
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "EffectivePermissions":
        """Rebuild a snapshot from ``to_payload`` output."""
        return cls(
            user_id=payload["user_id"],
            org_id=payload["org_id"],
            capabilities={
                Capability(name): bool(allowed)
                for name, allowed in payload["capabilities"].items()
                if name in Capability._value2member_map_
            },
            computed_at=datetime.fromisoformat(payload["computed_at"]),
        )
