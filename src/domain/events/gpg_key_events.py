"""GPG key lifecycle events."""

from dataclasses import dataclass

from src.domain.events.base_event import DomainEvent


@dataclass(frozen=True, kw_only=True, slots=True)
class GpgKeyCreated(DomainEvent):
    """GPG key metadata stored, owner tuple written and audited."""

    gpg_key_id: str
    org_id: str
    user_id: str
    fingerprint: str


@dataclass(frozen=True, kw_only=True, slots=True)
class GpgKeyDeleted(DomainEvent):
    """GPG key metadata and its tuples removed."""

    gpg_key_id: str
    org_id: str
    user_id: str
    fingerprint: str
