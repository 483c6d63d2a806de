"""GPG key metadata entity.

Key material generation and storage belong to the key service; this entity
holds the metadata row written by the key creation saga.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID

from uuid_extensions import uuid7


@dataclass(slots=True, kw_only=True)
class GpgKey:
    """GPG key metadata.

    Attributes:
        id: Key record identifier (also the gpg_key object id for tuples).
        org_id: Owning org.
        user_id: Creator (receives the owner tuple).
        name: Display name.
        email: User ID email on the key.
        fingerprint: Upper-case hex fingerprint (unique).
        algorithm: rsa, ecc-curve25519, ecc-p256, ecc-p384.
        key_size: RSA modulus size, None for ECC keys.
        public_key: Armored public key.
        usage_flags: sign, encrypt, certify.
        is_default: Whether this is the org's default signing key.
        expires_at: Optional expiry.
    """

    org_id: str
    user_id: str
    name: str
    email: str
    fingerprint: str
    algorithm: str
    public_key: str
    id: UUID = field(default_factory=uuid7)
    key_size: int | None = None
    usage_flags: list[str] = field(default_factory=lambda: ["sign"])
    is_default: bool = False
    expires_at: datetime | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def key_id(self) -> str:
        """Long key id: last 16 hex digits of the fingerprint."""
        return self.fingerprint[-16:]
