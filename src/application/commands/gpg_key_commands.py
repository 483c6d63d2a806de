"""GPG key commands.

Key generation and armoring happen upstream; these commands carry the
resulting metadata.
"""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True, kw_only=True)
class CreateGpgKey:
    """Store a GPG key and give its creator ownership.

    Attributes:
        org_id: Owning org.
        user_id: Creator, receives the ``owner`` tuple.
        name: Display name.
        email: User ID email on the key.
        fingerprint: Hex fingerprint.
        algorithm: rsa, ecc-curve25519, ecc-p256, ecc-p384.
        public_key: Armored public key.
        key_size: RSA modulus size, None for ECC keys.
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
    key_size: int | None = None
    usage_flags: tuple[str, ...] = field(default=("sign",))
    is_default: bool = False
    expires_at: datetime | None = None


@dataclass(frozen=True, kw_only=True)
class DeleteGpgKey:
    """Delete a GPG key together with every tuple on it."""

    gpg_key_id: UUID
    org_id: str
    actor_id: str
