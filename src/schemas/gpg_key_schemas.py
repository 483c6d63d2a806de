"""GPG key request/response schemas.

RESTful Endpoints:
    POST   /api/v1/gpg-keys         - Store a GPG key (creator becomes owner)
    DELETE /api/v1/gpg-keys/{id}    - Delete a GPG key and its grants
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from src.domain.types import Fingerprint


class GpgKeyCreateRequest(BaseModel):
    """Metadata of an already generated key."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    fingerprint: Fingerprint
    algorithm: Literal["rsa", "ecc-curve25519", "ecc-p256", "ecc-p384"]
    public_key: str = Field(..., min_length=1)
    key_size: int | None = Field(None, ge=2048, le=4096)
    usage_flags: list[Literal["sign", "encrypt", "certify"]] = Field(
        default_factory=lambda: ["sign"]
    )
    is_default: bool = False
    expires_at: datetime | None = None


class GpgKeyResponse(BaseModel):
    id: UUID
    org_id: str
    user_id: str
    name: str
    email: str
    fingerprint: str
    key_id: str
    algorithm: str
    key_size: int | None
    usage_flags: list[str]
    is_default: bool
    expires_at: datetime | None
    created_at: datetime
