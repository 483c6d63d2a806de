"""Annotated types with centralized validation.

Used by pydantic request schemas and command dataclasses.

Usage:
    from src.domain.types import Identifier

    class AccessGrantRequest(BaseModel):
        subject_id: Identifier
"""

from typing import Annotated

from pydantic import AfterValidator, Field

from src.domain.validators import (
    validate_fingerprint,
    validate_identifier,
)

Identifier = Annotated[
    str,
    Field(min_length=1, max_length=128, examples=["app_01HZX3"]),
    AfterValidator(validate_identifier),
]
"""External identifier of a user, org or object (trimmed, non-blank)."""

Fingerprint = Annotated[
    str,
    Field(min_length=40, max_length=80),
    AfterValidator(validate_fingerprint),
]
"""GPG fingerprint, normalized to upper-case hex without spaces."""
