"""Centralized validation functions.

Validators are pure functions that raise ValueError on validation failure.
They back the Annotated types in ``src.domain.types`` (pydantic request
schemas). The checker boundary uses the Result-returning parsers in
``src.domain.validators.authz_inputs`` instead.
"""

import re

_IDENTIFIER = re.compile(r"^[A-Za-z0-9][A-Za-z0-9_.:@-]{0,127}$")
_FINGERPRINT = re.compile(r"^[0-9A-F]{40}$|^[0-9A-F]{64}$")


def validate_identifier(v: str) -> str:
    """Validate an external identifier (user, org, object id).

    Example:
        >>> validate_identifier(" app-1 ")
        'app-1'
        >>> validate_identifier("")
        ValueError: Identifier must not be blank
    """
    v = v.strip()
    if not v:
        raise ValueError("Identifier must not be blank")
    if not _IDENTIFIER.match(v):
        raise ValueError(f"Invalid identifier: {v}")
    return v


def validate_fingerprint(v: str) -> str:
    """Validate and normalize a GPG fingerprint (v4 or v5, hex).

    Spaces are removed and the result is upper case.

    Example:
        >>> validate_fingerprint("abcd " * 10)
        'ABCDABCD...'
    """
    normalized = v.replace(" ", "").upper()
    if not _FINGERPRINT.match(normalized):
        raise ValueError("Fingerprint must be 40 or 64 hex characters")
    return normalized
