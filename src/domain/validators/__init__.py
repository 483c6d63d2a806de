"""Validators package exports."""

from src.domain.validators.authz_inputs import (
    parse_identifier,
    parse_object,
    parse_object_type,
    parse_relation,
    parse_subject,
)
from src.domain.validators.functions import (
    validate_fingerprint,
    validate_identifier,
)

__all__ = [
    "parse_identifier",
    "parse_object",
    "parse_object_type",
    "parse_relation",
    "parse_subject",
    "validate_fingerprint",
    "validate_identifier",
]
