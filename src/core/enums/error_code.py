"""Machine-readable error codes.

Error codes follow ENTITY_ACTION_REASON naming where it reads naturally.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*)
- Resource errors (*_NOT_FOUND, MISSING_RESOURCE)
- Conflict errors (*_ALREADY_EXISTS)
- Authorization errors (PERMISSION_DENIED, AUTHORIZATION_UNAVAILABLE)
- Saga errors (SAGA_*)
- Collaborator errors (AUDIT_*, WEBHOOK_*, TUPLE_STORE_*, CACHE_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Machine-readable error codes."""

    # Validation errors
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_RELATION = "invalid_relation"
    INVALID_SUBJECT = "invalid_subject"
    INVALID_OBJECT = "invalid_object"

    # Resource errors
    MISSING_RESOURCE = "missing_resource"
    ROLE_NOT_FOUND = "role_not_found"
    GPG_KEY_NOT_FOUND = "gpg_key_not_found"
    TEAM_NOT_FOUND = "team_not_found"
    RESOURCE_NOT_FOUND = "resource_not_found"

    # Conflict errors
    ROLE_ALREADY_EXISTS = "role_already_exists"
    GPG_KEY_ALREADY_EXISTS = "gpg_key_already_exists"
    RESOURCE_ALREADY_LINKED = "resource_already_linked"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"
    AUTHORIZATION_UNAVAILABLE = "authorization_unavailable"

    # Saga errors
    SAGA_STEP_FAILED = "saga_step_failed"
    SAGA_COMPENSATION_FAILED = "saga_compensation_failed"

    # Collaborator errors
    TUPLE_STORE_UNAVAILABLE = "tuple_store_unavailable"
    REPOSITORY_UNAVAILABLE = "repository_unavailable"
    CACHE_UNAVAILABLE = "cache_unavailable"
    AUDIT_RECORD_FAILED = "audit_record_failed"
    WEBHOOK_DELIVERY_FAILED = "webhook_delivery_failed"
