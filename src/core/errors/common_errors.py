"""Error classes shared by every layer.

Error Types:
- ValidationError: malformed subject/object/relation input (InvalidArgument)
- NotFoundError: a referenced record does not exist
- ConflictError: uniqueness violation
- PermissionDeniedError: policy says no
- MissingResourceError: no object id could be resolved for a check
- UnavailableError: transient datastore or collaborator failure

Usage:
    from src.core.errors import ValidationError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(error=ValidationError(
        code=ErrorCode.INVALID_RELATION,
        message="Unknown relation 'can_fly'",
        field="relation",
    ))
"""

from dataclasses import dataclass

from src.core.errors.domain_error import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class ValidationError(DomainError):
    """Input validation failure. Never retryable.

    Attributes:
        field: Field name that failed validation.
    """

    field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class NotFoundError(DomainError):
    """Referenced record not found.

    Attributes:
        resource_type: Type of record (role, gpg_key, ...).
        resource_id: Identifier that was not found.
    """

    resource_type: str
    resource_id: str


@dataclass(frozen=True, slots=True, kw_only=True)
class ConflictError(DomainError):
    """Uniqueness violation.

    Attributes:
        resource_type: Type of record in conflict.
        conflicting_field: Field that collided.
    """

    resource_type: str
    conflicting_field: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class PermissionDeniedError(DomainError):
    """Authorization policy denied the request.

    Attributes:
        required_permission: "<relation> on <type>:<id>".
    """

    required_permission: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class MissingResourceError(DomainError):
    """No object id could be resolved for a permission check.

    Attributes:
        source: The parameter/field name that was configured.
    """

    source: str | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class UnavailableError(DomainError):
    """Transient failure of a datastore or collaborator.

    Always retryable by the caller; components never retry on their own.

    Attributes:
        dependency: Which collaborator failed (tuple_store, cache, ...).
    """

    retryable: bool = True
    dependency: str | None = None
