"""Authorization protocol (port) for relationship-based access control.

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides the ADAPTER (RebacAuthorizer)
- Application layer uses the protocol

Usage:
    from src.domain.protocols import AuthorizationProtocol

    authz: AuthorizationProtocol = Depends(get_authorization)

    result = await authz.check("u1", "user", "can_view", "app", "app-1")
    match result:
        case Success(value=True):
            ...
        case Success(value=False):
            raise HTTPException(403, "Permission denied")
        case Failure(error=error):
            ...  # ValidationError or UnavailableError, never a denial
"""

from collections.abc import Sequence
from typing import Protocol

from src.core.errors import DomainError
from src.core.result import Result
from src.domain.entities import ObjectRef, SubjectRef
from src.domain.enums import ObjectType, Relation, SubjectType


class AuthorizationProtocol(Protocol):
    """ReBAC checker plus the tuple mutations it owns.

    ``check`` is a side-effect-free read, safe to call concurrently. Strings
    are accepted at this boundary and parsed into the closed enums; an
    unknown value or a blank id is ``Failure(ValidationError)``. A store
    failure is ``Failure(UnavailableError)`` with ``retryable=True``. The
    checker never retries.
    """

    async def check(
        self,
        subject_id: str,
        subject_type: SubjectType | str,
        relation: Relation | str,
        object_type: ObjectType | str,
        object_id: str,
    ) -> Result[bool, DomainError]:
        """Decide whether the subject holds ``relation`` on the object.

        Resolution: direct tuple, implied relations on the same object,
        team-indirect grants (user subjects only), then structural parents
        up to the configured depth. The result is the OR of every reachable
        grant. There is no explicit deny.

        Returns:
            Success(True/False), or Failure(ValidationError/UnavailableError).
        """
        ...

    async def batch_check(
        self,
        user_id: str,
        checks: Sequence[tuple[Relation | str, ObjectType | str, str]],
    ) -> Result[list[bool], DomainError]:
        """Check many ``(relation, object_type, object_id)`` triples for one user.

        Returns:
            Success(list of booleans in input order). The first failing check
            fails the whole batch.
        """
        ...

    async def grant(
        self, subject: SubjectRef, relation: Relation, obj: ObjectRef
    ) -> Result[bool, DomainError]:
        """Write a tuple. Idempotent: Success(False) when already present."""
        ...

    async def revoke(
        self, subject: SubjectRef, relation: Relation, obj: ObjectRef
    ) -> Result[bool, DomainError]:
        """Delete a tuple. Idempotent: Success(False) when it was absent."""
        ...

    async def link_parent(
        self, child: ObjectRef, parent: ObjectRef
    ) -> Result[bool, DomainError]:
        """Link a child object to a structural parent."""
        ...

    async def unlink_parent(
        self, child: ObjectRef, parent: ObjectRef
    ) -> Result[bool, DomainError]:
        """Remove a structural link."""
        ...
