"""Permission gate decision record.

Emitted for every gate evaluation so audit and observability collaborators
can follow who was allowed or denied what. The gate itself writes no audit
entries.
"""

from dataclasses import dataclass
from typing import Any

from src.core.errors import DomainError
from src.domain.entities.relation_tuple import ObjectRef, SubjectRef
from src.domain.enums import DecisionReason, Relation


@dataclass(frozen=True, slots=True, kw_only=True)
class PermissionDecision:
    """Outcome of a permission gate evaluation.

    Attributes:
        allowed: Final decision. False for every non-ALLOWED reason.
        reason_code: Why the decision was made.
        subject: Requesting user.
        relation: Relation that was required.
        object: Object checked, None when no object id resolved.
        error: Underlying error for INVALID_ARGUMENT/UNAVAILABLE decisions.
    """

    allowed: bool
    reason_code: DecisionReason
    subject: SubjectRef
    relation: Relation
    object: ObjectRef | None = None
    error: DomainError | None = None

    def to_record(self) -> dict[str, Any]:
        """Structured record for logs and event payloads."""
        return {
            "allowed": self.allowed,
            "reason_code": self.reason_code.value,
            "subject": str(self.subject),
            "relation": self.relation.value,
            "object": str(self.object) if self.object is not None else None,
        }
