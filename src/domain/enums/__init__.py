"""Domain enums.

Usage:
    from src.domain.enums import ObjectType, Relation, SubjectType
"""

from src.domain.enums.audit_action import AuditAction
from src.domain.enums.capability import Capability
from src.domain.enums.decision_reason import DecisionReason
from src.domain.enums.object_type import ObjectType
from src.domain.enums.relation import Relation
from src.domain.enums.saga_state import SagaState
from src.domain.enums.subject_type import SubjectType

__all__ = [
    "AuditAction",
    "Capability",
    "DecisionReason",
    "ObjectType",
    "Relation",
    "SagaState",
    "SubjectType",
]
