"""Relationship tuple domain entities.

A tuple is a single relationship fact: ``subject`` has ``relation`` on
``object``. Tuples are unique per full key, so granting the same fact twice
leaves exactly one grant.

Structural parent links (app -> org, env_type -> app) are kept apart from
tuples in ``ResourceLink``: they describe the resource hierarchy rather than
who holds what.

Reference:
    - src/domain/authorization_model.py (valid relations per object type)
"""

from dataclasses import dataclass

from src.domain.enums import ObjectType, Relation, SubjectType


@dataclass(frozen=True, slots=True, kw_only=True)
class SubjectRef:
    """Reference to a user or a team (meaning: the team's members)."""

    subject_type: SubjectType
    subject_id: str

    def __str__(self) -> str:
        return f"{self.subject_type.value}:{self.subject_id}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ObjectRef:
    """Reference to an object of the authorization model."""

    object_type: ObjectType
    object_id: str

    def __str__(self) -> str:
        return f"{self.object_type.value}:{self.object_id}"


@dataclass(frozen=True, slots=True, kw_only=True)
class RelationTuple:
    """Relationship fact ``(subject, relation, object)``.

    Frozen and hashable: equality is the full key, which is also the
    uniqueness key enforced by every tuple store.

    Attributes:
        subject_id: User or team identifier.
        subject_type: USER or TEAM.
        relation: Relation held on the object.
        object_type: Type of the object.
        object_id: Object identifier.
    """

    subject_id: str
    subject_type: SubjectType
    relation: Relation
    object_type: ObjectType
    object_id: str

    @classmethod
    def of(
        cls, subject: SubjectRef, relation: Relation, obj: ObjectRef
    ) -> "RelationTuple":
        """Build a tuple from subject/object references."""
        return cls(
            subject_id=subject.subject_id,
            subject_type=subject.subject_type,
            relation=relation,
            object_type=obj.object_type,
            object_id=obj.object_id,
        )

    @property
    def subject(self) -> SubjectRef:
        return SubjectRef(subject_type=self.subject_type, subject_id=self.subject_id)

    @property
    def object(self) -> ObjectRef:
        return ObjectRef(object_type=self.object_type, object_id=self.object_id)

    def __str__(self) -> str:
        return f"{self.subject}#{self.relation.value}@{self.object}"


@dataclass(frozen=True, slots=True, kw_only=True)
class ResourceLink:
    """Structural link from a child object to one of its parents.

    Example:
        ResourceLink(child=ObjectRef(APP, app_id), parent=ObjectRef(ORG, org_id))
    """

    child: ObjectRef
    parent: ObjectRef
