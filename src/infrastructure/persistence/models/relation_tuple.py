"""Relation tuple and structural link models.

``relation_tuples`` carries a unique constraint on the full key; concurrent
grants of the same tuple race on that constraint and the loser reports
"already present" instead of failing.
"""

from sqlalchemy import Index, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.base import BaseModel


class RelationTupleModel(BaseModel):
    """One ``(subject, relation, object)`` fact. Insert/delete only."""

    __tablename__ = "relation_tuples"

    subject_type: Mapped[str] = mapped_column(String(20), nullable=False)
    subject_id: Mapped[str] = mapped_column(String(128), nullable=False)
    relation: Mapped[str] = mapped_column(String(64), nullable=False)
    object_type: Mapped[str] = mapped_column(String(20), nullable=False)
    object_id: Mapped[str] = mapped_column(String(128), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "subject_type",
            "subject_id",
            "relation",
            "object_type",
            "object_id",
            name="uq_relation_tuples_key",
        ),
        # Checker lookups: "does any of these subjects hold any of these
        # relations on this object"
        Index("idx_relation_tuples_object", "object_type", "object_id", "relation"),
        # Role resync: "every tuple this user holds"
        Index("idx_relation_tuples_subject", "subject_type", "subject_id"),
    )


class ResourceLinkModel(BaseModel):
    """Child -> parent structural link (app -> org, env_type -> app, ...)."""

    __tablename__ = "resource_links"

    child_type: Mapped[str] = mapped_column(String(20), nullable=False)
    child_id: Mapped[str] = mapped_column(String(128), nullable=False)
    parent_type: Mapped[str] = mapped_column(String(20), nullable=False)
    parent_id: Mapped[str] = mapped_column(String(128), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "child_type",
            "child_id",
            "parent_type",
            "parent_id",
            name="uq_resource_links_key",
        ),
        Index("idx_resource_links_child", "child_type", "child_id"),
    )
