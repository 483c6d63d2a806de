"""Authorization model: which relations exist and how they imply each other.

The model is static data plus a few pure lookup functions. The checker in
``src.infrastructure.authorization`` walks it; nothing here touches storage.

Three rule kinds:
    Implication: a stronger relation on the same object satisfies a weaker
        one (org master => admin => member => can_view).
    Intersection: an org relation satisfied only when all of its component
        relations are (can_manage_api_keys = have_api_access AND
        can_manage_users). Intersection relations are never written as tuples.
    Parent mapping: a relation on a child object is also satisfied by a
        mapped relation on a structural parent (app can_view <= org can_view).

Reference:
    Original model: org/app/env_type/gpg_key/certificate/team type
    definitions with computed usersets and tuple-to-userset parents.
"""

from collections.abc import Mapping
from functools import cache
from types import MappingProxyType

from src.domain.enums import Capability, ObjectType, Relation

R = Relation

_ORG_FLAGS = (
    R.HAVE_API_ACCESS,
    R.HAVE_BILLING_OPTIONS,
    R.HAVE_WEBHOOK_ACCESS,
    R.HAVE_GPG_ACCESS,
    R.HAVE_CERT_ACCESS,
    R.HAVE_AUDIT_ACCESS,
)

_ORG_ADMIN_CAPABILITIES = (
    R.CAN_MANAGE_ROLES,
    R.CAN_MANAGE_USERS,
    R.CAN_MANAGE_APPS,
    R.CAN_MANAGE_TEAMS,
    R.CAN_MANAGE_INVITES,
    R.CAN_VIEW_AUDIT_LOGS,
)

RELATIONS_BY_TYPE: Mapping[ObjectType, frozenset[Relation]] = MappingProxyType(
    {
        ObjectType.ORG: frozenset(
            (
                R.MASTER,
                R.ADMIN,
                R.MEMBER,
                R.CAN_VIEW,
                R.CAN_EDIT,
                R.CAN_MANAGE_API_KEYS,
                R.CAN_MANAGE_WEBHOOKS,
                R.CAN_MANAGE_ORG_SETTINGS,
                *_ORG_FLAGS,
                *_ORG_ADMIN_CAPABILITIES,
            )
        ),
        ObjectType.APP: frozenset(
            (R.ADMIN, R.EDITOR, R.VIEWER, R.CAN_VIEW, R.CAN_EDIT, R.CAN_MANAGE)
        ),
        ObjectType.ENV_TYPE: frozenset(
            (
                R.ADMIN,
                R.EDITOR,
                R.VIEWER,
                R.CAN_VIEW,
                R.CAN_EDIT,
                R.CAN_MANAGE,
                R.CAN_MANAGE_PROTECTED,
            )
        ),
        ObjectType.TEAM: frozenset((R.MEMBER, R.CAN_VIEW, R.CAN_MANAGE)),
        ObjectType.GPG_KEY: frozenset(
            (R.OWNER, R.MANAGER, R.SIGNER, R.CAN_VIEW, R.CAN_SIGN, R.CAN_MANAGE)
        ),
        ObjectType.CERTIFICATE: frozenset(
            (R.OWNER, R.MANAGER, R.VIEWER, R.CAN_VIEW, R.CAN_MANAGE, R.CAN_REVOKE)
        ),
    }
)
"""Valid relations per object type."""

# relation -> relations that directly imply it (one hop)
_APP_LIKE_IMPLIED: dict[Relation, tuple[Relation, ...]] = {
    R.CAN_VIEW: (R.ADMIN, R.EDITOR, R.VIEWER),
    R.CAN_EDIT: (R.ADMIN, R.EDITOR),
    R.CAN_MANAGE: (R.ADMIN,),
    R.VIEWER: (R.EDITOR, R.ADMIN),
    R.EDITOR: (R.ADMIN,),
}

IMPLIED_BY: Mapping[ObjectType, Mapping[Relation, tuple[Relation, ...]]] = (
    MappingProxyType(
        {
            ObjectType.ORG: {
                R.CAN_VIEW: (R.ADMIN, R.MASTER, R.MEMBER),
                R.CAN_EDIT: (R.ADMIN, R.MASTER),
                R.MEMBER: (R.ADMIN, R.MASTER),
                R.ADMIN: (R.MASTER,),
                R.CAN_MANAGE_ORG_SETTINGS: (R.MASTER,),
                **{flag: (R.ADMIN, R.MASTER) for flag in _ORG_FLAGS},
                **{cap: (R.ADMIN, R.MASTER) for cap in _ORG_ADMIN_CAPABILITIES},
            },
            ObjectType.APP: _APP_LIKE_IMPLIED,
            ObjectType.ENV_TYPE: {
                **_APP_LIKE_IMPLIED,
                R.CAN_MANAGE_PROTECTED: (R.ADMIN,),
            },
            ObjectType.TEAM: {
                R.CAN_VIEW: (R.MEMBER,),
            },
            ObjectType.GPG_KEY: {
                R.CAN_VIEW: (R.OWNER, R.MANAGER, R.SIGNER),
                R.CAN_SIGN: (R.OWNER, R.MANAGER, R.SIGNER),
                R.CAN_MANAGE: (R.OWNER, R.MANAGER),
            },
            ObjectType.CERTIFICATE: {
                R.CAN_VIEW: (R.OWNER, R.MANAGER, R.VIEWER),
                R.CAN_MANAGE: (R.OWNER, R.MANAGER),
                R.CAN_REVOKE: (R.OWNER, R.MANAGER),
            },
        }
    )
)

INTERSECTIONS: Mapping[tuple[ObjectType, Relation], tuple[Relation, ...]] = (
    MappingProxyType(
        {
            (ObjectType.ORG, R.CAN_MANAGE_API_KEYS): (
                R.HAVE_API_ACCESS,
                R.CAN_MANAGE_USERS,
            ),
            (ObjectType.ORG, R.CAN_MANAGE_WEBHOOKS): (
                R.HAVE_WEBHOOK_ACCESS,
                R.CAN_MANAGE_USERS,
            ),
        }
    )
)
"""Relations computed as the AND of other relations on the same object."""

_APP_TO_ORG = {
    R.ADMIN: (R.ADMIN,),
    R.VIEWER: (R.CAN_VIEW,),
    R.EDITOR: (R.CAN_EDIT,),
    R.CAN_VIEW: (R.CAN_VIEW,),
    R.CAN_EDIT: (R.CAN_EDIT,),
    R.CAN_MANAGE: (R.CAN_MANAGE_APPS,),
}

PARENT_RELATIONS: Mapping[
    tuple[ObjectType, ObjectType], Mapping[Relation, tuple[Relation, ...]]
] = MappingProxyType(
    {
        (ObjectType.APP, ObjectType.ORG): _APP_TO_ORG,
        (ObjectType.ENV_TYPE, ObjectType.APP): {
            relation: (relation,)
            for relation in (
                R.ADMIN,
                R.EDITOR,
                R.VIEWER,
                R.CAN_VIEW,
                R.CAN_EDIT,
                R.CAN_MANAGE,
            )
        },
        (ObjectType.ENV_TYPE, ObjectType.ORG): {
            **_APP_TO_ORG,
            R.CAN_MANAGE_PROTECTED: (R.ADMIN,),
        },
        (ObjectType.GPG_KEY, ObjectType.ORG): {
            R.CAN_VIEW: (R.CAN_VIEW,),
            R.CAN_MANAGE: (R.ADMIN,),
        },
        (ObjectType.CERTIFICATE, ObjectType.ORG): {
            R.CAN_VIEW: (R.CAN_VIEW,),
            R.CAN_MANAGE: (R.ADMIN,),
            R.CAN_REVOKE: (R.ADMIN,),
        },
        (ObjectType.TEAM, ObjectType.ORG): {
            R.CAN_VIEW: (R.CAN_VIEW,),
            R.CAN_MANAGE: (R.CAN_MANAGE_TEAMS,),
        },
    }
)
"""(child type, parent type) -> child relation -> parent relations."""

PARENT_TYPES: Mapping[ObjectType, tuple[ObjectType, ...]] = MappingProxyType(
    {
        ObjectType.APP: (ObjectType.ORG,),
        ObjectType.ENV_TYPE: (ObjectType.APP, ObjectType.ORG),
        ObjectType.GPG_KEY: (ObjectType.ORG,),
        ObjectType.CERTIFICATE: (ObjectType.ORG,),
        ObjectType.TEAM: (ObjectType.ORG,),
        ObjectType.ORG: (),
    }
)
"""Allowed structural parent types per child type."""

CAPABILITY_RELATIONS: Mapping[Capability, Relation] = MappingProxyType(
    {
        Capability.IS_ADMIN: R.ADMIN,
        Capability.IS_MASTER: R.MASTER,
        **{
            cap: Relation(cap.value)
            for cap in Capability
            if cap not in (Capability.IS_ADMIN, Capability.IS_MASTER)
        },
    }
)
"""Capability -> org relation it is read from."""

ROLE_FLAG_RELATIONS: tuple[Relation, ...] = (
    R.MASTER,
    R.ADMIN,
    R.CAN_VIEW,
    R.CAN_EDIT,
    *_ORG_FLAGS,
)
"""Org relations a role flag can grant (besides the implicit member)."""


def is_valid_relation(object_type: ObjectType, relation: Relation) -> bool:
    """Whether ``relation`` exists on ``object_type``."""
    return relation in RELATIONS_BY_TYPE[object_type]


def is_assignable(object_type: ObjectType, relation: Relation) -> bool:
    """Whether a tuple may be written for ``relation`` on ``object_type``.

    Intersection relations are computed only and never stored.
    """
    return (
        is_valid_relation(object_type, relation)
        and (object_type, relation) not in INTERSECTIONS
    )


@cache
def satisfying_relations(
    object_type: ObjectType, relation: Relation
) -> frozenset[Relation]:
    """Every relation on the same object that satisfies ``relation``.

    Transitive closure of ``IMPLIED_BY`` including ``relation`` itself.

    Example:
        >>> sorted(r.value for r in satisfying_relations(ObjectType.ORG, Relation.MEMBER))
        ['admin', 'master', 'member']
    """
    implied = IMPLIED_BY.get(object_type, {})
    found = {relation}
    pending = [relation]
    while pending:
        current = pending.pop()
        for stronger in implied.get(current, ()):
            if stronger not in found:
                found.add(stronger)
                pending.append(stronger)
    return frozenset(found)


def parent_relations(
    child_type: ObjectType, parent_type: ObjectType, relation: Relation
) -> tuple[Relation, ...]:
    """Relations on a parent of ``parent_type`` that satisfy ``relation`` on the child."""
    return PARENT_RELATIONS.get((child_type, parent_type), {}).get(relation, ())


def intersection_components(
    object_type: ObjectType, relation: Relation
) -> tuple[Relation, ...] | None:
    """Component relations when ``relation`` is an intersection, else None."""
    return INTERSECTIONS.get((object_type, relation))
