"""Unit tests for the authorization model tables."""

import pytest

from src.domain.authorization_model import (
    CAPABILITY_RELATIONS,
    PARENT_TYPES,
    RELATIONS_BY_TYPE,
    ROLE_FLAG_RELATIONS,
    intersection_components,
    is_assignable,
    parent_relations,
    satisfying_relations,
)
from src.domain.entities import Role, default_roles
from src.domain.enums import Capability, ObjectType, Relation


@pytest.mark.unit
class TestSatisfyingRelations:
    def test_includes_relation_itself(self):
        assert Relation.VIEWER in satisfying_relations(ObjectType.APP, Relation.VIEWER)

    def test_org_member_closure(self):
        assert satisfying_relations(ObjectType.ORG, Relation.MEMBER) == frozenset(
            {Relation.MEMBER, Relation.ADMIN, Relation.MASTER}
        )

    def test_closure_is_transitive(self):
        # viewer <- editor <- admin
        assert Relation.ADMIN in satisfying_relations(ObjectType.APP, Relation.VIEWER)

    def test_org_settings_reserved_for_master(self):
        assert satisfying_relations(
            ObjectType.ORG, Relation.CAN_MANAGE_ORG_SETTINGS
        ) == frozenset({Relation.CAN_MANAGE_ORG_SETTINGS, Relation.MASTER})


@pytest.mark.unit
class TestModelTables:
    def test_every_type_has_parent_entry(self):
        assert set(PARENT_TYPES) == set(ObjectType)

    def test_org_has_no_parent(self):
        assert PARENT_TYPES[ObjectType.ORG] == ()

    def test_gpg_key_manage_maps_to_org_admin(self):
        assert parent_relations(ObjectType.GPG_KEY, ObjectType.ORG, Relation.CAN_MANAGE) == (
            Relation.ADMIN,
        )

    def test_unmapped_parent_relation_is_empty(self):
        assert parent_relations(ObjectType.GPG_KEY, ObjectType.ORG, Relation.CAN_SIGN) == ()

    def test_intersections_not_assignable(self):
        assert intersection_components(ObjectType.ORG, Relation.CAN_MANAGE_API_KEYS) == (
            Relation.HAVE_API_ACCESS,
            Relation.CAN_MANAGE_USERS,
        )
        assert not is_assignable(ObjectType.ORG, Relation.CAN_MANAGE_API_KEYS)
        assert is_assignable(ObjectType.ORG, Relation.HAVE_API_ACCESS)

    def test_every_capability_reads_a_valid_org_relation(self):
        assert set(CAPABILITY_RELATIONS) == set(Capability)
        for relation in CAPABILITY_RELATIONS.values():
            assert relation in RELATIONS_BY_TYPE[ObjectType.ORG]

    def test_role_flag_relations_are_assignable_on_org(self):
        for relation in ROLE_FLAG_RELATIONS:
            assert is_assignable(ObjectType.ORG, relation)


@pytest.mark.unit
class TestRoles:
    def test_granted_relations_always_include_member(self):
        role = Role(org_id="o1", name="Empty")

        assert role.granted_relations() == [Relation.MEMBER]

    def test_default_roles(self):
        roles = {role.name: role for role in default_roles("o1")}

        assert list(roles) == ["Org Admin", "Billing Admin", "Manager", "Developer", "Viewer"]
        assert roles["Org Admin"].is_master and roles["Org Admin"].is_admin
        assert set(roles["Viewer"].granted_relations()) == {Relation.MEMBER, Relation.CAN_VIEW}
        assert roles["Billing Admin"].have_billing_options
        assert not roles["Manager"].is_admin
        assert all(role.org_id == "o1" for role in roles.values())
