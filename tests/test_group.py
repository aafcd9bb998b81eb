"""Tests for the group model and group directory."""
import pytest

from offline_chat.core.errors import ProtectedRoleError, UnknownRoleError
from offline_chat.core.groups import GroupDirectory
from offline_chat.models.group import (
    Group, ROLE_ADMIN, ROLE_PARTICIPANT, ROLE_READER,
)
from offline_chat.models.permissions import Permission


class TestGroup:

    def test_builtin_roles_and_defaults(self):
        group = Group(group_name="Team")

        assert group.roles == {ROLE_ADMIN, ROLE_PARTICIPANT, ROLE_READER}
        assert group.get_role_permissions(ROLE_ADMIN) == {Permission.ALL}
        assert group.get_role_permissions(ROLE_PARTICIPANT) == {Permission.GROUP_SEND_MESSAGE}
        assert group.get_role_permissions(ROLE_READER) == set()

    def test_add_role_is_idempotent(self):
        group = Group(group_name="Team")
        group.add_role("Mod")
        group.set_role_permissions("Mod", {Permission.GROUP_DELETE_MESSAGES})

        group.add_role("Mod")

        assert group.get_role_permissions("Mod") == {Permission.GROUP_DELETE_MESSAGES}

    def test_set_role_permissions_replaces_with_copy(self):
        group = Group(group_name="Team")
        perms = {Permission.GROUP_ADD_MEMBER}
        group.set_role_permissions(ROLE_PARTICIPANT, perms)
        perms.add(Permission.GROUP_DELETE_GROUP)

        assert group.get_role_permissions(ROLE_PARTICIPANT) == {Permission.GROUP_ADD_MEMBER}

    def test_set_role_permissions_unknown_role(self):
        group = Group(group_name="Team")

        with pytest.raises(UnknownRoleError) as exc_info:
            group.set_role_permissions("Ghost", {Permission.GROUP_READ})
        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.role == "Ghost"

    def test_admin_permissions_are_protected(self):
        group = Group(group_name="Team")

        with pytest.raises(ProtectedRoleError):
            group.set_role_permissions(ROLE_ADMIN, {Permission.GROUP_READ})
        assert group.get_role_permissions(ROLE_ADMIN) == {Permission.ALL}

    def test_member_roles_are_validated_on_add_and_change(self):
        group = Group(group_name="Team")

        with pytest.raises(UnknownRoleError):
            group.add_member("u1", "Ghost")
        group.add_member("u1", ROLE_READER)
        with pytest.raises(UnknownRoleError):
            group.set_member_role("u1", "Ghost")

        assert group.role_of("u1") == ROLE_READER

    def test_has_permission_wildcard_and_exact(self):
        group = Group(group_name="Team")
        group.add_member("admin", ROLE_ADMIN)
        group.add_member("part", ROLE_PARTICIPANT)

        for permission in Permission:
            assert group.has_permission("admin", permission)
        assert group.has_permission("part", Permission.GROUP_SEND_MESSAGE)
        assert not group.has_permission("part", Permission.GROUP_DELETE_GROUP)

    def test_non_member_has_no_permissions(self):
        group = Group(group_name="Team")

        assert not any(group.has_permission("stranger", p) for p in Permission)

    def test_reader_cannot_send_after_unrelated_grant(self):
        group = Group(group_name="Team")
        group.add_member("reader", ROLE_READER)
        group.add_role("Helper")
        group.set_role_permissions("Helper", {Permission.GROUP_ADD_MEMBER})

        assert not group.has_permission("reader", Permission.GROUP_SEND_MESSAGE)

        group.set_role_permissions(ROLE_READER, {Permission.GROUP_SEND_MESSAGE})
        assert group.has_permission("reader", Permission.GROUP_SEND_MESSAGE)

    def test_is_admin_uses_role_name_only(self):
        group = Group(group_name="Team")
        group.add_role("Owner")
        group.set_role_permissions("Owner", {Permission.ALL})
        group.add_member("owner", "Owner")
        group.add_member("admin", ROLE_ADMIN)

        assert group.is_admin("admin")
        assert not group.is_admin("owner")
        assert group.has_permission("owner", Permission.GROUP_DELETE_GROUP)

    def test_remove_member_is_unconditional(self):
        group = Group(group_name="Team")
        group.add_member("u1", ROLE_READER)

        group.remove_member("u1")
        group.remove_member("u1")

        assert not group.is_member("u1")
        assert group.member_count == 0

    def test_from_dict_restores_builtins(self):
        data = Group(group_name="Team").to_dict()
        data["role_permissions"] = {"Mod": ["GROUP_READ"]}

        group = Group.from_dict(data)

        assert {ROLE_ADMIN, ROLE_PARTICIPANT, ROLE_READER, "Mod"} <= group.roles
        assert group.get_role_permissions(ROLE_ADMIN) == {Permission.ALL}


class TestGroupDirectory:

    def test_create_adds_creator_as_admin(self):
        directory = GroupDirectory()
        group_id = directory.create("Team", "creator-id")

        assert directory.is_admin(group_id, "creator-id")
        assert directory.members_with_roles(group_id) == {"creator-id": ROLE_ADMIN}

    def test_create_without_creator_has_no_members(self):
        directory = GroupDirectory()
        group_id = directory.create("Team")

        assert directory.members_with_roles(group_id) == {}

    def test_group_ids_are_unique(self):
        directory = GroupDirectory()
        ids = {directory.create("Team") for _ in range(10)}

        assert len(ids) == 10

    def test_unknown_group_operations(self):
        directory = GroupDirectory()

        assert not directory.add_role("nope", "Mod")
        assert not directory.add_member("nope", "u1", ROLE_READER)
        assert not directory.remove_member("nope", "u1")
        assert not directory.has_permission("nope", "u1", Permission.GROUP_READ)
        assert not directory.is_admin("nope", "u1")
        assert not directory.delete("nope")
        assert directory.available_roles("nope") == set()

    def test_delete_removes_permissions(self):
        directory = GroupDirectory()
        group_id = directory.create("Team", "creator-id")

        assert directory.delete(group_id)
        assert not directory.delete(group_id)
        assert not directory.has_permission(group_id, "creator-id", Permission.ALL)

    def test_rename_keeps_id(self):
        directory = GroupDirectory()
        group_id = directory.create("Team")

        assert directory.rename(group_id, "Crew")
        assert directory.names() == {group_id: "Crew"}

    def test_groups_for_user(self):
        directory = GroupDirectory()
        first = directory.create("One", "u1")
        directory.create("Two", "u2")

        assert [g.group_id for g in directory.groups_for_user("u1")] == [first]
