"""Group and role engine operating on groups by id."""
import logging
from typing import Dict, Iterable, List, Optional, Set

from ..models.group import Group, ROLE_ADMIN
from ..models.permissions import Permission

logger = logging.getLogger(__name__)


class GroupDirectory:
    """All groups, addressed by group id.

    Membership edits here are permission-agnostic; the service layer
    decides who may call them. Calls naming an unknown group are no-ops
    returning False (or None), except role validation which raises
    ``UnknownRoleError`` from the group itself.
    """

    def __init__(self):
        self._groups: Dict[str, Group] = {}

    def create(self, name: str, creator_id: Optional[str] = None) -> str:
        """Create a group with the built-in roles, making the creator Admin."""
        group = Group(group_name=name)
        if creator_id is not None:
            group.add_member(creator_id, ROLE_ADMIN)
        self._groups[group.group_id] = group
        logger.debug("Created group %s (%s)", name, group.group_id)
        return group.group_id

    def get(self, group_id: str) -> Optional[Group]:
        return self._groups.get(group_id)

    def exists(self, group_id: str) -> bool:
        return group_id in self._groups

    def rename(self, group_id: str, name: str) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        group.group_name = name
        return True

    def delete(self, group_id: str) -> bool:
        """Remove a group. Its message history is dropped by the store."""
        return self._groups.pop(group_id, None) is not None

    # Roles
    def add_role(self, group_id: str, role: str) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        group.add_role(role)
        return True

    def set_role_permissions(self, group_id: str, role: str, permissions: Iterable[Permission]) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        group.set_role_permissions(role, permissions)
        return True

    def role_permissions(self, group_id: str, role: str) -> Set[Permission]:
        group = self._groups.get(group_id)
        return group.get_role_permissions(role) if group else set()

    def available_roles(self, group_id: str) -> Set[str]:
        group = self._groups.get(group_id)
        return group.roles if group else set()

    # Membership
    def add_member(self, group_id: str, user_id: str, role: str) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        group.add_member(user_id, role)
        return True

    def set_member_role(self, group_id: str, user_id: str, role: str) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        group.set_member_role(user_id, role)
        return True

    def remove_member(self, group_id: str, user_id: str) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        group.remove_member(user_id)
        return True

    def members_with_roles(self, group_id: str) -> Dict[str, str]:
        """user_id -> role name."""
        group = self._groups.get(group_id)
        return dict(group.member_roles) if group else {}

    # Queries
    def has_permission(self, group_id: str, user_id: str, permission: Permission) -> bool:
        group = self._groups.get(group_id)
        if not group:
            return False
        return group.has_permission(user_id, permission)

    def is_admin(self, group_id: str, user_id: str) -> bool:
        group = self._groups.get(group_id)
        return group.is_admin(user_id) if group else False

    def groups_for_user(self, user_id: str) -> List[Group]:
        return [group for group in self._groups.values() if group.is_member(user_id)]

    def all_groups(self) -> List[Group]:
        return list(self._groups.values())

    def names(self) -> Dict[str, str]:
        """group_id -> group name."""
        return {gid: group.group_name for gid, group in self._groups.items()}

    def __len__(self) -> int:
        return len(self._groups)

    def to_list(self) -> List[dict]:
        return [group.to_dict() for group in self._groups.values()]

    @classmethod
    def from_list(cls, items: List[dict]) -> 'GroupDirectory':
        directory = cls()
        for item in items:
            group = Group.from_dict(item)
            directory._groups[group.group_id] = group
        return directory
