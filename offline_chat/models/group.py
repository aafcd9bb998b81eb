"""Group model with its role catalog and permission table."""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Set
import time
import uuid

from .permissions import Permission
from ..core.errors import ProtectedRoleError, UnknownRoleError

ROLE_ADMIN = "Admin"
ROLE_PARTICIPANT = "Participant"
ROLE_READER = "Reader"

BUILTIN_ROLES = (ROLE_ADMIN, ROLE_PARTICIPANT, ROLE_READER)


def _default_role_permissions() -> Dict[str, Set[Permission]]:
    return {
        ROLE_ADMIN: {Permission.ALL},
        ROLE_PARTICIPANT: {Permission.GROUP_SEND_MESSAGE},
        ROLE_READER: set(),
    }


@dataclass
class Group:
    """A chat group.

    Every member holds exactly one role, and every role a member holds
    must exist in ``role_permissions`` (whose keys are the role catalog).
    """
    group_name: str
    group_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    role_permissions: Dict[str, Set[Permission]] = field(default_factory=_default_role_permissions)
    member_roles: Dict[str, str] = field(default_factory=dict)
    created_timestamp: float = field(default_factory=time.time)

    # Roles
    @property
    def roles(self) -> Set[str]:
        """Names of every role defined in this group."""
        return set(self.role_permissions)

    def has_role(self, role: str) -> bool:
        return role in self.role_permissions

    def add_role(self, role: str) -> None:
        """Add a custom role with no permissions. Existing roles are left alone."""
        self.role_permissions.setdefault(role, set())

    def set_role_permissions(self, role: str, permissions: Iterable[Permission]) -> None:
        """Replace the permission set of an existing role."""
        if not self.has_role(role):
            raise UnknownRoleError(self.group_id, role)
        new_permissions = set(permissions)
        if role == ROLE_ADMIN and new_permissions != {Permission.ALL}:
            raise ProtectedRoleError(role)
        self.role_permissions[role] = new_permissions

    def get_role_permissions(self, role: str) -> Set[Permission]:
        """Copy of a role's permissions (empty for unknown roles)."""
        return set(self.role_permissions.get(role, ()))

    # Membership
    def add_member(self, user_id: str, role: str) -> None:
        """Add a member (or overwrite their role)."""
        self.set_member_role(user_id, role)

    def set_member_role(self, user_id: str, role: str) -> None:
        if not self.has_role(role):
            raise UnknownRoleError(self.group_id, role)
        self.member_roles[user_id] = role

    def remove_member(self, user_id: str) -> None:
        self.member_roles.pop(user_id, None)

    def is_member(self, user_id: str) -> bool:
        return user_id in self.member_roles

    def role_of(self, user_id: str):
        return self.member_roles.get(user_id)

    def is_admin(self, user_id: str) -> bool:
        """True only for members holding the built-in Admin role."""
        return self.member_roles.get(user_id) == ROLE_ADMIN

    def has_permission(self, user_id: str, permission: Permission) -> bool:
        role = self.member_roles.get(user_id)
        if role is None:
            return False
        granted = self.role_permissions.get(role, ())
        return Permission.ALL in granted or permission in granted

    @property
    def member_count(self) -> int:
        return len(self.member_roles)

    def to_dict(self) -> dict:
        return {
            "group_id": self.group_id,
            "group_name": self.group_name,
            "created_timestamp": self.created_timestamp,
            "role_permissions": {
                role: sorted(p.value for p in perms)
                for role, perms in self.role_permissions.items()
            },
            "member_roles": dict(self.member_roles),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Group':
        role_permissions = {
            str(role): {Permission(p) for p in perms}
            for role, perms in data["role_permissions"].items()
        }
        # Built-ins must survive any snapshot
        for role, perms in _default_role_permissions().items():
            role_permissions.setdefault(role, perms)
        role_permissions[ROLE_ADMIN] = {Permission.ALL}

        group = cls(
            group_name=str(data["group_name"]),
            group_id=str(data["group_id"]),
            role_permissions=role_permissions,
            created_timestamp=float(data.get("created_timestamp", 0.0)),
        )
        for user_id, role in data.get("member_roles", {}).items():
            group.set_member_role(str(user_id), str(role))
        return group
