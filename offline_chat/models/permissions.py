"""Permission catalog for group roles."""
from enum import Enum
from typing import Iterable, Set


class Permission(Enum):
    """Capabilities a group role can grant."""
    ALL = "ALL"
    GROUP_SEND_MESSAGE = "GROUP_SEND_MESSAGE"
    GROUP_ADD_MEMBER = "GROUP_ADD_MEMBER"
    GROUP_REMOVE_MEMBER = "GROUP_REMOVE_MEMBER"
    GROUP_DELETE_MESSAGES = "GROUP_DELETE_MESSAGES"
    GROUP_DELETE_GROUP = "GROUP_DELETE_GROUP"
    GROUP_READ = "GROUP_READ"

    @classmethod
    def parse(cls, value) -> "Permission":
        """Accept either a Permission or its string name."""
        if isinstance(value, cls):
            return value
        return cls(str(value).strip().upper())


def parse_permissions(values: Iterable) -> Set[Permission]:
    """Convert an iterable of names/members into a set of permissions.

    Raises ValueError on an unknown token.
    """
    return {Permission.parse(v) for v in values}
