"""Domain errors raised inside the store and caught by the service layer."""


class ChatStoreError(Exception):
    """Base class for offline chat store errors."""


class UnknownRoleError(ChatStoreError, ValueError):
    """A role name was referenced that is not in the group's role catalog."""

    def __init__(self, group_id: str, role: str):
        super().__init__(f"Unknown role {role!r} in group {group_id}")
        self.group_id = group_id
        self.role = role


class ProtectedRoleError(ChatStoreError, ValueError):
    """Attempted to change the permissions of a built-in protected role."""

    def __init__(self, role: str):
        super().__init__(f"Role {role!r} cannot be modified")
        self.role = role


class SnapshotError(ChatStoreError):
    """A snapshot file could not be decoded into a store."""
