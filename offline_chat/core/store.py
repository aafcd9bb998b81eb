"""Aggregate store owning users, relationships, groups and messages."""
from typing import Optional

from .groups import GroupDirectory
from .ledger import MessageLedger
from .registry import IdentityRegistry
from .relationships import RelationshipGraph
from ..models.message import Message
from ..models.user import User

SNAPSHOT_FORMAT = 1


class DataStore:
    """Root of all chat data.

    Components are reachable as attributes; the cross-component
    operations (registration, group deletion, message appends) live here
    so the pieces stay consistent with each other.
    """

    def __init__(self,
                 users: Optional[IdentityRegistry] = None,
                 relationships: Optional[RelationshipGraph] = None,
                 groups: Optional[GroupDirectory] = None,
                 messages: Optional[MessageLedger] = None):
        self.users = users if users is not None else IdentityRegistry()
        self.relationships = relationships if relationships is not None else RelationshipGraph()
        self.groups = groups if groups is not None else GroupDirectory()
        self.messages = messages if messages is not None else MessageLedger()

    # Users
    def register_user(self, username: str, password_hash: str) -> bool:
        """Register a user and give them empty relationship sets."""
        if not self.users.register(username, password_hash):
            return False
        self.relationships.add_user(username)
        return True

    def get_user(self, username: str) -> Optional[User]:
        return self.users.resolve_user(username)

    # Groups
    def create_group(self, name: str, creator_username: str) -> str:
        """Create a group; the creator becomes Admin if they are registered."""
        creator = self.users.resolve_user(creator_username)
        return self.groups.create(name, creator.user_id if creator else None)

    def delete_group(self, group_id: str) -> bool:
        """Delete a group together with its message history."""
        existed = self.groups.delete(group_id)
        self.messages.drop_group(group_id)
        return existed

    # Messages
    def add_private_message(self, sender: User, to_username: str, content: str) -> Message:
        return self.messages.append_private(sender.user_id, sender.username, to_username, content)

    def add_group_message(self, sender: User, group_id: str, content: str) -> Message:
        return self.messages.append_group(sender.user_id, group_id, content)

    # Snapshot conversion
    def to_dict(self) -> dict:
        return {
            "format": SNAPSHOT_FORMAT,
            "users": self.users.to_list(),
            "relationships": self.relationships.to_dict(),
            "groups": self.groups.to_list(),
            "messages": self.messages.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'DataStore':
        """Rebuild a store. Raises on malformed input instead of half-loading."""
        if not isinstance(data, dict):
            raise ValueError("Snapshot root must be an object")
        if data.get("format") != SNAPSHOT_FORMAT:
            raise ValueError(f"Unsupported snapshot format: {data.get('format')!r}")

        users = IdentityRegistry.from_list(data.get("users", []))
        relationships = RelationshipGraph.from_dict(data.get("relationships", {}), users.usernames())
        groups = GroupDirectory.from_list(data.get("groups", []))
        messages = MessageLedger.from_dict(data.get("messages", {}))
        return cls(users, relationships, groups, messages)
