"""Message ledger: append-only conversation histories."""
from typing import Dict, List

from ..models.message import Message

PRIVATE_KEY_SEPARATOR = "#"


def private_key(a: str, b: str) -> str:
    """Canonical conversation key for two usernames (order independent)."""
    return PRIVATE_KEY_SEPARATOR.join(sorted((a, b)))


class MessageLedger:
    """Private and group message histories in insertion order."""

    def __init__(self):
        self._private: Dict[str, List[Message]] = {}
        self._group: Dict[str, List[Message]] = {}

    # Private messages
    def append_private(self, sender_id: str, from_username: str, to_username: str, content: str) -> Message:
        key = private_key(from_username, to_username)
        message = Message(sender_id=sender_id, conversation_id=key, content=content)
        self._private.setdefault(key, []).append(message)
        return message

    def list_private(self, a: str, b: str) -> List[Message]:
        """Messages between two users, oldest first."""
        return list(self._private.get(private_key(a, b), ()))

    # Group messages
    def append_group(self, sender_id: str, group_id: str, content: str) -> Message:
        message = Message(sender_id=sender_id, conversation_id=group_id, content=content)
        self._group.setdefault(group_id, []).append(message)
        return message

    def list_group(self, group_id: str) -> List[Message]:
        """Messages of a group, oldest first."""
        return list(self._group.get(group_id, ()))

    def delete_group_message(self, group_id: str, message_id: str) -> bool:
        """Remove one group message by id."""
        messages = self._group.get(group_id)
        if not messages:
            return False
        for index, message in enumerate(messages):
            if message.message_id == message_id:
                del messages[index]
                return True
        return False

    def drop_group(self, group_id: str) -> None:
        """Forget a group's entire history."""
        self._group.pop(group_id, None)

    def conversation_sizes(self) -> Dict[str, int]:
        """Message counts per conversation key, for change polling."""
        sizes = {key: len(messages) for key, messages in self._private.items()}
        sizes.update((key, len(messages)) for key, messages in self._group.items())
        return sizes

    def to_dict(self) -> dict:
        return {
            "private": {k: [m.to_dict() for m in v] for k, v in self._private.items()},
            "group": {k: [m.to_dict() for m in v] for k, v in self._group.items()},
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'MessageLedger':
        ledger = cls()
        for key, items in data.get("private", {}).items():
            ledger._private[str(key)] = [Message.from_dict(item) for item in items]
        for key, items in data.get("group", {}).items():
            ledger._group[str(key)] = [Message.from_dict(item) for item in items]
        return ledger
