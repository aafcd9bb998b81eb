"""Message model shared by private and group conversations."""
from dataclasses import dataclass, field
import time
import uuid


@dataclass(frozen=True, eq=False)
class Message:
    """An immutable chat message.

    ``conversation_id`` is the group id for group messages and the
    canonical ``"a#b"`` pair key for private ones. Two messages are equal
    when their ``message_id`` matches.
    """
    sender_id: str
    conversation_id: str
    content: str
    message_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: float = field(default_factory=time.time)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return self.message_id == other.message_id

    def __hash__(self) -> int:
        return hash(self.message_id)

    def to_dict(self) -> dict:
        return {
            "message_id": self.message_id,
            "sender_id": self.sender_id,
            "conversation_id": self.conversation_id,
            "content": self.content,
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'Message':
        return cls(
            sender_id=str(data["sender_id"]),
            conversation_id=str(data["conversation_id"]),
            content=str(data["content"]),
            message_id=str(data["message_id"]),
            timestamp=float(data["timestamp"]),
        )
