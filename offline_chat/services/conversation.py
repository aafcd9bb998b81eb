"""Conversation views used by chat screens.

A screen only needs to fetch history, know whether it may send, and send.
Private and group chats answer these differently, so each has its own
small class sharing the ``Conversation`` protocol.
"""
from typing import List, Protocol

from .chat_service import ChatService
from ..models.message import Message
from ..models.permissions import Permission


class Conversation(Protocol):
    title: str

    def fetch(self) -> List[Message]:
        ...

    def can_send(self) -> bool:
        ...

    def send(self, content: str) -> bool:
        ...

    def sender_name(self, message: Message) -> str:
        ...


class PrivateConversation:
    """Chat between the logged-in user and one friend."""

    def __init__(self, service: ChatService, username: str, other: str):
        self.service = service
        self.username = username
        self.other = other
        self.title = f"Chat with {other}"

    def fetch(self) -> List[Message]:
        return self.service.get_private_messages(self.username, self.other)

    def can_send(self) -> bool:
        return self.service.are_friends(self.username, self.other)

    def send(self, content: str) -> bool:
        return self.service.send_private_message(self.username, self.other, content)

    def sender_name(self, message: Message) -> str:
        return self.service.get_username_for_id(message.sender_id) or "unknown"


class GroupConversation:
    """Chat in a group as seen by one member."""

    def __init__(self, service: ChatService, username: str, group_id: str):
        self.service = service
        self.username = username
        self.group_id = group_id
        name = service.get_group_name(group_id) or group_id
        self.title = f"Group {name}"

    def fetch(self) -> List[Message]:
        return self.service.get_group_messages(self.group_id)

    def can_send(self) -> bool:
        return self.service.has_group_permission(
            self.group_id, self.username, Permission.GROUP_SEND_MESSAGE
        )

    def send(self, content: str) -> bool:
        return self.service.send_group_message(self.group_id, self.username, content)

    def can_delete(self) -> bool:
        return self.service.has_group_permission(
            self.group_id, self.username, Permission.GROUP_DELETE_MESSAGES
        )

    def delete(self, message_id: str) -> bool:
        return self.service.delete_group_message(self.group_id, message_id, self.username)

    def sender_name(self, message: Message) -> str:
        return self.service.get_username_for_id(message.sender_id) or "unknown"
