"""Chat screens for private and group conversations."""
from typing import List

from .components import format_time_ago, select_item, show_separator
from ..models.message import Message
from ..services.chat_service import ChatService
from ..services.conversation import Conversation, GroupConversation, PrivateConversation

HISTORY_LIMIT = 20


class ChatMenu:
    """Runs an interactive chat session on any Conversation."""

    def __init__(self, username: str, service: ChatService):
        self.username = username
        self.service = service

    def show_private_chats(self) -> None:
        """Pick a friend and chat."""
        friends = sorted(self.service.get_friends_of(self.username))
        if not friends:
            print("You need a friend before you can chat privately.\n")
            return
        labels = [f"{friend} ({len(self.service.get_private_messages(self.username, friend))} messages)"
                  for friend in friends]
        index = select_item("Chat with", labels)
        if index is not None:
            self.run(PrivateConversation(self.service, self.username, friends[index]))

    def run(self, conversation: Conversation) -> None:
        """Chat loop. `/exit` leaves, `/refresh` polls for new messages."""
        commands = "`/exit` to leave, `/refresh` to see new messages"
        if isinstance(conversation, GroupConversation):
            commands += ", `/delete` to remove a message"
        print(f"\nEntering {conversation.title}. Type {commands}.\n")

        seen = self._display_history(conversation)
        while True:
            text = input(f"[{self.username}]: ").strip()

            if text == "/exit":
                print("Leaving chat.\n")
                break
            if text == "/refresh":
                messages = conversation.fetch()
                if len(messages) != seen:
                    seen = self._display_history(conversation, messages)
                else:
                    print("No new messages.\n")
                continue
            if text == "/delete" and isinstance(conversation, GroupConversation):
                self._delete_message(conversation)
                seen = self._display_history(conversation)
                continue
            if not text:
                continue

            if not conversation.can_send():
                print("You are not allowed to send messages here.\n")
                continue
            if conversation.send(text):
                seen = self._display_history(conversation)
            else:
                print("Message not sent (empty, too long, or not saved).\n")

    def _display_history(self, conversation: Conversation, messages: List[Message] = None) -> int:
        """Print the latest messages and return how many exist."""
        if messages is None:
            messages = conversation.fetch()
        show_separator()
        if not messages:
            print("No messages yet.")
        elif len(messages) > HISTORY_LIMIT:
            print(f"... showing last {HISTORY_LIMIT} of {len(messages)} messages ...")
        for message in messages[-HISTORY_LIMIT:]:
            age = format_time_ago(message.timestamp)
            print(f"{conversation.sender_name(message)} ({age}): {message.content}")
        show_separator()
        return len(messages)

    def _delete_message(self, conversation: GroupConversation) -> None:
        if not conversation.can_delete():
            print("You are not allowed to delete messages here.\n")
            return
        messages = conversation.fetch()[-HISTORY_LIMIT:]
        labels = [f"{conversation.sender_name(m)}: {m.content[:40]}" for m in messages]
        index = select_item("Delete message", labels)
        if index is None:
            return
        if conversation.delete(messages[index].message_id):
            print("Message deleted.\n")
        else:
            print("Could not delete message.\n")
