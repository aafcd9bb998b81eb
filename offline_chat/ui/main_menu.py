"""Main menu UI."""
import logging
from typing import Optional

from .components import show_menu, get_choice
from ..services.chat_service import ChatService


class MainMenu:
    """Main application menu for a logged-in user."""

    def __init__(self, username: str, service: ChatService, verbose: bool = False):
        self.username = username
        self.service = service
        self.verbose = verbose
        self.menu_options = [
            "Toggle Verbose Mode",
            "Friends",
            "Private Chats",
            "Groups",
            "My Profile",
            "Log Out",
        ]

    def show(self) -> Optional[str]:
        """Show the main menu and get user choice."""
        show_menu(f"Offline Chat ({self.username})", self.menu_options)

        valid_choices = [str(i) for i in range(len(self.menu_options))]
        return get_choice("Select an option", valid_choices)

    def toggle_verbose(self) -> None:
        """Toggle verbose mode (debug logging)."""
        self.verbose = not self.verbose
        logging.getLogger().setLevel(logging.DEBUG if self.verbose else logging.INFO)
        print(f"Verbose Mode {'enabled' if self.verbose else 'disabled'}.\n")

    def show_profile(self) -> None:
        """Display a summary of the user's data."""
        friends = self.service.get_friends_of(self.username)
        incoming = self.service.get_incoming_friend_requests(self.username)
        groups = self.service.get_groups_for_user(self.username)

        print(f"\nUsername: {self.username}")
        print(f"Friends: {len(friends)}")
        print(f"Pending requests: {len(incoming)}")
        print(f"Groups: {len(groups)}")
        for group_id, name in groups.items():
            admin = " (admin)" if self.service.is_group_admin(group_id, self.username) else ""
            count = len(self.service.get_group_messages(group_id))
            print(f"  - {name}{admin}: {count} messages")
        print()
