"""Main application controller."""
import traceback
from typing import Optional

from .core.config import Settings
from .services.chat_service import ChatService
from .ui.chat_menu import ChatMenu
from .ui.friends_menu import FriendsMenu
from .ui.group_menu import GroupMenu
from .ui.main_menu import MainMenu
from .utils.setup import configure_logging, login_or_register, open_service


class OfflineChatApplication:
    """Console front end for the offline chat store."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or Settings.from_env()
        self.service: Optional[ChatService] = None
        self.username: Optional[str] = None

        # UI Components
        self.main_menu: Optional[MainMenu] = None
        self.friends_menu: Optional[FriendsMenu] = None
        self.chat_menu: Optional[ChatMenu] = None
        self.group_menu: Optional[GroupMenu] = None

        self.running = False

    def initialize(self) -> bool:
        """Open the store and log a user in. Returns False if the user quit."""
        configure_logging(self.settings.verbose)
        self.service = open_service(self.settings)

        self.username = login_or_register(self.service)
        if self.username is None:
            return False

        self.main_menu = MainMenu(self.username, self.service, self.settings.verbose)
        self.friends_menu = FriendsMenu(self.username, self.service)
        self.chat_menu = ChatMenu(self.username, self.service)
        self.group_menu = GroupMenu(self.username, self.service, self.chat_menu)
        return True

    def start(self) -> None:
        """Start the application."""
        if not self.username:
            raise RuntimeError("Application not initialized")
        self.running = True
        self._main_loop()

    def _main_loop(self) -> None:
        """Main application loop."""
        while self.running:
            try:
                choice = self.main_menu.show()

                if choice == "0":
                    self.main_menu.toggle_verbose()
                elif choice == "1":
                    self.friends_menu.show_friends_menu()
                elif choice == "2":
                    self.chat_menu.show_private_chats()
                elif choice == "3":
                    self.group_menu.show_group_menu()
                elif choice == "4":
                    self.main_menu.show_profile()
                elif choice == "5":
                    print("\nLogging out...\n")
                    self.running = False

            except (KeyboardInterrupt, EOFError):
                print("\n\nExiting Offline Chat...\n")
                self.running = False
            except Exception as e:
                print(f"An error occurred: {e}")
                if self.main_menu.verbose:
                    traceback.print_exc()


def main() -> None:
    """Main entry point."""
    app = OfflineChatApplication()
    try:
        if app.initialize():
            app.start()
    except (KeyboardInterrupt, EOFError):
        print()


if __name__ == "__main__":
    main()
