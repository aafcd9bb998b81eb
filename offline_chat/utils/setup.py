"""Application initialization and setup utilities."""
import getpass
import logging
from typing import Optional

from ..core.config import Settings
from ..services.chat_service import ChatService, RegistrationResult
from ..ui.components import get_user_input

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

REGISTRATION_MESSAGES = {
    RegistrationResult.USERNAME_TOO_SHORT: "Username must be at least 3 characters.",
    RegistrationResult.USERNAME_TOO_LONG: "Username must be at most 20 characters.",
    RegistrationResult.USERNAME_ALREADY_TAKEN: "That username is already taken.",
    RegistrationResult.PASSWORD_EMPTY: "Password cannot be empty.",
    RegistrationResult.PASSWORD_REJECTED: "That password could not be used.",
    RegistrationResult.SAVE_FAILED: "Account created but could not be saved to disk.",
}


def configure_logging(verbose: bool = False) -> None:
    """Send log records to stderr; verbose mode shows debug output."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)


def open_service(settings: Settings) -> ChatService:
    """Open the chat store described by ``settings``."""
    return ChatService.open(settings.data_path)


def login_or_register(service: ChatService) -> Optional[str]:
    """Prompt until the user logs in or registers. Returns the username, or None to quit."""
    print("==== Welcome to Offline Chat ====")
    while True:
        choice = input("[L] Log In  [R] Register  [Q] Quit: ").strip().upper()
        if choice == "Q":
            return None
        if choice not in ("L", "R"):
            print("Invalid option.\n")
            continue

        username = get_user_input("Username")
        password = getpass.getpass("Password: ")

        if choice == "R":
            result = service.register_user(username, password)
            if result is RegistrationResult.SUCCESS:
                print(f"\nAccount created. Welcome, {username}!\n")
                return username
            print(REGISTRATION_MESSAGES.get(result, "Registration failed.") + "\n")
        elif service.authenticate_user(username, password):
            print(f"\nWelcome back, {username}!\n")
            return username
        else:
            print("Invalid username or password.\n")
