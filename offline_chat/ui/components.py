"""Console helpers shared by the menus."""
import time
from typing import List, Optional, Sequence


def get_user_input(prompt: str, default: str = "") -> str:
    """Get user input with optional default value."""
    if default:
        response = input(f"{prompt} [{default}]: ").strip()
        return response if response else default
    return input(f"{prompt}: ").strip()


def show_menu(title: str, options: List[str]) -> None:
    """Display a menu with title and options."""
    print(f"==== {title} ====\n")
    for i, option in enumerate(options):
        print(f"[{i}] {option}")
    print()


def format_time_ago(timestamp: float, now: Optional[float] = None) -> str:
    """Format a timestamp as a human readable age."""
    seconds = max(0, int((now if now is not None else time.time()) - timestamp))
    if seconds < 60:
        return f"{seconds}s ago"
    elif seconds < 3600:
        return f"{seconds // 60}m ago"
    elif seconds < 86400:
        return f"{seconds // 3600}h ago"
    return f"{seconds // 86400}d ago"


def get_choice(prompt: str, valid_choices: List[str]) -> Optional[str]:
    """Get user choice from valid options."""
    while True:
        choice = input(f"{prompt}: ").strip().upper()
        if choice in valid_choices:
            return choice
        print(f"Invalid choice. Valid options: {', '.join(valid_choices)}")


def select_item(prompt: str, items: Sequence[str]) -> Optional[int]:
    """List ``items`` numbered from 1 and return the chosen index, or None."""
    if not items:
        return None
    for i, item in enumerate(items, 1):
        print(f"[{i}] {item}")
    choice = input(f"{prompt} (blank to cancel): ").strip()
    if not choice:
        return None
    try:
        index = int(choice) - 1
    except ValueError:
        print("Invalid input. Please enter a number.\n")
        return None
    if 0 <= index < len(items):
        return index
    print("Invalid selection.\n")
    return None


def show_separator(char: str = "─", length: int = 40) -> None:
    """Show a separator line."""
    print(char * length)
