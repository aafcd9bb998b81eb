"""Identity registry: users by username and by id."""
import logging
from typing import Dict, List, Optional, Set

from ..models.user import User

logger = logging.getLogger(__name__)


class IdentityRegistry:
    """Keeps username <-> user_id as a bijection."""

    def __init__(self):
        self._users_by_name: Dict[str, User] = {}
        self._users_by_id: Dict[str, User] = {}

    def register(self, username: str, password_hash: str) -> bool:
        """Register a new user. Fails for blank or already taken usernames."""
        if not username or not username.strip():
            return False
        if username in self._users_by_name:
            return False

        user = User.create(username, password_hash)
        self._add(user)
        logger.debug("Registered user %s (%s)", username, user.user_id)
        return True

    def _add(self, user: User) -> None:
        self._users_by_name[user.username] = user
        self._users_by_id[user.user_id] = user

    def resolve_user(self, username: str) -> Optional[User]:
        """Get a user by username."""
        return self._users_by_name.get(username)

    def get_by_id(self, user_id: str) -> Optional[User]:
        """Get a user by id."""
        return self._users_by_id.get(user_id)

    def resolve_username(self, user_id: str) -> Optional[str]:
        """Get the username for an id, or None."""
        user = self._users_by_id.get(user_id)
        return user.username if user else None

    def exists(self, username: str) -> bool:
        return username in self._users_by_name

    def usernames(self) -> Set[str]:
        return set(self._users_by_name)

    def all_users(self) -> List[User]:
        return list(self._users_by_name.values())

    def __len__(self) -> int:
        return len(self._users_by_name)

    def to_list(self) -> List[dict]:
        return [user.to_dict() for user in self._users_by_name.values()]

    @classmethod
    def from_list(cls, items: List[dict]) -> 'IdentityRegistry':
        registry = cls()
        for item in items:
            user = User.from_dict(item)
            if user.username in registry._users_by_name or user.user_id in registry._users_by_id:
                raise ValueError(f"Duplicate user in snapshot: {user.username}")
            registry._add(user)
        return registry
