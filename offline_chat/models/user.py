"""User model."""
from dataclasses import dataclass
import uuid


@dataclass
class User:
    """A registered account in the offline chat store."""
    user_id: str
    username: str
    password_hash: str

    @classmethod
    def create(cls, username: str, password_hash: str) -> 'User':
        """Create a new User instance with a generated user_id."""
        return cls(uuid.uuid4().hex, username, password_hash)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "password_hash": self.password_hash,
        }

    @classmethod
    def from_dict(cls, data: dict) -> 'User':
        return cls(
            user_id=str(data["user_id"]),
            username=str(data["username"]),
            password_hash=str(data["password_hash"]),
        )

    def __repr__(self) -> str:
        # Keep the hash out of logs
        return f"User(user_id={self.user_id!r}, username={self.username!r})"
