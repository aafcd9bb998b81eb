"""Runtime configuration and input limits."""
import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MAX_USERNAME_LENGTH = 20
MAX_GROUP_NAME_LENGTH = 30
MAX_ROLE_NAME_LENGTH = 30
MAX_MESSAGE_LENGTH = 1000

DEFAULT_DATA_DIR = "data"
DEFAULT_DATA_FILE = "offline-chat.json"

_TRUTHY = {"1", "true", "yes", "y", "on"}


@dataclass
class Settings:
    """Where the snapshot lives and how chatty the app is."""
    data_dir: str = DEFAULT_DATA_DIR
    data_file: str = DEFAULT_DATA_FILE
    verbose: bool = False

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from OFFLINE_CHAT_* environment variables."""
        return cls(
            data_dir=os.environ.get("OFFLINE_CHAT_DATA_DIR", DEFAULT_DATA_DIR),
            data_file=os.environ.get("OFFLINE_CHAT_DATA_FILE", DEFAULT_DATA_FILE),
            verbose=os.environ.get("OFFLINE_CHAT_VERBOSE", "").strip().lower() in _TRUTHY,
        )

    @property
    def data_path(self) -> str:
        """Full path of the snapshot file, creating its directory if needed."""
        try:
            os.makedirs(self.data_dir, exist_ok=True)
        except OSError as e:
            # Fall back to the working directory
            logger.warning("Cannot create data directory %s: %s", self.data_dir, e)
            return os.path.abspath(self.data_file)
        return os.path.join(self.data_dir, self.data_file)
