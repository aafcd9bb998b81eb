"""Snapshot persistence: the whole store in one JSON file."""
import json
import logging
import os
import tempfile
from typing import Optional

from ..core.errors import SnapshotError
from ..core.store import DataStore

logger = logging.getLogger(__name__)


def save_snapshot(store: DataStore, path: str) -> bool:
    """Write the store to ``path`` atomically. Returns False on any failure."""
    directory = os.path.dirname(os.path.abspath(path))
    tmp_path = None
    try:
        payload = json.dumps(store.to_dict(), ensure_ascii=False, indent=1)
        fd, tmp_path = tempfile.mkstemp(prefix=".snapshot-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_path, path)
        tmp_path = None
        return True
    except (OSError, TypeError, ValueError) as e:
        logger.error("Failed to save snapshot to %s: %s", path, e)
        return False
    finally:
        if tmp_path and os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                logger.debug("Could not remove temp file %s", tmp_path)


def read_snapshot(path: str) -> DataStore:
    """Decode a snapshot file, raising SnapshotError if it is unusable."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        return DataStore.from_dict(data)
    except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
        raise SnapshotError(f"Cannot read snapshot {path}: {e}") from e


def load_snapshot(path: str) -> Optional[DataStore]:
    """Load a store from ``path``; None if missing or unreadable."""
    if not os.path.isfile(path):
        return None
    try:
        return read_snapshot(path)
    except SnapshotError as e:
        logger.warning("%s", e)
        return None


def modified_time(path: str) -> Optional[int]:
    """File modification time in nanoseconds, or None if it does not exist."""
    try:
        return os.stat(path).st_mtime_ns
    except OSError:
        return None
