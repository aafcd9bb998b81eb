import os

import pytest

from offline_chat.persistence.snapshot import modified_time
from offline_chat.services.chat_service import ChatService
from offline_chat.utils.auth import ScryptPasswordHasher


@pytest.fixture
def hasher():
    # Cheap cost parameters keep the suite fast
    return ScryptPasswordHasher(n=2 ** 4, r=1, p=1)


@pytest.fixture
def data_path(tmp_path):
    return str(tmp_path / "offline-chat.json")


@pytest.fixture
def service(data_path, hasher):
    return ChatService.open(data_path, hasher)


@pytest.fixture
def alice_bob(service):
    assert service.register_user("alice", "alice-pw")
    assert service.register_user("bob", "bob-pw")
    return service


@pytest.fixture
def friends(alice_bob):
    assert alice_bob.send_friend_request("alice", "bob")
    assert alice_bob.accept_friend_request("bob", "alice")
    return alice_bob


@pytest.fixture
def bump_mtime():
    """Move a file's mtime forward so watchers see it as changed."""
    def _bump(path, seconds=2):
        current = modified_time(path)
        future = current + seconds * 1_000_000_000
        os.utime(path, ns=(future, future))
        return future
    return _bump
