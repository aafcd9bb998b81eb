"""Relationship graph: friendships and pending friend requests."""
import logging
from typing import Dict, Iterable, Set

logger = logging.getLogger(__name__)


class RelationshipGraph:
    """Friend edges and directed friend-request edges between usernames.

    Only usernames added through ``add_user`` have edge sets; every
    operation involving an unknown username fails with False and never
    creates entries for it. A pending request ``a -> b`` is stored twice,
    as ``outgoing[a] ∋ b`` and ``incoming[b] ∋ a``.
    """

    def __init__(self):
        self._friends: Dict[str, Set[str]] = {}
        self._incoming: Dict[str, Set[str]] = {}
        self._outgoing: Dict[str, Set[str]] = {}

    def add_user(self, username: str) -> None:
        """Create empty edge sets for a newly registered user."""
        self._friends.setdefault(username, set())
        self._incoming.setdefault(username, set())
        self._outgoing.setdefault(username, set())

    def knows(self, *usernames: str) -> bool:
        return all(name in self._friends for name in usernames)

    # Requests
    def send_request(self, from_user: str, to_user: str) -> bool:
        """Record a pending request from ``from_user`` to ``to_user``."""
        if not self.knows(from_user, to_user) or from_user == to_user:
            return False
        if self.are_friends(from_user, to_user):
            return False
        if self.has_pending(from_user, to_user) or self.has_pending(to_user, from_user):
            return False

        self._incoming[to_user].add(from_user)
        self._outgoing[from_user].add(to_user)
        return True

    def has_pending(self, from_user: str, to_user: str) -> bool:
        """True if either side of the ``from_user -> to_user`` edge exists."""
        if not self.knows(from_user, to_user):
            return False
        return from_user in self._incoming[to_user] or to_user in self._outgoing[from_user]

    def accept_request(self, username: str, from_user: str) -> bool:
        """Accept a pending request and make both users friends."""
        if not self.knows(username, from_user):
            return False
        if from_user not in self._incoming[username]:
            return False

        self._incoming[username].discard(from_user)
        self._outgoing[from_user].discard(username)
        self._friends[username].add(from_user)
        self._friends[from_user].add(username)
        return True

    def reject_request(self, username: str, from_user: str) -> bool:
        """Drop a pending incoming request without creating a friendship."""
        if not self.knows(username, from_user):
            return False
        if from_user not in self._incoming[username]:
            return False

        self._incoming[username].discard(from_user)
        self._outgoing[from_user].discard(username)
        return True

    def cancel_outgoing(self, from_user: str, to_user: str) -> bool:
        """Withdraw a request sent by ``from_user``.

        Succeeds if either side of the edge was present; a one-sided edge
        is removed as well and reported.
        """
        if not self.knows(from_user, to_user):
            return False

        removed_out = to_user in self._outgoing[from_user]
        removed_in = from_user in self._incoming[to_user]
        self._outgoing[from_user].discard(to_user)
        self._incoming[to_user].discard(from_user)

        if removed_out != removed_in:
            logger.warning(
                "Repaired one-sided friend request %s -> %s (outgoing=%s, incoming=%s)",
                from_user, to_user, removed_out, removed_in,
            )
        return removed_out or removed_in

    # Friends
    def are_friends(self, a: str, b: str) -> bool:
        if not self.knows(a, b):
            return False
        return b in self._friends[a]

    def remove_friend(self, a: str, b: str) -> bool:
        """Remove the friendship in both directions."""
        if not self.knows(a, b):
            return False
        removed_a = b in self._friends[a]
        removed_b = a in self._friends[b]
        self._friends[a].discard(b)
        self._friends[b].discard(a)
        return removed_a or removed_b

    def friends_of(self, username: str) -> Set[str]:
        return set(self._friends.get(username, ()))

    def incoming_of(self, username: str) -> Set[str]:
        return set(self._incoming.get(username, ()))

    def outgoing_of(self, username: str) -> Set[str]:
        return set(self._outgoing.get(username, ()))

    def to_dict(self) -> dict:
        return {
            "friends": {u: sorted(v) for u, v in self._friends.items()},
            "incoming": {u: sorted(v) for u, v in self._incoming.items()},
            "outgoing": {u: sorted(v) for u, v in self._outgoing.items()},
        }

    @classmethod
    def from_dict(cls, data: dict, usernames: Iterable[str]) -> 'RelationshipGraph':
        graph = cls()
        for username in usernames:
            graph.add_user(username)
        for key, target in (("friends", graph._friends),
                            ("incoming", graph._incoming),
                            ("outgoing", graph._outgoing)):
            for username, others in data.get(key, {}).items():
                if username not in target:
                    raise ValueError(f"Relationship entry for unknown user: {username}")
                target[username].update(str(o) for o in others)
        return graph
