"""Tests for the identity registry and the relationship graph."""
import logging

from offline_chat.core.registry import IdentityRegistry
from offline_chat.core.relationships import RelationshipGraph


def make_graph(*usernames):
    graph = RelationshipGraph()
    for name in usernames:
        graph.add_user(name)
    return graph


class TestIdentityRegistry:

    def test_register_and_bijection(self):
        registry = IdentityRegistry()
        for name in ("alice", "bob", "carol"):
            assert registry.register(name, f"hash-{name}")

        for user in registry.all_users():
            assert registry.resolve_user(registry.resolve_username(user.user_id)) is user
            assert registry.get_by_id(registry.resolve_user(user.username).user_id) is user

    def test_register_rejects_blank_and_duplicates(self):
        registry = IdentityRegistry()

        assert not registry.register("", "h")
        assert not registry.register("   ", "h")
        assert registry.register("alice", "h")
        assert not registry.register("alice", "other")
        assert registry.resolve_user("alice").password_hash == "h"

    def test_usernames_are_case_sensitive(self):
        registry = IdentityRegistry()

        assert registry.register("alice", "h")
        assert registry.register("Alice", "h")
        assert registry.usernames() == {"alice", "Alice"}

    def test_lookups_for_unknown(self):
        registry = IdentityRegistry()

        assert registry.resolve_user("ghost") is None
        assert registry.resolve_username("no-such-id") is None

    def test_repr_hides_hash(self):
        registry = IdentityRegistry()
        registry.register("alice", "secret-hash")

        assert "secret-hash" not in repr(registry.resolve_user("alice"))


class TestRelationshipGraph:

    def test_request_then_reverse_request_fails(self):
        graph = make_graph("a", "b")

        assert graph.send_request("a", "b")
        assert not graph.send_request("b", "a")
        assert not graph.send_request("a", "b")

    def test_accept_makes_symmetric_friendship(self):
        graph = make_graph("a", "b")
        graph.send_request("a", "b")

        assert graph.accept_request("b", "a")

        assert graph.are_friends("a", "b") and graph.are_friends("b", "a")
        assert graph.incoming_of("b") == set()
        assert graph.outgoing_of("a") == set()

    def test_accept_requires_pending_request(self):
        graph = make_graph("a", "b")

        assert not graph.accept_request("b", "a")
        graph.send_request("a", "b")
        # Only the recipient can accept
        assert not graph.accept_request("a", "b")

    def test_no_request_between_friends(self):
        graph = make_graph("a", "b")
        graph.send_request("a", "b")
        graph.accept_request("b", "a")

        assert not graph.send_request("a", "b")
        assert not graph.send_request("b", "a")

    def test_reject(self):
        graph = make_graph("a", "b")
        graph.send_request("a", "b")

        assert graph.reject_request("b", "a")
        assert not graph.reject_request("b", "a")
        assert not graph.are_friends("a", "b")
        assert graph.outgoing_of("a") == set()
        # A fresh request is possible afterwards
        assert graph.send_request("b", "a")

    def test_cancel_outgoing(self):
        graph = make_graph("a", "b")
        graph.send_request("a", "b")

        assert graph.cancel_outgoing("a", "b")
        assert not graph.cancel_outgoing("a", "b")
        assert graph.incoming_of("b") == set()

    def test_cancel_repairs_one_sided_edge(self, caplog):
        graph = make_graph("a", "b")
        graph._incoming["b"].add("a")

        with caplog.at_level(logging.WARNING):
            assert graph.cancel_outgoing("a", "b")

        assert graph.incoming_of("b") == set()
        assert "one-sided" in caplog.text

    def test_self_request_refused(self):
        graph = make_graph("a")

        assert not graph.send_request("a", "a")

    def test_unknown_users_never_get_entries(self):
        graph = make_graph("a")

        assert not graph.send_request("a", "ghost")
        assert not graph.accept_request("ghost", "a")
        assert not graph.reject_request("a", "ghost")
        assert not graph.cancel_outgoing("ghost", "a")
        assert not graph.remove_friend("a", "ghost")
        assert not graph.are_friends("a", "ghost")
        assert not graph.knows("ghost")
        assert graph.friends_of("ghost") == set()

    def test_remove_friend_both_directions(self):
        graph = make_graph("a", "b")
        graph.send_request("a", "b")
        graph.accept_request("b", "a")

        assert graph.remove_friend("b", "a")
        assert not graph.are_friends("a", "b")
        assert not graph.are_friends("b", "a")
        assert not graph.remove_friend("a", "b")

    def test_views_are_copies(self):
        graph = make_graph("a", "b")
        graph.send_request("a", "b")

        graph.outgoing_of("a").clear()

        assert graph.outgoing_of("a") == {"b"}
