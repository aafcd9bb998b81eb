"""Tests for permissions, password hashing, settings and console helpers."""
import os

import pytest

from offline_chat.core.config import DEFAULT_DATA_DIR, DEFAULT_DATA_FILE, Settings
from offline_chat.models.permissions import Permission, parse_permissions
from offline_chat.ui.components import format_time_ago, select_item
from offline_chat.utils.auth import b64url_decode, b64url_encode
from offline_chat.utils.setup import login_or_register


class TestPermissions:

    def test_parse_names_case_insensitive(self):
        assert parse_permissions(["group_read", " GROUP_SEND_MESSAGE ", Permission.ALL]) == {
            Permission.GROUP_READ, Permission.GROUP_SEND_MESSAGE, Permission.ALL,
        }

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValueError):
            parse_permissions(["GROUP_READ", "FLY"])

    def test_catalog_is_fixed(self):
        assert {p.value for p in Permission} == {
            "ALL", "GROUP_SEND_MESSAGE", "GROUP_ADD_MEMBER", "GROUP_REMOVE_MEMBER",
            "GROUP_DELETE_MESSAGES", "GROUP_DELETE_GROUP", "GROUP_READ",
        }


class TestPasswordHasher:

    def test_hash_and_verify(self, hasher):
        hashed = hasher.hash("s3cret")

        assert hashed.startswith("scrypt$")
        assert hasher.verify("s3cret", hashed)
        assert not hasher.verify("S3cret", hashed)

    def test_salted(self, hasher):
        assert hasher.hash("same") != hasher.hash("same")

    def test_malformed_hash_raises(self, hasher):
        with pytest.raises(ValueError):
            hasher.verify("pw", "not-a-hash")
        with pytest.raises(ValueError):
            hasher.verify("pw", "bcrypt$1$1$1$AA$AA")

    def test_b64url_without_padding(self):
        encoded = b64url_encode(b"\xfb\xff")

        assert "=" not in encoded
        assert b64url_decode(encoded) == b"\xfb\xff"


class TestSettings:

    def test_defaults(self, monkeypatch):
        for name in ("OFFLINE_CHAT_DATA_DIR", "OFFLINE_CHAT_DATA_FILE", "OFFLINE_CHAT_VERBOSE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings.from_env()

        assert settings.data_dir == DEFAULT_DATA_DIR
        assert settings.data_file == DEFAULT_DATA_FILE
        assert not settings.verbose

    def test_from_env(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OFFLINE_CHAT_DATA_DIR", str(tmp_path / "store"))
        monkeypatch.setenv("OFFLINE_CHAT_DATA_FILE", "chat.json")
        monkeypatch.setenv("OFFLINE_CHAT_VERBOSE", "yes")

        settings = Settings.from_env()

        assert settings.verbose
        assert settings.data_path == os.path.join(str(tmp_path / "store"), "chat.json")
        assert os.path.isdir(tmp_path / "store")


class TestComponents:

    @pytest.mark.parametrize("age, expected", [
        (5, "5s ago"), (125, "2m ago"), (7200, "2h ago"), (3 * 86400, "3d ago"), (-10, "0s ago"),
    ])
    def test_format_time_ago(self, age, expected):
        assert format_time_ago(1000.0, now=1000.0 + age) == expected

    @pytest.mark.parametrize("answer, expected", [("2", 1), ("", None), ("9", None), ("x", None)])
    def test_select_item(self, monkeypatch, answer, expected):
        monkeypatch.setattr("builtins.input", lambda prompt: answer)

        assert select_item("Pick", ["a", "b"]) == expected

    def test_select_from_nothing(self):
        assert select_item("Pick", []) is None


class TestLogin:

    def test_register_then_login(self, service, monkeypatch):
        answers = iter(["R", "alice"])
        passwords = iter(["pw"])
        monkeypatch.setattr("builtins.input", lambda prompt: next(answers))
        monkeypatch.setattr("getpass.getpass", lambda prompt: next(passwords))
        assert login_or_register(service) == "alice"

        answers = iter(["L", "alice", "L", "alice"])
        passwords = iter(["bad", "pw"])
        assert login_or_register(service) == "alice"

    def test_password_is_not_read_with_input(self, service, monkeypatch):
        prompts = []
        answers = iter(["R", "alice"])

        def fake_input(prompt):
            prompts.append(prompt)
            return next(answers)

        monkeypatch.setattr("builtins.input", fake_input)
        monkeypatch.setattr("getpass.getpass", lambda prompt: "pw")

        assert login_or_register(service) == "alice"
        assert not any("Password" in prompt for prompt in prompts)

    def test_quit(self, service, monkeypatch):
        monkeypatch.setattr("builtins.input", lambda prompt: "q")

        assert login_or_register(service) is None
