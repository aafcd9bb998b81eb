"""Chat service: validated, permission-checked access to the store."""
import logging
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set

from ..core import config
from ..core.errors import ChatStoreError
from ..core.store import DataStore
from ..models.group import Group, ROLE_PARTICIPANT
from ..models.message import Message
from ..models.permissions import Permission, parse_permissions
from ..models.user import User
from ..persistence.snapshot import load_snapshot, modified_time, save_snapshot
from ..utils.auth import PasswordHasher, ScryptPasswordHasher

logger = logging.getLogger(__name__)


class RegistrationResult(Enum):
    """Outcome of a registration attempt."""
    SUCCESS = "success"
    USERNAME_TOO_SHORT = "username_too_short"
    USERNAME_TOO_LONG = "username_too_long"
    USERNAME_ALREADY_TAKEN = "username_already_taken"
    PASSWORD_EMPTY = "password_empty"
    PASSWORD_REJECTED = "password_rejected"
    SAVE_FAILED = "save_failed"

    def __bool__(self) -> bool:
        return self is RegistrationResult.SUCCESS


def _is_blank(value: Optional[str]) -> bool:
    return not isinstance(value, str) or not value.strip()


def is_valid_group_name(name: Optional[str]) -> bool:
    return not _is_blank(name) and len(name) <= config.MAX_GROUP_NAME_LENGTH


def is_valid_role_name(role: Optional[str]) -> bool:
    return not _is_blank(role) and len(role) <= config.MAX_ROLE_NAME_LENGTH


def is_valid_message(content: Optional[str]) -> bool:
    return not _is_blank(content) and len(content) <= config.MAX_MESSAGE_LENGTH


class ChatService:
    """Entry point for every read and write against the chat store.

    Each public method first reloads the store if the snapshot file was
    changed by someone else, then validates, checks authorization,
    mutates, and saves. Validation, authorization and lookup failures all
    look the same to the caller: False, None or an empty collection.

    Reloading replaces the whole store; unsaved changes are never merged.
    Two processes writing the same file are last-writer-wins.
    """

    def __init__(self, store: DataStore, data_path: str, hasher: Optional[PasswordHasher] = None):
        self.store = store
        self.data_path = data_path
        self.hasher = hasher or ScryptPasswordHasher()
        self._loaded_mtime: Optional[int] = modified_time(data_path)

    @classmethod
    def open(cls, data_path: str, hasher: Optional[PasswordHasher] = None) -> 'ChatService':
        """Load the store from ``data_path`` or start with an empty one."""
        store = load_snapshot(data_path)
        if store is None:
            logger.info("Starting with an empty store (%s)", data_path)
            store = DataStore()
        else:
            logger.info("Loaded %d users and %d groups from %s",
                        len(store.users), len(store.groups), data_path)
        return cls(store, data_path, hasher)

    # Persistence
    def save_store(self) -> bool:
        """Write the store to disk and move the reload watermark."""
        saved = save_snapshot(self.store, self.data_path)
        if saved:
            self._loaded_mtime = modified_time(self.data_path)
        else:
            logger.error("Changes are kept in memory but were not saved")
        return saved

    def reload_if_changed(self) -> bool:
        """Replace the store if the file is newer than what we last saw."""
        current = modified_time(self.data_path)
        if current is None:
            return False
        if self._loaded_mtime is not None and current <= self._loaded_mtime:
            return False

        loaded = load_snapshot(self.data_path)
        if loaded is None:
            # Skip this version of the file until it changes again
            self._loaded_mtime = current
            logger.warning("Snapshot changed on disk but could not be loaded; keeping memory state")
            return False
        self.store = loaded
        self._loaded_mtime = current
        logger.debug("Reloaded store from %s", self.data_path)
        return True

    def _user(self, username: Optional[str]) -> Optional[User]:
        if not isinstance(username, str):
            return None
        return self.store.get_user(username)

    def _group(self, group_id: Optional[str]) -> Optional[Group]:
        if not isinstance(group_id, str):
            return None
        return self.store.groups.get(group_id)

    def _allowed(self, group_id: str, username: str, permission: Permission) -> bool:
        group = self._group(group_id)
        user = self._user(username)
        if group is None or user is None:
            return False
        if not group.has_permission(user.user_id, permission):
            logger.debug("Denied %s for %s in group %s", permission.value, username, group_id)
            return False
        return True

    # Users
    def register_user(self, username: str, password: str) -> RegistrationResult:
        """Register a new user with a plaintext password."""
        self.reload_if_changed()
        if _is_blank(username) or len(username) < config.MIN_USERNAME_LENGTH:
            return RegistrationResult.USERNAME_TOO_SHORT
        if len(username) > config.MAX_USERNAME_LENGTH:
            return RegistrationResult.USERNAME_TOO_LONG
        if not isinstance(password, str) or not password:
            return RegistrationResult.PASSWORD_EMPTY

        if self.store.users.exists(username):
            return RegistrationResult.USERNAME_ALREADY_TAKEN
        try:
            password_hash = self.hasher.hash(password)
        except Exception as e:
            logger.warning("Password hashing failed for %s: %s", username, e)
            return RegistrationResult.PASSWORD_REJECTED
        if not self.store.register_user(username, password_hash):
            return RegistrationResult.USERNAME_ALREADY_TAKEN
        if not self.save_store():
            return RegistrationResult.SAVE_FAILED
        logger.info("Registered user %s", username)
        return RegistrationResult.SUCCESS

    def authenticate_user(self, username: str, password: str) -> bool:
        """Check a username/password pair."""
        self.reload_if_changed()
        user = self._user(username)
        if user is None:
            return False
        try:
            return bool(self.hasher.verify(password, user.password_hash))
        except Exception as e:
            logger.debug("Password verification failed for %s: %s", username, e)
            return False

    def get_all_usernames(self) -> Set[str]:
        self.reload_if_changed()
        return self.store.users.usernames()

    def get_username_for_id(self, user_id: Optional[str]) -> Optional[str]:
        self.reload_if_changed()
        if user_id is None:
            return None
        return self.store.users.resolve_username(user_id)

    # Friends
    def send_friend_request(self, from_user: str, to_user: str) -> bool:
        self.reload_if_changed()
        if not self.store.relationships.send_request(from_user, to_user):
            return False
        return self.save_store()

    def accept_friend_request(self, username: str, from_user: str) -> bool:
        self.reload_if_changed()
        if not self.store.relationships.accept_request(username, from_user):
            return False
        return self.save_store()

    def reject_friend_request(self, username: str, from_user: str) -> bool:
        self.reload_if_changed()
        if not self.store.relationships.reject_request(username, from_user):
            return False
        return self.save_store()

    def cancel_outgoing_friend_request(self, from_user: str, to_user: str) -> bool:
        self.reload_if_changed()
        if not self.store.relationships.cancel_outgoing(from_user, to_user):
            return False
        return self.save_store()

    def remove_friend(self, username: str, friend: str) -> bool:
        self.reload_if_changed()
        if not self.store.relationships.remove_friend(username, friend):
            return False
        return self.save_store()

    def are_friends(self, a: str, b: str) -> bool:
        self.reload_if_changed()
        return self.store.relationships.are_friends(a, b)

    def get_friends_of(self, username: str) -> Set[str]:
        self.reload_if_changed()
        return self.store.relationships.friends_of(username)

    def get_incoming_friend_requests(self, username: str) -> Set[str]:
        self.reload_if_changed()
        return self.store.relationships.incoming_of(username)

    def get_outgoing_friend_requests(self, username: str) -> Set[str]:
        self.reload_if_changed()
        return self.store.relationships.outgoing_of(username)

    # Private messages
    def send_private_message(self, from_user: str, to_user: str, content: str) -> bool:
        """Send a private message. Only friends may message each other."""
        self.reload_if_changed()
        if not is_valid_message(content):
            return False
        sender = self._user(from_user)
        if sender is None or not self.store.relationships.are_friends(from_user, to_user):
            return False
        self.store.add_private_message(sender, to_user, content)
        return self.save_store()

    def get_private_messages(self, a: str, b: str) -> List[Message]:
        self.reload_if_changed()
        return self.store.messages.list_private(a, b)

    # Groups
    def create_group(self, name: str, creator: str) -> Optional[str]:
        """Create a group owned by ``creator``. Returns the group id."""
        self.reload_if_changed()
        if not is_valid_group_name(name) or self._user(creator) is None:
            return None
        group_id = self.store.create_group(name, creator)
        if not self.save_store():
            return None
        logger.info("%s created group %s (%s)", creator, name, group_id)
        return group_id

    def rename_group(self, group_id: str, requester: str, name: str) -> bool:
        self.reload_if_changed()
        if not is_valid_group_name(name):
            return False
        if not self._allowed(group_id, requester, Permission.ALL):
            return False
        self.store.groups.rename(group_id, name)
        return self.save_store()

    def delete_group(self, group_id: str, requester: str) -> bool:
        self.reload_if_changed()
        if not self._allowed(group_id, requester, Permission.GROUP_DELETE_GROUP):
            return False
        self.store.delete_group(group_id)
        logger.info("%s deleted group %s", requester, group_id)
        return self.save_store()

    def get_all_groups(self) -> Dict[str, str]:
        """group_id -> name for every group."""
        self.reload_if_changed()
        return self.store.groups.names()

    def get_group_name(self, group_id: str) -> Optional[str]:
        self.reload_if_changed()
        group = self._group(group_id)
        return group.group_name if group else None

    def get_groups_for_user(self, username: str) -> Dict[str, str]:
        """group_id -> name for the groups ``username`` belongs to."""
        self.reload_if_changed()
        user = self._user(username)
        if user is None:
            return {}
        return {g.group_id: g.group_name for g in self.store.groups.groups_for_user(user.user_id)}

    def get_group_members(self, group_id: str) -> Set[str]:
        return set(self.get_group_members_with_roles(group_id))

    def get_group_members_with_roles(self, group_id: str) -> Dict[str, str]:
        """username -> role name."""
        self.reload_if_changed()
        members = {}
        for user_id, role in self.store.groups.members_with_roles(group_id).items():
            username = self.store.users.resolve_username(user_id)
            if username is not None:
                members[username] = role
        return members

    def get_group_available_roles(self, group_id: str) -> Set[str]:
        self.reload_if_changed()
        return self.store.groups.available_roles(group_id)

    def get_role_permissions(self, group_id: str, role: str) -> Set[Permission]:
        self.reload_if_changed()
        return self.store.groups.role_permissions(group_id, role)

    def add_group_member(self, group_id: str, requester: str, username: str, role: str) -> bool:
        """Add ``username`` to a group with ``role``.

        Existing members are refused; their role changes go through
        ``set_group_member_role``. Any role other than Participant needs ``ALL``.
        """
        self.reload_if_changed()
        user = self._user(username)
        group = self._group(group_id)
        if user is None or group is None or group.is_member(user.user_id):
            return False
        if not self._allowed(group_id, requester, Permission.GROUP_ADD_MEMBER):
            return False
        if role != ROLE_PARTICIPANT and not self._allowed(group_id, requester, Permission.ALL):
            return False
        try:
            self.store.groups.add_member(group_id, user.user_id, role)
        except ChatStoreError as e:
            logger.debug("add_group_member rejected: %s", e)
            return False
        return self.save_store()

    def remove_group_member(self, group_id: str, requester: str, username: str) -> bool:
        """Remove a member. Anyone may remove themselves."""
        self.reload_if_changed()
        user = self._user(username)
        group = self._group(group_id)
        if user is None or group is None or not group.is_member(user.user_id):
            return False
        if requester != username and not self._allowed(group_id, requester, Permission.GROUP_REMOVE_MEMBER):
            return False
        self.store.groups.remove_member(group_id, user.user_id)
        return self.save_store()

    def add_custom_role(self, group_id: str, requester: str, role: str) -> bool:
        self.reload_if_changed()
        if not is_valid_role_name(role):
            return False
        if not self._allowed(group_id, requester, Permission.ALL):
            return False
        self.store.groups.add_role(group_id, role)
        return self.save_store()

    def set_group_member_role(self, group_id: str, requester: str, username: str, role: str) -> bool:
        self.reload_if_changed()
        user = self._user(username)
        group = self._group(group_id)
        if user is None or group is None or not group.is_member(user.user_id):
            return False
        if not self._allowed(group_id, requester, Permission.ALL):
            return False
        try:
            self.store.groups.set_member_role(group_id, user.user_id, role)
        except ChatStoreError as e:
            logger.debug("set_group_member_role rejected: %s", e)
            return False
        return self.save_store()

    def set_role_permissions(self, group_id: str, requester: str, role: str,
                             permissions: Iterable) -> bool:
        """Replace a role's permissions. Accepts Permission members or names."""
        self.reload_if_changed()
        if not self._allowed(group_id, requester, Permission.ALL):
            return False
        try:
            parsed = parse_permissions(permissions)
            self.store.groups.set_role_permissions(group_id, role, parsed)
        except ValueError as e:
            logger.debug("set_role_permissions rejected: %s", e)
            return False
        return self.save_store()

    def has_group_permission(self, group_id: str, username: str, permission) -> bool:
        """Accepts a Permission member or its name; unknown names are False."""
        self.reload_if_changed()
        user = self._user(username)
        if user is None:
            return False
        try:
            permission = Permission.parse(permission)
        except ValueError:
            return False
        return self.store.groups.has_permission(group_id, user.user_id, permission)

    def is_group_admin(self, group_id: str, username: str) -> bool:
        self.reload_if_changed()
        user = self._user(username)
        if user is None:
            return False
        return self.store.groups.is_admin(group_id, user.user_id)

    # Group messages
    def send_group_message(self, group_id: str, from_user: str, content: str) -> bool:
        self.reload_if_changed()
        if not is_valid_message(content):
            return False
        if not self._allowed(group_id, from_user, Permission.GROUP_SEND_MESSAGE):
            return False
        self.store.add_group_message(self._user(from_user), group_id, content)
        return self.save_store()

    def get_group_messages(self, group_id: str) -> List[Message]:
        self.reload_if_changed()
        return self.store.messages.list_group(group_id)

    def delete_group_message(self, group_id: str, message_id: str, requester: str) -> bool:
        self.reload_if_changed()
        if not self._allowed(group_id, requester, Permission.GROUP_DELETE_MESSAGES):
            return False
        if not self.store.messages.delete_group_message(group_id, message_id):
            return False
        return self.save_store()

    def get_conversation_sizes(self) -> Dict[str, int]:
        """Message counts per conversation, for UIs that poll for changes."""
        self.reload_if_changed()
        return self.store.messages.conversation_sizes()
