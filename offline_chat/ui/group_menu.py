"""Group management UI."""
from typing import List, Optional, Tuple

from .chat_menu import ChatMenu
from .components import get_user_input, select_item
from ..models.group import ROLE_PARTICIPANT
from ..models.permissions import Permission
from ..services.chat_service import ChatService
from ..services.conversation import GroupConversation

# Permissions offered when editing a role; ALL stays reserved for Admin
EDITABLE_PERMISSIONS = [p for p in Permission if p is not Permission.ALL]


class GroupMenu:
    """UI for group management."""

    def __init__(self, username: str, service: ChatService, chat_menu: ChatMenu):
        self.username = username
        self.service = service
        self.chat_menu = chat_menu

    def show_group_menu(self) -> None:
        """Show group management interface."""
        while True:
            choice = input(
                "\n[C] Create Group\n[L] List My Groups\n[O] Open Group Chat\n[M] Manage Members\n"
                "[R] Manage Roles\n[N] Rename Group\n[X] Leave Group\n[D] Delete Group\n"
                "[B] Back to Main Menu\nSelect: "
            ).strip().upper()

            if choice == "C":
                self._create_group()
            elif choice == "L":
                self._list_groups()
            elif choice == "O":
                self._open_chat()
            elif choice == "M":
                self._manage_members()
            elif choice == "R":
                self._manage_roles()
            elif choice == "N":
                self._rename_group()
            elif choice == "X":
                self._leave_group()
            elif choice == "D":
                self._delete_group()
            elif choice == "B":
                break
            else:
                print("Invalid option.\n")

    def _pick_group(self, prompt: str = "Select group") -> Optional[Tuple[str, str]]:
        groups = sorted(self.service.get_groups_for_user(self.username).items(), key=lambda g: g[1])
        if not groups:
            print("\nYou are not a member of any groups.\n")
            return None
        index = select_item(prompt, [name for _, name in groups])
        return groups[index] if index is not None else None

    def _create_group(self) -> None:
        name = get_user_input("Enter group name")
        group_id = self.service.create_group(name, self.username)
        if group_id:
            print(f"Group '{name}' created. You are its Admin.\n")
        else:
            print("Group name must be 1-30 characters.\n")

    def _list_groups(self) -> None:
        groups = self.service.get_groups_for_user(self.username)
        if not groups:
            print("\nYou are not a member of any groups.\n")
            return

        print("\n==== Your Groups ====")
        for group_id, name in sorted(groups.items(), key=lambda g: g[1]):
            members = self.service.get_group_members_with_roles(group_id)
            messages = self.service.get_group_messages(group_id)
            print(f"{name} (ID: {group_id})")
            print(f"    Role: {members.get(self.username, '?')}")
            print(f"    Members: {len(members)}")
            print(f"    Messages: {len(messages)}")
        print("=====================\n")

    def _open_chat(self) -> None:
        picked = self._pick_group("Open chat")
        if picked:
            self.chat_menu.run(GroupConversation(self.service, self.username, picked[0]))

    def _manage_members(self) -> None:
        picked = self._pick_group()
        if not picked:
            return
        group_id, name = picked
        members = self.service.get_group_members_with_roles(group_id)
        print(f"\n==== Members of {name} ====")
        for member, role in sorted(members.items()):
            print(f"  {member} ({role})")

        choice = input("\n[A] Add Member\n[R] Remove Member\n[C] Change Role\nSelect: ").strip().upper()
        if choice == "A":
            candidates = sorted(self.service.get_all_usernames() - set(members))
            index = select_item("Add user", candidates)
            if index is None:
                return
            if self.service.has_group_permission(group_id, self.username, Permission.ALL):
                role = self._pick_role(group_id)
            else:
                role = ROLE_PARTICIPANT
            if role and self.service.add_group_member(group_id, self.username, candidates[index], role):
                print(f"Added {candidates[index]} as {role}.\n")
            else:
                print("Could not add member (missing permission or unknown role).\n")
        elif choice == "R":
            names = sorted(members)
            index = select_item("Remove member", names)
            if index is not None and self.service.remove_group_member(group_id, self.username, names[index]):
                print(f"Removed {names[index]}.\n")
            elif index is not None:
                print("Could not remove member.\n")
        elif choice == "C":
            names = sorted(members)
            index = select_item("Change role of", names)
            if index is None:
                return
            role = self._pick_role(group_id)
            if role and self.service.set_group_member_role(group_id, self.username, names[index], role):
                print(f"{names[index]} is now {role}.\n")
            else:
                print("Could not change role.\n")
        else:
            print("Invalid option.\n")

    def _pick_role(self, group_id: str) -> Optional[str]:
        roles = sorted(self.service.get_group_available_roles(group_id))
        index = select_item("Role", roles)
        return roles[index] if index is not None else None

    def _manage_roles(self) -> None:
        picked = self._pick_group()
        if not picked:
            return
        group_id, _ = picked
        for role in sorted(self.service.get_group_available_roles(group_id)):
            perms = sorted(p.value for p in self.service.get_role_permissions(group_id, role))
            print(f"  {role}: {', '.join(perms) or '-'}")

        choice = input("\n[A] Add Role\n[P] Set Role Permissions\nSelect: ").strip().upper()
        if choice == "A":
            role = get_user_input("New role name")
            if self.service.add_custom_role(group_id, self.username, role):
                print(f"Role '{role}' added.\n")
                self._edit_permissions(group_id, role)
            else:
                print("Could not add role.\n")
        elif choice == "P":
            role = self._pick_role(group_id)
            if role:
                self._edit_permissions(group_id, role)
        else:
            print("Invalid option.\n")

    def _edit_permissions(self, group_id: str, role: str) -> None:
        labels = [p.value for p in EDITABLE_PERMISSIONS]
        for i, label in enumerate(labels, 1):
            print(f"[{i}] {label}")
        raw = input("Permissions (numbers separated by commas, blank for none): ").strip()
        try:
            chosen: List[Permission] = [EDITABLE_PERMISSIONS[int(x) - 1] for x in raw.split(",") if x.strip()]
        except (ValueError, IndexError):
            print("Invalid input. Please enter numbers separated by commas.\n")
            return
        if self.service.set_role_permissions(group_id, self.username, role, chosen):
            print(f"Permissions of '{role}' updated.\n")
        else:
            print("Could not update permissions.\n")

    def _rename_group(self) -> None:
        picked = self._pick_group()
        if not picked:
            return
        name = get_user_input("New name", picked[1])
        if self.service.rename_group(picked[0], self.username, name):
            print(f"Group renamed to '{name}'.\n")
        else:
            print("Could not rename group.\n")

    def _leave_group(self) -> None:
        picked = self._pick_group("Leave group")
        if picked and self.service.remove_group_member(picked[0], self.username, self.username):
            print(f"You left '{picked[1]}'.\n")

    def _delete_group(self) -> None:
        picked = self._pick_group("Delete group")
        if not picked:
            return
        if input(f"Delete '{picked[1]}' and all its messages? (y/n): ").strip().lower() != "y":
            return
        if self.service.delete_group(picked[0], self.username):
            print("Group deleted.\n")
        else:
            print("You are not allowed to delete this group.\n")
