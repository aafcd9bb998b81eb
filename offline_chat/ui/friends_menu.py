"""Friend management UI."""
from typing import List

from .components import select_item
from ..services.chat_service import ChatService


class FriendsMenu:
    """UI for friends and friend requests."""

    def __init__(self, username: str, service: ChatService):
        self.username = username
        self.service = service

    def show_friends_menu(self) -> None:
        """Show friend management interface."""
        while True:
            self._print_summary()
            choice = input(
                "\n[S] Send Request\n[A] Accept Request\n[R] Reject Request\n"
                "[C] Cancel Sent Request\n[U] Unfriend\n[B] Back to Main Menu\nSelect: "
            ).strip().upper()

            if choice == "S":
                self._send_request()
            elif choice == "A":
                self._answer_request(accept=True)
            elif choice == "R":
                self._answer_request(accept=False)
            elif choice == "C":
                self._cancel_request()
            elif choice == "U":
                self._unfriend()
            elif choice == "B":
                break
            else:
                print("Invalid option.\n")

    def _print_summary(self) -> None:
        friends = sorted(self.service.get_friends_of(self.username))
        incoming = sorted(self.service.get_incoming_friend_requests(self.username))
        outgoing = sorted(self.service.get_outgoing_friend_requests(self.username))

        print("\n==== Friends ====")
        print(", ".join(friends) if friends else "No friends yet.")
        if incoming:
            print(f"Incoming requests: {', '.join(incoming)}")
        if outgoing:
            print(f"Sent requests: {', '.join(outgoing)}")

    def _candidates(self) -> List[str]:
        """Users we could send a request to."""
        taken = (self.service.get_friends_of(self.username)
                 | self.service.get_incoming_friend_requests(self.username)
                 | self.service.get_outgoing_friend_requests(self.username)
                 | {self.username})
        return sorted(self.service.get_all_usernames() - taken)

    def _send_request(self) -> None:
        candidates = self._candidates()
        if not candidates:
            print("No other users to add.\n")
            return
        index = select_item("Send request to", candidates)
        if index is None:
            return
        if self.service.send_friend_request(self.username, candidates[index]):
            print(f"Friend request sent to {candidates[index]}.\n")
        else:
            print("Could not send friend request.\n")

    def _answer_request(self, accept: bool) -> None:
        incoming = sorted(self.service.get_incoming_friend_requests(self.username))
        if not incoming:
            print("No pending requests.\n")
            return
        index = select_item("Request", incoming)
        if index is None:
            return
        other = incoming[index]
        if accept:
            ok = self.service.accept_friend_request(self.username, other)
        else:
            ok = self.service.reject_friend_request(self.username, other)
        print(f"{'Accepted' if accept else 'Rejected'} {other}.\n" if ok else "Request no longer pending.\n")

    def _cancel_request(self) -> None:
        outgoing = sorted(self.service.get_outgoing_friend_requests(self.username))
        if not outgoing:
            print("No sent requests.\n")
            return
        index = select_item("Cancel request to", outgoing)
        if index is None:
            return
        if self.service.cancel_outgoing_friend_request(self.username, outgoing[index]):
            print("Request cancelled.\n")
        else:
            print("Request no longer pending.\n")

    def _unfriend(self) -> None:
        friends = sorted(self.service.get_friends_of(self.username))
        if not friends:
            print("No friends to remove.\n")
            return
        index = select_item("Unfriend", friends)
        if index is None:
            return
        if self.service.remove_friend(self.username, friends[index]):
            print(f"Removed {friends[index]} from friends.\n")
        else:
            print("Could not remove friend.\n")
