"""In-memory friend directory used by tests and the default app wiring."""

from typing import Optional
from uuid import UUID

from household_books.services.friends.interface import (
    FriendDirectoryInterface,
    FriendLink,
)


class InMemoryFriendDirectory(FriendDirectoryInterface):
    """Holds users by login ID and a set of mutual friendships."""

    def __init__(self):
        self._login_ids: dict[UUID, str] = {}
        self._friendships: set[frozenset[UUID]] = set()

    def add_user(self, user_id: UUID, login_id: str) -> None:
        self._login_ids[user_id] = login_id

    def add_friendship(self, user_id: UUID, other_user_id: UUID) -> None:
        if user_id == other_user_id:
            raise ValueError("A user cannot befriend themselves")
        self._friendships.add(frozenset((user_id, other_user_id)))

    def remove_friendship(self, user_id: UUID, other_user_id: UUID) -> None:
        self._friendships.discard(frozenset((user_id, other_user_id)))

    def login_id_of(self, user_id: UUID) -> Optional[str]:
        return self._login_ids.get(user_id)

    async def find_friend(
        self,
        user_id: UUID,
        friend_login_id: str,
    ) -> Optional[FriendLink]:
        for other_id, login_id in self._login_ids.items():
            if login_id != friend_login_id:
                continue
            if frozenset((user_id, other_id)) in self._friendships:
                return FriendLink(
                    user_id=user_id,
                    friend_user_id=other_id,
                    friend_login_id=login_id,
                )
        return None
