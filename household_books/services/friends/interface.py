"""
Friend Directory Collaborator

Friendships are managed elsewhere. The account core only needs to resolve
"is the user with this login ID a friend of mine, and who are they".
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class FriendLink(BaseModel):
    """An approved friendship seen from `user_id`'s side."""
    model_config = ConfigDict(frozen=True)

    user_id: UUID
    friend_user_id: UUID
    friend_login_id: str


class FriendDirectoryInterface(ABC):
    """Lookup of approved friendships."""

    @abstractmethod
    async def find_friend(
        self,
        user_id: UUID,
        friend_login_id: str,
    ) -> Optional[FriendLink]:
        """
        Resolve a friend of `user_id` by login ID.

        Returns:
            The friendship if one exists, None otherwise
        """
        pass
