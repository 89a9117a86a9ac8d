"""Friend directory collaborator package."""

from household_books.services.friends.interface import (
    FriendDirectoryInterface,
    FriendLink,
)
from household_books.services.friends.memory import InMemoryFriendDirectory

__all__ = ["FriendDirectoryInterface", "FriendLink", "InMemoryFriendDirectory"]
