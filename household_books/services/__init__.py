"""Services package: collaborator interfaces and their in-memory backends."""

from household_books.services.friends import (
    FriendDirectoryInterface,
    FriendLink,
    InMemoryFriendDirectory,
)
from household_books.services.ledger import InMemoryLedger, LedgerInterface
from household_books.services.storage import (
    AccountStorageInterface,
    AuditStorageInterface,
    DuplicateError,
    InMemoryAccountStorage,
    InMemoryAuditStorage,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)

__all__ = [
    # Friend directory
    "FriendDirectoryInterface",
    "FriendLink",
    "InMemoryFriendDirectory",
    # Ledger
    "InMemoryLedger",
    "LedgerInterface",
    # Storage
    "AccountStorageInterface",
    "AuditStorageInterface",
    "DuplicateError",
    "InMemoryAccountStorage",
    "InMemoryAuditStorage",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
]
