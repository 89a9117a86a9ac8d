"""
Storage Services Package

Provides abstract interfaces and an in-memory implementation for account and
audit storage. Host applications plug in their own database by implementing
the interfaces.
"""

from household_books.services.storage.interface import (
    AccountStorageInterface,
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
    StorageConnectionError,
    StorageError,
)
from household_books.services.storage.memory import (
    InMemoryAccountStorage,
    InMemoryAuditStorage,
)

__all__ = [
    # Interfaces
    "AccountStorageInterface",
    "AuditStorageInterface",
    # Exceptions
    "DuplicateError",
    "NotFoundError",
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryAccountStorage",
    "InMemoryAuditStorage",
]
