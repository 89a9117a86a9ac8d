"""
Abstract Storage Interface

DESIGN DECISION: We define an abstract interface for storage operations.
This allows us to:
1. Plug the account core into whatever database the host application uses
2. Use in-memory storage for testing
3. Keep business logic decoupled from storage implementation

The interface is intentionally small - we're not building an ORM.
Just the operations the account core needs.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractAsyncContextManager
from typing import Optional
from uuid import UUID

from household_books.models.account import Account
from household_books.models.audit import AuditEvent


class AccountStorageInterface(ABC):
    """
    Abstract interface for account storage operations.

    Reads return copies: mutating a returned account changes nothing until
    it is saved again. Transient fields are never stored.
    """

    @abstractmethod
    async def create_account(self, account: Account) -> UUID:
        """
        Persist a new account.

        Returns:
            The identity assigned to the stored account

        Raises:
            DuplicateError: If an account with the same ID already exists
        """
        pass

    @abstractmethod
    async def get_account(self, account_id: UUID) -> Optional[Account]:
        """Retrieve an account by ID, or None."""
        pass

    @abstractmethod
    async def get_account_for_user(
        self,
        user_id: UUID,
        account_id: UUID,
    ) -> Optional[Account]:
        """Retrieve an account by ID only if `user_id` owns it."""
        pass

    @abstractmethod
    async def find_by_name(self, user_id: UUID, name: str) -> Optional[Account]:
        """Find the account named `name` among the user's accounts."""
        pass

    @abstractmethod
    async def list_accounts(self, user_id: UUID) -> list[Account]:
        """
        List a user's accounts.

        Ordered by type order, then asset category order, then sort key.
        """
        pass

    @abstractmethod
    async def list_accounts_linking_to(self, account_id: UUID) -> list[Account]:
        """List every account holding a forward edge to `account_id`."""
        pass

    @abstractmethod
    async def save_account(self, account: Account) -> None:
        """
        Update an existing account.

        Raises:
            NotFoundError: If the account doesn't exist
        """
        pass

    @abstractmethod
    async def save_accounts(self, accounts: list[Account]) -> None:
        """
        Update several accounts as one unit: all are written or none are.

        Raises:
            NotFoundError: If any of the accounts doesn't exist
            StorageConnectionError: If the backend is unreachable (nothing written)
        """
        pass

    @abstractmethod
    async def destroy_account(self, account_id: UUID) -> bool:
        """
        Delete an account together with every edge touching it.

        Callers must run the deletion guard first; storage does not check
        ledger history.

        Returns:
            True if an account was deleted
        """
        pass

    @abstractmethod
    def lock_accounts(
        self,
        account_ids: list[UUID],
    ) -> AbstractAsyncContextManager[list[Account]]:
        """
        Hold the listed accounts exclusively for the duration of the block.

        Yields freshly read copies in the order requested. Locks are taken
        in a fixed global order so two holders can't deadlock.

        Raises:
            NotFoundError: If any of the accounts doesn't exist
        """
        pass

    @abstractmethod
    def lock_user(self, user_id: UUID) -> AbstractAsyncContextManager[None]:
        """Hold a user's account set exclusively (create/rename checks)."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event to the log."""
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events for a correlation ID, in chronological order."""
        pass

    @abstractmethod
    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        """Get all events for a specific entity, in chronological order."""
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """Get the most recent audit events (newest first)."""
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class NotFoundError(StorageError):
    """Entity not found in storage."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass


class StorageConnectionError(StorageError):
    """Could not reach the storage backend. Safe to retry."""
    pass
