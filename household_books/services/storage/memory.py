"""
In-Memory Storage Implementation

Reference backend for the storage interfaces. Used by the tests and as the
default backend when no database is wired in.

Records are deep-copied on the way in and on the way out, so callers only
ever see detached snapshots, the same as with a real database. Exclusive
holds are `asyncio.Lock`s keyed by account or user ID.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from uuid import UUID

from household_books.models.account import Account
from household_books.models.account_type import family_of, type_info
from household_books.models.audit import AuditEvent
from household_books.services.storage.interface import (
    AccountStorageInterface,
    AuditStorageInterface,
    DuplicateError,
    NotFoundError,
)


def _snapshot(account: Account) -> Account:
    return account.model_copy(
        deep=True,
        update={"balance": None, "percentage": None, "delete_errors": []},
    )


def _display_key(account: Account) -> tuple[int, int, int]:
    info = type_info(account.kind)
    family = type_info(family_of(account.kind))
    asset_order = info.type_order if info.parent else 0
    return family.type_order, asset_order, account.sort_key


class InMemoryAccountStorage(AccountStorageInterface):
    """Dictionary-backed account storage."""

    def __init__(self):
        self._accounts: dict[UUID, Account] = {}
        self._account_locks: dict[UUID, asyncio.Lock] = {}
        self._user_locks: dict[UUID, asyncio.Lock] = {}

    def _lock_for(self, table: dict[UUID, asyncio.Lock], key: UUID) -> asyncio.Lock:
        lock = table.get(key)
        if lock is None:
            lock = table[key] = asyncio.Lock()
        return lock

    def _require(self, account_id: UUID) -> Account:
        stored = self._accounts.get(account_id)
        if stored is None:
            raise NotFoundError(f"Account not found: {account_id}")
        return stored

    async def create_account(self, account: Account) -> UUID:
        if account.id in self._accounts:
            raise DuplicateError(f"Account already exists: {account.id}")
        self._accounts[account.id] = _snapshot(account)
        return account.id

    async def get_account(self, account_id: UUID) -> Optional[Account]:
        stored = self._accounts.get(account_id)
        return _snapshot(stored) if stored else None

    async def get_account_for_user(
        self,
        user_id: UUID,
        account_id: UUID,
    ) -> Optional[Account]:
        stored = self._accounts.get(account_id)
        if stored is None or stored.user_id != user_id:
            return None
        return _snapshot(stored)

    async def find_by_name(self, user_id: UUID, name: str) -> Optional[Account]:
        for stored in self._accounts.values():
            if stored.user_id == user_id and stored.name == name:
                return _snapshot(stored)
        return None

    async def list_accounts(self, user_id: UUID) -> list[Account]:
        owned = [a for a in self._accounts.values() if a.user_id == user_id]
        return [_snapshot(a) for a in sorted(owned, key=_display_key)]

    async def list_accounts_linking_to(self, account_id: UUID) -> list[Account]:
        return [
            _snapshot(a)
            for a in self._accounts.values()
            if a.is_connected_to(account_id)
        ]

    async def save_account(self, account: Account) -> None:
        await self.save_accounts([account])

    async def save_accounts(self, accounts: list[Account]) -> None:
        # Check everything before writing anything
        for account in accounts:
            self._require(account.id)
        for account in accounts:
            self._accounts[account.id] = _snapshot(account)

    async def destroy_account(self, account_id: UUID) -> bool:
        if self._accounts.pop(account_id, None) is None:
            return False
        for other in self._accounts.values():
            other.remove_connection(account_id)
            if other.partner_account_id == account_id:
                other.partner_account_id = None
        self._account_locks.pop(account_id, None)
        return True

    @asynccontextmanager
    async def lock_accounts(self, account_ids: list[UUID]) -> AsyncIterator[list[Account]]:
        ordered = sorted(set(account_ids), key=str)
        acquired: list[asyncio.Lock] = []
        try:
            for account_id in ordered:
                lock = self._lock_for(self._account_locks, account_id)
                await lock.acquire()
                acquired.append(lock)
            yield [_snapshot(self._require(account_id)) for account_id in account_ids]
        finally:
            for lock in reversed(acquired):
                lock.release()

    @asynccontextmanager
    async def lock_user(self, user_id: UUID) -> AsyncIterator[None]:
        async with self._lock_for(self._user_locks, user_id):
            yield


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only list of audit events."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: UUID,
    ) -> list[AuditEvent]:
        return [
            e for e in self._events
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
