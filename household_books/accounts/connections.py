"""
Connection Graph Manager

Links an account to an account of a friend so both users see shared deals.

Edges are directed. `connect` adds the forward edge and, when interactive,
the reverse edge too. `clear_connection` removes the forward edge only and
leaves any reverse edge in place.

CONCURRENCY: `connect` writes to two accounts that may belong to two
different users. Both records are held exclusively while the edges are
checked and changed, and both are written in a single all-or-nothing save.
Changes are made on freshly read copies, so a failed check or a failed save
leaves storage and the caller's account untouched.
"""

from typing import Optional

from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)
from tenacity.wait import wait_base

from household_books.accounts.exceptions import (
    AccountNotFoundError,
    AlreadyConnectedError,
    FriendNotFoundError,
    IncompatibleTypeError,
)
from household_books.config import get_settings
from household_books.models.account import Account, Connection
from household_books.models.account_type import is_connectable
from household_books.services.friends import FriendDirectoryInterface
from household_books.services.storage import (
    AccountStorageInterface,
    StorageConnectionError,
)


def _type_label(account: Account) -> str:
    return account.asset_type_name() or account.type_info.type_name or account.kind.value


class ConnectionManager:
    """Creates, removes and counts connections between accounts."""

    def __init__(
        self,
        storage: AccountStorageInterface,
        friends: FriendDirectoryInterface,
        commit_attempts: Optional[int] = None,
        commit_wait: Optional[wait_base] = None,
    ):
        self._storage = storage
        self._friends = friends
        if commit_attempts is None:
            commit_attempts = get_settings().app.connection_commit_attempts
        if commit_attempts < 1:
            raise ValueError(f"commit_attempts must be at least 1, got {commit_attempts}")
        self._commit_attempts = commit_attempts
        if commit_wait is None:
            commit_wait = wait_exponential(multiplier=1, min=2, max=10)
        self._commit_wait = commit_wait

    async def _commit(self, accounts: list[Account]) -> None:
        """Save all accounts as one unit, retrying transient failures."""
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._commit_attempts),
            wait=self._commit_wait,
            retry=retry_if_exception_type(StorageConnectionError),
            reraise=True,
        ):
            with attempt:
                await self._storage.save_accounts(accounts)

    async def connect(
        self,
        account: Account,
        friend_login_id: str,
        target_account_name: str,
        interactive: bool = True,
    ) -> list[Connection]:
        """
        Connect `account` to the friend's account named `target_account_name`.

        Returns:
            The edges that were added: the forward edge, followed by the
            reverse edge if it was missing and `interactive` is set

        Raises:
            FriendNotFoundError: If the login ID isn't a friend of the owner
            AccountNotFoundError: If the friend has no account with that name
            AlreadyConnectedError: If the forward edge already exists
            IncompatibleTypeError: If the target's type doesn't accept the account's type
        """
        friend = await self._friends.find_friend(account.user_id, friend_login_id)
        if friend is None:
            raise FriendNotFoundError(friend_login_id)

        target = await self._storage.find_by_name(friend.friend_user_id, target_account_name)
        if target is None:
            raise AccountNotFoundError(friend_login_id, target_account_name)

        async with self._storage.lock_accounts([account.id, target.id]) as (source, target):
            if source.is_connected_to(target.id):
                raise AlreadyConnectedError(source.name, target.name)

            if not is_connectable(source.kind, target.kind):
                raise IncompatibleTypeError(_type_label(source), _type_label(target))

            source.add_connection(target.id)
            source.touch()
            added = [Connection(source_account_id=source.id, target_account_id=target.id)]

            # Reverse edge: added once, silently kept if already there
            if interactive and target.add_connection(source.id):
                target.touch()
                added.append(added[0].reversed())

            await self._commit([source, target])

        account.connected_account_ids = list(source.connected_account_ids)
        account.updated_at = source.updated_at
        return added

    async def clear_connection(self, account: Account, target: Account) -> bool:
        """
        Remove the forward edge `account -> target`.

        The reverse edge, if any, is left alone.

        Returns:
            True if an edge was removed
        """
        async with self._storage.lock_accounts([account.id]) as (source,):
            removed = source.remove_connection(target.id)
            if removed:
                source.touch()
                await self._commit([source])

        account.connected_account_ids = list(source.connected_account_ids)
        return removed

    async def connected_accounts(self, account: Account) -> list[Account]:
        """Accounts `account` points to."""
        stored = await self._storage.get_account(account.id) or account
        found = []
        for account_id in stored.connected_account_ids:
            other = await self._storage.get_account(account_id)
            if other is not None:
                found.append(other)
        return found

    async def associated_accounts(self, account: Account) -> list[Account]:
        """Accounts pointing to `account`."""
        return await self._storage.list_accounts_linking_to(account.id)

    async def connected_or_associated_count(self, account: Account) -> int:
        """Number of distinct accounts linked to `account` in either direction."""
        stored = await self._storage.get_account(account.id) or account
        linked = set(stored.connected_account_ids)
        linked.update(a.id for a in await self.associated_accounts(account))
        return len(linked)
