"""
Deletion Guard

An account referenced by any ledger entry must never be destroyed. The
guard answers that question in two modes:

- forced: asks the ledger now. This is the only mode allowed in front of a
  destroy.
- cached: reuses the last answer for the account, asking the ledger only
  the first time. Good enough for listing which accounts could be deleted.
"""

from uuid import UUID

from household_books.accounts.exceptions import UsedAccountError
from household_books.models.account import Account
from household_books.services.ledger import LedgerInterface


class DeletionGuard:
    """Gate on destructive account operations."""

    def __init__(self, ledger: LedgerInterface):
        self._ledger = ledger
        self._entry_cache: dict[UUID, bool] = {}

    async def has_entry(self, account: Account, force: bool = True) -> bool:
        if force or account.id not in self._entry_cache:
            self._entry_cache[account.id] = await self._ledger.has_entry(account.id)
        return self._entry_cache[account.id]

    async def assert_not_used(self, account: Account, force: bool = True) -> None:
        """
        Raises:
            UsedAccountError: If a ledger entry references the account
        """
        if await self.has_entry(account, force=force):
            raise UsedAccountError(account.type_info.type_name, account.name)

    async def deletable(self, account: Account) -> tuple[bool, list[str]]:
        """
        Advisory check on cached data. Never raises UsedAccountError.

        Refreshes `account.delete_errors` with the collected messages.
        """
        account.delete_errors = []
        try:
            await self.assert_not_used(account, force=False)
        except UsedAccountError as err:
            account.delete_errors.append(str(err))
            return False, list(account.delete_errors)
        return True, []

    def forget(self, account_id: UUID) -> None:
        self._entry_cache.pop(account_id, None)

    def clear_cache(self) -> None:
        self._entry_cache.clear()
