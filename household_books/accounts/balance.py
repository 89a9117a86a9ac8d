"""
Balance Calculator

Thin read-side delegate to the ledger. Results are stored on the account's
transient fields for the current read only; nothing here is persisted.
"""

from datetime import date
from decimal import Decimal

from household_books.models.account import Account
from household_books.services.ledger import LedgerInterface


class BalanceCalculator:

    def __init__(self, ledger: LedgerInterface):
        self._ledger = ledger

    async def balance_before(self, account: Account, on: date) -> Decimal:
        """Running balance strictly before `on`, also kept on `account.balance`."""
        account.balance = await self._ledger.balance_before_date(account.id, on)
        return account.balance

    async def balances_before(self, accounts: list[Account], on: date) -> list[Account]:
        """
        Fill `balance` and `percentage` for a group of accounts.

        Percentage is each account's share of the group total; it stays
        None when the total is zero.
        """
        for account in accounts:
            await self.balance_before(account, on)

        total = sum((a.balance for a in accounts), Decimal("0"))
        for account in accounts:
            account.percentage = account.balance * 100 / total if total else None
        return accounts
