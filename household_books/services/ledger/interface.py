"""
Ledger Collaborator

The ledger owns the entries (deals) that reference accounts. The account core
only asks two things of it: does any entry reference an account, and what
is an account's running balance before a date.
"""

from abc import ABC, abstractmethod
from datetime import date
from decimal import Decimal
from uuid import UUID


class LedgerInterface(ABC):
    """Read-only view of the ledger used by the account core."""

    @abstractmethod
    async def has_entry(self, account_id: UUID) -> bool:
        """
        Whether any ledger entry references the account.

        Must reflect every committed write (read-after-write consistent).
        """
        pass

    @abstractmethod
    async def balance_before_date(self, account_id: UUID, on: date) -> Decimal:
        """Sum of the account's entries dated strictly before `on`."""
        pass
