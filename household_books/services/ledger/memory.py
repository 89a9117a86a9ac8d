"""In-memory ledger used by tests and the default app wiring."""

from datetime import date
from decimal import Decimal
from uuid import UUID

from household_books.services.ledger.interface import LedgerInterface


class InMemoryLedger(LedgerInterface):
    """Keeps `(account_id, date, amount)` postings in a list."""

    def __init__(self):
        self._postings: list[tuple[UUID, date, Decimal]] = []

    def post(self, account_id: UUID, on: date, amount: Decimal) -> None:
        self._postings.append((account_id, on, Decimal(amount)))

    def remove_entries(self, account_id: UUID) -> int:
        before = len(self._postings)
        self._postings = [p for p in self._postings if p[0] != account_id]
        return before - len(self._postings)

    async def has_entry(self, account_id: UUID) -> bool:
        return any(p[0] == account_id for p in self._postings)

    async def balance_before_date(self, account_id: UUID, on: date) -> Decimal:
        return sum(
            (amount for acc, day, amount in self._postings if acc == account_id and day < on),
            Decimal("0"),
        )
