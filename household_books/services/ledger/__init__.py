"""Ledger collaborator package."""

from household_books.services.ledger.interface import LedgerInterface
from household_books.services.ledger.memory import InMemoryLedger

__all__ = ["InMemoryLedger", "LedgerInterface"]
