"""
Account core: connection graph, deletion guard and balance delegate.
"""

from household_books.accounts.balance import BalanceCalculator
from household_books.accounts.connections import ConnectionManager
from household_books.accounts.exceptions import (
    AccountNotFoundError,
    AlreadyConnectedError,
    DomainRuleError,
    FriendNotFoundError,
    IncompatibleTypeError,
    UsedAccountError,
)
from household_books.accounts.guard import DeletionGuard

__all__ = [
    "BalanceCalculator",
    "ConnectionManager",
    "DeletionGuard",
    # Errors
    "AccountNotFoundError",
    "AlreadyConnectedError",
    "DomainRuleError",
    "FriendNotFoundError",
    "IncompatibleTypeError",
    "UsedAccountError",
]
