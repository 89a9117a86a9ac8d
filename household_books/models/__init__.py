"""
Data Models Package

This package contains the Pydantic models and the account type registry used
across Household Books.
"""

from household_books.models.account_type import (
    ACCOUNT_TYPES,
    ASSET_TYPES,
    AccountKind,
    AccountTypeInfo,
    AccountTypeRegistry,
    UnknownTypeError,
    family_of,
    is_connectable,
    leaf_kinds,
    symbol_for,
    type_for_symbol,
    type_info,
)
from household_books.models.account import Account, Connection
from household_books.models.validation import ValidationIssue, ValidationResult
from household_books.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Account type registry
    "ACCOUNT_TYPES",
    "ASSET_TYPES",
    "AccountKind",
    "AccountTypeInfo",
    "AccountTypeRegistry",
    "UnknownTypeError",
    "family_of",
    "is_connectable",
    "leaf_kinds",
    "symbol_for",
    "type_for_symbol",
    "type_info",
    # Account
    "Account",
    "Connection",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
