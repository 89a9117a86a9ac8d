"""Account validation package."""

from household_books.validation.validator import (
    DUPLICATE_NAME,
    NAME_REQUIRED,
    NAME_TOO_LONG,
    PARTNER_NOT_FOUND,
    PARTNER_OWNER_MISMATCH,
    AccountValidator,
    ValidationError,
)

__all__ = [
    "DUPLICATE_NAME",
    "NAME_REQUIRED",
    "NAME_TOO_LONG",
    "PARTNER_NOT_FOUND",
    "PARTNER_OWNER_MISMATCH",
    "AccountValidator",
    "ValidationError",
]
