"""Configuration package."""

from household_books.config.settings import (
    AppSettings,
    AuditSettings,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "AuditSettings",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
