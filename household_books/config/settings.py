"""
Configuration Management for Household Books

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The canonical starter accounts live in configuration rather than code so a
deployment can localize them without touching the domain layer.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_EXPENSE_ACCOUNTS = (
    "Food,Housing & Furnishings,Utilities,Clothing & Beauty,Medical,"
    "Personal Care,Social,Transportation,Communications,Self-Improvement,"
    "Entertainment,Taxes,Insurance,Miscellaneous,Reserve,Education,"
    "Car Expenses"
)


def _split_names(value: str) -> list[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


class AuditSettings(BaseSettings):
    """Audit trail configuration."""

    model_config = SettingsConfigDict(
        env_prefix="AUDIT_",
        extra="ignore"
    )

    enabled: bool = Field(
        default=True,
        description="Record audit events for account operations"
    )
    log_level: str = Field(
        default="INFO",
        description="Minimum level for local structured logs"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unsupported log level: {v}")
        return level


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Starter accounts provisioned for every new user
    default_asset_accounts: str = Field(
        default="Cash",
        description="Comma-separated names of the starter cash accounts"
    )
    default_expense_accounts: str = Field(
        default=DEFAULT_EXPENSE_ACCOUNTS,
        description="Comma-separated names of the starter expense accounts"
    )
    default_income_accounts: str = Field(
        default="Salary,Bonus,Interest & Dividends,Gifts",
        description="Comma-separated names of the starter income accounts"
    )

    # Validation limits
    max_account_name_length: int = Field(
        default=32,
        ge=1,
        le=255,
        description="Maximum length of an account name"
    )

    # Connection commit
    connection_commit_attempts: int = Field(
        default=3,
        ge=1,
        le=10,
        description="Attempts for the atomic edge commit on transient storage failures"
    )

    @property
    def default_asset_accounts_list(self) -> list[str]:
        return _split_names(self.default_asset_accounts)

    @property
    def default_expense_accounts_list(self) -> list[str]:
        return _split_names(self.default_expense_accounts)

    @property
    def default_income_accounts_list(self) -> list[str]:
        return _split_names(self.default_income_accounts)


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def audit(self) -> AuditSettings:
        return AuditSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus a
    `<name>_error` entry for every section that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("app", "audit"):
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
