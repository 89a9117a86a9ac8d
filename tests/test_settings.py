"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from household_books.config import AppSettings, AuditSettings, validate_all_settings


class TestSettings:

    def test_defaults(self):
        settings = AppSettings()
        assert settings.default_asset_accounts_list == ["Cash"]
        assert len(settings.default_expense_accounts_list) == 17
        assert settings.default_income_accounts_list == [
            "Salary", "Bonus", "Interest & Dividends", "Gifts",
        ]
        assert settings.max_account_name_length == 32

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("CONNECTION_COMMIT_ATTEMPTS", "5")
        assert AppSettings().connection_commit_attempts == 5

    def test_audit_prefix_and_level(self, monkeypatch):
        monkeypatch.setenv("AUDIT_LOG_LEVEL", "warning")
        assert AuditSettings().log_level == "WARNING"

    def test_bad_log_level(self, monkeypatch):
        monkeypatch.setenv("AUDIT_LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            AuditSettings()

    def test_validate_all_settings_reports_errors(self, monkeypatch):
        monkeypatch.setenv("AUDIT_LOG_LEVEL", "chatty")
        results = validate_all_settings()
        assert results["app"] is True
        assert results["audit"] is False
        assert "audit_error" in results
