"""
Account Validation

Runs before any account write. Two kinds of checks:

1. Field checks that need nothing but the account (name present, length)
2. Checks against stored data (name unique per owner, partner ownership)

Validation never fixes anything. It reports every issue it finds and the
caller decides; `ensure_valid` turns a failed result into `ValidationError`.
"""

from typing import Optional

from household_books.config import get_settings
from household_books.models.account import Account
from household_books.models.validation import ValidationIssue, ValidationResult
from household_books.services.storage import AccountStorageInterface


NAME_REQUIRED = "name required"
NAME_TOO_LONG = "name too long"
DUPLICATE_NAME = "duplicate name"
PARTNER_NOT_FOUND = "partner not found"
PARTNER_OWNER_MISMATCH = "partner must be same owner"


class ValidationError(Exception):
    """
    User-correctable problem with an account's fields.

    The message is the first error's text and is safe to show as is.
    Nothing has been written when this is raised.
    """

    def __init__(self, issues: list[ValidationIssue]):
        if not issues:
            raise ValueError("ValidationError needs at least one issue")
        self.issues = issues
        super().__init__(issues[0].message)

    @property
    def messages(self) -> list[str]:
        return [issue.message for issue in self.issues]


class AccountValidator:
    """
    Validates accounts against field rules and stored data.

    Without storage only the field checks run.
    """

    def __init__(
        self,
        storage: Optional[AccountStorageInterface] = None,
    ):
        self._storage = storage
        self._settings = get_settings().app

    def _validate_fields(self, account: Account) -> list[ValidationIssue]:
        issues = []

        if not account.name:
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message=NAME_REQUIRED,
            ))
        elif len(account.name) > self._settings.max_account_name_length:
            issues.append(ValidationIssue(
                field="name",
                issue_type="too_long",
                message=NAME_TOO_LONG,
            ))

        return issues

    async def _check_unique_name(self, account: Account) -> list[ValidationIssue]:
        if self._storage is None or not account.name:
            return []

        existing = await self._storage.find_by_name(account.user_id, account.name)
        if existing is not None and existing.id != account.id:
            return [ValidationIssue(
                field="name",
                issue_type="duplicate",
                message=DUPLICATE_NAME,
            )]
        return []

    async def _check_partner(self, account: Account) -> list[ValidationIssue]:
        if self._storage is None or account.partner_account_id is None:
            return []

        partner = await self._storage.get_account(account.partner_account_id)
        if partner is None:
            return [ValidationIssue(
                field="partner_account_id",
                issue_type="missing",
                message=PARTNER_NOT_FOUND,
            )]
        return self.check_partner(account, partner)

    @staticmethod
    def check_partner(account: Account, partner: Account) -> list[ValidationIssue]:
        """Only an account of the same owner can be a partner."""
        if partner.user_id != account.user_id:
            return [ValidationIssue(
                field="partner_account_id",
                issue_type="ownership",
                message=PARTNER_OWNER_MISMATCH,
            )]
        return []

    async def validate(self, account: Account) -> ValidationResult:
        """Run every check and collect the issues."""
        issues = self._validate_fields(account)
        issues.extend(await self._check_unique_name(account))
        issues.extend(await self._check_partner(account))
        return ValidationResult(account_id=account.id, issues=issues)

    async def ensure_valid(self, account: Account) -> ValidationResult:
        """
        Validate and raise on the first error.

        Raises:
            ValidationError: If any error-level issue was found
        """
        result = await self.validate(account)
        if not result.is_valid:
            raise ValidationError(result.errors)
        return result

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        if result.is_valid:
            return "All checks passed."
        lines = ["Please fix the following:"]
        lines.extend(f"  - {issue.field}: {issue.message}" for issue in result.errors)
        return "\n".join(lines)
