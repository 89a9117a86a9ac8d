"""
Main Orchestrator for Household Books

Ties the account core to its collaborators and defines the use cases the
host application calls:

1. Account lifecycle (create, update, set partner, destroy, starter set)
2. Connections between friends' accounts

DESIGN DECISION: The orchestrator enforces the boundaries:
- Nothing is written before validation passes
- Nothing is destroyed before the deletion guard passes (fresh ledger read)
- Every change is audited
"""

from datetime import date
from decimal import Decimal
from typing import Optional
from uuid import UUID

from household_books.accounts import (
    BalanceCalculator,
    ConnectionManager,
    DeletionGuard,
    DomainRuleError,
    UsedAccountError,
)
from household_books.audit import AuditLogger, create_correlation_id
from household_books.config import get_settings
from household_books.models.account import Account, Connection
from household_books.models.account_type import AccountKind
from household_books.services.friends import (
    FriendDirectoryInterface,
    InMemoryFriendDirectory,
)
from household_books.services.ledger import InMemoryLedger, LedgerInterface
from household_books.services.storage import (
    AccountStorageInterface,
    AuditStorageInterface,
    InMemoryAccountStorage,
)
from household_books.validation import AccountValidator, ValidationError


# Fields a caller may change through the lifecycle flow
_EDITABLE_FIELDS = ("name", "sort_key", "partner_account_id")


class AccountFlow:
    """
    Orchestrates account lifecycle operations.

    Destroying an account is always preceded by a forced deletion guard
    check; a used account is never handed to storage for deletion.
    """

    def __init__(
        self,
        storage: AccountStorageInterface,
        ledger: LedgerInterface,
        validator: Optional[AccountValidator] = None,
        guard: Optional[DeletionGuard] = None,
        balance_calculator: Optional[BalanceCalculator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._storage = storage
        self._validator = validator or AccountValidator(storage)
        self._guard = guard or DeletionGuard(ledger)
        self._balance = balance_calculator or BalanceCalculator(ledger)
        self._audit_logger = audit_logger

    async def _ensure_valid(
        self,
        account: Account,
        correlation_id: UUID,
    ) -> None:
        try:
            await self._validator.ensure_valid(account)
        except ValidationError as e:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    entity_id=account.id,
                    issues=[issue.model_dump() for issue in e.issues],
                    correlation_id=correlation_id,
                )
            raise

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    async def get_account(self, user_id: UUID, account_id: UUID) -> Optional[Account]:
        return await self._storage.get_account_for_user(user_id, account_id)

    async def get_account_by_name(self, user_id: UUID, name: str) -> Optional[Account]:
        return await self._storage.find_by_name(user_id, name)

    async def list_accounts(self, user_id: UUID) -> list[Account]:
        return await self._storage.list_accounts(user_id)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create_account(
        self,
        user_id: UUID,
        name: str,
        kind: AccountKind,
        sort_key: int = 0,
        partner_account_id: Optional[UUID] = None,
        correlation_id: Optional[UUID] = None,
    ) -> Account:
        """
        Validate and persist a new account.

        The owner's accounts are held exclusively from the uniqueness check
        until the write, so two concurrent creations can't both pass.

        Raises:
            ValidationError: Name missing, too long or already used by the
                owner, or partner owned by someone else
        """
        correlation_id = correlation_id or create_correlation_id()

        account = Account(
            user_id=user_id,
            name=name,
            kind=kind,
            sort_key=sort_key,
            partner_account_id=partner_account_id,
        )

        async with self._storage.lock_user(user_id):
            await self._ensure_valid(account, correlation_id)
            await self._storage.create_account(account)

        if self._audit_logger:
            await self._audit_logger.log_account_created(
                account_id=account.id,
                user_id=user_id,
                name=account.name,
                kind=account.kind.value,
                correlation_id=correlation_id,
            )

        return account

    async def _apply_edits(
        self,
        account: Account,
        edits: dict,
        correlation_id: UUID,
    ) -> Account:
        """
        Apply user-editable fields to the stored record and save it.

        The stored record is re-read under lock so its connection edges are
        kept as they are; only `connect` and `clear_connection` change those.
        On success the caller's account is refreshed from the saved record.
        """
        async with self._storage.lock_user(account.user_id):
            async with self._storage.lock_accounts([account.id]) as (stored,):
                edited = Account.model_validate({**stored.model_dump(), **edits})
                await self._ensure_valid(edited, correlation_id)
                edited.touch()
                await self._storage.save_account(edited)

        for field in _EDITABLE_FIELDS + ("connected_account_ids", "updated_at"):
            setattr(account, field, getattr(edited, field))
        return account

    async def update_account(
        self,
        account: Account,
        correlation_id: Optional[UUID] = None,
    ) -> Account:
        """Re-validate and save the editable fields of an edited account."""
        correlation_id = correlation_id or create_correlation_id()

        edits = {field: getattr(account, field) for field in _EDITABLE_FIELDS}
        await self._apply_edits(account, edits, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_account_updated(
                account_id=account.id,
                name=account.name,
                correlation_id=correlation_id,
            )

        return account

    async def set_partner(
        self,
        account: Account,
        partner: Optional[Account],
        correlation_id: Optional[UUID] = None,
    ) -> Account:
        """
        Set (or clear, with None) the account's partner account.

        Raises:
            ValidationError: If the partner isn't stored or belongs to
                another user
        """
        correlation_id = correlation_id or create_correlation_id()

        edits = {"partner_account_id": partner.id if partner else None}
        await self._apply_edits(account, edits, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_partner_account_set(
                account_id=account.id,
                partner_account_id=account.partner_account_id,
                correlation_id=correlation_id,
            )

        return account

    async def destroy_account(
        self,
        account: Account,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        """
        Delete an account that no ledger entry references.

        Raises:
            UsedAccountError: If the ledger has entries for the account;
                nothing is deleted
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            await self._guard.assert_not_used(account, force=True)
        except UsedAccountError as e:
            if self._audit_logger:
                await self._audit_logger.log_account_delete_blocked(
                    account_id=account.id,
                    name=account.name,
                    reason=str(e),
                    correlation_id=correlation_id,
                )
            raise

        deleted = await self._storage.destroy_account(account.id)
        self._guard.forget(account.id)

        if deleted and self._audit_logger:
            await self._audit_logger.log_account_deleted(
                account_id=account.id,
                name=account.name,
                correlation_id=correlation_id,
            )

        return deleted

    # -------------------------------------------------------------------------
    # Deletion reporting
    # -------------------------------------------------------------------------

    async def deletable(self, account: Account) -> tuple[bool, list[str]]:
        """
        Advisory check; never raises for used accounts.

        The guard's cached answer lives for one call, like a record loaded
        for one request.
        """
        self._guard.forget(account.id)
        return await self._guard.deletable(account)

    async def deletion_report(
        self,
        user_id: UUID,
    ) -> list[tuple[Account, bool, list[str]]]:
        """Run `deletable` over every account of the user with a fresh cache."""
        self._guard.clear_cache()
        report = []
        for account in await self._storage.list_accounts(user_id):
            ok, messages = await self._guard.deletable(account)
            report.append((account, ok, messages))
        return report

    # -------------------------------------------------------------------------
    # Starter accounts
    # -------------------------------------------------------------------------

    async def _create_accounts(
        self,
        user_id: UUID,
        kind: AccountKind,
        names: list[str],
        correlation_id: UUID,
        sort_key_start: int = 1,
    ) -> list[Account]:
        created = []
        for sort_key, name in enumerate(names, start=sort_key_start):
            created.append(await self.create_account(
                user_id=user_id,
                name=name,
                kind=kind,
                sort_key=sort_key,
                correlation_id=correlation_id,
            ))
        return created

    async def create_default_accounts(
        self,
        user_id: UUID,
        correlation_id: Optional[UUID] = None,
    ) -> list[Account]:
        """
        Provision the starter set for a new user: cash, expenses, incomes.

        Sort keys start at 1 within each group. Not idempotent: a second
        call fails on the first duplicate name.
        """
        correlation_id = correlation_id or create_correlation_id()
        settings = get_settings().app

        assets = await self._create_accounts(
            user_id, AccountKind.CASH, settings.default_asset_accounts_list, correlation_id
        )
        expenses = await self._create_accounts(
            user_id, AccountKind.EXPENSE, settings.default_expense_accounts_list, correlation_id
        )
        incomes = await self._create_accounts(
            user_id, AccountKind.INCOME, settings.default_income_accounts_list, correlation_id
        )

        if self._audit_logger:
            await self._audit_logger.log_default_accounts_created(
                user_id=user_id,
                counts={
                    "asset": len(assets),
                    "expense": len(expenses),
                    "income": len(incomes),
                },
                correlation_id=correlation_id,
            )

        return assets + expenses + incomes

    # -------------------------------------------------------------------------
    # Balances
    # -------------------------------------------------------------------------

    async def balance_before(self, account: Account, on: date) -> Decimal:
        return await self._balance.balance_before(account, on)


class ConnectionFlow:
    """Orchestrates connections between friends' accounts, with auditing."""

    def __init__(
        self,
        storage: AccountStorageInterface,
        friends: FriendDirectoryInterface,
        manager: Optional[ConnectionManager] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._manager = manager or ConnectionManager(storage, friends)
        self._audit_logger = audit_logger

    async def connect(
        self,
        account: Account,
        friend_login_id: str,
        target_account_name: str,
        interactive: bool = True,
        correlation_id: Optional[UUID] = None,
    ) -> list[Connection]:
        correlation_id = correlation_id or create_correlation_id()

        try:
            added = await self._manager.connect(
                account,
                friend_login_id,
                target_account_name,
                interactive=interactive,
            )
        except DomainRuleError as e:
            if self._audit_logger:
                await self._audit_logger.log_connection_rejected(
                    account_id=account.id,
                    error_type=type(e).__name__,
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            raise

        if self._audit_logger:
            await self._audit_logger.log_connection_created(
                account_id=account.id,
                target_account_id=added[0].target_account_id,
                reverse_added=len(added) > 1,
                correlation_id=correlation_id,
            )

        return added

    async def clear_connection(
        self,
        account: Account,
        target: Account,
        correlation_id: Optional[UUID] = None,
    ) -> bool:
        correlation_id = correlation_id or create_correlation_id()

        removed = await self._manager.clear_connection(account, target)

        if removed and self._audit_logger:
            await self._audit_logger.log_connection_cleared(
                account_id=account.id,
                target_account_id=target.id,
                correlation_id=correlation_id,
            )

        return removed

    async def connected_or_associated_count(self, account: Account) -> int:
        return await self._manager.connected_or_associated_count(account)


def create_app_components(
    storage: Optional[AccountStorageInterface] = None,
    ledger: Optional[LedgerInterface] = None,
    friends: Optional[FriendDirectoryInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
) -> tuple[AccountFlow, ConnectionFlow]:
    """
    Factory function to create all application components.

    Collaborators that aren't given fall back to the in-memory backends.
    Without audit storage, audit events are only logged locally.

    Returns:
        (account_flow, connection_flow)
    """
    storage = storage or InMemoryAccountStorage()
    ledger = ledger or InMemoryLedger()
    friends = friends or InMemoryFriendDirectory()
    audit_logger = AuditLogger(audit_storage)

    account_flow = AccountFlow(
        storage=storage,
        ledger=ledger,
        audit_logger=audit_logger,
    )

    connection_flow = ConnectionFlow(
        storage=storage,
        friends=friends,
        audit_logger=audit_logger,
    )

    return account_flow, connection_flow
