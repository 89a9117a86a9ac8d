"""Flow tests for AccountFlow and ConnectionFlow over in-memory collaborators."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from household_books.accounts import FriendNotFoundError, UsedAccountError
from household_books.models import Account, AccountKind, AuditEventType
from household_books.orchestrator import AccountFlow, ConnectionFlow, create_app_components
from household_books.validation import (
    DUPLICATE_NAME,
    PARTNER_NOT_FOUND,
    PARTNER_OWNER_MISMATCH,
    ValidationError,
)


async def _event_types(audit_storage):
    return [e.event_type for e in await audit_storage.get_recent_events()]


class TestDefaultAccounts:
    """Starter account provisioning."""

    @pytest.mark.asyncio
    async def test_starter_set(self, account_flow, audit_storage):
        user_id = uuid4()

        created = await account_flow.create_default_accounts(user_id)

        cash = [a for a in created if a.kind == AccountKind.CASH]
        expenses = [a for a in created if a.kind == AccountKind.EXPENSE]
        incomes = [a for a in created if a.kind == AccountKind.INCOME]
        assert len(cash) == 1
        assert len(expenses) == 17
        assert len(incomes) == 4
        assert [a.sort_key for a in expenses] == list(range(1, 18))
        assert [a.sort_key for a in incomes] == [1, 2, 3, 4]
        assert len(await account_flow.list_accounts(user_id)) == 22
        assert AuditEventType.DEFAULT_ACCOUNTS_CREATED in await _event_types(audit_storage)

    @pytest.mark.asyncio
    async def test_second_call_fails_on_duplicate(self, account_flow):
        user_id = uuid4()
        await account_flow.create_default_accounts(user_id)

        with pytest.raises(ValidationError, match=DUPLICATE_NAME):
            await account_flow.create_default_accounts(user_id)

    @pytest.mark.asyncio
    async def test_names_from_settings(self, account_flow, monkeypatch):
        monkeypatch.setenv("DEFAULT_ASSET_ACCOUNTS", "Wallet, Piggy bank")
        monkeypatch.setenv("DEFAULT_EXPENSE_ACCOUNTS", "Food")
        monkeypatch.setenv("DEFAULT_INCOME_ACCOUNTS", "Salary")

        created = await account_flow.create_default_accounts(uuid4())

        assert [a.name for a in created] == ["Wallet", "Piggy bank", "Food", "Salary"]


class TestAccountLifecycle:
    """Create, update, partner and destroy."""

    @pytest.mark.asyncio
    async def test_duplicate_name_per_owner(self, account_flow, audit_storage):
        alice, bob = uuid4(), uuid4()
        await account_flow.create_account(alice, "Wallet", AccountKind.CASH)
        await account_flow.create_account(bob, "Wallet", AccountKind.CASH)

        with pytest.raises(ValidationError):
            await account_flow.create_account(alice, "Wallet", AccountKind.EXPENSE)

        assert len(await account_flow.list_accounts(alice)) == 1
        assert AuditEventType.VALIDATION_FAILED in await _event_types(audit_storage)

    @pytest.mark.asyncio
    async def test_lookups(self, account_flow):
        alice = uuid4()
        wallet = await account_flow.create_account(alice, "Wallet", AccountKind.CASH)

        assert (await account_flow.get_account(alice, wallet.id)).name == "Wallet"
        assert await account_flow.get_account(uuid4(), wallet.id) is None
        assert (await account_flow.get_account_by_name(alice, "Wallet")).id == wallet.id

    @pytest.mark.asyncio
    async def test_rename_to_taken_name_rejected(self, account_flow):
        alice = uuid4()
        await account_flow.create_account(alice, "Wallet", AccountKind.CASH)
        purse = await account_flow.create_account(alice, "Purse", AccountKind.CASH)

        purse.name = "Wallet"
        with pytest.raises(ValidationError, match=DUPLICATE_NAME):
            await account_flow.update_account(purse)

        assert (await account_flow.get_account(alice, purse.id)).name == "Purse"

    @pytest.mark.asyncio
    async def test_set_and_clear_partner(self, account_flow):
        alice = uuid4()
        bank = await account_flow.create_account(alice, "Bank", AccountKind.BANKING_FACILITY)
        card = await account_flow.create_account(alice, "Card", AccountKind.CREDIT_CARD)

        await account_flow.set_partner(card, bank)
        assert (await account_flow.get_account(alice, card.id)).partner_account_id == bank.id

        await account_flow.set_partner(card, None)
        assert (await account_flow.get_account(alice, card.id)).partner_account_id is None

    @pytest.mark.asyncio
    async def test_partner_of_other_owner_rejected(self, account_flow):
        bank = await account_flow.create_account(uuid4(), "Bank", AccountKind.BANKING_FACILITY)
        card = await account_flow.create_account(uuid4(), "Card", AccountKind.CREDIT_CARD)

        with pytest.raises(ValidationError, match=PARTNER_OWNER_MISMATCH):
            await account_flow.set_partner(card, bank)

        assert card.partner_account_id is None

    @pytest.mark.asyncio
    async def test_missing_partner_rejected(self, account_flow, storage):
        alice = uuid4()
        card = await account_flow.create_account(alice, "Card", AccountKind.CREDIT_CARD)
        unsaved_bank = Account(user_id=alice, name="Bank", kind=AccountKind.BANKING_FACILITY)

        with pytest.raises(ValidationError, match=PARTNER_NOT_FOUND):
            await account_flow.set_partner(card, unsaved_bank)

        assert card.partner_account_id is None
        assert (await storage.get_account(card.id)).partner_account_id is None

    @pytest.mark.asyncio
    async def test_rename_of_stale_copy_keeps_edges(self, account_flow, connection_flow, storage, cash_pair):
        alice_cash, bob_cash = cash_pair
        stale_bob = await storage.get_account(bob_cash.id)
        await connection_flow.connect(alice_cash, "bob", "Cash")

        stale_bob.name = "Wallet"
        await account_flow.update_account(stale_bob)

        stored_bob = await storage.get_account(bob_cash.id)
        assert stored_bob.name == "Wallet"
        assert stored_bob.connected_account_ids == [alice_cash.id]
        assert stale_bob.connected_account_ids == [alice_cash.id]
        assert await connection_flow.connected_or_associated_count(bob_cash) == 1

    @pytest.mark.asyncio
    async def test_set_partner_keeps_edges(self, account_flow, connection_flow, storage, users, cash_pair):
        alice_cash, bob_cash = cash_pair
        bob_bank = await account_flow.create_account(users["bob"], "Bank", AccountKind.BANKING_FACILITY)
        await connection_flow.connect(alice_cash, "bob", "Cash")

        # bob_cash was read before the connect added its reverse edge
        await account_flow.set_partner(bob_cash, bob_bank)

        stored_bob = await storage.get_account(bob_cash.id)
        assert stored_bob.partner_account_id == bob_bank.id
        assert alice_cash.id in stored_bob.connected_account_ids

    @pytest.mark.asyncio
    async def test_update_saves_only_editable_fields(self, account_flow, storage):
        alice = uuid4()
        wallet = await account_flow.create_account(alice, "Wallet", AccountKind.CASH)

        wallet.sort_key = 7
        wallet.connected_account_ids.append(uuid4())
        await account_flow.update_account(wallet)

        stored = await storage.get_account(wallet.id)
        assert stored.sort_key == 7
        assert stored.connected_account_ids == []
        assert wallet.connected_account_ids == []

    @pytest.mark.asyncio
    async def test_deletable_sees_new_ledger_entries(self, account_flow, ledger):
        alice = uuid4()
        food = await account_flow.create_account(alice, "Food", AccountKind.EXPENSE)
        assert (await account_flow.deletable(food))[0] is True
        assert (await account_flow.deletion_report(alice))[0][1] is True

        ledger.post(food.id, date(2024, 5, 1), Decimal("12"))

        assert (await account_flow.deletable(food))[0] is False
        assert (await account_flow.deletion_report(alice))[0][1] is False

    @pytest.mark.asyncio
    async def test_destroy_used_account_blocked(self, account_flow, ledger, audit_storage):
        alice = uuid4()
        food = await account_flow.create_account(alice, "Food", AccountKind.EXPENSE)
        ledger.post(food.id, date(2024, 5, 1), Decimal("12"))

        with pytest.raises(UsedAccountError):
            await account_flow.destroy_account(food)

        assert await account_flow.get_account(alice, food.id) is not None
        assert AuditEventType.ACCOUNT_DELETE_BLOCKED in await _event_types(audit_storage)

    @pytest.mark.asyncio
    async def test_destroy_checks_ledger_after_stale_report(self, account_flow, ledger):
        alice = uuid4()
        food = await account_flow.create_account(alice, "Food", AccountKind.EXPENSE)
        ok, _ = await account_flow.deletable(food)
        assert ok is True

        ledger.post(food.id, date(2024, 5, 1), Decimal("12"))

        with pytest.raises(UsedAccountError):
            await account_flow.destroy_account(food)

    @pytest.mark.asyncio
    async def test_destroy_unused_account(self, account_flow, connection_flow, storage, users, audit_storage):
        alice_cash = await account_flow.create_account(users["alice"], "Cash", AccountKind.CASH)
        bob_cash = await account_flow.create_account(users["bob"], "Cash", AccountKind.CASH)
        await connection_flow.connect(alice_cash, "bob", "Cash")

        assert await account_flow.destroy_account(bob_cash) is True

        assert await storage.get_account(bob_cash.id) is None
        assert (await storage.get_account(alice_cash.id)).connected_account_ids == []
        assert await connection_flow.connected_or_associated_count(alice_cash) == 0
        assert AuditEventType.ACCOUNT_DELETED in await _event_types(audit_storage)

    @pytest.mark.asyncio
    async def test_deletion_report(self, account_flow, ledger):
        alice = uuid4()
        food = await account_flow.create_account(alice, "Food", AccountKind.EXPENSE)
        await account_flow.create_account(alice, "Rent", AccountKind.EXPENSE)
        ledger.post(food.id, date(2024, 5, 1), Decimal("12"))

        report = {a.name: (ok, messages) for a, ok, messages in await account_flow.deletion_report(alice)}

        assert report["Food"][0] is False
        assert "Food" in report["Food"][1][0]
        assert report["Rent"] == (True, [])

    @pytest.mark.asyncio
    async def test_balance_before(self, account_flow, ledger):
        wallet = await account_flow.create_account(uuid4(), "Wallet", AccountKind.CASH)
        ledger.post(wallet.id, date(2024, 5, 1), Decimal("20"))

        assert await account_flow.balance_before(wallet, date(2024, 5, 2)) == Decimal("20")


class TestConnectionFlow:
    """Audited connect and clear."""

    @pytest.mark.asyncio
    async def test_connect_and_clear_audited(self, connection_flow, make_account, users, audit_storage):
        alice_cash = await make_account(users["alice"], "Cash")
        bob_cash = await make_account(users["bob"], "Cash")

        added = await connection_flow.connect(alice_cash, "bob", "Cash")
        assert len(added) == 2
        assert await connection_flow.clear_connection(alice_cash, bob_cash) is True

        types = await _event_types(audit_storage)
        assert AuditEventType.CONNECTION_CREATED in types
        assert AuditEventType.CONNECTION_CLEARED in types

    @pytest.mark.asyncio
    async def test_rejection_audited(self, connection_flow, make_account, users, audit_storage):
        alice_cash = await make_account(users["alice"], "Cash")

        with pytest.raises(FriendNotFoundError):
            await connection_flow.connect(alice_cash, "carol", "Cash")

        rejected = [
            e for e in await audit_storage.get_recent_events()
            if e.event_type == AuditEventType.CONNECTION_REJECTED
        ]
        assert len(rejected) == 1
        assert rejected[0].entity_id == alice_cash.id


class TestCreateAppComponents:

    @pytest.mark.asyncio
    async def test_defaults_wire_in_memory_backends(self):
        account_flow, connection_flow = create_app_components()

        assert isinstance(account_flow, AccountFlow)
        assert isinstance(connection_flow, ConnectionFlow)

        wallet = await account_flow.create_account(uuid4(), "Wallet", AccountKind.CASH)
        assert await connection_flow.connected_or_associated_count(wallet) == 0

    @pytest.mark.asyncio
    async def test_shared_storage(self, storage, ledger, friends, users, audit_storage):
        account_flow, connection_flow = create_app_components(
            storage=storage, ledger=ledger, friends=friends, audit_storage=audit_storage
        )
        alice_cash = await account_flow.create_account(users["alice"], "Cash", AccountKind.CASH)
        await account_flow.create_account(users["bob"], "Cash", AccountKind.CASH)

        await connection_flow.connect(alice_cash, "bob", "Cash")

        assert await connection_flow.connected_or_associated_count(alice_cash) == 1
