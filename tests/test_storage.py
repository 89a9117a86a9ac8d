"""Tests for the in-memory storage backends."""

from uuid import uuid4

import pytest

from household_books.models import Account, AccountKind
from household_books.services import DuplicateError, NotFoundError


def _account(user_id, name, kind=AccountKind.CASH, sort_key=0):
    return Account(user_id=user_id, name=name, kind=kind, sort_key=sort_key)


class TestAccountStorage:

    @pytest.mark.asyncio
    async def test_reads_are_copies(self, storage):
        wallet = _account(uuid4(), "Wallet")
        await storage.create_account(wallet)

        loaded = await storage.get_account(wallet.id)
        loaded.name = "Changed"

        assert (await storage.get_account(wallet.id)).name == "Wallet"

    @pytest.mark.asyncio
    async def test_create_twice_fails(self, storage):
        wallet = _account(uuid4(), "Wallet")
        await storage.create_account(wallet)
        with pytest.raises(DuplicateError):
            await storage.create_account(wallet)

    @pytest.mark.asyncio
    async def test_get_account_for_user_scopes_owner(self, storage):
        owner = uuid4()
        wallet = _account(owner, "Wallet")
        await storage.create_account(wallet)

        assert await storage.get_account_for_user(owner, wallet.id) is not None
        assert await storage.get_account_for_user(uuid4(), wallet.id) is None

    @pytest.mark.asyncio
    async def test_list_ordering(self, storage):
        owner = uuid4()
        await storage.create_account(_account(owner, "Salary", AccountKind.INCOME, 1))
        await storage.create_account(_account(owner, "Rent", AccountKind.EXPENSE, 2))
        await storage.create_account(_account(owner, "Food", AccountKind.EXPENSE, 1))
        await storage.create_account(_account(owner, "Bank", AccountKind.BANKING_FACILITY, 1))
        await storage.create_account(_account(owner, "Wallet", AccountKind.CASH, 9))
        await storage.create_account(_account(uuid4(), "Other", AccountKind.CASH))

        names = [a.name for a in await storage.list_accounts(owner)]

        assert names == ["Wallet", "Bank", "Food", "Rent", "Salary"]

    @pytest.mark.asyncio
    async def test_save_accounts_is_all_or_nothing(self, storage):
        wallet = _account(uuid4(), "Wallet")
        await storage.create_account(wallet)
        ghost = _account(uuid4(), "Ghost")

        wallet.name = "Purse"
        with pytest.raises(NotFoundError):
            await storage.save_accounts([wallet, ghost])

        assert (await storage.get_account(wallet.id)).name == "Wallet"

    @pytest.mark.asyncio
    async def test_lock_accounts_yields_copies_in_request_order(self, storage):
        a = _account(uuid4(), "A")
        b = _account(uuid4(), "B")
        await storage.create_account(a)
        await storage.create_account(b)

        async with storage.lock_accounts([b.id, a.id]) as (first, second):
            first.name = "Changed"
            assert first.id == b.id
            assert second.id == a.id

        assert (await storage.get_account(b.id)).name == "B"

    @pytest.mark.asyncio
    async def test_lock_missing_account(self, storage):
        with pytest.raises(NotFoundError):
            async with storage.lock_accounts([uuid4()]):
                pass

    @pytest.mark.asyncio
    async def test_destroy_drops_edges_and_partner(self, storage):
        owner = uuid4()
        bank = _account(owner, "Bank", AccountKind.BANKING_FACILITY)
        card = _account(owner, "Card", AccountKind.CREDIT_CARD)
        card.partner_account_id = bank.id
        card.add_connection(bank.id)
        await storage.create_account(bank)
        await storage.create_account(card)

        assert await storage.destroy_account(bank.id) is True
        assert await storage.destroy_account(bank.id) is False

        stored = await storage.get_account(card.id)
        assert stored.partner_account_id is None
        assert stored.connected_account_ids == []

    @pytest.mark.asyncio
    async def test_linking_to(self, storage):
        a = _account(uuid4(), "A")
        b = _account(uuid4(), "B")
        a.add_connection(b.id)
        await storage.create_account(a)
        await storage.create_account(b)

        assert [x.id for x in await storage.list_accounts_linking_to(b.id)] == [a.id]
        assert await storage.list_accounts_linking_to(a.id) == []


class TestAuditStorage:

    @pytest.mark.asyncio
    async def test_recent_events_newest_first(self, audit_logger, audit_storage):
        first, second = uuid4(), uuid4()
        await audit_logger.log_account_deleted(account_id=first, name="A")
        await audit_logger.log_account_deleted(account_id=second, name="B")

        recent = await audit_storage.get_recent_events(limit=1)
        assert [e.entity_id for e in recent] == [second]

        by_entity = await audit_storage.get_events_by_entity("account", first)
        assert len(by_entity) == 1
