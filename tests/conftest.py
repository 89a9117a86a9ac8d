"""
Shared fixtures.

Every collaborator is the in-memory backend; no test touches a network or a
real database.
"""

from uuid import UUID, uuid4

import pytest
import pytest_asyncio
from tenacity import wait_none

from household_books.accounts import ConnectionManager
from household_books.audit import AuditLogger
from household_books.models import AccountKind
from household_books.orchestrator import AccountFlow, ConnectionFlow
from household_books.services import (
    InMemoryAccountStorage,
    InMemoryAuditStorage,
    InMemoryFriendDirectory,
    InMemoryLedger,
)


@pytest.fixture
def storage() -> InMemoryAccountStorage:
    return InMemoryAccountStorage()


@pytest.fixture
def ledger() -> InMemoryLedger:
    return InMemoryLedger()


@pytest.fixture
def audit_storage() -> InMemoryAuditStorage:
    return InMemoryAuditStorage()


@pytest.fixture
def audit_logger(audit_storage: InMemoryAuditStorage) -> AuditLogger:
    return AuditLogger(audit_storage)


@pytest.fixture
def friends() -> InMemoryFriendDirectory:
    return InMemoryFriendDirectory()


@pytest.fixture
def users(friends: InMemoryFriendDirectory) -> dict[str, UUID]:
    """alice and bob are friends; carol knows nobody."""
    ids = {"alice": uuid4(), "bob": uuid4(), "carol": uuid4()}
    for login_id, user_id in ids.items():
        friends.add_user(user_id, login_id)
    friends.add_friendship(ids["alice"], ids["bob"])
    return ids


@pytest.fixture
def manager(
    storage: InMemoryAccountStorage,
    friends: InMemoryFriendDirectory,
) -> ConnectionManager:
    return ConnectionManager(storage, friends, commit_attempts=3, commit_wait=wait_none())


@pytest.fixture
def account_flow(
    storage: InMemoryAccountStorage,
    ledger: InMemoryLedger,
    audit_logger: AuditLogger,
) -> AccountFlow:
    return AccountFlow(storage=storage, ledger=ledger, audit_logger=audit_logger)


@pytest.fixture
def connection_flow(
    storage: InMemoryAccountStorage,
    friends: InMemoryFriendDirectory,
    manager: ConnectionManager,
    audit_logger: AuditLogger,
) -> ConnectionFlow:
    return ConnectionFlow(
        storage=storage,
        friends=friends,
        manager=manager,
        audit_logger=audit_logger,
    )


@pytest.fixture
def make_account(account_flow: AccountFlow):
    """Create and persist an account through the validated path."""
    async def _make(user_id: UUID, name: str, kind: AccountKind = AccountKind.CASH, **kwargs):
        return await account_flow.create_account(user_id, name, kind, **kwargs)
    return _make


@pytest_asyncio.fixture
async def cash_pair(users: dict[str, UUID], make_account):
    """alice's and bob's "Cash" accounts, not yet connected."""
    alice_cash = await make_account(users["alice"], "Cash")
    bob_cash = await make_account(users["bob"], "Cash")
    return alice_cash, bob_cash
