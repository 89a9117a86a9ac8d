"""
Account Model

An account is a named, typed record owned by one user. Accounts of
different users can be connected; each account keeps the set of accounts it
points to (its forward edges). Edges pointing back at an account live on the
other account's record.

Fields marked transient (balance, percentage, delete_errors) are filled in
during a single read and are never persisted.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from household_books.models.account_type import (
    AccountKind,
    AccountTypeInfo,
    family_of,
    is_concrete,
    type_info,
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Account(BaseModel):
    """
    A user's asset account, expense item or income source.

    Invariants checked by the validation layer, not here:
    - name is present and unique among the owner's accounts
    - the partner account belongs to the same owner
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    # Identity
    id: UUID = Field(
        default_factory=uuid4,
        description="Unique account ID"
    )
    user_id: UUID = Field(
        ...,
        description="Owning user"
    )

    name: str = Field(
        default="",
        description="Display name, unique per owner"
    )
    kind: AccountKind = Field(
        ...,
        description="Concrete account type"
    )
    sort_key: int = Field(
        default=0,
        description="Position within the owner's accounts of the same type"
    )
    partner_account_id: Optional[UUID] = Field(
        default=None,
        description="Settlement account of the same owner"
    )

    # Forward edges: accounts this one is connected to
    connected_account_ids: list[UUID] = Field(default_factory=list)

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    # Transient read-side values
    balance: Optional[Decimal] = Field(default=None, exclude=True)
    percentage: Optional[Decimal] = Field(default=None, exclude=True)
    delete_errors: list[str] = Field(default_factory=list, exclude=True)

    @field_validator('kind')
    @classmethod
    def require_concrete_kind(cls, v: AccountKind) -> AccountKind:
        """The asset family itself is abstract; pick a category."""
        if not is_concrete(v):
            raise ValueError(f"{v.value} is not a concrete account type")
        return v

    @field_validator('connected_account_ids')
    @classmethod
    def dedupe_connections(cls, v: list[UUID]) -> list[UUID]:
        return list(dict.fromkeys(v))

    # -------------------------------------------------------------------------
    # Type helpers
    # -------------------------------------------------------------------------

    @property
    def type_info(self) -> AccountTypeInfo:
        return type_info(self.kind)

    @property
    def is_asset(self) -> bool:
        return self.type_info.is_asset

    def type_in(self, kind: AccountKind) -> bool:
        """True if this account is of `kind` or belongs to the family `kind`."""
        return self.kind == kind or family_of(self.kind) == kind

    def asset_type_name(self) -> Optional[str]:
        """Asset category label, or None for expense and income accounts."""
        return self.type_info.asset_name if self.is_asset else None

    def name_with_asset_type(self) -> str:
        info = self.type_info
        label = info.asset_name if info.is_asset else info.short_name
        return f"{self.name}({label})"

    def name_with_user(self, login_id: str) -> str:
        return f"{login_id}'s {self.name_with_asset_type()}"

    # -------------------------------------------------------------------------
    # Forward edges
    # -------------------------------------------------------------------------

    def is_connected_to(self, account_id: UUID) -> bool:
        return account_id in self.connected_account_ids

    def add_connection(self, account_id: UUID) -> bool:
        """Add a forward edge. Returns False if it already existed."""
        if self.is_connected_to(account_id):
            return False
        self.connected_account_ids.append(account_id)
        return True

    def remove_connection(self, account_id: UUID) -> bool:
        """Remove a forward edge. Returns False if there was none."""
        if not self.is_connected_to(account_id):
            return False
        self.connected_account_ids.remove(account_id)
        return True

    def touch(self) -> None:
        self.updated_at = _utcnow()


class Connection(BaseModel):
    """A directed edge between two accounts. Its reverse is a separate edge."""
    model_config = ConfigDict(frozen=True)

    source_account_id: UUID
    target_account_id: UUID

    def reversed(self) -> "Connection":
        return Connection(
            source_account_id=self.target_account_id,
            target_account_id=self.source_account_id,
        )
