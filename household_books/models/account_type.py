"""
Account Type Registry

Account types form a closed, two-level set:

    (root) -> ASSET, EXPENSE, INCOME
    ASSET  -> CASH, BANKING_FACILITY, CREDIT_CARD, CREDIT, CAPITAL_FUND

Each type is an `AccountKind` paired with an immutable `AccountTypeInfo`
record. Types are registered explicitly, once, when this module is imported;
there is no discovery. Looking up a key that was never registered raises
`UnknownTypeError`, which signals a programming error and is never shown to
users.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UnknownTypeError(LookupError):
    """A type key has no registered account type."""

    def __init__(self, key):
        self.key = key
        super().__init__(f"Unknown account type: {key!r}")


class AccountKind(str, Enum):
    """
    Identity of every account type.

    The value doubles as the canonical symbol of the type.
    """
    # Families directly under the root
    ASSET = "asset"
    EXPENSE = "expense"
    INCOME = "income"

    # Asset categories
    CASH = "cash"
    BANKING_FACILITY = "banking_facility"
    CREDIT_CARD = "credit_card"
    CREDIT = "credit"
    CAPITAL_FUND = "capital_fund"


class AccountTypeInfo(BaseModel):
    """
    Static metadata for one account type.

    Frozen: set once at registration, read-only afterwards. Attributes that
    were never given keep their unset value (None, 0 or empty) instead of
    failing on access.
    """
    model_config = ConfigDict(frozen=True)

    kind: AccountKind
    parent: Optional[AccountKind] = Field(
        default=None,
        description="Family this type belongs to; None for top-level types"
    )
    type_name: Optional[str] = None
    short_name: Optional[str] = None
    type_order: int = 0
    connectable_types: frozenset[AccountKind] = Field(
        default_factory=frozenset,
        description="Kinds (or families) allowed to connect to accounts of this type"
    )
    asset_name: Optional[str] = Field(
        default=None,
        description="Category label, asset family only"
    )

    @property
    def symbol(self) -> str:
        return self.kind.value

    @property
    def is_asset(self) -> bool:
        return self.kind == AccountKind.ASSET or self.parent == AccountKind.ASSET


class AccountTypeRegistry:
    """
    Ordered list of the types registered under one parent.

    `register` is idempotent and `sort_types` is a stable sort by
    `type_order`, so ties keep registration order and repeated sorts never
    change the result.
    """

    def __init__(self, name: str, parent: Optional[AccountKind] = None):
        self.name = name
        self.parent = parent
        self._types: list[AccountTypeInfo] = []
        self._by_kind: dict[AccountKind, AccountTypeInfo] = {}

    def register(self, info: AccountTypeInfo) -> AccountTypeInfo:
        """Add a type exactly once; later calls return the first registration."""
        if info.parent != self.parent:
            raise ValueError(
                f"{info.kind.value} belongs under {info.parent}, not the {self.name} registry"
            )
        existing = self._by_kind.get(info.kind)
        if existing is not None:
            return existing
        self._types.append(info)
        self._by_kind[info.kind] = info
        return info

    def types(self) -> tuple[AccountTypeInfo, ...]:
        return tuple(self._types)

    def kinds(self) -> tuple[AccountKind, ...]:
        return tuple(info.kind for info in self._types)

    def sort_types(self) -> None:
        self._types.sort(key=lambda info: info.type_order)

    def __contains__(self, kind) -> bool:
        return kind in self._by_kind

    def get(self, kind: AccountKind) -> Optional[AccountTypeInfo]:
        return self._by_kind.get(kind)

    def info(self, kind: AccountKind) -> AccountTypeInfo:
        info = self._by_kind.get(kind)
        if info is None:
            raise UnknownTypeError(kind)
        return info

    def symbol_for(self, kind: AccountKind) -> str:
        return self.info(kind).symbol

    def type_for_symbol(self, key: str) -> AccountTypeInfo:
        for info in self._types:
            if info.symbol == key:
                return info
        raise UnknownTypeError(key)


# =============================================================================
# REGISTRATION
# =============================================================================

ACCOUNT_TYPES = AccountTypeRegistry("account")
ASSET_TYPES = AccountTypeRegistry("asset", parent=AccountKind.ASSET)

ASSET = ACCOUNT_TYPES.register(AccountTypeInfo(
    kind=AccountKind.ASSET,
    type_name="Asset account",
    short_name="Asset",
    type_order=1,
    connectable_types=frozenset({AccountKind.ASSET}),
))
EXPENSE = ACCOUNT_TYPES.register(AccountTypeInfo(
    kind=AccountKind.EXPENSE,
    type_name="Expense item",
    short_name="Expense",
    type_order=2,
    connectable_types=frozenset({AccountKind.INCOME}),
))
INCOME = ACCOUNT_TYPES.register(AccountTypeInfo(
    kind=AccountKind.INCOME,
    type_name="Income source",
    short_name="Income",
    type_order=3,
    connectable_types=frozenset({AccountKind.EXPENSE}),
))


def _register_asset(kind: AccountKind, asset_name: str, type_order: int) -> AccountTypeInfo:
    return ASSET_TYPES.register(AccountTypeInfo(
        kind=kind,
        parent=AccountKind.ASSET,
        type_name=ASSET.type_name,
        short_name=ASSET.short_name,
        type_order=type_order,
        connectable_types=ASSET.connectable_types,
        asset_name=asset_name,
    ))


CASH = _register_asset(AccountKind.CASH, "Cash", 1)
BANKING_FACILITY = _register_asset(AccountKind.BANKING_FACILITY, "Bank", 2)
CREDIT_CARD = _register_asset(AccountKind.CREDIT_CARD, "Credit card", 3)
CREDIT = _register_asset(AccountKind.CREDIT, "Receivable", 4)
CAPITAL_FUND = _register_asset(AccountKind.CAPITAL_FUND, "Capital", 5)

ACCOUNT_TYPES.sort_types()
ASSET_TYPES.sort_types()

_REGISTRIES = (ACCOUNT_TYPES, ASSET_TYPES)


# =============================================================================
# LOOKUPS ACROSS BOTH LEVELS
# =============================================================================

def type_info(kind: AccountKind) -> AccountTypeInfo:
    """Metadata for any registered kind, top-level or asset category."""
    for registry in _REGISTRIES:
        info = registry.get(kind)
        if info is not None:
            return info
    raise UnknownTypeError(kind)


def symbol_for(kind: AccountKind) -> str:
    return type_info(kind).symbol


def type_for_symbol(key: str) -> AccountTypeInfo:
    for registry in _REGISTRIES:
        for info in registry.types():
            if info.symbol == key:
                return info
    raise UnknownTypeError(key)


def family_of(kind: AccountKind) -> AccountKind:
    """The top-level type a kind belongs to (itself for top-level kinds)."""
    info = type_info(kind)
    return info.parent or info.kind


def is_concrete(kind: AccountKind) -> bool:
    """Whether accounts can be created with this kind."""
    return kind in leaf_kinds()


def is_connectable(source: AccountKind, target: AccountKind) -> bool:
    """
    Whether an account of kind `source` may connect to one of kind `target`.

    Type-level check: `source` (or its family) must appear in the target
    type's connectable set.
    """
    accepted = type_info(target).connectable_types
    return source in accepted or family_of(source) in accepted


def leaf_kinds() -> tuple[AccountKind, ...]:
    """Every instantiable kind in display order."""
    kinds = []
    for info in ACCOUNT_TYPES.types():
        if info.kind == AccountKind.ASSET:
            kinds.extend(ASSET_TYPES.kinds())
        else:
            kinds.append(info.kind)
    return tuple(kinds)
