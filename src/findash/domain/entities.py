"""Domain model entities for findash.

These are pure data classes describing the simulated bookkeeping backend:
BAS accounts, Swedish transactions and the result shapes returned by the
query engine. Amounts are always integer öre.
"""

from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, date
from enum import Enum, IntEnum
from typing import Optional, Any


class BASClass(IntEnum):
    """Swedish BAS account classes."""

    ASSETS = 1
    LIABILITIES = 2
    EQUITY = 3
    REVENUE = 4
    COST_OF_SALES = 5
    OPERATING_EXPENSES = 6
    FINANCIAL_ITEMS = 7
    EXTRAORDINARY_ITEMS = 8


class DebitCredit(str, Enum):
    """Side of a double-entry posting."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


@dataclass(frozen=True)
class Account:
    """BAS chart-of-accounts entry."""

    id: str
    account_number: str
    name: str
    name_english: str
    bas_class: BASClass
    bas_description: str
    is_active: bool
    created_at: datetime
    parent_account_id: Optional[str] = None


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is an unsigned magnitude; the posting side lives in
    ``debit_credit``.
    """

    id: str
    date: date
    description: str
    amount: int
    currency: str
    account_id: str
    bas_class: BASClass
    account_number: str
    debit_credit: DebitCredit
    created_at: datetime
    updated_at: datetime
    account: Optional[Account] = None
    vat_amount: Optional[int] = None
    vat_rate: Optional[int] = None
    reference: Optional[str] = None


@dataclass(frozen=True)
class GenerationConfig:
    """Inputs that fully determine a generated dataset."""

    dataset_size: int
    date_range_start: date
    date_range_end: date
    include_vat: bool = True
    seed: int = 42

    def replace(self, **changes: Any) -> "GenerationConfig":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        """Return a plain dict with ISO formatted dates."""
        data = asdict(self)
        data["date_range_start"] = self.date_range_start.isoformat()
        data["date_range_end"] = self.date_range_end.isoformat()
        return data


@dataclass(frozen=True)
class AccountTree:
    """Account with its children in the hierarchy."""

    account: Account
    children: tuple["AccountTree", ...] = ()
    level: int = 0


@dataclass(frozen=True)
class PageInfo:
    """Pagination metadata for a result page."""

    page: int
    size: int
    total_count: int
    total_pages: int
    has_next: bool
    has_previous: bool


@dataclass(frozen=True)
class TransactionSummary:
    """Aggregates over a filtered transaction set."""

    debit_total: int
    credit_total: int
    net_amount: int
    transaction_count: int
    average_amount: int


@dataclass(frozen=True)
class TransactionPage:
    """One page of filtered transactions plus whole-set aggregates."""

    items: tuple[Transaction, ...]
    page_info: PageInfo
    summary: TransactionSummary
    applied_filters: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AccountList:
    """Filtered accounts."""

    items: tuple[Account, ...]
    total_count: int


@dataclass(frozen=True)
class DatasetStats:
    """Size and distribution of the cached dataset."""

    total_transactions: int
    total_accounts: int
    date_range_start: date
    date_range_end: date
    bas_class_distribution: dict[BASClass, int]


@dataclass(frozen=True)
class ConfigEcho:
    """Generation config as applied, with the time it was generated."""

    config: GenerationConfig
    last_generated: datetime


@dataclass(frozen=True)
class AccountStats:
    """Counts over the generated chart of accounts."""

    total_accounts: int
    active_accounts: int
    accounts_by_bas_class: dict[BASClass, int]
    accounts_by_first_digit: dict[str, int]
