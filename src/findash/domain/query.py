"""In-memory transaction query engine: filter, paginate, summarize."""

import math
from dataclasses import dataclass
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from findash.domain.entities import (
    BASClass,
    DebitCredit,
    PageInfo,
    Transaction,
    TransactionPage,
    TransactionSummary,
)
from findash.domain.errors import ValidationError
from findash.domain.summary import summarize
from findash.domain.validation import RequestValidator

DEBIT_CREDIT_OPTIONS = {side.value: side for side in DebitCredit}


@dataclass(frozen=True)
class PageSettings:
    """Page size bounds applied to every request."""

    default_page_size: int = 50
    min_page_size: int = 10
    max_page_size: int = 100

    def clamp(self, size: int) -> int:
        """Clamp a requested page size into the configured bounds."""
        return max(self.min_page_size, min(size, self.max_page_size))


@dataclass(frozen=True)
class TransactionQuery:
    """Validated transaction filter; all predicates are optional and AND-ed."""

    date_from: Optional[date] = None
    date_to: Optional[date] = None
    bas_class: Optional[BASClass] = None
    account_id: Optional[str] = None
    search: Optional[str] = None
    debit_credit: Optional[DebitCredit] = None
    min_amount: Optional[int] = None
    max_amount: Optional[int] = None

    FIELDS = (
        "date_from",
        "date_to",
        "bas_class",
        "account_id",
        "search",
        "debit_credit",
        "min_amount",
        "max_amount",
    )

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]] = None) -> "TransactionQuery":
        """Build a query from raw request values.

        Raises:
            ValidationError: Listing every invalid or unknown field
        """
        validator = RequestValidator(params, cls.FIELDS)
        date_from = validator.iso_date("date_from")
        date_to = validator.iso_date("date_to")
        if date_from is not None and date_to is not None and date_from > date_to:
            validator.add_error("date_from", "cannot be after date_to")

        bas_class = validator.integer("bas_class", 1, 8, message="must be an integer between 1 and 8")
        account_id = validator.uuid("account_id")
        search = validator.text("search")
        debit_credit = validator.choice("debit_credit", DEBIT_CREDIT_OPTIONS)

        min_amount = validator.integer("min_amount", 0, message="must be a non-negative integer (öre)")
        max_amount = validator.integer("max_amount", 0, message="must be a non-negative integer (öre)")
        if min_amount is not None and max_amount is not None and min_amount > max_amount:
            validator.add_error("min_amount", "cannot be greater than max_amount")

        validator.raise_if_errors()
        return cls(
            date_from=date_from,
            date_to=date_to,
            bas_class=BASClass(bas_class) if bas_class is not None else None,
            account_id=account_id,
            search=search or None,
            debit_credit=debit_credit,
            min_amount=min_amount,
            max_amount=max_amount,
        )

    def matches(self, txn: Transaction) -> bool:
        """Return True if a transaction satisfies every set predicate."""
        # Dates carry no time of day, so an inclusive comparison covers the whole end day
        if self.date_from is not None and txn.date < self.date_from:
            return False
        if self.date_to is not None and txn.date > self.date_to:
            return False
        if self.bas_class is not None and txn.bas_class != self.bas_class:
            return False
        if self.account_id is not None and txn.account_id != self.account_id:
            return False
        if self.debit_credit is not None and txn.debit_credit != self.debit_credit:
            return False
        if self.min_amount is not None and txn.amount < self.min_amount:
            return False
        if self.max_amount is not None and txn.amount > self.max_amount:
            return False
        if self.search is not None and not _matches_search(txn, self.search):
            return False
        return True

    def applied_filters(self) -> dict[str, Any]:
        """Return the set filters as plain values."""
        filters: dict[str, Any] = {}
        for name in self.FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, DebitCredit):
                value = value.value
            elif isinstance(value, BASClass):
                value = int(value)
            filters[name] = value
        return filters


def _matches_search(txn: Transaction, search: str) -> bool:
    needle = search.lower()
    fields = [txn.description, txn.reference or ""]
    if txn.account is not None:
        fields.append(txn.account.name)
    return any(needle in field.lower() for field in fields)


@dataclass(frozen=True)
class Pagination:
    """Zero-based page request with a clamped page size."""

    page: int = 0
    size: int = 50

    FIELDS = ("page", "size")

    @classmethod
    def from_params(
        cls,
        params: Optional[Mapping[str, Any]] = None,
        settings: PageSettings = PageSettings(),
    ) -> "Pagination":
        """Build a pagination request from raw values.

        Raises:
            ValidationError: If page or size is not an integer, page is
                negative, or an unknown field is present
        """
        validator = RequestValidator(params, cls.FIELDS)
        page = validator.integer("page", 0, message="must be a non-negative integer")
        size = validator.integer("size")
        validator.raise_if_errors()
        return cls(
            page=page if page is not None else 0,
            size=settings.clamp(size if size is not None else settings.default_page_size),
        )


def parse_transaction_request(
    filters: Optional[Mapping[str, Any]],
    pagination: Optional[Mapping[str, Any]],
    settings: PageSettings = PageSettings(),
) -> tuple[TransactionQuery, Pagination]:
    """Validate filter and pagination values together.

    Errors from both mappings are reported in a single ValidationError.
    """
    errors: dict[str, str] = {}
    query = page = None
    try:
        query = TransactionQuery.from_params(filters)
    except ValidationError as e:
        errors.update(e.errors)
    try:
        page = Pagination.from_params(pagination, settings)
    except ValidationError as e:
        for name, message in e.errors.items():
            errors.setdefault(name, message)
    if errors:
        raise ValidationError(errors)
    return query, page


class QueryEngine:
    """Stateless reader over a cached transaction list.

    The engine never re-sorts: results keep the order of the input, which
    the generator produces newest first.
    """

    def __init__(self, settings: PageSettings = PageSettings()):
        """Initialize query engine.

        Args:
            settings: Page size bounds
        """
        self.settings = settings

    def filter(self, transactions: Sequence[Transaction], query: TransactionQuery) -> list[Transaction]:
        """Return the transactions matching every predicate, in input order."""
        return [txn for txn in transactions if query.matches(txn)]

    def paginate(self, transactions: Sequence[Transaction], pagination: Pagination) -> tuple[list[Transaction], PageInfo]:
        """Slice one page out of a filtered list.

        Returns:
            Tuple of (page items, PageInfo)
        """
        size = self.settings.clamp(pagination.size)
        total = len(transactions)
        total_pages = math.ceil(total / size)
        start = pagination.page * size
        items = list(transactions[start:min(start + size, total)])

        page_info = PageInfo(
            page=pagination.page,
            size=size,
            total_count=total,
            total_pages=total_pages,
            has_next=pagination.page < total_pages - 1,
            has_previous=pagination.page > 0,
        )
        return items, page_info

    def summarize(self, transactions: Sequence[Transaction]) -> TransactionSummary:
        """Aggregate a filtered set; pass the whole set, not a single page."""
        return summarize(transactions)

    def run(
        self,
        transactions: Sequence[Transaction],
        query: TransactionQuery,
        pagination: Pagination,
    ) -> TransactionPage:
        """Filter, paginate and summarize in one pass over the cache."""
        filtered = self.filter(transactions, query)
        items, page_info = self.paginate(filtered, pagination)
        return TransactionPage(
            items=tuple(items),
            page_info=page_info,
            summary=self.summarize(filtered),
            applied_filters=query.applied_filters(),
        )

    def find_by_id(self, transactions: Sequence[Transaction], transaction_id: str) -> Optional[Transaction]:
        """Return the transaction with the given identifier, or None."""
        for txn in transactions:
            if txn.id == transaction_id:
                return txn
        return None
