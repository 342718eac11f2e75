"""Account generation, filtering and hierarchy."""

import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Sequence

from findash.domain.bas import BASE_ACCOUNTS, ReferenceAccount, get_class_info, is_valid_account_number
from findash.domain.entities import Account, AccountStats, AccountTree, BASClass
from findash.domain.errors import InvariantViolation, account_outside_class
from findash.domain.validation import RequestValidator

ACCOUNT_NAMESPACE = uuid.UUID("6f1d3c2a-8b4e-5a7f-9c0d-1e2f3a4b5c6d")
ACCOUNTS_CREATED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)


def account_id_for(account_number: str) -> str:
    """Return the stable identifier of a BAS account number."""
    return str(uuid.uuid5(ACCOUNT_NAMESPACE, account_number))


class AccountGenerator:
    """Builds the fixed chart of accounts from the reference table."""

    def __init__(self, reference_accounts: Sequence[ReferenceAccount] = BASE_ACCOUNTS):
        """Initialize account generator.

        Args:
            reference_accounts: Seed entries, one generated account each
        """
        self.reference_accounts = tuple(reference_accounts)

    def generate_accounts(self) -> list[Account]:
        """Generate one Account per reference entry, in table order.

        No randomness is consumed: identifiers are derived from the account
        number, so the result is the same on every call.

        Raises:
            InvariantViolation: If a reference number lies outside its class range
        """
        ids_by_number = {
            ref.account_number: account_id_for(ref.account_number)
            for ref in self.reference_accounts
        }
        accounts = []
        for ref in self.reference_accounts:
            info = get_class_info(ref.bas_class)
            if not is_valid_account_number(ref.account_number, info.bas_class):
                raise InvariantViolation(account_outside_class(ref.account_number, int(info.bas_class)))
            accounts.append(
                Account(
                    id=ids_by_number[ref.account_number],
                    account_number=ref.account_number,
                    name=ref.name,
                    name_english=ref.name_english,
                    bas_class=info.bas_class,
                    bas_description=info.swedish_name,
                    is_active=True,
                    created_at=ACCOUNTS_CREATED_AT,
                    parent_account_id=ids_by_number.get(ref.parent_number) if ref.parent_number else None,
                )
            )
        return accounts


@dataclass(frozen=True)
class AccountQuery:
    """Validated account filter; every field is optional."""

    bas_class: Optional[BASClass] = None
    active: Optional[bool] = None
    search: Optional[str] = None

    FIELDS = ("bas_class", "active", "search")

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]] = None) -> "AccountQuery":
        """Build a query from raw request values.

        Raises:
            ValidationError: Listing every invalid or unknown field
        """
        validator = RequestValidator(params, cls.FIELDS)
        bas_class = validator.integer("bas_class", 1, 8, message="must be an integer between 1 and 8")
        active = validator.boolean("active")
        search = validator.text("search")
        validator.raise_if_errors()
        return cls(
            bas_class=BASClass(bas_class) if bas_class is not None else None,
            active=active,
            search=search or None,
        )


def _account_matches_search(account: Account, search: str) -> bool:
    needle = search.lower()
    return (
        needle in account.name.lower()
        or needle in account.name_english.lower()
        or needle in account.bas_description.lower()
        or search in account.account_number
    )


def filter_accounts(
    accounts: Sequence[Account],
    query: AccountQuery,
    include_inactive: bool = False,
) -> list[Account]:
    """Filter accounts and sort them by account number.

    Args:
        accounts: Accounts to filter
        query: Validated account query
        include_inactive: Keep inactive accounts when the query does not
            filter on the active flag

    Returns:
        Matching accounts ordered by account number
    """
    result = [
        account
        for account in accounts
        if (query.bas_class is None or account.bas_class == query.bas_class)
        and (
            account.is_active == query.active
            if query.active is not None
            else include_inactive or account.is_active
        )
        and (query.search is None or _account_matches_search(account, query.search))
    ]
    return sorted(result, key=lambda account: account.account_number)


def account_stats(accounts: Sequence[Account]) -> AccountStats:
    """Count accounts overall, active, per BAS class and per first digit."""
    by_class: dict[BASClass, int] = {}
    by_digit: dict[str, int] = {}
    for account in accounts:
        by_class[account.bas_class] = by_class.get(account.bas_class, 0) + 1
        by_digit[account.account_number[:1]] = by_digit.get(account.account_number[:1], 0) + 1
    return AccountStats(
        total_accounts=len(accounts),
        active_accounts=sum(1 for account in accounts if account.is_active),
        accounts_by_bas_class=dict(sorted(by_class.items())),
        accounts_by_first_digit=dict(sorted(by_digit.items())),
    )


def find_account(accounts: Sequence[Account], account_id: str) -> Optional[Account]:
    """Return the account with the given identifier, or None."""
    for account in accounts:
        if account.id == account_id:
            return account
    return None


def _resolve_parents(accounts: Sequence[Account]) -> dict[str, Optional[str]]:
    """Map account id to parent id, dropping unknown or cyclic parents."""
    known = {account.id for account in accounts}
    raw = {
        account.id: account.parent_account_id if account.parent_account_id in known else None
        for account in accounts
    }

    resolved: dict[str, Optional[str]] = {}
    for account_id, parent_id in raw.items():
        seen = {account_id}
        current = parent_id
        while current is not None and current not in seen:
            seen.add(current)
            current = raw[current]
        # Members of a cycle lose their parent and become roots
        resolved[account_id] = None if current == account_id else parent_id
    return resolved


def build_account_hierarchy(accounts: Sequence[Account]) -> list[AccountTree]:
    """Group accounts into parent/child trees.

    Accounts without a resolvable parent, or whose parent chain loops back,
    become roots. Roots and children are ordered by account number.

    Returns:
        Root trees with nested children and depth levels
    """
    parents = _resolve_parents(accounts)
    children_map: dict[Optional[str], list[Account]] = {}
    for account in sorted(accounts, key=lambda a: a.account_number):
        children_map.setdefault(parents[account.id], []).append(account)

    def build_tree(parent_id: Optional[str], level: int) -> list[AccountTree]:
        return [
            AccountTree(
                account=account,
                children=tuple(build_tree(account.id, level + 1)),
                level=level,
            )
            for account in children_map.get(parent_id, [])
        ]

    return build_tree(None, 0)


def flatten_hierarchy(trees: Sequence[AccountTree]) -> list[AccountTree]:
    """Return tree nodes depth-first, parents before children."""
    nodes = []
    for tree in trees:
        nodes.append(tree)
        nodes.extend(flatten_hierarchy(tree.children))
    return nodes


def generate_accounts(reference_accounts: Sequence[ReferenceAccount] = BASE_ACCOUNTS) -> list[Account]:
    """Generate the chart of accounts from the reference table."""
    return AccountGenerator(reference_accounts).generate_accounts()
