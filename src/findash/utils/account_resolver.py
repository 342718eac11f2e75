"""Utility for resolving account numbers to accounts."""

from typing import Sequence

from findash.domain.entities import Account
from findash.domain.errors import NotFoundError


def resolve_account(accounts: Sequence[Account], account: str) -> Account:
    """Resolve a BAS account number or account ID to an Account.

    Args:
        accounts: Accounts to search
        account: 4-digit account number (e.g. "1930") or account UUID

    Returns:
        The matching account

    Raises:
        NotFoundError: If no account matches
    """
    token = account.strip()
    # IDs are stored lower-case; account numbers are digits only
    for acc in accounts:
        if acc.id == token.lower() or acc.account_number == token:
            return acc
    raise NotFoundError(f"Account '{token}' not found")
