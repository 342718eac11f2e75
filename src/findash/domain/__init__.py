"""Domain layer for findash."""

from findash.domain.account import (
    AccountGenerator,
    AccountQuery,
    account_stats,
    build_account_hierarchy,
    filter_accounts,
)
from findash.domain.query import PageSettings, Pagination, QueryEngine, TransactionQuery
from findash.domain.random_source import SeededRandom
from findash.domain.transaction import TransactionGenerator

__all__ = [
    "AccountGenerator",
    "AccountQuery",
    "account_stats",
    "build_account_hierarchy",
    "filter_accounts",
    "PageSettings",
    "Pagination",
    "QueryEngine",
    "TransactionQuery",
    "SeededRandom",
    "TransactionGenerator",
]
