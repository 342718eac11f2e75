"""Aggregates over filtered transaction sets."""

from typing import Any, Sequence

from findash.domain.entities import BASClass, DebitCredit, Transaction, TransactionSummary
from findash.utils.amount_parser import round_half_up


def summarize(transactions: Sequence[Transaction]) -> TransactionSummary:
    """Compute debit, credit and net totals over a transaction set.

    Args:
        transactions: The full filtered set (not a single page)

    Returns:
        TransactionSummary where ``net_amount == debit_total - credit_total``
        and ``average_amount`` is the mean magnitude rounded half-up to öre
    """
    debit_total = 0
    credit_total = 0
    for txn in transactions:
        if txn.debit_credit == DebitCredit.DEBIT:
            debit_total += txn.amount
        else:
            credit_total += txn.amount

    count = len(transactions)
    average = round_half_up(debit_total + credit_total, count) if count else 0

    return TransactionSummary(
        debit_total=debit_total,
        credit_total=credit_total,
        net_amount=debit_total - credit_total,
        transaction_count=count,
        average_amount=average,
    )


def summarize_by_bas_class(transactions: Sequence[Transaction]) -> list[dict[str, Any]]:
    """Group a transaction set by BAS class.

    Returns:
        One dict per class present, ordered by class number, with the keys
        ``bas_class``, ``summary`` and ``vat_total``
    """
    grouped: dict[BASClass, list[Transaction]] = {}
    for txn in transactions:
        grouped.setdefault(txn.bas_class, []).append(txn)

    results = []
    for bas_class in sorted(grouped):
        group = grouped[bas_class]
        results.append(
            {
                "bas_class": bas_class,
                "summary": summarize(group),
                "vat_total": sum(txn.vat_amount or 0 for txn in group),
            }
        )
    return results
