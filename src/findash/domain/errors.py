"""Shared domain error messages and error types."""

from typing import Mapping, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid request shape, reported for every offending field at once."""

    def __init__(self, errors: Mapping[str, str], message: Optional[str] = None):
        self.errors = dict(errors)
        if message is None:
            message = "; ".join(f"{field}: {reason}" for field, reason in self.errors.items())
        super().__init__(message)


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class InvariantViolation(DomainError):
    """Generation cannot satisfy a construction invariant."""


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaktion med ID {transaction_id} kunde inte hittas"


def account_not_found(account_id: str) -> str:
    """Return message for missing account."""
    return f"Konto med ID {account_id} kunde inte hittas"


def unknown_bas_class(bas_class: object) -> str:
    """Return message for a BAS class outside 1-8."""
    return f"Unknown BAS class {bas_class!r}; expected an integer between 1 and 8"


def no_accounts_for_transactions(dataset_size: int) -> str:
    """Return message when transactions are requested without accounts."""
    return f"Cannot generate {dataset_size} transactions: no accounts available"


def account_outside_class(account_number: str, bas_class: object) -> str:
    """Return message for an account number outside its class range."""
    return f"Account {account_number} is outside the number range of BAS class {bas_class}"
