"""Synthetic transaction generator."""

import logging
import math
import uuid
from datetime import datetime, date, time, timedelta, timezone
from typing import Sequence

from findash.domain.bas import (
    COMPANY_NAMES,
    REFERENCE_PREFIXES,
    TAXABLE_VAT_RATES,
    get_descriptions,
    normal_balance,
)
from findash.domain.entities import (
    Account,
    BASClass,
    DebitCredit,
    GenerationConfig,
    Transaction,
)
from findash.domain.errors import (
    InvariantViolation,
    ValidationError,
    no_accounts_for_transactions,
)
from findash.domain.random_source import SeededRandom
from findash.utils.amount_parser import round_half_up

logger = logging.getLogger(__name__)

TRANSACTION_NAMESPACE = uuid.UUID("0b8f6e3d-2c4a-5d1e-8f7a-3b9c2d1e0f4a")
CURRENCY = "SEK"
MAX_DESCRIPTION_LENGTH = 200
MS_PER_DAY = 86_400_000

# (base, width) in öre; amount = base + r * width
AMOUNT_BANDS: dict[BASClass, tuple[int, int]] = {
    BASClass.ASSETS: (50_000, 500_000),
    BASClass.LIABILITIES: (10_000, 200_000),
    BASClass.EQUITY: (100_000, 1_000_000),
    BASClass.REVENUE: (5_000, 100_000),
    BASClass.COST_OF_SALES: (3_000, 50_000),
    BASClass.OPERATING_EXPENSES: (1_000, 25_000),
    BASClass.FINANCIAL_ITEMS: (500, 10_000),
    BASClass.EXTRAORDINARY_ITEMS: (10_000, 500_000),
}

VAT_PROBABILITY: dict[BASClass, float] = {
    BASClass.REVENUE: 0.8,
    BASClass.OPERATING_EXPENSES: 0.8,
    BASClass.COST_OF_SALES: 0.6,
}


def validate_generation_config(config: GenerationConfig) -> None:
    """Check a generation config before any random draw is made.

    Raises:
        ValidationError: If the size is negative or the range is inverted
    """
    errors = {}
    if config.dataset_size < 0:
        errors["dataset_size"] = "must not be negative"
    if config.date_range_start > config.date_range_end:
        errors["date_range_start"] = "cannot be after date_range_end"
    if errors:
        raise ValidationError(errors)


class TransactionGenerator:
    """Generates a reproducible list of transactions for a config.

    Every value is drawn from a SeededRandom seeded with ``config.seed``;
    the order of draws per transaction is fixed, so equal configs give
    equal output.
    """

    def __init__(self, config: GenerationConfig):
        """Initialize transaction generator.

        Args:
            config: Generation configuration
        """
        validate_generation_config(config)
        self.config = config
        self.random = SeededRandom(config.seed)

    def generate_transactions(self, accounts: Sequence[Account]) -> list[Transaction]:
        """Generate ``config.dataset_size`` transactions, newest first.

        Args:
            accounts: Accounts to attach transactions to

        Returns:
            Transactions sorted by date descending; equal dates keep
            generation order

        Raises:
            InvariantViolation: If transactions are requested without accounts
        """
        if self.config.dataset_size > 0 and not accounts:
            raise InvariantViolation(no_accounts_for_transactions(self.config.dataset_size))

        transactions = [
            self._generate_transaction(index, self.random.choice(accounts))
            for index in range(self.config.dataset_size)
        ]
        transactions.sort(key=lambda txn: txn.date, reverse=True)

        logger.debug(
            "Generated %d transactions over %d accounts (seed=%d)",
            len(transactions),
            len(accounts),
            self.config.seed,
        )
        return transactions

    def _generate_transaction(self, index: int, account: Account) -> Transaction:
        txn_date = self._random_date()
        amount = self._random_amount(account.bas_class)
        description = self._random_description(account.bas_class)
        debit_credit = self._debit_credit(account.bas_class)

        vat_rate = None
        vat_amount = None
        if self.config.include_vat and self._should_include_vat(account.bas_class):
            vat_rate = self.random.choice(TAXABLE_VAT_RATES)
            vat_amount = round_half_up(amount * vat_rate, 100)

        reference = self._random_reference(txn_date.year)
        timestamp = datetime.combine(txn_date, time.min, tzinfo=timezone.utc)

        return Transaction(
            id=str(uuid.uuid5(TRANSACTION_NAMESPACE, f"{self.config.seed}:{index}")),
            date=txn_date,
            description=description,
            amount=amount,
            currency=CURRENCY,
            account_id=account.id,
            bas_class=account.bas_class,
            account_number=account.account_number,
            debit_credit=debit_credit,
            created_at=timestamp,
            updated_at=timestamp,
            account=account,
            vat_amount=vat_amount,
            vat_rate=vat_rate,
            reference=reference,
        )

    def _random_date(self) -> date:
        start = self.config.date_range_start
        days = (self.config.date_range_end - start).days + 1
        # Span runs from start 00:00 to end 23:59:59.999 so both ends are reachable
        span_ms = days * MS_PER_DAY - 1
        offset_ms = math.floor(self.random.next_float() * span_ms)
        return start + timedelta(days=offset_ms // MS_PER_DAY)

    def _random_amount(self, bas_class: BASClass) -> int:
        base, width = AMOUNT_BANDS[bas_class]
        return math.floor(base + self.random.next_float() * width + 0.5)

    def _random_description(self, bas_class: BASClass) -> str:
        phrase = self.random.choice(get_descriptions(bas_class))
        company = self.random.choice(COMPANY_NAMES)
        return f"{phrase} - {company}"[:MAX_DESCRIPTION_LENGTH]

    def _debit_credit(self, bas_class: BASClass) -> DebitCredit:
        side = normal_balance(bas_class)
        if side is not None:
            return side
        return DebitCredit.DEBIT if self.random.chance(0.5) else DebitCredit.CREDIT

    def _should_include_vat(self, bas_class: BASClass) -> bool:
        probability = VAT_PROBABILITY.get(bas_class)
        if probability is None:
            return False
        return self.random.chance(probability)

    def _random_reference(self, year: int) -> str:
        prefix = self.random.choice(REFERENCE_PREFIXES)
        number = 100_000 + self.random.next_below(900_000)
        return f"{prefix}-{year}-{number}"


def generate_transactions(accounts: Sequence[Account], config: GenerationConfig) -> list[Transaction]:
    """Generate transactions for a config with a freshly seeded generator."""
    return TransactionGenerator(config).generate_transactions(accounts)
