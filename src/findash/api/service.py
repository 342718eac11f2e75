"""Async facade over the generated dataset and the query engine.

The service owns one in-memory dataset snapshot. Every request first waits
for a simulated network delay, then may fail with a simulated server error,
and only then validates input and reads the snapshot. Nothing raises past
this layer: all outcomes are ApiResponse values.
"""

import asyncio
import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence

from findash.api.responses import ApiErrorKind, ApiResponse, utc_now
from findash.api.settings import ServiceSettings, default_generation_config
from findash.domain.account import (
    AccountGenerator,
    AccountQuery,
    account_stats,
    build_account_hierarchy,
    filter_accounts,
    find_account,
)
from findash.domain.bas import BASE_ACCOUNTS, ReferenceAccount
from findash.domain.entities import (
    Account,
    AccountList,
    AccountStats,
    AccountTree,
    ConfigEcho,
    DatasetStats,
    GenerationConfig,
    Transaction,
    TransactionPage,
)
from findash.domain.errors import (
    InvariantViolation,
    NotFoundError,
    ValidationError,
    account_not_found,
    transaction_not_found,
)
from findash.domain.query import QueryEngine, parse_transaction_request
from findash.domain.random_source import SeededRandom
from findash.domain.transaction import TransactionGenerator
from findash.domain.validation import RequestValidator, is_valid_uuid

logger = logging.getLogger(__name__)

MIN_DATASET_SIZE = 50
MAX_DATASET_SIZE = 10_000
CONFIG_FIELDS = ("dataset_size", "date_range_start", "date_range_end", "include_vat", "seed")


class ServiceState(str, Enum):
    """Lifecycle of the cached dataset."""

    READY = "READY"
    REGENERATING = "REGENERATING"


@dataclass(frozen=True)
class DatasetSnapshot:
    """Accounts and transactions generated from one config."""

    config: GenerationConfig
    accounts: tuple[Account, ...]
    transactions: tuple[Transaction, ...]
    generated_at: datetime


class LedgerService:
    """Simulated transaction/account backend.

    Construct one per consumer; instances share no state, so tests can run
    independent services with different seeds side by side.
    """

    def __init__(
        self,
        settings: Optional[ServiceSettings] = None,
        generation_config: Optional[GenerationConfig] = None,
        reference_accounts: Sequence[ReferenceAccount] = BASE_ACCOUNTS,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """Initialize the service and generate the first dataset.

        Args:
            settings: Simulation settings (defaults to ServiceSettings())
            generation_config: Dataset config (defaults to default_generation_config())
            reference_accounts: Seed entries for the chart of accounts
            sleep: Coroutine used for the simulated delay

        Raises:
            ValidationError: If the initial config is invalid
            InvariantViolation: If the initial config cannot be generated
        """
        self.settings = settings or ServiceSettings()
        self._sleep = sleep
        self._simulation = SeededRandom(self.settings.simulation_seed)
        self._engine = QueryEngine(self.settings.page_settings)
        self._account_generator = AccountGenerator(reference_accounts)
        self._lock = threading.Lock()
        self._state = ServiceState.READY
        self._snapshot = self._build_snapshot(generation_config or default_generation_config())

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def generation_config(self) -> GenerationConfig:
        return self._snapshot.config

    @property
    def accounts(self) -> tuple[Account, ...]:
        return self._snapshot.accounts

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        return self._snapshot.transactions

    def update_settings(self, **changes: Any) -> ServiceSettings:
        """Change simulation knobs without regenerating the dataset.

        Raises:
            ValidationError: If a field is unknown or a value is invalid; the
                current settings are kept
        """
        self.settings = self.settings.replace(**changes)
        self._engine = QueryEngine(self.settings.page_settings)
        if "simulation_seed" in changes:
            self._simulation = SeededRandom(self.settings.simulation_seed)
        return self.settings

    # Transaction operations

    async def get_transactions(
        self,
        filters: Optional[Mapping[str, Any]] = None,
        pagination: Optional[Mapping[str, Any]] = None,
    ) -> ApiResponse[TransactionPage]:
        """Return one page of filtered transactions with whole-set summary."""

        def work() -> TransactionPage:
            query, page = parse_transaction_request(filters, pagination, self.settings.page_settings)
            return self._engine.run(self._snapshot.transactions, query, page)

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av transaktioner")

    async def get_transaction_by_id(self, transaction_id: str) -> ApiResponse[Transaction]:
        """Return a single transaction, or NOT_FOUND."""

        def work() -> Transaction:
            _require_uuid("id", transaction_id)
            txn = self._engine.find_by_id(self._snapshot.transactions, transaction_id.lower())
            if txn is None:
                raise NotFoundError(transaction_not_found(transaction_id))
            return txn

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av transaktion")

    # Account operations

    async def get_accounts(self, filters: Optional[Mapping[str, Any]] = None) -> ApiResponse[AccountList]:
        """Return accounts matching the filter, ordered by account number."""

        def work() -> AccountList:
            query = AccountQuery.from_params(filters)
            accounts = filter_accounts(self._snapshot.accounts, query, self.settings.include_inactive)
            return AccountList(items=tuple(accounts), total_count=len(accounts))

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av konton")

    async def get_account_stats(self) -> ApiResponse[AccountStats]:
        """Return total, active, per-class and per-first-digit account counts."""

        def work() -> AccountStats:
            return account_stats(self._snapshot.accounts)

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av kontostatistik")

    async def get_account_by_id(self, account_id: str) -> ApiResponse[Account]:
        """Return a single account, or NOT_FOUND."""

        def work() -> Account:
            _require_uuid("id", account_id)
            account = find_account(self._snapshot.accounts, account_id.lower())
            if account is None:
                raise NotFoundError(account_not_found(account_id))
            return account

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av konto")

    async def get_account_hierarchy(self) -> ApiResponse[list[AccountTree]]:
        """Return active accounts grouped into parent/child trees."""

        def work() -> list[AccountTree]:
            active = [account for account in self._snapshot.accounts if account.is_active]
            return build_account_hierarchy(active)

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av kontohierarki")

    # Configuration operations

    async def get_generation_config(self) -> ApiResponse[ConfigEcho]:
        """Return the config behind the current dataset."""

        def work() -> ConfigEcho:
            snapshot = self._snapshot
            return ConfigEcho(config=snapshot.config, last_generated=snapshot.generated_at)

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av konfiguration")

    async def set_generation_config(self, request: Optional[Mapping[str, Any]] = None) -> ApiResponse[ConfigEcho]:
        """Merge a partial config into the current one and regenerate.

        Fields not present in the request keep their current values. The
        previous dataset stays in place if regeneration fails.
        """

        def work() -> ConfigEcho:
            config = self._merge_config(request)
            snapshot = self._regenerate(config)
            return ConfigEcho(config=snapshot.config, last_generated=snapshot.generated_at)

        return await self._handle(work, "Fel vid uppdatering av konfiguration")

    async def get_dataset_stats(self) -> ApiResponse[DatasetStats]:
        """Return size and BAS class distribution of the current dataset."""

        def work() -> DatasetStats:
            snapshot = self._snapshot
            distribution: dict = {}
            for txn in snapshot.transactions:
                distribution[txn.bas_class] = distribution.get(txn.bas_class, 0) + 1
            return DatasetStats(
                total_transactions=len(snapshot.transactions),
                total_accounts=len(snapshot.accounts),
                date_range_start=snapshot.config.date_range_start,
                date_range_end=snapshot.config.date_range_end,
                bas_class_distribution=dict(sorted(distribution.items())),
            )

        return await self._handle(work, "Ett oväntat fel uppstod vid hämtning av statistik")

    def _regenerate(self, config: GenerationConfig) -> DatasetSnapshot:
        """Rebuild the dataset and swap it in as a whole.

        Args:
            config: New config

        Returns:
            The new snapshot

        Raises:
            ValidationError: If the config is invalid
            InvariantViolation: If generation fails; the old dataset is kept
        """
        with self._lock:
            self._state = ServiceState.REGENERATING
            try:
                snapshot = self._build_snapshot(config)
            finally:
                self._state = ServiceState.READY
            self._snapshot = snapshot
        return snapshot

    def _build_snapshot(self, config: GenerationConfig) -> DatasetSnapshot:
        logger.info("Regenerating mock data: %s", config.to_dict())
        accounts = self._account_generator.generate_accounts()
        transactions = TransactionGenerator(config).generate_transactions(accounts)
        logger.info("Generated %d transactions and %d accounts", len(transactions), len(accounts))
        return DatasetSnapshot(
            config=config,
            accounts=tuple(accounts),
            transactions=tuple(transactions),
            generated_at=utc_now(),
        )

    def _merge_config(self, request: Optional[Mapping[str, Any]]) -> GenerationConfig:
        validator = RequestValidator(request, CONFIG_FIELDS)
        dataset_size = validator.integer("dataset_size", MIN_DATASET_SIZE, MAX_DATASET_SIZE)
        start = validator.iso_date("date_range_start")
        end = validator.iso_date("date_range_end")
        include_vat = validator.boolean("include_vat")
        seed = validator.integer("seed")
        validator.raise_if_errors()

        changes = {
            "dataset_size": dataset_size,
            "date_range_start": start,
            "date_range_end": end,
            "include_vat": include_vat,
            "seed": seed,
        }
        config = self._snapshot.config.replace(
            **{name: value for name, value in changes.items() if value is not None}
        )
        if config.date_range_start > config.date_range_end:
            raise ValidationError({"date_range_start": "cannot be after date_range_end"})
        return config

    async def _simulate_network(self) -> bool:
        """Wait out the simulated delay; return True if the request should fail."""
        delay_ms = self.settings.network_delay_ms + self._simulation.next_float() * self.settings.delay_jitter_ms
        await self._sleep(delay_ms / 1000)
        return self._simulation.chance(self.settings.error_rate)

    async def _handle(self, work: Callable[[], Any], server_error_message: str) -> ApiResponse:
        if await self._simulate_network():
            logger.warning("Simulated server error: %s", server_error_message)
            return ApiResponse.fail(ApiErrorKind.SERVER_ERROR, server_error_message)

        try:
            return ApiResponse.ok(work())
        except ValidationError as e:
            logger.debug("Rejected request: %s", e.errors)
            return ApiResponse.fail(ApiErrorKind.VALIDATION_ERROR, str(e), {"errors": e.errors})
        except NotFoundError as e:
            return ApiResponse.fail(ApiErrorKind.NOT_FOUND, str(e))
        except InvariantViolation as e:
            logger.error("Data generation failed: %s", e)
            return ApiResponse.fail(ApiErrorKind.PROCESSING_ERROR, str(e))
        except Exception:
            logger.exception("Unexpected error while processing request")
            return ApiResponse.fail(ApiErrorKind.PROCESSING_ERROR, "Fel vid bearbetning av data")


def _require_uuid(field: str, value: object) -> None:
    if not is_valid_uuid(value):
        raise ValidationError({field: "must be a valid UUID"})
