"""Shared pytest fixtures for findash tests."""

from datetime import date

import pytest

from findash.api.service import LedgerService
from findash.api.settings import ServiceSettings
from findash.domain.account import generate_accounts
from findash.domain.entities import GenerationConfig
from findash.domain.transaction import generate_transactions


@pytest.fixture
def generation_config():
    """The reference scenario: seed 42, 100 transactions in January 2024."""
    return GenerationConfig(
        dataset_size=100,
        date_range_start=date(2024, 1, 1),
        date_range_end=date(2024, 1, 31),
        include_vat=True,
        seed=42,
    )


@pytest.fixture
def accounts():
    """Generated chart of accounts."""
    return generate_accounts()


@pytest.fixture
def transactions(accounts, generation_config):
    """Transactions generated for the reference scenario."""
    return generate_transactions(accounts, generation_config)


@pytest.fixture
def sleep_calls():
    """Record of delays passed to the service's sleep function."""
    return []


@pytest.fixture
def fake_sleep(sleep_calls):
    """Sleep replacement that records the delay and returns immediately."""

    async def _sleep(seconds):
        sleep_calls.append(seconds)

    return _sleep


@pytest.fixture
def quiet_settings():
    """Service settings without simulated errors."""
    return ServiceSettings(network_delay_ms=0, delay_jitter_ms=0, error_rate=0)


@pytest.fixture
def service(quiet_settings, generation_config, fake_sleep):
    """A LedgerService over the reference scenario that never fails randomly."""
    return LedgerService(
        settings=quiet_settings,
        generation_config=generation_config,
        sleep=fake_sleep,
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def scenario_args():
    """Global CLI options that reproduce the reference scenario."""
    return [
        "--seed", "42",
        "--size", "100",
        "--start-date", "2024-01-01",
        "--end-date", "2024-01-31",
    ]
