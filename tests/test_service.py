"""Tests for the async service facade."""

import asyncio
import dataclasses
from datetime import date

import pytest

from findash.api.responses import ApiErrorKind
from findash.api.service import LedgerService, ServiceState
from findash.api.settings import ServiceSettings
from findash.domain.entities import BASClass, DebitCredit, GenerationConfig
from findash.domain.errors import ValidationError

ZERO_UUID = "00000000-0000-0000-0000-000000000000"


def run(coro):
    return asyncio.run(coro)


def test_revenue_page_for_reference_scenario(service):
    """Seed 42, 100 transactions in January 2024, class 4, first page of 10."""
    response = run(service.get_transactions({"bas_class": 4}, {"page": 0, "size": 10}))

    assert response.success
    page = response.data
    revenue = [txn for txn in service.transactions if txn.bas_class == BASClass.REVENUE]
    assert page.summary.transaction_count == len(revenue)
    assert len(page.items) == min(10, len(revenue))
    assert all(txn.bas_class == BASClass.REVENUE for txn in page.items)
    assert all(txn.debit_credit == DebitCredit.CREDIT for txn in page.items)
    assert page.summary.debit_total == 0
    assert page.summary.net_amount == -page.summary.credit_total


def test_same_config_gives_same_dataset(quiet_settings, generation_config, fake_sleep):
    """Test that two services built from one config hold equal datasets."""
    first = LedgerService(quiet_settings, generation_config, sleep=fake_sleep)
    second = LedgerService(quiet_settings, generation_config, sleep=fake_sleep)

    assert first.transactions == second.transactions
    assert first.accounts == second.accounts


def test_services_are_independent(quiet_settings, generation_config, fake_sleep):
    """Test that regenerating one service leaves another untouched."""
    first = LedgerService(quiet_settings, generation_config, sleep=fake_sleep)
    second = LedgerService(quiet_settings, generation_config.replace(seed=7), sleep=fake_sleep)
    before = first.transactions

    run(second.set_generation_config({"seed": 8}))

    assert first.transactions == before
    assert first.generation_config.seed == 42
    assert second.generation_config.seed == 8


def test_get_transactions_defaults(service):
    """Test the default page when no filters or pagination are given."""
    response = run(service.get_transactions())

    assert response.success
    assert response.data.page_info.size == 50
    assert response.data.page_info.total_count == 100
    assert response.data.applied_filters == {}


def test_get_transactions_validation_error(service):
    """Test that an inverted amount range is a validation error."""
    response = run(service.get_transactions({"min_amount": 500, "max_amount": 100}))

    assert not response.success
    assert response.data is None
    assert response.error.kind == ApiErrorKind.VALIDATION_ERROR
    assert "min_amount" in response.error.details["errors"]


def test_get_transactions_reports_filter_and_page_errors(service):
    """Test that filter and pagination errors are reported together."""
    response = run(service.get_transactions({"bas_class": 12, "unknown": 1}, {"page": -1}))

    assert response.error.kind == ApiErrorKind.VALIDATION_ERROR
    assert set(response.error.details["errors"]) == {"bas_class", "unknown", "page"}


def test_get_transaction_by_id(service):
    """Test fetching a single transaction by id."""
    target = service.transactions[3]

    response = run(service.get_transaction_by_id(target.id))

    assert response.success
    assert response.data == target


def test_get_transaction_by_id_accepts_upper_case(service):
    target = service.transactions[0]

    assert run(service.get_transaction_by_id(target.id.upper())).data == target


def test_get_transaction_by_zero_uuid_is_not_found(service):
    """Test that a well-formed but unknown id is NOT_FOUND."""
    response = run(service.get_transaction_by_id(ZERO_UUID))

    assert response.error.kind == ApiErrorKind.NOT_FOUND
    assert ZERO_UUID in response.error.message


@pytest.mark.parametrize("bad_id", ["abc", "", 42, None])
def test_get_transaction_by_invalid_id(service, bad_id):
    """Test that malformed ids are rejected before lookup."""
    response = run(service.get_transaction_by_id(bad_id))

    assert response.error.kind == ApiErrorKind.VALIDATION_ERROR
    assert "id" in response.error.details["errors"]


def test_get_accounts(service):
    """Test filtering accounts by BAS class."""
    response = run(service.get_accounts({"bas_class": 1}))

    assert response.success
    numbers = [account.account_number for account in response.data.items]
    assert numbers == ["1220", "1510", "1900", "1910", "1930"]
    assert response.data.total_count == 5


def test_get_accounts_unknown_field(service):
    response = run(service.get_accounts({"kind": "asset"}))

    assert response.error.kind == ApiErrorKind.VALIDATION_ERROR
    assert response.error.details["errors"] == {"kind": "unknown field"}


def test_get_account_by_id(service):
    """Test account lookup, unknown ids and malformed ids."""
    account = service.accounts[0]

    assert run(service.get_account_by_id(account.id)).data == account
    assert run(service.get_account_by_id(ZERO_UUID)).error.kind == ApiErrorKind.NOT_FOUND
    assert run(service.get_account_by_id("1930")).error.kind == ApiErrorKind.VALIDATION_ERROR


def test_get_account_hierarchy(service):
    """Test that VAT accounts nest under their parent."""
    response = run(service.get_account_hierarchy())

    assert response.success
    roots = {tree.account.account_number: tree for tree in response.data}
    assert len(roots) == len([a for a in service.accounts if a.parent_account_id is None])
    assert [child.account.account_number for child in roots["2600"].children] == ["2610", "2640"]


def test_get_generation_config(service, generation_config):
    response = run(service.get_generation_config())

    assert response.data.config == generation_config
    assert response.data.last_generated is not None


def test_set_generation_config_merges_partial_request(service, generation_config):
    """Test that omitted config fields keep their current values."""
    response = run(service.set_generation_config({"seed": 7, "dataset_size": 60}))

    assert response.success
    config = response.data.config
    assert config.seed == 7
    assert config.dataset_size == 60
    assert config.date_range_start == generation_config.date_range_start
    assert config.date_range_end == generation_config.date_range_end
    assert config.include_vat is True
    assert len(service.transactions) == 60
    assert service.generation_config == config


def test_set_generation_config_accepts_iso_dates(service):
    """Test regenerating with ISO date strings."""
    response = run(service.set_generation_config({"date_range_start": "2023-06-01", "date_range_end": "2023-06-30"}))

    assert response.success
    assert all(date(2023, 6, 1) <= txn.date <= date(2023, 6, 30) for txn in service.transactions)


def test_set_generation_config_rejects_invalid_fields(service):
    """Test that an invalid request leaves the dataset untouched."""
    before = service.transactions

    response = run(service.set_generation_config({"dataset_size": 10, "include_vat": "no", "colour": 1}))

    assert response.error.kind == ApiErrorKind.VALIDATION_ERROR
    assert set(response.error.details["errors"]) == {"dataset_size", "include_vat", "colour"}
    assert service.transactions is before


def test_set_generation_config_rejects_inverted_merged_range(service):
    """Test that a merged start after the current end is rejected."""
    response = run(service.set_generation_config({"date_range_start": "2024-03-01"}))

    assert response.error.kind == ApiErrorKind.VALIDATION_ERROR
    assert "date_range_start" in response.error.details["errors"]
    assert service.generation_config.date_range_start == date(2024, 1, 1)


def test_failed_regeneration_keeps_previous_dataset(quiet_settings, fake_sleep):
    """Generation without accounts fails and leaves the old snapshot in place."""
    config = GenerationConfig(0, date(2024, 1, 1), date(2024, 1, 31), seed=1)
    service = LedgerService(quiet_settings, config, reference_accounts=(), sleep=fake_sleep)

    response = run(service.set_generation_config({"dataset_size": 100}))

    assert response.error.kind == ApiErrorKind.PROCESSING_ERROR
    assert service.transactions == ()
    assert service.generation_config.dataset_size == 0
    assert service.state == ServiceState.READY


def test_regenerate_swaps_snapshot(service, generation_config):
    """Test that a successful rebuild replaces the whole snapshot."""
    assert service.state == ServiceState.READY

    snapshot = service._regenerate(generation_config.replace(dataset_size=70))

    assert len(snapshot.transactions) == 70
    assert service.transactions == snapshot.transactions
    assert service.state == ServiceState.READY


def test_regenerate_with_inverted_range_keeps_dataset(service, generation_config):
    """Test that an inverted date range is rejected and the old snapshot stays."""
    before = service.transactions
    inverted = GenerationConfig(60, date(2024, 2, 1), date(2024, 1, 1))

    with pytest.raises(ValidationError) as excinfo:
        service._regenerate(inverted)

    assert "date_range_start" in excinfo.value.errors
    assert service.transactions is before
    assert service.generation_config == generation_config
    assert service.state == ServiceState.READY


def test_get_dataset_stats(service):
    """Test dataset size and class distribution."""
    response = run(service.get_dataset_stats())

    stats = response.data
    assert stats.total_transactions == 100
    assert stats.total_accounts == len(service.accounts)
    assert stats.date_range_start == date(2024, 1, 1)
    assert stats.date_range_end == date(2024, 1, 31)
    assert sum(stats.bas_class_distribution.values()) == 100
    assert list(stats.bas_class_distribution) == sorted(stats.bas_class_distribution)


def test_every_request_waits_for_simulated_delay(generation_config, fake_sleep, sleep_calls):
    """Test that each request sleeps for the configured delay."""
    settings = ServiceSettings(network_delay_ms=200, delay_jitter_ms=0, error_rate=0)
    service = LedgerService(settings, generation_config, sleep=fake_sleep)

    run(service.get_dataset_stats())
    run(service.get_accounts())

    assert sleep_calls == [0.2, 0.2]


def test_jitter_stays_within_bounds(generation_config, fake_sleep, sleep_calls):
    settings = ServiceSettings(network_delay_ms=100, delay_jitter_ms=50, error_rate=0)
    service = LedgerService(settings, generation_config, sleep=fake_sleep)

    for _ in range(20):
        run(service.get_generation_config())

    assert all(0.1 <= delay < 0.15 for delay in sleep_calls)


def test_simulated_server_error(generation_config, fake_sleep):
    """Test that an error rate of 1 fails every operation."""
    settings = ServiceSettings(network_delay_ms=0, delay_jitter_ms=0, error_rate=1)
    service = LedgerService(settings, generation_config, sleep=fake_sleep)

    responses = [
        run(service.get_transactions()),
        run(service.get_transaction_by_id(ZERO_UUID)),
        run(service.get_accounts()),
        run(service.get_account_hierarchy()),
        run(service.get_dataset_stats()),
        run(service.get_account_stats()),
        run(service.set_generation_config({"seed": 99})),
    ]

    assert all(r.error.kind == ApiErrorKind.SERVER_ERROR for r in responses)
    assert service.generation_config.seed == 42


def test_update_settings(service):
    """Test that new settings apply to the next request."""
    service.update_settings(error_rate=1)

    assert run(service.get_accounts()).error.kind == ApiErrorKind.SERVER_ERROR

    service.update_settings(error_rate=0, default_page_size=20)

    assert run(service.get_transactions()).data.page_info.size == 20


def test_update_settings_rejects_invalid_values(service):
    with pytest.raises(ValidationError):
        service.update_settings(error_rate=2)

    assert service.settings.error_rate == 0


def test_update_settings_rejects_unknown_field(service):
    """Test that a misspelled setting is a ValidationError, not a TypeError."""
    with pytest.raises(ValidationError) as excinfo:
        service.update_settings(error_rat=0.5)

    assert excinfo.value.errors == {"error_rat": "unknown field"}
    assert service.settings.error_rate == 0


def test_update_settings_rejects_wrong_type(service):
    """Test that a non-numeric error rate is a ValidationError."""
    with pytest.raises(ValidationError) as excinfo:
        service.update_settings(error_rate="high")

    assert excinfo.value.errors == {"error_rate": "must be a number"}
    assert run(service.get_accounts()).success


def deactivate(service, account_number):
    snapshot = service._snapshot
    accounts = tuple(
        dataclasses.replace(account, is_active=False) if account.account_number == account_number else account
        for account in snapshot.accounts
    )
    service._snapshot = dataclasses.replace(snapshot, accounts=accounts)


def test_get_accounts_hides_inactive_by_default(service):
    """Test that inactive accounts are listed only when asked for."""
    deactivate(service, "1930")

    default = run(service.get_accounts({"bas_class": 1})).data
    inactive = run(service.get_accounts({"bas_class": 1, "active": False})).data

    assert [a.account_number for a in default.items] == ["1220", "1510", "1900", "1910"]
    assert [a.account_number for a in inactive.items] == ["1930"]


def test_include_inactive_setting_lists_all_accounts(service):
    """Test the include_inactive setting when no active filter is given."""
    deactivate(service, "1930")

    service.update_settings(include_inactive=True)
    response = run(service.get_accounts({"bas_class": 1}))

    assert response.data.total_count == 5
    assert run(service.get_accounts({"active": True})).data.total_count == len(service.accounts) - 1


def test_get_account_stats(service):
    """Test account counts overall, per class and per first digit."""
    response = run(service.get_account_stats())

    assert response.success
    stats = response.data
    assert stats.total_accounts == 21
    assert stats.active_accounts == 21
    assert stats.accounts_by_bas_class[BASClass.ASSETS] == 5
    assert list(stats.accounts_by_first_digit) == ["1", "2", "3", "4", "5", "6", "7", "8"]
    assert sum(stats.accounts_by_bas_class.values()) == 21


def test_get_account_stats_counts_inactive(service):
    deactivate(service, "2640")

    stats = run(service.get_account_stats()).data

    assert stats.total_accounts == 21
    assert stats.active_accounts == 20


def test_unexpected_error_becomes_processing_error(service, monkeypatch):
    """Test that unexpected exceptions do not leak their message."""
    def broken(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(service._engine, "run", broken)

    response = run(service.get_transactions())

    assert response.error.kind == ApiErrorKind.PROCESSING_ERROR
    assert "boom" not in response.error.message
