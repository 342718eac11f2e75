"""Tests for the synthetic transaction generator."""

import re
from datetime import date, datetime, time, timezone

import pytest

from findash.domain.bas import COMPANY_NAMES, DESCRIPTIONS, is_valid_account_number, normal_balance
from findash.domain.entities import BASClass, DebitCredit, GenerationConfig
from findash.domain.errors import InvariantViolation, ValidationError
from findash.domain.transaction import (
    AMOUNT_BANDS,
    CURRENCY,
    MAX_DESCRIPTION_LENGTH,
    TransactionGenerator,
    generate_transactions,
)
from findash.domain.validation import is_valid_uuid
from findash.utils.amount_parser import round_half_up

REFERENCE_PATTERN = re.compile(r"^(INV|REF|ORD|PAY|TXN)-(\d{4})-(\d{6})$")
VAT_CLASSES = {BASClass.REVENUE, BASClass.COST_OF_SALES, BASClass.OPERATING_EXPENSES}


def test_generates_requested_count(transactions, generation_config):
    """Test generating the configured number of transactions."""
    assert len(transactions) == generation_config.dataset_size


def test_same_config_gives_identical_output(accounts, generation_config):
    """Test that generation is deterministic for one config."""
    first = generate_transactions(accounts, generation_config)
    second = generate_transactions(accounts, generation_config)

    assert first == second


def test_different_seed_gives_different_output(accounts, generation_config):
    """Test that another seed changes the dataset."""
    first = generate_transactions(accounts, generation_config)
    second = generate_transactions(accounts, generation_config.replace(seed=43))

    assert [t.amount for t in first] != [t.amount for t in second]
    assert {t.id for t in first}.isdisjoint({t.id for t in second})


def test_ids_are_unique_uuids(transactions):
    """Test that transaction ids are unique UUIDs."""
    ids = [txn.id for txn in transactions]

    assert len(ids) == len(set(ids))
    assert all(is_valid_uuid(txn_id) for txn_id in ids)


def test_transactions_reference_their_account(transactions, accounts):
    """Test account fields copied onto transactions."""
    by_id = {account.id: account for account in accounts}

    for txn in transactions:
        account = by_id[txn.account_id]
        assert txn.account == account
        assert txn.bas_class == account.bas_class
        assert txn.account_number == account.account_number
        assert is_valid_account_number(txn.account_number, txn.bas_class)


def test_dates_within_range(transactions, generation_config):
    """Test that dates fall within the configured range."""
    for txn in transactions:
        assert generation_config.date_range_start <= txn.date <= generation_config.date_range_end


def test_sorted_newest_first(transactions):
    """Test ordering by date, newest first."""
    dates = [txn.date for txn in transactions]

    assert dates == sorted(dates, reverse=True)


def test_amounts_are_positive_and_in_class_band(transactions):
    """Test amount bands per BAS class."""
    for txn in transactions:
        base, width = AMOUNT_BANDS[txn.bas_class]
        assert txn.amount > 0
        assert base <= txn.amount <= base + width


def test_currency_and_timestamps(transactions):
    for txn in transactions:
        midnight = datetime.combine(txn.date, time.min, tzinfo=timezone.utc)
        assert txn.currency == CURRENCY
        assert txn.created_at == midnight
        assert txn.updated_at == midnight


def test_description_format(transactions):
    """Test the description layout."""
    for txn in transactions:
        phrase, company = txn.description.split(" - ", 1)
        assert phrase in DESCRIPTIONS[txn.bas_class]
        assert company in COMPANY_NAMES
        assert len(txn.description) <= MAX_DESCRIPTION_LENGTH


def test_reference_format(transactions):
    """Test the reference number layout."""
    for txn in transactions:
        match = REFERENCE_PATTERN.match(txn.reference)
        assert match is not None
        assert int(match.group(2)) == txn.date.year
        assert 100000 <= int(match.group(3)) <= 999999


def test_debit_credit_follows_normal_balance(transactions):
    """Test that the side follows the class normal balance."""
    for txn in transactions:
        expected = normal_balance(txn.bas_class)
        if expected is not None:
            assert txn.debit_credit == expected
        else:
            assert txn.debit_credit in (DebitCredit.DEBIT, DebitCredit.CREDIT)


def test_vat_only_on_taxable_classes(transactions):
    """Test that VAT appears only on taxable classes."""
    for txn in transactions:
        if txn.vat_amount is None:
            assert txn.vat_rate is None
            continue
        assert txn.bas_class in VAT_CLASSES
        assert txn.vat_rate in (6, 12, 25)
        assert txn.vat_amount == round_half_up(txn.amount * txn.vat_rate, 100)


def test_vat_appears_when_enabled(accounts):
    """Test that a large dataset with VAT enabled carries VAT."""
    config = GenerationConfig(500, date(2024, 1, 1), date(2024, 12, 31), include_vat=True, seed=42)

    txns = generate_transactions(accounts, config)

    assert any(txn.vat_amount is not None for txn in txns)


def test_no_vat_when_disabled(accounts, generation_config):
    """Test that disabling VAT removes it from all rows."""
    txns = generate_transactions(accounts, generation_config.replace(include_vat=False))

    assert all(txn.vat_amount is None and txn.vat_rate is None for txn in txns)


def test_single_day_range(accounts):
    """Test a range of a single leap day."""
    day = date(2024, 2, 29)
    config = GenerationConfig(50, day, day, seed=5)

    assert {txn.date for txn in generate_transactions(accounts, config)} == {day}


def test_zero_size_gives_empty_list(accounts, generation_config):
    assert generate_transactions(accounts, generation_config.replace(dataset_size=0)) == []
    assert generate_transactions([], generation_config.replace(dataset_size=0)) == []


def test_no_accounts_raises(generation_config):
    """Test generating without accounts."""
    with pytest.raises(InvariantViolation):
        generate_transactions([], generation_config)


def test_inverted_date_range_rejected(generation_config):
    """Test rejecting a start date after the end date."""
    config = generation_config.replace(date_range_start=date(2024, 2, 1))

    with pytest.raises(ValidationError) as excinfo:
        TransactionGenerator(config)

    assert "date_range_start" in excinfo.value.errors


def test_negative_size_rejected(generation_config):
    """Test rejecting a negative dataset size."""
    with pytest.raises(ValidationError) as excinfo:
        TransactionGenerator(generation_config.replace(dataset_size=-1))

    assert "dataset_size" in excinfo.value.errors


def test_all_classes_appear_in_large_dataset(accounts):
    """Test that every class is represented in 1000 rows."""
    config = GenerationConfig(1000, date(2024, 1, 1), date(2024, 12, 31), seed=42)

    txns = generate_transactions(accounts, config)

    assert {txn.bas_class for txn in txns} == set(BASClass)
