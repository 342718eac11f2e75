"""Swedish BAS reference tables.

Static catalogues used by the generators: class metadata and account
ranges, VAT rates, the base chart of accounts and the word lists used to
compose transaction descriptions.
"""

from dataclasses import dataclass
from typing import Optional

from findash.domain.entities import BASClass, DebitCredit
from findash.domain.errors import DomainError, unknown_bas_class


@dataclass(frozen=True)
class BASClassInfo:
    """Names and numeric account range of a BAS class."""

    bas_class: BASClass
    swedish_name: str
    english_name: str
    description: str
    account_range: tuple[int, int]


@dataclass(frozen=True)
class ReferenceAccount:
    """Seed entry for the generated chart of accounts."""

    account_number: str
    name: str
    name_english: str
    bas_class: BASClass
    parent_number: Optional[str] = None


BAS_CLASS_INFO: dict[BASClass, BASClassInfo] = {
    BASClass.ASSETS: BASClassInfo(
        BASClass.ASSETS,
        "Tillgångar",
        "Assets",
        "Tillgångar som företaget äger eller kontrollerar",
        (1000, 1999),
    ),
    BASClass.LIABILITIES: BASClassInfo(
        BASClass.LIABILITIES,
        "Skulder",
        "Liabilities",
        "Skulder och förpliktelser",
        (2000, 2999),
    ),
    BASClass.EQUITY: BASClassInfo(
        BASClass.EQUITY,
        "Eget kapital",
        "Equity",
        "Ägarnas kapital i företaget",
        (3000, 3999),
    ),
    BASClass.REVENUE: BASClassInfo(
        BASClass.REVENUE,
        "Intäkter",
        "Revenue",
        "Intäkter från företagets verksamhet",
        (4000, 4999),
    ),
    BASClass.COST_OF_SALES: BASClassInfo(
        BASClass.COST_OF_SALES,
        "Kostnad för sålda varor",
        "Cost of Sales",
        "Direkta kostnader för sålda varor och tjänster",
        (5000, 5999),
    ),
    BASClass.OPERATING_EXPENSES: BASClassInfo(
        BASClass.OPERATING_EXPENSES,
        "Rörelsekostnader",
        "Operating Expenses",
        "Kostnader för den löpande verksamheten",
        (6000, 6999),
    ),
    BASClass.FINANCIAL_ITEMS: BASClassInfo(
        BASClass.FINANCIAL_ITEMS,
        "Finansiella poster",
        "Financial Items",
        "Finansiella intäkter och kostnader",
        (7000, 7999),
    ),
    BASClass.EXTRAORDINARY_ITEMS: BASClassInfo(
        BASClass.EXTRAORDINARY_ITEMS,
        "Extraordinära poster",
        "Extraordinary Items",
        "Extraordinära intäkter och kostnader",
        (8000, 8999),
    ),
}

SWEDISH_VAT_RATES: tuple[int, ...] = (0, 6, 12, 25)
TAXABLE_VAT_RATES: tuple[int, ...] = tuple(rate for rate in SWEDISH_VAT_RATES if rate > 0)

BASE_ACCOUNTS: tuple[ReferenceAccount, ...] = (
    # Class 1 - Tillgångar
    ReferenceAccount("1220", "Inventarier och verktyg", "Equipment and Tools", BASClass.ASSETS),
    ReferenceAccount("1510", "Kundfordringar", "Accounts Receivable", BASClass.ASSETS),
    ReferenceAccount("1900", "Kassa och bank", "Cash and Bank", BASClass.ASSETS),
    ReferenceAccount("1910", "Kassa", "Cash", BASClass.ASSETS, parent_number="1900"),
    ReferenceAccount("1930", "Företagskonto", "Business Account", BASClass.ASSETS, parent_number="1900"),
    # Class 2 - Skulder
    ReferenceAccount("2440", "Leverantörsskulder", "Accounts Payable", BASClass.LIABILITIES),
    ReferenceAccount("2600", "Moms och särskilda punktskatter", "VAT and Excise Duties", BASClass.LIABILITIES),
    ReferenceAccount("2610", "Utgående moms", "VAT Payable", BASClass.LIABILITIES, parent_number="2600"),
    ReferenceAccount("2640", "Ingående moms", "VAT Receivable", BASClass.LIABILITIES, parent_number="2600"),
    # Class 3 - Eget kapital
    ReferenceAccount("3010", "Aktiekapital", "Share Capital", BASClass.EQUITY),
    ReferenceAccount("3090", "Balanserat resultat", "Retained Earnings", BASClass.EQUITY),
    # Class 4 - Intäkter
    ReferenceAccount("4010", "Försäljning varor", "Sales of Goods", BASClass.REVENUE),
    ReferenceAccount("4040", "Försäljning tjänster", "Sales of Services", BASClass.REVENUE),
    # Class 5 - Kostnad för sålda varor
    ReferenceAccount("5010", "Inköp varor", "Purchase of Goods", BASClass.COST_OF_SALES),
    # Class 6 - Rörelsekostnader
    ReferenceAccount("6110", "Kontorsmaterial", "Office Supplies", BASClass.OPERATING_EXPENSES),
    ReferenceAccount("6210", "Telefon", "Telephone", BASClass.OPERATING_EXPENSES),
    ReferenceAccount("6570", "Bankkostnader", "Bank Charges", BASClass.OPERATING_EXPENSES),
    # Class 7 - Finansiella poster
    ReferenceAccount("7310", "Ränteintäkter", "Interest Income", BASClass.FINANCIAL_ITEMS),
    ReferenceAccount("7410", "Räntekostnader", "Interest Expenses", BASClass.FINANCIAL_ITEMS),
    # Class 8 - Extraordinära poster
    ReferenceAccount("8110", "Extraordinära intäkter", "Extraordinary Income", BASClass.EXTRAORDINARY_ITEMS),
    ReferenceAccount("8210", "Extraordinära kostnader", "Extraordinary Expenses", BASClass.EXTRAORDINARY_ITEMS),
)

DESCRIPTIONS: dict[BASClass, tuple[str, ...]] = {
    BASClass.ASSETS: (
        "Inköp av inventarier",
        "Datorutrustning",
        "Kontorsmöbler",
        "Fordon",
        "Maskiner och verktyg",
    ),
    BASClass.LIABILITIES: (
        "Leverantörsfaktura",
        "Hyra lokaler",
        "Lån från bank",
        "Kreditkort",
        "Skatteskuld",
    ),
    BASClass.EQUITY: (
        "Aktiekapital",
        "Kapitaltillskott",
        "Balanserat resultat",
        "Reservfond",
    ),
    BASClass.REVENUE: (
        "Försäljning av varor",
        "Konsulttjänster",
        "Licensintäkter",
        "Uthyrning",
        "Provisioner",
    ),
    BASClass.COST_OF_SALES: (
        "Inköp av råvaror",
        "Frakt och transport",
        "Produktionskostnader",
        "Varulager",
    ),
    BASClass.OPERATING_EXPENSES: (
        "Kontorshyra",
        "Telefon och internet",
        "Marknadsföring",
        "Försäkringar",
        "Revision och juridik",
        "Bankkostnader",
        "Kontorsmaterial",
    ),
    BASClass.FINANCIAL_ITEMS: (
        "Ränteintäkter",
        "Räntekostnader",
        "Valutakursvinst",
        "Valutakursförlust",
    ),
    BASClass.EXTRAORDINARY_ITEMS: (
        "Försäljning av anläggningstillgång",
        "Extraordinär kostnad",
        "Skadeersättning",
    ),
}

# Intentional catch-all for callers that opt in; unknown classes raise otherwise.
FALLBACK_DESCRIPTION = "Diverse transaktion"

COMPANY_NAMES: tuple[str, ...] = (
    "Svensk Handel AB",
    "Malmö Teknik HB",
    "Stockholm Konsult AB",
    "Göteborg Transport AB",
    "Nordic Services AB",
    "Scandinavian Solutions HB",
    "Uppsala Innovation AB",
    "Västerås Utveckling AB",
    "Örebro Business AB",
    "Linköping Tech HB",
    "Karlstad Handel AB",
    "Sundsvall Export AB",
    "Umeå Digital AB",
    "Luleå Logistik HB",
    "Kiruna Mining AB",
)

REFERENCE_PREFIXES: tuple[str, ...] = ("INV", "REF", "ORD", "PAY", "TXN")

_NORMAL_BALANCE: dict[BASClass, Optional[DebitCredit]] = {
    BASClass.ASSETS: DebitCredit.DEBIT,
    BASClass.COST_OF_SALES: DebitCredit.DEBIT,
    BASClass.OPERATING_EXPENSES: DebitCredit.DEBIT,
    BASClass.LIABILITIES: DebitCredit.CREDIT,
    BASClass.EQUITY: DebitCredit.CREDIT,
    BASClass.REVENUE: DebitCredit.CREDIT,
    BASClass.FINANCIAL_ITEMS: None,
    BASClass.EXTRAORDINARY_ITEMS: None,
}


def to_bas_class(value: object) -> BASClass:
    """Coerce an integer-like value to a BASClass.

    Raises:
        DomainError: If the value is not one of the classes 1-8
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise DomainError(unknown_bas_class(value))
    try:
        return BASClass(value)
    except ValueError:
        raise DomainError(unknown_bas_class(value)) from None


def get_class_info(bas_class: object) -> BASClassInfo:
    """Return metadata for a BAS class."""
    return BAS_CLASS_INFO[to_bas_class(bas_class)]


def get_descriptions(bas_class: object, allow_fallback: bool = False) -> tuple[str, ...]:
    """Return description phrases for a BAS class.

    Args:
        bas_class: BAS class 1-8
        allow_fallback: Return the catch-all phrase instead of raising for
            an unknown class

    Raises:
        DomainError: If the class is unknown and no fallback is allowed
    """
    try:
        return DESCRIPTIONS[to_bas_class(bas_class)]
    except DomainError:
        if allow_fallback:
            return (FALLBACK_DESCRIPTION,)
        raise


def normal_balance(bas_class: object) -> Optional[DebitCredit]:
    """Return the side a class normally increases on, or None for either."""
    return _NORMAL_BALANCE[to_bas_class(bas_class)]


def is_valid_account_number(account_number: str, bas_class: object) -> bool:
    """Check that a 4-digit account number lies in its class range."""
    if len(account_number) != 4 or not account_number.isdigit():
        return False
    low, high = get_class_info(bas_class).account_range
    return low <= int(account_number) <= high


def bas_class_for_account_number(account_number: str) -> Optional[BASClass]:
    """Return the BAS class whose range contains an account number."""
    if len(account_number) != 4 or not account_number.isdigit():
        return None
    number = int(account_number)
    for info in BAS_CLASS_INFO.values():
        low, high = info.account_range
        if low <= number <= high:
            return info.bas_class
    return None


def validate_reference_tables(accounts: tuple[ReferenceAccount, ...] = BASE_ACCOUNTS) -> None:
    """Assert the static tables are internally consistent.

    Runs once when this module is imported. A failure here is a
    reference-data bug, not a request-time condition.
    """
    for bas_class in BASClass:
        assert bas_class in BAS_CLASS_INFO, f"missing class info for {bas_class}"
        assert DESCRIPTIONS.get(bas_class), f"no description phrases for {bas_class}"
        assert any(a.bas_class == bas_class for a in accounts), f"no reference account for {bas_class}"

    numbers = [a.account_number for a in accounts]
    assert len(numbers) == len(set(numbers)), "duplicate reference account numbers"
    for account in accounts:
        assert bas_class_for_account_number(account.account_number) == account.bas_class, (
            f"account {account.account_number} outside range of class {account.bas_class}"
        )
        if account.parent_number is not None:
            assert account.parent_number in numbers, (
                f"account {account.account_number} has unknown parent {account.parent_number}"
            )


validate_reference_tables()
