"""Transaction viewing commands."""

import click

from findash.cli.date_filters import resolve_cli_date_range
from findash.cli.error_handling import handle_domain_error, run_request
from findash.domain.errors import DomainError
from findash.utils.account_resolver import resolve_account
from findash.utils.amount_parser import format_ore, parse_amount


@click.group()
def transactions_group():
    """Query generated transactions."""
    pass


@transactions_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@click.option("--this-month", is_flag=True, help="Filter to current month")
@click.option("--this-year", is_flag=True, help="Filter to current year")
@click.option("--last-month", is_flag=True, help="Filter to previous month")
@click.option("--last-year", is_flag=True, help="Filter to previous year")
@click.option("--bas-class", type=int, help="BAS class (1-8)")
@click.option("--account", help="Account number (e.g. 1930) or account ID")
@click.option("--search", help="Text to find in description, reference or account name")
@click.option("--side", type=click.Choice(["DEBIT", "CREDIT"], case_sensitive=False), help="Debit or credit")
@click.option("--min-amount", help="Minimum amount in kronor (e.g. 100 or 99,50)")
@click.option("--max-amount", help="Maximum amount in kronor")
@click.option("--page", type=int, default=0, show_default=True, help="Page number (0-based)")
@click.option("--size", type=int, help="Page size (clamped to 10-100)")
@click.option("--verbose", "-v", is_flag=True, help="Show VAT, reference and ID columns")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    this_month: bool,
    this_year: bool,
    last_month: bool,
    last_year: bool,
    bas_class: int | None,
    account: str | None,
    search: str | None,
    side: str | None,
    min_amount: str | None,
    max_amount: str | None,
    page: int,
    size: int | None,
    verbose: bool,
):
    """List transactions with optional filters.

    Examples:
        findash transactions list --bas-class 4 --size 10
        findash transactions list --last-month --search konsult
        findash --seed 7 transactions list --account 1930 --min-amount 1000
    """
    service = ctx.obj["service"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags={
            "this-month": this_month,
            "this-year": this_year,
            "last-month": last_month,
            "last-year": last_year,
        },
    )

    filters = {
        "date_from": start.isoformat() if start else None,
        "date_to": end.isoformat() if end else None,
        "bas_class": bas_class,
        "search": search,
        "debit_credit": side.upper() if side else None,
    }
    try:
        if account is not None:
            filters["account_id"] = resolve_account(service.accounts, account).id
        if min_amount is not None:
            filters["min_amount"] = parse_amount(min_amount)
        if max_amount is not None:
            filters["max_amount"] = parse_amount(max_amount)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    pagination = {"page": page, "size": size}
    result = run_request(
        ctx,
        service.get_transactions(
            {key: value for key, value in filters.items() if value is not None},
            {key: value for key, value in pagination.items() if value is not None},
        ),
    )

    info = result.page_info
    summary = result.summary
    if not result.items:
        click.echo("No transactions found.")
    else:
        click.echo(f"\nPage {info.page + 1} of {info.total_pages} ({info.total_count} transaction(s)):")
        if verbose:
            click.echo("=" * 120)
            for txn in result.items:
                click.echo(f"\nTransaction ID: {txn.id}")
                click.echo(f"  Date: {txn.date}")
                click.echo(f"  Amount: {format_ore(txn.amount)} {txn.debit_credit.value}")
                click.echo(f"  Account: {txn.account_number} {txn.account.name if txn.account else ''}")
                click.echo(f"  Description: {txn.description}")
                if txn.vat_amount is not None:
                    click.echo(f"  VAT: {format_ore(txn.vat_amount)} ({txn.vat_rate}%)")
                if txn.reference:
                    click.echo(f"  Reference: {txn.reference}")
                click.echo("-" * 120)
        else:
            click.echo("-" * 100)
            click.echo(f"{'Date':<12} {'Account':<8} {'Side':<7} {'Amount':>16}  {'Description':<50}")
            click.echo("-" * 100)
            for txn in result.items:
                click.echo(
                    f"{str(txn.date):<12} {txn.account_number:<8} {txn.debit_credit.value:<7} "
                    f"{format_ore(txn.amount):>16}  {txn.description[:50]:<50}"
                )

    click.echo(
        f"\nDebet: {format_ore(summary.debit_total)} | Kredit: {format_ore(summary.credit_total)} | "
        f"Netto: {'-' if summary.net_amount < 0 else ''}{format_ore(abs(summary.net_amount))} | "
        f"Antal: {summary.transaction_count}"
    )


@transactions_group.command("show")
@click.argument("transaction_id", metavar="TRANSACTION_ID")
@click.pass_context
def show_transaction(ctx, transaction_id: str):
    """Show a single transaction by ID."""
    service = ctx.obj["service"]
    txn = run_request(ctx, service.get_transaction_by_id(transaction_id))

    click.echo(f"Transaction ID: {txn.id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Description: {txn.description}")
    click.echo(f"  Amount: {format_ore(txn.amount)} ({txn.currency})")
    click.echo(f"  Side: {txn.debit_credit.value}")
    click.echo(f"  Account: {txn.account_number} (BAS class {int(txn.bas_class)})")
    if txn.vat_amount is not None:
        click.echo(f"  VAT: {format_ore(txn.vat_amount)} ({txn.vat_rate}%)")
    if txn.reference:
        click.echo(f"  Reference: {txn.reference}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transactions_group, name="transactions")
