"""Dataset statistics command."""

import click

from findash.cli.error_handling import run_request
from findash.domain.bas import get_class_info
from findash.domain.summary import summarize_by_bas_class
from findash.utils.amount_parser import format_ore


@click.command("stats")
@click.pass_context
def stats(ctx):
    """Show dataset size and per-class totals."""
    service = ctx.obj["service"]
    data = run_request(ctx, service.get_dataset_stats())
    account_data = run_request(ctx, service.get_account_stats())

    click.echo(f"\nTransactions: {data.total_transactions}")
    click.echo(f"Accounts: {account_data.total_accounts} ({account_data.active_accounts} active)")
    click.echo(f"Date range: {data.date_range_start} - {data.date_range_end}")
    click.echo(f"Seed: {service.generation_config.seed}")
    click.echo("-" * 90)
    click.echo(f"{'Class':<30} {'Count':>6} {'Debit':>18} {'Credit':>18} {'VAT':>14}")
    click.echo("-" * 90)

    for row in summarize_by_bas_class(service.transactions):
        info = get_class_info(row["bas_class"])
        summary = row["summary"]
        label = f"{int(info.bas_class)} {info.swedish_name}"
        click.echo(
            f"{label:<30} {summary.transaction_count:>6} {format_ore(summary.debit_total):>18} "
            f"{format_ore(summary.credit_total):>18} {format_ore(row['vat_total']):>14}"
        )


def register_commands(cli):
    """Register stats command with main CLI."""
    cli.add_command(stats)
