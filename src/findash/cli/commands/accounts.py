"""Account viewing commands."""

import click

from findash.cli.error_handling import run_request
from findash.domain.account import flatten_hierarchy


@click.group()
def accounts_group():
    """Browse the generated chart of accounts."""
    pass


@accounts_group.command("list")
@click.option("--bas-class", type=int, help="BAS class (1-8)")
@click.option("--search", help="Text to find in names, class description or account number")
@click.pass_context
def list_accounts(ctx, bas_class: int | None, search: str | None):
    """List accounts ordered by account number."""
    service = ctx.obj["service"]
    filters = {"bas_class": bas_class, "search": search}
    result = run_request(
        ctx,
        service.get_accounts({key: value for key, value in filters.items() if value is not None}),
    )

    if not result.items:
        click.echo("No accounts found.")
        return

    click.echo(f"\nAccounts ({result.total_count}):")
    click.echo("-" * 80)
    for acc in result.items:
        click.echo(f"{acc.account_number} | {acc.name:<32} | {acc.name_english:<24} | Klass {int(acc.bas_class)}")


@accounts_group.command("tree")
@click.pass_context
def account_tree(ctx):
    """Show active accounts grouped by parent account."""
    service = ctx.obj["service"]
    trees = run_request(ctx, service.get_account_hierarchy())

    for node in flatten_hierarchy(trees):
        indent = " " * (4 * node.level)
        click.echo(f"{indent}{node.account.account_number} {node.account.name}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(accounts_group, name="accounts")
