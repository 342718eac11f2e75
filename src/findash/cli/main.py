"""Main CLI entry point."""

import logging

import click

from findash.api.service import LedgerService
from findash.api.settings import ServiceSettings, default_generation_config
from findash.cli.error_handling import handle_domain_error
from findash.domain.errors import DomainError
from findash.utils.date_parser import parse_date

# Import and register all commands at module level
from findash.cli.commands import accounts, stats, transactions


@click.group()
@click.option("--seed", type=int, envvar="FINDASH_SEED", help="Random seed for the generated dataset")
@click.option("--size", type=click.IntRange(min=0), envvar="FINDASH_DATASET_SIZE", help="Number of transactions to generate")
@click.option("--start-date", help="First date of generated transactions (default 2024-01-01)")
@click.option("--end-date", help="Last date of generated transactions (default 2024-12-31)")
@click.option("--no-vat", is_flag=True, help="Generate transactions without VAT")
@click.option(
    "--network-delay-ms",
    type=click.IntRange(min=0),
    default=0,
    envvar="FINDASH_NETWORK_DELAY_MS",
    help="Simulated delay per request in milliseconds",
)
@click.option(
    "--error-rate",
    type=click.FloatRange(0, 1),
    default=0.0,
    envvar="FINDASH_ERROR_RATE",
    help="Probability of a simulated server error per request",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    envvar="FINDASH_LOG_LEVEL",
    help="Logging level",
)
@click.pass_context
def cli(
    ctx,
    seed: int | None,
    size: int | None,
    start_date: str | None,
    end_date: str | None,
    no_vat: bool,
    network_delay_ms: int,
    error_rate: float,
    log_level: str,
):
    """Findash - simulated Swedish bookkeeping backend.

    Generates a reproducible BAS chart of accounts and transaction set from
    a seed, and queries it the way the dashboard's API would.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Generate data only when actually running a command (not when showing help)
    if ctx.invoked_subcommand is None:
        return

    try:
        config = default_generation_config()
        changes = {}
        if seed is not None:
            changes["seed"] = seed
        if size is not None:
            changes["dataset_size"] = size
        if start_date:
            changes["date_range_start"] = parse_date(start_date)
        if end_date:
            changes["date_range_end"] = parse_date(end_date)
        if no_vat:
            changes["include_vat"] = False

        settings = ServiceSettings(network_delay_ms=network_delay_ms, delay_jitter_ms=0, error_rate=error_rate)
        ctx.obj["service"] = LedgerService(settings=settings, generation_config=config.replace(**changes))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)


# Register all commands
transactions.register_commands(cli)
accounts.register_commands(cli)
stats.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
