"""CLI helpers for date range resolution."""

from datetime import date

import click

from findash.utils.date_parser import get_date_range, parse_date


def _parse_or_exit(ctx, label: str, value: str | None) -> date | None:
    if not value:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} date: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
) -> tuple[date | None, date | None]:
    """Turn period flags or --start-date/--end-date into a transaction date filter.

    Either bound may be None, which leaves that side of the range open.
    """
    selected = [period for period, is_set in period_flags.items() if is_set]
    flag_names = ", ".join(f"--{period}" for period in period_flags)

    if len(selected) > 1:
        click.echo(f"Error: Only one period option ({flag_names}) can be specified at a time.", err=True)
        ctx.exit(1)

    if selected:
        if start_date or end_date:
            click.echo(f"Error: Period options ({flag_names}) cannot be combined with --start-date or --end-date.", err=True)
            ctx.exit(1)
        return get_date_range(selected[0])

    start = _parse_or_exit(ctx, "start", start_date)
    end = _parse_or_exit(ctx, "end", end_date)
    if start is not None and end is not None and start > end:
        click.echo(f"Error: Start date {start} is after end date {end}.", err=True)
        ctx.exit(1)
    return start, end
