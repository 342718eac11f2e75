"""CLI error handling helpers."""

import asyncio
from typing import Any, Awaitable

import click

from findash.api.responses import ApiResponse
from findash.domain.errors import DomainError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def handle_api_error(ctx: click.Context, response: ApiResponse) -> None:
    """Render a failed service response and exit with failure."""
    error = response.error
    click.echo(f"Error [{error.kind.value}]: {error.message}", err=True)
    if error.details and error.details.get("errors"):
        for field, reason in error.details["errors"].items():
            click.echo(f"  {field}: {reason}", err=True)
    ctx.exit(1)


def run_request(ctx: click.Context, request: Awaitable[ApiResponse]) -> Any:
    """Run a service coroutine and return its data, exiting on error."""
    response = asyncio.run(request)
    if not response.success:
        handle_api_error(ctx, response)
    return response.data
