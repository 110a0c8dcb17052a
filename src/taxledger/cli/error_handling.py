"""CLI error handling helpers."""

import click

from taxledger.domain.errors import DomainError, PostingError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    if isinstance(error, PostingError):
        click.echo(f"Error ({error.kind.value}): {error}", err=True)
    else:
        click.echo(f"Error: {error}", err=True)
    ctx.exit(1)
