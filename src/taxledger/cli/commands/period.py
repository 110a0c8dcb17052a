"""Fiscal period commands."""

import click
from taxledger.cli.error_handling import handle_domain_error
from taxledger.domain.errors import DomainError
from taxledger.domain.fiscal_periods import FiscalPeriodService
from taxledger.utils.date_parser import parse_date


@click.group()
def period_group():
    """Manage fiscal periods."""
    pass


@period_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.argument("start", metavar="START_DATE")
@click.argument("end", metavar="END_DATE")
@click.option("--description", help="Optional description")
@click.pass_context
def create_period(ctx, code: str, name: str, start: str, end: str, description: str | None):
    """Create an open fiscal period.

    Periods may not overlap and may span at most 730 days.

    Examples:
        taxledger period create FY2024 "Fiscal year 2024" 2024-01-01 2024-12-31
    """
    try:
        start_date = parse_date(start)
        end_date = parse_date(end)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    service = FiscalPeriodService(ctx.obj["db"])
    try:
        period = service.create_period(code, name, start_date, end_date, description=description)
        click.echo(f"Created fiscal period {period.code} ({period.start_date} to {period.end_date})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@period_group.command("list")
@click.pass_context
def list_periods(ctx):
    """List fiscal periods."""
    service = FiscalPeriodService(ctx.obj["db"])
    periods = service.list_periods()
    if not periods:
        click.echo("No fiscal periods found.")
        return

    click.echo("\nFiscal periods:")
    click.echo("-" * 70)
    for p in periods:
        click.echo(f"{p.code:10s} | {p.start_date} - {p.end_date} | {p.status.value:6s} | {p.name}")


@period_group.command("close")
@click.argument("code", metavar="CODE")
@click.pass_context
def close_period(ctx, code: str):
    """Close a fiscal period. Closed periods reject new postings."""
    service = FiscalPeriodService(ctx.obj["db"])
    try:
        service.close_period(code)
        click.echo(f"Closed fiscal period {code}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register fiscal period commands with main CLI."""
    cli.add_command(period_group, name="period")
