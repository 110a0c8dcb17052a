"""Text formatting for CLI output."""

from decimal import Decimal

import click

from taxledger.domain.entities import EntryType, LedgerEntry, Total


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def echo_totals(totals: list[Total]) -> None:
    click.echo("\nTotals:")
    click.echo("-" * 72)
    for total in totals:
        keys = " / ".join(
            key for key in (total.debit_account_key, total.credit_account_key) if key
        )
        marker = "" if total.include_in_transaction else "  (not posted)"
        click.echo(f"{total.concept:34s} {format_amount(total.amount):>14s}  {keys}{marker}")


def echo_entries(entries: list[LedgerEntry]) -> None:
    click.echo("\nLedger entries:")
    click.echo("-" * 72)
    for entry in entries:
        debit = format_amount(entry.amount) if entry.entry_type is EntryType.DEBIT else ""
        credit = format_amount(entry.amount) if entry.entry_type is EntryType.CREDIT else ""
        click.echo(f"{entry.account_code:8s} {debit:>14s} {credit:>14s}  {entry.description or ''}")
