"""Document posting commands."""

from pathlib import Path

import click
from taxledger.cli.error_handling import handle_domain_error
from taxledger.cli.formatting import echo_entries, echo_totals, format_amount
from taxledger.domain.documents import DocumentService, parse_document_lines
from taxledger.domain.entities import Document, DocumentOperation
from taxledger.domain.errors import DomainError
from taxledger.utils.date_parser import parse_date

OPERATIONS = [operation.value for operation in DocumentOperation]


@click.group()
def document_group():
    """Calculate and post documents."""
    pass


@document_group.command("post")
@click.argument("lines_csv", type=click.Path(exists=True))
@click.option(
    "--operation",
    type=click.Choice(OPERATIONS, case_sensitive=False),
    required=True,
    help="Document operation",
)
@click.option("--date", "date_str", required=True, help="Document date")
@click.option("--code", required=True, help="Document code (e.g. INV-0001)")
@click.option("--entity", help="Business entity code (customer or supplier)")
@click.option("--description", help="Transaction description")
@click.option("--dry-run", is_flag=True, help="Show totals and entries without posting")
@click.pass_context
def post_document(
    ctx,
    lines_csv: str,
    operation: str,
    date_str: str,
    code: str,
    entity: str | None,
    description: str | None,
    dry_run: bool,
):
    """Calculate taxes for a document and post its transaction.

    LINES_CSV has the columns ItemCode, Quantity, UnitPrice and an
    optional Amount.

    Examples:
        taxledger document post lines.csv --operation SalesInvoice --date 2024-03-01 --code INV-1
        taxledger document post lines.csv --operation SalesInvoice --date today --code INV-2 --dry-run
    """
    try:
        document_date = parse_date(date_str)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    lines, errors = parse_document_lines(Path(lines_csv).read_text(encoding="utf-8-sig"))
    if errors:
        for error in errors:
            click.echo(f"Error: {error}", err=True)
        ctx.exit(1)

    document = Document(
        code=code,
        operation=DocumentOperation.parse(operation),
        date=document_date,
        business_entity_code=entity,
        description=description,
        lines=lines,
    )

    try:
        service = DocumentService(ctx.obj["db"])
        prepared = service.prepare_transaction(document)
    except DomainError as e:
        handle_domain_error(ctx, e)

    echo_totals(document.totals)
    echo_entries(prepared.entries)
    for warning in prepared.warnings:
        click.echo(f"Warning: {warning.message}", err=True)

    transaction = prepared.transaction
    click.echo(
        f"\nDebits {format_amount(transaction.total_debits)} / "
        f"Credits {format_amount(transaction.total_credits)}"
    )
    if dry_run:
        status = "balanced" if transaction.is_balanced else "NOT balanced"
        click.echo(f"Dry run: transaction is {status}; nothing was posted.")
        return

    try:
        service.post_prepared(prepared)
        click.echo(f"Posted transaction {transaction.number}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register document commands with main CLI."""
    cli.add_command(document_group, name="document")
