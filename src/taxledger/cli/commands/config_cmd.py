"""Configuration import and export commands."""

import click
from taxledger.cli.error_handling import handle_domain_error
from taxledger.domain.csv_config import CONFIG_KINDS, ConfigurationImportService
from taxledger.domain.errors import DomainError


@click.group()
def config_group():
    """Import and export accounting configuration as CSV."""
    pass


@config_group.command("import")
@click.argument("kind", type=click.Choice(CONFIG_KINDS))
@click.argument("csv_file", type=click.Path(exists=True))
@click.pass_context
def import_config(ctx, kind: str, csv_file: str):
    """Import configuration rows of one KIND from CSV_FILE.

    Load accounts before account mappings, and taxes before tax rules.
    Rows with errors are reported and skipped; valid rows are stored.

    Examples:
        taxledger config import accounts chart.csv
        taxledger config import tax-rules rules.csv
    """
    service = ConfigurationImportService(ctx.obj["db"])
    try:
        result = service.import_file(kind, csv_file)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Imported {result['imported']} {kind} row(s)")
    if result["errors"]:
        click.echo(f"\n{len(result['errors'])} error(s):", err=True)
        for error in result["errors"]:
            click.echo(f"  {error}", err=True)
        ctx.exit(1)


@config_group.command("export")
@click.argument("kind", type=click.Choice(CONFIG_KINDS))
@click.option("--output", "-o", type=click.Path(), help="Write to a file instead of stdout")
@click.pass_context
def export_config(ctx, kind: str, output: str | None):
    """Export stored configuration of one KIND as CSV."""
    service = ConfigurationImportService(ctx.obj["db"])
    content = service.export(kind)
    if output is None:
        click.echo(content, nl=False)
        return
    with open(output, "w", encoding="utf-8", newline="") as f:
        f.write(content)
    click.echo(f"Exported {kind} to {output}")


def register_commands(cli):
    """Register configuration commands with main CLI."""
    cli.add_command(config_group, name="config")
