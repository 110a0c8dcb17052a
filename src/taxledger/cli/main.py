"""Main CLI entry point."""

import logging
import os

import click
from taxledger.database.factories import create_sqlite_database

# Import and register all commands at module level
from taxledger.cli.commands import account, config_cmd, document, period

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(verbose: bool) -> None:
    """Configure root logging from --verbose or TAXLEDGER_LOG_LEVEL."""
    level_name = "DEBUG" if verbose else os.environ.get("TAXLEDGER_LOG_LEVEL", "WARNING")
    level = getattr(logging, level_name.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TAXLEDGER_DB_PATH environment variable)",
    envvar="TAXLEDGER_DB_PATH",
)
@click.option("--verbose", "-v", is_flag=True, help="Log debug detail to stderr")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool):
    """Taxledger - double-entry accounting with configurable tax rules.

    Load a chart of accounts, taxes, tax rules and account mappings from CSV,
    open fiscal periods, then post documents as balanced ledger transactions.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
account.register_commands(cli)
period.register_commands(cli)
config_cmd.register_commands(cli)
document.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
