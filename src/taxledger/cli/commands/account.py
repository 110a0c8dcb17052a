"""Chart of accounts commands."""

from datetime import date

import click
from taxledger.cli.error_handling import handle_domain_error
from taxledger.cli.formatting import format_amount
from taxledger.domain.accounts import AccountService
from taxledger.domain.balance import AccountBalanceCalculator
from taxledger.domain.entities import AccountType
from taxledger.domain.errors import DomainError
from taxledger.utils.date_parser import get_date_range, parse_date

ACCOUNT_TYPES = [account_type.value for account_type in AccountType]


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option(
    "--type",
    "account_type",
    type=click.Choice(ACCOUNT_TYPES, case_sensitive=False),
    required=True,
    help="Account type",
)
@click.option("--parent", help="Parent account code")
@click.pass_context
def create_account(ctx, code: str, name: str, account_type: str, parent: str | None):
    """Create a new account.

    The code must be numeric and start with the digit of its type:
    1 Asset, 2 Liability, 3 Equity, 4 Revenue, 6 Expense.

    Examples:
        taxledger account create 1100 "Accounts Receivable" --type Asset
        taxledger account create 4100 "Sales" --type Revenue
    """
    service = AccountService(ctx.obj["db"])
    try:
        account = service.create_account(
            code=code, name=name, account_type=AccountType.parse(account_type), parent_code=parent
        )
        click.echo(f"Created {account.account_type.value} account {account.code} '{account.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include archived accounts")
@click.pass_context
def list_accounts(ctx, show_all: bool):
    """List accounts."""
    service = AccountService(ctx.obj["db"])
    accounts = service.list_accounts(include_archived=show_all)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 60)
    for acc in accounts:
        archived = " (archived)" if acc.is_archived else ""
        click.echo(f"{acc.code:8s} | {acc.account_type.value:9s} | {acc.name}{archived}")


@account_group.command("archive")
@click.argument("code", metavar="CODE")
@click.pass_context
def archive_account(ctx, code: str):
    """Archive an account so it no longer accepts postings."""
    service = AccountService(ctx.obj["db"])
    try:
        service.archive_account(code)
        click.echo(f"Archived account {code}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("balance")
@click.argument("code", metavar="CODE", required=False)
@click.option("--as-of", "as_of", help="Balance date (default: today)")
@click.pass_context
def account_balance(ctx, code: str | None, as_of: str | None):
    """Show the balance of an account, or of every account.

    Only posted transactions count. Positive balances are debit balances.
    Without CODE, lists every account with postings and checks the
    accounting equation.

    Examples:
        taxledger account balance 1100
        taxledger account balance --as-of 2024-06-30
    """
    db = ctx.obj["db"]
    try:
        as_of_date = parse_date(as_of) if as_of else date.today()
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    calculator = AccountBalanceCalculator(db.list_transactions(posted_only=True, end_date=as_of_date))

    if code is not None:
        if db.get_account(code) is None:
            click.echo(f"Error: Account {code} not found", err=True)
            ctx.exit(1)
        balance = calculator.calculate_account_balance(code, as_of_date)
        click.echo(f"Balance of {code} as of {as_of_date}: {format_amount(balance)}")
        return

    balances = calculator.get_all_account_balances(as_of_date)
    if not balances:
        click.echo("No posted transactions.")
        return

    accounts = {acc.code: acc for acc in db.list_accounts()}
    click.echo(f"\nBalances as of {as_of_date}:")
    click.echo("-" * 60)
    for account_code, balance in balances.items():
        name = accounts[account_code].name if account_code in accounts else ""
        click.echo(f"{account_code:8s} {name:30s} {format_amount(balance):>16s}")

    if calculator.verify_accounting_equation(as_of_date, accounts.values()):
        click.echo("\nAccounting equation holds.")
    else:
        click.echo("\nWarning: accounting equation does not hold.", err=True)


@account_group.command("turnover")
@click.argument("code", metavar="CODE")
@click.option("--start-date", help="Start date (inclusive)")
@click.option("--end-date", help="End date (inclusive)")
@click.option(
    "--period",
    help="Named period: this-month, last-month, this-quarter, last-quarter, this-year, last-year",
)
@click.pass_context
def account_turnover(
    ctx, code: str, start_date: str | None, end_date: str | None, period: str | None
):
    """Show debit and credit turnover of an account over a date range.

    Examples:
        taxledger account turnover 4100 --period this-year
        taxledger account turnover 1100 --start-date 2024-01-01 --end-date 2024-03-31
    """
    db = ctx.obj["db"]
    try:
        if period is not None:
            if start_date or end_date:
                click.echo("Error: Use either --period or --start-date/--end-date", err=True)
                ctx.exit(1)
            start, end = get_date_range(period)
        else:
            if not start_date or not end_date:
                click.echo("Error: --start-date and --end-date are required without --period", err=True)
                ctx.exit(1)
            start, end = parse_date(start_date), parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    calculator = AccountBalanceCalculator(db.list_transactions(posted_only=True))
    debits, credits = calculator.calculate_account_turnover(code, start, end)
    click.echo(f"Turnover of {code} from {start} to {end}:")
    click.echo(f"  Debits:  {format_amount(debits):>16s}")
    click.echo(f"  Credits: {format_amount(credits):>16s}")
    click.echo(f"  Net:     {format_amount(debits - credits):>16s}")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
