"""Shared pytest fixtures for taxledger tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from taxledger.database.factories import create_sqlite_database
from taxledger.domain.accounts import AccountService
from taxledger.domain.entities import (
    AccountMappingEntry,
    AccountType,
    Document,
    DocumentAccountingProfile,
    DocumentLine,
    DocumentOperation,
    GroupMembership,
    GroupType,
    Tax,
    TaxAccountingProfile,
    TaxRule,
)
from taxledger.domain.fiscal_periods import FiscalPeriodService

CHART_OF_ACCOUNTS = [
    ("1100", "Accounts Receivable", AccountType.ASSET),
    ("1200", "Inventory", AccountType.ASSET),
    ("2100", "Accounts Payable", AccountType.LIABILITY),
    ("2200", "VAT Payable", AccountType.LIABILITY),
    ("1300", "VAT Receivable", AccountType.ASSET),
    ("3100", "Owner Equity", AccountType.EQUITY),
    ("4100", "Sales", AccountType.REVENUE),
    ("6100", "Cost of Goods Sold", AccountType.EXPENSE),
    ("6200", "Purchases", AccountType.EXPENSE),
]

ACCOUNT_MAPPINGS = [
    ("AR", "1100"),
    ("INVENTORY", "1200"),
    ("AP", "2100"),
    ("VAT_PAYABLE", "2200"),
    ("VAT_RECEIVABLE", "1300"),
    ("SALES", "4100"),
    ("COGS", "6100"),
    ("PURCHASES", "6200"),
]

VAT = Tax(code="VAT", name="Value Added Tax", percentage=Decimal("13"))


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create an AccountService with a temporary database."""
    return AccountService(temp_db)


@pytest.fixture
def fiscal_period_service(temp_db):
    """Create a FiscalPeriodService with a temporary database."""
    return FiscalPeriodService(temp_db)


@pytest.fixture
def chart_of_accounts(account_service):
    """Create the sample chart of accounts."""
    for code, name, account_type in CHART_OF_ACCOUNTS:
        account_service.create_account(code=code, name=name, account_type=account_type)
    return account_service.list_accounts()


@pytest.fixture
def open_period(fiscal_period_service):
    """Create an open fiscal period covering 2024."""
    return fiscal_period_service.create_period(
        "FY2024", "Fiscal year 2024", date(2024, 1, 1), date(2024, 12, 31)
    )


@pytest.fixture
def configured_db(temp_db, chart_of_accounts, open_period):
    """Database with a complete sales and purchase configuration.

    Sales invoices carry 13% VAT and a 60% cost ratio; purchase invoices
    carry 13% recoverable VAT.
    """
    temp_db.save_tax(VAT)
    temp_db.create_tax_rule(
        TaxRule(id=0, tax_code="VAT", document_operation=DocumentOperation.SALES_INVOICE, priority=10)
    )
    temp_db.create_tax_rule(
        TaxRule(id=0, tax_code="VAT", document_operation=DocumentOperation.PURCHASE_INVOICE, priority=10)
    )
    temp_db.save_tax_accounting_profile(
        TaxAccountingProfile(
            tax_code="VAT",
            document_operation=DocumentOperation.SALES_INVOICE,
            credit_account_key="VAT_PAYABLE",
        )
    )
    temp_db.save_tax_accounting_profile(
        TaxAccountingProfile(
            tax_code="VAT",
            document_operation=DocumentOperation.PURCHASE_INVOICE,
            debit_account_key="VAT_RECEIVABLE",
        )
    )
    temp_db.save_document_accounting_profile(
        DocumentAccountingProfile(
            document_operation=DocumentOperation.SALES_INVOICE,
            sales_account_key="SALES",
            accounts_receivable_key="AR",
            cost_of_goods_sold_key="COGS",
            inventory_key="INVENTORY",
            cost_ratio=Decimal("0.6"),
        )
    )
    temp_db.save_document_accounting_profile(
        DocumentAccountingProfile(
            document_operation=DocumentOperation.PURCHASE_INVOICE,
            sales_account_key="PURCHASES",
            accounts_receivable_key="AP",
        )
    )
    for logical_name, account_code in ACCOUNT_MAPPINGS:
        temp_db.save_account_mapping(AccountMappingEntry(logical_name, account_code))
    temp_db.add_group_membership(
        GroupMembership(group_id="RETAIL", entity_code="CUST-1", group_type=GroupType.BUSINESS_ENTITY)
    )
    return temp_db


@pytest.fixture
def sales_invoice():
    """A $300 sales invoice dated inside the open period."""
    return Document(
        code="INV-0001",
        operation=DocumentOperation.SALES_INVOICE,
        date=date(2024, 3, 15),
        business_entity_code="CUST-1",
        lines=[
            DocumentLine(item_code="WIDGET", quantity=Decimal("2"), unit_price=Decimal("100")),
            DocumentLine(item_code="GADGET", quantity=Decimal("1"), unit_price=Decimal("100")),
        ],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
