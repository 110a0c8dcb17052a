"""Tests for the document posting pipeline."""

from datetime import date
from decimal import Decimal

import pytest

from taxledger.domain.documents import DocumentService, parse_document_lines
from taxledger.domain.entities import (
    Document,
    DocumentAccountingProfile,
    DocumentLine,
    DocumentOperation,
    EntryType,
    TaxAccountingProfile,
)
from taxledger.domain.errors import ConfigurationError, PostingErrorKind, UnbalancedTransactionError


def _sides(entries):
    return [(e.account_code, e.entry_type, e.amount) for e in entries]


def test_prepare_sales_invoice(configured_db, sales_invoice):
    prepared = DocumentService(configured_db).prepare_transaction(sales_invoice)

    assert [t.concept for t in sales_invoice.totals] == [
        "Subtotal",
        "Tax: Value Added Tax (VAT)",
        "Accounts Receivable",
        "Cost of Goods Sold",
        "Inventory Reduction",
    ]
    assert _sides(prepared.entries) == [
        ("4100", EntryType.CREDIT, Decimal("300")),
        ("2200", EntryType.CREDIT, Decimal("39")),
        ("1100", EntryType.DEBIT, Decimal("339")),
        ("6100", EntryType.DEBIT, Decimal("180")),
        ("1200", EntryType.CREDIT, Decimal("180")),
    ]
    assert prepared.transaction.total_debits == Decimal("519")
    assert prepared.transaction.is_balanced
    assert prepared.warnings == []
    assert configured_db.list_transactions() == []


def test_post_sales_invoice(configured_db, sales_invoice):
    prepared = DocumentService(configured_db).post_document(sales_invoice)

    assert prepared.transaction.number == "T0001"
    stored = configured_db.list_transactions(posted_only=True)
    assert len(stored) == 1
    assert stored[0].document_code == "INV-0001"
    assert stored[0].description == "SalesInvoice INV-0001"
    assert len(stored[0].ledger_entries) == 5


def test_post_purchase_invoice(configured_db):
    invoice = Document(
        code="BILL-7",
        operation=DocumentOperation.PURCHASE_INVOICE,
        date=date(2024, 4, 2),
        business_entity_code="SUPP-1",
        description="Office supplies",
        lines=[DocumentLine(item_code="PAPER", quantity=Decimal("4"), unit_price=Decimal("50"))],
    )

    prepared = DocumentService(configured_db).post_document(invoice)

    assert _sides(prepared.entries) == [
        ("6200", EntryType.DEBIT, Decimal("200")),
        ("1300", EntryType.DEBIT, Decimal("26")),
        ("2100", EntryType.CREDIT, Decimal("226")),
    ]
    assert prepared.transaction.description == "Office supplies"


def test_excluded_tax_makes_document_unpostable(configured_db, sales_invoice):
    configured_db.save_tax_accounting_profile(
        TaxAccountingProfile(
            tax_code="VAT",
            document_operation=DocumentOperation.SALES_INVOICE,
            credit_account_key="VAT_PAYABLE",
            include_in_transaction=False,
        )
    )
    service = DocumentService(configured_db)

    prepared = service.prepare_transaction(sales_invoice)
    assert not prepared.transaction.is_postable
    assert prepared.transaction.total_debits == Decimal("519")
    assert prepared.transaction.total_credits == Decimal("480")

    with pytest.raises(UnbalancedTransactionError) as exc_info:
        service.post_document(sales_invoice)
    assert exc_info.value.kind is PostingErrorKind.UNBALANCED
    assert configured_db.list_transactions() == []


def test_operation_without_profile_reports_gap(configured_db):
    note = Document(
        code="CN-1",
        operation=DocumentOperation.CREDIT_NOTE,
        date=date(2024, 5, 1),
        lines=[DocumentLine(item_code="WIDGET", unit_price=Decimal("10"))],
    )

    prepared = DocumentService(configured_db).prepare_transaction(note)

    assert prepared.entries == []
    assert [gap.kind for gap in prepared.warnings] == ["document_profile"]


def test_unmapped_key_fails_generation(configured_db, sales_invoice):
    configured_db.save_document_accounting_profile(
        DocumentAccountingProfile(
            document_operation=DocumentOperation.SALES_INVOICE,
            sales_account_key="SALES",
            accounts_receivable_key="AR",
            cost_of_goods_sold_key="COST_OF_SALES",
            inventory_key="STOCK",
            cost_ratio=Decimal("0.6"),
        )
    )

    with pytest.raises(ConfigurationError, match="COST_OF_SALES, STOCK"):
        DocumentService(configured_db).prepare_transaction(sales_invoice)


def test_parse_document_lines():
    content = "ItemCode,Quantity,UnitPrice,Amount\nWIDGET,2,100,\nFEE,,,25\n\nBAD,two,1,\n"

    lines, errors = parse_document_lines(content)

    assert [(line.item_code, line.quantity, line.amount) for line in lines] == [
        ("WIDGET", Decimal("2"), Decimal("200")),
        ("FEE", Decimal("1"), Decimal("25")),
    ]
    assert errors == ["Line 5: Could not parse amount 'two'"]


def test_parse_document_lines_requires_price_column():
    assert parse_document_lines("ItemCode,Quantity\nA,1\n") == (
        [],
        ["Line 1: UnitPrice or Amount column is required"],
    )
