"""Document posting pipeline built from stored configuration."""

import csv
import io
import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from taxledger.database.base import Database
from taxledger.domain.account_mapping import AccountMapping
from taxledger.domain.accounting import AccountingModule
from taxledger.domain.entities import Document, DocumentLine, LedgerEntry, Transaction
from taxledger.domain.errors import ConfigurationGap
from taxledger.domain.profiles import DocumentTotalsService, TaxAccountingProfileService
from taxledger.domain.tax_calculator import DocumentTaxCalculator
from taxledger.domain.tax_rules import TaxRuleEvaluator
from taxledger.domain.transaction_generator import TransactionGenerator
from taxledger.utils.amount_parser import parse_amount
from taxledger.utils.money import ZERO

logger = logging.getLogger(__name__)


@dataclass
class PreparedTransaction:
    """Result of running a document through tax calculation and generation."""

    document: Document
    transaction: Transaction
    entries: list[LedgerEntry]
    warnings: list[ConfigurationGap] = field(default_factory=list)


class DocumentService:
    """Runs documents through the tax and transaction pipeline.

    Configuration (taxes, rules, memberships, profiles, account mapping) is
    read from the database once, when the service is created. Create a new
    service after changing configuration.
    """

    def __init__(self, db: Database, accounting: Optional[AccountingModule] = None):
        """Initialize document service.

        Args:
            db: Database instance
            accounting: Posting module (defaults to one on the same database)

        Raises:
            ConflictError: If stored account mappings contain duplicate keys
        """
        self.db = db
        self.evaluator = TaxRuleEvaluator(
            db.list_tax_rules(), db.list_taxes(), db.list_group_memberships()
        )
        self.tax_profiles = TaxAccountingProfileService(db.list_tax_accounting_profiles())
        self.totals_service = DocumentTotalsService(db.list_document_accounting_profiles())
        self.account_mapping = AccountMapping(db.list_account_mappings())
        self.generator = TransactionGenerator(self.account_mapping)
        self.accounting = accounting or AccountingModule(db)

    def prepare_transaction(self, document: Document) -> PreparedTransaction:
        """Calculate taxes and totals, then generate the transaction.

        The document is updated in place. Nothing is written to the database.

        Raises:
            ConfigurationError: If a total refers to an unmapped account key
        """
        calculator = DocumentTaxCalculator(
            document, self.evaluator, self.tax_profiles, self.totals_service
        )
        calculator.calculate()
        transaction, entries = self.generator.generate_transaction(document)
        return PreparedTransaction(
            document=document,
            transaction=transaction,
            entries=entries,
            warnings=list(calculator.warnings),
        )

    def post_document(self, document: Document) -> PreparedTransaction:
        """Prepare a document's transaction and post it.

        Raises:
            ConfigurationError: If a total refers to an unmapped account key
            PostingError: If the transaction cannot be posted
        """
        return self.post_prepared(self.prepare_transaction(document))

    def post_prepared(self, prepared: PreparedTransaction) -> PreparedTransaction:
        """Post a transaction returned by prepare_transaction.

        Raises:
            PostingError: If the transaction cannot be posted
        """
        self.accounting.post_transaction(prepared.transaction)
        logger.info(
            "Posted document %s as transaction %s",
            prepared.document.code,
            prepared.transaction.number,
        )
        return prepared


LINE_COLUMNS = ["ItemCode", "Quantity", "UnitPrice", "Amount"]


def parse_document_lines(content: str) -> tuple[list[DocumentLine], list[str]]:
    """Parse document lines from CSV text.

    Columns are ItemCode, Quantity, UnitPrice and an optional Amount that
    overrides quantity times unit price. Quantity defaults to 1.

    Returns:
        Tuple of (lines, errors) with errors as "Line N: ..."
    """
    reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")))
    if reader.fieldnames is None:
        return [], ["Line 1: File is empty"]
    headers = {name.strip() for name in reader.fieldnames if name}
    if "UnitPrice" not in headers and "Amount" not in headers:
        return [], ["Line 1: UnitPrice or Amount column is required"]

    lines = []
    errors = []
    for raw in reader:
        line_number = reader.line_num
        row = {key.strip(): (value or "").strip() for key, value in raw.items() if key}
        if not any(row.values()):
            continue
        try:
            quantity = parse_amount(row["Quantity"]) if row.get("Quantity") else Decimal("1")
            unit_price = parse_amount(row["UnitPrice"]) if row.get("UnitPrice") else ZERO
            amount = parse_amount(row["Amount"]) if row.get("Amount") else None
        except ValueError as e:
            errors.append(f"Line {line_number}: {e}")
            continue
        lines.append(
            DocumentLine(
                item_code=row.get("ItemCode") or None,
                quantity=quantity,
                unit_price=unit_price,
                amount=amount,
            )
        )
    return lines, errors
