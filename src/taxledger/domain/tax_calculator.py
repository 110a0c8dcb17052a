"""Line and document tax calculation."""

import logging
from decimal import Decimal
from typing import Optional

from taxledger.domain.entities import Document, DocumentLine, LineTax, Tax, TaxType, Total
from taxledger.domain.errors import ConfigurationGap
from taxledger.domain.profiles import DocumentTotalsService, TaxAccountingProfileService
from taxledger.domain.tax_rules import TaxRuleEvaluator
from taxledger.utils.money import ZERO, round_money

logger = logging.getLogger(__name__)

_HUNDRED = Decimal("100")


def calculate_tax_amount(tax: Tax, base: Decimal, quantity: Decimal) -> Decimal:
    """Compute a tax amount for a taxable base and quantity."""
    if tax.tax_type is TaxType.PERCENTAGE:
        return base * tax.percentage / _HUNDRED
    if tax.tax_type is TaxType.FIXED_AMOUNT:
        return tax.amount
    if tax.tax_type is TaxType.AMOUNT_PER_UNIT:
        return tax.amount * quantity
    return ZERO


class DocumentTaxCalculator:
    """Computes taxes and accounting totals for one document.

    The calculator is bound to a single document for its lifetime and
    mutates it in place. Nothing is recomputed implicitly: call
    ``calculate_line_taxes`` for changed lines and ``calculate_document_taxes``
    afterwards, or ``calculate`` to do both for every line.
    """

    def __init__(
        self,
        document: Document,
        evaluator: TaxRuleEvaluator,
        tax_profiles: Optional[TaxAccountingProfileService] = None,
        totals_service: Optional[DocumentTotalsService] = None,
    ):
        self.document = document
        self.evaluator = evaluator
        self.tax_profiles = tax_profiles or TaxAccountingProfileService()
        self.totals_service = totals_service
        self.warnings: list[ConfigurationGap] = []

    def calculate(self) -> Document:
        """Calculate every line in document order, then the document totals."""
        for line in self.document.lines:
            self.calculate_line_taxes(line)
        self.calculate_document_taxes()
        return self.document

    def calculate_line_taxes(self, line: DocumentLine) -> list[LineTax]:
        """Rebuild the tax breakdown of a line.

        Taxes are applied in rule priority order. A tax flagged as compounding
        uses the line amount plus the taxes already applied to the line as
        its base; every other tax uses the line amount.

        Returns:
            The line's new tax breakdown
        """
        line.line_taxes = []
        for tax, rule in self.evaluator.get_applicable_line_taxes(self.document, line):
            base = line.amount
            if tax.compounds:
                base = line.amount + line.tax_amount
            amount = calculate_tax_amount(tax, base, line.quantity)
            line.line_taxes.append(
                LineTax(tax_code=tax.code, tax_name=tax.name, base=base, amount=amount, rule_id=rule.id)
            )
        return line.line_taxes

    def calculate_document_taxes(self) -> list[Total]:
        """Rebuild the document totals from the line taxes.

        Produces one total per tax code, adds document-level taxes computed
        on the subtotal, attaches tax accounting keys and finally, when a
        totals service is configured, the operation's accounting totals.

        Returns:
            The document's new totals
        """
        self.document.totals = []
        self.warnings = []

        by_tax: dict[str, Decimal] = {}
        for line in self.document.lines:
            for line_tax in line.line_taxes:
                by_tax[line_tax.tax_code] = by_tax.get(line_tax.tax_code, ZERO) + line_tax.amount

        subtotal = self.document.subtotal
        quantity = sum((line.quantity for line in self.document.lines), ZERO)
        for tax, _rule in self.evaluator.get_applicable_document_taxes(self.document):
            amount = calculate_tax_amount(tax, subtotal, quantity)
            by_tax[tax.code] = by_tax.get(tax.code, ZERO) + amount

        for tax_code, amount in by_tax.items():
            self.document.totals.append(self._tax_total(tax_code, round_money(amount)))

        if self.totals_service is not None:
            self.warnings.extend(self.totals_service.add_accounting_totals(self.document))
        return self.document.totals

    def _tax_total(self, tax_code: str, amount: Decimal) -> Total:
        tax = self.evaluator.taxes.get(tax_code.upper())
        name = tax.name if tax is not None else tax_code
        total = Total(concept=f"Tax: {name} ({tax_code})", amount=amount, tax_code=tax_code)

        profile = self.tax_profiles.get_tax_accounting_info(self.document.operation, tax_code)
        if profile is None:
            gap = ConfigurationGap(
                kind="tax_profile",
                key=tax_code,
                message=(
                    f"No tax accounting profile for {tax_code} in "
                    f"{self.document.operation.value}; amount kept, excluded from transaction"
                ),
            )
            logger.warning("Document %s: %s", self.document.code, gap.message)
            self.warnings.append(gap)
            return total

        total.debit_account_key = profile.debit_account_key or None
        total.credit_account_key = profile.credit_account_key or None
        total.include_in_transaction = profile.include_in_transaction and bool(
            total.debit_account_key or total.credit_account_key
        )
        return total
