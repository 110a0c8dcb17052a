"""Accounting profiles for taxes and document operations."""

import logging
from decimal import Decimal
from typing import Iterable, Optional

from taxledger.domain.entities import (
    Document,
    DocumentAccountingProfile,
    DocumentOperation,
    EntryType,
    TaxAccountingProfile,
    Total,
)
from taxledger.domain.errors import ConfigurationGap
from taxledger.utils.money import ZERO, round_money

logger = logging.getLogger(__name__)

# Side the sales/purchase account is posted on, and whether the operation
# moves inventory out at cost.
_OPERATION_SIDES: dict[DocumentOperation, tuple[EntryType, bool]] = {
    DocumentOperation.SALES_INVOICE: (EntryType.CREDIT, True),
    DocumentOperation.CREDIT_NOTE: (EntryType.DEBIT, True),
    DocumentOperation.PURCHASE_INVOICE: (EntryType.DEBIT, False),
    DocumentOperation.DEBIT_NOTE: (EntryType.CREDIT, False),
}

_SALES_OPERATIONS = {DocumentOperation.SALES_INVOICE, DocumentOperation.CREDIT_NOTE}


class TaxAccountingProfileService:
    """Registry of tax accounting profiles keyed by (operation, tax code)."""

    def __init__(self, profiles: Iterable[TaxAccountingProfile] = ()):
        self._profiles: dict[DocumentOperation, dict[str, TaxAccountingProfile]] = {}
        for profile in profiles:
            self.register(profile)

    def register(self, profile: TaxAccountingProfile) -> None:
        """Register a profile, replacing any previous one for the same key."""
        by_tax = self._profiles.setdefault(profile.document_operation, {})
        by_tax[profile.tax_code.upper()] = profile

    def get_tax_accounting_info(
        self, operation: DocumentOperation, tax_code: str
    ) -> Optional[TaxAccountingProfile]:
        """Get the profile for a tax in an operation, or None if not registered."""
        return self._profiles.get(operation, {}).get(tax_code.upper())

    def get_profiles_for_operation(self, operation: DocumentOperation) -> list[TaxAccountingProfile]:
        return list(self._profiles.get(operation, {}).values())


class DocumentTotalsService:
    """Adds the per-operation accounting totals to a document.

    For a sales invoice this is the subtotal credited to sales, the
    receivable debited for subtotal plus taxes, and, when a cost ratio is
    configured, cost of goods sold against inventory.
    """

    def __init__(self, profiles: Iterable[DocumentAccountingProfile] = ()):
        self._profiles = {profile.document_operation: profile for profile in profiles}

    def get_profile(self, operation: DocumentOperation) -> Optional[DocumentAccountingProfile]:
        return self._profiles.get(operation)

    def add_accounting_totals(self, document: Document) -> list[ConfigurationGap]:
        """Insert the subtotal and append counterpart and cost totals.

        Tax totals must already be on the document; the counterpart amount
        is the subtotal plus every tax total.

        Returns:
            Configuration gaps found (missing profile or account keys)
        """
        gaps: list[ConfigurationGap] = []
        self._add_totals(document, gaps)
        for gap in gaps:
            logger.warning("Document %s: %s", document.code, gap.message)
        return gaps

    def _add_totals(self, document: Document, gaps: list[ConfigurationGap]) -> None:
        operation = document.operation
        profile = self.get_profile(operation)
        if profile is None:
            gaps.append(
                _gap(
                    "document_profile",
                    operation.value,
                    f"No document accounting profile for operation {operation.value}",
                )
            )
            return
        if operation not in _OPERATION_SIDES:
            gaps.append(
                _gap(
                    "document_operation",
                    operation.value,
                    f"Operation {operation.value} does not generate accounting totals",
                )
            )
            return

        main_side, moves_inventory = _OPERATION_SIDES[operation]
        is_sale = operation in _SALES_OPERATIONS

        subtotal = round_money(document.subtotal)
        taxes = sum((t.amount for t in document.totals if t.tax_code is not None), ZERO)

        main_concept = "Subtotal"
        counterpart_concept = "Accounts Receivable" if is_sale else "Accounts Payable"
        document.totals.insert(
            0, _keyed_total(main_concept, subtotal, profile.sales_account_key, main_side, gaps)
        )
        document.totals.append(
            _keyed_total(
                counterpart_concept,
                subtotal + taxes,
                profile.accounts_receivable_key,
                main_side.opposite,
                gaps,
            )
        )

        if (
            moves_inventory
            and profile.cost_ratio > 0
            and profile.cost_of_goods_sold_key
            and profile.inventory_key
        ):
            cost = round_money(subtotal * profile.cost_ratio)
            # Selling debits cost of goods sold; a credit note reverses it.
            cost_side = main_side.opposite
            document.totals.append(
                _keyed_total("Cost of Goods Sold", cost, profile.cost_of_goods_sold_key, cost_side, gaps)
            )
            document.totals.append(
                _keyed_total("Inventory Reduction", cost, profile.inventory_key, cost_side.opposite, gaps)
            )


def _keyed_total(
    concept: str,
    amount: Decimal,
    key: Optional[str],
    side: EntryType,
    gaps: list[ConfigurationGap],
) -> Total:
    if not key:
        gaps.append(_gap("document_profile_key", concept, f"No account key configured for '{concept}'"))
        return Total(concept=concept, amount=amount, include_in_transaction=False)
    if side is EntryType.DEBIT:
        return Total(concept=concept, amount=amount, debit_account_key=key, include_in_transaction=True)
    return Total(concept=concept, amount=amount, credit_account_key=key, include_in_transaction=True)


def _gap(kind: str, key: str, message: str) -> ConfigurationGap:
    return ConfigurationGap(kind=kind, key=key, message=message)
