"""Generation of ledger entries from document totals."""

import logging

from taxledger.domain.account_mapping import AccountMapping, Missing
from taxledger.domain.entities import Document, EntryType, LedgerEntry, Total, Transaction
from taxledger.domain.errors import ConfigurationError, unresolved_account_keys

logger = logging.getLogger(__name__)


class TransactionGenerator:
    """Turns a document's totals into a transaction.

    Only totals flagged ``include_in_transaction`` are used. Each logical
    account key on a total becomes one ledger entry, in totals order and
    debit before credit within a total. Output depends only on the document
    and the mapping.
    """

    def __init__(self, account_mapping: AccountMapping):
        self.account_mapping = account_mapping

    def generate_transaction(self, document: Document) -> tuple[Transaction, list[LedgerEntry]]:
        """Generate the transaction for a document.

        Args:
            document: Document whose totals have been calculated

        Returns:
            Tuple of (transaction, ledger entries). An unbalanced result is
            still returned, with ``is_postable`` set to False.

        Raises:
            ConfigurationError: If any account key cannot be resolved. No
                entries are produced in that case.
        """
        totals = [total for total in document.totals if total.include_in_transaction]
        self._check_keys(document, totals)

        entries = []
        for total in totals:
            entries.extend(self._entries_for_total(total))

        transaction = Transaction(
            document_code=document.code,
            date=document.date,
            description=self._describe(document),
            ledger_entries=entries,
        )
        if not transaction.is_balanced:
            transaction.is_postable = False
            logger.warning(
                "Generated transaction for document %s is not balanced (debits %s, credits %s)",
                document.code,
                transaction.total_debits,
                transaction.total_credits,
            )
        else:
            logger.debug(
                "Generated %d entries for document %s totalling %s",
                len(entries),
                document.code,
                transaction.total_debits,
            )
        return transaction, entries

    def _check_keys(self, document: Document, totals: list[Total]) -> None:
        missing = []
        for total in totals:
            if not total.debit_account_key and not total.credit_account_key:
                raise ConfigurationError(
                    f"Total '{total.concept}' of document {document.code} is included "
                    "in the transaction but has no account key"
                )
            for key in (total.debit_account_key, total.credit_account_key):
                if key and isinstance(self.account_mapping.resolve(key), Missing) and key not in missing:
                    missing.append(key)
        if missing:
            raise ConfigurationError(unresolved_account_keys(missing))

    def _entries_for_total(self, total: Total) -> list[LedgerEntry]:
        if total.amount == 0:
            return []
        entries = []
        for key, side in (
            (total.debit_account_key, EntryType.DEBIT),
            (total.credit_account_key, EntryType.CREDIT),
        ):
            if not key:
                continue
            # A negative total posts to the opposite side.
            entry_type = side if total.amount > 0 else side.opposite
            entries.append(
                LedgerEntry(
                    account_code=self.account_mapping.require(key),
                    entry_type=entry_type,
                    amount=abs(total.amount),
                    description=total.concept,
                )
            )
        return entries

    @staticmethod
    def _describe(document: Document) -> str:
        if document.description:
            return document.description
        return f"{document.operation.value} {document.code}"
