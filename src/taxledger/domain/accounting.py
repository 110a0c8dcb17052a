"""Posting of transactions into open fiscal periods."""

import logging
from dataclasses import replace
from datetime import UTC, date, datetime
from typing import Optional

from taxledger.database.base import Database
from taxledger.domain.entities import Transaction
from taxledger.domain.errors import (
    AlreadyPostedError,
    InvalidAccountError,
    PeriodUnavailableError,
    PostingErrorKind,
    UnbalancedTransactionError,
    no_period_for_date,
    period_closed,
)
from taxledger.domain.sequencer import TRANSACTION_SEQUENCE, SequencerService

logger = logging.getLogger(__name__)


def transaction_ref(transaction: Transaction) -> str:
    """Human readable reference used in posting errors and logs."""
    if transaction.number:
        return transaction.number
    if transaction.id is not None:
        return f"#{transaction.id}"
    if transaction.document_code:
        return f"for document {transaction.document_code}"
    return f"'{transaction.description}'"


class AccountingModule:
    """Validates and posts transactions.

    Posting assumes a single writer; two callers posting the same
    transaction concurrently are not detected.
    """

    def __init__(self, db: Database, sequencer: Optional[SequencerService] = None):
        self.db = db
        self.sequencer = sequencer or SequencerService(db)

    def is_date_in_open_fiscal_period(self, value: date) -> bool:
        period = self.db.get_fiscal_period_for_date(value)
        return period is not None and period.is_open

    def validate_for_posting(self, transaction: Transaction) -> None:
        """Run every posting precondition without writing anything.

        Raises:
            AlreadyPostedError: If the transaction (or its stored copy) is posted
            UnbalancedTransactionError: If debits and credits differ by 0.01 or more
            PeriodUnavailableError: If no period covers the date or it is closed
            InvalidAccountError: If an entry's account is unknown or archived
        """
        ref = transaction_ref(transaction)

        if transaction.is_posted:
            raise AlreadyPostedError(ref)
        if transaction.id is not None:
            stored = self.db.get_transaction(transaction.id)
            if stored is not None and stored.is_posted:
                raise AlreadyPostedError(ref)

        if not transaction.is_balanced:
            raise UnbalancedTransactionError(ref, transaction.total_debits, transaction.total_credits)

        period = self.db.get_fiscal_period_for_date(transaction.date)
        if period is None:
            raise PeriodUnavailableError(
                no_period_for_date(ref, transaction.date), PostingErrorKind.NO_PERIOD, ref
            )
        if not period.is_open:
            raise PeriodUnavailableError(
                period_closed(ref, period.name), PostingErrorKind.PERIOD_CLOSED, ref
            )

        for code in sorted({entry.account_code for entry in transaction.ledger_entries}):
            account = self.db.get_account(code)
            if account is None:
                raise InvalidAccountError(ref, code, "account does not exist")
            if account.is_archived:
                raise InvalidAccountError(ref, code, "account is archived")

    def post_transaction(self, transaction: Transaction) -> Transaction:
        """Post a transaction.

        On success the transaction is numbered, marked posted and stored
        together with its ledger entries. On failure nothing is written and
        the transaction is left untouched.

        Args:
            transaction: Transaction to post (new or previously saved unposted)

        Returns:
            The same transaction, now posted

        Raises:
            PostingError: If any precondition fails (see validate_for_posting)
        """
        self.validate_for_posting(transaction)

        number = self.sequencer.next_number(TRANSACTION_SEQUENCE.code)
        posted = replace(
            transaction,
            number=number,
            is_posted=True,
            posted_at=datetime.now(UTC),
        )
        transaction_id = self.db.save_transaction(posted)

        transaction.id = transaction_id
        transaction.number = posted.number
        transaction.is_posted = True
        transaction.posted_at = posted.posted_at

        logger.info(
            "Posted transaction %s (id %s) dated %s: %d entries, %s debits / %s credits",
            number,
            transaction_id,
            transaction.date,
            len(transaction.ledger_entries),
            transaction.total_debits,
            transaction.total_credits,
        )
        return transaction
