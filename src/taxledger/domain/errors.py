"""Shared domain error messages and error types."""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ConfigurationError(DomainError):
    """Configuration is missing something generation cannot proceed without."""


class PostingErrorKind(str, Enum):
    UNBALANCED = "Unbalanced"
    NO_PERIOD = "NoPeriod"
    PERIOD_CLOSED = "PeriodClosed"
    ALREADY_POSTED = "AlreadyPosted"
    INVALID_ACCOUNT = "InvalidAccount"


class PostingError(DomainError):
    """A transaction failed a posting precondition. Nothing was written."""

    kind: PostingErrorKind

    def __init__(self, message: str, kind: PostingErrorKind, transaction_ref: Optional[str] = None):
        super().__init__(message)
        self.kind = kind
        self.transaction_ref = transaction_ref


class UnbalancedTransactionError(PostingError):
    def __init__(self, transaction_ref: str, debits: Decimal, credits: Decimal):
        super().__init__(
            transaction_unbalanced(transaction_ref, debits, credits),
            PostingErrorKind.UNBALANCED,
            transaction_ref,
        )
        self.debits = debits
        self.credits = credits


class PeriodUnavailableError(PostingError):
    """No fiscal period covers the date, or the covering period is closed."""


class AlreadyPostedError(PostingError):
    def __init__(self, transaction_ref: str):
        super().__init__(
            f"Transaction {transaction_ref} is already posted",
            PostingErrorKind.ALREADY_POSTED,
            transaction_ref,
        )


class InvalidAccountError(PostingError):
    def __init__(self, transaction_ref: str, account_code: str, reason: str):
        super().__init__(
            f"Transaction {transaction_ref} cannot post to account {account_code}: {reason}",
            PostingErrorKind.INVALID_ACCOUNT,
            transaction_ref,
        )
        self.account_code = account_code


@dataclass(frozen=True)
class ConfigurationGap:
    """Non-fatal configuration gap found while building totals or entries.

    The financial amounts stay correct; only the accounting side is missing.
    """

    kind: str
    key: str
    message: str


def account_not_found(account_code: str) -> str:
    """Return message for missing account."""
    return f"Account {account_code} not found"


def fiscal_period_not_found(code: str) -> str:
    """Return message for missing fiscal period."""
    return f"Fiscal period '{code}' not found"


def no_period_for_date(transaction_ref: str, value: date) -> str:
    """Return message when no fiscal period covers a date."""
    return f"Cannot post transaction {transaction_ref}: no fiscal period covers {value.isoformat()}"


def period_closed(transaction_ref: str, period_name: str) -> str:
    """Return message when the covering fiscal period is closed."""
    return f"Cannot post transaction {transaction_ref}: fiscal period '{period_name}' is closed"


def transaction_unbalanced(transaction_ref: str, debits: Decimal, credits: Decimal) -> str:
    """Return message for a transaction whose debits and credits differ."""
    return (
        f"Transaction {transaction_ref} is not balanced. Debits: {debits}, "
        f"Credits: {credits}, Difference: {debits - credits}"
    )


def unresolved_account_keys(keys: list[str]) -> str:
    """Return message for logical account keys missing from the mapping."""
    return f"Account mapping not found for key{'s' if len(keys) != 1 else ''}: {', '.join(keys)}"
