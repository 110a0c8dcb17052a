"""Domain model entities for taxledger.

These are plain data classes representing accounting concepts, independent of
the database schema. Configuration rows and persisted ledger rows are frozen;
documents, their lines and totals are mutable because the tax calculator
rebuilds them in place.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, TypeVar

from taxledger.utils.money import ZERO, amounts_equal

_E = TypeVar("_E", bound="_ParsableEnum")


class _ParsableEnum(str, Enum):
    """String enum parsed case-insensitively from its value or member name."""

    @classmethod
    def parse(cls: type[_E], value: "str | _E") -> _E:
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().replace("_", "").replace(" ", "").lower()
        for member in cls:
            if normalized in (member.value.lower(), member.name.replace("_", "").lower()):
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid {cls.__name__} '{value}'. Must be one of: {choices}")


class AccountType(_ParsableEnum):
    """Chart of accounts classification."""

    ASSET = "Asset"
    LIABILITY = "Liability"
    EQUITY = "Equity"
    REVENUE = "Revenue"
    EXPENSE = "Expense"


class EntryType(_ParsableEnum):
    """Side of a ledger entry."""

    DEBIT = "Debit"
    CREDIT = "Credit"

    @property
    def opposite(self) -> "EntryType":
        return EntryType.CREDIT if self is EntryType.DEBIT else EntryType.DEBIT


class TaxType(_ParsableEnum):
    """How a tax amount is calculated."""

    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "FixedAmount"
    AMOUNT_PER_UNIT = "AmountPerUnit"


class TaxApplicationLevel(_ParsableEnum):
    """Whether a tax applies to each line or once to the whole document."""

    LINE = "Line"
    DOCUMENT = "Document"


class GroupType(_ParsableEnum):
    """Kind of entity a group membership refers to."""

    BUSINESS_ENTITY = "BusinessEntity"
    ITEM = "Item"


class FiscalPeriodStatus(_ParsableEnum):
    OPEN = "Open"
    CLOSED = "Closed"


class DocumentOperation(_ParsableEnum):
    """Business operation a document represents."""

    PURCHASE_REQUISITION = "PurchaseRequisition"
    REQUEST_FOR_QUOTATION = "RequestForQuotation"
    PURCHASE_ORDER = "PurchaseOrder"
    GOODS_RECEIPT_NOTE = "GoodsReceiptNote"
    PURCHASE_INVOICE = "PurchaseInvoice"
    DEBIT_NOTE = "DebitNote"
    QUOTATION = "Quotation"
    SALES_ORDER = "SalesOrder"
    DELIVERY_NOTE = "DeliveryNote"
    SALES_INVOICE = "SalesInvoice"
    CREDIT_NOTE = "CreditNote"
    RECEIPT = "Receipt"


@dataclass(frozen=True)
class Account:
    """Chart of accounts entry."""

    code: str
    name: str
    account_type: AccountType
    parent_code: Optional[str] = None
    is_archived: bool = False


@dataclass(frozen=True)
class Tax:
    """Tax definition.

    ``percentage`` is expressed in percent (13 means 13%). ``amount`` is used by
    fixed and per-unit taxes. When ``compounds`` is set the taxable base of a
    line includes the taxes already computed on that line.
    """

    code: str
    name: str
    tax_type: TaxType = TaxType.PERCENTAGE
    application_level: TaxApplicationLevel = TaxApplicationLevel.LINE
    percentage: Decimal = ZERO
    amount: Decimal = ZERO
    is_enabled: bool = True
    compounds: bool = False


@dataclass(frozen=True)
class TaxRule:
    """Selects a tax for an operation, optionally scoped to entity/item groups.

    A ``None`` group id matches everything.
    """

    id: int
    tax_code: str
    document_operation: DocumentOperation
    business_entity_group_id: Optional[str] = None
    item_group_id: Optional[str] = None
    is_enabled: bool = True
    priority: int = 1


@dataclass(frozen=True)
class GroupMembership:
    """Links a business entity or item to a group."""

    group_id: str
    entity_code: str
    group_type: GroupType


@dataclass(frozen=True)
class TaxAccountingProfile:
    """Logical account keys used when a tax is posted for an operation."""

    tax_code: str
    document_operation: DocumentOperation
    debit_account_key: Optional[str] = None
    credit_account_key: Optional[str] = None
    account_description: Optional[str] = None
    include_in_transaction: bool = True


@dataclass(frozen=True)
class DocumentAccountingProfile:
    """Default accounting totals for a document operation."""

    document_operation: DocumentOperation
    sales_account_key: Optional[str] = None
    accounts_receivable_key: Optional[str] = None
    cost_of_goods_sold_key: Optional[str] = None
    inventory_key: Optional[str] = None
    cost_ratio: Decimal = ZERO


@dataclass(frozen=True)
class AccountMappingEntry:
    """Logical account key resolved to a chart of accounts code."""

    logical_name: str
    account_code: str
    description: Optional[str] = None


@dataclass(frozen=True)
class LineTax:
    """One tax computed on a document line."""

    tax_code: str
    tax_name: str
    base: Decimal
    amount: Decimal
    rule_id: Optional[int] = None


@dataclass
class DocumentLine:
    """Document line. ``amount`` defaults to quantity times unit price."""

    item_code: Optional[str]
    quantity: Decimal = Decimal("1")
    unit_price: Decimal = ZERO
    amount: Optional[Decimal] = None
    line_taxes: list[LineTax] = field(default_factory=list)

    def __post_init__(self):
        if self.amount is None:
            self.amount = self.quantity * self.unit_price

    @property
    def tax_amount(self) -> Decimal:
        return sum((tax.amount for tax in self.line_taxes), ZERO)


@dataclass
class Total:
    """Document total, optionally carrying the logical keys it posts to."""

    concept: str
    amount: Decimal
    debit_account_key: Optional[str] = None
    credit_account_key: Optional[str] = None
    include_in_transaction: bool = False
    tax_code: Optional[str] = None


@dataclass
class Document:
    """Business document with its lines and computed totals."""

    code: str
    operation: DocumentOperation
    date: date
    business_entity_code: Optional[str] = None
    document_type_code: Optional[str] = None
    description: Optional[str] = None
    lines: list[DocumentLine] = field(default_factory=list)
    totals: list[Total] = field(default_factory=list)

    @property
    def subtotal(self) -> Decimal:
        return sum((line.amount for line in self.lines), ZERO)


@dataclass(frozen=True)
class LedgerEntry:
    """One debit or credit against a single account.

    The amount is always positive; the side is carried by ``entry_type``.
    """

    account_code: str
    entry_type: EntryType
    amount: Decimal
    description: Optional[str] = None
    id: Optional[int] = None
    transaction_id: Optional[int] = None

    def __post_init__(self):
        if self.amount <= 0:
            raise ValueError(f"Ledger entry amount must be positive, got {self.amount}")


@dataclass
class Transaction:
    """Set of ledger entries representing one business event."""

    document_code: Optional[str]
    date: date
    description: str
    ledger_entries: list[LedgerEntry] = field(default_factory=list)
    id: Optional[int] = None
    number: Optional[str] = None
    is_posted: bool = False
    is_postable: bool = True
    posted_at: Optional[datetime] = None

    @property
    def total_debits(self) -> Decimal:
        return sum(
            (e.amount for e in self.ledger_entries if e.entry_type is EntryType.DEBIT), ZERO
        )

    @property
    def total_credits(self) -> Decimal:
        return sum(
            (e.amount for e in self.ledger_entries if e.entry_type is EntryType.CREDIT), ZERO
        )

    @property
    def is_balanced(self) -> bool:
        return amounts_equal(self.total_debits, self.total_credits)


@dataclass(frozen=True)
class FiscalPeriod:
    """Date range (inclusive) in which transactions may be posted."""

    code: str
    name: str
    start_date: date
    end_date: date
    status: FiscalPeriodStatus = FiscalPeriodStatus.OPEN
    description: Optional[str] = None

    def contains(self, value: date) -> bool:
        return self.start_date <= value <= self.end_date

    @property
    def is_open(self) -> bool:
        return self.status is FiscalPeriodStatus.OPEN


@dataclass(frozen=True)
class Sequence:
    """Named number sequence used for transaction numbers."""

    code: str
    name: str
    prefix: str = ""
    suffix: str = ""
    current_number: int = 0
    padding_length: int = 4
    padding_char: str = "0"
    is_active: bool = True
