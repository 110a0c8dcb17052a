"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from taxledger.domain.entities import (
    Account,
    AccountMappingEntry,
    AccountType,
    DocumentAccountingProfile,
    FiscalPeriod,
    FiscalPeriodStatus,
    GroupMembership,
    Sequence,
    Tax,
    TaxAccountingProfile,
    TaxRule,
    Transaction,
)


class Database(ABC):
    """Abstract database interface for taxledger."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Chart of accounts
    @abstractmethod
    def create_account(
        self, code: str, name: str, account_type: AccountType, parent_code: Optional[str] = None
    ) -> None:
        """Create an account."""
        pass

    @abstractmethod
    def get_account(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(self, include_archived: bool = True) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def set_account_archived(self, code: str, is_archived: bool) -> None:
        """Archive or restore an account."""
        pass

    # Taxes and tax rules
    @abstractmethod
    def save_tax(self, tax: Tax) -> None:
        """Create or replace a tax definition."""
        pass

    @abstractmethod
    def list_taxes(self) -> list[Tax]:
        """List all taxes."""
        pass

    @abstractmethod
    def create_tax_rule(self, rule: TaxRule) -> int:
        """Store a tax rule. The rule's id is ignored. Returns the new rule ID."""
        pass

    @abstractmethod
    def list_tax_rules(self) -> list[TaxRule]:
        """List tax rules in declaration (id) order."""
        pass

    @abstractmethod
    def add_group_membership(self, membership: GroupMembership) -> None:
        """Add a group membership. Existing identical memberships are kept once."""
        pass

    @abstractmethod
    def list_group_memberships(self) -> list[GroupMembership]:
        """List all group memberships."""
        pass

    # Accounting profiles and mappings
    @abstractmethod
    def save_tax_accounting_profile(self, profile: TaxAccountingProfile) -> None:
        """Create or replace the profile for (operation, tax code)."""
        pass

    @abstractmethod
    def list_tax_accounting_profiles(self) -> list[TaxAccountingProfile]:
        """List all tax accounting profiles."""
        pass

    @abstractmethod
    def save_document_accounting_profile(self, profile: DocumentAccountingProfile) -> None:
        """Create or replace the profile for an operation."""
        pass

    @abstractmethod
    def list_document_accounting_profiles(self) -> list[DocumentAccountingProfile]:
        """List all document accounting profiles."""
        pass

    @abstractmethod
    def save_account_mapping(self, entry: AccountMappingEntry) -> None:
        """Create or replace the mapping for a logical name, matched case-insensitively."""
        pass

    @abstractmethod
    def list_account_mappings(self) -> list[AccountMappingEntry]:
        """List account mappings ordered by logical name."""
        pass

    # Fiscal periods
    @abstractmethod
    def create_fiscal_period(self, period: FiscalPeriod) -> None:
        """Create a fiscal period."""
        pass

    @abstractmethod
    def get_fiscal_period(self, code: str) -> Optional[FiscalPeriod]:
        """Get fiscal period by code."""
        pass

    @abstractmethod
    def get_fiscal_period_for_date(self, value: date) -> Optional[FiscalPeriod]:
        """Get the fiscal period whose date range contains the date."""
        pass

    @abstractmethod
    def list_fiscal_periods(self) -> list[FiscalPeriod]:
        """List fiscal periods ordered by start date."""
        pass

    @abstractmethod
    def update_fiscal_period_status(self, code: str, status: FiscalPeriodStatus) -> None:
        """Update fiscal period status."""
        pass

    # Sequences
    @abstractmethod
    def get_sequence(self, code: str) -> Optional[Sequence]:
        """Get sequence by code."""
        pass

    @abstractmethod
    def save_sequence(self, sequence: Sequence) -> None:
        """Create or replace a sequence."""
        pass

    @abstractmethod
    def increment_sequence(self, code: str) -> int:
        """Advance a sequence by one and return the new current number."""
        pass

    # Transactions
    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> int:
        """Store a transaction with its ledger entries in a single commit.

        A transaction without an id is inserted; one with an id has its
        header (number, posted flag, posting time) updated. Returns the
        transaction ID.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID, with its ledger entries."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        posted_only: bool = False,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Transaction]:
        """List transactions with their entries, ordered by date then ID."""
        pass
