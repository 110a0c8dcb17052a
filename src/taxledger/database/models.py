"""SQLAlchemy models for taxledger database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Account(Base):
    """Chart of accounts model."""

    __tablename__ = "accounts"

    code = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    account_type = Column(String, nullable=False)
    parent_code = Column(String, ForeignKey("accounts.code"), nullable=True)
    is_archived = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Tax(Base):
    """Tax definition model."""

    __tablename__ = "taxes"

    code = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    tax_type = Column(String, nullable=False)
    application_level = Column(String, nullable=False)
    percentage = Column(Numeric(9, 4), nullable=False, default=0)
    amount = Column(Numeric(18, 4), nullable=False, default=0)
    is_enabled = Column(Boolean, default=True, nullable=False)
    compounds = Column(Boolean, default=False, nullable=False)


class TaxRule(Base):
    """Tax rule model. The id gives declaration order."""

    __tablename__ = "tax_rules"

    id = Column(Integer, primary_key=True)
    tax_code = Column(String, nullable=False)
    document_operation = Column(String, nullable=False)
    business_entity_group_id = Column(String, nullable=True)
    item_group_id = Column(String, nullable=True)
    is_enabled = Column(Boolean, default=True, nullable=False)
    priority = Column(Integer, default=1, nullable=False)


class GroupMembership(Base):
    """Business entity or item membership in a group."""

    __tablename__ = "group_memberships"

    id = Column(Integer, primary_key=True)
    group_id = Column(String, nullable=False)
    entity_code = Column(String, nullable=False)
    group_type = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("group_id", "entity_code", "group_type", name="uq_group_membership"),
    )


class TaxAccountingProfile(Base):
    """Logical account keys for a tax within an operation."""

    __tablename__ = "tax_accounting_profiles"

    id = Column(Integer, primary_key=True)
    tax_code = Column(String, nullable=False)
    document_operation = Column(String, nullable=False)
    debit_account_key = Column(String, nullable=True)
    credit_account_key = Column(String, nullable=True)
    account_description = Column(String, nullable=True)
    include_in_transaction = Column(Boolean, default=True, nullable=False)

    __table_args__ = (
        UniqueConstraint("document_operation", "tax_code", name="uq_tax_profile_operation_tax"),
    )


class DocumentAccountingProfile(Base):
    """Default accounting keys for a document operation."""

    __tablename__ = "document_accounting_profiles"

    document_operation = Column(String, primary_key=True)
    sales_account_key = Column(String, nullable=True)
    accounts_receivable_key = Column(String, nullable=True)
    cost_of_goods_sold_key = Column(String, nullable=True)
    inventory_key = Column(String, nullable=True)
    cost_ratio = Column(Numeric(9, 4), nullable=False, default=0)


class AccountMapping(Base):
    """Logical account key to account code mapping."""

    __tablename__ = "account_mappings"

    logical_name = Column(String, primary_key=True)
    account_code = Column(String, nullable=False)
    description = Column(String, nullable=True)


class FiscalPeriod(Base):
    """Fiscal period model."""

    __tablename__ = "fiscal_periods"

    code = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    status = Column(String, nullable=False)
    description = Column(String, nullable=True)


class Sequence(Base):
    """Number sequence model."""

    __tablename__ = "sequences"

    code = Column(String, primary_key=True)
    name = Column(String, nullable=False)
    prefix = Column(String, default="", nullable=False)
    suffix = Column(String, default="", nullable=False)
    current_number = Column(Integer, default=0, nullable=False)
    padding_length = Column(Integer, default=4, nullable=False)
    padding_char = Column(String, default="0", nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)


class Transaction(Base):
    """General ledger transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    document_code = Column(String, nullable=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    number = Column(String, unique=True, nullable=True)
    is_posted = Column(Boolean, default=False, nullable=False)
    posted_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    ledger_entries = relationship(
        "LedgerEntry",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="LedgerEntry.id",
    )


class LedgerEntry(Base):
    """Ledger entry model."""

    __tablename__ = "ledger_entries"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    account_code = Column(String, ForeignKey("accounts.code"), nullable=False)
    entry_type = Column(String, nullable=False)
    amount = Column(Numeric(18, 2), nullable=False)
    description = Column(String, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="ledger_entries")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
