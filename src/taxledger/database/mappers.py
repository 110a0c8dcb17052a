"""Mapper functions to convert between domain models and SQLAlchemy models.

Enum columns are stored as their string values; the mappers parse them back
into the domain enums.
"""

from decimal import Decimal

from taxledger.domain import entities as domain
from taxledger.database.models import (
    Account as ORMAccount,
    AccountMapping as ORMAccountMapping,
    DocumentAccountingProfile as ORMDocumentAccountingProfile,
    FiscalPeriod as ORMFiscalPeriod,
    GroupMembership as ORMGroupMembership,
    LedgerEntry as ORMLedgerEntry,
    Sequence as ORMSequence,
    Tax as ORMTax,
    TaxAccountingProfile as ORMTaxAccountingProfile,
    TaxRule as ORMTaxRule,
    Transaction as ORMTransaction,
)


def _decimal(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType.parse(orm_account.account_type),
        parent_code=orm_account.parent_code,
        is_archived=orm_account.is_archived,
    )


def tax_to_domain(orm_tax: ORMTax) -> domain.Tax:
    """Convert SQLAlchemy Tax model to domain Tax entity."""
    return domain.Tax(
        code=orm_tax.code,
        name=orm_tax.name,
        tax_type=domain.TaxType.parse(orm_tax.tax_type),
        application_level=domain.TaxApplicationLevel.parse(orm_tax.application_level),
        percentage=_decimal(orm_tax.percentage),
        amount=_decimal(orm_tax.amount),
        is_enabled=orm_tax.is_enabled,
        compounds=orm_tax.compounds,
    )


def tax_rule_to_domain(orm_rule: ORMTaxRule) -> domain.TaxRule:
    """Convert SQLAlchemy TaxRule model to domain TaxRule entity."""
    return domain.TaxRule(
        id=orm_rule.id,
        tax_code=orm_rule.tax_code,
        document_operation=domain.DocumentOperation.parse(orm_rule.document_operation),
        business_entity_group_id=orm_rule.business_entity_group_id,
        item_group_id=orm_rule.item_group_id,
        is_enabled=orm_rule.is_enabled,
        priority=orm_rule.priority,
    )


def group_membership_to_domain(orm_membership: ORMGroupMembership) -> domain.GroupMembership:
    return domain.GroupMembership(
        group_id=orm_membership.group_id,
        entity_code=orm_membership.entity_code,
        group_type=domain.GroupType.parse(orm_membership.group_type),
    )


def tax_accounting_profile_to_domain(
    orm_profile: ORMTaxAccountingProfile,
) -> domain.TaxAccountingProfile:
    return domain.TaxAccountingProfile(
        tax_code=orm_profile.tax_code,
        document_operation=domain.DocumentOperation.parse(orm_profile.document_operation),
        debit_account_key=orm_profile.debit_account_key,
        credit_account_key=orm_profile.credit_account_key,
        account_description=orm_profile.account_description,
        include_in_transaction=orm_profile.include_in_transaction,
    )


def document_accounting_profile_to_domain(
    orm_profile: ORMDocumentAccountingProfile,
) -> domain.DocumentAccountingProfile:
    return domain.DocumentAccountingProfile(
        document_operation=domain.DocumentOperation.parse(orm_profile.document_operation),
        sales_account_key=orm_profile.sales_account_key,
        accounts_receivable_key=orm_profile.accounts_receivable_key,
        cost_of_goods_sold_key=orm_profile.cost_of_goods_sold_key,
        inventory_key=orm_profile.inventory_key,
        cost_ratio=_decimal(orm_profile.cost_ratio),
    )


def account_mapping_to_domain(orm_mapping: ORMAccountMapping) -> domain.AccountMappingEntry:
    return domain.AccountMappingEntry(
        logical_name=orm_mapping.logical_name,
        account_code=orm_mapping.account_code,
        description=orm_mapping.description,
    )


def fiscal_period_to_domain(orm_period: ORMFiscalPeriod) -> domain.FiscalPeriod:
    """Convert SQLAlchemy FiscalPeriod model to domain FiscalPeriod entity."""
    return domain.FiscalPeriod(
        code=orm_period.code,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
        status=domain.FiscalPeriodStatus.parse(orm_period.status),
        description=orm_period.description,
    )


def sequence_to_domain(orm_sequence: ORMSequence) -> domain.Sequence:
    return domain.Sequence(
        code=orm_sequence.code,
        name=orm_sequence.name,
        prefix=orm_sequence.prefix,
        suffix=orm_sequence.suffix,
        current_number=orm_sequence.current_number,
        padding_length=orm_sequence.padding_length,
        padding_char=orm_sequence.padding_char,
        is_active=orm_sequence.is_active,
    )


def ledger_entry_to_domain(orm_entry: ORMLedgerEntry) -> domain.LedgerEntry:
    """Convert SQLAlchemy LedgerEntry model to domain LedgerEntry entity."""
    return domain.LedgerEntry(
        id=orm_entry.id,
        transaction_id=orm_entry.transaction_id,
        account_code=orm_entry.account_code,
        entry_type=domain.EntryType.parse(orm_entry.entry_type),
        amount=_decimal(orm_entry.amount),
        description=orm_entry.description,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model, with its entries, to a domain Transaction."""
    return domain.Transaction(
        id=orm_transaction.id,
        document_code=orm_transaction.document_code,
        date=orm_transaction.date,
        description=orm_transaction.description,
        number=orm_transaction.number,
        is_posted=orm_transaction.is_posted,
        posted_at=orm_transaction.posted_at,
        ledger_entries=[ledger_entry_to_domain(entry) for entry in orm_transaction.ledger_entries],
    )
