"""CSV import and export of accounting configuration.

Every import returns ``(rows, errors)``. A row that fails to parse is
skipped and reported as ``"Line N: ..."`` (the header is line 1); the
remaining rows are still returned. Exports write the same columns the
imports read, so an exported file imports back to the same rows.
"""

import csv
import io
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

from taxledger.database.base import Database
from taxledger.domain.accounts import AccountService
from taxledger.domain.entities import (
    Account,
    AccountMappingEntry,
    AccountType,
    DocumentAccountingProfile,
    DocumentOperation,
    GroupMembership,
    GroupType,
    Tax,
    TaxAccountingProfile,
    TaxApplicationLevel,
    TaxRule,
    TaxType,
)
from taxledger.domain.errors import DomainError, ValidationError
from taxledger.utils.amount_parser import parse_amount
from taxledger.utils.money import ZERO

logger = logging.getLogger(__name__)

TAX_RULE_COLUMNS = [
    "TaxCode",
    "DocumentOperation",
    "BusinessEntityGroupCode",
    "ItemGroupCode",
    "IsEnabled",
    "Priority",
]
TAX_PROFILE_COLUMNS = [
    "TaxCode",
    "DocumentOperation",
    "DebitAccountCode",
    "CreditAccountCode",
    "AccountDescription",
    "IncludeInTransaction",
]
ACCOUNT_MAPPING_COLUMNS = ["LogicalName", "AccountCode", "Description"]
DOCUMENT_PROFILE_COLUMNS = [
    "DocumentOperation",
    "SalesAccountCode",
    "AccountsReceivableCode",
    "CostOfGoodsSoldAccountCode",
    "InventoryAccountCode",
    "CostRatio",
]
TAX_COLUMNS = [
    "Code",
    "Name",
    "TaxType",
    "ApplicationLevel",
    "Percentage",
    "Amount",
    "IsEnabled",
    "Compounds",
]
GROUP_MEMBERSHIP_COLUMNS = ["GroupId", "EntityCode", "GroupType"]
ACCOUNT_COLUMNS = ["Code", "Name", "AccountType", "ParentCode"]

_TRUE_VALUES = {"true", "yes", "y", "1"}
_FALSE_VALUES = {"false", "no", "n", "0"}


def _text(row: dict[str, Any], column: str) -> str:
    value = row.get(column)
    return value.strip() if value else ""


def _optional(row: dict[str, Any], column: str) -> Optional[str]:
    return _text(row, column) or None


def _required(row: dict[str, Any], column: str) -> str:
    value = _text(row, column)
    if not value:
        raise ValueError(f"{column} is required")
    return value


def _bool(row: dict[str, Any], column: str, default: bool) -> bool:
    value = _text(row, column).lower()
    if not value:
        return default
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid {column} '{row.get(column)}'. Use true or false")


def _decimal(row: dict[str, Any], column: str):
    value = _text(row, column)
    if not value:
        return ZERO
    return parse_amount(value, allow_negative=False)


def _format_bool(value: bool) -> str:
    return "true" if value else "false"


class ConfigurationCSVService:
    """Parses and writes configuration CSV text. Holds no state."""

    def _parse(
        self,
        content: str,
        required_columns: list[str],
        parse_row: Callable[[dict[str, Any]], Any],
    ) -> tuple[list[Any], list[str]]:
        reader = csv.DictReader(io.StringIO(content.lstrip("\ufeff")))
        if reader.fieldnames is None:
            return [], ["Line 1: File is empty"]
        headers = {name.strip() for name in reader.fieldnames if name}
        missing = [column for column in required_columns if column not in headers]
        if missing:
            return [], [f"Line 1: Missing required columns: {', '.join(missing)}"]

        rows = []
        errors = []
        for raw in reader:
            line_number = reader.line_num
            row = {key.strip(): value for key, value in raw.items() if key}
            if not any(_text(row, column) for column in row):
                continue
            try:
                rows.append(parse_row(row))
            except ValueError as e:
                errors.append(f"Line {line_number}: {e}")
        return rows, errors

    @staticmethod
    def _write(columns: list[str], rows: list[list[Any]]) -> str:
        output = io.StringIO()
        writer = csv.writer(output, lineterminator="\n")
        writer.writerow(columns)
        for row in rows:
            writer.writerow(["" if value is None else value for value in row])
        return output.getvalue()

    # Tax rules
    def import_tax_rules(self, content: str) -> tuple[list[TaxRule], list[str]]:
        """Parse tax rules. Rule ids follow file order, starting at 1."""
        def parse_row(row: dict[str, Any]) -> TaxRule:
            priority_text = _text(row, "Priority")
            try:
                priority = int(priority_text) if priority_text else 1
            except ValueError:
                raise ValueError(f"Invalid Priority '{priority_text}'")
            return TaxRule(
                id=0,
                tax_code=_required(row, "TaxCode"),
                document_operation=DocumentOperation.parse(_required(row, "DocumentOperation")),
                business_entity_group_id=_optional(row, "BusinessEntityGroupCode"),
                item_group_id=_optional(row, "ItemGroupCode"),
                is_enabled=_bool(row, "IsEnabled", True),
                priority=priority,
            )

        rules, errors = self._parse(content, ["TaxCode", "DocumentOperation"], parse_row)
        return [replace(rule, id=index) for index, rule in enumerate(rules, start=1)], errors

    def export_tax_rules(self, rules: list[TaxRule]) -> str:
        return self._write(
            TAX_RULE_COLUMNS,
            [
                [
                    rule.tax_code,
                    rule.document_operation.value,
                    rule.business_entity_group_id,
                    rule.item_group_id,
                    _format_bool(rule.is_enabled),
                    rule.priority,
                ]
                for rule in rules
            ],
        )

    # Tax accounting profiles
    def import_tax_accounting_profiles(
        self, content: str
    ) -> tuple[list[TaxAccountingProfile], list[str]]:
        """Parse tax accounting profiles. Each row needs a debit or credit key."""

        def parse_row(row: dict[str, Any]) -> TaxAccountingProfile:
            debit = _optional(row, "DebitAccountCode")
            credit = _optional(row, "CreditAccountCode")
            if debit is None and credit is None:
                raise ValueError("DebitAccountCode or CreditAccountCode is required")
            return TaxAccountingProfile(
                tax_code=_required(row, "TaxCode"),
                document_operation=DocumentOperation.parse(_required(row, "DocumentOperation")),
                debit_account_key=debit,
                credit_account_key=credit,
                account_description=_optional(row, "AccountDescription"),
                include_in_transaction=_bool(row, "IncludeInTransaction", True),
            )

        return self._parse(content, ["TaxCode", "DocumentOperation"], parse_row)

    def export_tax_accounting_profiles(self, profiles: list[TaxAccountingProfile]) -> str:
        return self._write(
            TAX_PROFILE_COLUMNS,
            [
                [
                    profile.tax_code,
                    profile.document_operation.value,
                    profile.debit_account_key,
                    profile.credit_account_key,
                    profile.account_description,
                    _format_bool(profile.include_in_transaction),
                ]
                for profile in profiles
            ],
        )

    # Account mappings
    def import_account_mappings(
        self, content: str, existing_names: Iterable[str] = ()
    ) -> tuple[list[AccountMappingEntry], list[str]]:
        """Parse account mappings.

        A LogicalName repeated in the file, or already present in
        ``existing_names``, is an error (compared case-insensitively); the
        first occurrence is kept.
        """
        seen = {name.upper() for name in existing_names}

        def parse_row(row: dict[str, Any]) -> AccountMappingEntry:
            logical_name = _required(row, "LogicalName")
            if logical_name.upper() in seen:
                raise ValueError(f"Duplicate LogicalName '{logical_name}'")
            entry = AccountMappingEntry(
                logical_name=logical_name,
                account_code=_required(row, "AccountCode"),
                description=_optional(row, "Description"),
            )
            seen.add(logical_name.upper())
            return entry

        return self._parse(content, ["LogicalName", "AccountCode"], parse_row)

    def export_account_mappings(self, entries: list[AccountMappingEntry]) -> str:
        return self._write(
            ACCOUNT_MAPPING_COLUMNS,
            [[entry.logical_name, entry.account_code, entry.description] for entry in entries],
        )

    # Document accounting profiles
    def import_document_accounting_profiles(
        self, content: str
    ) -> tuple[list[DocumentAccountingProfile], list[str]]:
        def parse_row(row: dict[str, Any]) -> DocumentAccountingProfile:
            return DocumentAccountingProfile(
                document_operation=DocumentOperation.parse(_required(row, "DocumentOperation")),
                sales_account_key=_optional(row, "SalesAccountCode"),
                accounts_receivable_key=_optional(row, "AccountsReceivableCode"),
                cost_of_goods_sold_key=_optional(row, "CostOfGoodsSoldAccountCode"),
                inventory_key=_optional(row, "InventoryAccountCode"),
                cost_ratio=_decimal(row, "CostRatio"),
            )

        return self._parse(content, ["DocumentOperation"], parse_row)

    def export_document_accounting_profiles(self, profiles: list[DocumentAccountingProfile]) -> str:
        return self._write(
            DOCUMENT_PROFILE_COLUMNS,
            [
                [
                    profile.document_operation.value,
                    profile.sales_account_key,
                    profile.accounts_receivable_key,
                    profile.cost_of_goods_sold_key,
                    profile.inventory_key,
                    profile.cost_ratio,
                ]
                for profile in profiles
            ],
        )

    # Taxes
    def import_taxes(self, content: str) -> tuple[list[Tax], list[str]]:
        def parse_row(row: dict[str, Any]) -> Tax:
            tax_type = _text(row, "TaxType")
            level = _text(row, "ApplicationLevel")
            return Tax(
                code=_required(row, "Code"),
                name=_required(row, "Name"),
                tax_type=TaxType.parse(tax_type) if tax_type else TaxType.PERCENTAGE,
                application_level=TaxApplicationLevel.parse(level) if level else TaxApplicationLevel.LINE,
                percentage=_decimal(row, "Percentage"),
                amount=_decimal(row, "Amount"),
                is_enabled=_bool(row, "IsEnabled", True),
                compounds=_bool(row, "Compounds", False),
            )

        return self._parse(content, ["Code", "Name"], parse_row)

    def export_taxes(self, taxes: list[Tax]) -> str:
        return self._write(
            TAX_COLUMNS,
            [
                [
                    tax.code,
                    tax.name,
                    tax.tax_type.value,
                    tax.application_level.value,
                    tax.percentage,
                    tax.amount,
                    _format_bool(tax.is_enabled),
                    _format_bool(tax.compounds),
                ]
                for tax in taxes
            ],
        )

    # Group memberships
    def import_group_memberships(self, content: str) -> tuple[list[GroupMembership], list[str]]:
        def parse_row(row: dict[str, Any]) -> GroupMembership:
            return GroupMembership(
                group_id=_required(row, "GroupId"),
                entity_code=_required(row, "EntityCode"),
                group_type=GroupType.parse(_required(row, "GroupType")),
            )

        return self._parse(content, GROUP_MEMBERSHIP_COLUMNS, parse_row)

    def export_group_memberships(self, memberships: list[GroupMembership]) -> str:
        return self._write(
            GROUP_MEMBERSHIP_COLUMNS,
            [[m.group_id, m.entity_code, m.group_type.value] for m in memberships],
        )

    # Chart of accounts
    def import_accounts(self, content: str) -> tuple[list[Account], list[str]]:
        def parse_row(row: dict[str, Any]) -> Account:
            return Account(
                code=_required(row, "Code"),
                name=_required(row, "Name"),
                account_type=AccountType.parse(_required(row, "AccountType")),
                parent_code=_optional(row, "ParentCode"),
            )

        return self._parse(content, ["Code", "Name", "AccountType"], parse_row)

    def export_accounts(self, accounts: list[Account]) -> str:
        return self._write(
            ACCOUNT_COLUMNS,
            [
                [account.code, account.name, account.account_type.value, account.parent_code]
                for account in accounts
            ],
        )


CONFIG_KINDS = (
    "accounts",
    "taxes",
    "tax-rules",
    "group-memberships",
    "tax-profiles",
    "document-profiles",
    "account-mappings",
)


class ConfigurationImportService:
    """Loads configuration CSV files into the database and exports it back."""

    def __init__(self, db: Database):
        """Initialize configuration import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.csv = ConfigurationCSVService()
        self.account_service = AccountService(db)

    def import_file(self, kind: str, csv_file_path: str) -> dict[str, Any]:
        """Import one configuration file.

        Rows that parse are stored even when other rows fail.

        Args:
            kind: One of CONFIG_KINDS
            csv_file_path: Path to CSV file

        Returns:
            Dict with import statistics:
            - imported: number of rows stored
            - errors: list of error messages

        Raises:
            ValidationError: If kind is unknown
            FileNotFoundError: If CSV file doesn't exist
        """
        path = Path(csv_file_path)
        if not path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")
        with open(path, "r", encoding="utf-8-sig", newline="") as f:
            content = f.read()
        return self.import_text(kind, content)

    def import_text(self, kind: str, content: str) -> dict[str, Any]:
        """Import configuration from CSV text. See import_file."""
        if kind == "accounts":
            rows, errors = self.csv.import_accounts(content)
            store = self._store_account
        elif kind == "taxes":
            rows, errors = self.csv.import_taxes(content)
            store = self.db.save_tax
        elif kind == "tax-rules":
            rows, errors = self.csv.import_tax_rules(content)
            store = self.db.create_tax_rule
        elif kind == "group-memberships":
            rows, errors = self.csv.import_group_memberships(content)
            store = self.db.add_group_membership
        elif kind == "tax-profiles":
            rows, errors = self.csv.import_tax_accounting_profiles(content)
            store = self.db.save_tax_accounting_profile
        elif kind == "document-profiles":
            rows, errors = self.csv.import_document_accounting_profiles(content)
            store = self.db.save_document_accounting_profile
        elif kind == "account-mappings":
            rows, errors = self.csv.import_account_mappings(
                content, [entry.logical_name for entry in self.db.list_account_mappings()]
            )
            store = self.db.save_account_mapping
        else:
            raise ValidationError(
                f"Unknown configuration kind '{kind}'. Must be one of: {', '.join(CONFIG_KINDS)}"
            )

        imported = 0
        for row in rows:
            try:
                store(row)
            except DomainError as e:
                errors.append(str(e))
                continue
            imported += 1

        logger.info("Imported %d %s rows (%d errors)", imported, kind, len(errors))
        for error in errors:
            logger.warning("%s import: %s", kind, error)
        return {"imported": imported, "errors": errors}

    def _store_account(self, account: Account) -> None:
        self.account_service.create_account(
            code=account.code,
            name=account.name,
            account_type=account.account_type,
            parent_code=account.parent_code,
        )

    def export(self, kind: str) -> str:
        """Export stored configuration of one kind as CSV text.

        Raises:
            ValidationError: If kind is unknown
        """
        if kind == "accounts":
            return self.csv.export_accounts(self.db.list_accounts())
        if kind == "taxes":
            return self.csv.export_taxes(self.db.list_taxes())
        if kind == "tax-rules":
            return self.csv.export_tax_rules(self.db.list_tax_rules())
        if kind == "group-memberships":
            return self.csv.export_group_memberships(self.db.list_group_memberships())
        if kind == "tax-profiles":
            return self.csv.export_tax_accounting_profiles(self.db.list_tax_accounting_profiles())
        if kind == "document-profiles":
            return self.csv.export_document_accounting_profiles(
                self.db.list_document_accounting_profiles()
            )
        if kind == "account-mappings":
            return self.csv.export_account_mappings(self.db.list_account_mappings())
        raise ValidationError(
            f"Unknown configuration kind '{kind}'. Must be one of: {', '.join(CONFIG_KINDS)}"
        )
