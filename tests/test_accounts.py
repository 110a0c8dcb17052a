"""Tests for chart of accounts service."""

import pytest

from taxledger.domain.accounts import AccountValidator
from taxledger.domain.entities import AccountType
from taxledger.domain.errors import ConflictError, NotFoundError, ValidationError


@pytest.mark.parametrize(
    "code,account_type",
    [
        ("1000", AccountType.ASSET),
        ("2100", AccountType.LIABILITY),
        ("3000", AccountType.EQUITY),
        ("4100", AccountType.REVENUE),
        ("6100", AccountType.EXPENSE),
    ],
)
def test_validator_accepts_type_prefix(code, account_type):
    assert AccountValidator().is_valid(code, account_type)


def test_validator_reports_every_problem():
    errors = AccountValidator().validate("41A0", AccountType.EXPENSE)

    assert errors == [
        "Account code '41A0' must contain only digits",
        "Expense account code '41A0' must start with 6",
    ]


def test_create_account(account_service):
    account = account_service.create_account("1100", "Accounts Receivable", AccountType.ASSET)

    assert account.code == "1100"
    assert account.name == "Accounts Receivable"
    assert account.account_type is AccountType.ASSET
    assert not account.is_archived


def test_create_account_with_parent(account_service):
    account_service.create_account("1000", "Current assets", AccountType.ASSET)
    child = account_service.create_account("1100", "Receivables", AccountType.ASSET, parent_code="1000")

    assert child.parent_code == "1000"


def test_create_account_with_unknown_parent(account_service):
    with pytest.raises(NotFoundError):
        account_service.create_account("1100", "Receivables", AccountType.ASSET, parent_code="1000")


def test_create_account_with_wrong_prefix(account_service):
    with pytest.raises(ValidationError, match="must start with 4"):
        account_service.create_account("6100", "Sales", AccountType.REVENUE)


def test_create_duplicate_account(account_service):
    account_service.create_account("4100", "Sales", AccountType.REVENUE)

    with pytest.raises(ConflictError, match="already exists"):
        account_service.create_account("4100", "Other sales", AccountType.REVENUE)


def test_archive_account(account_service):
    account_service.create_account("4100", "Sales", AccountType.REVENUE)
    account_service.create_account("4200", "Services", AccountType.REVENUE)

    account_service.archive_account("4100")

    assert account_service.get_account("4100").is_archived
    assert [a.code for a in account_service.list_accounts(include_archived=False)] == ["4200"]
    assert [a.code for a in account_service.list_accounts()] == ["4100", "4200"]


def test_archive_unknown_account(account_service):
    with pytest.raises(NotFoundError):
        account_service.archive_account("9999")
