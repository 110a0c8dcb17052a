"""Tests for account balance calculation."""

from datetime import date
from decimal import Decimal

import pytest

from taxledger.domain.balance import AccountBalanceCalculator
from taxledger.domain.entities import Account, AccountType, EntryType, LedgerEntry, Transaction


def posted(day, *entries, is_posted=True):
    return Transaction(
        document_code=None,
        date=day,
        description="Test",
        ledger_entries=[LedgerEntry(code, side, Decimal(amount)) for code, side, amount in entries],
        is_posted=is_posted,
    )


@pytest.fixture
def calculator():
    return AccountBalanceCalculator(
        [
            posted(
                date(2024, 1, 10),
                ("1100", EntryType.DEBIT, "339"),
                ("4100", EntryType.CREDIT, "300"),
                ("2200", EntryType.CREDIT, "39"),
            ),
            posted(
                date(2024, 2, 5),
                ("1000", EntryType.DEBIT, "339"),
                ("1100", EntryType.CREDIT, "339"),
            ),
            posted(
                date(2024, 3, 1),
                ("1100", EntryType.DEBIT, "100"),
                ("4100", EntryType.CREDIT, "100"),
            ),
            posted(
                date(2024, 1, 20),
                ("1100", EntryType.DEBIT, "999"),
                ("4100", EntryType.CREDIT, "999"),
                is_posted=False,
            ),
        ]
    )


def test_balance_as_of_date(calculator):
    assert calculator.calculate_account_balance("1100", date(2024, 1, 31)) == Decimal("339")
    assert calculator.calculate_account_balance("1100", date(2024, 2, 5)) == Decimal("0")
    assert calculator.calculate_account_balance("1100", date(2024, 12, 31)) == Decimal("100")
    assert calculator.calculate_account_balance("4100", date(2024, 12, 31)) == Decimal("-400")


def test_balance_before_any_entry_is_zero(calculator):
    assert calculator.calculate_account_balance("1100", date(2023, 12, 31)) == 0
    assert calculator.calculate_account_balance("9999", date(2024, 12, 31)) == 0


def test_unposted_transactions_are_ignored(calculator):
    assert calculator.calculate_account_balance("1100", date(2024, 1, 25)) == Decimal("339")


def test_turnover_over_closed_interval(calculator):
    debits, credits = calculator.calculate_account_turnover("1100", date(2024, 1, 10), date(2024, 2, 5))

    assert debits == Decimal("339")
    assert credits == Decimal("339")


def test_turnover_outside_range_is_zero(calculator):
    assert calculator.calculate_account_turnover("1100", date(2025, 1, 1), date(2025, 12, 31)) == (0, 0)


def test_has_transactions(calculator):
    assert calculator.has_transactions("2200")
    assert not calculator.has_transactions("6100")


def test_accounts_with_transactions_are_sorted(calculator):
    assert calculator.get_accounts_with_transactions() == ["1000", "1100", "2200", "4100"]


def test_all_account_balances(calculator):
    assert calculator.get_all_account_balances(date(2024, 1, 31)) == {
        "1000": Decimal("0"),
        "1100": Decimal("339"),
        "2200": Decimal("-39"),
        "4100": Decimal("-300"),
    }


def test_accounting_equation(calculator):
    accounts = [
        Account("1000", "Cash", AccountType.ASSET),
        Account("1100", "Receivable", AccountType.ASSET),
        Account("2200", "VAT Payable", AccountType.LIABILITY),
        Account("4100", "Sales", AccountType.REVENUE),
    ]

    assert calculator.verify_accounting_equation(date(2024, 12, 31), accounts)


def test_accounting_equation_fails_for_unclassified_account():
    calculator = AccountBalanceCalculator(
        [posted(date(2024, 1, 1), ("1100", EntryType.DEBIT, "50"), ("4100", EntryType.CREDIT, "50"))]
    )
    accounts = [Account("1100", "Receivable", AccountType.ASSET)]

    assert not calculator.verify_accounting_equation(date(2024, 12, 31), accounts)


def test_empty_calculator():
    calculator = AccountBalanceCalculator()

    assert calculator.get_accounts_with_transactions() == []
    assert calculator.get_all_account_balances(date(2024, 1, 1)) == {}
    assert calculator.verify_accounting_equation(date(2024, 1, 1), [])
