"""Account balance and turnover queries over posted transactions."""

from datetime import date
from decimal import Decimal
from typing import Iterable, Iterator, Optional

from taxledger.domain.entities import Account, AccountType, EntryType, LedgerEntry, Transaction
from taxledger.utils.money import ZERO, amounts_equal


class AccountBalanceCalculator:
    """Read-only balance queries.

    Every query is recomputed from the full set of posted transactions; no
    running balance is kept.
    """

    def __init__(self, transactions: Iterable[Transaction] = ()):
        self.transactions = [t for t in transactions if t.is_posted]

    def _entries(
        self, account_code: str, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> Iterator[LedgerEntry]:
        for transaction in self.transactions:
            if start_date is not None and transaction.date < start_date:
                continue
            if end_date is not None and transaction.date > end_date:
                continue
            for entry in transaction.ledger_entries:
                if entry.account_code == account_code:
                    yield entry

    @staticmethod
    def _sum_sides(entries: Iterable[LedgerEntry]) -> tuple[Decimal, Decimal]:
        debits = ZERO
        credits = ZERO
        for entry in entries:
            if entry.entry_type is EntryType.DEBIT:
                debits += entry.amount
            else:
                credits += entry.amount
        return debits, credits

    def calculate_account_balance(self, account_code: str, as_of_date: date) -> Decimal:
        """Debits minus credits for the account up to and including a date.

        Positive means a debit balance. An account without entries is 0.
        """
        debits, credits = self._sum_sides(self._entries(account_code, end_date=as_of_date))
        return debits - credits

    def calculate_account_turnover(
        self, account_code: str, start_date: date, end_date: date
    ) -> tuple[Decimal, Decimal]:
        """Debit and credit turnover within [start_date, end_date]."""
        return self._sum_sides(self._entries(account_code, start_date=start_date, end_date=end_date))

    def has_transactions(self, account_code: str) -> bool:
        return any(True for _ in self._entries(account_code))

    def get_accounts_with_transactions(self) -> list[str]:
        codes = {
            entry.account_code
            for transaction in self.transactions
            for entry in transaction.ledger_entries
        }
        return sorted(codes)

    def get_all_account_balances(self, as_of_date: date) -> dict[str, Decimal]:
        return {
            code: self.calculate_account_balance(code, as_of_date)
            for code in self.get_accounts_with_transactions()
        }

    def verify_accounting_equation(self, as_of_date: date, accounts: Iterable[Account]) -> bool:
        """Check assets + expenses == liabilities + equity + revenue.

        Accounts missing from ``accounts`` are ignored.
        """
        account_types = {account.code: account.account_type for account in accounts}
        debit_side = ZERO
        credit_side = ZERO
        for code, balance in self.get_all_account_balances(as_of_date).items():
            account_type = account_types.get(code)
            if account_type in (AccountType.ASSET, AccountType.EXPENSE):
                debit_side += balance
            elif account_type in (AccountType.LIABILITY, AccountType.EQUITY, AccountType.REVENUE):
                credit_side -= balance
        return amounts_equal(debit_side, credit_side)
