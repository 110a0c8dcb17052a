"""Chart of accounts domain service."""

import logging
from typing import Optional

from taxledger.database.base import Database
from taxledger.domain.entities import Account, AccountType
from taxledger.domain.errors import ConflictError, NotFoundError, ValidationError, account_not_found

logger = logging.getLogger(__name__)


class AccountValidator:
    """Validates account codes against the chart of accounts numbering."""

    TYPE_PREFIXES: dict[AccountType, str] = {
        AccountType.ASSET: "1",
        AccountType.LIABILITY: "2",
        AccountType.EQUITY: "3",
        AccountType.REVENUE: "4",
        AccountType.EXPENSE: "6",
    }

    def validate(self, code: str, account_type: AccountType) -> list[str]:
        """Return every problem with an account code for the given type."""
        errors = []
        if not code:
            return ["Account code is required"]
        if not code.isdigit():
            errors.append(f"Account code '{code}' must contain only digits")
        prefix = self.TYPE_PREFIXES[account_type]
        if not code.startswith(prefix):
            errors.append(
                f"{account_type.value} account code '{code}' must start with {prefix}"
            )
        return errors

    def is_valid(self, code: str, account_type: AccountType) -> bool:
        return not self.validate(code, account_type)


class AccountService:
    """Service for managing the chart of accounts."""

    def __init__(self, db: Database, validator: Optional[AccountValidator] = None):
        """Initialize account service.

        Args:
            db: Database instance
            validator: Account code validator (defaults to the standard numbering)
        """
        self.db = db
        self.validator = validator or AccountValidator()

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        parent_code: Optional[str] = None,
    ) -> Account:
        """Create a new account.

        Args:
            code: Numeric account code
            name: Account name
            account_type: Account classification
            parent_code: Optional parent account code

        Returns:
            The created account

        Raises:
            ValidationError: If the code does not match the type's numbering or
                the name is empty
            ConflictError: If an account with the same code exists
            NotFoundError: If the parent account does not exist
        """
        code = code.strip()
        if not name or not name.strip():
            raise ValidationError("Account name is required")
        errors = self.validator.validate(code, account_type)
        if errors:
            raise ValidationError("; ".join(errors))
        if self.db.get_account(code) is not None:
            raise ConflictError(f"Account with code '{code}' already exists")
        if parent_code is not None and self.db.get_account(parent_code) is None:
            raise NotFoundError(account_not_found(parent_code))

        self.db.create_account(code=code, name=name.strip(), account_type=account_type, parent_code=parent_code)
        logger.info("Created %s account %s %s", account_type.value, code, name)
        return self.db.get_account(code)

    def get_account(self, code: str) -> Optional[Account]:
        """Get account by code, or None if not found."""
        return self.db.get_account(code)

    def list_accounts(self, include_archived: bool = True) -> list[Account]:
        """List accounts ordered by code."""
        return self.db.list_accounts(include_archived=include_archived)

    def archive_account(self, code: str) -> None:
        """Archive an account so it can no longer receive entries.

        Raises:
            NotFoundError: If the account does not exist
        """
        if self.db.get_account(code) is None:
            raise NotFoundError(account_not_found(code))
        self.db.set_account_archived(code, True)
        logger.info("Archived account %s", code)
