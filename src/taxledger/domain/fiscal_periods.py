"""Fiscal period domain service."""

import logging
from datetime import date
from typing import Optional

from taxledger.database.base import Database
from taxledger.domain.entities import FiscalPeriod, FiscalPeriodStatus
from taxledger.domain.errors import ConflictError, NotFoundError, ValidationError, fiscal_period_not_found

logger = logging.getLogger(__name__)

MAX_PERIOD_DAYS = 730


class FiscalPeriodService:
    """Service for creating, closing and looking up fiscal periods."""

    def __init__(self, db: Database):
        """Initialize fiscal period service.

        Args:
            db: Database instance
        """
        self.db = db

    def validate(self, period: FiscalPeriod) -> list[str]:
        """Return every validation problem with a new period.

        Checks the name, date order, maximum length and overlap with
        existing periods.
        """
        errors = []
        if not period.code or not period.code.strip():
            errors.append("Fiscal period code is required")
        if not period.name or not period.name.strip():
            errors.append("Fiscal period name is required")
        if period.end_date < period.start_date:
            errors.append("End date must be on or after start date")
        elif (period.end_date - period.start_date).days > MAX_PERIOD_DAYS:
            errors.append(f"Fiscal period cannot be longer than {MAX_PERIOD_DAYS} days")

        for existing in self.db.list_fiscal_periods():
            if existing.code == period.code:
                continue
            if period.start_date <= existing.end_date and existing.start_date <= period.end_date:
                errors.append(f"Fiscal period overlaps with '{existing.name}' ({existing.code})")
        return errors

    def create_period(
        self,
        code: str,
        name: str,
        start_date: date,
        end_date: date,
        description: Optional[str] = None,
    ) -> FiscalPeriod:
        """Create an open fiscal period.

        Raises:
            ConflictError: If a period with the same code exists
            ValidationError: If the period is invalid or overlaps another
        """
        if self.db.get_fiscal_period(code) is not None:
            raise ConflictError(f"Fiscal period '{code}' already exists")
        period = FiscalPeriod(
            code=code,
            name=name,
            start_date=start_date,
            end_date=end_date,
            status=FiscalPeriodStatus.OPEN,
            description=description,
        )
        errors = self.validate(period)
        if errors:
            raise ValidationError("; ".join(errors))
        self.db.create_fiscal_period(period)
        logger.info("Created fiscal period %s (%s to %s)", code, start_date, end_date)
        return period

    def list_periods(self) -> list[FiscalPeriod]:
        return self.db.list_fiscal_periods()

    def close_period(self, code: str) -> None:
        """Close a fiscal period. Closing a closed period is a no-op.

        Raises:
            NotFoundError: If the period does not exist
        """
        period = self.db.get_fiscal_period(code)
        if period is None:
            raise NotFoundError(fiscal_period_not_found(code))
        if not period.is_open:
            return
        self.db.update_fiscal_period_status(code, FiscalPeriodStatus.CLOSED)
        logger.info("Closed fiscal period %s", code)

    def get_period_for_date(self, value: date) -> Optional[FiscalPeriod]:
        return self.db.get_fiscal_period_for_date(value)
