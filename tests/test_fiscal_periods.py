"""Tests for fiscal period service."""

from datetime import date

import pytest

from taxledger.domain.entities import FiscalPeriodStatus
from taxledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_period(fiscal_period_service, temp_db):
    period = fiscal_period_service.create_period(
        "Q1-2024", "First quarter", date(2024, 1, 1), date(2024, 3, 31), description="Q1"
    )

    assert period.status is FiscalPeriodStatus.OPEN
    assert temp_db.get_fiscal_period("Q1-2024") == period


def test_single_day_period_is_allowed(fiscal_period_service):
    period = fiscal_period_service.create_period("D1", "One day", date(2024, 1, 1), date(2024, 1, 1))
    assert period.contains(date(2024, 1, 1))


def test_end_before_start_is_rejected(fiscal_period_service):
    with pytest.raises(ValidationError, match="End date must be on or after start date"):
        fiscal_period_service.create_period("BAD", "Backwards", date(2024, 3, 1), date(2024, 2, 1))


def test_name_is_required(fiscal_period_service):
    with pytest.raises(ValidationError, match="name is required"):
        fiscal_period_service.create_period("P1", " ", date(2024, 1, 1), date(2024, 1, 31))


def test_period_longer_than_two_years_is_rejected(fiscal_period_service):
    with pytest.raises(ValidationError, match="730 days"):
        fiscal_period_service.create_period("LONG", "Too long", date(2024, 1, 1), date(2026, 1, 2))


@pytest.mark.parametrize(
    "start,end",
    [
        (date(2024, 12, 1), date(2025, 1, 31)),
        (date(2023, 12, 1), date(2024, 1, 1)),
        (date(2024, 5, 1), date(2024, 5, 31)),
    ],
)
def test_overlapping_periods_are_rejected(fiscal_period_service, open_period, start, end):
    with pytest.raises(ValidationError, match="overlaps"):
        fiscal_period_service.create_period("OVERLAP", "Overlap", start, end)


def test_adjacent_period_is_allowed(fiscal_period_service, open_period):
    fiscal_period_service.create_period("FY2025", "Fiscal year 2025", date(2025, 1, 1), date(2025, 12, 31))

    assert [p.code for p in fiscal_period_service.list_periods()] == ["FY2024", "FY2025"]


def test_duplicate_code_conflicts(fiscal_period_service, open_period):
    with pytest.raises(ConflictError):
        fiscal_period_service.create_period("FY2024", "Again", date(2030, 1, 1), date(2030, 12, 31))


def test_close_period(fiscal_period_service, open_period, temp_db):
    fiscal_period_service.close_period("FY2024")
    fiscal_period_service.close_period("FY2024")

    assert temp_db.get_fiscal_period("FY2024").status is FiscalPeriodStatus.CLOSED


def test_close_unknown_period(fiscal_period_service):
    with pytest.raises(NotFoundError, match="not found"):
        fiscal_period_service.close_period("NOPE")


def test_get_period_for_date(fiscal_period_service, open_period):
    assert fiscal_period_service.get_period_for_date(date(2024, 7, 4)).code == "FY2024"
    assert fiscal_period_service.get_period_for_date(date(2023, 12, 31)) is None
