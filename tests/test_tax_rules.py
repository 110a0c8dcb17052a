"""Tests for tax rule evaluation."""

from datetime import date
from decimal import Decimal

import pytest

from taxledger.domain.entities import (
    Document,
    DocumentLine,
    DocumentOperation,
    GroupMembership,
    GroupType,
    Tax,
    TaxApplicationLevel,
    TaxRule,
    TaxType,
)
from taxledger.domain.tax_rules import TaxRuleEvaluator

SALE = DocumentOperation.SALES_INVOICE

TAXES = [
    Tax(code="VAT", name="VAT", percentage=Decimal("13")),
    Tax(code="ECO", name="Eco fee", tax_type=TaxType.AMOUNT_PER_UNIT, amount=Decimal("0.50")),
    Tax(
        code="STAMP",
        name="Stamp duty",
        tax_type=TaxType.FIXED_AMOUNT,
        application_level=TaxApplicationLevel.DOCUMENT,
        amount=Decimal("5"),
    ),
    Tax(code="OLD", name="Retired tax", percentage=Decimal("2"), is_enabled=False),
]

MEMBERSHIPS = [
    GroupMembership("RETAIL", "CUST-1", GroupType.BUSINESS_ENTITY),
    GroupMembership("EXPORT", "CUST-1", GroupType.BUSINESS_ENTITY),
    GroupMembership("FOOD", "APPLE", GroupType.ITEM),
]


def rule(rule_id, tax_code="VAT", operation=SALE, entity_group=None, item_group=None, priority=1, enabled=True):
    return TaxRule(
        id=rule_id,
        tax_code=tax_code,
        document_operation=operation,
        business_entity_group_id=entity_group,
        item_group_id=item_group,
        is_enabled=enabled,
        priority=priority,
    )


def evaluator(*rules):
    return TaxRuleEvaluator(list(rules), TAXES, MEMBERSHIPS)


def test_higher_priority_wins_for_same_tax():
    """Test the higher-priority rule is selected when two rules name the same tax."""
    rules = evaluator(
        rule(1, entity_group="RETAIL", priority=1),
        rule(2, priority=5),
    ).select_applicable_rules(SALE, ["RETAIL"], [])

    assert [r.id for r in rules] == [2]


def test_equal_priority_breaks_ties_by_lowest_id():
    """Test ties are broken by rule id, not by load order."""
    forward = evaluator(rule(2, priority=3), rule(3, priority=3))
    backward = evaluator(rule(3, priority=3), rule(2, priority=3))

    assert [r.id for r in forward.select_applicable_rules(SALE)] == [2]
    assert [r.id for r in backward.select_applicable_rules(SALE)] == [2]


def test_rules_ordered_by_priority_then_id():
    rules = evaluator(
        rule(1, tax_code="ECO", priority=1),
        rule(2, tax_code="VAT", priority=9),
        rule(3, tax_code="STAMP", priority=1),
    ).select_applicable_rules(SALE)

    assert [r.tax_code for r in rules] == ["VAT", "ECO", "STAMP"]


def test_disabled_rule_never_matches():
    """Test a disabled rule is excluded even when it has the highest priority."""
    rules = evaluator(
        rule(1, priority=100, enabled=False),
        rule(2, priority=1),
    ).select_applicable_rules(SALE)

    assert [r.id for r in rules] == [2]


def test_no_matching_rule_returns_empty_list():
    rules = evaluator(rule(1, operation=DocumentOperation.PURCHASE_INVOICE)).select_applicable_rules(SALE)
    assert rules == []


def test_scoped_rules_require_membership():
    ev = evaluator(
        rule(1, tax_code="VAT", entity_group="WHOLESALE"),
        rule(2, tax_code="ECO", item_group="FOOD"),
    )

    assert ev.select_applicable_rules(SALE, ["RETAIL"], ["TOYS"]) == []
    assert [r.id for r in ev.select_applicable_rules(SALE, ["WHOLESALE"], ["FOOD"])] == [1, 2]


def test_union_of_entity_groups_is_considered():
    """Test an entity in several groups matches a rule scoped to any of them."""
    ev = evaluator(rule(1, entity_group="EXPORT"))

    groups = ev.get_groups_for_entity("CUST-1", GroupType.BUSINESS_ENTITY)

    assert sorted(groups) == ["EXPORT", "RETAIL"]
    assert [r.id for r in ev.select_applicable_rules(SALE, groups, [])] == [1]


def test_get_groups_for_unknown_entity():
    assert evaluator().get_groups_for_entity(None, GroupType.ITEM) == []
    assert evaluator().get_groups_for_entity("NOBODY", GroupType.ITEM) == []


@pytest.fixture
def document():
    return Document(
        code="INV-1",
        operation=SALE,
        date=date(2024, 1, 10),
        business_entity_code="CUST-1",
        lines=[
            DocumentLine(item_code="APPLE", quantity=Decimal("4"), unit_price=Decimal("1")),
            DocumentLine(item_code="BOOK", quantity=Decimal("1"), unit_price=Decimal("20")),
        ],
    )


def test_line_taxes_use_item_groups(document):
    ev = evaluator(
        rule(1, tax_code="VAT", priority=2),
        rule(2, tax_code="ECO", item_group="FOOD"),
    )

    apple_taxes = ev.get_applicable_line_taxes(document, document.lines[0])
    book_taxes = ev.get_applicable_line_taxes(document, document.lines[1])

    assert [tax.code for tax, _ in apple_taxes] == ["VAT", "ECO"]
    assert [tax.code for tax, _ in book_taxes] == ["VAT"]


def test_line_and_document_level_taxes_are_separated(document):
    ev = evaluator(rule(1, tax_code="VAT"), rule(2, tax_code="STAMP"))

    line_taxes = ev.get_applicable_line_taxes(document, document.lines[0])
    document_taxes = ev.get_applicable_document_taxes(document)

    assert [tax.code for tax, _ in line_taxes] == ["VAT"]
    assert [(tax.code, r.id) for tax, r in document_taxes] == [("STAMP", 2)]


def test_unknown_and_disabled_taxes_are_skipped(document, caplog):
    ev = evaluator(rule(1, tax_code="MISSING"), rule(2, tax_code="OLD"), rule(3, tax_code="vat"))

    taxes = ev.get_applicable_line_taxes(document, document.lines[1])

    assert [tax.code for tax, _ in taxes] == ["VAT"]
    assert "unknown tax 'MISSING'" in caplog.text
