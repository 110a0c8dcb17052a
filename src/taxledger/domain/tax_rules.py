"""Tax rule evaluation."""

import logging
from typing import Iterable, Optional

from taxledger.domain.entities import (
    Document,
    DocumentLine,
    DocumentOperation,
    GroupMembership,
    GroupType,
    Tax,
    TaxApplicationLevel,
    TaxRule,
)

logger = logging.getLogger(__name__)


class TaxRuleEvaluator:
    """Selects the taxes that apply to a document or line.

    Rules are matched on document operation and on the groups the business
    entity and item belong to. Among matching enabled rules, higher priority
    wins; equal priorities fall back to the lowest rule id, so the outcome
    never depends on the order rules were loaded in. A tax applies at most
    once per line.
    """

    def __init__(
        self,
        tax_rules: Iterable[TaxRule],
        taxes: Iterable[Tax],
        group_memberships: Iterable[GroupMembership] = (),
    ):
        self.tax_rules = list(tax_rules)
        self.taxes = {tax.code.upper(): tax for tax in taxes}
        self.group_memberships = list(group_memberships)

    def get_groups_for_entity(self, entity_code: Optional[str], group_type: GroupType) -> list[str]:
        """Return every group id the entity belongs to for the given group type."""
        if not entity_code:
            return []
        return [
            m.group_id
            for m in self.group_memberships
            if m.entity_code == entity_code and m.group_type is group_type
        ]

    def select_applicable_rules(
        self,
        operation: DocumentOperation,
        business_entity_group_ids: Iterable[str] = (),
        item_group_ids: Iterable[str] = (),
    ) -> list[TaxRule]:
        """Select the winning rule per tax for an operation and group scope.

        Args:
            operation: Document operation
            business_entity_group_ids: All groups the business entity belongs to
            item_group_ids: All groups the item belongs to

        Returns:
            Winning rules ordered by priority (highest first), then rule id
        """
        entity_groups = set(business_entity_group_ids)
        item_groups = set(item_group_ids)

        matching = [
            rule
            for rule in self.tax_rules
            if rule.is_enabled
            and rule.document_operation is operation
            and (rule.business_entity_group_id is None or rule.business_entity_group_id in entity_groups)
            and (rule.item_group_id is None or rule.item_group_id in item_groups)
        ]
        matching.sort(key=lambda rule: (-rule.priority, rule.id))

        selected = []
        seen_taxes = set()
        for rule in matching:
            tax_key = rule.tax_code.upper()
            if tax_key in seen_taxes:
                continue
            seen_taxes.add(tax_key)
            selected.append(rule)

        logger.debug(
            "Selected %d of %d rules for %s (entity groups=%s, item groups=%s)",
            len(selected),
            len(self.tax_rules),
            operation.value,
            sorted(entity_groups),
            sorted(item_groups),
        )
        return selected

    def get_applicable_line_taxes(
        self, document: Document, line: DocumentLine
    ) -> list[tuple[Tax, TaxRule]]:
        """Return line-level taxes for a document line, in rule order."""
        entity_groups = self.get_groups_for_entity(
            document.business_entity_code, GroupType.BUSINESS_ENTITY
        )
        item_groups = self.get_groups_for_entity(line.item_code, GroupType.ITEM)
        rules = self.select_applicable_rules(document.operation, entity_groups, item_groups)
        return self._taxes_for_rules(rules, TaxApplicationLevel.LINE)

    def get_applicable_document_taxes(self, document: Document) -> list[tuple[Tax, TaxRule]]:
        """Return document-level taxes. Item-scoped rules never match here."""
        entity_groups = self.get_groups_for_entity(
            document.business_entity_code, GroupType.BUSINESS_ENTITY
        )
        rules = self.select_applicable_rules(document.operation, entity_groups, ())
        return self._taxes_for_rules(rules, TaxApplicationLevel.DOCUMENT)

    def _taxes_for_rules(
        self, rules: list[TaxRule], level: TaxApplicationLevel
    ) -> list[tuple[Tax, TaxRule]]:
        applicable = []
        for rule in rules:
            tax = self.taxes.get(rule.tax_code.upper())
            if tax is None:
                logger.warning("Tax rule %s refers to unknown tax '%s'", rule.id, rule.tax_code)
                continue
            if not tax.is_enabled:
                logger.debug("Tax '%s' is disabled, skipping rule %s", tax.code, rule.id)
                continue
            if tax.application_level is level:
                applicable.append((tax, rule))
        return applicable
