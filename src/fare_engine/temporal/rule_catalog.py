"""Temporal rule catalog: validated writes, bulk updates, seeding, summaries."""

import logging
import math
from typing import Any

from fare_engine.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermanentError,
    ValidationError,
)
from fare_engine.core.violations import Violation
from fare_engine.models import (
    BulkItemResult,
    BulkResult,
    GeoScope,
    RuleType,
    SeedResult,
    TemporalPricingRule,
    TemporalRuleInput,
    TemporalRuleListItem,
    TemporalRulePage,
    TemporalRuleQuery,
    TemporalRuleStats,
)
from fare_engine.pricing_logging import log_context
from fare_engine.stores import GeographyLookup, RuleStore

from .rule_validation import validate_required_rule_fields, validate_rule_configuration

logger = logging.getLogger(__name__)

WEEKDAYS = [1, 2, 3, 4, 5]

STANDARD_RULES: list[dict[str, Any]] = [
    {
        "name": "Morning Peak Hours",
        "description": "Surge pricing during morning rush hour",
        "rule_type": RuleType.TIME_RANGE,
        "start_time": "07:00",
        "end_time": "09:00",
        "days_of_week": WEEKDAYS,
        "multiplier": 1.4,
        "priority": 20,
    },
    {
        "name": "Evening Peak Hours",
        "description": "Surge pricing during evening rush hour",
        "rule_type": RuleType.TIME_RANGE,
        "start_time": "17:00",
        "end_time": "19:00",
        "days_of_week": WEEKDAYS,
        "multiplier": 1.6,
        "priority": 19,
    },
    {
        "name": "Late Night Hours",
        "description": "Higher pricing during late night",
        "rule_type": RuleType.TIME_RANGE,
        "start_time": "22:00",
        "end_time": "06:00",
        "multiplier": 1.6,
        "priority": 15,
    },
    {
        "name": "Weekend Surcharge",
        "description": "Additional pricing on weekends",
        "rule_type": RuleType.DAY_OF_WEEK,
        "days_of_week": [0, 6],
        "multiplier": 1.2,
        "priority": 10,
    },
]

SCOPE_LABELS = {"zone": "Zone", "city": "City", "state": "State", "country": "Country"}


class TemporalRuleCatalog:
    """Owns the write rules for temporal pricing rules."""

    def __init__(self, store: RuleStore, geography: GeographyLookup | None = None) -> None:
        self.store = store
        self.geography = geography

    def get_rule(self, rule_id: int) -> TemporalPricingRule:
        rule = self.store.get(rule_id)
        if rule is None:
            raise NotFoundError(
                f"Temporal pricing rule with ID {rule_id} not found", {"rule_id": rule_id}
            )
        return rule

    def list_rules(self, query: TemporalRuleQuery | None = None) -> TemporalRulePage:
        query = query or TemporalRuleQuery()
        rules, total = self.store.search(query)
        return TemporalRulePage(
            rules=[self._list_item(rule) for rule in rules],
            total=total,
            page=query.page,
            limit=query.limit,
            total_pages=math.ceil(total / query.limit),
        )

    def create_rule(self, rule_input: TemporalRuleInput) -> TemporalPricingRule:
        missing = validate_required_rule_fields(rule_input)
        if missing:
            raise ValidationError("Invalid temporal rule configuration", missing)

        if rule_input.name and self.store.find_by_name(rule_input.name) is not None:
            raise ConflictError(
                f'Temporal pricing rule with name "{rule_input.name}" already exists'
            )

        self._ensure_valid(rule_input)

        rule = self.store.create(rule_input.changes())
        logger.info("Temporal pricing rule created: %s (%sx)", rule.name, rule.multiplier)
        return rule

    def update_rule(self, rule_id: int, rule_input: TemporalRuleInput) -> TemporalPricingRule:
        """Apply a partial update; the merged rule is re-validated for its type."""
        existing = self.get_rule(rule_id)

        if rule_input.name and rule_input.name != existing.name:
            if self.store.find_by_name(rule_input.name) is not None:
                raise ConflictError(
                    f'Temporal pricing rule with name "{rule_input.name}" already exists'
                )

        changes = rule_input.changes()
        merged = existing.model_dump(mode="json", include=set(TemporalRuleInput.model_fields))
        merged.update(changes)
        self._ensure_valid(TemporalRuleInput(**merged))

        rule = self.store.update(rule_id, changes)
        with log_context(rule_id=rule_id):
            logger.info("Temporal pricing rule updated: %s", rule.name)
        return rule

    def delete_rule(self, rule_id: int) -> None:
        rule = self.get_rule(rule_id)
        self.store.delete(rule_id)
        logger.info("Temporal pricing rule deleted: %s", rule.name)

    def toggle_active(self, rule_id: int) -> TemporalPricingRule:
        rule = self.get_rule(rule_id)
        updated = self.store.update(rule_id, {"is_active": not rule.is_active})
        logger.info(
            "Temporal pricing rule %s status changed to: %s",
            rule.name,
            "active" if updated.is_active else "inactive",
        )
        return updated

    def bulk_update(
        self, rule_ids: list[int], updates: TemporalRuleInput
    ) -> BulkResult[TemporalPricingRule]:
        if not rule_ids:
            raise ValidationError(
                "Invalid bulk update",
                [
                    Violation(
                        field="rule_ids",
                        rule="non_empty",
                        message="rule_ids must be a non-empty list",
                    )
                ],
            )

        results: list[BulkItemResult[TemporalPricingRule]] = []
        for rule_id in rule_ids:
            try:
                rule = self.update_rule(rule_id, updates)
                results.append(
                    BulkItemResult[TemporalPricingRule](id=rule_id, success=True, data=rule)
                )
            except PermanentError as e:
                results.append(
                    BulkItemResult[TemporalPricingRule](id=rule_id, success=False, error=e.message)
                )

        successful = sum(1 for r in results if r.success)
        return BulkResult[TemporalPricingRule](
            message="Bulk update completed",
            results=results,
            successful=successful,
            failed=len(results) - successful,
        )

    def create_standard_rules(
        self, scope: GeoScope | None = None
    ) -> SeedResult[TemporalPricingRule]:
        """Seed the peak, late-night and weekend rules, pinned to ``scope`` when given."""
        scope = scope or GeoScope()
        created: list[TemporalPricingRule] = []
        errors: list[str] = []

        for rule_data in STANDARD_RULES:
            if self.store.find_by_name(rule_data["name"]) is not None:
                errors.append(f'Rule "{rule_data["name"]}" already exists')
                continue
            try:
                rule_input = TemporalRuleInput(
                    **rule_data,
                    country_id=scope.country_id,
                    state_id=scope.state_id,
                    city_id=scope.city_id,
                )
                created.append(self.create_rule(rule_input))
            except PermanentError as e:
                errors.append(f'Failed to create "{rule_data["name"]}": {e.message}')

        return SeedResult[TemporalPricingRule](
            message="Standard temporal pricing rules creation completed",
            created=len(created),
            errors=len(errors),
            items=created,
            error_messages=errors,
        )

    def summary(self) -> TemporalRuleStats:
        rules = self.store.all_active()
        multipliers = [rule.multiplier for rule in rules]

        return TemporalRuleStats(
            total_active_rules=len(rules),
            rules_by_type={
                rule_type.value: sum(1 for r in rules if r.rule_type == rule_type)
                for rule_type in RuleType
            },
            rules_by_scope={
                level: sum(1 for r in rules if r.matches_scope_filter(level))
                for level in ("global", "country", "state", "city", "zone")
            },
            average_multiplier=sum(multipliers) / len(multipliers) if multipliers else 0.0,
            highest_multiplier=max(multipliers, default=0.0),
            lowest_multiplier=min(multipliers, default=0.0),
        )

    def _list_item(self, rule: TemporalPricingRule) -> TemporalRuleListItem:
        return TemporalRuleListItem(
            id=rule.id,
            name=rule.name,
            rule_type=rule.rule_type,
            multiplier=rule.multiplier,
            priority=rule.priority,
            is_active=rule.is_active,
            scope=self._scope_label(rule),
        )

    def _scope_label(self, rule: TemporalPricingRule) -> str:
        level = rule.scope_level
        if level == "global":
            return "Global"
        label = SCOPE_LABELS[level]
        region = None
        if self.geography is not None:
            region = getattr(self.geography, level)(getattr(rule, f"{level}_id"))
        return f"{label}: {region.name if region is not None else 'N/A'}"

    def _ensure_valid(self, rule_input: TemporalRuleInput) -> None:
        violations = validate_rule_configuration(rule_input)
        if violations:
            raise ValidationError("Invalid temporal rule configuration", violations)
