"""Temporal rule matching: which rules apply at an instant, and which one wins."""

import logging
from collections.abc import Sequence
from datetime import UTC, datetime
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fare_engine.core.exceptions import ValidationError
from fare_engine.core.violations import Violation
from fare_engine.models import (
    GeoScope,
    RuleBrief,
    RuleType,
    ScopeNames,
    TemporalEvaluation,
    TemporalPricingRule,
)
from fare_engine.settings import PricingSettings
from fare_engine.stores import GeographyLookup, RuleStore

from .selection import RuleSelection, RuleSelectionStrategy, SelectTop

logger = logging.getLogger(__name__)


def parse_moment(value: datetime | str) -> datetime:
    """Accept a datetime or an ISO-8601 string such as ``2024-01-15T08:30:00Z``."""
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            f"Invalid date_time: {value!r}",
            [
                Violation(
                    field="date_time", rule="format", message="date_time must be ISO-8601"
                )
            ],
        ) from e


def localize(moment: datetime, timezone: str) -> datetime:
    """Move an aware instant to the pricing timezone; naive instants are kept as-is."""
    if moment.tzinfo is None:
        return moment
    if timezone.upper() == "UTC":
        return moment.astimezone(UTC)
    try:
        return moment.astimezone(ZoneInfo(timezone))
    except ZoneInfoNotFoundError as e:
        raise ValidationError(f"Unknown pricing timezone: {timezone}") from e


def day_of_week(moment: datetime) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return moment.isoweekday() % 7


def time_in_range(time: str, start: str | None, end: str | None) -> bool:
    """Inclusive HH:MM check; ``start > end`` wraps past midnight."""
    if not start or not end:
        return True
    if start > end:
        return time >= start or time <= end
    return start <= time <= end


def _day_matches(rule: TemporalPricingRule, dow: int) -> bool:
    return not rule.days_of_week or dow in rule.days_of_week


def _date_matches(rule: TemporalPricingRule, date_str: str) -> bool:
    return not rule.specific_dates or date_str in rule.specific_dates


def _season_matches(rule: TemporalPricingRule, date_str: str) -> bool:
    if not rule.date_ranges:
        return True
    return any(r.start <= date_str <= r.end for r in rule.date_ranges)


def rule_applies_at(rule: TemporalPricingRule, dow: int, time: str, date_str: str) -> bool:
    """Type-specific calendar match; empty filters match everything."""
    if rule.rule_type == RuleType.TIME_RANGE:
        return time_in_range(time, rule.start_time, rule.end_time) and _day_matches(rule, dow)
    if rule.rule_type == RuleType.DAY_OF_WEEK:
        return _day_matches(rule, dow)
    if rule.rule_type == RuleType.DATE_SPECIFIC:
        return _date_matches(rule, date_str)
    if rule.rule_type == RuleType.SEASONAL:
        return _season_matches(rule, date_str)
    return False


class TemporalRuleMatcher:
    """Evaluates temporal pricing rules for an instant and geographic scope.

    Stateless: every call reads the rules it needs from the store.
    """

    def __init__(
        self,
        store: RuleStore,
        geography: GeographyLookup,
        settings: PricingSettings | None = None,
        strategy: RuleSelectionStrategy | None = None,
    ) -> None:
        self.store = store
        self.geography = geography
        self.settings = settings or PricingSettings()
        self.strategy = strategy or SelectTop()

    def find_applicable_rules(
        self, moment: datetime | str, scope: GeoScope | None = None
    ) -> list[TemporalPricingRule]:
        scope = scope or GeoScope()
        local = localize(parse_moment(moment), self.settings.timezone)
        return self._applicable(local, scope)

    def evaluate(
        self, moment: datetime | str, scope: GeoScope | None = None
    ) -> TemporalEvaluation:
        scope = scope or GeoScope()
        local = localize(parse_moment(moment), self.settings.timezone)
        applicable = self._applicable(local, scope)
        selection = self.strategy.select(applicable)

        if selection.applied is not None:
            logger.debug(
                "Temporal rule %s applied at %s (x%s, %d candidates)",
                selection.applied.name,
                local.isoformat(),
                selection.multiplier,
                len(applicable),
            )

        return self._result(moment, local, scope, selection)

    def evaluate_specific_rules(
        self,
        rule_ids: Sequence[int],
        moment: datetime | str,
        scope: GeoScope | None = None,
    ) -> TemporalEvaluation:
        """Manual override: use exactly these rules (active ones) without calendar matching."""
        scope = scope or GeoScope()
        local = localize(parse_moment(moment), self.settings.timezone)
        rules = self.store.get_many(rule_ids, active_only=True)
        selection = self.strategy.select(rules)
        return self._result(moment, local, scope, selection)

    def _applicable(self, local: datetime, scope: GeoScope) -> list[TemporalPricingRule]:
        dow = day_of_week(local)
        time = local.strftime("%H:%M")
        date_str = local.date().isoformat()

        candidates = self.store.find_auto_apply_candidates(scope)
        return [
            rule
            for rule in candidates
            if rule.is_active
            and rule.auto_apply
            and rule.applies_to_scope(scope)
            and rule_applies_at(rule, dow, time, date_str)
        ]

    def _result(
        self,
        moment: datetime | str,
        local: datetime,
        scope: GeoScope,
        selection: RuleSelection,
    ) -> TemporalEvaluation:
        applied = selection.applied
        return TemporalEvaluation(
            evaluated_at=moment if isinstance(moment, str) else moment.isoformat(),
            day_of_week=day_of_week(local),
            time=local.strftime("%H:%M"),
            applicable_rules=[RuleBrief.from_rule(rule) for rule in selection.ranked],
            applied_rule=RuleBrief.from_rule(applied) if applied is not None else None,
            combined_multiplier=selection.multiplier,
            scope=self._scope_names(scope),
        )

    def _scope_names(self, scope: GeoScope) -> ScopeNames:
        def name_of(region: object) -> str | None:
            return getattr(region, "name", None)

        return ScopeNames(
            country=name_of(self.geography.country(scope.country_id))
            if scope.country_id is not None
            else None,
            state=name_of(self.geography.state(scope.state_id))
            if scope.state_id is not None
            else None,
            city=name_of(self.geography.city(scope.city_id)) if scope.city_id is not None else None,
            zone=name_of(self.geography.zone(scope.zone_id)) if scope.zone_id is not None else None,
        )
