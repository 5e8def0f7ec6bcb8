"""In-memory stores implementing the engine's store protocols for unit tests."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import UTC, datetime
from typing import Any

from fare_engine.core.exceptions import NotFoundError
from fare_engine.models import (
    GeoRegion,
    GeoScope,
    ServiceZone,
    TemporalPricingRule,
    TemporalRuleQuery,
    Tier,
    TierQuery,
)


def _page(items: list[Any], page: int, limit: int) -> list[Any]:
    start = (page - 1) * limit
    return items[start : start + limit]


class InMemoryTierStore:
    def __init__(self) -> None:
        self.tiers: dict[int, Tier] = {}
        self.rides: dict[int, int] = {}
        self._next_id = 1

    def add(self, tier: Tier) -> Tier:
        self.tiers[tier.id] = tier
        self._next_id = max(self._next_id, tier.id + 1)
        return tier

    def get(self, tier_id: int) -> Tier | None:
        tier = self.tiers.get(tier_id)
        if tier is None:
            return None
        return tier.model_copy(update={"rides_count": self.rides.get(tier_id, 0)})

    def find_by_name(self, name: str) -> Tier | None:
        for tier in self.tiers.values():
            if tier.name == name:
                return self.get(tier.id)
        return None

    def create(self, fields: dict[str, Any]) -> Tier:
        now = datetime.now(UTC)
        tier = Tier(id=self._next_id, created_at=now, updated_at=now, **fields)
        self._next_id += 1
        self.tiers[tier.id] = tier
        return tier

    def update(self, tier_id: int, fields: dict[str, Any]) -> Tier:
        if tier_id not in self.tiers:
            raise NotFoundError(f"Ride tier with ID {tier_id} not found")
        updated = self.tiers[tier_id].model_copy(
            update={**fields, "updated_at": datetime.now(UTC)}
        )
        self.tiers[tier_id] = updated
        return self.get(tier_id)  # type: ignore[return-value]

    def search(self, query: TierQuery) -> tuple[list[Tier], int]:
        tiers = [self.get(tier_id) for tier_id in self.tiers]
        matched = [
            t
            for t in tiers
            if t is not None
            and (query.search is None or query.search.lower() in t.name.lower())
            and (query.is_active is None or t.is_active == query.is_active)
        ]
        matched.sort(key=lambda t: getattr(t, query.sort_by), reverse=query.sort_order == "desc")
        return _page(matched, query.page, query.limit), len(matched)

    def all(self) -> list[Tier]:
        return [t for t in (self.get(tier_id) for tier_id in self.tiers) if t is not None]

    def delete(self, tier_id: int) -> None:
        del self.tiers[tier_id]

    def count_rides(self, tier_id: int) -> int:
        return self.rides.get(tier_id, 0)


class InMemoryRuleStore:
    def __init__(self) -> None:
        self.rules: dict[int, TemporalPricingRule] = {}
        self._next_id = 1
        self.candidate_calls = 0

    def add(self, rule: TemporalPricingRule) -> TemporalPricingRule:
        self.rules[rule.id] = rule
        self._next_id = max(self._next_id, rule.id + 1)
        return rule

    def get(self, rule_id: int) -> TemporalPricingRule | None:
        return self.rules.get(rule_id)

    def find_by_name(self, name: str) -> TemporalPricingRule | None:
        return next((r for r in self.rules.values() if r.name == name), None)

    def create(self, fields: dict[str, Any]) -> TemporalPricingRule:
        now = datetime.now(UTC)
        rule = TemporalPricingRule(id=self._next_id, created_at=now, updated_at=now, **fields)
        self._next_id += 1
        self.rules[rule.id] = rule
        return rule

    def update(self, rule_id: int, fields: dict[str, Any]) -> TemporalPricingRule:
        if rule_id not in self.rules:
            raise NotFoundError(f"Temporal pricing rule with ID {rule_id} not found")
        merged = self.rules[rule_id].model_dump()
        merged.update(fields)
        merged["updated_at"] = datetime.now(UTC)
        self.rules[rule_id] = TemporalPricingRule.model_validate(merged)
        return self.rules[rule_id]

    def search(self, query: TemporalRuleQuery) -> tuple[list[TemporalPricingRule], int]:
        matched = [
            r
            for r in self.rules.values()
            if (query.search is None or query.search.lower() in r.name.lower())
            and (query.rule_type is None or r.rule_type == query.rule_type)
            and (query.scope is None or r.matches_scope_filter(query.scope))
            and (query.is_active is None or r.is_active == query.is_active)
        ]
        matched.sort(key=lambda r: getattr(r, query.sort_by), reverse=query.sort_order == "desc")
        return _page(matched, query.page, query.limit), len(matched)

    def delete(self, rule_id: int) -> None:
        del self.rules[rule_id]

    def all_active(self) -> list[TemporalPricingRule]:
        return [r for r in self.rules.values() if r.is_active]

    def get_many(
        self, rule_ids: Sequence[int], active_only: bool = True
    ) -> list[TemporalPricingRule]:
        return [
            self.rules[rule_id]
            for rule_id in rule_ids
            if rule_id in self.rules and (self.rules[rule_id].is_active or not active_only)
        ]

    def find_auto_apply_candidates(self, scope: GeoScope) -> list[TemporalPricingRule]:
        self.candidate_calls += 1
        return [
            r
            for r in self.rules.values()
            if r.is_active and r.auto_apply and r.applies_to_scope(scope)
        ]


class InMemoryGeography:
    def __init__(self) -> None:
        self.countries: dict[int, GeoRegion] = {}
        self.states: dict[int, GeoRegion] = {}
        self.cities: dict[int, GeoRegion] = {}
        self.zones: dict[int, ServiceZone] = {}

    def country(self, country_id: int) -> GeoRegion | None:
        return self.countries.get(country_id)

    def state(self, state_id: int) -> GeoRegion | None:
        return self.states.get(state_id)

    def city(self, city_id: int) -> GeoRegion | None:
        return self.cities.get(city_id)

    def zone(self, zone_id: int) -> ServiceZone | None:
        return self.zones.get(zone_id)
