"""Collaborator contracts the engine is written against.

The engine never owns persistence: catalogs, the calculator and the rule
matcher receive implementations of these protocols at construction time.
``fare_engine.db.repositories`` provides the SQLAlchemy-backed versions.
"""

from collections.abc import Sequence
from typing import Any, Protocol

from fare_engine.models import (
    GeoRegion,
    GeoScope,
    ServiceZone,
    TemporalPricingRule,
    TemporalRuleQuery,
    Tier,
    TierQuery,
)


class TierStore(Protocol):
    def get(self, tier_id: int) -> Tier | None: ...

    def find_by_name(self, name: str) -> Tier | None: ...

    def create(self, fields: dict[str, Any]) -> Tier: ...

    def update(self, tier_id: int, fields: dict[str, Any]) -> Tier: ...

    def search(self, query: TierQuery) -> tuple[list[Tier], int]: ...

    def all(self) -> list[Tier]: ...

    def delete(self, tier_id: int) -> None: ...

    def count_rides(self, tier_id: int) -> int: ...


class RuleStore(Protocol):
    def get(self, rule_id: int) -> TemporalPricingRule | None: ...

    def find_by_name(self, name: str) -> TemporalPricingRule | None: ...

    def create(self, fields: dict[str, Any]) -> TemporalPricingRule: ...

    def update(self, rule_id: int, fields: dict[str, Any]) -> TemporalPricingRule: ...

    def search(self, query: TemporalRuleQuery) -> tuple[list[TemporalPricingRule], int]: ...

    def delete(self, rule_id: int) -> None: ...

    def all_active(self) -> list[TemporalPricingRule]: ...

    def get_many(
        self, rule_ids: Sequence[int], active_only: bool = True
    ) -> list[TemporalPricingRule]: ...

    def find_auto_apply_candidates(self, scope: GeoScope) -> list[TemporalPricingRule]:
        """Active, auto-applied rules that are global or pinned to any id in ``scope``.

        Implementations may return a superset; the matcher re-checks scope.
        """
        ...


class GeographyLookup(Protocol):
    def country(self, country_id: int) -> GeoRegion | None: ...

    def state(self, state_id: int) -> GeoRegion | None: ...

    def city(self, city_id: int) -> GeoRegion | None: ...

    def zone(self, zone_id: int) -> ServiceZone | None: ...
