"""Temporal pricing rule models and evaluation results."""

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field

from .geography import GeoScope


class RuleType(str, Enum):
    """Which calendar dimension a temporal rule matches on."""

    TIME_RANGE = "TIME_RANGE"
    DAY_OF_WEEK = "DAY_OF_WEEK"
    DATE_SPECIFIC = "DATE_SPECIFIC"
    SEASONAL = "SEASONAL"

    @classmethod
    def _missing_(cls, value: object) -> "RuleType | None":
        if isinstance(value, str):
            upper = value.upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class DateRange(BaseModel):
    start: str
    end: str


ScopeLevel = Literal["global", "country", "state", "city", "zone"]

# Nullable columns an update may reset by sending null.
CLEARABLE_RULE_FIELDS = frozenset(
    {"description", "start_time", "end_time", "country_id", "state_id", "city_id", "zone_id"}
)


class TemporalPricingRule(BaseModel):
    """A time/date-scoped multiplier applied on top of base pricing."""

    id: int
    name: str
    description: str | None = None
    rule_type: RuleType
    start_time: str | None = None
    end_time: str | None = None
    days_of_week: list[int] = Field(default_factory=list)
    specific_dates: list[str] = Field(default_factory=list)
    date_ranges: list[DateRange] = Field(default_factory=list)
    multiplier: float
    priority: int = 1
    country_id: int | None = None
    state_id: int | None = None
    city_id: int | None = None
    zone_id: int | None = None
    is_active: bool = True
    auto_apply: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_global(self) -> bool:
        return (
            self.country_id is None
            and self.state_id is None
            and self.city_id is None
            and self.zone_id is None
        )

    @property
    def scope_level(self) -> ScopeLevel:
        """Narrowest level the rule is pinned to."""
        if self.zone_id is not None:
            return "zone"
        if self.city_id is not None:
            return "city"
        if self.state_id is not None:
            return "state"
        if self.country_id is not None:
            return "country"
        return "global"

    def applies_to_scope(self, scope: GeoScope) -> bool:
        """Global, or pinned to any one of the ids in ``scope``.

        This is an OR across levels: a country-wide rule still applies when
        the request also names a city.
        """
        if self.is_global:
            return True
        return any(
            wanted is not None and getattr(self, field) == wanted
            for field, wanted in (
                ("country_id", scope.country_id),
                ("state_id", scope.state_id),
                ("city_id", scope.city_id),
                ("zone_id", scope.zone_id),
            )
        )

    def matches_scope_filter(self, scope: ScopeLevel) -> bool:
        """Admin list filter semantics for the ``scope`` query parameter."""
        if scope == "global":
            return self.is_global
        if scope == "country":
            return (
                self.country_id is not None
                and self.state_id is None
                and self.city_id is None
                and self.zone_id is None
            )
        return getattr(self, f"{scope}_id") is not None


class TemporalRuleInput(BaseModel):
    """Fields accepted on rule create and update; unset fields are left alone."""

    name: str | None = None
    description: str | None = None
    rule_type: RuleType | None = None
    start_time: str | None = None
    end_time: str | None = None
    days_of_week: list[int] | None = None
    specific_dates: list[str] | None = None
    date_ranges: list[DateRange] | None = None
    multiplier: float | None = None
    priority: int | None = None
    country_id: int | None = None
    state_id: int | None = None
    city_id: int | None = None
    zone_id: int | None = None
    is_active: bool | None = None
    auto_apply: bool | None = None

    def changes(self) -> dict:
        """Fields the caller sent; an explicit null clears a nullable field."""
        return {
            key: value
            for key, value in self.model_dump(mode="json", exclude_unset=True).items()
            if value is not None or key in CLEARABLE_RULE_FIELDS
        }


class TemporalRuleQuery(BaseModel):
    search: str | None = None
    rule_type: RuleType | None = None
    scope: ScopeLevel | None = None
    is_active: bool | None = None
    sort_by: Literal["priority", "name", "multiplier", "created_at"] = "priority"
    sort_order: Literal["asc", "desc"] = "desc"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=1000)


class TemporalRuleListItem(BaseModel):
    id: int
    name: str
    rule_type: RuleType
    multiplier: float
    priority: int
    is_active: bool
    scope: str


class TemporalRulePage(BaseModel):
    rules: list[TemporalRuleListItem]
    total: int
    page: int
    limit: int
    total_pages: int


class RuleBrief(BaseModel):
    id: int
    name: str
    rule_type: RuleType
    multiplier: float
    priority: int

    @classmethod
    def from_rule(cls, rule: TemporalPricingRule) -> "RuleBrief":
        return cls(
            id=rule.id,
            name=rule.name,
            rule_type=rule.rule_type,
            multiplier=rule.multiplier,
            priority=rule.priority,
        )


class ScopeNames(BaseModel):
    country: str | None = None
    state: str | None = None
    city: str | None = None
    zone: str | None = None


class TemporalEvaluation(BaseModel):
    """Which rules apply at an instant, and the single multiplier chosen."""

    evaluated_at: str
    day_of_week: int
    time: str
    applicable_rules: list[RuleBrief]
    applied_rule: RuleBrief | None = None
    combined_multiplier: float = 1.0
    scope: ScopeNames = Field(default_factory=ScopeNames)


class TemporalRuleStats(BaseModel):
    total_active_rules: int
    rules_by_type: dict[str, int]
    rules_by_scope: dict[str, int]
    average_multiplier: float
    highest_multiplier: float
    lowest_multiplier: float
