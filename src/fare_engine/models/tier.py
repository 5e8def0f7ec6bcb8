"""Ride tier models: stored tiers, create/update input, catalog views."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from fare_engine.core.violations import Violation

# Reference ride used by the pricing heuristics: 15 minutes, 5 km.
TYPICAL_RIDE_MINUTES = 15
TYPICAL_RIDE_KM = 5


class Tier(BaseModel):
    """A named service class with its rate table, in integer minor units."""

    id: int
    name: str
    base_fare: int
    minimum_fare: int = 0
    per_minute_rate: int
    per_km_rate: int
    image_url: str | None = None
    tier_multiplier: float = 1.0
    surge_multiplier: float = 1.0
    demand_multiplier: float = 1.0
    luxury_multiplier: float = 1.0
    comfort_multiplier: float = 1.0
    min_passengers: int = 1
    max_passengers: int = 4
    priority: int = 1
    is_active: bool = True
    vehicle_types: list[str] = Field(default_factory=list)
    rides_count: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def typical_ride_total(self) -> float:
        return typical_ride_total(self.base_fare, self.per_minute_rate, self.per_km_rate)


def typical_ride_total(base_fare: float, per_minute_rate: float, per_km_rate: float) -> float:
    return base_fare + TYPICAL_RIDE_MINUTES * per_minute_rate + TYPICAL_RIDE_KM * per_km_rate


class TierInput(BaseModel):
    """Fields accepted on tier create and update; unset fields are left alone."""

    name: str | None = None
    base_fare: int | None = None
    minimum_fare: int | None = None
    per_minute_rate: int | None = None
    per_km_rate: int | None = None
    image_url: str | None = None
    tier_multiplier: float | None = None
    surge_multiplier: float | None = None
    demand_multiplier: float | None = None
    luxury_multiplier: float | None = None
    comfort_multiplier: float | None = None
    min_passengers: int | None = None
    max_passengers: int | None = None
    priority: int | None = None
    is_active: bool | None = None
    vehicle_types: list[str] | None = None

    def changes(self) -> dict:
        """Fields the caller sent; only image_url can be cleared with null."""
        return {
            key: value
            for key, value in self.model_dump(exclude_unset=True).items()
            if value is not None or key == "image_url"
        }


class TierQuery(BaseModel):
    search: str | None = None
    is_active: bool | None = None
    sort_by: Literal["name", "priority", "base_fare", "created_at"] = "name"
    sort_order: Literal["asc", "desc"] = "asc"
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)


class TierPage(BaseModel):
    tiers: list[Tier]
    total: int
    page: int
    limit: int
    total_pages: int


class TierRateCard(BaseModel):
    id: int
    name: str
    base_fare: int
    per_minute_rate: int
    per_km_rate: int


class TierComparison(BaseModel):
    existing_tier: TierRateCard
    differences: dict[str, float]
    competitiveness: Literal["similar", "more_expensive", "more_competitive"]


class PricingValidationResult(BaseModel):
    is_valid: bool
    errors: list[Violation] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    comparison: TierComparison | None = None


class TierSummaryItem(BaseModel):
    id: int
    name: str
    base_fare: int
    tier_multiplier: float
    rides_count: int
    is_active: bool


class TierSummary(BaseModel):
    total_tiers: int
    active_tiers: int
    total_rides: int
    average_base_fare: float
    price_ranges: dict[str, int]
    tier_distribution: dict[str, int]
    tiers: list[TierSummaryItem]
