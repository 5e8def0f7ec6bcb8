"""Request and breakdown models for fare calculation and simulation."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from .geography import GeoScope
from .temporal import RuleBrief


class PricingCalculationRequest(BaseModel):
    tier_id: int
    distance_km: float
    duration_min: float
    scope: GeoScope = Field(default_factory=GeoScope)
    surge_multiplier: float = 1.0


class TierSnapshot(BaseModel):
    id: int
    name: str
    base_fare: int
    per_minute_rate: int
    per_km_rate: int
    tier_multiplier: float
    surge_multiplier: float
    demand_multiplier: float
    luxury_multiplier: float
    comfort_multiplier: float


class BasePricing(BaseModel):
    base_fare: float
    distance_cost: float
    time_cost: float
    subtotal: float
    tier_adjusted_total: float


class RegionalMultipliers(BaseModel):
    country: float = 1.0
    state: float = 1.0
    city: float = 1.0
    zone: float = 1.0
    total: float = 1.0


class DynamicPricing(BaseModel):
    surge_multiplier: float
    demand_multiplier: float
    total_dynamic_multiplier: float


class FinalPricing(BaseModel):
    base_amount: float
    regional_adjustments: float
    dynamic_adjustments: float
    service_fees: int
    taxes: int
    total_amount: float


class PricingMetadata(BaseModel):
    currency: str
    distance_unit: str
    calculated_at: datetime
    applied_rules: list[str]


class PricingBreakdown(BaseModel):
    """Every intermediate of a fare calculation, for auditability."""

    tier: TierSnapshot
    base_pricing: BasePricing
    regional_multipliers: RegionalMultipliers
    dynamic_pricing: DynamicPricing
    final_pricing: FinalPricing
    metadata: PricingMetadata


class SimulationRequest(BaseModel):
    tier_id: int
    distance_km: float
    duration_min: float
    date_time: datetime | str
    scope: GeoScope = Field(default_factory=GeoScope)
    rule_ids: list[int] = Field(default_factory=list)


class TemporalPricing(BaseModel):
    mode: Literal["automatic", "manual"]
    temporal_multiplier: float
    temporal_adjusted_total: float
    temporal_adjustments: float
    applied_rule: RuleBrief | None = None
    applicable_rules: list[RuleBrief] = Field(default_factory=list)


class SimulationFinalPricing(FinalPricing):
    temporal_adjusted_total: float
    temporal_adjustments: float
    total_amount_with_temporal: float


class SimulationQuote(BaseModel):
    """End-to-end quote: base, regional, dynamic and temporal layers."""

    tier: TierSnapshot
    base_pricing: BasePricing
    regional_multipliers: RegionalMultipliers
    dynamic_pricing: DynamicPricing
    temporal_pricing: TemporalPricing
    final_pricing: SimulationFinalPricing
    metadata: PricingMetadata
