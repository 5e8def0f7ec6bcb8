"""Fare calculation: base tariff through tier, regional and dynamic layers."""

import logging
from datetime import UTC, datetime

from fare_engine.core.exceptions import NotFoundError, ValidationError
from fare_engine.core.money import round_minor_units
from fare_engine.core.violations import Violation
from fare_engine.models import (
    BasePricing,
    DynamicPricing,
    FinalPricing,
    PricingBreakdown,
    PricingCalculationRequest,
    PricingMetadata,
    RegionalMultipliers,
    Tier,
    TierSnapshot,
)
from fare_engine.pricing_logging import log_quote_context
from fare_engine.settings import PricingSettings
from fare_engine.stores import GeographyLookup, TierStore

from .regional import RegionalMultiplierResolver

logger = logging.getLogger(__name__)


def applied_rule_names(
    regional: RegionalMultipliers, surge_multiplier: float, demand_multiplier: float
) -> list[str]:
    """Names of the multiplier categories that moved the price."""
    rules = []
    if regional.country != 1.0:
        rules.append("country_pricing_multiplier")
    if regional.state != 1.0:
        rules.append("state_pricing_multiplier")
    if regional.city != 1.0:
        rules.append("city_pricing_multiplier")
    if regional.zone != 1.0:
        rules.append("zone_pricing_multiplier")
    if surge_multiplier != 1.0:
        rules.append("surge_pricing")
    if demand_multiplier != 1.0:
        rules.append("demand_pricing")
    return rules


def tier_snapshot(tier: Tier) -> TierSnapshot:
    return TierSnapshot(
        id=tier.id,
        name=tier.name,
        base_fare=tier.base_fare,
        per_minute_rate=tier.per_minute_rate,
        per_km_rate=tier.per_km_rate,
        tier_multiplier=tier.tier_multiplier,
        surge_multiplier=tier.surge_multiplier,
        demand_multiplier=tier.demand_multiplier,
        luxury_multiplier=tier.luxury_multiplier,
        comfort_multiplier=tier.comfort_multiplier,
    )


class PricingCalculator:
    """Calculates a full fare breakdown for a tier, trip size and geography.

    Each step feeds the next; only fees and taxes are rounded; every
    intermediate keeps full precision so the breakdown can be audited.
    """

    def __init__(
        self,
        tier_store: TierStore,
        geography: GeographyLookup,
        settings: PricingSettings | None = None,
    ) -> None:
        self.tier_store = tier_store
        self.geography = geography
        self.settings = settings or PricingSettings()
        self.regional_resolver = RegionalMultiplierResolver(geography)

    def calculate(self, request: PricingCalculationRequest) -> PricingBreakdown:
        self._validate_request(request)

        tier = self.tier_store.get(request.tier_id)
        if tier is None:
            raise NotFoundError(
                f"Ride tier with ID {request.tier_id} not found", {"tier_id": request.tier_id}
            )

        with log_quote_context(tier.id, operation="calculate_pricing"):
            base_fare = float(tier.base_fare)
            distance_cost = request.distance_km * tier.per_km_rate
            time_cost = request.duration_min * tier.per_minute_rate
            subtotal = base_fare + distance_cost + time_cost

            tier_adjusted_total = subtotal * tier.tier_multiplier

            regional = self.regional_resolver.resolve(request.scope)
            regional_total = tier_adjusted_total * regional.total

            demand_multiplier = self._demand_multiplier(request.scope.zone_id)
            dynamic_multiplier = request.surge_multiplier * demand_multiplier
            dynamic_total = regional_total * dynamic_multiplier

            service_fees = round_minor_units(dynamic_total * self.settings.service_fee_rate)
            taxes = round_minor_units(dynamic_total * self.settings.tax_rate)
            total_amount = dynamic_total + service_fees + taxes

            logger.debug(
                "Priced tier %s: subtotal=%.2f regional=%.4f dynamic=%.4f total=%.2f",
                tier.name,
                subtotal,
                regional.total,
                dynamic_multiplier,
                total_amount,
            )

        return PricingBreakdown(
            tier=tier_snapshot(tier),
            base_pricing=BasePricing(
                base_fare=base_fare,
                distance_cost=distance_cost,
                time_cost=time_cost,
                subtotal=subtotal,
                tier_adjusted_total=tier_adjusted_total,
            ),
            regional_multipliers=regional,
            dynamic_pricing=DynamicPricing(
                surge_multiplier=request.surge_multiplier,
                demand_multiplier=demand_multiplier,
                total_dynamic_multiplier=dynamic_multiplier,
            ),
            final_pricing=FinalPricing(
                base_amount=regional_total,
                regional_adjustments=regional_total - subtotal,
                dynamic_adjustments=dynamic_total - regional_total,
                service_fees=service_fees,
                taxes=taxes,
                total_amount=total_amount,
            ),
            metadata=PricingMetadata(
                currency=self.settings.currency,
                distance_unit=self.settings.distance_unit,
                calculated_at=datetime.now(UTC),
                applied_rules=applied_rule_names(
                    regional, request.surge_multiplier, demand_multiplier
                ),
            ),
        )

    def _demand_multiplier(self, zone_id: int | None) -> float:
        if zone_id is None:
            return 1.0
        zone = self.geography.zone(zone_id)
        if zone is None or zone.demand_multiplier is None:
            return 1.0
        return float(zone.demand_multiplier)

    @staticmethod
    def _validate_request(request: PricingCalculationRequest) -> None:
        violations = []
        if request.distance_km < 0:
            violations.append(
                Violation(field="distance_km", rule="min", message="Distance must be non-negative")
            )
        if request.duration_min < 0:
            violations.append(
                Violation(field="duration_min", rule="min", message="Duration must be non-negative")
            )
        if request.surge_multiplier <= 0:
            violations.append(
                Violation(
                    field="surge_multiplier",
                    rule="positive",
                    message="Surge multiplier must be greater than 0",
                )
            )
        if violations:
            raise ValidationError("Invalid pricing calculation request", violations)
