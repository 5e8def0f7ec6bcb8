"""End-to-end quote: base pricing with the temporal layer on top."""

import logging

from fare_engine.models import (
    PricingCalculationRequest,
    SimulationFinalPricing,
    SimulationQuote,
    SimulationRequest,
    TemporalPricing,
)
from fare_engine.pricing_logging import log_quote_context
from fare_engine.temporal.matcher import TemporalRuleMatcher

from .calculator import PricingCalculator

logger = logging.getLogger(__name__)


class SimulationComposer:
    """Layers the temporal multiplier over a surge-free base calculation.

    Service fees and taxes are taken from the base calculation and are not
    recomputed on the temporally adjusted amount.
    """

    def __init__(self, calculator: PricingCalculator, matcher: TemporalRuleMatcher) -> None:
        self.calculator = calculator
        self.matcher = matcher

    def simulate(self, request: SimulationRequest) -> SimulationQuote:
        if request.rule_ids:
            mode = "manual"
            evaluation = self.matcher.evaluate_specific_rules(
                request.rule_ids, request.date_time, request.scope
            )
        else:
            mode = "automatic"
            evaluation = self.matcher.evaluate(request.date_time, request.scope)

        base = self.calculator.calculate(
            PricingCalculationRequest(
                tier_id=request.tier_id,
                distance_km=request.distance_km,
                duration_min=request.duration_min,
                scope=request.scope,
                surge_multiplier=1.0,
            )
        )

        multiplier = evaluation.combined_multiplier
        base_amount = base.final_pricing.base_amount
        temporal_adjusted_total = base_amount * multiplier
        temporal_adjustments = temporal_adjusted_total - base_amount
        total_with_temporal = (
            temporal_adjusted_total + base.final_pricing.service_fees + base.final_pricing.taxes
        )

        applied_rules = list(base.metadata.applied_rules)
        if multiplier != 1.0:
            applied_rules.append("temporal_pricing")

        with log_quote_context(request.tier_id, operation="simulate_pricing"):
            logger.info(
                "Simulated %s quote for tier %s: temporal x%s, total %.2f",
                mode,
                base.tier.name,
                multiplier,
                total_with_temporal,
            )

        return SimulationQuote(
            tier=base.tier,
            base_pricing=base.base_pricing,
            regional_multipliers=base.regional_multipliers,
            dynamic_pricing=base.dynamic_pricing,
            temporal_pricing=TemporalPricing(
                mode=mode,
                temporal_multiplier=multiplier,
                temporal_adjusted_total=temporal_adjusted_total,
                temporal_adjustments=temporal_adjustments,
                applied_rule=evaluation.applied_rule,
                applicable_rules=evaluation.applicable_rules,
            ),
            final_pricing=SimulationFinalPricing(
                **base.final_pricing.model_dump(),
                temporal_adjusted_total=temporal_adjusted_total,
                temporal_adjustments=temporal_adjustments,
                total_amount_with_temporal=total_with_temporal,
            ),
            metadata=base.metadata.model_copy(update={"applied_rules": applied_rules}),
        )
