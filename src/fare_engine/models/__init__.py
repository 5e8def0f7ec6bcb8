from .common import BulkItemResult, BulkResult, SeedResult
from .geography import GeoRegion, GeoScope, ServiceZone
from .pricing import (
    BasePricing,
    DynamicPricing,
    FinalPricing,
    PricingBreakdown,
    PricingCalculationRequest,
    PricingMetadata,
    RegionalMultipliers,
    SimulationFinalPricing,
    SimulationQuote,
    SimulationRequest,
    TemporalPricing,
    TierSnapshot,
)
from .temporal import (
    DateRange,
    RuleBrief,
    RuleType,
    ScopeLevel,
    ScopeNames,
    TemporalEvaluation,
    TemporalPricingRule,
    TemporalRuleInput,
    TemporalRuleListItem,
    TemporalRulePage,
    TemporalRuleQuery,
    TemporalRuleStats,
)
from .tier import (
    PricingValidationResult,
    Tier,
    TierComparison,
    TierInput,
    TierPage,
    TierQuery,
    TierRateCard,
    TierSummary,
    TierSummaryItem,
)

__all__ = [
    "BasePricing",
    "BulkItemResult",
    "BulkResult",
    "DateRange",
    "DynamicPricing",
    "FinalPricing",
    "GeoRegion",
    "GeoScope",
    "PricingBreakdown",
    "PricingCalculationRequest",
    "PricingMetadata",
    "PricingValidationResult",
    "RegionalMultipliers",
    "RuleBrief",
    "RuleType",
    "ScopeLevel",
    "ScopeNames",
    "SeedResult",
    "ServiceZone",
    "SimulationFinalPricing",
    "SimulationQuote",
    "SimulationRequest",
    "TemporalEvaluation",
    "TemporalPricing",
    "TemporalPricingRule",
    "TemporalRuleInput",
    "TemporalRuleListItem",
    "TemporalRulePage",
    "TemporalRuleQuery",
    "TemporalRuleStats",
    "Tier",
    "TierComparison",
    "TierInput",
    "TierPage",
    "TierQuery",
    "TierRateCard",
    "TierSnapshot",
    "TierSummary",
    "TierSummaryItem",
]
