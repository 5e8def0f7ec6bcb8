"""Explicit validators for tier pricing configuration.

Bounds are checked field by field and reported as structured violations
instead of raising on the first failure, so callers see every problem at once.
"""

from fare_engine.core.violations import Violation, check_range, required
from fare_engine.models import Tier, TierComparison, TierInput, TierRateCard
from fare_engine.models.tier import typical_ride_total

# field -> (low, high, label, unit)
TIER_BOUNDS: dict[str, tuple[float, float, str, str]] = {
    "base_fare": (50, 5000, "Base fare", " cents"),
    "minimum_fare": (0, 10000, "Minimum fare", " cents"),
    "per_minute_rate": (5, 200, "Per minute rate", " cents"),
    "per_km_rate": (20, 500, "Per km rate", " cents"),
    "tier_multiplier": (0.5, 5.0, "Tier multiplier", ""),
    "surge_multiplier": (1.0, 10.0, "Surge multiplier", ""),
    "demand_multiplier": (1.0, 5.0, "Demand multiplier", ""),
    "luxury_multiplier": (1.0, 3.0, "Luxury multiplier", ""),
    "comfort_multiplier": (1.0, 2.0, "Comfort multiplier", ""),
    "min_passengers": (1, 20, "Minimum passengers", ""),
    "max_passengers": (1, 20, "Maximum passengers", ""),
    "priority": (1, 100, "Priority", ""),
}

REQUIRED_ON_CREATE: dict[str, str] = {
    "name": "Name",
    "base_fare": "Base fare",
    "per_minute_rate": "Per minute rate",
    "per_km_rate": "Per km rate",
}

# Stand-ins for the heuristics when a rate is not part of the input.
DEFAULT_BASE_FARE = 250
DEFAULT_PER_MINUTE_RATE = 15
DEFAULT_PER_KM_RATE = 80

UNPROFITABLE_THRESHOLD = 500
DEMAND_REDUCING_THRESHOLD = 3000
SIMILAR_PRICE_BAND = 100

RATE_FIELDS = ("base_fare", "per_minute_rate", "per_km_rate")


def validate_required_fields(tier: TierInput) -> list[Violation]:
    violations = []
    for field, label in REQUIRED_ON_CREATE.items():
        value = getattr(tier, field)
        if value is None or (isinstance(value, str) and not value.strip()):
            violations.append(required(field, label))
    return violations


def validate_tier_bounds(tier: TierInput) -> list[Violation]:
    """Check every supplied field against its bound; unset fields are skipped."""
    violations: list[Violation] = []
    for field, (low, high, label, unit) in TIER_BOUNDS.items():
        check_range(violations, field, getattr(tier, field), low, high, label, unit)

    if (
        tier.min_passengers is not None
        and tier.max_passengers is not None
        and tier.min_passengers > tier.max_passengers
    ):
        violations.append(
            Violation(
                field="min_passengers",
                rule="not_above_max",
                message="Minimum passengers cannot exceed maximum passengers",
            )
        )
    return violations


def effective_rates(tier: TierInput) -> tuple[int, int, int]:
    return (
        tier.base_fare if tier.base_fare is not None else DEFAULT_BASE_FARE,
        tier.per_minute_rate if tier.per_minute_rate is not None else DEFAULT_PER_MINUTE_RATE,
        tier.per_km_rate if tier.per_km_rate is not None else DEFAULT_PER_KM_RATE,
    )


def pricing_warnings(tier: TierInput) -> list[str]:
    total = typical_ride_total(*effective_rates(tier))
    warnings = []
    if total < UNPROFITABLE_THRESHOLD:
        warnings.append("Total for typical ride seems too low, may not be profitable")
    if total > DEMAND_REDUCING_THRESHOLD:
        warnings.append("Total for typical ride seems too high, may reduce demand")
    return warnings


def classify_competitiveness(difference: float) -> str:
    if abs(difference) < SIMILAR_PRICE_BAND:
        return "similar"
    return "more_expensive" if difference > 0 else "more_competitive"


def compare_with_tier(tier: TierInput, existing: Tier) -> TierComparison:
    """Rate deltas and price positioning of ``tier`` against a stored tier."""
    base_fare, per_minute_rate, per_km_rate = effective_rates(tier)
    difference = typical_ride_total(base_fare, per_minute_rate, per_km_rate) - (
        existing.typical_ride_total()
    )
    return TierComparison(
        existing_tier=TierRateCard(
            id=existing.id,
            name=existing.name,
            base_fare=existing.base_fare,
            per_minute_rate=existing.per_minute_rate,
            per_km_rate=existing.per_km_rate,
        ),
        differences={
            "base_fare": base_fare - existing.base_fare,
            "per_minute_rate": per_minute_rate - existing.per_minute_rate,
            "per_km_rate": per_km_rate - existing.per_km_rate,
        },
        competitiveness=classify_competitiveness(difference),
    )
