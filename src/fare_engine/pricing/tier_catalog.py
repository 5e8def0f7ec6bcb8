"""Tier catalog: validated create/update, bulk rate adjustment, summaries."""

import logging
import math
from typing import Any

from fare_engine.core.exceptions import (
    ConflictError,
    NotFoundError,
    PermanentError,
    ValidationError,
)
from fare_engine.core.money import round_minor_units
from fare_engine.core.violations import Violation
from fare_engine.models import (
    BulkItemResult,
    BulkResult,
    PricingValidationResult,
    SeedResult,
    Tier,
    TierInput,
    TierPage,
    TierQuery,
    TierSummary,
    TierSummaryItem,
)
from fare_engine.pricing_logging import log_context
from fare_engine.stores import TierStore

from .tier_validation import (
    compare_with_tier,
    pricing_warnings,
    validate_required_fields,
    validate_tier_bounds,
)

logger = logging.getLogger(__name__)

ADJUSTABLE_FIELDS = ("base_fare", "per_minute_rate", "per_km_rate", "minimum_fare")

STANDARD_TIERS: list[dict[str, Any]] = [
    {
        "name": "UberX",
        "base_fare": 250,
        "per_minute_rate": 15,
        "per_km_rate": 80,
        "tier_multiplier": 1.0,
        "min_passengers": 1,
        "max_passengers": 4,
        "priority": 10,
        "vehicle_types": ["car", "motorcycle"],
    },
    {
        "name": "UberXL",
        "base_fare": 350,
        "per_minute_rate": 20,
        "per_km_rate": 100,
        "tier_multiplier": 1.3,
        "comfort_multiplier": 1.2,
        "min_passengers": 1,
        "max_passengers": 6,
        "priority": 9,
        "vehicle_types": ["car", "motorcycle", "bicycle"],
    },
    {
        "name": "Comfort",
        "base_fare": 400,
        "per_minute_rate": 25,
        "per_km_rate": 120,
        "tier_multiplier": 1.8,
        "comfort_multiplier": 1.5,
        "min_passengers": 1,
        "max_passengers": 4,
        "priority": 8,
        "vehicle_types": ["car"],
    },
    {
        "name": "Uber Black",
        "base_fare": 800,
        "per_minute_rate": 40,
        "per_km_rate": 250,
        "tier_multiplier": 2.5,
        "luxury_multiplier": 1.8,
        "comfort_multiplier": 2.0,
        "min_passengers": 1,
        "max_passengers": 4,
        "priority": 7,
        "vehicle_types": ["car"],
    },
]


class TierCatalog:
    """Owns the write rules for tiers; storage is delegated to a TierStore."""

    def __init__(self, store: TierStore) -> None:
        self.store = store

    def get_tier(self, tier_id: int) -> Tier:
        tier = self.store.get(tier_id)
        if tier is None:
            raise NotFoundError(f"Ride tier with ID {tier_id} not found", {"tier_id": tier_id})
        return tier

    def list_tiers(self, query: TierQuery | None = None) -> TierPage:
        query = query or TierQuery()
        tiers, total = self.store.search(query)
        return TierPage(
            tiers=tiers,
            total=total,
            page=query.page,
            limit=query.limit,
            total_pages=math.ceil(total / query.limit),
        )

    def create_tier(self, tier_input: TierInput) -> Tier:
        missing = validate_required_fields(tier_input)
        if missing:
            raise ValidationError("Invalid tier configuration", missing)

        if tier_input.name and self.store.find_by_name(tier_input.name) is not None:
            raise ConflictError(f'Ride tier with name "{tier_input.name}" already exists')

        self._ensure_valid(tier_input)

        tier = self.store.create(tier_input.changes())
        logger.info("Ride tier created: %s (%d¢ base fare)", tier.name, tier.base_fare)
        return tier

    def update_tier(self, tier_id: int, tier_input: TierInput) -> Tier:
        """Apply a partial update, validating the tier as it would look afterwards."""
        existing = self.get_tier(tier_id)

        if tier_input.name and tier_input.name != existing.name:
            if self.store.find_by_name(tier_input.name) is not None:
                raise ConflictError(f'Ride tier with name "{tier_input.name}" already exists')

        changes = tier_input.changes()
        merged = existing.model_dump(include=set(TierInput.model_fields))
        merged.update(changes)
        self._ensure_valid(TierInput(**merged), compare_with_tier_id=tier_id)

        tier = self.store.update(tier_id, changes)
        with log_context(tier_id=tier_id):
            logger.info("Ride tier updated: %s", tier.name)
        return tier

    def delete_tier(self, tier_id: int) -> None:
        tier = self.get_tier(tier_id)
        rides = self.store.count_rides(tier_id)
        if rides > 0:
            raise ConflictError(
                f'Cannot delete ride tier "{tier.name}" because it has {rides} associated rides',
                {"tier_id": tier_id, "rides_count": rides},
            )
        self.store.delete(tier_id)
        logger.info("Ride tier deleted: %s", tier.name)

    def toggle_active(self, tier_id: int) -> Tier:
        tier = self.get_tier(tier_id)
        updated = self.store.update(tier_id, {"is_active": not tier.is_active})
        logger.info(
            "Ride tier %s status changed to: %s",
            tier.name,
            "active" if updated.is_active else "inactive",
        )
        return updated

    def validate_pricing_configuration(
        self, tier_input: TierInput, compare_with_tier_id: int | None = None
    ) -> PricingValidationResult:
        errors = validate_tier_bounds(tier_input)
        warnings = pricing_warnings(tier_input)

        comparison = None
        if compare_with_tier_id is not None:
            existing = self.store.get(compare_with_tier_id)
            if existing is not None:
                comparison = compare_with_tier(tier_input, existing)

        return PricingValidationResult(
            is_valid=not errors,
            errors=errors,
            warnings=warnings,
            comparison=comparison,
        )

    def bulk_adjust(
        self,
        tier_ids: list[int],
        field: str,
        adjustment_type: str,
        adjustment_value: float,
    ) -> BulkResult[Tier]:
        """Adjust one rate field on many tiers; each tier succeeds or fails alone."""
        violations = []
        if not tier_ids:
            violations.append(
                Violation(
                    field="tier_ids", rule="non_empty", message="tier_ids must be a non-empty list"
                )
            )
        if field not in ADJUSTABLE_FIELDS:
            violations.append(
                Violation(
                    field="field",
                    rule="choice",
                    message=f"field must be one of: {', '.join(ADJUSTABLE_FIELDS)}",
                )
            )
        if adjustment_type not in ("percentage", "fixed"):
            violations.append(
                Violation(
                    field="adjustment_type",
                    rule="choice",
                    message="adjustment_type must be 'percentage' or 'fixed'",
                )
            )
        if violations:
            raise ValidationError("Invalid bulk adjustment", violations)

        results: list[BulkItemResult[Tier]] = []
        for tier_id in tier_ids:
            try:
                tier = self.get_tier(tier_id)
                current = getattr(tier, field)
                if adjustment_type == "percentage":
                    new_value = current * (1 + adjustment_value / 100)
                else:
                    new_value = current + adjustment_value

                updated = self.update_tier(
                    tier_id, TierInput(**{field: round_minor_units(new_value)})
                )
                results.append(BulkItemResult[Tier](id=tier_id, success=True, data=updated))
            except PermanentError as e:
                results.append(BulkItemResult[Tier](id=tier_id, success=False, error=e.message))

        successful = sum(1 for r in results if r.success)
        logger.info(
            "Bulk %s adjustment of %s: %d succeeded, %d failed",
            adjustment_type,
            field,
            successful,
            len(results) - successful,
        )
        return BulkResult[Tier](
            message="Bulk pricing update completed",
            results=results,
            successful=successful,
            failed=len(results) - successful,
        )

    def create_standard_tiers(self) -> SeedResult[Tier]:
        created: list[Tier] = []
        errors: list[str] = []

        for tier_data in STANDARD_TIERS:
            if self.store.find_by_name(tier_data["name"]) is not None:
                errors.append(f'Tier "{tier_data["name"]}" already exists')
                continue
            try:
                created.append(self.create_tier(TierInput(**tier_data)))
            except PermanentError as e:
                errors.append(f'Failed to create "{tier_data["name"]}": {e.message}')

        return SeedResult[Tier](
            message="Standard tiers creation completed",
            created=len(created),
            errors=len(errors),
            items=created,
            error_messages=errors,
        )

    def pricing_summary(self) -> TierSummary:
        tiers = self.store.all()
        base_fares = [t.base_fare for t in tiers]

        return TierSummary(
            total_tiers=len(tiers),
            active_tiers=sum(1 for t in tiers if t.is_active),
            total_rides=sum(t.rides_count for t in tiers),
            average_base_fare=sum(base_fares) / len(tiers) if tiers else 0.0,
            price_ranges={
                "lowest": min(base_fares, default=0),
                "highest": max(base_fares, default=0),
            },
            tier_distribution={
                "economy": sum(1 for t in tiers if t.tier_multiplier <= 1.2),
                "comfort": sum(1 for t in tiers if 1.2 < t.tier_multiplier <= 1.8),
                "premium": sum(1 for t in tiers if 1.8 < t.tier_multiplier <= 2.5),
                "luxury": sum(1 for t in tiers if t.tier_multiplier > 2.5),
            },
            tiers=[
                TierSummaryItem(
                    id=t.id,
                    name=t.name,
                    base_fare=t.base_fare,
                    tier_multiplier=t.tier_multiplier,
                    rides_count=t.rides_count,
                    is_active=t.is_active,
                )
                for t in tiers
            ],
        )

    def _ensure_valid(self, tier_input: TierInput, compare_with_tier_id: int | None = None) -> None:
        validation = self.validate_pricing_configuration(tier_input, compare_with_tier_id)
        if not validation.is_valid:
            raise ValidationError(
                "Invalid pricing configuration",
                validation.errors,
                {"warnings": validation.warnings},
            )
