from typing import Annotated

from fastapi import APIRouter, Query

from fare_engine.api.dependencies import CalculatorDep, TierCatalogDep
from fare_engine.api.models import BulkAdjustRequest, MessageResponse, PricingValidationRequest
from fare_engine.models import (
    BulkResult,
    PricingBreakdown,
    PricingCalculationRequest,
    PricingValidationResult,
    SeedResult,
    Tier,
    TierInput,
    TierPage,
    TierQuery,
    TierSummary,
)

router = APIRouter()


@router.get("", response_model=TierPage)
def list_tiers(catalog: TierCatalogDep, query: Annotated[TierQuery, Query()]) -> TierPage:
    return catalog.list_tiers(query)


@router.post("", response_model=Tier, status_code=201)
def create_tier(body: TierInput, catalog: TierCatalogDep) -> Tier:
    return catalog.create_tier(body)


# Static paths are registered before /{tier_id} so they are not captured by it


@router.get("/summary", response_model=TierSummary)
def pricing_summary(catalog: TierCatalogDep) -> TierSummary:
    return catalog.pricing_summary()


@router.post("/validate", response_model=PricingValidationResult)
def validate_pricing(
    body: PricingValidationRequest, catalog: TierCatalogDep
) -> PricingValidationResult:
    """Dry-run validation: bounds, heuristics, and an optional comparison."""
    return catalog.validate_pricing_configuration(body.tier_input(), body.compare_with_tier_id)


@router.post("/calculate", response_model=PricingBreakdown)
def calculate_pricing(
    body: PricingCalculationRequest, calculator: CalculatorDep
) -> PricingBreakdown:
    return calculator.calculate(body)


@router.post("/bulk-update", response_model=BulkResult[Tier])
def bulk_update_pricing(body: BulkAdjustRequest, catalog: TierCatalogDep) -> BulkResult[Tier]:
    return catalog.bulk_adjust(
        body.tier_ids, body.field, body.adjustment_type, body.adjustment_value
    )


@router.post("/standard", response_model=SeedResult[Tier], status_code=201)
def create_standard_tiers(catalog: TierCatalogDep) -> SeedResult[Tier]:
    return catalog.create_standard_tiers()


@router.get("/{tier_id}", response_model=Tier)
def get_tier(tier_id: int, catalog: TierCatalogDep) -> Tier:
    return catalog.get_tier(tier_id)


@router.patch("/{tier_id}", response_model=Tier)
def update_tier(tier_id: int, body: TierInput, catalog: TierCatalogDep) -> Tier:
    return catalog.update_tier(tier_id, body)


@router.delete("/{tier_id}", response_model=MessageResponse)
def delete_tier(tier_id: int, catalog: TierCatalogDep) -> MessageResponse:
    catalog.delete_tier(tier_id)
    return MessageResponse(message="Ride tier deleted successfully")


@router.patch("/{tier_id}/toggle-status", response_model=Tier)
def toggle_tier_status(tier_id: int, catalog: TierCatalogDep) -> Tier:
    return catalog.toggle_active(tier_id)
