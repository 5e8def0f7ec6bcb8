from typing import Annotated

from fastapi import APIRouter, Body, Query

from fare_engine.api.dependencies import ComposerDep, MatcherDep, RuleCatalogDep
from fare_engine.api.models import BulkRuleUpdateRequest, EvaluationRequest, MessageResponse
from fare_engine.models import (
    BulkResult,
    GeoScope,
    SeedResult,
    SimulationQuote,
    SimulationRequest,
    TemporalEvaluation,
    TemporalPricingRule,
    TemporalRuleInput,
    TemporalRulePage,
    TemporalRuleQuery,
    TemporalRuleStats,
)

router = APIRouter()


@router.get("", response_model=TemporalRulePage)
def list_rules(
    catalog: RuleCatalogDep, query: Annotated[TemporalRuleQuery, Query()]
) -> TemporalRulePage:
    return catalog.list_rules(query)


@router.post("", response_model=TemporalPricingRule, status_code=201)
def create_rule(body: TemporalRuleInput, catalog: RuleCatalogDep) -> TemporalPricingRule:
    return catalog.create_rule(body)


@router.get("/summary", response_model=TemporalRuleStats)
def rules_summary(catalog: RuleCatalogDep) -> TemporalRuleStats:
    return catalog.summary()


@router.post("/evaluate", response_model=TemporalEvaluation)
def evaluate_rules(body: EvaluationRequest, matcher: MatcherDep) -> TemporalEvaluation:
    """Which rules apply at ``date_time``; ``rule_ids`` forces a manual selection."""
    if body.rule_ids:
        return matcher.evaluate_specific_rules(body.rule_ids, body.date_time, body.scope)
    return matcher.evaluate(body.date_time, body.scope)


@router.post("/simulate-pricing", response_model=SimulationQuote)
def simulate_pricing(body: SimulationRequest, composer: ComposerDep) -> SimulationQuote:
    return composer.simulate(body)


@router.post("/bulk-update", response_model=BulkResult[TemporalPricingRule])
def bulk_update_rules(
    body: BulkRuleUpdateRequest, catalog: RuleCatalogDep
) -> BulkResult[TemporalPricingRule]:
    return catalog.bulk_update(body.rule_ids, body.updates)


@router.post("/standard", response_model=SeedResult[TemporalPricingRule], status_code=201)
def create_standard_rules(
    catalog: RuleCatalogDep, scope: Annotated[GeoScope | None, Body()] = None
) -> SeedResult[TemporalPricingRule]:
    return catalog.create_standard_rules(scope)


@router.get("/{rule_id}", response_model=TemporalPricingRule)
def get_rule(rule_id: int, catalog: RuleCatalogDep) -> TemporalPricingRule:
    return catalog.get_rule(rule_id)


@router.patch("/{rule_id}", response_model=TemporalPricingRule)
def update_rule(
    rule_id: int, body: TemporalRuleInput, catalog: RuleCatalogDep
) -> TemporalPricingRule:
    return catalog.update_rule(rule_id, body)


@router.delete("/{rule_id}", response_model=MessageResponse)
def delete_rule(rule_id: int, catalog: RuleCatalogDep) -> MessageResponse:
    catalog.delete_rule(rule_id)
    return MessageResponse(message="Temporal pricing rule deleted successfully")


@router.patch("/{rule_id}/toggle-status", response_model=TemporalPricingRule)
def toggle_rule_status(rule_id: int, catalog: RuleCatalogDep) -> TemporalPricingRule:
    return catalog.toggle_active(rule_id)
