from datetime import datetime

from pydantic import BaseModel, Field

from fare_engine.models import GeoScope, TemporalRuleInput, TierInput


class PricingValidationRequest(TierInput):
    compare_with_tier_id: int | None = None

    def tier_input(self) -> TierInput:
        return TierInput(**self.model_dump(exclude={"compare_with_tier_id"}, exclude_none=True))


class BulkAdjustRequest(BaseModel):
    tier_ids: list[int]
    field: str
    adjustment_type: str
    adjustment_value: float


class BulkRuleUpdateRequest(BaseModel):
    rule_ids: list[int]
    updates: TemporalRuleInput


class EvaluationRequest(BaseModel):
    date_time: datetime | str
    scope: GeoScope = Field(default_factory=GeoScope)
    rule_ids: list[int] = Field(default_factory=list)
