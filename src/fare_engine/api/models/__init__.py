from .requests import (
    BulkAdjustRequest,
    BulkRuleUpdateRequest,
    EvaluationRequest,
    PricingValidationRequest,
)
from .responses import HealthResponse, MessageResponse

__all__ = [
    "BulkAdjustRequest",
    "BulkRuleUpdateRequest",
    "EvaluationRequest",
    "HealthResponse",
    "MessageResponse",
    "PricingValidationRequest",
]
