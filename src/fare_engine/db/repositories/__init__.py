from .geography_repository import GeographyRepository
from .rule_repository import RuleRepository
from .tier_repository import TierRepository

__all__ = ["GeographyRepository", "RuleRepository", "TierRepository"]
