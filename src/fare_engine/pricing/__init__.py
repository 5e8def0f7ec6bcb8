from .calculator import PricingCalculator, applied_rule_names
from .regional import RegionalMultiplierResolver
from .simulation import SimulationComposer
from .tier_catalog import TierCatalog

__all__ = [
    "PricingCalculator",
    "RegionalMultiplierResolver",
    "SimulationComposer",
    "TierCatalog",
    "applied_rule_names",
]
