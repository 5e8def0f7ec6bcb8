from .matcher import TemporalRuleMatcher, parse_moment, rule_applies_at
from .rule_catalog import TemporalRuleCatalog
from .selection import RuleSelectionStrategy, SelectTop

__all__ = [
    "RuleSelectionStrategy",
    "SelectTop",
    "TemporalRuleCatalog",
    "TemporalRuleMatcher",
    "parse_moment",
    "rule_applies_at",
]
