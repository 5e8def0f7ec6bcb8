"""Policies for turning a set of applicable rules into one multiplier."""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol

from fare_engine.models import TemporalPricingRule


@dataclass
class RuleSelection:
    ranked: list[TemporalPricingRule] = field(default_factory=list)
    applied: TemporalPricingRule | None = None
    multiplier: float = 1.0


class RuleSelectionStrategy(Protocol):
    def select(self, rules: Sequence[TemporalPricingRule]) -> RuleSelection: ...


class SelectTop:
    """Only the highest-priority rule counts; other matches do not stack.

    Rules are ranked by priority, highest first, with a stable sort, so equal
    priorities keep the order the store returned them in.
    """

    def select(self, rules: Sequence[TemporalPricingRule]) -> RuleSelection:
        ranked = sorted(rules, key=lambda rule: rule.priority, reverse=True)
        if not ranked:
            return RuleSelection()
        top = ranked[0]
        return RuleSelection(ranked=ranked, applied=top, multiplier=float(top.multiplier))
