"""Temporal pricing rule repository backed by SQLAlchemy."""

from collections.abc import Sequence
from typing import Any

from sqlalchemy import ColumnElement, and_, func, or_, select
from sqlalchemy.orm import Session

from fare_engine.core.exceptions import NotFoundError
from fare_engine.models import (
    GeoScope,
    RuleType,
    ScopeLevel,
    TemporalPricingRule,
    TemporalRuleQuery,
)

from ..schema import TemporalPricingRuleRecord as Rule

SORT_COLUMNS = {
    "priority": Rule.priority,
    "name": Rule.name,
    "multiplier": Rule.multiplier,
    "created_at": Rule.created_at,
}

IS_GLOBAL = and_(
    Rule.country_id.is_(None),
    Rule.state_id.is_(None),
    Rule.city_id.is_(None),
    Rule.zone_id.is_(None),
)


def scope_filter(level: ScopeLevel) -> ColumnElement[bool]:
    if level == "global":
        return IS_GLOBAL
    if level == "country":
        return and_(
            Rule.country_id.is_not(None),
            Rule.state_id.is_(None),
            Rule.city_id.is_(None),
            Rule.zone_id.is_(None),
        )
    return getattr(Rule, f"{level}_id").is_not(None)


class RuleRepository:
    """Repository for temporal pricing rule CRUD and candidate lookup."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, rule_id: int) -> TemporalPricingRule | None:
        record = self.session.get(Rule, rule_id)
        return self._to_model(record) if record else None

    def find_by_name(self, name: str) -> TemporalPricingRule | None:
        record = self.session.scalars(select(Rule).where(Rule.name == name)).first()
        return self._to_model(record) if record else None

    def create(self, fields: dict[str, Any]) -> TemporalPricingRule:
        record = Rule(**fields)
        self.session.add(record)
        self.session.flush()
        return self._to_model(record)

    def update(self, rule_id: int, fields: dict[str, Any]) -> TemporalPricingRule:
        record = self._require(rule_id)
        for key, value in fields.items():
            setattr(record, key, value)
        self.session.flush()
        return self._to_model(record)

    def search(self, query: TemporalRuleQuery) -> tuple[list[TemporalPricingRule], int]:
        stmt = select(Rule)
        if query.search:
            pattern = f"%{query.search}%"
            stmt = stmt.where(or_(Rule.name.ilike(pattern), Rule.description.ilike(pattern)))
        if query.rule_type is not None:
            stmt = stmt.where(Rule.rule_type == query.rule_type.value)
        if query.scope is not None:
            stmt = stmt.where(scope_filter(query.scope))
        if query.is_active is not None:
            stmt = stmt.where(Rule.is_active == query.is_active)

        total = self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        column = SORT_COLUMNS[query.sort_by]
        stmt = (
            stmt.order_by(column.desc() if query.sort_order == "desc" else column.asc())
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        )
        return [self._to_model(r) for r in self.session.scalars(stmt)], total

    def delete(self, rule_id: int) -> None:
        self.session.delete(self._require(rule_id))
        self.session.flush()

    def all_active(self) -> list[TemporalPricingRule]:
        stmt = select(Rule).where(Rule.is_active.is_(True)).order_by(Rule.id)
        return [self._to_model(r) for r in self.session.scalars(stmt)]

    def get_many(
        self, rule_ids: Sequence[int], active_only: bool = True
    ) -> list[TemporalPricingRule]:
        if not rule_ids:
            return []
        stmt = select(Rule).where(Rule.id.in_(rule_ids))
        if active_only:
            stmt = stmt.where(Rule.is_active.is_(True))
        return [self._to_model(r) for r in self.session.scalars(stmt.order_by(Rule.id))]

    def find_auto_apply_candidates(self, scope: GeoScope) -> list[TemporalPricingRule]:
        pinned = [
            column == wanted
            for column, wanted in (
                (Rule.country_id, scope.country_id),
                (Rule.state_id, scope.state_id),
                (Rule.city_id, scope.city_id),
                (Rule.zone_id, scope.zone_id),
            )
            if wanted is not None
        ]
        stmt = (
            select(Rule)
            .where(Rule.is_active.is_(True), Rule.auto_apply.is_(True), or_(IS_GLOBAL, *pinned))
            .order_by(Rule.id)
        )
        return [self._to_model(r) for r in self.session.scalars(stmt)]

    def _require(self, rule_id: int) -> Rule:
        record = self.session.get(Rule, rule_id)
        if record is None:
            raise NotFoundError(
                f"Temporal pricing rule with ID {rule_id} not found", {"rule_id": rule_id}
            )
        return record

    @staticmethod
    def _to_model(record: Rule) -> TemporalPricingRule:
        return TemporalPricingRule(
            id=record.id,
            name=record.name,
            description=record.description,
            rule_type=RuleType(record.rule_type),
            start_time=record.start_time,
            end_time=record.end_time,
            days_of_week=record.days_of_week or [],
            specific_dates=record.specific_dates or [],
            date_ranges=record.date_ranges or [],
            multiplier=record.multiplier,
            priority=record.priority,
            country_id=record.country_id,
            state_id=record.state_id,
            city_id=record.city_id,
            zone_id=record.zone_id,
            is_active=record.is_active,
            auto_apply=record.auto_apply,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
