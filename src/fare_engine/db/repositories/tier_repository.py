"""Ride tier repository backed by SQLAlchemy."""

import logging
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from fare_engine.core.exceptions import NotFoundError
from fare_engine.models import Tier, TierQuery

from ..schema import Ride, RideTier, TierVehicleType, VehicleType

logger = logging.getLogger(__name__)

SORT_COLUMNS = {
    "name": RideTier.name,
    "priority": RideTier.priority,
    "base_fare": RideTier.base_fare,
    "created_at": RideTier.created_at,
}


class TierRepository:
    """Repository for ride tier CRUD operations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, tier_id: int) -> Tier | None:
        record = self.session.get(RideTier, tier_id)
        if record is None:
            return None
        return self._to_model(record, self.count_rides(tier_id))

    def find_by_name(self, name: str) -> Tier | None:
        record = self.session.scalars(select(RideTier).where(RideTier.name == name)).first()
        if record is None:
            return None
        return self._to_model(record, self.count_rides(record.id))

    def create(self, fields: dict[str, Any]) -> Tier:
        fields = dict(fields)
        vehicle_types = fields.pop("vehicle_types", None)
        record = RideTier(**fields)
        self.session.add(record)
        self.session.flush()
        if vehicle_types is not None:
            self._set_vehicle_types(record, vehicle_types)
            self.session.flush()
        return self._to_model(record, 0)

    def update(self, tier_id: int, fields: dict[str, Any]) -> Tier:
        record = self._require(tier_id)
        fields = dict(fields)
        vehicle_types = fields.pop("vehicle_types", None)
        for key, value in fields.items():
            setattr(record, key, value)
        if vehicle_types is not None:
            self._set_vehicle_types(record, vehicle_types)
        self.session.flush()
        return self._to_model(record, self.count_rides(tier_id))

    def search(self, query: TierQuery) -> tuple[list[Tier], int]:
        stmt = select(RideTier)
        if query.search:
            stmt = stmt.where(RideTier.name.ilike(f"%{query.search}%"))
        if query.is_active is not None:
            stmt = stmt.where(RideTier.is_active == query.is_active)

        total = self._count(stmt)

        column = SORT_COLUMNS[query.sort_by]
        stmt = (
            stmt.order_by(column.desc() if query.sort_order == "desc" else column.asc())
            .offset((query.page - 1) * query.limit)
            .limit(query.limit)
        )
        return self._to_models(list(self.session.scalars(stmt))), total

    def all(self) -> list[Tier]:
        records = self.session.scalars(select(RideTier).order_by(RideTier.priority.desc()))
        return self._to_models(list(records))

    def delete(self, tier_id: int) -> None:
        self.session.delete(self._require(tier_id))
        self.session.flush()

    def count_rides(self, tier_id: int) -> int:
        stmt = select(func.count()).select_from(Ride).where(Ride.tier_id == tier_id)
        return self.session.scalar(stmt) or 0

    def _require(self, tier_id: int) -> RideTier:
        record = self.session.get(RideTier, tier_id)
        if record is None:
            raise NotFoundError(f"Ride tier with ID {tier_id} not found", {"tier_id": tier_id})
        return record

    def _count(self, stmt: Select[Any]) -> int:
        return self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

    def _set_vehicle_types(self, record: RideTier, names: list[str]) -> None:
        known = {
            vt.name: vt
            for vt in self.session.scalars(select(VehicleType).where(VehicleType.name.in_(names)))
        }
        unknown = [name for name in names if name not in known]
        if unknown:
            logger.warning("Ignoring unknown vehicle types for tier %s: %s", record.name, unknown)

        # Reuse link rows that survive so the composite key is never re-inserted
        current = {link.vehicle_type_id: link for link in record.vehicle_types}
        record.vehicle_types = [
            current.get(vt.id) or TierVehicleType(vehicle_type=vt)
            for vt in known.values()
        ]

    def _to_models(self, records: list[RideTier]) -> list[Tier]:
        if not records:
            return []
        ids = [r.id for r in records]
        counts = dict(
            self.session.execute(
                select(Ride.tier_id, func.count())
                .where(Ride.tier_id.in_(ids))
                .group_by(Ride.tier_id)
            ).all()
        )
        return [self._to_model(r, counts.get(r.id, 0)) for r in records]

    @staticmethod
    def _to_model(record: RideTier, rides_count: int) -> Tier:
        return Tier(
            id=record.id,
            name=record.name,
            base_fare=record.base_fare,
            minimum_fare=record.minimum_fare,
            per_minute_rate=record.per_minute_rate,
            per_km_rate=record.per_km_rate,
            image_url=record.image_url,
            tier_multiplier=record.tier_multiplier,
            surge_multiplier=record.surge_multiplier,
            demand_multiplier=record.demand_multiplier,
            luxury_multiplier=record.luxury_multiplier,
            comfort_multiplier=record.comfort_multiplier,
            min_passengers=record.min_passengers,
            max_passengers=record.max_passengers,
            priority=record.priority,
            is_active=record.is_active,
            vehicle_types=[
                link.vehicle_type.name for link in record.vehicle_types if link.is_active
            ],
            rides_count=rides_count,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )
