"""Read-only geography lookups for regional and demand multipliers."""

from sqlalchemy.orm import Session

from fare_engine.models import GeoRegion, ServiceZone

from ..schema import City, Country, State
from ..schema import ServiceZone as ServiceZoneRecord


class GeographyRepository:
    def __init__(self, session: Session) -> None:
        self.session = session

    def country(self, country_id: int) -> GeoRegion | None:
        record = self.session.get(Country, country_id)
        return self._region(record) if record else None

    def state(self, state_id: int) -> GeoRegion | None:
        record = self.session.get(State, state_id)
        return self._region(record) if record else None

    def city(self, city_id: int) -> GeoRegion | None:
        record = self.session.get(City, city_id)
        return self._region(record) if record else None

    def zone(self, zone_id: int) -> ServiceZone | None:
        record = self.session.get(ServiceZoneRecord, zone_id)
        if record is None:
            return None
        return ServiceZone(
            id=record.id,
            name=record.name,
            pricing_multiplier=record.pricing_multiplier,
            demand_multiplier=record.demand_multiplier,
        )

    @staticmethod
    def _region(record: Country | State | City) -> GeoRegion:
        return GeoRegion(
            id=record.id, name=record.name, pricing_multiplier=record.pricing_multiplier
        )
