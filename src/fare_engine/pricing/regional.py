"""Regional multiplier cascade: country * state * city * zone."""

from fare_engine.models import GeoRegion, GeoScope, RegionalMultipliers
from fare_engine.stores import GeographyLookup


def _multiplier(region: GeoRegion | None) -> float:
    if region is None or not region.pricing_multiplier:
        return 1.0
    return float(region.pricing_multiplier)


class RegionalMultiplierResolver:
    """Looks up each supplied geography level and composes the multipliers.

    Absent ids, unknown records and records without a multiplier all count
    as 1.0. The hierarchy is not validated: a city outside the given state is
    still applied.
    """

    def __init__(self, geography: GeographyLookup) -> None:
        self.geography = geography

    def resolve(self, scope: GeoScope) -> RegionalMultipliers:
        country = (
            _multiplier(self.geography.country(scope.country_id))
            if scope.country_id is not None
            else 1.0
        )
        state = (
            _multiplier(self.geography.state(scope.state_id)) if scope.state_id is not None else 1.0
        )
        city = _multiplier(self.geography.city(scope.city_id)) if scope.city_id is not None else 1.0
        zone = _multiplier(self.geography.zone(scope.zone_id)) if scope.zone_id is not None else 1.0

        return RegionalMultipliers(
            country=country,
            state=state,
            city=city,
            zone=zone,
            total=country * state * city * zone,
        )
