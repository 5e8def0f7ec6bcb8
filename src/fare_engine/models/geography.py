"""Geographic scope and read-only multiplier sources."""

from pydantic import BaseModel


class GeoScope(BaseModel):
    """Country/state/city/zone ids supplied with a pricing or evaluation request."""

    country_id: int | None = None
    state_id: int | None = None
    city_id: int | None = None
    zone_id: int | None = None

    @property
    def is_global(self) -> bool:
        return (
            self.country_id is None
            and self.state_id is None
            and self.city_id is None
            and self.zone_id is None
        )


class GeoRegion(BaseModel):
    """A country, state or city as seen by the pricing engine."""

    id: int
    name: str
    pricing_multiplier: float | None = None


class ServiceZone(GeoRegion):
    demand_multiplier: float | None = None
