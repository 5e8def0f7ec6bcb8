"""SQLAlchemy ORM models for tiers, temporal rules and geography."""

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, Float, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from .utils import utc_now


class Base(DeclarativeBase):
    pass


class Country(Base):
    __tablename__ = "countries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    iso_code2: Mapped[str | None] = mapped_column(String(2), nullable=True)
    pricing_multiplier: Mapped[float | None] = mapped_column(Float, nullable=True)


class State(Base):
    __tablename__ = "states"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    code: Mapped[str | None] = mapped_column(String, nullable=True)
    country_id: Mapped[int | None] = mapped_column(ForeignKey("countries.id"), nullable=True)
    pricing_multiplier: Mapped[float | None] = mapped_column(Float, nullable=True)


class City(Base):
    __tablename__ = "cities"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    state_id: Mapped[int | None] = mapped_column(ForeignKey("states.id"), nullable=True)
    pricing_multiplier: Mapped[float | None] = mapped_column(Float, nullable=True)


class ServiceZone(Base):
    __tablename__ = "service_zones"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    city_id: Mapped[int | None] = mapped_column(ForeignKey("cities.id"), nullable=True)
    zone_type: Mapped[str] = mapped_column(String, default="standard")
    pricing_multiplier: Mapped[float | None] = mapped_column(Float, nullable=True)
    demand_multiplier: Mapped[float | None] = mapped_column(Float, nullable=True, default=1.0)


class VehicleType(Base):
    __tablename__ = "vehicle_types"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    display_name: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)


class TierVehicleType(Base):
    __tablename__ = "tier_vehicle_types"

    tier_id: Mapped[int] = mapped_column(
        ForeignKey("ride_tiers.id", ondelete="CASCADE"), primary_key=True
    )
    vehicle_type_id: Mapped[int] = mapped_column(ForeignKey("vehicle_types.id"), primary_key=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    vehicle_type: Mapped[VehicleType] = relationship(lazy="joined")


class RideTier(Base):
    __tablename__ = "ride_tiers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    base_fare: Mapped[int] = mapped_column(Integer, nullable=False)
    minimum_fare: Mapped[int] = mapped_column(Integer, default=0)
    per_minute_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    per_km_rate: Mapped[int] = mapped_column(Integer, nullable=False)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)
    tier_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    surge_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    demand_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    luxury_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    comfort_multiplier: Mapped[float] = mapped_column(Float, default=1.0)
    min_passengers: Mapped[int] = mapped_column(Integer, default=1)
    max_passengers: Mapped[int] = mapped_column(Integer, default=4)
    priority: Mapped[int] = mapped_column(Integer, default=1)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: utc_now())
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    vehicle_types: Mapped[list[TierVehicleType]] = relationship(
        cascade="all, delete-orphan", lazy="selectin"
    )

    __table_args__ = (Index("idx_ride_tier_active", "is_active"),)


class Ride(Base):
    """Historical ride; only the tier reference matters to the pricing engine."""

    __tablename__ = "rides"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    tier_id: Mapped[int] = mapped_column(ForeignKey("ride_tiers.id"), nullable=False)
    total_amount: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: utc_now())

    __table_args__ = (Index("idx_ride_tier", "tier_id"),)


class TemporalPricingRuleRecord(Base):
    __tablename__ = "temporal_pricing_rules"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    rule_type: Mapped[str] = mapped_column(String, nullable=False)
    start_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    end_time: Mapped[str | None] = mapped_column(String(5), nullable=True)
    days_of_week: Mapped[list[int]] = mapped_column(JSON, default=list)
    specific_dates: Mapped[list[str]] = mapped_column(JSON, default=list)
    date_ranges: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    multiplier: Mapped[float] = mapped_column(Float, nullable=False)
    priority: Mapped[int] = mapped_column(Integer, default=1)
    country_id: Mapped[int | None] = mapped_column(ForeignKey("countries.id"), nullable=True)
    state_id: Mapped[int | None] = mapped_column(ForeignKey("states.id"), nullable=True)
    city_id: Mapped[int | None] = mapped_column(ForeignKey("cities.id"), nullable=True)
    zone_id: Mapped[int | None] = mapped_column(ForeignKey("service_zones.id"), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    auto_apply: Mapped[bool] = mapped_column(Boolean, default=True)
    created_at: Mapped[datetime] = mapped_column(default=lambda: utc_now())
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )

    __table_args__ = (
        Index("idx_temporal_rule_active", "is_active", "auto_apply"),
        Index("idx_temporal_rule_priority", "priority"),
    )


class EngineMetadata(Base):
    __tablename__ = "engine_metadata"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    value: Mapped[str] = mapped_column(String, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        default=lambda: utc_now(),
        onupdate=lambda: utc_now(),
    )
