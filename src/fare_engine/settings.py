from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PricingSettings(BaseSettings):
    """Fee policy and calendar configuration for fare computation."""

    service_fee_rate: float = Field(
        default=0.10,
        ge=0.0,
        le=1.0,
        description="Service fee as a fraction of the dynamic total",
    )
    tax_rate: float = Field(
        default=0.08,
        ge=0.0,
        le=1.0,
        description="Tax as a fraction of the dynamic total",
    )
    currency: str = Field(default="USD", min_length=3, max_length=3)
    distance_unit: str = "kilometers"
    timezone: str = Field(
        default="UTC",
        description="Zone used to derive day, time and date from timezone-aware instants",
    )

    model_config = SettingsConfigDict(env_prefix="PRICING_")

    @field_validator("currency")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        return v.upper()


class DatabaseSettings(BaseSettings):
    path: str = "data/fare_engine.db"

    model_config = SettingsConfigDict(env_prefix="DATABASE_")


class LogSettings(BaseSettings):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["text", "json"] = "text"
    environment: str = "development"

    model_config = SettingsConfigDict(env_prefix="LOG_")


class APISettings(BaseSettings):
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    model_config = SettingsConfigDict(env_prefix="API_")


class Settings(BaseSettings):
    pricing: PricingSettings = Field(default_factory=PricingSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    log: LogSettings = Field(default_factory=LogSettings)
    api: APISettings = Field(default_factory=APISettings)

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        case_sensitive=False,
    )


def get_settings() -> Settings:
    """Load and validate settings from environment variables."""
    return Settings()
