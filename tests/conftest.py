from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from fare_engine.api import create_app
from fare_engine.db import init_database
from fare_engine.db.schema import Country
from fare_engine.db.schema import ServiceZone as ServiceZoneRecord
from fare_engine.models import GeoRegion, ServiceZone
from fare_engine.pricing import PricingCalculator, SimulationComposer, TierCatalog
from fare_engine.settings import DatabaseSettings, PricingSettings, Settings
from fare_engine.temporal import TemporalRuleCatalog, TemporalRuleMatcher
from tests.factories import PricingFactory
from tests.fakes import InMemoryGeography, InMemoryRuleStore, InMemoryTierStore


@pytest.fixture
def factory() -> PricingFactory:
    """Factory for creating tiers and rules with seeded Faker."""
    return PricingFactory(seed=42)


@pytest.fixture
def tier_store() -> InMemoryTierStore:
    return InMemoryTierStore()


@pytest.fixture
def rule_store() -> InMemoryRuleStore:
    return InMemoryRuleStore()


@pytest.fixture
def geography() -> InMemoryGeography:
    """Country 1 (x1.1) > state 1 (x1.05) > city 1 (x1.02) > zone 1 (x1.03, demand x1.2)."""
    geo = InMemoryGeography()
    geo.countries[1] = GeoRegion(id=1, name="Brazil", pricing_multiplier=1.1)
    geo.states[1] = GeoRegion(id=1, name="Sao Paulo", pricing_multiplier=1.05)
    geo.cities[1] = GeoRegion(id=1, name="Sao Paulo City", pricing_multiplier=1.02)
    geo.zones[1] = ServiceZone(
        id=1, name="Downtown", pricing_multiplier=1.03, demand_multiplier=1.2
    )
    return geo


@pytest.fixture
def pricing_settings() -> PricingSettings:
    return PricingSettings(service_fee_rate=0.10, tax_rate=0.08, currency="USD", timezone="UTC")


@pytest.fixture
def tier_catalog(tier_store: InMemoryTierStore) -> TierCatalog:
    return TierCatalog(tier_store)


@pytest.fixture
def rule_catalog(
    rule_store: InMemoryRuleStore, geography: InMemoryGeography
) -> TemporalRuleCatalog:
    return TemporalRuleCatalog(rule_store, geography)


@pytest.fixture
def calculator(
    tier_store: InMemoryTierStore,
    geography: InMemoryGeography,
    pricing_settings: PricingSettings,
) -> PricingCalculator:
    return PricingCalculator(tier_store, geography, pricing_settings)


@pytest.fixture
def matcher(
    rule_store: InMemoryRuleStore,
    geography: InMemoryGeography,
    pricing_settings: PricingSettings,
) -> TemporalRuleMatcher:
    return TemporalRuleMatcher(rule_store, geography, pricing_settings)


@pytest.fixture
def composer(calculator: PricingCalculator, matcher: TemporalRuleMatcher) -> SimulationComposer:
    return SimulationComposer(calculator, matcher)


@pytest.fixture
def temp_sqlite_db(tmp_path):
    """Temporary SQLite database for persistence tests."""
    return tmp_path / "test_fare_engine.db"


@pytest.fixture
def api_settings(temp_sqlite_db) -> Settings:
    return Settings(database=DatabaseSettings(path=str(temp_sqlite_db)))


@pytest.fixture
def session_factory(api_settings: Settings):
    session_factory = init_database(api_settings.database.path)
    with session_factory() as session:
        session.add(Country(id=1, name="Brazil", pricing_multiplier=1.1))
        session.add(
            ServiceZoneRecord(id=1, name="Downtown", pricing_multiplier=1.0, demand_multiplier=1.2)
        )
        session.commit()
    return session_factory


@pytest.fixture
def client(session_factory, api_settings: Settings) -> Iterator[TestClient]:
    """TestClient over a fresh SQLite database with one country and one zone."""
    with TestClient(create_app(session_factory, api_settings)) as client:
        yield client
