"""FastAPI dependency injection providers.

Each request gets one session inside a ``transaction()``; catalogs and
calculators are built per request around repositories bound to it.
"""

from collections.abc import Iterator
from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from fare_engine.db.repositories import GeographyRepository, RuleRepository, TierRepository
from fare_engine.db.transaction import transaction
from fare_engine.pricing import PricingCalculator, SimulationComposer, TierCatalog
from fare_engine.settings import Settings
from fare_engine.temporal import TemporalRuleCatalog, TemporalRuleMatcher


def get_settings_state(request: Request) -> Settings:
    """Retrieve Settings from app state."""
    return request.app.state.settings


def get_session(request: Request) -> Iterator[Session]:
    with request.app.state.session_factory() as session, transaction(session):
        yield session


SettingsDep = Annotated[Settings, Depends(get_settings_state)]
SessionDep = Annotated[Session, Depends(get_session)]


def get_tier_catalog(session: SessionDep) -> TierCatalog:
    return TierCatalog(TierRepository(session))


def get_calculator(session: SessionDep, settings: SettingsDep) -> PricingCalculator:
    return PricingCalculator(
        TierRepository(session), GeographyRepository(session), settings.pricing
    )


def get_rule_catalog(session: SessionDep) -> TemporalRuleCatalog:
    return TemporalRuleCatalog(RuleRepository(session), GeographyRepository(session))


def get_matcher(session: SessionDep, settings: SettingsDep) -> TemporalRuleMatcher:
    return TemporalRuleMatcher(
        RuleRepository(session), GeographyRepository(session), settings.pricing
    )


def get_composer(
    calculator: Annotated[PricingCalculator, Depends(get_calculator)],
    matcher: Annotated[TemporalRuleMatcher, Depends(get_matcher)],
) -> SimulationComposer:
    return SimulationComposer(calculator, matcher)


TierCatalogDep = Annotated[TierCatalog, Depends(get_tier_catalog)]
CalculatorDep = Annotated[PricingCalculator, Depends(get_calculator)]
RuleCatalogDep = Annotated[TemporalRuleCatalog, Depends(get_rule_catalog)]
MatcherDep = Annotated[TemporalRuleMatcher, Depends(get_matcher)]
ComposerDep = Annotated[SimulationComposer, Depends(get_composer)]
