"""Tests for the SQLAlchemy temporal rule repository."""

import pytest

from fare_engine.core.exceptions import NotFoundError
from fare_engine.db.database import init_database
from fare_engine.db.repositories import RuleRepository
from fare_engine.db.schema import City, Country, ServiceZone, State
from fare_engine.models import GeoScope, RuleType, TemporalRuleInput, TemporalRuleQuery


def rule_fields(**overrides) -> dict:
    defaults = {
        "name": "Weekend Surcharge",
        "rule_type": RuleType.DAY_OF_WEEK,
        "days_of_week": [0, 6],
        "multiplier": 1.2,
        "priority": 10,
    }
    defaults.update(overrides)
    return TemporalRuleInput(**defaults).changes()


@pytest.fixture
def session_maker(temp_sqlite_db):
    session_maker = init_database(str(temp_sqlite_db))
    with session_maker() as session:
        session.add(Country(id=1, name="Brazil", pricing_multiplier=1.1))
        session.add(State(id=1, name="Sao Paulo", country_id=1))
        session.add(City(id=1, name="Sao Paulo City", state_id=1))
        session.add(City(id=2, name="Campinas", state_id=1))
        session.add(ServiceZone(id=1, name="Downtown", city_id=1))
        session.commit()
    return session_maker


@pytest.mark.unit
class TestRuleRepository:
    def test_create_round_trips_json_columns(self, session_maker):
        with session_maker() as session:
            rule = RuleRepository(session).create(
                rule_fields(
                    name="Summer",
                    rule_type=RuleType.SEASONAL,
                    date_ranges=[{"start": "2024-06-01", "end": "2024-08-31"}],
                )
            )
            session.commit()

        with session_maker() as session:
            loaded = RuleRepository(session).get(rule.id)

        assert loaded.rule_type == RuleType.SEASONAL
        assert loaded.date_ranges[0].end == "2024-08-31"
        assert loaded.days_of_week == [0, 6]
        assert loaded.is_active is True
        assert loaded.auto_apply is True

    def test_update(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            rule = repo.create(rule_fields())
            updated = repo.update(rule.id, {"multiplier": 1.5, "days_of_week": [6]})
            session.commit()

        assert updated.multiplier == 1.5
        assert updated.days_of_week == [6]

    def test_missing(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            assert repo.get(1) is None
            assert repo.find_by_name("Nope") is None
            with pytest.raises(NotFoundError):
                repo.delete(1)

    def test_get_many(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            active = repo.create(rule_fields(name="A"))
            inactive = repo.create(rule_fields(name="B", is_active=False))

            assert [r.id for r in repo.get_many([active.id, inactive.id, 99])] == [active.id]
            assert len(repo.get_many([active.id, inactive.id], active_only=False)) == 2
            assert repo.get_many([]) == []

    def test_auto_apply_candidates_or_across_levels(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            repo.create(rule_fields(name="Global"))
            repo.create(rule_fields(name="Country", country_id=1))
            repo.create(rule_fields(name="Other city", city_id=2))
            repo.create(rule_fields(name="Zone", zone_id=1))
            repo.create(rule_fields(name="Manual", auto_apply=False))
            repo.create(rule_fields(name="Off", is_active=False))

            scope = GeoScope(country_id=1, city_id=1)
            names = {r.name for r in repo.find_auto_apply_candidates(scope)}
            assert names == {"Global", "Country"}

            names = {r.name for r in repo.find_auto_apply_candidates(GeoScope())}
            assert names == {"Global"}

            names = {r.name for r in repo.find_auto_apply_candidates(GeoScope(zone_id=1))}
            assert names == {"Global", "Zone"}

    def test_list_filters(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            repo.create(rule_fields(name="Everywhere", priority=5))
            repo.create(rule_fields(name="Country wide", country_id=1, priority=30))
            repo.create(rule_fields(name="In city", country_id=1, city_id=1, priority=20))
            repo.create(
                rule_fields(
                    name="Christmas",
                    description="holiday surcharge",
                    rule_type=RuleType.DATE_SPECIFIC,
                    specific_dates=["2024-12-25"],
                    priority=40,
                    is_active=False,
                )
            )

            rules, total = repo.search(TemporalRuleQuery())
            assert total == 4
            assert [r.name for r in rules] == ["Christmas", "Country wide", "In city", "Everywhere"]

            rules, _ = repo.search(TemporalRuleQuery(scope="global"))
            assert [r.name for r in rules] == ["Christmas", "Everywhere"]

            rules, _ = repo.search(TemporalRuleQuery(scope="country"))
            assert [r.name for r in rules] == ["Country wide"]

            rules, _ = repo.search(TemporalRuleQuery(scope="city"))
            assert [r.name for r in rules] == ["In city"]

            rules, _ = repo.search(TemporalRuleQuery(search="HOLIDAY"))
            assert [r.name for r in rules] == ["Christmas"]

            rules, _ = repo.search(
                TemporalRuleQuery(rule_type=RuleType.DAY_OF_WEEK, is_active=True)
            )
            assert len(rules) == 3

            rules, total = repo.search(
                TemporalRuleQuery(sort_by="name", sort_order="asc", limit=1, page=2)
            )
            assert total == 4
            assert [r.name for r in rules] == ["Country wide"]

    def test_all_active_is_not_paginated(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            for i in range(25):
                repo.create(rule_fields(name=f"Rule {i:02d}"))
            repo.create(rule_fields(name="Retired", is_active=False))

            rules = repo.all_active()

        assert len(rules) == 25
        assert [r.id for r in rules] == sorted(r.id for r in rules)

    def test_equal_priority_candidates_come_back_in_id_order(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            created = [
                repo.create(rule_fields(name=name, priority=10))
                for name in ("Zulu", "Alpha", "Mike")
            ]

            candidates = repo.find_auto_apply_candidates(GeoScope())

        assert [r.id for r in candidates] == [r.id for r in created]

    def test_update_clears_scope_with_none(self, session_maker):
        with session_maker() as session:
            repo = RuleRepository(session)
            rule = repo.create(rule_fields(country_id=1, description="Brazil only"))
            repo.update(rule.id, TemporalRuleInput(country_id=None, description=None).changes())
            session.commit()

        with session_maker() as session:
            loaded = RuleRepository(session).get(rule.id)

        assert loaded.country_id is None
        assert loaded.description is None
        assert loaded.is_global
