"""Tests for transaction boundaries."""

import pytest

from fare_engine.db.database import init_database
from fare_engine.db.repositories import TierRepository
from fare_engine.db.transaction import transaction

UBERX = {"name": "UberX", "base_fare": 250, "per_minute_rate": 15, "per_km_rate": 80}


@pytest.mark.unit
class TestTransaction:
    def test_commits_on_success(self, temp_sqlite_db):
        session_maker = init_database(str(temp_sqlite_db))

        with session_maker() as session, transaction(session):
            TierRepository(session).create(UBERX)

        with session_maker() as session:
            assert TierRepository(session).find_by_name("UberX") is not None

    def test_rolls_back_on_exception(self, temp_sqlite_db):
        session_maker = init_database(str(temp_sqlite_db))

        with pytest.raises(RuntimeError), session_maker() as session, transaction(session):
            TierRepository(session).create(UBERX)
            raise RuntimeError("simulated failure")

        with session_maker() as session:
            assert TierRepository(session).find_by_name("UberX") is None
