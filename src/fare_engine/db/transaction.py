"""Unit-of-work boundary for catalog writes."""

import logging
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


@contextmanager
def transaction(session: Session) -> Generator[Session]:
    """Commit everything done in the block, or nothing.

    A bulk tier adjustment records per-tier failures without raising, so
    the tiers that passed validation are still committed together.

    Example:
        with transaction(session):
            TierCatalog(TierRepository(session)).bulk_adjust([1, 2], "base_fare", "fixed", 25)
    """
    try:
        yield session
        session.commit()
    except Exception as e:
        logger.debug("Rolling back transaction after %s", type(e).__name__)
        session.rollback()
        raise
