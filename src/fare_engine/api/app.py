"""FastAPI application factory for the fare engine."""

import logging
from typing import Any

from fastapi import FastAPI
from sqlalchemy.orm import sessionmaker

from fare_engine import __version__
from fare_engine.db import init_database
from fare_engine.settings import Settings, get_settings

from .errors import register_exception_handlers
from .middleware.correlation import CorrelationMiddleware
from .models import HealthResponse
from .routes import temporal, tiers

logger = logging.getLogger(__name__)


def create_app(
    session_factory: sessionmaker[Any] | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Create FastAPI application with injected dependencies.

    Args:
        session_factory: SQLAlchemy session factory; opened from
            ``settings.database.path`` when omitted
        settings: Application settings; loaded from the environment when omitted
    """
    settings = settings or get_settings()
    if session_factory is None:
        session_factory = init_database(settings.database.path)
        logger.info("Database initialized at %s", settings.database.path)

    app = FastAPI(
        title="Rideshare Fare Engine API",
        version=__version__,
        description="Ride tier pricing, fare calculation and temporal pricing rules",
    )

    # Set core dependencies immediately so they're available for testing
    app.state.settings = settings
    app.state.session_factory = session_factory

    register_exception_handlers(app)
    app.add_middleware(CorrelationMiddleware)

    app.include_router(tiers.router, prefix="/tiers", tags=["tiers"])
    app.include_router(temporal.router, prefix="/temporal-rules", tags=["temporal-rules"])

    @app.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """Health check endpoint for monitoring."""
        return HealthResponse(status="healthy", version=__version__)

    return app
