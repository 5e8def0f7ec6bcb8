"""Run the fare engine API: ``python -m fare_engine``."""

import logging

import uvicorn

from fare_engine.api import create_app
from fare_engine.pricing_logging import setup_logging
from fare_engine.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = get_settings()

    setup_logging(
        level=settings.log.level,
        json_output=settings.log.format == "json",
        environment=settings.log.environment,
    )

    app = create_app(settings=settings)

    logger.info("Starting fare engine on %s:%d", settings.api.host, settings.api.port)
    uvicorn.run(
        app,
        host=settings.api.host,
        port=settings.api.port,
        log_level=settings.log.level.lower(),
    )


if __name__ == "__main__":
    main()
