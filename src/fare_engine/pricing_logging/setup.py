"""Root logger configuration for the fare engine process."""

import logging
import sys

from .context import ContextFilter
from .filters import DefaultCorrelationFilter
from .formatters import DevFormatter, JSONFormatter

# Libraries whose INFO output drowns out pricing logs.
QUIET_LOGGERS = ("sqlalchemy.engine", "uvicorn.access")


def setup_logging(
    level: str = "INFO",
    json_output: bool = False,
    environment: str = "development",
) -> None:
    """Replace root handlers with a single stdout handler.

    Both filters sit on the handler, not the logger, so records from
    third-party loggers still get a ``correlation_id`` for the formatter.
    """
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter(environment) if json_output else DevFormatter())
    handler.addFilter(DefaultCorrelationFilter())
    handler.addFilter(ContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(level.upper())

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
