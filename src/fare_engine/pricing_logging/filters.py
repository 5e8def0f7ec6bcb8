"""Log filter for correlation ID injection."""

import logging

from fare_engine.core.correlation import get_current_correlation_id


class DefaultCorrelationFilter(logging.Filter):
    """Adds the request correlation_id, or "-" outside of a request."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "correlation_id"):
            record.correlation_id = get_current_correlation_id() or "-"
        return True
