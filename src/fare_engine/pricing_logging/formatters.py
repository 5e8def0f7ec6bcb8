"""Log formatters for JSON and human-readable output."""

import json
import logging
from datetime import UTC, datetime

# Fields set through log_context / log_quote_context or the correlation filter.
PRICING_FIELDS = ("tier_id", "rule_id", "operation", "correlation_id")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, stamped with the record's own creation time."""

    def __init__(self, environment: str = "development"):
        super().__init__()
        self.environment = environment

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": self.environment,
        }
        log_data.update(
            {field: getattr(record, field) for field in PRICING_FIELDS if hasattr(record, field)}
        )

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


class DevFormatter(logging.Formatter):
    """Human-readable lines; tier and rule ids are appended when present."""

    def __init__(self) -> None:
        super().__init__(
            fmt="%(asctime)s [%(levelname)8s] [corr=%(correlation_id)s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        tags = [
            f"{field}={getattr(record, field)}"
            for field in ("tier_id", "rule_id")
            if hasattr(record, field)
        ]
        return f"{line} ({', '.join(tags)})" if tags else line
