from .context import ContextFilter, LogContext, log_context, log_quote_context
from .filters import DefaultCorrelationFilter
from .formatters import DevFormatter, JSONFormatter
from .setup import setup_logging

__all__ = [
    "ContextFilter",
    "DefaultCorrelationFilter",
    "DevFormatter",
    "JSONFormatter",
    "LogContext",
    "log_context",
    "log_quote_context",
    "setup_logging",
]
