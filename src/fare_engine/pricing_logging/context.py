"""Scoped logging fields (tier_id, rule_id, operation) for pricing work."""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from types import MappingProxyType
from typing import Any

_EMPTY: Mapping[str, Any] = MappingProxyType({})
_fields: ContextVar[Mapping[str, Any]] = ContextVar("pricing_log_fields", default=_EMPTY)


class LogContext:
    """Fields attached to every record logged inside a ``log_context`` block.

    Backed by a ContextVar so request handlers running in the server's
    thread pool never see each other's fields.
    """

    @staticmethod
    def get() -> dict[str, Any]:
        return dict(_fields.get())

    @staticmethod
    def clear() -> None:
        _fields.set(_EMPTY)


class ContextFilter(logging.Filter):
    """Copies LogContext fields onto records; explicit ``extra`` values win."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _fields.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True


@contextmanager
def log_context(**fields: Any) -> Iterator[None]:
    """Add fields for the duration of the block; nested blocks layer on top.

    ContextFilter must be attached to the handler (see setup_logging).
    """
    token = _fields.set(MappingProxyType({**_fields.get(), **fields}))
    try:
        yield
    finally:
        _fields.reset(token)


@contextmanager
def log_quote_context(tier_id: int, **fields: Any) -> Iterator[None]:
    """Fields for pricing a tier; the request correlation id is added by its own filter."""
    with log_context(tier_id=tier_id, **fields):
        yield
