"""Per-request correlation id, readable from any log record in the request."""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)


def new_correlation_id() -> str:
    return uuid.uuid4().hex


@contextmanager
def with_correlation(correlation_id: str) -> Iterator[None]:
    """Set the correlation id for a block of code.

    Usage:
        with with_correlation(request_id):
            calculator.calculate(request)  # log lines carry correlation_id
    """
    token = _correlation_id.set(correlation_id)
    try:
        yield
    finally:
        _correlation_id.reset(token)


def get_current_correlation_id() -> str | None:
    return _correlation_id.get()
