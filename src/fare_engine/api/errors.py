"""Translate engine exceptions into HTTP responses."""

import logging

from fastapi import FastAPI
from starlette.requests import Request
from starlette.responses import JSONResponse

from fare_engine.core.exceptions import (
    ConflictError,
    NotFoundError,
    PricingError,
    ValidationError,
)

logger = logging.getLogger(__name__)

STATUS_CODES: list[tuple[type[PricingError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
]


def status_for(exc: PricingError) -> int:
    for exc_type, status_code in STATUS_CODES:
        if isinstance(exc, exc_type):
            return status_code
    return 400


async def pricing_error_handler(request: Request, exc: PricingError) -> JSONResponse:
    status_code = status_for(exc)
    logger.info(
        "%s %s rejected with %d: %s", request.method, request.url.path, status_code, exc.message
    )

    body: dict[str, object] = {
        "error": type(exc).__name__,
        "message": exc.message,
        "details": exc.details,
    }
    if isinstance(exc, ValidationError):
        body["violations"] = [v.model_dump() for v in exc.violations]
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PricingError, pricing_error_handler)  # type: ignore[arg-type]
