"""Standardized exception hierarchy for the fare engine."""

from typing import Any

from .violations import Violation


class PricingError(Exception):
    """Base exception for all fare engine errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class PermanentError(PricingError):
    """Errors that will not succeed on retry.

    Every engine error is permanent: the caller must correct the input.
    """

    pass


class ValidationError(PermanentError):
    """Invalid input: out-of-bound field, missing required field, malformed value."""

    def __init__(
        self,
        message: str,
        violations: list[Violation] | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, details)
        self.violations = list(violations or [])


class ConflictError(PermanentError):
    """Entity name already taken, or entity still referenced."""

    pass


class NotFoundError(PermanentError):
    """Requested entity does not exist."""

    pass
