"""Structured validation violations shared by the tier and rule validators."""

from pydantic import BaseModel


class Violation(BaseModel):
    """A single failed check, discriminated by field and rule."""

    field: str
    rule: str
    message: str


def check_range(
    violations: list[Violation],
    field: str,
    value: float | None,
    low: float,
    high: float,
    label: str,
    unit: str = "",
) -> None:
    """Append a min/max violation when ``value`` falls outside ``[low, high]``.

    ``None`` means the field was not supplied and is not checked.
    """
    if value is None:
        return
    if value < low:
        violations.append(
            Violation(field=field, rule="min", message=f"{label} must be at least {low}{unit}")
        )
    elif value > high:
        violations.append(
            Violation(field=field, rule="max", message=f"{label} cannot exceed {high}{unit}")
        )


def required(field: str, label: str) -> Violation:
    return Violation(field=field, rule="required", message=f"{label} is required")
