"""Explicit validators for temporal pricing rules."""

import re
from datetime import date

from fare_engine.core.violations import Violation, check_range, required
from fare_engine.models import RuleType, TemporalRuleInput

TIME_PATTERN = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MULTIPLIER_BOUNDS = (0.5, 10.0)
PRIORITY_BOUNDS = (1, 100)


def is_valid_time(value: str) -> bool:
    return bool(TIME_PATTERN.match(value))


def is_valid_date(value: str) -> bool:
    if not DATE_PATTERN.match(value):
        return False
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_required_rule_fields(rule: TemporalRuleInput) -> list[Violation]:
    violations = []
    if not rule.name or not rule.name.strip():
        violations.append(required("name", "Name"))
    if rule.rule_type is None:
        violations.append(required("rule_type", "Rule type"))
    if rule.multiplier is None:
        violations.append(required("multiplier", "Multiplier"))
    return violations


def validate_rule_configuration(rule: TemporalRuleInput) -> list[Violation]:
    """Bounds, formats and the fields each rule type cannot do without."""
    violations: list[Violation] = []
    check_range(violations, "multiplier", rule.multiplier, *MULTIPLIER_BOUNDS, "Multiplier")
    check_range(violations, "priority", rule.priority, *PRIORITY_BOUNDS, "Priority")

    if rule.rule_type == RuleType.TIME_RANGE and (not rule.start_time or not rule.end_time):
        violations.append(
            Violation(
                field="start_time",
                rule="required_for_type",
                message="Time range rules must specify start_time and end_time",
            )
        )
    if rule.rule_type == RuleType.DATE_SPECIFIC and not rule.specific_dates:
        violations.append(
            Violation(
                field="specific_dates",
                rule="required_for_type",
                message="Date-specific rules must specify specific_dates",
            )
        )
    if rule.rule_type == RuleType.SEASONAL and not rule.date_ranges:
        violations.append(
            Violation(
                field="date_ranges",
                rule="required_for_type",
                message="Seasonal rules must specify date_ranges",
            )
        )

    for field in ("start_time", "end_time"):
        value = getattr(rule, field)
        if value and not is_valid_time(value):
            violations.append(
                Violation(field=field, rule="format", message=f"{field} must use HH:MM format")
            )

    for day in rule.days_of_week or []:
        if not 0 <= day <= 6:
            violations.append(
                Violation(
                    field="days_of_week",
                    rule="range",
                    message=f"Day of week {day} must be between 0 (Sunday) and 6 (Saturday)",
                )
            )

    for value in rule.specific_dates or []:
        if not is_valid_date(value):
            violations.append(
                Violation(
                    field="specific_dates",
                    rule="format",
                    message=f"Date {value!r} must use YYYY-MM-DD format",
                )
            )

    for date_range in rule.date_ranges or []:
        bad = [v for v in (date_range.start, date_range.end) if not is_valid_date(v)]
        if bad:
            violations.append(
                Violation(
                    field="date_ranges",
                    rule="format",
                    message=f"Date range bounds {bad} must use YYYY-MM-DD format",
                )
            )
        elif date_range.start > date_range.end:
            violations.append(
                Violation(
                    field="date_ranges",
                    rule="order",
                    message=(
                        f"Date range start {date_range.start} is after end {date_range.end}"
                    ),
                )
            )

    return violations
