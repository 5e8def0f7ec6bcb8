import math


def round_minor_units(value: float) -> int:
    """Round to the nearest integer minor unit, halves away from zero upward.

    Python's ``round`` uses banker's rounding, which would turn 0.5 into 0.
    """
    return math.floor(value + 0.5)
