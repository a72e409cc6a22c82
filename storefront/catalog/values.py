"""Tolerant coercion of loosely typed document fields.

Product records arrive as JSON authored by hand in the admin panel, so
numbers may be strings, missing or garbage. These helpers never raise.
"""

import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Any


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a value to a finite float.

    Args:
        value: Raw value.
        default: Returned when the value is missing or not numeric.

    Returns:
        Float value or the default.
    """
    if value is None:
        return default
    if isinstance(value, (int, float, Decimal)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return default
    else:
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def to_int(value: Any, default: int = 0) -> int:
    """Coerce a value to an int, truncating fractional numbers."""
    number = to_number(value, default=float(default))
    return int(number)


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero to a fixed number of decimal places.

    Args:
        value: Value to round.
        places: Decimal places to keep.

    Returns:
        Rounded value.
    """
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))
