"""
Rounding helpers - half away from zero at a fixed number of decimals.

Python's built-in round() rounds half to even and works on the binary
value, so 0.25 -> 0.2 and 2.675 -> 2.67. Estimates are rounded on the
shortest decimal representation instead.
"""

import math
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict


def round_half_away(value: float, places: int) -> float:
    """Round to `places` decimals, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    if not math.isfinite(value):
        return value

    quantum = Decimal(1).scaleb(-places)
    try:
        rounded = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # Beyond decimal precision the fractional digits are meaningless anyway
        return float(round(value, places))

    # Normalize -0.0
    return float(rounded) + 0.0


def round_map(values: Dict[str, float], places: int) -> Dict[str, float]:
    return {key: round_half_away(v, places) for key, v in values.items()}
