"""
Numeric coercion helpers shared by the schema and the engine.

Selections and configuration fragments arrive untyped. These helpers turn
them into floats without ever raising.
"""

import math
from typing import Any, Optional


def to_number(value: Any) -> float:
    """
    Parse a value as a number.

    Accepts ints, floats and numeric strings. Booleans, None, containers and
    unparseable strings yield NaN. Ints too large for a float become a
    signed infinity, the same as "1e400" does.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def clamp(n: float, lo: Optional[float] = None, hi: Optional[float] = None) -> float:
    """
    Clamp n into [lo, hi].

    NaN falls back to lo (or 0). Infinities clamp to the bound on their
    side; with no bound there they fall back like NaN, so the result is
    always finite.
    """
    if math.isnan(n):
        n = lo if lo is not None else 0.0
    elif n == math.inf:
        n = hi if hi is not None else (lo if lo is not None else 0.0)
    elif n == -math.inf:
        n = lo if lo is not None else 0.0
    if lo is not None and n < lo:
        return lo
    if hi is not None and n > hi:
        return hi
    return n


def strict_equals(a: Any, b: Any) -> bool:
    """
    Equality without type coercion.

    Booleans only equal booleans, numbers only equal numbers, strings only
    equal strings. Lists compare element-wise under the same rule.
    """
    if isinstance(a, bool) or isinstance(b, bool):
        return isinstance(a, bool) and isinstance(b, bool) and a is b
    if isinstance(a, (int, float)) and isinstance(b, (int, float)):
        return a == b
    if isinstance(a, (list, tuple)) and isinstance(b, (list, tuple)):
        return len(a) == len(b) and all(strict_equals(x, y) for x, y in zip(a, b))
    if type(a) is not type(b):
        return False
    return a == b
