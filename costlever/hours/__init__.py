"""
Hours computation: lever accumulation, multipliers, manual deltas.
"""

from .accumulator import accumulate, chosen_options, number_lever_hours, number_value, zero_hours
from .multipliers import apply_multipliers, collect_multipliers
from .adjustments import apply_manual_deltas, normalize_role_adjust

__all__ = [
    "accumulate",
    "chosen_options",
    "number_lever_hours",
    "number_value",
    "zero_hours",
    "collect_multipliers",
    "apply_multipliers",
    "apply_manual_deltas",
    "normalize_role_adjust",
]
