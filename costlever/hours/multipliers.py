"""
Multiplier Engine

Second pass over visible levers collecting multiplier effects of the chosen
options. Factors compose multiplicatively per key ("all" or a role), seeded
at 1. A non-finite factor is neutral so a malformed multiplier can never
zero out hours.
"""

import logging
import math
from typing import Dict, Set

from ..dependencies.visibility import visible_levers
from ..models import ALL_ROLES, ROLES, EstimatorConfig, NumberLever, Selections
from .accumulator import chosen_options

logger = logging.getLogger(__name__)


def collect_multipliers(
    config: EstimatorConfig,
    selections: Selections,
    hidden_ids: Set[str],
) -> Dict[str, float]:
    """
    Combined multiplier per role and for "all".

    Only keys that some chosen option mentions are present.
    """
    factors: Dict[str, float] = {}

    for lever in visible_levers(config.levers, selections, hidden_ids):
        if isinstance(lever, NumberLever):
            continue
        for opt in chosen_options(lever, selections.get(lever.id)):
            for effect in opt.multiplier_effects():
                m = effect.multiplier
                if m is None or not math.isfinite(m):
                    m = 1.0
                factors[effect.role] = factors.get(effect.role, 1.0) * m

    if factors:
        logger.debug(f"Collected multipliers: {factors}")
    return factors


def apply_multipliers(hours: Dict[str, float], multipliers: Dict[str, float]) -> Dict[str, float]:
    """
    Scale every role by its own factor times the "all" factor.

    All roles are computed from the same input snapshot; the input is not
    modified.
    """
    all_factor = multipliers.get(ALL_ROLES, 1.0)
    return {
        role: hours.get(role, 0.0) * multipliers.get(role, 1.0) * all_factor
        for role in ROLES
    }
