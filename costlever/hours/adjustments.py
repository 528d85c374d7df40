"""
Manual Adjustment Layer - user-entered hour deltas per build role.

Deltas are added verbatim. There is no floor: a large negative delta can
drive a role below zero, which is how users correct an overestimate.
PM/QA deltas are ignored because overhead roles are always derived.
"""

import math
from typing import Any, Dict, List, Optional

from ..coerce import to_number
from ..models import BUILD_ROLES, OVERHEAD_ROLES, Anomaly, AnomalyCode, record_anomaly


def normalize_role_adjust(
    role_adjust: Any,
    anomalies: Optional[List[Anomaly]] = None,
) -> Dict[str, float]:
    """Numeric deltas for build roles; everything else is dropped."""
    if role_adjust is None:
        return {}
    if not isinstance(role_adjust, dict):
        record_anomaly(
            anomalies,
            AnomalyCode.INVALID_ROLE_ADJUST,
            f"role adjustments must be a mapping, got {type(role_adjust).__name__}",
        )
        return {}

    deltas = {}
    for role, raw in role_adjust.items():
        if role in OVERHEAD_ROLES:
            record_anomaly(
                anomalies,
                AnomalyCode.OVERHEAD_ROLE_ADJUST,
                f"adjustment for overhead role '{role}' ignored",
            )
            continue
        if role not in BUILD_ROLES:
            record_anomaly(
                anomalies,
                AnomalyCode.INVALID_ROLE_ADJUST,
                f"adjustment for unknown role '{role}' ignored",
            )
            continue

        delta = to_number(raw)
        if not math.isfinite(delta):
            record_anomaly(
                anomalies,
                AnomalyCode.INVALID_ROLE_ADJUST,
                f"adjustment {raw!r} for role '{role}' is not a number, ignored",
            )
            continue
        deltas[role] = delta

    return deltas


def apply_manual_deltas(hours: Dict[str, float], role_adjust: Any) -> Dict[str, float]:
    """
    Return a copy of hours with build-role deltas added.

    The input mapping is left untouched so callers keep it as the
    pre-adjustment snapshot.
    """
    adjusted = dict(hours)
    for role, delta in normalize_role_adjust(role_adjust).items():
        adjusted[role] = adjusted.get(role, 0.0) + delta
    return adjusted
