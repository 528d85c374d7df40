"""
Hours Accumulator - converts lever values into per-role hours.

Per lever type:
- number: clamped value feeds hoursPerUnit, hoursBase/hoursPerExtraLocale
  and hoursPerBatch rules; their contributions sum
- select: the chosen option (first option when nothing matches) adds its
  hours effects
- multiselect: every selected value that names a real option adds its
  hours effects

Overhead roles (pm, qa) are never accumulated here.
"""

import logging
import math
from typing import Any, Dict, List, Optional, Set

from ..coerce import clamp, to_number
from ..dependencies.visibility import visible_levers
from ..models import (
    OVERHEAD_ROLES,
    ROLES,
    Anomaly,
    AnomalyCode,
    EstimatorConfig,
    LeverOption,
    MultiSelectLever,
    NumberLever,
    SelectLever,
    Selections,
    record_anomaly,
)

logger = logging.getLogger(__name__)


def zero_hours() -> Dict[str, float]:
    """All roles at 0, in canonical order."""
    return {role: 0.0 for role in ROLES}


def add_role_hours(target: Dict[str, float], add: Dict[str, float], factor: float = 1.0) -> None:
    """Add `add[role] * factor` into target for build roles."""
    for role, value in add.items():
        if role in OVERHEAD_ROLES or role not in target:
            continue
        target[role] += value * factor


def number_value(
    lever: NumberLever,
    raw: Any,
    anomalies: Optional[List[Anomaly]] = None,
) -> float:
    """
    Current value of a number lever, clamped to [min, max].

    Non-numeric values fall back to min (or 0). Infinite values clamp to
    the bound on their side.
    """
    n = to_number(raw)

    if math.isnan(n):
        if raw is not None:
            record_anomaly(
                anomalies,
                AnomalyCode.NON_NUMERIC_VALUE,
                f"lever '{lever.id}': value {raw!r} is not a number, using fallback",
                lever.id,
            )
        return clamp(math.nan, lever.min, lever.max)

    clamped = clamp(n, lever.min, lever.max)
    if clamped != n:
        record_anomaly(
            anomalies,
            AnomalyCode.VALUE_CLAMPED,
            f"lever '{lever.id}': value {n} clamped to {clamped}",
            lever.id,
        )
    return clamped


def chosen_options(
    lever,
    value: Any,
    anomalies: Optional[List[Anomaly]] = None,
) -> List[LeverOption]:
    """
    Options currently selected on a select/multiselect lever.

    select: the matching option, else the first option.
    multiselect: matching options in selection order, unknown values
    skipped, values beyond maxSelected ignored.
    """
    if isinstance(lever, SelectLever):
        opt = lever.find_option(value)
        if opt is None:
            if value is not None:
                record_anomaly(
                    anomalies,
                    AnomalyCode.UNKNOWN_OPTION,
                    f"lever '{lever.id}': unknown option {value!r}, using first option",
                    lever.id,
                )
            opt = lever.options[0] if lever.options else None
        return [opt] if opt is not None else []

    if isinstance(lever, MultiSelectLever):
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            record_anomaly(
                anomalies,
                AnomalyCode.NOT_A_LIST,
                f"lever '{lever.id}': expected a list of values, got {type(value).__name__}",
                lever.id,
            )
            return []

        values = list(value)
        if lever.max_selected is not None and len(values) > lever.max_selected:
            record_anomaly(
                anomalies,
                AnomalyCode.MAX_SELECTED_EXCEEDED,
                f"lever '{lever.id}': {len(values)} values selected, only the first "
                f"{lever.max_selected} count",
                lever.id,
            )
            values = values[:lever.max_selected]

        options = []
        for v in values:
            opt = lever.find_option(v)
            if opt is None:
                record_anomaly(
                    anomalies,
                    AnomalyCode.UNKNOWN_OPTION,
                    f"lever '{lever.id}': unknown option {v!r} ignored",
                    lever.id,
                )
                continue
            options.append(opt)
        return options

    return []


def number_lever_hours(lever: NumberLever, n: float) -> Dict[str, float]:
    """Hours contributed by a number lever at value n."""
    hours = zero_hours()
    units = max(n, 0.0)

    if lever.hours_per_unit:
        add_role_hours(hours, lever.hours_per_unit, units)

    # First unit at hoursBase, every further unit at hoursPerExtraLocale
    if lever.hours_base or lever.hours_per_extra_locale:
        add_role_hours(hours, lever.hours_base, 1)
        if units > 1:
            add_role_hours(hours, lever.hours_per_extra_locale, units - 1)

    if lever.hours_per_batch and lever.batch_size and lever.batch_size > 0:
        batches = math.ceil(units / lever.batch_size)
        add_role_hours(hours, lever.hours_per_batch, batches)

    return hours


def accumulate(
    config: EstimatorConfig,
    selections: Selections,
    hidden_ids: Set[str],
    anomalies: Optional[List[Anomaly]] = None,
) -> Dict[str, float]:
    """
    Accumulate per-role hours over visible levers.

    Args:
        config: Estimator configuration
        selections: Effective (resolved) selections
        hidden_ids: Lever ids hidden by dependencies
        anomalies: Optional collector for ignored/defaulted inputs

    Returns:
        Hours for every role (pm/qa stay 0)
    """
    hours = zero_hours()

    for lever in visible_levers(config.levers, selections, hidden_ids):
        value = selections.get(lever.id)

        if isinstance(lever, NumberLever):
            n = number_value(lever, value, anomalies)
            add_role_hours(hours, number_lever_hours(lever, n))
            continue

        for opt in chosen_options(lever, value, anomalies):
            for effect in opt.hours_effects():
                add_role_hours(hours, {effect.role: effect.hours})

    logger.debug(f"Accumulated hours: {hours}")
    return hours
