"""
Selection helpers - build and edit selection maps.

Selections are rebuilt by the caller on every interaction. None of these
helpers mutate their input; each returns a new map.
"""

import copy
import logging
from typing import Any, List, Optional

from .coerce import strict_equals
from .models import (
    COUNTRY_KEY,
    RATE_OVERRIDES_KEY,
    ROLE_ADJUST_KEY,
    TAX_OVERRIDES_KEY,
    EstimatorConfig,
    MultiSelectLever,
    Preset,
    Selections,
)

logger = logging.getLogger(__name__)


def seed_defaults(config: EstimatorConfig, selections: Selections) -> Selections:
    """
    Fill lever defaults for ids the selections don't carry.

    A key holding None counts as missing. Multiselect levers without a
    default start empty. Reserved keys are left alone.
    """
    seeded = dict(selections)
    for lever in config.levers:
        if seeded.get(lever.id) is not None:
            continue
        if lever.default is not None:
            seeded[lever.id] = copy.deepcopy(lever.default)
        elif isinstance(lever, MultiSelectLever):
            seeded[lever.id] = []
    return seeded


def default_selections(
    config: EstimatorConfig,
    country_code: Optional[str] = None,
    preset_id: Optional[str] = None,
) -> Selections:
    """
    Initial (or reset) selection map.

    Args:
        config: Estimator configuration
        country_code: Country to start with; unknown codes use the first country
        preset_id: Optional preset applied on top of lever defaults; it does
            not change the country

    Returns:
        Fresh selections with empty override maps
    """
    country = config.get_country(country_code) or config.default_country

    selections: Selections = {
        COUNTRY_KEY: country.code,
        ROLE_ADJUST_KEY: {},
        RATE_OVERRIDES_KEY: {},
        TAX_OVERRIDES_KEY: {},
    }
    selections = seed_defaults(config, selections)

    if preset_id:
        preset = config.get_preset(preset_id)
        if preset is not None:
            selections.update(copy.deepcopy(preset.values))
            selections[COUNTRY_KEY] = country.code
        else:
            logger.debug(f"Unknown preset '{preset_id}' ignored for default selections")

    return selections


def apply_preset(config: EstimatorConfig, current: Selections, preset_id: Any) -> Selections:
    """
    Merge a preset's values (and target country) over the current selections.

    An unknown preset id returns `current` unchanged.
    """
    preset = config.get_preset(preset_id)
    if preset is None:
        logger.debug(f"Unknown preset '{preset_id}', selections unchanged")
        return current

    merged = dict(current)
    merged.update(copy.deepcopy(preset.values))
    if preset.country:
        merged[COUNTRY_KEY] = preset.country

    logger.debug(f"Applied preset '{preset.id}' ({len(preset.values)} values)")
    return merged


def ordered_presets(config: EstimatorConfig) -> List[Preset]:
    """Presets sorted by meta.order (missing order sorts as 0), stable."""
    return sorted(config.presets, key=lambda p: p.order)


def toggle_multiselect(
    config: EstimatorConfig,
    selections: Selections,
    lever_id: str,
    value: Any,
) -> Selections:
    """Add or remove one option value, keeping at most maxSelected values."""
    lever = config.get_lever(lever_id)
    if not isinstance(lever, MultiSelectLever):
        return selections

    current = selections.get(lever_id)
    values = list(current) if isinstance(current, list) else []

    if any(strict_equals(v, value) for v in values):
        values = [v for v in values if not strict_equals(v, value)]
    else:
        values.append(value)

    if lever.max_selected is not None and len(values) > lever.max_selected:
        values = values[:lever.max_selected]

    return {**selections, lever_id: values}


# =============================================================================
# OVERRIDE EDITING
# =============================================================================

def _copy_nested(selections: Selections, key: str) -> dict:
    """Two-level copy of a {countryCode: {...}} map, dropping malformed entries."""
    raw = selections.get(key)
    if not isinstance(raw, dict):
        return {}
    return {k: dict(v) for k, v in raw.items() if isinstance(v, dict)}


def set_rate_override(selections: Selections, country_code: str, role: str, rate: float) -> Selections:
    overrides = _copy_nested(selections, RATE_OVERRIDES_KEY)
    overrides.setdefault(country_code, {})[role] = rate
    return {**selections, RATE_OVERRIDES_KEY: overrides}


def clear_rate_overrides(
    selections: Selections,
    country_code: str,
    role: Optional[str] = None,
) -> Selections:
    """Drop one role's override, or every override of the country."""
    overrides = _copy_nested(selections, RATE_OVERRIDES_KEY)

    if role is None:
        overrides.pop(country_code, None)
    elif country_code in overrides:
        overrides[country_code].pop(role, None)
        if not overrides[country_code]:
            del overrides[country_code]

    return {**selections, RATE_OVERRIDES_KEY: overrides}


def set_role_adjust(selections: Selections, role: str, delta: float) -> Selections:
    raw = selections.get(ROLE_ADJUST_KEY)
    adjust = dict(raw) if isinstance(raw, dict) else {}
    adjust[role] = delta
    return {**selections, ROLE_ADJUST_KEY: adjust}


def clear_role_adjust(selections: Selections) -> Selections:
    return {**selections, ROLE_ADJUST_KEY: {}}


def set_tax_override(
    selections: Selections,
    country_code: str,
    vat_included: Optional[bool] = None,
    vat_percent: Optional[float] = None,
) -> Selections:
    overrides = _copy_nested(selections, TAX_OVERRIDES_KEY)
    entry = overrides.setdefault(country_code, {})
    if vat_included is not None:
        entry["vatIncluded"] = vat_included
    if vat_percent is not None:
        entry["vatPercent"] = vat_percent
    return {**selections, TAX_OVERRIDES_KEY: overrides}
