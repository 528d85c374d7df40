"""
Estimation Engine - single entry point turning a configuration plus a
selection map into an hours-and-cost estimate.

Pipeline:
1. Seed lever defaults into the raw selections
2. Resolve dependencies (effective selections + hidden lever ids)
3. Accumulate per-role hours over visible levers
4. Apply option multipliers
5. Apply manual per-role deltas
6. Resolve country and rates
7. Subtotals, PM/QA overheads, P50/P80 bands
8. Round and assemble

The engine is pure: no I/O, no state between calls, nothing raised for
degenerate selections. Defaulted inputs are reported in
result.debug.anomalies.
"""

import logging
from typing import Any, List, Optional, Set

from .dependencies import ResolvedSelections, resolve, visible_levers
from .hours import (
    accumulate,
    apply_manual_deltas,
    apply_multipliers,
    collect_multipliers,
    normalize_role_adjust,
)
from .models import (
    BUILD_ROLES,
    DEFAULT_RISK_LEVEL,
    RISK_LEVEL_KEY,
    ROLE_ADJUST_KEY,
    Anomaly,
    AnomalyCode,
    DebugTrace,
    EstimateResult,
    EstimatorConfig,
    Role,
    Selections,
    record_anomaly,
)
from .pricing import compute_bands, resolve_country, resolve_rates, tax_for
from .reporting.assembler import assemble_result
from .selections import seed_defaults

logger = logging.getLogger(__name__)


def prepare_selections(
    config: EstimatorConfig,
    raw_selections: Selections,
    anomalies: Optional[List[Anomaly]] = None,
) -> ResolvedSelections:
    """Seed defaults and resolve dependencies."""
    seeded = seed_defaults(config, raw_selections or {})
    return resolve(config, seeded, anomalies)


def visible_lever_id_set(config: EstimatorConfig, selections: Selections) -> Set[str]:
    """Ids of the levers a UI should render, decided exactly as compute_estimate does."""
    resolved = prepare_selections(config, selections)
    return {
        lever.id
        for lever in visible_levers(config.levers, resolved.selections, resolved.hidden_ids)
    }


def _risk_level(selections: Selections, risk_bands, anomalies: List[Anomaly]) -> Any:
    level = selections.get(RISK_LEVEL_KEY)
    if level is None:
        level = DEFAULT_RISK_LEVEL
    if not (isinstance(level, str) and level in risk_bands):
        record_anomaly(
            anomalies,
            AnomalyCode.UNKNOWN_RISK_LEVEL,
            f"risk level {level!r} has no configured band, using the default contingency",
        )
    return level


def compute_estimate(config: EstimatorConfig, raw_selections: Selections) -> EstimateResult:
    """
    Compute the estimate for one selection map.

    Args:
        config: Validated estimator configuration
        raw_selections: Sparse selections (lever values and reserved keys)

    Returns:
        EstimateResult with every role present
    """
    anomalies: List[Anomaly] = []

    # 1-2. Effective selections
    resolved = prepare_selections(config, raw_selections, anomalies)
    selections = resolved.selections
    hidden = resolved.hidden_ids

    # 3-4. Lever hours and multipliers
    base_hours = accumulate(config, selections, hidden, anomalies)
    multipliers = collect_multipliers(config, selections, hidden)
    hours = apply_multipliers(base_hours, multipliers)

    # 5. Manual deltas on top of a kept snapshot
    pre_adjust_hours = dict(hours)
    deltas = normalize_role_adjust(selections.get(ROLE_ADJUST_KEY), anomalies)
    hours = apply_manual_deltas(pre_adjust_hours, deltas)

    # 6. Country and rates
    country = resolve_country(config, selections, anomalies)
    rates = resolve_rates(country, selections, anomalies)

    # 7. Subtotals, overheads, bands
    build_cost_by_role = {role: hours[role] * rates[role] for role in BUILD_ROLES}
    subtotal_hours = sum(hours[role] for role in BUILD_ROLES)
    subtotal_cost = sum(build_cost_by_role.values())

    overheads_cfg = config.global_overheads
    risk_level = _risk_level(selections, overheads_cfg.contingency_risk_bands, anomalies)
    bands = compute_bands(
        build_hours=subtotal_hours,
        build_cost=subtotal_cost,
        pm_pct=overheads_cfg.pm_percent_of_build,
        qa_pct=overheads_cfg.qa_percent_of_build,
        risk_level=risk_level,
        risk_bands=overheads_cfg.contingency_risk_bands,
        pm_rate=rates[Role.PM.value],
        qa_rate=rates[Role.QA.value],
    )

    trace = DebugTrace(
        hidden_ids=sorted(hidden),
        multipliers=multipliers,
        rates=rates,
        pre_adjust_hours=pre_adjust_hours,
        role_adjust=deltas,
        resolver_passes=resolved.passes,
        converged=resolved.converged,
        risk_level=str(risk_level),
        risk_pct=bands.risk_pct,
        anomalies=anomalies,
    )

    # 8. Round and assemble
    result = assemble_result(
        hours=hours,
        build_cost_by_role=build_cost_by_role,
        subtotal_hours=subtotal_hours,
        subtotal_cost=subtotal_cost,
        bands=bands,
        country=country,
        currency_symbol=config.currency_symbol(country.currency),
        tax=tax_for(country, selections),
        rounding=config.output_config.rounding,
        trace=trace,
    )

    logger.debug(
        f"Estimate for {country.code}: P50 {result.p50.hours}h / {result.p50.cost}, "
        f"P80 {result.p80.hours}h / {result.p80.cost} ({len(anomalies)} anomalies)"
    )
    return result
