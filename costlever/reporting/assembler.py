"""
Result Assembler - rounds the unrounded computation and builds the
EstimateResult wire object.
"""

from typing import Dict

from ..models import (
    BUILD_ROLES,
    ROLES,
    Band,
    Country,
    DebugTrace,
    EstimateResult,
    Overheads,
    Role,
    RoundingConfig,
    TaxSettings,
    TaxSummary,
)
from ..pricing.bands import BandBreakdown
from ..pricing.rates import gross_cost
from .rounding import round_half_away, round_map


def assemble_result(
    hours: Dict[str, float],
    build_cost_by_role: Dict[str, float],
    subtotal_hours: float,
    subtotal_cost: float,
    bands: BandBreakdown,
    country: Country,
    currency_symbol: str,
    tax: TaxSettings,
    rounding: RoundingConfig,
    trace: DebugTrace,
) -> EstimateResult:
    """
    Build the final result.

    Build roles keep their accumulated hours and cost; pm/qa take the
    overhead-derived values. Every number is rounded here and nowhere else.
    """
    h = rounding.hours
    c = rounding.currency
    ovh = bands.overheads

    hours_by_role = {}
    cost_by_role = {}
    for role in ROLES:
        if role == Role.PM.value:
            hours_by_role[role] = round_half_away(ovh.pm_hours, h)
            cost_by_role[role] = round_half_away(ovh.pm_cost, c)
        elif role == Role.QA.value:
            hours_by_role[role] = round_half_away(ovh.qa_hours, h)
            cost_by_role[role] = round_half_away(ovh.qa_cost, c)
        else:
            hours_by_role[role] = round_half_away(hours.get(role, 0.0), h)
            cost_by_role[role] = round_half_away(build_cost_by_role.get(role, 0.0), c)

    trace.pre_adjust_hours = round_map(
        {role: trace.pre_adjust_hours.get(role, 0.0) for role in BUILD_ROLES}, h
    )
    trace.role_adjust = round_map(trace.role_adjust, h)

    return EstimateResult(
        hours_by_role=hours_by_role,
        cost_by_role=cost_by_role,
        subtotal_hours=round_half_away(subtotal_hours, h),
        subtotal_cost=round_half_away(subtotal_cost, c),
        overheads=Overheads(
            pm_hours=round_half_away(ovh.pm_hours, h),
            qa_hours=round_half_away(ovh.qa_hours, h),
            pm_cost=round_half_away(ovh.pm_cost, c),
            qa_cost=round_half_away(ovh.qa_cost, c),
        ),
        p50=Band(
            hours=round_half_away(bands.p50.hours, h),
            cost=round_half_away(bands.p50.cost, c),
        ),
        p80=Band(
            hours=round_half_away(bands.p80.hours, h),
            cost=round_half_away(bands.p80.cost, c),
        ),
        currency=country.currency,
        currency_symbol=currency_symbol,
        tax=TaxSummary(
            vat_included=tax.vat_included,
            vat_percent=tax.vat_percent,
            p50_gross_cost=round_half_away(gross_cost(bands.p50.cost, tax), c),
            p80_gross_cost=round_half_away(gross_cost(bands.p80.cost, tax), c),
        ),
        debug=trace,
    )
