"""
Overhead & Band Calculator

PM and QA are priced as a share of the build subtotal. The P50 band is the
most likely estimate (build + overheads, no padding); P80 inflates P50 by a
single risk percentage looked up from the configured contingency bands.
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from ..models import Band, Overheads

# Used when the selected risk level has no configured band
DEFAULT_RISK_PCT = 0.12


@dataclass
class BandBreakdown:
    """Unrounded overheads and P50/P80 bands."""
    overheads: Overheads = field(default_factory=Overheads)
    p50: Band = field(default_factory=Band)
    p80: Band = field(default_factory=Band)
    risk_pct: float = DEFAULT_RISK_PCT


def risk_pct_for(risk_level: Any, risk_bands: Dict[str, float]) -> float:
    """Contingency share for a risk level; unknown levels get DEFAULT_RISK_PCT."""
    if isinstance(risk_level, str) and risk_level in risk_bands:
        return risk_bands[risk_level]
    return DEFAULT_RISK_PCT


def compute_bands(
    build_hours: float,
    build_cost: float,
    pm_pct: float,
    qa_pct: float,
    risk_level: Any,
    risk_bands: Dict[str, float],
    pm_rate: float,
    qa_rate: float,
) -> BandBreakdown:
    """
    Derive overheads and bands from the build subtotal.

    Args:
        build_hours: Subtotal hours of build roles
        build_cost: Subtotal cost of build roles
        pm_pct: PM share of build hours (0.1 = 10%)
        qa_pct: QA share of build hours
        risk_level: Selected risk level ("low", "medium", "high", ...)
        risk_bands: Configured contingency share per level
        pm_rate: Resolved PM hourly rate
        qa_rate: Resolved QA hourly rate

    Returns:
        BandBreakdown
    """
    pm_hours = build_hours * pm_pct
    qa_hours = build_hours * qa_pct
    pm_cost = pm_hours * pm_rate
    qa_cost = qa_hours * qa_rate

    p50 = Band(
        hours=build_hours + pm_hours + qa_hours,
        cost=build_cost + pm_cost + qa_cost,
    )

    risk_pct = risk_pct_for(risk_level, risk_bands)
    p80 = Band(
        hours=p50.hours * (1 + risk_pct),
        cost=p50.cost * (1 + risk_pct),
    )

    return BandBreakdown(
        overheads=Overheads(pm_hours=pm_hours, qa_hours=qa_hours, pm_cost=pm_cost, qa_cost=qa_cost),
        p50=p50,
        p80=p80,
        risk_pct=risk_pct,
    )
