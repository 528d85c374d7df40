"""
Estimate Result Schema
Output containers returned by the estimation engine.

`EstimateResult.to_dict()` is the wire contract consumed by presentation
layers; its keys keep the camelCase names the UI reads
(hoursByRole, costByRole, subtotalHours, ...).
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


# =============================================================================
# ANOMALIES - inputs the engine ignored or defaulted
# =============================================================================

class AnomalyCode(str, Enum):
    """Kinds of degenerate input the engine tolerates."""
    UNKNOWN_COUNTRY = "unknown_country"
    NON_NUMERIC_VALUE = "non_numeric_value"
    VALUE_CLAMPED = "value_clamped"
    UNKNOWN_OPTION = "unknown_option"
    MAX_SELECTED_EXCEEDED = "max_selected_exceeded"
    NOT_A_LIST = "not_a_list"
    DEPENDENCY_CAP_REACHED = "dependency_cap_reached"
    INVALID_ROLE_ADJUST = "invalid_role_adjust"
    OVERHEAD_ROLE_ADJUST = "overhead_role_adjust"
    INVALID_RATE_OVERRIDE = "invalid_rate_override"
    UNKNOWN_RISK_LEVEL = "unknown_risk_level"


@dataclass
class Anomaly:
    """A single ignored/defaulted input, gathered during computation."""
    code: str
    message: str
    lever_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "leverId": self.lever_id,
        }


def record_anomaly(
    anomalies: Optional[List[Anomaly]],
    code: AnomalyCode,
    message: str,
    lever_id: Optional[str] = None,
) -> None:
    """Log an anomaly and append it to the collector, if one was given."""
    logger.debug(f"[{code.value}] {message}")
    if anomalies is not None:
        anomalies.append(Anomaly(code=code.value, message=message, lever_id=lever_id))


# =============================================================================
# RESULT BLOCKS
# =============================================================================

@dataclass
class Band:
    """Hours and cost of one estimate band (P50 or P80)."""
    hours: float = 0.0
    cost: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"hours": self.hours, "cost": self.cost}


@dataclass
class Overheads:
    """PM/QA overhead derived as a share of the build subtotal."""
    pm_hours: float = 0.0
    qa_hours: float = 0.0
    pm_cost: float = 0.0
    qa_cost: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pmHours": self.pm_hours,
            "qaHours": self.qa_hours,
            "pmCost": self.pm_cost,
            "qaCost": self.qa_cost,
        }


@dataclass
class TaxSummary:
    vat_included: bool = False
    vat_percent: float = 0.0
    p50_gross_cost: float = 0.0
    p80_gross_cost: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vatIncluded": self.vat_included,
            "vatPercent": self.vat_percent,
            "p50GrossCost": self.p50_gross_cost,
            "p80GrossCost": self.p80_gross_cost,
        }


@dataclass
class DebugTrace:
    """Introspection data for tests and tooling; not meant for end users."""
    hidden_ids: List[str] = field(default_factory=list)
    multipliers: Dict[str, float] = field(default_factory=dict)
    rates: Dict[str, float] = field(default_factory=dict)
    pre_adjust_hours: Dict[str, float] = field(default_factory=dict)
    role_adjust: Dict[str, float] = field(default_factory=dict)
    resolver_passes: int = 0
    converged: bool = True
    risk_level: str = ""
    risk_pct: float = 0.0
    anomalies: List[Anomaly] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hiddenIds": list(self.hidden_ids),
            "multipliers": dict(self.multipliers),
            "rates": dict(self.rates),
            "preAdjustHours": dict(self.pre_adjust_hours),
            "roleAdjust": dict(self.role_adjust),
            "resolverPasses": self.resolver_passes,
            "converged": self.converged,
            "riskLevel": self.risk_level,
            "riskPct": self.risk_pct,
            "anomalies": [a.to_dict() for a in self.anomalies],
        }


@dataclass
class EstimateResult:
    """Complete estimate: per-role breakdown, subtotals, bands, trace."""
    hours_by_role: Dict[str, float]
    cost_by_role: Dict[str, float]
    subtotal_hours: float
    subtotal_cost: float
    overheads: Overheads
    p50: Band
    p80: Band
    currency: str
    currency_symbol: str
    tax: TaxSummary = field(default_factory=TaxSummary)
    debug: DebugTrace = field(default_factory=DebugTrace)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "hoursByRole": dict(self.hours_by_role),
            "costByRole": dict(self.cost_by_role),
            "subtotalHours": self.subtotal_hours,
            "subtotalCost": self.subtotal_cost,
            "overheads": self.overheads.to_dict(),
            "p50": self.p50.to_dict(),
            "p80": self.p80.to_dict(),
            "currency": self.currency,
            "currencySymbol": self.currency_symbol,
            "tax": self.tax.to_dict(),
            "debug": self.debug.to_dict(),
        }
