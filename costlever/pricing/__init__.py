"""
Pricing - rates, tax and overhead/risk bands.

This module:
- Resolves the billing country and per-role hourly rates (with overrides)
- Resolves VAT settings (with overrides)
- Derives PM/QA overheads and the P50/P80 bands
"""

from .rates import (
    resolve_country,
    rate_for,
    resolve_rates,
    get_country_base_rates,
    tax_for,
    gross_cost,
)
from .bands import DEFAULT_RISK_PCT, BandBreakdown, compute_bands, risk_pct_for

__all__ = [
    "resolve_country",
    "rate_for",
    "resolve_rates",
    "get_country_base_rates",
    "tax_for",
    "gross_cost",
    "DEFAULT_RISK_PCT",
    "BandBreakdown",
    "compute_bands",
    "risk_pct_for",
]
