"""
Rate Resolver - hourly rate per role for the selected country.

Resolution order for a role:
1. selections["_rateOverrides"][country.code][role], when numeric
2. country.baseRates[role]
3. 0

Rates are in the country's own currency; nothing is converted.
"""

import logging
import math
from typing import Any, Dict, List, Optional

from ..coerce import to_number
from ..models import (
    COUNTRY_KEY,
    RATE_OVERRIDES_KEY,
    ROLES,
    TAX_OVERRIDES_KEY,
    Anomaly,
    AnomalyCode,
    Country,
    EstimatorConfig,
    Selections,
    TaxSettings,
    record_anomaly,
)

logger = logging.getLogger(__name__)


def resolve_country(
    config: EstimatorConfig,
    selections: Selections,
    anomalies: Optional[List[Anomaly]] = None,
) -> Country:
    """Country named by `_country`, else the first configured country."""
    code = selections.get(COUNTRY_KEY)
    if code is None:
        return config.default_country

    country = config.get_country(code)
    if country is None:
        record_anomaly(
            anomalies,
            AnomalyCode.UNKNOWN_COUNTRY,
            f"unknown country {code!r}, using {config.default_country.code}",
        )
        return config.default_country
    return country


def _country_entry(selections: Selections, key: str, country: Country) -> Dict[str, Any]:
    overrides = selections.get(key)
    if not isinstance(overrides, dict):
        return {}
    entry = overrides.get(country.code)
    return entry if isinstance(entry, dict) else {}


def rate_for(
    role: str,
    country: Country,
    selections: Selections,
    anomalies: Optional[List[Anomaly]] = None,
) -> float:
    """Effective hourly rate for one role."""
    raw = _country_entry(selections, RATE_OVERRIDES_KEY, country).get(role)

    if raw is not None:
        n = to_number(raw)
        if math.isfinite(n):
            logger.debug(f"Rate override {country.code}/{role}: {n}")
            return n
        record_anomaly(
            anomalies,
            AnomalyCode.INVALID_RATE_OVERRIDE,
            f"rate override {raw!r} for {country.code}/{role} is not a number, using base rate",
        )

    return float(country.base_rates.get(role, 0.0))


def resolve_rates(
    country: Country,
    selections: Selections,
    anomalies: Optional[List[Anomaly]] = None,
) -> Dict[str, float]:
    """Effective rates for every role."""
    return {role: rate_for(role, country, selections, anomalies) for role in ROLES}


def get_country_base_rates(config: EstimatorConfig, country_code: Any) -> Dict[str, float]:
    """
    Base rates of a country before any override, for every role.

    Unknown codes use the first configured country, like the engine does.
    """
    country = config.get_country(country_code) or config.default_country
    return {role: float(country.base_rates.get(role, 0.0)) for role in ROLES}


def tax_for(country: Country, selections: Selections) -> TaxSettings:
    """Country tax settings with `_taxOverrides[code]` applied field by field."""
    entry = _country_entry(selections, TAX_OVERRIDES_KEY, country)

    vat_included = entry.get("vatIncluded")
    if not isinstance(vat_included, bool):
        vat_included = country.tax.vat_included

    vat_percent = to_number(entry.get("vatPercent"))
    if not math.isfinite(vat_percent):
        vat_percent = country.tax.vat_percent

    return TaxSettings(vat_included=vat_included, vat_percent=vat_percent)


def gross_cost(cost: float, tax: TaxSettings) -> float:
    """Cost including VAT; rates that already include VAT pass through."""
    if tax.vat_included:
        return cost
    return cost * (1 + tax.vat_percent / 100)
