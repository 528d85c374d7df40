"""
Estimator Configuration Schema
Strict pydantic models for the declarative lever/dependency configuration.

This schema is parsed once at load time so the engine never deals with
untyped fragments:
- Roles are a closed enum
- Levers are a tagged union on `type` (number / select / multiselect)
- Option keys written as "hours.<role>" / "multiplier.<role|all>" are
  turned into explicit OptionEffect records
- Malformed numbers are coerced (hours -> 0, multipliers -> neutral)
  with a warning instead of failing the whole load

NO COMPUTATION - pure shape and normalization.
"""

import logging
import math
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..coerce import strict_equals, to_number

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS - Closed role set
# =============================================================================

class Role(str, Enum):
    """Billable role."""
    DESIGN = "design"
    FRONTEND = "frontend"
    BACKEND = "backend"
    PM = "pm"
    QA = "qa"
    DEVOPS = "devops"
    SEO = "seo"
    CONTENT = "content"


# Canonical order, as plain strings (used as dict keys everywhere)
ROLES: List[str] = [r.value for r in Role]

# Overhead roles are derived from percentages, never accumulated from levers
OVERHEAD_ROLES: List[str] = [Role.PM.value, Role.QA.value]
BUILD_ROLES: List[str] = [r for r in ROLES if r not in OVERHEAD_ROLES]

# Multiplier key applying to every role
ALL_ROLES = "all"

DEFAULT_RISK_LEVEL = "medium"

# Selections: open mapping of lever ids plus reserved "_" keys
Selections = Dict[str, Any]

COUNTRY_KEY = "_country"
ROLE_ADJUST_KEY = "_roleAdjust"
RATE_OVERRIDES_KEY = "_rateOverrides"
TAX_OVERRIDES_KEY = "_taxOverrides"
RISK_LEVEL_KEY = "risk_level"
RESERVED_KEYS = (COUNTRY_KEY, ROLE_ADJUST_KEY, RATE_OVERRIDES_KEY, TAX_OVERRIDES_KEY)


# =============================================================================
# COERCION HELPERS
# =============================================================================

def _coerce_hours(value: Any, context: str) -> float:
    n = to_number(value)
    if not math.isfinite(n):
        logger.warning(f"Non-numeric hours {value!r} in {context}, using 0")
        return 0.0
    if n < 0:
        logger.warning(f"Negative hours {value!r} in {context}, using 0")
        return 0.0
    return n


def _coerce_multiplier(value: Any, context: str) -> float:
    n = to_number(value)
    if not math.isfinite(n) or n < 0:
        logger.warning(f"Invalid multiplier {value!r} in {context}, treating as neutral")
        return 1.0
    return n


def _coerce_role_map(value: Any, context: str) -> Dict[str, float]:
    """Normalize a {role: hours} map, dropping unknown roles."""
    if not isinstance(value, dict):
        if value is not None:
            logger.warning(f"Expected a role map in {context}, got {type(value).__name__}")
        return {}
    result = {}
    for role, raw in value.items():
        if role not in ROLES:
            logger.warning(f"Unknown role '{role}' in {context}, ignored")
            continue
        result[role] = _coerce_hours(raw, f"{context}.{role}")
    return result


def _optional_number(value: Any) -> Optional[float]:
    if value is None:
        return None
    n = to_number(value)
    return n if math.isfinite(n) else None


# =============================================================================
# LEVER OPTIONS
# =============================================================================

class OptionEffect(BaseModel):
    """
    One role-keyed effect of choosing an option.

    `hours` adds to the role; `multiplier` scales it. The pseudo-role "all"
    only carries a multiplier.
    """
    model_config = ConfigDict(frozen=True)

    role: str
    hours: Optional[float] = None
    multiplier: Optional[float] = None

    @field_validator('role')
    @classmethod
    def validate_role(cls, v):
        if v not in ROLES and v != ALL_ROLES:
            raise ValueError(f"unknown role '{v}'")
        return v

    @field_validator('hours', mode='before')
    @classmethod
    def coerce_hours(cls, v):
        if v is None:
            return None
        return _coerce_hours(v, "option effect")

    @field_validator('multiplier', mode='before')
    @classmethod
    def coerce_multiplier(cls, v):
        if v is None:
            return None
        return _coerce_multiplier(v, "option effect")

    @model_validator(mode='after')
    def validate_all_role(self):
        if self.role == ALL_ROLES and self.hours is not None:
            raise ValueError("'all' effects can only carry a multiplier")
        return self


class LeverOption(BaseModel):
    """
    A selectable option of a select/multiselect lever.

    Accepts both the tagged form ({"effects": [...]}) and the flat key
    convention ({"hours.frontend": 12, "multiplier.all": 1.1}).
    """
    model_config = ConfigDict(frozen=True, extra='allow')

    value: Any
    label: str = ""
    effects: List[OptionEffect] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def parse_effect_keys(cls, data):
        if not isinstance(data, dict):
            return data

        data = dict(data)
        effects = list(data.pop("effects", None) or [])

        for key in list(data.keys()):
            kind, sep, role = key.partition(".")
            if not sep or kind not in ("hours", "multiplier"):
                continue
            raw = data.pop(key)
            context = f"option '{data.get('value')}' key '{key}'"

            if role not in ROLES and role != ALL_ROLES:
                logger.warning(f"Unknown role in {context}, ignored")
                continue
            if kind == "hours":
                if role == ALL_ROLES:
                    logger.warning(f"'hours.all' is not supported in {context}, ignored")
                    continue
                effects.append({"role": role, "hours": raw})
            else:
                effects.append({"role": role, "multiplier": raw})

        data["effects"] = effects
        return data

    def hours_effects(self) -> List[OptionEffect]:
        return [e for e in self.effects if e.hours is not None]

    def multiplier_effects(self) -> List[OptionEffect]:
        return [e for e in self.effects if e.multiplier is not None]


# =============================================================================
# LEVERS
# =============================================================================

class Condition(BaseModel):
    """`{id, equals}` rule against the effective selection map."""
    model_config = ConfigDict(frozen=True)

    id: str
    equals: Any


class LeverBase(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='allow')

    id: str
    label: str = ""
    help: Optional[str] = None
    group: Optional[str] = None
    visible_when: List[Condition] = Field(default_factory=list, alias="visibleWhen")

    @field_validator('visible_when', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return v or []


class NumberLever(LeverBase):
    """
    Bounded numeric input.

    Hour rules (all optional, contributions sum):
    - hours_per_unit: linear in the value
    - hours_base + hours_per_extra_locale: first unit fixed, then linear
    - hours_per_batch + batch_size: ceil(value / batch_size) batches
    """
    type: Literal["number"]
    min: Optional[float] = None
    max: Optional[float] = None
    default: Optional[float] = None

    hours_per_unit: Dict[str, float] = Field(default_factory=dict, alias="hoursPerUnit")
    hours_base: Dict[str, float] = Field(default_factory=dict, alias="hoursBase")
    hours_per_extra_locale: Dict[str, float] = Field(default_factory=dict, alias="hoursPerExtraLocale")
    hours_per_batch: Dict[str, float] = Field(default_factory=dict, alias="hoursPerBatch")
    batch_size: Optional[float] = Field(default=None, alias="batchSize")

    @field_validator('min', 'max', 'default', 'batch_size', mode='before')
    @classmethod
    def coerce_optional_number(cls, v):
        return _optional_number(v)

    @field_validator('hours_per_unit', 'hours_base', 'hours_per_extra_locale', 'hours_per_batch', mode='before')
    @classmethod
    def coerce_role_hours(cls, v, info):
        return _coerce_role_map(v, info.field_name)

    @model_validator(mode='after')
    def validate_bounds(self):
        if self.min is not None and self.max is not None and self.min > self.max:
            raise ValueError(f"lever '{self.id}': min ({self.min}) is greater than max ({self.max})")
        return self


class SelectLever(LeverBase):
    """Single choice from an option list."""
    type: Literal["select"]
    options: List[LeverOption] = Field(default_factory=list)
    default: Optional[Any] = None

    def find_option(self, value: Any) -> Optional[LeverOption]:
        for opt in self.options:
            if strict_equals(opt.value, value):
                return opt
        return None


class MultiSelectLever(LeverBase):
    """Zero or more choices from an option list."""
    type: Literal["multiselect"]
    options: List[LeverOption] = Field(default_factory=list)
    default: Optional[List[Any]] = None
    max_selected: Optional[int] = Field(default=None, alias="maxSelected", ge=0)

    def find_option(self, value: Any) -> Optional[LeverOption]:
        for opt in self.options:
            if strict_equals(opt.value, value):
                return opt
        return None


Lever = Annotated[
    Union[NumberLever, SelectLever, MultiSelectLever],
    Field(discriminator="type"),
]


# =============================================================================
# DEPENDENCIES
# =============================================================================

class DependencyAdjust(BaseModel):
    """Force selection `id` to `value` (written as `set` in config files)."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    value: Any = Field(alias="set")


class DependencyEffect(BaseModel):
    model_config = ConfigDict(frozen=True)

    hide: List[str] = Field(default_factory=list)
    adjust: List[DependencyAdjust] = Field(default_factory=list)
    show: List[str] = Field(default_factory=list)

    @field_validator('hide', 'adjust', 'show', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return v or []


class Dependency(BaseModel):
    """`{if: {id, equals}, then: {hide, adjust, show}}`."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    when: Condition = Field(alias="if")
    then: DependencyEffect = Field(default_factory=DependencyEffect)


# =============================================================================
# COUNTRIES
# =============================================================================

class TaxSettings(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    vat_included: bool = Field(default=False, alias="vatIncluded")
    vat_percent: float = Field(default=0.0, alias="vatPercent")

    @field_validator('vat_percent', mode='before')
    @classmethod
    def coerce_percent(cls, v):
        n = _optional_number(v)
        return 0.0 if n is None else n


class Country(BaseModel):
    """Billing country with hourly base rates in its own currency."""
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra='allow')

    code: str
    name: str = ""
    currency: str = ""
    base_rates: Dict[str, float] = Field(default_factory=dict, alias="baseRates")
    tax: TaxSettings = Field(default_factory=TaxSettings)

    @field_validator('base_rates', mode='before')
    @classmethod
    def fill_rates(cls, v):
        rates = _coerce_role_map(v, "baseRates")
        # Missing roles bill at 0
        return {role: rates.get(role, 0.0) for role in ROLES}


# =============================================================================
# GLOBAL POLICY
# =============================================================================

class GlobalOverheads(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    pm_percent_of_build: float = Field(default=0.0, alias="pmPercentOfBuild")
    qa_percent_of_build: float = Field(default=0.0, alias="qaPercentOfBuild")
    contingency_risk_bands: Dict[str, float] = Field(default_factory=dict, alias="contingencyRiskBands")

    @field_validator('pm_percent_of_build', 'qa_percent_of_build', mode='before')
    @classmethod
    def coerce_percent(cls, v):
        n = _optional_number(v)
        return 0.0 if n is None else n

    @field_validator('contingency_risk_bands', mode='before')
    @classmethod
    def coerce_bands(cls, v):
        if not isinstance(v, dict):
            return {}
        bands = {}
        for level, raw in v.items():
            n = _optional_number(raw)
            if n is None:
                logger.warning(f"Non-numeric risk band '{level}': {raw!r}, ignored")
                continue
            bands[str(level)] = n
        return bands


class RoundingConfig(BaseModel):
    """Decimal places for hours and currency outputs."""
    model_config = ConfigDict(frozen=True)

    hours: int = Field(default=1, ge=0)
    currency: int = Field(default=0, ge=0)


class OutputConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    rounding: RoundingConfig = Field(default_factory=RoundingConfig)


class Preset(BaseModel):
    """Named bundle of selection values, optionally targeting a country."""
    model_config = ConfigDict(frozen=True, extra='allow')

    id: str
    label: str = ""
    country: Optional[str] = None
    values: Dict[str, Any] = Field(default_factory=dict)
    meta: Dict[str, Any] = Field(default_factory=dict)

    @property
    def order(self) -> float:
        n = _optional_number(self.meta.get("order"))
        return 0.0 if n is None else n


# =============================================================================
# ROOT CONFIG
# =============================================================================

class EstimatorConfig(BaseModel):
    """
    Complete estimator configuration.

    Loaded once per session and treated as immutable by the engine.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    countries: List[Country]
    levers: List[Lever] = Field(default_factory=list)
    dependencies: List[Dependency] = Field(default_factory=list)
    global_overheads: GlobalOverheads = Field(default_factory=GlobalOverheads, alias="globalOverheads")
    output_config: OutputConfig = Field(default_factory=OutputConfig, alias="outputConfig")
    currencies: Dict[str, str] = Field(default_factory=dict)
    presets: List[Preset] = Field(default_factory=list)
    ui: Dict[str, Any] = Field(default_factory=dict)

    @field_validator('countries')
    @classmethod
    def validate_countries(cls, v):
        if not v:
            raise ValueError('at least one country is required (the first is the default)')
        return v

    @field_validator('levers', 'dependencies', 'presets', mode='before')
    @classmethod
    def none_to_empty(cls, v):
        return v or []

    @field_validator('currencies', mode='before')
    @classmethod
    def normalize_currencies(cls, v):
        """Accept both {"EUR": "€"} and {"EUR": {"symbol": "€"}}."""
        if not isinstance(v, dict):
            return {}
        symbols = {}
        for code, entry in v.items():
            if isinstance(entry, dict):
                entry = entry.get("symbol")
            if entry is not None:
                symbols[str(code)] = str(entry)
        return symbols

    @model_validator(mode='after')
    def validate_unique_lever_ids(self):
        seen = set()
        for lever in self.levers:
            if lever.id in seen:
                raise ValueError(f"duplicate lever id '{lever.id}'")
            seen.add(lever.id)
        return self

    def get_lever(self, lever_id: str):
        for lever in self.levers:
            if lever.id == lever_id:
                return lever
        return None

    def get_country(self, code: Any) -> Optional[Country]:
        for country in self.countries:
            if country.code == code:
                return country
        return None

    @property
    def default_country(self) -> Country:
        return self.countries[0]

    def get_preset(self, preset_id: Any) -> Optional[Preset]:
        for preset in self.presets:
            if preset.id == preset_id:
                return preset
        return None

    def currency_symbol(self, currency: str) -> str:
        return self.currencies.get(currency, currency)
