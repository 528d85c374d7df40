# Models package
from .config_schema import (
    Role,
    ROLES,
    BUILD_ROLES,
    OVERHEAD_ROLES,
    ALL_ROLES,
    DEFAULT_RISK_LEVEL,
    Selections,
    COUNTRY_KEY,
    ROLE_ADJUST_KEY,
    RATE_OVERRIDES_KEY,
    TAX_OVERRIDES_KEY,
    RISK_LEVEL_KEY,
    RESERVED_KEYS,
    OptionEffect,
    LeverOption,
    Condition,
    NumberLever,
    SelectLever,
    MultiSelectLever,
    Lever,
    Dependency,
    DependencyAdjust,
    DependencyEffect,
    TaxSettings,
    Country,
    GlobalOverheads,
    RoundingConfig,
    OutputConfig,
    Preset,
    EstimatorConfig,
)
from .result_schema import (
    Anomaly,
    AnomalyCode,
    Band,
    Overheads,
    TaxSummary,
    DebugTrace,
    EstimateResult,
    record_anomaly,
)

__all__ = [
    "Role",
    "ROLES",
    "BUILD_ROLES",
    "OVERHEAD_ROLES",
    "ALL_ROLES",
    "DEFAULT_RISK_LEVEL",
    "COUNTRY_KEY",
    "ROLE_ADJUST_KEY",
    "RATE_OVERRIDES_KEY",
    "TAX_OVERRIDES_KEY",
    "RISK_LEVEL_KEY",
    "RESERVED_KEYS",
    "OptionEffect",
    "LeverOption",
    "Condition",
    "NumberLever",
    "SelectLever",
    "MultiSelectLever",
    "Lever",
    "Dependency",
    "DependencyAdjust",
    "DependencyEffect",
    "TaxSettings",
    "Country",
    "GlobalOverheads",
    "RoundingConfig",
    "OutputConfig",
    "Preset",
    "EstimatorConfig",
    "Selections",
    "Anomaly",
    "AnomalyCode",
    "Band",
    "Overheads",
    "TaxSummary",
    "DebugTrace",
    "EstimateResult",
    "record_anomaly",
]
