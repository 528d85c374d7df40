"""
costlever - Project Cost Estimation Engine
Configuration-driven hours and cost estimates from levers, dependency
rules, per-country rates, PM/QA overheads and P50/P80 bands.
"""

__version__ = "1.0.0"
__author__ = "costlever"

from pathlib import Path

# Project paths
PROJECT_ROOT = Path(__file__).parent.parent
RULES_DIR = PROJECT_ROOT / "rules"
SAMPLE_CONFIG = RULES_DIR / "sample_config.yaml"

from .config import ConfigError, load_config, load_selections
from .engine import compute_estimate, prepare_selections, visible_lever_id_set
from .models import EstimateResult, EstimatorConfig
from .pricing import get_country_base_rates
from .selections import apply_preset, default_selections, ordered_presets

__all__ = [
    "PROJECT_ROOT",
    "RULES_DIR",
    "SAMPLE_CONFIG",
    "ConfigError",
    "load_config",
    "load_selections",
    "compute_estimate",
    "prepare_selections",
    "visible_lever_id_set",
    "EstimateResult",
    "EstimatorConfig",
    "get_country_base_rates",
    "apply_preset",
    "default_selections",
    "ordered_presets",
]
