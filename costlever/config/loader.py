"""
Configuration Loader - YAML/JSON layer in front of the pydantic schema.

A configuration can be split over several files (for example levers and
policy in one, countries and rates in another). Fragments are read with
yaml.safe_load (JSON is accepted as well), shallow-merged by top-level key
in the order given, and validated once into an EstimatorConfig.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Union

import yaml
from pydantic import ValidationError

from ..models import EstimatorConfig, Selections

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class ConfigError(Exception):
    """Raised when a configuration cannot be read or fails validation."""


def _read_fragment(path: Path) -> Dict[str, Any]:
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Config file not found: {path}") from e
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML/JSON in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    return data


def _format_validation_error(error: ValidationError) -> str:
    lines = []
    for err in error.errors():
        loc = ".".join(str(part) for part in err.get("loc", ()))
        lines.append(f"  - {loc or '<root>'}: {err.get('msg')}")
    return "\n".join(lines)


def config_from_dict(data: Dict[str, Any]) -> EstimatorConfig:
    """Validate an already-parsed configuration mapping."""
    try:
        return EstimatorConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(
            f"Invalid estimator configuration ({e.error_count()} errors):\n"
            f"{_format_validation_error(e)}"
        ) from e


def load_config(*paths: PathLike) -> EstimatorConfig:
    """
    Load and validate a configuration from one or more files.

    Args:
        paths: YAML/JSON fragments; later files override earlier top-level keys

    Returns:
        EstimatorConfig

    Raises:
        ConfigError: unreadable file, bad syntax or schema violation
    """
    if not paths:
        raise ConfigError("No configuration files given")

    merged: Dict[str, Any] = {}
    for p in paths:
        path = Path(p)
        fragment = _read_fragment(path)
        merged.update(fragment)
        logger.info(f"Loaded config fragment {path} ({len(fragment)} sections)")

    config = config_from_dict(merged)

    logger.info("Estimator config ready")
    logger.info(f"  - Countries: {len(config.countries)}")
    logger.info(f"  - Levers: {len(config.levers)}")
    logger.info(f"  - Dependencies: {len(config.dependencies)}")
    logger.info(f"  - Presets: {len(config.presets)}")

    return config


def load_selections(path: PathLike) -> Selections:
    """
    Load a selection map from YAML/JSON.

    A missing file yields empty selections (every lever at its default).
    """
    path = Path(path)
    if not path.exists():
        logger.info(f"No selections file at {path}, using defaults")
        return {}

    data = _read_fragment(path)
    logger.info(f"Loaded {len(data)} selections from {path}")
    return data
