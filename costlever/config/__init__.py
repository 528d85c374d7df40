"""
Configuration loading.
"""

from .loader import ConfigError, config_from_dict, load_config, load_selections

__all__ = [
    "ConfigError",
    "config_from_dict",
    "load_config",
    "load_selections",
]
