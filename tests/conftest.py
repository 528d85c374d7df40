"""
Shared fixtures: fabricated configurations for engine tests.

`quote_config` exercises every lever type, a hiding/adjusting dependency,
two countries and presets. `scenario_config` is the minimal single-lever
setup whose numbers are easy to check by hand.
"""

import copy
from pathlib import Path

import pytest

from costlever.config import config_from_dict


QUOTE_CONFIG = {
    "countries": [
        {
            "code": "NL",
            "name": "Netherlands",
            "currency": "EUR",
            "baseRates": {
                "design": 60, "frontend": 80, "backend": 90,
                "pm": 70, "qa": 50, "content": 40,
            },
            "tax": {"vatIncluded": False, "vatPercent": 21},
        },
        {
            "code": "US",
            "name": "United States",
            "currency": "USD",
            "baseRates": {"frontend": 100, "backend": 120, "pm": 90, "qa": 60},
            "tax": {"vatIncluded": True, "vatPercent": 0},
        },
    ],
    "currencies": {"EUR": "€", "USD": "$"},
    "globalOverheads": {
        "pmPercentOfBuild": 0.1,
        "qaPercentOfBuild": 0.05,
        "contingencyRiskBands": {"low": 0.05, "medium": 0.1, "high": 0.2},
    },
    "outputConfig": {"rounding": {"hours": 1, "currency": 0}},
    "levers": [
        {
            "id": "pages", "type": "number", "label": "Pages",
            "min": 0, "max": 20, "default": 4,
            "hoursPerUnit": {"design": 2, "frontend": 5},
        },
        {
            "id": "locales", "type": "number", "label": "Languages",
            "min": 1, "max": 5, "default": 1,
            "hoursBase": {"frontend": 2},
            "hoursPerExtraLocale": {"frontend": 3, "content": 4},
        },
        {
            "id": "articles", "type": "number", "label": "Articles",
            "min": 0, "default": 0,
            "hoursPerBatch": {"content": 10}, "batchSize": 5,
        },
        {
            "id": "cms", "type": "select", "label": "CMS", "default": "none",
            "options": [
                {"value": "none", "label": "None"},
                {"value": "headless", "label": "Headless", "hours.backend": 20},
                {"value": "custom", "label": "Custom", "hours.backend": 40, "multiplier.qa": 1.5},
            ],
        },
        {
            "id": "training", "type": "select", "label": "Training", "default": False,
            "options": [
                {"value": False, "label": "No"},
                {"value": True, "label": "Yes", "hours.content": 6},
            ],
        },
        {
            "id": "extras", "type": "multiselect", "label": "Extras", "maxSelected": 2,
            "options": [
                {"value": "blog", "hours.frontend": 6},
                {"value": "shop", "hours.backend": 30, "multiplier.all": 1.1},
                {"value": "forum", "hours.backend": 12},
            ],
        },
        {
            "id": "rush", "type": "select", "label": "Rush", "default": False,
            "options": [
                {"value": False},
                {"value": True, "multiplier.all": 1.2},
            ],
        },
        {
            "id": "shop_products", "type": "number", "label": "Products", "default": 0,
            "visibleWhen": [{"id": "cms", "equals": "custom"}],
            "hoursPerUnit": {"backend": 0.5},
        },
    ],
    "dependencies": [
        {
            "if": {"id": "cms", "equals": "none"},
            "then": {
                "hide": ["training"],
                "adjust": [{"id": "training", "set": False}],
            },
        },
    ],
    "presets": [
        {
            "id": "bigger", "label": "Bigger site", "country": "US",
            "values": {"pages": 10, "cms": "headless"},
            "meta": {"order": 2},
        },
        {
            "id": "starter", "label": "Starter",
            "values": {"pages": 3},
            "meta": {"order": 1},
        },
        {"id": "unordered", "label": "Unordered", "values": {}},
    ],
}


SCENARIO_CONFIG = {
    "countries": [
        {"code": "US", "currency": "USD", "baseRates": {"frontend": 50}},
    ],
    "currencies": {"USD": "$"},
    "levers": [
        {"id": "pages_unique", "type": "number", "hoursPerUnit": {"frontend": 2}, "default": 5},
    ],
    "globalOverheads": {
        "pmPercentOfBuild": 0.1,
        "qaPercentOfBuild": 0.1,
        "contingencyRiskBands": {"medium": 0.12},
    },
}


@pytest.fixture
def quote_config_dict():
    """Deep copy of QUOTE_CONFIG, safe to edit per test."""
    return copy.deepcopy(QUOTE_CONFIG)


@pytest.fixture
def quote_config():
    return config_from_dict(copy.deepcopy(QUOTE_CONFIG))


@pytest.fixture
def scenario_config():
    return config_from_dict(copy.deepcopy(SCENARIO_CONFIG))


@pytest.fixture
def make_config():
    """Build a config from the scenario base with selected keys replaced."""
    def _make(**overrides):
        data = copy.deepcopy(SCENARIO_CONFIG)
        data.update(overrides)
        return config_from_dict(data)
    return _make


@pytest.fixture
def sample_config_path():
    return Path(__file__).parent.parent / "rules" / "sample_config.yaml"
