"""
Tests for the pydantic configuration schema: option key parsing, coercion
of malformed numbers, and the load-time structural checks.
"""

import math

import pytest
from pydantic import ValidationError

from costlever.coerce import clamp, strict_equals, to_number
from costlever.models import (
    ROLES,
    Country,
    Dependency,
    EstimatorConfig,
    LeverOption,
    MultiSelectLever,
    NumberLever,
    SelectLever,
)


# ===========================================================================
# Coercion helpers
# ===========================================================================

class TestCoercion:

    def test_to_number_accepts_numeric_strings(self):
        assert to_number("12.5") == 12.5
        assert to_number(" 3 ") == 3.0
        assert to_number(7) == 7.0

    @pytest.mark.parametrize("value", [None, True, False, "abc", "", [1], {"a": 1}])
    def test_to_number_rejects_non_numbers(self, value):
        assert math.isnan(to_number(value))

    def test_clamp_bounds_and_nan_fallback(self):
        assert clamp(50, 0, 20) == 20
        assert clamp(-3, 0, 20) == 0
        assert clamp(float("nan"), 2, 20) == 2
        assert clamp(float("nan")) == 0.0

    def test_to_number_oversized_int_is_signed_infinity(self):
        assert to_number(10**400) == math.inf
        assert to_number(-10**400) == -math.inf
        assert to_number("1e400") == math.inf

    def test_clamp_infinity_to_bound_on_its_side(self):
        assert clamp(math.inf, 0, 20) == 20
        assert clamp(-math.inf, 2, 20) == 2
        assert clamp(math.inf, 3) == 3
        assert clamp(math.inf) == 0.0

    def test_strict_equals_does_not_coerce(self):
        assert strict_equals(1, 1.0)
        assert strict_equals("a", "a")
        assert strict_equals([1, "x"], [1, "x"])
        assert not strict_equals(1, "1")
        assert not strict_equals(True, 1)
        assert not strict_equals(0, False)
        assert not strict_equals(None, 0)


# ===========================================================================
# Lever options
# ===========================================================================

class TestLeverOption:

    def test_flat_keys_become_effects(self):
        opt = LeverOption.model_validate({
            "value": "custom",
            "hours.backend": 40,
            "multiplier.qa": 1.5,
            "multiplier.all": 1.1,
        })
        hours = {e.role: e.hours for e in opt.hours_effects()}
        mults = {e.role: e.multiplier for e in opt.multiplier_effects()}
        assert hours == {"backend": 40.0}
        assert mults == {"qa": 1.5, "all": 1.1}

    def test_tagged_effects_form(self):
        opt = LeverOption.model_validate({
            "value": "x",
            "effects": [{"role": "frontend", "hours": 3}],
        })
        assert opt.hours_effects()[0].hours == 3.0

    def test_malformed_hours_become_zero(self):
        opt = LeverOption.model_validate({"value": "x", "hours.frontend": "abc"})
        assert opt.hours_effects()[0].hours == 0.0

    def test_negative_hours_become_zero(self):
        opt = LeverOption.model_validate({"value": "x", "hours.frontend": -5})
        assert opt.hours_effects()[0].hours == 0.0

    @pytest.mark.parametrize("raw", ["abc", -2, [1.5]])
    def test_invalid_multiplier_is_neutral(self, raw):
        opt = LeverOption.model_validate({"value": "x", "multiplier.frontend": raw})
        assert opt.multiplier_effects()[0].multiplier == 1.0

    def test_unknown_role_and_hours_all_are_dropped(self):
        opt = LeverOption.model_validate({
            "value": "x",
            "hours.marketing": 5,
            "hours.all": 5,
        })
        assert opt.effects == []


# ===========================================================================
# Levers
# ===========================================================================

class TestLevers:

    def test_number_lever_aliases(self):
        lever = NumberLever.model_validate({
            "id": "locales", "type": "number",
            "hoursBase": {"frontend": 2},
            "hoursPerExtraLocale": {"frontend": 3},
            "hoursPerBatch": {"content": 1},
            "batchSize": "5",
        })
        assert lever.hours_base == {"frontend": 2.0}
        assert lever.hours_per_extra_locale == {"frontend": 3.0}
        assert lever.batch_size == 5.0

    def test_min_greater_than_max_rejected(self):
        with pytest.raises(ValidationError):
            NumberLever.model_validate({"id": "n", "type": "number", "min": 10, "max": 1})

    def test_select_find_option_is_strict(self):
        lever = SelectLever.model_validate({
            "id": "flag", "type": "select",
            "options": [{"value": False}, {"value": True}],
        })
        assert lever.find_option(True).value is True
        assert lever.find_option(1) is None

    def test_multiselect_max_selected_alias(self):
        lever = MultiSelectLever.model_validate({
            "id": "m", "type": "multiselect", "maxSelected": 2, "options": [],
        })
        assert lever.max_selected == 2

    def test_dependency_set_alias(self):
        dep = Dependency.model_validate({
            "if": {"id": "cms", "equals": "none"},
            "then": {"adjust": [{"id": "training", "set": False}], "hide": None},
        })
        assert dep.when.id == "cms"
        assert dep.then.adjust[0].value is False
        assert dep.then.hide == []


# ===========================================================================
# Countries and root config
# ===========================================================================

class TestEstimatorConfig:

    def test_base_rates_filled_for_every_role(self):
        country = Country.model_validate({"code": "X", "baseRates": {"frontend": 10}})
        assert list(country.base_rates) == ROLES
        assert country.base_rates["frontend"] == 10.0
        assert country.base_rates["qa"] == 0.0

    def test_negative_base_rate_coerced(self):
        country = Country.model_validate({"code": "X", "baseRates": {"frontend": -10}})
        assert country.base_rates["frontend"] == 0.0

    def test_empty_countries_rejected(self):
        with pytest.raises(ValidationError):
            EstimatorConfig.model_validate({"countries": []})

    def test_unknown_lever_type_rejected(self, quote_config_dict):
        quote_config_dict["levers"].append({"id": "s", "type": "slider"})
        with pytest.raises(ValidationError):
            EstimatorConfig.model_validate(quote_config_dict)

    def test_duplicate_lever_ids_rejected(self, quote_config_dict):
        quote_config_dict["levers"].append({"id": "pages", "type": "number"})
        with pytest.raises(ValidationError, match="duplicate lever id"):
            EstimatorConfig.model_validate(quote_config_dict)

    def test_currency_symbols(self, quote_config_dict):
        quote_config_dict["currencies"] = {"EUR": {"symbol": "€"}, "USD": "$"}
        config = EstimatorConfig.model_validate(quote_config_dict)
        assert config.currency_symbol("EUR") == "€"
        assert config.currency_symbol("USD") == "$"
        assert config.currency_symbol("GBP") == "GBP"

    def test_lookups(self, quote_config):
        assert quote_config.default_country.code == "NL"
        assert quote_config.get_country("US").currency == "USD"
        assert quote_config.get_country("XX") is None
        assert quote_config.get_lever("cms").type == "select"
        assert quote_config.get_preset("starter").order == 1
        assert quote_config.get_preset("unordered").order == 0
