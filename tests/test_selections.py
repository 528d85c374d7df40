"""
Tests for selection helpers: defaults, presets and override editing.
"""

from costlever.selections import (
    apply_preset,
    clear_rate_overrides,
    clear_role_adjust,
    default_selections,
    ordered_presets,
    seed_defaults,
    set_rate_override,
    set_role_adjust,
    set_tax_override,
    toggle_multiselect,
)


class TestDefaults:

    def test_seed_defaults(self, quote_config):
        seeded = seed_defaults(quote_config, {"pages": 7, "articles": None})
        assert seeded["pages"] == 7
        assert seeded["articles"] == 0
        assert seeded["cms"] == "none"
        assert seeded["training"] is False
        assert seeded["extras"] == []

    def test_seed_leaves_reserved_keys(self, quote_config):
        seeded = seed_defaults(quote_config, {"_country": "US", "_roleAdjust": {"qa": 1}})
        assert seeded["_country"] == "US"
        assert seeded["_roleAdjust"] == {"qa": 1}

    def test_default_selections(self, quote_config):
        selections = default_selections(quote_config)
        assert selections["_country"] == "NL"
        assert selections["_roleAdjust"] == {}
        assert selections["_rateOverrides"] == {}
        assert selections["_taxOverrides"] == {}
        assert selections["pages"] == 4

    def test_default_selections_country(self, quote_config):
        assert default_selections(quote_config, "US")["_country"] == "US"
        assert default_selections(quote_config, "XX")["_country"] == "NL"

    def test_default_preset_keeps_country(self, quote_config):
        selections = default_selections(quote_config, "NL", preset_id="bigger")
        assert selections["pages"] == 10
        assert selections["cms"] == "headless"
        assert selections["_country"] == "NL"

    def test_unknown_default_preset_ignored(self, quote_config):
        assert default_selections(quote_config, preset_id="nope") == default_selections(quote_config)


class TestPresets:

    def test_apply_merges_and_sets_country(self, quote_config):
        current = default_selections(quote_config)
        current["rush"] = True
        merged = apply_preset(quote_config, current, "bigger")
        assert merged["pages"] == 10
        assert merged["rush"] is True
        assert merged["_country"] == "US"
        assert current["pages"] == 4

    def test_preset_without_country_keeps_current(self, quote_config):
        current = default_selections(quote_config, "US")
        assert apply_preset(quote_config, current, "starter")["_country"] == "US"

    def test_unknown_preset_returns_input(self, quote_config):
        current = default_selections(quote_config)
        assert apply_preset(quote_config, current, "nope") is current

    def test_ordered_by_meta_order(self, quote_config):
        assert [p.id for p in ordered_presets(quote_config)] == ["unordered", "starter", "bigger"]


class TestToggle:

    def test_add_and_remove(self, quote_config):
        selections = toggle_multiselect(quote_config, {"extras": []}, "extras", "blog")
        assert selections["extras"] == ["blog"]
        selections = toggle_multiselect(quote_config, selections, "extras", "blog")
        assert selections["extras"] == []

    def test_truncates_to_max_selected(self, quote_config):
        selections = toggle_multiselect(quote_config, {"extras": ["blog", "shop"]}, "extras", "forum")
        assert selections["extras"] == ["blog", "shop"]

    def test_non_multiselect_untouched(self, quote_config):
        selections = {"cms": "none"}
        assert toggle_multiselect(quote_config, selections, "cms", "headless") is selections

    def test_bool_and_number_values_stay_distinct(self, make_config):
        config = make_config(levers=[
            {"id": "flags", "type": "multiselect", "options": [{"value": True}, {"value": 1}]},
        ])
        selections = toggle_multiselect(config, {"flags": [True]}, "flags", 1)
        assert selections["flags"] == [True, 1]
        selections = toggle_multiselect(config, selections, "flags", 1)
        assert selections["flags"] == [True]
        assert selections["flags"][0] is True

    def test_max_selected_zero_keeps_nothing(self, make_config):
        config = make_config(levers=[
            {"id": "extras", "type": "multiselect", "maxSelected": 0, "options": [{"value": "blog"}]},
        ])
        assert toggle_multiselect(config, {}, "extras", "blog")["extras"] == []


class TestOverrides:

    def test_set_rate_override_copies(self):
        original = {"_rateOverrides": {"NL": {"design": 70}}}
        updated = set_rate_override(original, "NL", "frontend", 100)
        assert updated["_rateOverrides"] == {"NL": {"design": 70, "frontend": 100}}
        assert original == {"_rateOverrides": {"NL": {"design": 70}}}

    def test_clear_single_role(self):
        selections = {"_rateOverrides": {"NL": {"design": 70, "frontend": 100}}}
        cleared = clear_rate_overrides(selections, "NL", "frontend")
        assert cleared["_rateOverrides"] == {"NL": {"design": 70}}

    def test_clearing_last_role_drops_country(self):
        selections = {"_rateOverrides": {"NL": {"frontend": 100}, "US": {"qa": 1}}}
        assert clear_rate_overrides(selections, "NL", "frontend")["_rateOverrides"] == {"US": {"qa": 1}}
        assert clear_rate_overrides(selections, "US")["_rateOverrides"] == {"NL": {"frontend": 100}}

    def test_role_adjust(self):
        selections = set_role_adjust({}, "frontend", -4)
        selections = set_role_adjust(selections, "design", 2)
        assert selections["_roleAdjust"] == {"frontend": -4, "design": 2}
        assert clear_role_adjust(selections)["_roleAdjust"] == {}

    def test_tax_override(self):
        selections = set_tax_override({}, "NL", vat_percent=9)
        assert selections["_taxOverrides"] == {"NL": {"vatPercent": 9}}
        selections = set_tax_override(selections, "NL", vat_included=True)
        assert selections["_taxOverrides"] == {"NL": {"vatPercent": 9, "vatIncluded": True}}
