"""
Tests for YAML/JSON configuration loading.
"""

import json
import logging

import pytest
import yaml

from costlever.config import ConfigError, config_from_dict, load_config, load_selections


def _write_yaml(path, data):
    path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
    return path


class TestLoadConfig:

    def test_single_file(self, tmp_path, quote_config_dict):
        path = _write_yaml(tmp_path / "config.yaml", quote_config_dict)
        config = load_config(path)
        assert len(config.levers) == 8
        assert config.default_country.code == "NL"

    def test_fragments_merge_by_top_level_key(self, tmp_path, quote_config_dict):
        countries = {"countries": quote_config_dict.pop("countries")}
        levers = _write_yaml(tmp_path / "levers.yaml", quote_config_dict)
        rates = _write_yaml(tmp_path / "countries.yaml", countries)

        config = load_config(levers, str(rates))
        assert [c.code for c in config.countries] == ["NL", "US"]
        assert config.get_lever("extras").max_selected == 2

    def test_later_fragment_wins(self, tmp_path, quote_config_dict):
        base = _write_yaml(tmp_path / "base.yaml", quote_config_dict)
        override = _write_yaml(tmp_path / "override.yaml", {
            "globalOverheads": {"pmPercentOfBuild": 0.2},
        })
        config = load_config(base, override)
        assert config.global_overheads.pm_percent_of_build == 0.2
        assert config.global_overheads.contingency_risk_bands == {}

    def test_json_accepted(self, tmp_path, quote_config_dict):
        path = tmp_path / "config.json"
        path.write_text(json.dumps(quote_config_dict), encoding="utf-8")
        assert load_config(path).get_country("US").currency == "USD"

    def test_logs_counts(self, tmp_path, quote_config_dict, caplog):
        path = _write_yaml(tmp_path / "config.yaml", quote_config_dict)
        with caplog.at_level(logging.INFO, logger="costlever"):
            load_config(path)
        assert "Levers: 8" in caplog.text

    def test_malformed_numbers_warn(self, tmp_path, quote_config_dict, caplog):
        quote_config_dict["levers"][3]["options"][1]["hours.backend"] = "lots"
        path = _write_yaml(tmp_path / "config.yaml", quote_config_dict)
        with caplog.at_level(logging.WARNING, logger="costlever"):
            config = load_config(path)
        assert "Non-numeric hours" in caplog.text
        assert config.get_lever("cms").options[1].hours_effects()[0].hours == 0.0


class TestConfigErrors:

    def test_no_paths(self):
        with pytest.raises(ConfigError):
            load_config()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "missing.yaml")

    def test_bad_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("countries: [\n  - code: NL\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_config(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="must contain a mapping"):
            load_config(path)

    def test_validation_error_lists_fields(self, quote_config_dict):
        quote_config_dict["levers"][0]["min"] = 50
        with pytest.raises(ConfigError, match="levers"):
            config_from_dict(quote_config_dict)

    def test_empty_countries(self, quote_config_dict):
        quote_config_dict["countries"] = []
        with pytest.raises(ConfigError, match="countries"):
            config_from_dict(quote_config_dict)


class TestLoadSelections:

    def test_missing_file_is_empty(self, tmp_path):
        assert load_selections(tmp_path / "none.yaml") == {}

    def test_reads_mapping(self, tmp_path):
        path = _write_yaml(tmp_path / "sel.yaml", {"pages": 3, "extras": ["blog"], "_country": "US"})
        assert load_selections(path) == {"pages": 3, "extras": ["blog"], "_country": "US"}
