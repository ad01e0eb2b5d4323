"""
Tests for model-type configuration loading and validation.
"""

import json

import pytest

from model_decoder import (
    ConfigurationError,
    ModelTypeConfig,
    UnknownModelTypeError,
    available_model_types,
    decode_model,
    load_model_type,
    validate_config,
)


class TestBundledConfigurations:
    """The shipped model types load and validate cleanly."""

    def test_available(self):
        assert available_model_types() == ["rn", "rq"]

    @pytest.mark.parametrize("key", ["rn", "rq"])
    def test_validates_cleanly(self, key):
        assert validate_config(load_model_type(key)) == []

    @pytest.mark.parametrize("key", ["rn", "rq"])
    def test_ranges_do_not_overlap(self, key):
        """Every reference-string index belongs to at most one category."""
        config = load_model_type(key)
        owners = {}
        for position in config.positions:
            for index in position.indices():
                assert index not in owners, f"{position.category} overlaps {owners[index]}"
                owners[index] = position.category
        assert max(owners) < len(config.reference_string)

    def test_cached(self):
        assert load_model_type("rn") is load_model_type("rn")
        assert load_model_type("RN") is load_model_type("rn")

    def test_force_reload(self):
        cached = load_model_type("rq")
        reloaded = load_model_type("rq", force_reload=True)

        assert reloaded is not cached
        assert reloaded.to_dict() == cached.to_dict()

    def test_unknown_model_type(self):
        with pytest.raises(UnknownModelTypeError) as exc_info:
            load_model_type("zz")
        assert isinstance(exc_info.value, ConfigurationError)
        assert exc_info.value.key == "zz"

    def test_json_round_trip(self):
        config = load_model_type("rn")
        assert ModelTypeConfig.from_json(config.to_json()).to_dict() == config.to_dict()

    def test_codes_read_only(self):
        definition = load_model_type("rn").catalog.get("B1")
        with pytest.raises(TypeError):
            definition.codes["X"] = "Something else"


class TestValidation:
    """The load-time validation pass reports configuration mistakes."""

    def test_minimal_is_valid(self, minimal_config):
        assert validate_config(minimal_config) == []

    def test_position_without_catalog_entry(self, minimal_config_dict):
        minimal_config_dict["positions"]["ZZ"] = [7, 8]
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("'ZZ' has no catalog entry" in p for p in problems)

    def test_range_out_of_bounds(self, minimal_config_dict):
        minimal_config_dict["positions"]["C1"] = [7, 9]
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("outside the reference string" in p for p in problems)

    def test_undocumented_overlap(self, minimal_config_dict):
        minimal_config_dict["categories"].append(
            {"id": "TON", "name": "Tonnage", "position": "TON", "codes": {"10": "10 tons"}}
        )
        minimal_config_dict["positions"]["TON"] = [4, 6]

        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))

        assert any("undocumented overlap" in p for p in problems)

    def test_documented_overlap(self, minimal_config_dict):
        minimal_config_dict["categories"].append(
            {"id": "TON", "name": "Tonnage", "position": "TON", "codes": {"10": "10 tons"}}
        )
        minimal_config_dict["positions"]["TON"] = {"start": 4, "end": 6, "shared_with": ["SIZE"]}

        assert validate_config(ModelTypeConfig.from_dict(minimal_config_dict)) == []

    def test_grammar_unknown_category(self, minimal_config_dict):
        minimal_config_dict["grammar"]["feature_part"].append("ZZ")
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("grammar references unknown category 'ZZ'" in p for p in problems)

    def test_grammar_order_disagrees_with_positions(self, minimal_config_dict):
        minimal_config_dict["positions"]["GEN"] = [3, 6]
        minimal_config_dict["positions"]["SIZE"] = [0, 2]
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("grammar order" in p for p in problems)

    def test_reference_code_not_in_catalog(self, minimal_config_dict):
        minimal_config_dict["reference_string"] = "TS-030:A"
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("'030' is not valid for 'SIZE'" in p for p in problems)

    def test_rule_unknown_category(self, minimal_config_dict):
        minimal_config_dict["rules"][0]["affects"] = "ZZ"
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("rule 0 references unknown category 'ZZ'" in p for p in problems)

    def test_rule_unknown_code(self, minimal_config_dict):
        minimal_config_dict["rules"][0]["valid_codes"] = ["Q"]
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert any("rule 0 uses codes ['Q']" in p for p in problems)

    def test_rule_category_not_in_grammar(self, minimal_config_dict):
        """A catalog category the grammar never fills cannot appear in a rule."""
        minimal_config_dict["categories"].append(
            {"id": "X9", "name": "Extra Option", "position": "X9", "codes": {"1": "Extra option"}}
        )
        minimal_config_dict["rules"].append({
            "condition": {"category": "SIZE", "codes": ["010"]},
            "affects": "X9",
            "valid_codes": ["1"],
            "message": "X9 option available",
            "enables": True,
        })
        config = ModelTypeConfig.from_dict(minimal_config_dict)

        assert validate_config(config) == [
            "rule 1 references category 'X9' that is not in the grammar"
        ]
        assert decode_model("TS-010:A", config).warnings == []

    def test_unknown_enhancer(self, minimal_config_dict):
        minimal_config_dict["enhancers"] = ["nope"]
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert problems == ["unknown enhancer 'nope'"]

    def test_enhancer_missing_table(self, minimal_config_dict):
        minimal_config_dict["enhancers"] = ["airflow"]
        problems = validate_config(ModelTypeConfig.from_dict(minimal_config_dict))
        assert problems == ["enhancer 'airflow' needs missing table 'nominal_airflow'"]


class TestStructuralErrors:
    """Structural mistakes fail while building the configuration."""

    def test_missing_key(self, minimal_config_dict):
        del minimal_config_dict["grammar"]
        with pytest.raises(ConfigurationError) as exc_info:
            ModelTypeConfig.from_dict(minimal_config_dict)
        assert exc_info.value.problems == ["missing required key 'grammar'"]

    def test_duplicate_category(self, minimal_config_dict):
        minimal_config_dict["categories"].append(dict(minimal_config_dict["categories"][0]))
        with pytest.raises(ConfigurationError, match="duplicate category id 'GEN'"):
            ModelTypeConfig.from_dict(minimal_config_dict)

    def test_rule_both_info_and_enables(self, minimal_config_dict):
        minimal_config_dict["rules"][0].update(info=True, enables=True)
        with pytest.raises(ConfigurationError):
            ModelTypeConfig.from_dict(minimal_config_dict)


class TestLoadFromPath:
    """Loading configurations from outside the package."""

    def test_valid_file(self, tmp_path, minimal_config_dict):
        path = tmp_path / "tst.json"
        path.write_text(json.dumps(minimal_config_dict), encoding="utf-8")

        config = load_model_type("tst", json_path=path)

        assert config.key == "tst"
        assert len(config.catalog) == 3
        with pytest.raises(UnknownModelTypeError):
            load_model_type("tst")

    def test_invalid_file_raises(self, tmp_path, minimal_config_dict):
        minimal_config_dict["positions"]["C1"] = [7, 12]
        path = tmp_path / "tst.json"
        path.write_text(json.dumps(minimal_config_dict), encoding="utf-8")

        with pytest.raises(ConfigurationError) as exc_info:
            load_model_type("tst", json_path=path)
        assert exc_info.value.key == "tst"
        assert exc_info.value.problems
