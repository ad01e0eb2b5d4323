"""
Tests for derived-data enhancers.
"""

import pytest

from model_decoder import HeatingClass, ParsedAttribute, apply_enhancers, classify_heating
from model_decoder.core.enhancers import AIRFLOW, DEFAULT_ENHANCERS, HEATING_CAPACITY, Enhancer


TABLES = {
    "nominal_airflow": {"025": {"cfm": 10000}},
    "voltage_rating": {"3": {"volts": 460}, "8": {"volts": 208}},
    "electric_heat_kw": {"4": {"kw": 36}},
    "gas_heat_mbh": {"2": {"input": 90, "output": 72}},
}


def attr(category, code, description=None):
    return ParsedAttribute(
        category=category,
        code=code,
        name=category,
        position=category,
        description=description or f"{category} {code}",
    )


def description_of(attributes, category):
    return next(a.description for a in attributes if a.category == category)


class TestClassifyHeating:
    """Heating classification is a set membership test."""

    @pytest.mark.parametrize("code,expected", [
        ("E", HeatingClass.ELECTRIC),
        ("H", HeatingClass.ELECTRIC),
        ("G", HeatingClass.GAS),
        ("P", HeatingClass.GAS),
        ("0", HeatingClass.NONE),
        ("W", HeatingClass.OTHER),
        (None, HeatingClass.OTHER),
    ])
    def test_classification(self, code, expected):
        assert classify_heating(code) == expected


class TestHeatingCapacity:
    """Tests for the heating capacity enhancer."""

    def test_electric_heat_at_rated_voltage(self):
        attributes = [attr("VOLTAGE", "3"), attr("B1", "E"), attr("B3", "4", "Heating capacity 4")]

        result = apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert description_of(result, "B3") == "Heating capacity 4 [36.0 kW @ 460V]"

    def test_electric_heat_derated_at_208v(self):
        attributes = [attr("VOLTAGE", "8"), attr("B1", "E"), attr("B3", "4", "Heating capacity 4")]

        result = apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert description_of(result, "B3") == "Heating capacity 4 [27.0 kW @ 208V]"

    def test_electric_heat_without_voltage(self):
        attributes = [attr("B1", "H"), attr("B3", "4", "Heating capacity 4")]

        result = apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert description_of(result, "B3") == "Heating capacity 4 [36.0 kW rated]"

    def test_gas_heat(self):
        attributes = [attr("B1", "G"), attr("B3", "2", "Heating capacity 2")]

        result = apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert description_of(result, "B3") == "Heating capacity 2 [90 MBH input / 72 MBH output]"

    def test_no_heat_leaves_description(self):
        attributes = [attr("B1", "0"), attr("B3", "4", "Heating capacity 4")]

        result = apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert description_of(result, "B3") == "Heating capacity 4"

    def test_missing_table_entry(self):
        attributes = [attr("B1", "G"), attr("B3", "9", "Heating capacity 9")]

        result = apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert description_of(result, "B3") == "Heating capacity 9"

    def test_capacity_not_entered(self):
        attributes = [attr("VOLTAGE", "3"), attr("B1", "E")]

        assert apply_enhancers(attributes, [HEATING_CAPACITY], TABLES) == attributes


class TestApplyEnhancers:
    """Tests for running enhancer lists."""

    def test_airflow(self):
        attributes = [attr("SIZE", "025", "25 ton nominal cooling capacity")]

        result = apply_enhancers(attributes, [AIRFLOW], TABLES)

        assert description_of(result, "SIZE") == (
            "25 ton nominal cooling capacity [10,000 cfm nominal airflow]"
        )

    def test_idempotent(self):
        """Running on already enhanced output changes nothing."""
        attributes = [
            attr("SIZE", "025", "25 ton nominal cooling capacity"),
            attr("VOLTAGE", "3"),
            attr("B1", "E"),
            attr("B3", "4", "Heating capacity 4"),
        ]

        once = apply_enhancers(attributes, DEFAULT_ENHANCERS, TABLES)
        twice = apply_enhancers(once, DEFAULT_ENHANCERS, TABLES)

        assert twice == once
        assert description_of(twice, "B3").count("kW") == 1

    def test_suffix_text_inside_description(self):
        """Only a suffix at the end of the description counts as already applied."""
        attributes = [attr("SIZE", "025", "Replaces [10,000 cfm nominal airflow] units")]

        result = apply_enhancers(attributes, [AIRFLOW], TABLES)

        assert description_of(result, "SIZE") == (
            "Replaces [10,000 cfm nominal airflow] units [10,000 cfm nominal airflow]"
        )

    def test_input_not_modified(self):
        attributes = [attr("B1", "G"), attr("B3", "2", "Heating capacity 2")]
        before = list(attributes)

        apply_enhancers(attributes, [HEATING_CAPACITY], TABLES)

        assert attributes == before

    def test_declaration_order(self):
        """Later enhancers see descriptions written by earlier ones."""
        first = Enhancer(
            name="first",
            reads=("X",),
            writes="X",
            tables=(),
            derive=lambda attributes, tables: "[a]",
        )
        second = Enhancer(
            name="second",
            reads=("X",),
            writes="X",
            tables=(),
            derive=lambda attributes, tables: "[b]" if "[a]" in attributes["X"].description else None,
        )
        attributes = [attr("X", "1", "base")]

        assert description_of(apply_enhancers(attributes, [first, second], {}), "X") == "base [a] [b]"
        assert description_of(apply_enhancers(attributes, [second, first], {}), "X") == "base [a]"
