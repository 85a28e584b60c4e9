"""Unit tests for derived field evaluation."""

import logging
from datetime import date, datetime

import pytest

from formbuilder.schemas.field import DerivedField, NumberField, TextField
from formbuilder.services.derivation import DerivationService


def derived(derivation_type, parents, formula=None, field_id="d"):
    return DerivedField(
        id=field_id,
        parent_fields=parents,
        derivation_type=derivation_type,
        derivation_formula=formula,
    )


class TestAgeFromDob:
    """Test whole-year age computation."""

    def test_day_before_birthday(self):
        field = derived("age_from_dob", ["dob"])

        assert DerivationService.evaluate(field, {"dob": "2000-06-15"}, date(2024, 6, 14)) == "23"

    def test_day_after_birthday(self):
        field = derived("age_from_dob", ["dob"])

        assert DerivationService.evaluate(field, {"dob": "2000-06-15"}, date(2024, 6, 16)) == "24"

    def test_on_birthday(self):
        field = derived("age_from_dob", ["dob"])

        assert DerivationService.evaluate(field, {"dob": "2000-06-15"}, date(2024, 6, 15)) == "24"

    def test_uses_first_parent_only(self):
        field = derived("age_from_dob", ["dob", "other"])
        values = {"dob": "1990-01-01", "other": "2010-01-01"}

        assert DerivationService.evaluate(field, values, date(2024, 1, 1)) == "34"

    def test_accepts_datetimes_and_date_objects(self):
        field = derived("age_from_dob", ["dob"])
        today = date(2024, 6, 16)

        assert DerivationService.evaluate(field, {"dob": "2000-06-15T08:30:00Z"}, today) == "24"
        assert DerivationService.evaluate(field, {"dob": date(2000, 6, 15)}, today) == "24"
        assert DerivationService.evaluate(field, {"dob": datetime(2000, 6, 15, 8)}, today) == "24"

    @pytest.mark.parametrize("value", [None, "", "not a date", "2000-13-01", 42])
    def test_missing_or_unparseable(self, value):
        field = derived("age_from_dob", ["dob"])

        assert DerivationService.evaluate(field, {"dob": value}, date(2024, 6, 16)) == ""

    def test_future_birth_date(self):
        field = derived("age_from_dob", ["dob"])

        assert DerivationService.evaluate(field, {"dob": "2030-01-01"}, date(2024, 6, 16)) == ""

    def test_defaults_to_current_date(self):
        field = derived("age_from_dob", ["dob"])
        today = date.today()
        dob = date(today.year - 30, 1, 1)

        assert DerivationService.evaluate(field, {"dob": dob.isoformat()}) == "30"


class TestSumAndDifference:
    """Test numeric derivations."""

    def test_sum_ignores_non_numeric(self):
        field = derived("sum", ["a", "b", "c"])

        assert DerivationService.evaluate(field, {"a": 3, "b": "abc", "c": 5}) == "8"

    def test_sum_treats_missing_as_zero(self):
        field = derived("sum", ["a", "b"])

        assert DerivationService.evaluate(field, {"a": "2.5"}) == "2.5"

    def test_difference(self):
        field = derived("difference", ["a", "b"])

        assert DerivationService.evaluate(field, {"a": 10, "b": 4}) == "6"

    def test_difference_with_strings(self):
        field = derived("difference", ["a", "b"])

        assert DerivationService.evaluate(field, {"a": "4", "b": "10"}) == "-6"

    def test_difference_needs_two_parents(self):
        field = derived("difference", ["a"])

        assert DerivationService.evaluate(field, {"a": 10}) == ""


class TestCustomFormula:
    """Test placeholder substitution and restricted evaluation."""

    def test_substitutes_parents(self):
        field = derived("custom", ["a", "b"], "{a} + {b}")

        assert DerivationService.evaluate(field, {"a": "2", "b": "3"}) == "5"

    def test_repeated_placeholders(self):
        field = derived("custom", ["a"], "{a} * {a} / 2")

        assert DerivationService.evaluate(field, {"a": 3}) == "4.5"

    def test_rejects_code(self, caplog):
        field = derived("custom", ["a"], "{a} + alert(1)")

        with caplog.at_level(logging.WARNING, logger="formbuilder.services.derivation"):
            assert DerivationService.evaluate(field, {"a": "2"}) == ""
        assert "Could not compute derived field d" in caplog.text

    def test_rejects_injected_values(self):
        field = derived("custom", ["a"], "{a} + 1")

        assert DerivationService.evaluate(field, {"a": "__import__('os')"}) == ""

    def test_missing_parent_value_leaves_invalid_formula(self):
        field = derived("custom", ["a", "b"], "{a} + {b}")

        assert DerivationService.evaluate(field, {"a": "2"}) == ""

    def test_division_by_zero(self):
        field = derived("custom", ["a", "b"], "{a} / {b}")

        assert DerivationService.evaluate(field, {"a": 1, "b": 0}) == ""

    def test_empty_formula(self):
        field = derived("custom", ["a"], "")

        assert DerivationService.evaluate(field, {"a": 1}) == ""

    def test_negative_parent_value(self):
        field = derived("custom", ["a", "b"], "{a} - {b}")

        assert DerivationService.evaluate(field, {"a": -2, "b": 3}) == "-5"


class TestEvaluateAll:
    """Test whole-form recomputation."""

    def test_no_parents_or_non_derived(self):
        assert DerivationService.evaluate(derived("sum", []), {}) == ""
        assert DerivationService.evaluate(TextField(id="t"), {"t": "1"}) == ""

    def test_evaluate_all_derived(self):
        fields = [
            NumberField(id="a", order=0),
            NumberField(id="b", order=1),
            derived("sum", ["a", "b"], field_id="total"),
            derived("custom", ["a", "b"], "({a} + {b}) * 2", field_id="double"),
        ]

        result = DerivationService.evaluate_all_derived(fields, {"a": "1", "b": "2"})

        assert result == {"total": "3", "double": "6"}
