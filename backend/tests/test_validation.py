"""Unit tests for the validation compiler."""

import pytest

from formbuilder.schemas.field import (
    CheckboxField,
    CheckboxGroupField,
    DateField,
    DerivedField,
    EmailField,
    FieldType,
    NumberField,
    RadioField,
    SelectField,
    TextareaField,
    TextField,
)
from formbuilder.schemas.preview import ValueShape
from formbuilder.services.validation import _COMPILERS, compile_field


def message(field, value):
    return compile_field(field)(value).message


def is_valid(field, value):
    return compile_field(field)(value).valid


GROUP_OPTIONS = [
    {"id": "opt1", "label": "Option 1", "value": "option1"},
    {"id": "opt2", "label": "Option 2", "value": "option2"},
]


class TestContracts:
    """Test contract shape and dispatch."""

    def test_every_field_type_has_a_compiler(self):
        assert set(_COMPILERS) == set(FieldType)

    def test_accepted_shapes(self):
        assert compile_field(TextField(id="t")).accepts == {ValueShape.STRING}
        assert compile_field(NumberField(id="n")).accepts == {ValueShape.STRING, ValueShape.NUMBER}
        assert compile_field(CheckboxField(id="c")).accepts == {ValueShape.BOOLEAN}
        group = CheckboxGroupField(id="g", group_options=GROUP_OPTIONS)
        assert compile_field(group).accepts == {ValueShape.STRING_ARRAY}

    def test_wrong_shape_is_rejected(self):
        assert message(TextField(id="t"), 12) == "Invalid value"
        assert message(CheckboxField(id="c"), "yes") == "Invalid value"
        assert message(NumberField(id="n"), True) == "Invalid value"

    def test_valid_result_has_no_message(self):
        result = compile_field(TextField(id="t"))("hello")

        assert result.valid is True
        assert result.message is None


class TestTextFields:
    """Test required checks and constraint layering for text and textarea."""

    @pytest.mark.parametrize("model", [TextField, TextareaField])
    def test_required(self, model):
        field = model(id="t", required=True)

        assert message(field, "") == "This field is required"
        assert message(field, "   ") == "This field is required"
        assert message(field, None) == "This field is required"
        assert is_valid(field, "x")

    def test_optional_always_passes_without_constraints(self):
        assert is_valid(TextField(id="t"), "")
        assert is_valid(TextField(id="t"), None)

    def test_length_constraints(self):
        field = TextareaField(id="t", validation={"minLength": 3, "maxLength": 5})

        assert message(field, "ab") == "Minimum 3 characters required"
        assert message(field, "abcdef") == "Maximum 5 characters allowed"
        assert is_valid(field, "abcd")

    def test_constraints_skip_empty_optional_values(self):
        field = TextField(id="t", validation={"minLength": 3, "pattern": r"^\d+$"})

        assert is_valid(field, "")

    def test_required_check_comes_first(self):
        field = TextField(id="t", required=True, validation={"minLength": 3})

        assert message(field, "") == "This field is required"

    def test_pattern(self):
        field = TextField(id="t", validation={"pattern": r"^[A-Z]{2}\d{4}$"})

        assert message(field, "ab1234") == "Invalid format"
        assert is_valid(field, "AB1234")

    def test_pattern_is_searched(self):
        field = TextField(id="t", validation={"pattern": r"\d"})

        assert is_valid(field, "abc1")

    def test_whitespace_is_checked_against_constraints(self):
        field = TextField(id="t", validation={"pattern": r"^\d+$", "minLength": 3})

        assert message(field, " ") == "Minimum 3 characters required"
        assert message(field, "   ") == "Invalid format"

    def test_whitespace_over_max_length(self):
        field = TextareaField(id="t", validation={"maxLength": 2})

        assert message(field, "    ") == "Maximum 2 characters allowed"


class TestPasswords:
    """Test the password sub-mode of text fields."""

    def test_length_seven_always_fails(self):
        field = TextField(id="p", validation={
            "isPassword": True,
            "minLength": 4,
            "requireNumber": True,
            "requireUppercase": True,
        })

        assert message(field, "Abcdef1") == "Password must be at least 8 characters long"

    def test_missing_digit(self):
        field = TextField(id="p", validation={"isPassword": True, "requireNumber": True})

        assert message(field, "abcdefgh") == "Password must contain at least one number"
        assert is_valid(field, "abcdefg1")

    @pytest.mark.parametrize("flag, value, expected", [
        ("requireUppercase", "abcdefg1", "Password must contain at least one uppercase letter"),
        ("requireLowercase", "ABCDEFG1", "Password must contain at least one lowercase letter"),
        ("requireSpecialChar", "Abcdefg1", "Password must contain at least one special character"),
    ])
    def test_each_rule_has_its_own_message(self, flag, value, expected):
        field = TextField(id="p", validation={"isPassword": True, flag: True})

        assert message(field, value) == expected

    def test_all_rules_together(self):
        field = TextField(id="p", validation={
            "isPassword": True,
            "requireNumber": True,
            "requireUppercase": True,
            "requireLowercase": True,
            "requireSpecialChar": True,
        })

        assert is_valid(field, "Abcdef1!")

    def test_whitespace_password_is_not_skipped(self):
        field = TextField(id="p", validation={"isPassword": True, "requireNumber": True})

        assert message(field, "       ") == "Password must be at least 8 characters long"
        assert message(field, "        ") == "Password must contain at least one number"

    def test_empty_optional_password_passes(self):
        field = TextField(id="p", validation={"isPassword": True})

        assert is_valid(field, "")
        assert is_valid(field, None)

    def test_textarea_has_no_password_mode(self):
        field = TextareaField(id="p", validation={"isPassword": True})

        assert is_valid(field, "short")


class TestEmail:
    """Test email address checks."""

    def test_optional_empty_passes(self):
        assert is_valid(EmailField(id="e"), "")

    def test_malformed_rejected_even_if_optional(self):
        assert message(EmailField(id="e"), "not-an-email") == "Please enter a valid email address"

    def test_required(self):
        field = EmailField(id="e", required=True)

        assert message(field, "") == "This field is required"
        assert is_valid(field, "jane.doe@gmail.com")

    @pytest.mark.parametrize("address", ["a@b.test", "jane@intranet", "ops@staging.test"])
    def test_accepts_test_and_internal_domains(self, address):
        assert is_valid(EmailField(id="e"), address)

    def test_whitespace_is_not_an_address(self):
        assert message(EmailField(id="e"), "   ") == "Please enter a valid email address"


class TestNumber:
    """Test numeric coercion and bounds."""

    def test_coerces_numeric_strings(self):
        field = NumberField(id="n")

        assert is_valid(field, "42")
        assert is_valid(field, 3.5)
        assert message(field, "abc") == "Please enter a valid number"

    def test_required(self):
        assert message(NumberField(id="n", required=True), "") == "This field is required"

    def test_bounds(self):
        field = NumberField(id="n", validation={"min": 18, "max": 65})

        assert message(field, "17") == "Minimum value is 18"
        assert message(field, 66) == "Maximum value is 65"
        assert is_valid(field, "18")
        assert is_valid(field, "65")

    def test_single_bound_leaves_other_side_open(self):
        field = NumberField(id="n", validation={"max": 10})

        assert is_valid(field, -1000)
        assert message(field, 11) == "Maximum value is 10"

    def test_fractional_bound_message(self):
        field = NumberField(id="n", validation={"min": 0.5})

        assert message(field, 0) == "Minimum value is 0.5"


class TestChoices:
    """Test select, radio, checkbox, checkbox group, date and derived fields."""

    @pytest.mark.parametrize("model", [SelectField, RadioField])
    def test_single_choice(self, model):
        field = model(id="s", required=True, options=["Red", "Blue"])

        assert message(field, "") == "Please select an option"
        assert message(field, "Green") == "Please select a valid option"
        assert is_valid(field, "Blue")

    def test_checkbox(self):
        assert message(CheckboxField(id="c", required=True), False) == "This field is required"
        assert message(CheckboxField(id="c", required=True), None) == "This field is required"
        assert is_valid(CheckboxField(id="c", required=True), True)
        assert is_valid(CheckboxField(id="c"), False)

    def test_checkbox_group_required(self):
        field = CheckboxGroupField(id="g", required=True, group_options=GROUP_OPTIONS)

        assert message(field, []) == "Please select at least one option"
        assert is_valid(field, ["option1"])

    def test_checkbox_group_unknown_value(self):
        field = CheckboxGroupField(id="g", group_options=GROUP_OPTIONS)

        assert message(field, ["option3"]) == "Please select a valid option"
        assert is_valid(field, [])

    def test_date(self):
        assert message(DateField(id="d", required=True), "") == "Please select a date"
        assert is_valid(DateField(id="d", required=True), "2024-06-14")
        assert is_valid(DateField(id="d"), "")

    def test_derived(self):
        field = DerivedField(id="x", required=True)

        assert message(field, "") == "This field is required"
        assert is_valid(field, "24")
