"""Validation compiler turning field configuration into validation contracts."""

import re
from typing import Any, Callable, Dict, FrozenSet, List, Tuple

from email_validator import validate_email, EmailNotValidError

from formbuilder.schemas.field import FieldType, FieldValidation, FormField
from formbuilder.schemas.preview import ValueShape, ValidationResult
from formbuilder.services.formula import format_number, to_number


REQUIRED_MESSAGE = "This field is required"
INVALID_VALUE_MESSAGE = "Invalid value"
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"
INVALID_NUMBER_MESSAGE = "Please enter a valid number"
SELECT_REQUIRED_MESSAGE = "Please select an option"
INVALID_OPTION_MESSAGE = "Please select a valid option"
GROUP_REQUIRED_MESSAGE = "Please select at least one option"
DATE_REQUIRED_MESSAGE = "Please select a date"
PATTERN_MESSAGE = "Invalid format"

PASSWORD_MIN_LENGTH = 8
PASSWORD_SPECIAL_CHARS = '!@#$%^&*(),.?":{}|<>'

Rule = Tuple[Callable[[Any], bool], str]


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _is_blank(value: Any) -> bool:
    return value is None or value == "" or value == []


def _when_present(check: Callable[[Any], bool]) -> Callable[[Any], bool]:
    """
    Constraints only apply to values the user actually entered.

    Whitespace counts as entered here; only ``required`` treats it as empty.
    """
    return lambda value: _is_blank(value) or check(value)


def _matches_shape(value: Any, accepts: FrozenSet[ValueShape]) -> bool:
    if isinstance(value, bool):
        return ValueShape.BOOLEAN in accepts
    if isinstance(value, (int, float)):
        return ValueShape.NUMBER in accepts
    if isinstance(value, str):
        return ValueShape.STRING in accepts
    if isinstance(value, (list, tuple)):
        return ValueShape.STRING_ARRAY in accepts and all(isinstance(v, str) for v in value)
    return False


def _is_email(value: str) -> bool:
    try:
        validate_email(
            value.strip(),
            check_deliverability=False,
            globally_deliverable=False,
            test_environment=True,
        )
    except EmailNotValidError:
        return False
    return True


class ValidationContract:
    """
    Compiled validation rules for one field.

    Calling the contract with a value returns a ValidationResult; the first
    failing rule supplies the message. ``None`` stands for the empty value
    of the field's shape.
    """

    def __init__(
        self,
        field_id: str,
        accepts: FrozenSet[ValueShape],
        rules: List[Rule],
        empty_value: Any = ""
    ):
        self.field_id = field_id
        self.accepts = accepts
        self.rules = rules
        self.empty_value = empty_value

    def __call__(self, value: Any) -> ValidationResult:
        if value is None:
            value = self.empty_value
        if not _matches_shape(value, self.accepts):
            return ValidationResult(valid=False, message=INVALID_VALUE_MESSAGE)
        for check, message in self.rules:
            if not check(value):
                return ValidationResult(valid=False, message=message)
        return ValidationResult(valid=True)

    def __repr__(self) -> str:
        return f"<ValidationContract(field_id='{self.field_id}', rules={len(self.rules)})>"


def _required_rule(field: FormField, message: str = REQUIRED_MESSAGE) -> List[Rule]:
    if field.required:
        return [(lambda value: not _is_empty(value), message)]
    return []


def _length_rules(validation: FieldValidation) -> List[Rule]:
    rules: List[Rule] = []
    if validation.min_length:
        minimum = validation.min_length
        rules.append((
            _when_present(lambda value: len(value) >= minimum),
            f"Minimum {minimum} characters required",
        ))
    if validation.max_length:
        maximum = validation.max_length
        rules.append((
            _when_present(lambda value: len(value) <= maximum),
            f"Maximum {maximum} characters allowed",
        ))
    if validation.pattern:
        pattern = re.compile(validation.pattern)
        rules.append((
            _when_present(lambda value: pattern.search(value) is not None),
            PATTERN_MESSAGE,
        ))
    return rules


def _password_rules(validation: FieldValidation) -> List[Rule]:
    rules: List[Rule] = [(
        _when_present(lambda value: len(value) >= PASSWORD_MIN_LENGTH),
        f"Password must be at least {PASSWORD_MIN_LENGTH} characters long",
    )]
    if validation.require_number:
        rules.append((
            _when_present(lambda value: re.search(r"[0-9]", value) is not None),
            "Password must contain at least one number",
        ))
    if validation.require_uppercase:
        rules.append((
            _when_present(lambda value: re.search(r"[A-Z]", value) is not None),
            "Password must contain at least one uppercase letter",
        ))
    if validation.require_lowercase:
        rules.append((
            _when_present(lambda value: re.search(r"[a-z]", value) is not None),
            "Password must contain at least one lowercase letter",
        ))
    if validation.require_special_char:
        rules.append((
            _when_present(lambda value: any(c in PASSWORD_SPECIAL_CHARS for c in value)),
            "Password must contain at least one special character",
        ))
    return rules


def _compile_text(field: FormField) -> ValidationContract:
    rules = _required_rule(field)
    validation = field.validation
    if validation is not None:
        rules += _length_rules(validation)
        if field.type == FieldType.TEXT and validation.is_password:
            rules += _password_rules(validation)
    return ValidationContract(field.id, frozenset({ValueShape.STRING}), rules)


def _compile_email(field: FormField) -> ValidationContract:
    rules = _required_rule(field)
    rules.append((_when_present(_is_email), INVALID_EMAIL_MESSAGE))
    return ValidationContract(field.id, frozenset({ValueShape.STRING}), rules)


def _compile_number(field: FormField) -> ValidationContract:
    rules = _required_rule(field)
    rules.append((_when_present(lambda value: to_number(value) is not None), INVALID_NUMBER_MESSAGE))

    validation = field.validation
    if validation is not None and validation.min is not None:
        minimum = validation.min
        rules.append((
            _when_present(lambda value: to_number(value) >= minimum),
            f"Minimum value is {format_number(minimum)}",
        ))
    if validation is not None and validation.max is not None:
        maximum = validation.max
        rules.append((
            _when_present(lambda value: to_number(value) <= maximum),
            f"Maximum value is {format_number(maximum)}",
        ))
    return ValidationContract(field.id, frozenset({ValueShape.STRING, ValueShape.NUMBER}), rules)


def _compile_choice(field: FormField) -> ValidationContract:
    options = list(field.options)
    rules = _required_rule(field, SELECT_REQUIRED_MESSAGE)
    rules.append((_when_present(lambda value: value in options), INVALID_OPTION_MESSAGE))
    return ValidationContract(field.id, frozenset({ValueShape.STRING}), rules)


def _compile_checkbox(field: FormField) -> ValidationContract:
    rules: List[Rule] = []
    if field.required:
        rules.append((lambda value: value is True, REQUIRED_MESSAGE))
    return ValidationContract(field.id, frozenset({ValueShape.BOOLEAN}), rules, empty_value=False)


def _compile_checkbox_group(field: FormField) -> ValidationContract:
    allowed = {option.value for option in field.group_options}
    rules = _required_rule(field, GROUP_REQUIRED_MESSAGE)
    rules.append((lambda value: all(v in allowed for v in value), INVALID_OPTION_MESSAGE))
    return ValidationContract(
        field.id, frozenset({ValueShape.STRING_ARRAY}), rules, empty_value=[]
    )


def _compile_date(field: FormField) -> ValidationContract:
    rules = _required_rule(field, DATE_REQUIRED_MESSAGE)
    return ValidationContract(field.id, frozenset({ValueShape.STRING}), rules)


def _compile_derived(field: FormField) -> ValidationContract:
    rules = _required_rule(field)
    return ValidationContract(field.id, frozenset({ValueShape.STRING}), rules)


_COMPILERS: Dict[FieldType, Callable[[FormField], ValidationContract]] = {
    FieldType.TEXT: _compile_text,
    FieldType.TEXTAREA: _compile_text,
    FieldType.EMAIL: _compile_email,
    FieldType.NUMBER: _compile_number,
    FieldType.SELECT: _compile_choice,
    FieldType.RADIO: _compile_choice,
    FieldType.CHECKBOX: _compile_checkbox,
    FieldType.CHECKBOX_GROUP: _compile_checkbox_group,
    FieldType.DATE: _compile_date,
    FieldType.DERIVED: _compile_derived,
}


def compile_field(field: FormField) -> ValidationContract:
    """Compile a field's type and constraints into its validation contract."""
    return _COMPILERS[FieldType(field.type)](field)
