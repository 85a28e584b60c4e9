"""Derivation service computing the values of derived fields."""

import logging
from datetime import date, datetime
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from formbuilder.exceptions import FormulaError
from formbuilder.schemas.field import DerivationType, DerivedField, FormField
from formbuilder.services.formula import evaluate_formula, format_number, to_number

logger = logging.getLogger(__name__)


def _parse_date(value: Any) -> Optional[date]:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        return datetime.fromisoformat(value.strip()).date()
    except ValueError:
        return None


def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return format_number(value)
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


def _age_from_dob(field: DerivedField, values: Mapping[str, Any], today: date) -> str:
    birth_date = _parse_date(values.get(field.parent_fields[0]))
    if birth_date is None or birth_date > today:
        return ""
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return str(age)


def _sum(field: DerivedField, values: Mapping[str, Any], today: date) -> str:
    total = sum(to_number(values.get(parent_id)) or 0.0 for parent_id in field.parent_fields)
    return format_number(total)


def _difference(field: DerivedField, values: Mapping[str, Any], today: date) -> str:
    if len(field.parent_fields) < 2:
        return ""
    first = to_number(values.get(field.parent_fields[0])) or 0.0
    second = to_number(values.get(field.parent_fields[1])) or 0.0
    return format_number(first - second)


def _custom(field: DerivedField, values: Mapping[str, Any], today: date) -> str:
    formula = field.derivation_formula or ""
    if not formula.strip():
        return ""
    for parent_id in field.parent_fields:
        formula = formula.replace(f"{{{parent_id}}}", _stringify(values.get(parent_id)))
    return format_number(evaluate_formula(formula))


_DERIVATIONS: Dict[DerivationType, Callable[[DerivedField, Mapping[str, Any], date], str]] = {
    DerivationType.AGE_FROM_DOB: _age_from_dob,
    DerivationType.SUM: _sum,
    DerivationType.DIFFERENCE: _difference,
    DerivationType.CUSTOM: _custom,
}


class DerivationService:
    """Service for derived field evaluation."""

    @staticmethod
    def evaluate(
        field: FormField,
        values: Mapping[str, Any],
        today: Optional[date] = None
    ) -> str:
        """
        Compute the display value of a derived field.

        ``values`` holds the current value of every field keyed by id.
        Never raises: misconfigured fields, unparseable input and rejected
        formulas all produce an empty string.
        """
        if not isinstance(field, DerivedField) or not field.parent_fields:
            return ""

        derive = _DERIVATIONS[field.derivation_type]
        try:
            return derive(field, values, today or date.today())
        except (FormulaError, ArithmeticError, ValueError, TypeError) as exc:
            logger.warning(
                "Could not compute derived field %s (%s): %s",
                field.id, field.derivation_type.value, exc
            )
            return ""

    @staticmethod
    def evaluate_all_derived(
        fields: Sequence[FormField],
        values: Mapping[str, Any],
        today: Optional[date] = None
    ) -> Dict[str, str]:
        """Recompute every derived field of a form; call after each value change."""
        return {
            field.id: DerivationService.evaluate(field, values, today)
            for field in fields
            if isinstance(field, DerivedField)
        }
