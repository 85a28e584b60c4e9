"""Preview service validating a filled-in form and building its submission."""

from datetime import date
from typing import Any, Dict, Mapping, Optional, Sequence

from formbuilder.schemas.field import DerivedField, FormField
from formbuilder.schemas.preview import PreviewResponse, ValidationResult
from formbuilder.services.derivation import DerivationService
from formbuilder.services.validation import compile_field


class PreviewService:
    """Service for previewing a form against the values a user entered."""

    @staticmethod
    def validate_values(
        fields: Sequence[FormField],
        values: Mapping[str, Any],
        today: Optional[date] = None,
        derived: Optional[Dict[str, str]] = None
    ) -> Dict[str, ValidationResult]:
        """Validate every field; derived fields are checked on their computed value."""
        if derived is None:
            derived = DerivationService.evaluate_all_derived(fields, values, today)
        return {
            field.id: compile_field(field)(
                derived.get(field.id, "") if isinstance(field, DerivedField) else values.get(field.id)
            )
            for field in fields
        }

    @staticmethod
    def build_submission(
        fields: Sequence[FormField],
        values: Mapping[str, Any],
        today: Optional[date] = None,
        derived: Optional[Dict[str, str]] = None
    ) -> Dict[str, Any]:
        """
        Build the submitted data keyed by field label.

        Derived fields carry their computed value. When two fields share a
        label, the later one wins.
        """
        if derived is None:
            derived = DerivationService.evaluate_all_derived(fields, values, today)
        submission: Dict[str, Any] = {}
        for field in sorted(fields, key=lambda f: f.order):
            label = field.label or field.id
            if isinstance(field, DerivedField):
                submission[label] = derived.get(field.id, "")
            else:
                submission[label] = values.get(field.id)
        return submission

    @staticmethod
    def preview(
        fields: Sequence[FormField],
        values: Mapping[str, Any],
        today: Optional[date] = None
    ) -> PreviewResponse:
        """Compute derived values, validation results and the submission in one pass."""
        derived = DerivationService.evaluate_all_derived(fields, values, today)
        results = PreviewService.validate_values(fields, values, today, derived)
        return PreviewResponse(
            valid=all(result.valid for result in results.values()),
            results=results,
            derived=derived,
            submission=PreviewService.build_submission(fields, values, today, derived),
        )
