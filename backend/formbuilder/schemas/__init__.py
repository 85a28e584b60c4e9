"""Pydantic schemas for the form definition model and API payloads."""

from formbuilder.schemas.field import (
    FieldType,
    DerivationType,
    FieldValidation,
    GroupOption,
    TextField,
    EmailField,
    NumberField,
    TextareaField,
    SelectField,
    CheckboxField,
    RadioField,
    DateField,
    DerivedField,
    CheckboxGroupField,
    FormField,
    FIELD_MODELS,
)
from formbuilder.schemas.form import (
    SavedForm,
    FormState,
    FormMetaUpdate,
    FieldCreate,
    FieldOrderUpdate,
    SelectionUpdate,
    FieldTypeInfo,
    SavedFormSummary,
)
from formbuilder.schemas.preview import (
    ValueShape,
    ValidationResult,
    PreviewRequest,
    DerivedValuesResponse,
    PreviewResponse,
)

__all__ = [
    # Field
    "FieldType",
    "DerivationType",
    "FieldValidation",
    "GroupOption",
    "TextField",
    "EmailField",
    "NumberField",
    "TextareaField",
    "SelectField",
    "CheckboxField",
    "RadioField",
    "DateField",
    "DerivedField",
    "CheckboxGroupField",
    "FormField",
    "FIELD_MODELS",
    # Form
    "SavedForm",
    "FormState",
    "FormMetaUpdate",
    "FieldCreate",
    "FieldOrderUpdate",
    "SelectionUpdate",
    "FieldTypeInfo",
    "SavedFormSummary",
    # Preview
    "ValueShape",
    "ValidationResult",
    "PreviewRequest",
    "DerivedValuesResponse",
    "PreviewResponse",
]
