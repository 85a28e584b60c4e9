"""Field definition Pydantic schemas.

A form field is one of ten kinds. Each kind is its own model and
``FormField`` is the discriminated union over them, keyed by ``type``.
Serialized records use camelCase keys (``parentFields``, ``minLength``)
and omit unset optional keys.
"""

import re
from enum import Enum
from typing import Annotated, Optional, List, Dict, Any, Union, Literal, Type

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator, model_validator
from pydantic.alias_generators import to_camel


class FieldType(str, Enum):
    """Supported field kinds."""
    TEXT = "text"
    EMAIL = "email"
    NUMBER = "number"
    TEXTAREA = "textarea"
    SELECT = "select"
    CHECKBOX = "checkbox"
    RADIO = "radio"
    DATE = "date"
    DERIVED = "derived"
    CHECKBOX_GROUP = "checkbox-group"


class DerivationType(str, Enum):
    """How a derived field computes its value from its parents."""
    AGE_FROM_DOB = "age_from_dob"
    SUM = "sum"
    DIFFERENCE = "difference"
    CUSTOM = "custom"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys, accepting either spelling."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> Dict[str, Any]:
        """Dump to the persisted JSON shape (camelCase, no null keys)."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class FieldValidation(CamelModel):
    """Optional constraint bag; only part of it applies to a given field type."""
    min_length: Optional[int] = Field(None, ge=0)
    max_length: Optional[int] = Field(None, ge=0)
    pattern: Optional[str] = Field(None, description="Regular expression searched in text values")
    min: Optional[Union[int, float]] = None
    max: Optional[Union[int, float]] = None

    # Password validation (text fields only)
    is_password: Optional[bool] = None
    require_number: Optional[bool] = None
    require_uppercase: Optional[bool] = None
    require_lowercase: Optional[bool] = None
    require_special_char: Optional[bool] = None

    @field_validator("pattern")
    @classmethod
    def pattern_must_compile(cls, value: Optional[str]) -> Optional[str]:
        if value is not None:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"Invalid regular expression: {exc}") from exc
        return value


class GroupOption(CamelModel):
    """One selectable entry of a checkbox group."""
    id: str
    label: str
    value: str


class FieldBase(CamelModel):
    """Attributes shared by every field kind."""
    id: str = Field(..., min_length=1, description="Opaque unique identifier")
    label: str = ""
    required: bool = False
    order: int = Field(0, ge=0, description="Position within the form")
    validation: Optional[FieldValidation] = None


class InputFieldBase(FieldBase):
    """Field kinds that render a placeholder."""
    placeholder: Optional[str] = None


class ChoiceFieldBase(InputFieldBase):
    """Single-choice kinds backed by a list of option strings."""
    options: List[str] = Field(..., min_length=1)


class TextField(InputFieldBase):
    type: Literal["text"] = "text"


class EmailField(InputFieldBase):
    type: Literal["email"] = "email"


class NumberField(InputFieldBase):
    type: Literal["number"] = "number"


class TextareaField(InputFieldBase):
    type: Literal["textarea"] = "textarea"


class DateField(InputFieldBase):
    type: Literal["date"] = "date"


class SelectField(ChoiceFieldBase):
    type: Literal["select"] = "select"


class RadioField(ChoiceFieldBase):
    type: Literal["radio"] = "radio"


class CheckboxField(FieldBase):
    type: Literal["checkbox"] = "checkbox"


class CheckboxGroupField(FieldBase):
    type: Literal["checkbox-group"] = "checkbox-group"
    group_options: List[GroupOption] = Field(..., min_length=1)


class DerivedField(FieldBase):
    """
    A read-only field computed from other (parent) fields.

    Parent existence and the ban on derived parents depend on the
    rest of the form, so they are checked by the field service.
    """
    type: Literal["derived"] = "derived"
    parent_fields: List[str] = Field(default_factory=list)
    derivation_type: DerivationType = DerivationType.CUSTOM
    derivation_formula: Optional[str] = None

    @model_validator(mode="after")
    def no_self_reference(self) -> "DerivedField":
        if self.id in self.parent_fields:
            raise ValueError("A derived field cannot use itself as a parent")
        return self


FormField = Annotated[
    Union[
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
    ],
    Field(discriminator="type"),
]

FIELD_MODELS: Dict[FieldType, Type[FieldBase]] = {
    FieldType.TEXT: TextField,
    FieldType.EMAIL: EmailField,
    FieldType.NUMBER: NumberField,
    FieldType.TEXTAREA: TextareaField,
    FieldType.SELECT: SelectField,
    FieldType.CHECKBOX: CheckboxField,
    FieldType.RADIO: RadioField,
    FieldType.DATE: DateField,
    FieldType.DERIVED: DerivedField,
    FieldType.CHECKBOX_GROUP: CheckboxGroupField,
}

field_adapter: TypeAdapter = TypeAdapter(FormField)
