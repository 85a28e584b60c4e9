"""Field service for construction, ordering and structural invariants."""

import uuid
from typing import Any, Dict, List, Optional, Sequence, Type

from pydantic import ValidationError

from formbuilder.exceptions import InvalidFieldConfig
from formbuilder.schemas.field import (
    FieldBase,
    FieldType,
    DerivedField,
    FormField,
    FIELD_MODELS,
)


# Palette shown by the builder: display label, description and the label
# given to a freshly added field.
FIELD_PALETTE: Dict[FieldType, Dict[str, str]] = {
    FieldType.TEXT: {
        "label": "Text Input",
        "description": "Single line text input",
        "default_label": "Text Input Field",
    },
    FieldType.EMAIL: {
        "label": "Email",
        "description": "Email address input",
        "default_label": "Email Field",
    },
    FieldType.NUMBER: {
        "label": "Number",
        "description": "Numeric input field",
        "default_label": "Number Field",
    },
    FieldType.TEXTAREA: {
        "label": "Textarea",
        "description": "Multi-line text input",
        "default_label": "Textarea Field",
    },
    FieldType.SELECT: {
        "label": "Select",
        "description": "Dropdown selection",
        "default_label": "Select Field",
    },
    FieldType.CHECKBOX: {
        "label": "Single Checkbox",
        "description": "Boolean checkbox",
        "default_label": "Single Checkbox Field",
    },
    FieldType.RADIO: {
        "label": "Radio Group",
        "description": "Radio button group",
        "default_label": "Radio Group Field",
    },
    FieldType.DATE: {
        "label": "Date",
        "description": "Date picker",
        "default_label": "Date Field",
    },
    FieldType.DERIVED: {
        "label": "Derived Field",
        "description": "Computed field based on other fields",
        "default_label": "Derived Field",
    },
    FieldType.CHECKBOX_GROUP: {
        "label": "Checkbox Group",
        "description": "Multiple selectable options",
        "default_label": "Checkbox Group Field",
    },
}

# Keys an update may never change
_FROZEN_KEYS = ("id", "order")


def generate_id(prefix: str) -> str:
    """Generate an opaque unique identifier such as ``field_3f2a9c01b7d4``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def _to_aliases(model: Type[FieldBase], data: Dict[str, Any]) -> Dict[str, Any]:
    """Rewrite snake_case attribute names to their serialized aliases."""
    aliases = {name: info.alias or name for name, info in model.model_fields.items()}
    return {aliases.get(key, key): value for key, value in data.items()}


def _build(model: Type[FieldBase], data: Dict[str, Any]) -> FormField:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise InvalidFieldConfig(str(exc)) from exc


class FieldService:
    """Service for field construction and invariant enforcement."""

    @staticmethod
    def default_config(field_type: FieldType) -> Dict[str, Any]:
        """Type-specific defaults for a new field, in serialized form."""
        config: Dict[str, Any] = {
            "label": FIELD_PALETTE[field_type]["default_label"],
            "required": False,
        }
        if "placeholder" in FIELD_MODELS[field_type].model_fields:
            config["placeholder"] = ""

        if field_type in (FieldType.SELECT, FieldType.RADIO):
            config["options"] = ["Option 1", "Option 2"]
        elif field_type == FieldType.DERIVED:
            config["parentFields"] = []
            config["derivationType"] = "custom"
            config["derivationFormula"] = ""
        elif field_type == FieldType.CHECKBOX_GROUP:
            config["groupOptions"] = [
                {"id": "opt1", "label": "Option 1", "value": "option1"},
                {"id": "opt2", "label": "Option 2", "value": "option2"},
            ]
        return config

    @staticmethod
    def create_field(
        field_type: Any,
        fields: Sequence[FormField],
        **overrides: Any
    ) -> FormField:
        """
        Create a field of the given type, appended after ``fields``.

        A fresh id and the next ``order`` are always assigned; overrides
        (snake_case or camelCase keys) replace the type defaults.
        """
        try:
            field_type = FieldType(field_type)
        except ValueError as exc:
            raise InvalidFieldConfig(f"Unknown field type: {field_type!r}") from exc

        model = FIELD_MODELS[field_type]
        data = FieldService.default_config(field_type)
        data.update(_to_aliases(model, overrides))
        data.update({
            "id": generate_id("field"),
            "type": field_type.value,
            "order": len(fields),
        })

        field = _build(model, data)
        FieldService.check_parents(field, fields)
        return field

    @staticmethod
    def check_parents(field: FormField, fields: Sequence[FormField]) -> None:
        """
        Check a derived field's parent references against the field set.

        Raises InvalidFieldConfig when a parent is the field itself, is not
        part of ``fields``, or is itself derived.
        """
        if not isinstance(field, DerivedField):
            return

        by_id = {f.id: f for f in fields}
        for parent_id in field.parent_fields:
            if parent_id == field.id:
                raise InvalidFieldConfig(f"Derived field {field.id} cannot reference itself")
            parent = by_id.get(parent_id)
            if parent is None:
                raise InvalidFieldConfig(
                    f"Derived field {field.id} references unknown field {parent_id}"
                )
            if isinstance(parent, DerivedField):
                raise InvalidFieldConfig(
                    f"Derived field {field.id} cannot use derived field {parent_id} as a parent"
                )

    @staticmethod
    def apply_updates(field: FormField, updates: Dict[str, Any]) -> FormField:
        """Merge partial updates into a field, keeping its id, order and type."""
        model = type(field)
        updates = {k: v for k, v in updates.items() if k not in _FROZEN_KEYS}

        new_type = updates.pop("type", field.type)
        if new_type != field.type:
            raise InvalidFieldConfig(
                f"Field {field.id} is a {field.type} field; its type cannot change"
            )

        data = field.model_dump(by_alias=True, exclude_none=True)
        data.update(_to_aliases(model, updates))
        return _build(model, data)

    @staticmethod
    def duplicate(
        field: FormField,
        fields: Sequence[FormField],
        suffix: str = " (Copy)"
    ) -> FormField:
        """Clone a field under a new id, with a suffixed label, appended at the end."""
        return field.model_copy(
            deep=True,
            update={
                "id": generate_id("field"),
                "label": f"{field.label}{suffix}",
                "order": len(fields),
            },
        )

    @staticmethod
    def normalize_ordering(fields: Sequence[FormField]) -> List[FormField]:
        """Reassign ``order`` to match each field's position in the sequence."""
        return [
            field if field.order == index else field.model_copy(update={"order": index})
            for index, field in enumerate(fields)
        ]

    @staticmethod
    def remove_parent_references(
        fields: Sequence[FormField],
        removed_id: str
    ) -> List[FormField]:
        """Drop a removed field's id from every derived field's parents."""
        result = []
        for field in fields:
            if isinstance(field, DerivedField) and removed_id in field.parent_fields:
                field = field.model_copy(update={
                    "parent_fields": [p for p in field.parent_fields if p != removed_id],
                })
            result.append(field)
        return result

    @staticmethod
    def find(fields: Sequence[FormField], field_id: Optional[str]) -> Optional[FormField]:
        """Get a field by ID."""
        for field in fields:
            if field.id == field_id:
                return field
        return None
