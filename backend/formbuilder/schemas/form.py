"""Saved form and form builder state Pydantic schemas."""

from datetime import datetime
from typing import Optional, List

from pydantic import ConfigDict, Field, TypeAdapter

from formbuilder.schemas.field import CamelModel, FieldType, FormField


class SavedForm(CamelModel):
    """A persisted, timestamped snapshot of a form definition."""
    id: str
    title: str = ""
    description: str = ""
    fields: List[FormField] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class FormState(CamelModel):
    """Read model of the live form and the saved form collection."""
    title: str
    description: str
    fields: List[FormField]
    selected_field_id: Optional[str] = None
    current_form_id: Optional[str] = None
    saved_forms: List[SavedForm] = Field(default_factory=list)


class FormMetaUpdate(CamelModel):
    """Schema for updating the live form's title and description."""
    title: Optional[str] = Field(None, max_length=512)
    description: Optional[str] = None


class FieldCreate(CamelModel):
    """
    Schema for adding a field.

    Any additional key is passed through as configuration for the new
    field (``label``, ``required``, ``options``, ``parentFields`` ...).
    """
    model_config = ConfigDict(extra="allow")

    type: FieldType


class FieldOrderUpdate(CamelModel):
    """Schema for reordering the live form's fields."""
    field_ids: List[str]


class SelectionUpdate(CamelModel):
    """Schema for selecting a field (or clearing the selection)."""
    field_id: Optional[str] = None


class FieldTypeInfo(CamelModel):
    """Palette entry describing a field type."""
    type: FieldType
    label: str
    description: str
    default_label: str


class SavedFormSummary(CamelModel):
    """Schema for saved form list responses."""
    id: str
    title: str
    description: str
    field_count: int
    created_at: datetime
    updated_at: datetime


saved_forms_adapter: TypeAdapter = TypeAdapter(List[SavedForm])
