"""Form builder router: the live form's metadata, fields and selection."""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, status

from formbuilder.exceptions import InvalidFieldConfig
from formbuilder.schemas.field import FormField
from formbuilder.schemas.form import (
    FormState,
    FormMetaUpdate,
    FieldCreate,
    FieldOrderUpdate,
    SelectionUpdate,
    FieldTypeInfo,
)
from formbuilder.services.field import FIELD_PALETTE
from formbuilder.services.store import FormStore, get_store

router = APIRouter()


def _field_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Field not found"
    )


@router.get("", response_model=FormState)
async def get_builder_state(store: FormStore = Depends(get_store)):
    """Get the live form, the selection and the saved forms."""
    return store.state


@router.get("/field-types", response_model=List[FieldTypeInfo])
async def list_field_types():
    """List the field types offered by the palette."""
    return [
        FieldTypeInfo(type=field_type, **info)
        for field_type, info in FIELD_PALETTE.items()
    ]


@router.put("/meta", response_model=FormState)
async def update_form_meta(
    meta: FormMetaUpdate,
    store: FormStore = Depends(get_store)
):
    """Update the live form's title and/or description."""
    if meta.title is not None:
        store.set_title(meta.title)
    if meta.description is not None:
        store.set_description(meta.description)
    return store.state


@router.post("/fields", response_model=FormField, status_code=status.HTTP_201_CREATED)
async def add_field(
    field_data: FieldCreate,
    store: FormStore = Depends(get_store)
):
    """Add a field of the given type at the end of the form."""
    try:
        return store.add_field(field_data.type, **(field_data.model_extra or {}))
    except InvalidFieldConfig as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )


@router.patch("/fields/{field_id}", response_model=FormField)
async def update_field(
    field_id: str,
    updates: Dict[str, Any] = Body(...),
    store: FormStore = Depends(get_store)
):
    """Merge partial configuration into a field."""
    try:
        field = store.update_field(field_id, updates)
    except InvalidFieldConfig as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    if field is None:
        raise _field_not_found()
    return field


@router.delete("/fields/{field_id}")
async def delete_field(
    field_id: str,
    store: FormStore = Depends(get_store)
):
    """Delete a field from the live form."""
    if not store.delete_field(field_id):
        raise _field_not_found()
    return {"message": "Field deleted successfully"}


@router.post("/fields/{field_id}/duplicate", response_model=FormField, status_code=status.HTTP_201_CREATED)
async def duplicate_field(
    field_id: str,
    store: FormStore = Depends(get_store)
):
    """Append a copy of a field."""
    field = store.duplicate_field(field_id)
    if field is None:
        raise _field_not_found()
    return field


@router.put("/order", response_model=List[FormField])
async def reorder_fields(
    order: FieldOrderUpdate,
    store: FormStore = Depends(get_store)
):
    """Reorder the fields; the ids must be a permutation of the current fields."""
    if not store.reorder_fields(order.field_ids):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Field ids must be a permutation of the form's fields"
        )
    return store.fields


@router.put("/selection", response_model=FormState)
async def set_selection(
    selection: SelectionUpdate,
    store: FormStore = Depends(get_store)
):
    """Select a field, or clear the selection with a null id."""
    store.set_selected_field(selection.field_id)
    return store.state
