"""Saved form management router."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from formbuilder.exceptions import PersistenceError
from formbuilder.schemas.form import FormState, SavedForm, SavedFormSummary
from formbuilder.services.store import FormStore, get_store

router = APIRouter()


def _storage_unavailable(e: PersistenceError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=f"Form storage unavailable: {e}"
    )


@router.get("", response_model=List[SavedFormSummary])
async def list_forms(store: FormStore = Depends(get_store)):
    """List saved forms, most recently created first."""
    result = []
    for form in store.saved_forms:
        result.append(SavedFormSummary(
            id=form.id,
            title=form.title,
            description=form.description,
            field_count=len(form.fields),
            created_at=form.created_at,
            updated_at=form.updated_at,
        ))
    return result


@router.get("/{form_id}", response_model=SavedForm)
async def get_form(
    form_id: str,
    store: FormStore = Depends(get_store)
):
    """Get a saved form by ID."""
    form = store.get_saved_form(form_id)
    if not form:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return form


@router.post("/save", response_model=SavedForm)
async def save_form(store: FormStore = Depends(get_store)):
    """Save the live form, creating or overwriting its saved copy."""
    try:
        return store.save_form()
    except PersistenceError as e:
        raise _storage_unavailable(e)


@router.post("/new", response_model=FormState)
async def new_form(store: FormStore = Depends(get_store)):
    """Start a new, empty form."""
    store.new_form()
    return store.state


@router.post("/{form_id}/load", response_model=FormState)
async def load_form(
    form_id: str,
    store: FormStore = Depends(get_store)
):
    """Load a saved form into the builder."""
    if not store.load_form(form_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return store.state


@router.delete("/{form_id}")
async def delete_form(
    form_id: str,
    store: FormStore = Depends(get_store)
):
    """Delete a saved form."""
    try:
        success = store.delete_form(form_id)
    except PersistenceError as e:
        raise _storage_unavailable(e)
    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Form not found"
        )
    return {"message": "Form deleted successfully"}
