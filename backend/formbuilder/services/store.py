"""Form store: the live form under construction and the saved form collection."""

import logging
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from fastapi import Request
from pydantic import ValidationError

from formbuilder.config import Settings, get_settings
from formbuilder.exceptions import PersistenceError
from formbuilder.schemas.field import FormField
from formbuilder.schemas.form import FormState, SavedForm, saved_forms_adapter
from formbuilder.services.field import FieldService, generate_id
from formbuilder.services.persistence import PersistenceGateway

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _copy_fields(fields: Sequence[FormField]) -> List[FormField]:
    return [field.model_copy(deep=True) for field in fields]


class FormStore:
    """
    Single source of truth for the form being built and the saved forms.

    Every mutation is synchronous and total: unknown ids are no-ops. The
    saved form collection is written through the persistence gateway on
    every change to it; if that write fails a PersistenceError is raised
    but the in-memory state keeps the change.

    Lifecycle: ``open()`` loads the saved forms, ``close()`` releases the
    gateway. The store can also be used as a context manager.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self._gateway = gateway
        self._settings = settings or get_settings()
        self._clock = clock or _utcnow
        self._opened = False

        self.saved_forms: List[SavedForm] = []
        self._reset_live_form()

    # Lifecycle

    def open(self) -> "FormStore":
        """Load the saved form collection; an absent key means no saved forms."""
        if self._opened:
            return self
        self._opened = True
        self.saved_forms = []

        blob = self._gateway.get(self._settings.storage_key)
        if blob is not None:
            try:
                self.saved_forms = saved_forms_adapter.validate_json(blob)
            except ValidationError as exc:
                raise PersistenceError(f"Saved forms could not be decoded: {exc}") from exc

        logger.info("Loaded %d saved forms", len(self.saved_forms))
        return self

    def close(self) -> None:
        """Release the gateway and drop all state."""
        if not self._opened:
            return
        self._opened = False
        self._gateway.close()
        self.saved_forms = []
        self._reset_live_form()

    def __enter__(self) -> "FormStore":
        return self.open()

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def is_open(self) -> bool:
        return self._opened

    # Read model

    @property
    def state(self) -> FormState:
        """Snapshot of the full store state."""
        return FormState(
            title=self.title,
            description=self.description,
            fields=_copy_fields(self.fields),
            selected_field_id=self.selected_field_id,
            current_form_id=self.current_form_id,
            saved_forms=[form.model_copy(deep=True) for form in self.saved_forms],
        )

    def get_field(self, field_id: str) -> Optional[FormField]:
        """Get a live field by ID."""
        return FieldService.find(self.fields, field_id)

    def get_saved_form(self, form_id: Optional[str]) -> Optional[SavedForm]:
        """Get a saved form by ID."""
        for form in self.saved_forms:
            if form.id == form_id:
                return form
        return None

    # Form metadata

    def set_title(self, title: str) -> None:
        self.title = title

    def set_description(self, description: str) -> None:
        self.description = description

    # Fields

    def add_field(self, field_type: Any, **config: Any) -> FormField:
        """Create a field of ``field_type`` and append it to the live form."""
        field = FieldService.create_field(field_type, self.fields, **config)
        self.fields.append(field)
        return field

    def update_field(self, field_id: str, updates: Dict[str, Any]) -> Optional[FormField]:
        """Merge updates into a field; returns None when the id is unknown."""
        index = self._field_index(field_id)
        if index is None:
            return None

        updated = FieldService.apply_updates(self.fields[index], updates)
        FieldService.check_parents(updated, self.fields)
        self.fields[index] = updated
        return updated

    def delete_field(self, field_id: str) -> bool:
        """Remove a field, renumber the rest and drop references to it."""
        remaining = [field for field in self.fields if field.id != field_id]
        if len(remaining) == len(self.fields):
            return False

        remaining = FieldService.remove_parent_references(remaining, field_id)
        self.fields = FieldService.normalize_ordering(remaining)
        return True

    def reorder_fields(self, field_ids: Sequence[str]) -> bool:
        """
        Reorder the live fields to follow ``field_ids``.

        The sequence must be a permutation of the current field ids;
        anything else leaves the form untouched and returns False.
        """
        if Counter(field_ids) != Counter(field.id for field in self.fields):
            logger.warning("Ignoring reorder request that is not a permutation of the current fields")
            return False

        by_id = {field.id: field for field in self.fields}
        self.fields = FieldService.normalize_ordering([by_id[field_id] for field_id in field_ids])
        return True

    def duplicate_field(self, field_id: str) -> Optional[FormField]:
        """Append a copy of a field under a new id; returns None when the id is unknown."""
        field = self.get_field(field_id)
        if field is None:
            return None

        duplicated = FieldService.duplicate(field, self.fields, self._settings.copy_suffix)
        self.fields.append(duplicated)
        return duplicated

    def set_selected_field(self, field_id: Optional[str]) -> None:
        self.selected_field_id = field_id

    # Saved forms

    def save_form(self) -> SavedForm:
        """
        Save the live form.

        A new form gets a fresh id and goes to the front of the collection;
        a previously saved form is overwritten in place, keeping its
        creation time.
        """
        now = self._clock()
        existing = self.get_saved_form(self.current_form_id) if self.current_form_id else None

        saved = SavedForm(
            id=self.current_form_id or generate_id("form"),
            title=self.title,
            description=self.description,
            fields=_copy_fields(self.fields),
            created_at=existing.created_at if existing else now,
            updated_at=now,
        )

        if existing is not None:
            self.saved_forms[self.saved_forms.index(existing)] = saved
        else:
            self.saved_forms.insert(0, saved)
        self.current_form_id = saved.id

        logger.info("Saved form %s (%d fields)", saved.id, len(saved.fields))
        self._persist()
        return saved

    def load_form(self, form_id: str) -> Optional[SavedForm]:
        """Replace the live form with a copy of a saved form."""
        saved = self.get_saved_form(form_id)
        if saved is None:
            return None

        self.title = saved.title
        self.description = saved.description
        self.fields = _copy_fields(saved.fields)
        self.current_form_id = saved.id
        self.selected_field_id = None

        logger.info("Loaded form %s", saved.id)
        return saved

    def delete_form(self, form_id: str) -> bool:
        """Remove a saved form; resets the live form if it was the current one."""
        saved = self.get_saved_form(form_id)
        if saved is None:
            return False

        self.saved_forms.remove(saved)
        if self.current_form_id == form_id:
            self._reset_live_form()

        logger.info("Deleted form %s", form_id)
        self._persist()
        return True

    def new_form(self) -> None:
        """Start a new, unsaved form without touching the saved forms."""
        self._reset_live_form()

    # Internals

    def _reset_live_form(self) -> None:
        self.title = self._settings.default_form_title
        self.description = ""
        self.fields: List[FormField] = []
        self.selected_field_id: Optional[str] = None
        self.current_form_id: Optional[str] = None

    def _field_index(self, field_id: str) -> Optional[int]:
        for index, field in enumerate(self.fields):
            if field.id == field_id:
                return index
        return None

    def _persist(self) -> None:
        blob = saved_forms_adapter.dump_json(self.saved_forms, by_alias=True, exclude_none=True)
        self._gateway.set(self._settings.storage_key, blob)


def get_store(request: Request) -> FormStore:
    """Dependency that provides the application's form store."""
    return request.app.state.store
