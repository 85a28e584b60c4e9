"""Preview router: derived values and validation of entered values."""

from fastapi import APIRouter, Depends

from formbuilder.schemas.preview import (
    PreviewRequest,
    PreviewResponse,
    DerivedValuesResponse,
)
from formbuilder.services.derivation import DerivationService
from formbuilder.services.preview import PreviewService
from formbuilder.services.store import FormStore, get_store

router = APIRouter()


@router.post("/evaluate", response_model=DerivedValuesResponse)
async def evaluate_derived(
    request: PreviewRequest,
    store: FormStore = Depends(get_store)
):
    """Recompute every derived field of the live form from the given values."""
    derived = DerivationService.evaluate_all_derived(store.fields, request.values, request.today)
    return DerivedValuesResponse(derived=derived)


@router.post("/validate", response_model=PreviewResponse)
async def validate_values(
    request: PreviewRequest,
    store: FormStore = Depends(get_store)
):
    """
    Validate entered values against the live form.

    Returns per-field results, the derived values and the label-keyed
    submission the preview would send.
    """
    return PreviewService.preview(store.fields, request.values, request.today)
