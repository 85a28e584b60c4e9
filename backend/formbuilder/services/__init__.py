"""Service layer for business logic."""

from formbuilder.services.field import FieldService, FIELD_PALETTE
from formbuilder.services.validation import ValidationContract, compile_field
from formbuilder.services.derivation import DerivationService
from formbuilder.services.preview import PreviewService
from formbuilder.services.persistence import (
    PersistenceGateway,
    InMemoryGateway,
    SqlAlchemyGateway,
)
from formbuilder.services.store import FormStore, get_store

__all__ = [
    "FieldService",
    "FIELD_PALETTE",
    "ValidationContract",
    "compile_field",
    "DerivationService",
    "PreviewService",
    "PersistenceGateway",
    "InMemoryGateway",
    "SqlAlchemyGateway",
    "FormStore",
    "get_store",
]
