"""Preview (validation and derived value) Pydantic schemas."""

from datetime import date
from enum import Enum
from typing import Optional, Dict, Any

from pydantic import Field

from formbuilder.schemas.field import CamelModel


class ValueShape(str, Enum):
    """Value shapes a compiled validation contract can accept."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING_ARRAY = "string_array"


class ValidationResult(CamelModel):
    """Outcome of validating one value: failures carry a readable message."""
    valid: bool
    message: Optional[str] = None


class PreviewRequest(CamelModel):
    """Schema for preview requests: current values keyed by field id."""
    values: Dict[str, Any] = Field(default_factory=dict)
    today: Optional[date] = Field(None, description="Reference date for age computations")


class DerivedValuesResponse(CamelModel):
    """Schema for derived value responses."""
    derived: Dict[str, str]


class PreviewResponse(CamelModel):
    """Schema for full preview validation responses."""
    valid: bool
    results: Dict[str, ValidationResult]
    derived: Dict[str, str]
    submission: Dict[str, Any]
