"""SQLAlchemy models for the form builder."""

from formbuilder.models.blob import KeyValueBlob

__all__ = [
    "KeyValueBlob",
]
