"""Form builder backend: form definitions, validation and derived fields."""

__version__ = "1.0.0"
