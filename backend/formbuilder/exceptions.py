"""Domain exceptions raised by the form builder services."""


class FormBuilderError(Exception):
    """Base class for all form builder errors."""


class InvalidFieldConfig(FormBuilderError):
    """A field configuration violates a structural invariant."""


class PersistenceError(FormBuilderError):
    """The persistence gateway could not read or write the saved forms."""


class FormulaError(FormBuilderError):
    """A custom formula could not be tokenized, parsed or evaluated."""
