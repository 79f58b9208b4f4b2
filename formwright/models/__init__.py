# formwright/models/__init__.py
"""
Data models for formwright.

Provides the form schema model, error taxonomy, schema stores and tool
response models.
"""

from formwright.models.errors import (
    DependencyLookupFailure,
    FormwrightError,
    SchemaNotFound,
    StructuralMutationError,
    ValidationFailure,
)
from formwright.models.memory_store import InMemorySchemaStore
from formwright.models.schema import (
    OPTION_KINDS,
    FieldKind,
    FieldOption,
    FormField,
    FormSchema,
    ValidationRules,
    generate_field_id,
)
from formwright.models.store import SchemaStore, load_schema_or_default

__all__ = [
    # Schema model
    "FieldKind",
    "FieldOption",
    "FormField",
    "FormSchema",
    "ValidationRules",
    "OPTION_KINDS",
    "generate_field_id",
    # Errors
    "FormwrightError",
    "SchemaNotFound",
    "DependencyLookupFailure",
    "StructuralMutationError",
    "ValidationFailure",
    # Stores
    "SchemaStore",
    "InMemorySchemaStore",
    "load_schema_or_default",
]
