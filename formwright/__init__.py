# formwright/__init__.py
"""
formwright: dynamic form schema engine.

Schemas describe forms as data. The builder edits them, the resolver keeps
cascading select fields consistent, the renderer validates and emits value
maps, and schema stores persist them.
"""

from formwright.builder import BuilderSession, BuilderState
from formwright.models import (
    FieldKind,
    FieldOption,
    FormField,
    FormSchema,
    InMemorySchemaStore,
    SchemaStore,
    ValidationRules,
    load_schema_or_default,
)
from formwright.renderer import RenderSession, SessionState, initial_values_from_record
from formwright.resolver import DependentFieldResolver, HttpOptionLookup, MappingOptionLookup

__version__ = "0.1.0"

__all__ = [
    "FieldKind",
    "FieldOption",
    "FormField",
    "FormSchema",
    "ValidationRules",
    "SchemaStore",
    "InMemorySchemaStore",
    "load_schema_or_default",
    "BuilderState",
    "BuilderSession",
    "DependentFieldResolver",
    "HttpOptionLookup",
    "MappingOptionLookup",
    "RenderSession",
    "SessionState",
    "initial_values_from_record",
]
