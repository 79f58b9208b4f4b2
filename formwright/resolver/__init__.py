# formwright/resolver/__init__.py
"""Cascading-field resolution and option lookups."""

from .dependency import (
    DependentFieldResolver,
    FieldResolution,
    ResolutionResult,
    cascade_order,
    downstream_of,
)
from .lookups import HttpOptionLookup, MappingOptionLookup, OptionLookup, normalize_options

__all__ = [
    "DependentFieldResolver",
    "FieldResolution",
    "ResolutionResult",
    "cascade_order",
    "downstream_of",
    "OptionLookup",
    "MappingOptionLookup",
    "HttpOptionLookup",
    "normalize_options",
]
