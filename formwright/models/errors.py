# formwright/models/errors.py
"""
Error taxonomy for the form engine.

All of these are recoverable. The builder and resolver log and degrade
instead of raising; stores raise SchemaNotFound and the loading helpers
recover it by falling back to a default schema.
"""

from typing import Any


class FormwrightError(Exception):
    """Base class for all formwright errors."""


class SchemaNotFound(FormwrightError):
    """No schema is stored under the requested key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Schema '{key}' not found")


class DependencyLookupFailure(FormwrightError):
    """An upstream option lookup failed (network error, not found, bad payload)."""

    def __init__(self, field_name: str, upstream: dict[str, Any], reason: str = "") -> None:
        self.field_name = field_name
        self.upstream = dict(upstream)
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Option lookup for '{field_name}' failed{detail}")


class StructuralMutationError(FormwrightError):
    """A builder mutation referenced a missing field or broke an invariant."""


class ValidationFailure(FormwrightError):
    """Submitted values failed validation. ``errors`` maps field name to message."""

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Validation failed for: {fields}")
