# formwright/renderer/validation.py
"""
Submit-time validation of a value map against a schema.

Every field is checked (no fail-fast) and at most one message is kept per
field: the first failing rule in the order required, shape, length,
numeric range, pattern. Rules on an empty, non-required field are skipped.
"""

import logging
import re
from collections.abc import Callable
from typing import Any

from formwright.models.schema import FieldOption, FormField, FormSchema
from formwright.models.values import ValueMap, is_missing_value
from formwright.renderer.controls import BOOLEAN_KINDS, Control, control_for

logger = logging.getLogger(__name__)

OptionsFor = Callable[[FormField], list[FieldOption]]


def _display(field: FormField) -> str:
    return field.label or field.name


def _as_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            return None
    return None


def validate_field(
    field: FormField,
    value: Any,
    options: list[FieldOption] | None = None,
    control: Control | None = None,
) -> str | None:
    """
    Validate a single value.

    Args:
        field: Field definition
        value: Current value (may be missing)
        options: Live options for option kinds (defaults to the static ones)
        control: Control for the field kind (looked up if omitted)

    Returns:
        Error message, or None if the value is acceptable
    """
    control = control or control_for(field.kind)
    if control is None:
        return None
    options = list(field.options or []) if options is None else options
    rules = field.validations

    # An unticked box counts as empty for required checkbox/toggle fields
    empty = is_missing_value(value) or (field.kind in BOOLEAN_KINDS and value is False)
    if empty:
        if field.is_required:
            return f"{_display(field)} is required"
        return None

    shape_error = control.check(field, value, options)
    if shape_error:
        return shape_error

    if isinstance(value, str):
        if rules.min_length is not None and len(value) < rules.min_length:
            return f"{_display(field)} must be at least {rules.min_length} characters"
        if rules.max_length is not None and len(value) > rules.max_length:
            return f"{_display(field)} must be at most {rules.max_length} characters"

    if rules.min_value is not None or rules.max_value is not None:
        number = _as_number(value)
        if number is None:
            return f"{_display(field)} must be a number"
        if rules.min_value is not None and number < rules.min_value:
            return f"{_display(field)} must be at least {rules.min_value:g}"
        if rules.max_value is not None and number > rules.max_value:
            return f"{_display(field)} must be at most {rules.max_value:g}"

    if rules.pattern and isinstance(value, str):
        try:
            matched = re.fullmatch(rules.pattern, value) is not None
        except re.error as e:
            logger.warning(f"Ignoring invalid pattern on '{field.name}': {e}")
            matched = True
        if not matched:
            return f"{_display(field)} has an invalid format"

    return None


def validate_values(
    schema: FormSchema, values: ValueMap, options_for: OptionsFor | None = None
) -> dict[str, str]:
    """
    Validate every renderable field of a schema.

    Args:
        schema: Schema being submitted
        values: Value map keyed by field name
        options_for: Returns the live options of a field (cascading fields
                     resolve theirs at runtime); static options if omitted

    Returns:
        Field name -> message; empty when everything is valid
    """
    errors: dict[str, str] = {}
    for field in schema.fields:
        control = control_for(field.kind)
        if control is None:
            continue
        options = options_for(field) if options_for else None
        message = validate_field(field, values.get(field.name), options, control)
        if message:
            errors[field.name] = message
    return errors
