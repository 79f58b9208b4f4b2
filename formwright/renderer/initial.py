# formwright/renderer/initial.py
"""Build an initial value map from an existing business record."""

from collections.abc import Mapping
from datetime import date, datetime
from typing import Any

from formwright.models.schema import FieldKind, FormSchema
from formwright.models.values import ValueMap


def _date_only(value: Any) -> Any:
    """Reduce dates and ISO datetimes to YYYY-MM-DD; leave anything else alone."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date().isoformat()
        except ValueError:
            return value
    return value


def initial_values_from_record(schema: FormSchema, record: Mapping[str, Any]) -> ValueMap:
    """
    Map a stored record onto the schema's field names.

    Custom fields live under record["dynamic_data"]; base fields are
    top-level keys. dynamic_data wins when both carry the same name.
    Keys without a matching field are dropped.

    Args:
        schema: Schema the form will be rendered with
        record: Business record as returned by the entity API

    Returns:
        Initial value map for a render session
    """
    dynamic = record.get("dynamic_data")
    if not isinstance(dynamic, Mapping):
        dynamic = {}

    values: ValueMap = {}
    for field in schema.fields:
        if field.name in dynamic:
            value = dynamic[field.name]
        elif field.name in record:
            value = record[field.name]
        else:
            continue

        if field.kind == FieldKind.DATE:
            value = _date_only(value)
        values[field.name] = value
    return values
