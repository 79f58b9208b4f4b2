# formwright/renderer/controls.py
"""
Per-kind control behaviour.

CONTROLS is a closed dispatch table over FieldKind. A control knows which
widget renders the field, how to normalize a raw edit into a value-map
entry, and how to check the shape of a value. Kinds outside the table
(unknown strings kept by the model) have no control: they are not
rendered and never emitted.
"""

import re
from collections.abc import Mapping
from datetime import date
from typing import Any
from urllib.parse import urlparse

from formwright.models.schema import FieldKind, FieldOption, FormField
from formwright.models.values import PendingUpload, is_missing_value

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_RE = re.compile(r"^\+?[0-9 ()\-.]{5,20}$")

_TRUE_STRINGS = {"true", "1", "on", "yes"}


class Control:
    """Base control: passes values through and accepts any shape."""

    widget = "input"
    input_type: str | None = None
    accept: str | None = None

    def normalize(self, field: FormField, value: Any) -> Any:
        return value

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        """Return an error message if value has the wrong shape for this kind."""
        return None


class TextControl(Control):
    """Single-line text inputs (text, email, password, url, phone, date)."""

    def __init__(self, input_type: str | None = "text", widget: str = "input") -> None:
        self.input_type = input_type
        self.widget = widget

    def normalize(self, field: FormField, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        if not isinstance(value, str):
            return "Enter text"
        if self.input_type == "email" and not EMAIL_RE.match(value):
            return "Enter a valid email address"
        if self.input_type == "url":
            parsed = urlparse(value)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                return "Enter a valid URL"
        if self.input_type == "tel" and not PHONE_RE.match(value):
            return "Enter a valid phone number"
        if self.input_type == "date":
            try:
                date.fromisoformat(value)
            except ValueError:
                return "Enter a valid date (YYYY-MM-DD)"
        return None


class NumberControl(Control):
    input_type = "number"

    def normalize(self, field: FormField, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        text = value.strip()
        if not text:
            return None
        for cast in (int, float):
            try:
                return cast(text)
            except ValueError:
                continue
        return value

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return "Enter a number"
        return None


class BooleanControl(Control):
    """Checkbox and toggle."""

    def __init__(self, widget: str) -> None:
        self.widget = widget

    def normalize(self, field: FormField, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() in _TRUE_STRINGS
        return bool(value)

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        if not isinstance(value, bool):
            return "Must be true or false"
        return None


class ChoiceControl(Control):
    """Single choice from the field's options (select, radio)."""

    def __init__(self, widget: str) -> None:
        self.widget = widget

    def normalize(self, field: FormField, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        # No known options: the list is supplied outside the schema
        if not options:
            return None
        if str(value) not in {o.value for o in options}:
            return "Select a valid option"
        return None


class MultiChoiceControl(Control):
    widget = "multi-select"

    def normalize(self, field: FormField, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, (list, tuple, set)):
            return [str(v) for v in value]
        return [str(value)]

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        if not isinstance(value, list):
            return "Select one or more options"
        if not options:
            return None
        offered = {o.value for o in options}
        unknown = [v for v in value if str(v) not in offered]
        if unknown:
            return f"Invalid option(s): {', '.join(map(str, unknown))}"
        return None


class FileControl(Control):
    """
    File and image inputs.

    A value is either a PendingUpload (raw binary not yet uploaded) or a
    reference string returned by an upload step. Both are valid.
    """

    widget = "file"
    input_type = "file"

    def __init__(self, accept: str) -> None:
        self.accept = accept

    def normalize(self, field: FormField, value: Any) -> Any:
        if isinstance(value, (bytes, bytearray)):
            return PendingUpload(filename=field.name, content=bytes(value))
        return value

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        if isinstance(value, str):
            return None
        if isinstance(value, PendingUpload):
            # octet-stream means the browser did not report a type
            known_type = value.content_type != "application/octet-stream"
            if self.accept == "image/*" and known_type and not value.content_type.startswith("image/"):
                return "Choose an image file"
            return None
        return "Choose a file"


def sub_fields(field: FormField) -> list[dict[str, Any]]:
    """Sub-field descriptors of a dynamic-config field (config["fields"])."""
    descriptors = (field.config or {}).get("fields") or []
    return [d for d in descriptors if isinstance(d, Mapping) and d.get("name")]


class DynamicConfigControl(Control):
    """Repeatable structured entries described by config["fields"]."""

    widget = "dynamic-config"

    def normalize(self, field: FormField, value: Any) -> Any:
        if value is None:
            return []
        if not isinstance(value, (list, tuple)):
            return value
        return [dict(entry) if isinstance(entry, Mapping) else entry for entry in value]

    def check(self, field: FormField, value: Any, options: list[FieldOption]) -> str | None:
        if not isinstance(value, list) or not all(isinstance(e, Mapping) for e in value):
            return "Entries must be a list of objects"

        descriptors = sub_fields(field)
        if not descriptors:
            return None

        declared = {d["name"] for d in descriptors}
        for i, entry in enumerate(value, start=1):
            unknown = set(entry) - declared
            if unknown:
                return f"Entry {i}: unknown field(s) {', '.join(sorted(unknown))}"
            for d in descriptors:
                if d.get("required") and is_missing_value(entry.get(d["name"])):
                    return f"Entry {i}: {d.get('label') or d['name']} is required"
        return None


CONTROLS: dict[FieldKind, Control] = {
    FieldKind.TEXT: TextControl("text"),
    FieldKind.EMAIL: TextControl("email"),
    FieldKind.NUMBER: NumberControl(),
    FieldKind.PHONE: TextControl("tel"),
    FieldKind.URL: TextControl("url"),
    FieldKind.PASSWORD: TextControl("password"),
    FieldKind.TEXTAREA: TextControl(input_type=None, widget="textarea"),
    FieldKind.DATE: TextControl("date"),
    FieldKind.CHECKBOX: BooleanControl("checkbox"),
    FieldKind.TOGGLE: BooleanControl("toggle"),
    FieldKind.SELECT: ChoiceControl("select"),
    FieldKind.MULTI_SELECT: MultiChoiceControl(),
    FieldKind.RADIO: ChoiceControl("radio"),
    FieldKind.FILE: FileControl(accept="*/*"),
    FieldKind.IMAGE: FileControl(accept="image/*"),
    FieldKind.DYNAMIC_CONFIG: DynamicConfigControl(),
}

BOOLEAN_KINDS = frozenset({FieldKind.CHECKBOX, FieldKind.TOGGLE})


def control_for(kind: FieldKind | str) -> Control | None:
    """Control for a kind; None for kinds outside the closed set."""
    if not isinstance(kind, FieldKind):
        return None
    return CONTROLS.get(kind)
