# tests/unit/test_validation.py
"""
Unit tests for per-kind controls and submit-time validation.
"""

import pytest

from formwright.models.schema import FieldKind, FieldOption, FormField, FormSchema
from formwright.models.values import PendingUpload
from formwright.renderer.controls import CONTROLS, control_for
from formwright.renderer.validation import validate_field, validate_values


def _field(kind: FieldKind | str, **extra) -> FormField:
    return FormField.model_validate({"name": "f", "label": "Field", "kind": kind, **extra})


def test_every_kind_has_a_control():
    assert set(CONTROLS) == set(FieldKind)
    assert control_for("signature") is None


def test_widget_metadata():
    assert control_for(FieldKind.PHONE).input_type == "tel"
    assert control_for(FieldKind.TEXTAREA).widget == "textarea"
    assert control_for(FieldKind.IMAGE).accept == "image/*"
    assert control_for(FieldKind.TOGGLE).widget == "toggle"


class TestNormalize:
    def test_number_from_string(self):
        control = control_for(FieldKind.NUMBER)
        field = _field("number")

        assert control.normalize(field, "42") == 42
        assert control.normalize(field, " 2.5 ") == 2.5
        assert control.normalize(field, "") is None
        assert control.normalize(field, "abc") == "abc"

    def test_boolean_from_string(self):
        control = control_for(FieldKind.CHECKBOX)
        field = _field("checkbox")

        assert control.normalize(field, "on") is True
        assert control.normalize(field, "false") is False
        assert control.normalize(field, 1) is True

    def test_multi_select_from_scalar(self):
        control = control_for(FieldKind.MULTI_SELECT)
        assert control.normalize(_field("multi-select"), "a") == ["a"]

    def test_file_bytes_become_pending_upload(self):
        value = control_for(FieldKind.FILE).normalize(_field("file"), b"%PDF")

        assert isinstance(value, PendingUpload)
        assert value.size == 4


class TestValidateField:
    def test_required_missing(self):
        field = _field("text", required=True)

        assert validate_field(field, None) == "Field is required"
        assert validate_field(field, "   ") == "Field is required"

    def test_required_via_validation_rule(self):
        field = _field("text", validations={"required": True})
        assert validate_field(field, "") == "Field is required"

    def test_optional_empty_skips_other_rules(self):
        field = _field("text", validations={"minLength": 5, "pattern": r"\d+"})
        assert validate_field(field, "") is None

    def test_required_checkbox_must_be_ticked(self):
        field = _field("checkbox", required=True)

        assert validate_field(field, False) == "Field is required"
        assert validate_field(field, True) is None

    def test_length_rules(self):
        field = _field("text", validations={"minLength": 3, "maxLength": 5})

        assert validate_field(field, "ab") == "Field must be at least 3 characters"
        assert validate_field(field, "abcdef") == "Field must be at most 5 characters"
        assert validate_field(field, "abcd") is None

    def test_numeric_range(self):
        field = _field("number", validations={"minValue": 1, "maxValue": 10})

        assert validate_field(field, 0) == "Field must be at least 1"
        assert validate_field(field, 11) == "Field must be at most 10"
        assert validate_field(field, 10) is None
        assert validate_field(field, "x") == "Enter a number"

    def test_pattern(self):
        field = _field("text", validations={"pattern": r"\d{4}-\d{4}"})

        assert validate_field(field, "2025-2026") is None
        assert validate_field(field, "2025") == "Field has an invalid format"

    def test_invalid_pattern_ignored(self):
        field = _field("text", validations={"pattern": "(["})
        assert validate_field(field, "anything") is None

    def test_email_and_url_and_phone_shapes(self):
        assert validate_field(_field("email"), "not-an-email") == "Enter a valid email address"
        assert validate_field(_field("email"), "a@b.io") is None
        assert validate_field(_field("url"), "example.com") == "Enter a valid URL"
        assert validate_field(_field("url"), "https://example.com") is None
        assert validate_field(_field("phone"), "call me") == "Enter a valid phone number"
        assert validate_field(_field("phone"), "+91 98765 43210") is None

    def test_date_shape(self):
        assert validate_field(_field("date"), "2025-02-30") == "Enter a valid date (YYYY-MM-DD)"
        assert validate_field(_field("date"), "2025-02-28") is None

    def test_select_membership(self):
        field = _field("select", options=[{"label": "A", "value": "a"}])

        assert validate_field(field, "z") == "Select a valid option"
        assert validate_field(field, "a") is None

    def test_live_options_override_static(self):
        field = _field("select", options=[{"label": "A", "value": "a"}])
        live = [FieldOption(label="B", value="b")]

        assert validate_field(field, "a", options=live) == "Select a valid option"
        assert validate_field(field, "b", options=live) is None

    def test_select_without_known_options_accepts_value(self):
        assert validate_field(_field("select"), "T1") is None

    def test_multi_select_unknown_values(self):
        field = _field("multi-select", options=[{"label": "A", "value": "a"}])
        assert validate_field(field, ["a", "q"]) == "Invalid option(s): q"

    def test_file_values(self):
        field = _field("file", required=True)

        assert validate_field(field, PendingUpload("cv.pdf", b"data")) is None
        assert validate_field(field, "uploads/cv.pdf") is None
        assert validate_field(field, 12) == "Choose a file"

    def test_image_rejects_known_non_image_type(self):
        field = _field("image")

        assert validate_field(field, PendingUpload("a.pdf", b"x", "application/pdf")) == "Choose an image file"
        assert validate_field(field, PendingUpload("a.png", b"x", "image/png")) is None
        assert validate_field(field, PendingUpload("a.bin", b"x")) is None

    def test_dynamic_config_entries(self):
        field = _field(
            "dynamic-config",
            config={
                "fields": [
                    {"name": "subject", "label": "Subject", "kind": "text", "required": True},
                    {"name": "hours", "kind": "number"},
                ]
            },
        )

        assert validate_field(field, [{"subject": "Math", "hours": 3}]) is None
        assert validate_field(field, [{"subject": ""}]) == "Entry 1: Subject is required"
        assert validate_field(field, [{"subject": "Art", "room": 4}]) == "Entry 1: unknown field(s) room"
        assert validate_field(field, "nope") == "Entries must be a list of objects"

    def test_unknown_kind_never_fails(self):
        assert validate_field(_field("signature", required=True), None) is None


def test_validate_values_reports_every_failing_field():
    """Both failing fields are reported, one message each."""
    schema = FormSchema(
        fields=[
            FormField.model_validate({"name": "a", "label": "A", "kind": "text", "required": True}),
            FormField.model_validate(
                {"name": "b", "label": "B", "kind": "text", "validations": {"minLength": 5}}
            ),
            FormField.model_validate({"name": "c", "label": "C", "kind": "text"}),
        ]
    )

    errors = validate_values(schema, {"a": "", "b": "abc", "c": "ok"})

    assert errors == {
        "a": "A is required",
        "b": "B must be at least 5 characters",
    }


def test_validate_values_uses_live_options():
    schema = FormSchema(
        fields=[FormField(name="class_id", label="Class", kind=FieldKind.SELECT, depends_on=["t"])]
    )

    errors = validate_values(
        schema, {"class_id": "5A"}, options_for=lambda f: [FieldOption(label="5B", value="5B")]
    )
    assert errors == {"class_id": "Select a valid option"}


@pytest.mark.parametrize("value", [None, "", [], {}])
def test_missing_values_fail_required(value):
    field = _field("multi-select", required=True, options=[{"label": "A", "value": "a"}])
    assert validate_field(field, value) == "Field is required"
