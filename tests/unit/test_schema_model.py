# tests/unit/test_schema_model.py
"""
Unit tests for the form schema model.

Tests record parsing (camelCase and snake_case), serialization, field and
option invariants, and unknown-kind handling.
"""

import pytest
from pydantic import ValidationError

from formwright.models.schema import (
    FieldKind,
    FieldOption,
    FormField,
    FormSchema,
    generate_field_id,
)


@pytest.fixture
def student_record() -> dict:
    """A persisted schema record as an entity API would return it."""
    return {
        "key": "student_form",
        "name": "Student Form",
        "entityType": "student",
        "fields": [
            {
                "id": "f1",
                "name": "email",
                "label": "Email",
                "kind": "email",
                "helpText": "School address",
                "isFilterable": True,
                "validations": {"minLength": 5, "required": True},
            },
            {
                "id": "f2",
                "name": "section",
                "label": "Section",
                "kind": "select",
                "options": [
                    {"id": 1, "label": "Section A", "value": "A", "order": 1},
                    {"id": 2, "label": "Section B", "value": "B", "order": 2},
                ],
            },
            {
                "id": "f3",
                "name": "class_id",
                "label": "Class",
                "kind": "select",
                "dependsOn": ["teacher_id"],
            },
        ],
    }


def test_generate_field_id_format():
    """Field ids are 12-char hex strings."""
    field_id = generate_field_id()
    assert len(field_id) == 12
    int(field_id, 16)
    assert generate_field_id() != field_id


def test_parse_camel_case_record(student_record: dict):
    """camelCase record keys map onto snake_case attributes."""
    schema = FormSchema.from_record(student_record)

    assert schema.entity_type == "student"
    email = schema.field_by_name("email")
    assert email.kind is FieldKind.EMAIL
    assert email.help_text == "School address"
    assert email.is_filterable is True
    assert email.validations.min_length == 5
    assert email.is_required is True
    assert email.options is None

    class_field = schema.field_by_id("f3")
    assert class_field.depends_on == ["teacher_id"]
    assert class_field.is_cascading is True


def test_parse_snake_case_input():
    """snake_case keys are accepted too."""
    field = FormField.model_validate(
        {"name": "bio", "kind": "textarea", "help_text": "About you", "is_visible_in_listing": False}
    )
    assert field.help_text == "About you"
    assert field.is_visible_in_listing is False


def test_integer_option_ids_coerced(student_record: dict):
    """Positional integer option ids are stored as strings."""
    schema = FormSchema.from_record(student_record)
    section = schema.field_by_name("section")

    assert [o.id for o in section.options] == ["1", "2"]
    assert [o.value for o in section.options] == ["A", "B"]


def test_to_record_uses_camel_case(student_record: dict):
    """Serialized records use camelCase keys and omit unset optionals."""
    record = FormSchema.from_record(student_record).to_record()

    assert record["entityType"] == "student"
    email = record["fields"][0]
    assert email["helpText"] == "School address"
    assert email["isFilterable"] is True
    assert email["validations"] == {"required": True, "minLength": 5}
    assert "placeholder" not in email
    assert record["fields"][2]["dependsOn"] == ["teacher_id"]


def test_record_roundtrip(student_record: dict):
    """Parsing a serialized record reproduces the same record."""
    schema = FormSchema.from_record(student_record)
    reparsed = FormSchema.from_record(schema.to_record())

    assert reparsed.to_record() == schema.to_record()
    assert FormSchema.from_json(schema.to_json()).to_record() == schema.to_record()


def test_option_kind_without_options_gets_empty_list():
    field = FormField(name="color", kind=FieldKind.RADIO)
    assert field.options == []


def test_options_dropped_from_non_option_kind():
    field = FormField.model_validate(
        {"name": "title", "kind": "text", "options": [{"value": "x", "label": "X"}]}
    )
    assert field.options is None


def test_duplicate_option_values_rejected():
    with pytest.raises(ValidationError, match="duplicate option value"):
        FormField(
            name="size",
            kind=FieldKind.SELECT,
            options=[FieldOption(label="Small", value="s"), FieldOption(label="Also small", value="s")],
        )


def test_duplicate_field_names_rejected():
    with pytest.raises(ValidationError, match="Duplicate field name"):
        FormSchema(
            fields=[
                FormField(name="email", kind=FieldKind.EMAIL),
                FormField(name="email", kind=FieldKind.TEXT),
            ]
        )


def test_duplicate_field_ids_rejected():
    with pytest.raises(ValidationError, match="Duplicate field id"):
        FormSchema(
            fields=[
                FormField(id="same", name="a", kind=FieldKind.TEXT),
                FormField(id="same", name="b", kind=FieldKind.TEXT),
            ]
        )


def test_empty_field_name_rejected():
    with pytest.raises(ValidationError):
        FormField(name="", kind=FieldKind.TEXT)


def test_unknown_kind_kept_as_string():
    """Unsupported kinds survive parsing and serialization unchanged."""
    schema = FormSchema.from_record(
        {"key": "k", "fields": [{"id": "s1", "name": "sig", "kind": "signature"}]}
    )
    field = schema.fields[0]

    assert field.kind == "signature"
    assert not isinstance(field.kind, FieldKind)
    assert schema.to_record()["fields"][0]["kind"] == "signature"


def test_lookup_helpers(student_record: dict):
    schema = FormSchema.from_record(student_record)

    assert schema.index_of("f2") == 1
    assert schema.index_of("nope") is None
    assert schema.field_by_name("nope") is None
    assert schema.field_names() == ["email", "section", "class_id"]


def test_defaults_for_empty_schema():
    schema = FormSchema()
    assert schema.key == ""
    assert schema.name == "Untitled form"
    assert schema.fields == []
