# tests/unit/test_initial_values.py
"""Unit tests for mapping stored records onto a schema's field names."""

from datetime import date, datetime

from formwright.models.defaults import build_default_schema
from formwright.renderer.initial import initial_values_from_record


def test_base_and_dynamic_fields_merged():
    schema = build_default_schema("student")
    record = {
        "id": 17,
        "first_name": "Asha",
        "student_id": "S-17",
        "dynamic_data": {"section": "B", "is_hosteller": True},
    }

    values = initial_values_from_record(schema, record)

    assert values == {
        "first_name": "Asha",
        "student_id": "S-17",
        "section": "B",
        "is_hosteller": True,
    }


def test_dynamic_data_wins_over_top_level():
    schema = build_default_schema("student")
    record = {"section": "A", "dynamic_data": {"section": "C"}}

    assert initial_values_from_record(schema, record)["section"] == "C"


def test_dates_normalized_to_day():
    schema = build_default_schema("student")

    values = initial_values_from_record(schema, {"admission_date": "2024-06-01T08:30:00Z"})
    assert values["admission_date"] == "2024-06-01"

    values = initial_values_from_record(schema, {"admission_date": datetime(2024, 6, 1, 23, 59)})
    assert values["admission_date"] == "2024-06-01"

    values = initial_values_from_record(schema, {"admission_date": date(2024, 6, 1)})
    assert values["admission_date"] == "2024-06-01"


def test_unparseable_date_left_alone():
    schema = build_default_schema("student")
    values = initial_values_from_record(schema, {"admission_date": "next monday"})
    assert values["admission_date"] == "next monday"


def test_non_mapping_dynamic_data_ignored():
    schema = build_default_schema("teacher")
    values = initial_values_from_record(schema, {"email": "t@school.edu", "dynamic_data": None})
    assert values == {"email": "t@school.edu"}
